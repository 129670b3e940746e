"""Main FastAPI application"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from pathlib import Path
import logging

from songshelf.config import settings
from songshelf.database import init_db
from songshelf.errors import register_error_handlers
from songshelf.api import auth, songs, playlists, albums, users, media

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan events for startup and shutdown"""
    # Startup
    logger.info("Starting Songshelf API...")

    init_db()
    logger.info("Database initialized")

    for directory in (settings.audio_dir, settings.covers_dir):
        Path(directory).mkdir(parents=True, exist_ok=True)
    logger.info(f"Upload directory ready at {settings.upload_dir}")

    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Shutting down...")


# Create FastAPI app
app = FastAPI(
    title="Songshelf API",
    description="API for a personal audio library",
    version="0.1.0",
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Register routers
app.include_router(auth.router)
app.include_router(songs.router)
app.include_router(playlists.router)
app.include_router(albums.router)
app.include_router(users.router)
app.include_router(media.router)


@app.get("/")
def root():
    """Root endpoint"""
    return {
        "message": "Songshelf API",
        "version": "0.1.0",
        "docs": "/docs"
    }


@app.get("/health")
@app.get("/api/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy"}


def run():
    """Console entry point: serve the API with uvicorn"""
    import uvicorn
    uvicorn.run(
        "songshelf.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=not settings.is_production
    )


if __name__ == "__main__":
    run()
