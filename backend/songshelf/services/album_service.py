"""Album service"""
from songshelf.repositories import AlbumRepository
from songshelf.services.collection_service import CollectionService


class AlbumService(CollectionService):
    """Service for album operations; albums also carry an artist and release date"""

    repository_class = AlbumRepository
    resource_name = "Album"
    required_fields = ('name', 'artist')
    updatable_fields = ('name', 'artist', 'description', 'cover_image', 'release_date', 'song_ids')
    default_cover = "/default-album-cover.jpg"

    def add_song_to_album(self, album_id: str, song_id: str):
        return self.add_song(album_id, song_id)

    def remove_song_from_album(self, album_id: str, song_id: str):
        return self.remove_song(album_id, song_id)
