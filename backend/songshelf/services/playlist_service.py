"""Playlist service"""
from songshelf.repositories import PlaylistRepository
from songshelf.services.collection_service import CollectionService


class PlaylistService(CollectionService):
    """Service for playlist operations"""

    repository_class = PlaylistRepository
    resource_name = "Playlist"
    required_fields = ('name',)
    updatable_fields = ('name', 'description', 'cover_image', 'song_ids')
    default_cover = "/default-playlist-cover.jpg"

    def add_song_to_playlist(self, playlist_id: str, song_id: str):
        return self.add_song(playlist_id, song_id)

    def remove_song_from_playlist(self, playlist_id: str, song_id: str):
        return self.remove_song(playlist_id, song_id)
