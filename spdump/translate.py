from typing import List, Optional, Sequence

from spdump.models import (
    Album,
    Artist,
    MusicAlbum,
    MusicArtist,
    MusicPlaylist,
    MusicSearchResult,
    MusicTrack,
    Playlist,
    SearchResult,
    Track,
)


def combine_artists(artists: Sequence[Artist]) -> str:
    return ', '.join(artist.name for artist in artists)


def convert_artist(artist: Artist) -> MusicArtist:
    return MusicArtist(name = artist.name, integration_id = artist.id)


def convert_track(track: Track) -> MusicTrack:
    return MusicTrack(
        name = track.name,
        preview_url = track.preview_url,
        album_name = track.album.name,
        album_art = list(track.album.images),
        album_release_date = track.album.release_date,
        integration_id = track.id,
        external_url = track.external_url,
        artists = combine_artists(track.artists),
    )


def _converted_tracks(tracks: Sequence[Track]) -> Optional[List[MusicTrack]]:
    if not tracks:
        return None

    return [convert_track(track) for track in tracks]


def convert_album(album: Album) -> MusicAlbum:
    # tracks nested in an album payload carry no album of their own
    tracks = [track.model_copy(update = {'album': album}) for track in album.tracks.items]

    return MusicAlbum(
        name = album.name,
        album_art = list(album.images),
        release_date = album.release_date,
        integration_id = album.id,
        artists = [convert_artist(artist) for artist in album.artists],
        tracks = _converted_tracks(tracks),
    )


def convert_playlist(playlist: Playlist) -> MusicPlaylist:
    return MusicPlaylist(
        name = playlist.name,
        playlist_art = list(playlist.images),
        integration_id = playlist.id,
        tracks = _converted_tracks([item.track for item in playlist.tracks.items]),
    )


def convert_search_result(result: SearchResult) -> MusicSearchResult:
    albums = [
        MusicAlbum(
            name = album.name,
            album_art = list(album.images),
            release_date = album.release_date,
            integration_id = album.id,
            artists = [convert_artist(artist) for artist in album.artists],
        )
        for album in result.albums.items
    ]

    playlists = [
        MusicPlaylist(name = playlist.name, playlist_art = list(playlist.images), integration_id = playlist.id)
        for playlist in result.playlists.items
    ]

    return MusicSearchResult(
        tracks = [convert_track(track) for track in result.tracks.items],
        albums = albums,
        playlists = playlists,
    )
