"""Provider-shaped Spotify records and the generic output records.

Provider records are pydantic models mirroring the Web API JSON, built with
``from_json``. Scalars are strict: a value of the wrong JSON type is rejected
and surfaces as ``DecodeError``. A missing key or ``null`` gives the field's
zero value.

Output records are what spdump prints. ``to_dict`` produces the output schema.
"""
from typing import Any, Dict, List, Optional
from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, ValidationError, ValidationInfo, field_validator

from spdump.errors import DecodeError

SOURCE = 'spotify'


def _describe(exc: ValidationError) -> str:
    problems = []
    for error in exc.errors():
        loc = '.'.join(str(part) for part in error['loc'])
        problems.append(f'{loc}: {error["msg"]}' if loc else error['msg'])

    return '; '.join(problems)


class SpotifyModel(BaseModel):
    model_config = ConfigDict(frozen = True)

    @field_validator('*', mode = 'before')
    @classmethod
    def null_as_zero(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            return cls.model_fields[info.field_name].get_default(call_default_factory = True)

        return value

    @classmethod
    def from_json(cls, payload: Any):
        try:
            return cls.model_validate(payload)
        except ValidationError as exc:
            raise DecodeError(f'invalid {cls.__name__} payload: {_describe(exc)}') from exc


def _nulls_as_empty(items: Any) -> Any:
    if isinstance(items, list):
        return [{} if item is None else item for item in items]

    return items


def _without_nulls(items: Any) -> Any:
    if isinstance(items, list):
        return [item for item in items if item is not None]

    return items


class Image(SpotifyModel):
    height: StrictInt = 0
    width: StrictInt = 0
    url: StrictStr = ''

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()


class Artist(SpotifyModel):
    name: StrictStr = ''
    id: StrictStr = ''


class ExternalUrls(SpotifyModel):
    spotify: StrictStr = ''


class Album(SpotifyModel):
    name: StrictStr = ''
    images: List[Image] = Field(default_factory = list)
    uri: StrictStr = ''
    external_urls: ExternalUrls = Field(default_factory = ExternalUrls)
    id: StrictStr = ''
    release_date: StrictStr = ''
    artists: List[Artist] = Field(default_factory = list)
    tracks: 'AlbumTracks' = Field(default_factory = lambda: AlbumTracks())

    @property
    def external_url(self) -> str:
        return self.external_urls.spotify


class Track(SpotifyModel):
    name: StrictStr = ''
    preview_url: StrictStr = ''
    uri: StrictStr = ''
    id: StrictStr = ''
    duration_ms: StrictInt = 0
    external_urls: ExternalUrls = Field(default_factory = ExternalUrls)
    album: Album = Field(default_factory = Album)
    artists: List[Artist] = Field(default_factory = list)

    @property
    def external_url(self) -> str:
        return self.external_urls.spotify


class AlbumTracks(SpotifyModel):
    items: List[Track] = Field(default_factory = list)

    @field_validator('items', mode = 'before')
    @classmethod
    def fill_null_items(cls, items: Any) -> Any:
        return _nulls_as_empty(items)


Album.model_rebuild()
Track.model_rebuild()
AlbumTracks.model_rebuild()


class PlaylistItem(SpotifyModel):
    # a null track (removed or local) still occupies its slot
    track: Track = Field(default_factory = Track)


class PlaylistTracks(SpotifyModel):
    items: List[PlaylistItem] = Field(default_factory = list)

    @field_validator('items', mode = 'before')
    @classmethod
    def fill_null_items(cls, items: Any) -> Any:
        return _nulls_as_empty(items)


class Playlist(SpotifyModel):
    name: StrictStr = ''
    images: List[Image] = Field(default_factory = list)
    uri: StrictStr = ''
    external_urls: ExternalUrls = Field(default_factory = ExternalUrls)
    id: StrictStr = ''
    tracks: PlaylistTracks = Field(default_factory = PlaylistTracks)

    @property
    def external_url(self) -> str:
        return self.external_urls.spotify


class TrackPage(SpotifyModel):
    items: List[Track] = Field(default_factory = list)

    @field_validator('items', mode = 'before')
    @classmethod
    def drop_null_items(cls, items: Any) -> Any:
        return _without_nulls(items)


class AlbumPage(SpotifyModel):
    items: List[Album] = Field(default_factory = list)

    @field_validator('items', mode = 'before')
    @classmethod
    def drop_null_items(cls, items: Any) -> Any:
        return _without_nulls(items)


class PlaylistPage(SpotifyModel):
    items: List[Playlist] = Field(default_factory = list)

    @field_validator('items', mode = 'before')
    @classmethod
    def drop_null_items(cls, items: Any) -> Any:
        return _without_nulls(items)


class SearchResult(SpotifyModel):
    tracks: TrackPage = Field(default_factory = TrackPage)
    albums: AlbumPage = Field(default_factory = AlbumPage)
    playlists: PlaylistPage = Field(default_factory = PlaylistPage)


@dataclass(frozen = True)
class MusicArtist:
    name: str
    integration_id: str

    def to_dict(self) -> Dict[str, Any]:
        return {'Name': self.name, 'IntegrationID': self.integration_id}


@dataclass(frozen = True)
class MusicTrack:
    name: str
    preview_url: str
    album_name: str
    album_art: List[Image]
    album_release_date: str
    integration_id: str
    external_url: str
    artists: str = ''
    source: str = SOURCE

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            'Name': self.name,
            'PreviewURL': self.preview_url,
            'AlbumName': self.album_name,
            'AlbumArt': [image.to_dict() for image in self.album_art],
            'AlbumReleaseDate': self.album_release_date,
            'IntegrationID': self.integration_id,
            'Source': self.source,
            'ExternalURL': self.external_url,
        }

        if self.artists:
            out['Artists'] = self.artists

        return out


@dataclass(frozen = True)
class MusicAlbum:
    name: str
    album_art: List[Image]
    release_date: str
    integration_id: str
    artists: List[MusicArtist] = field(default_factory = list)
    tracks: Optional[List[MusicTrack]] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            'Name': self.name,
            'AlbumArt': [image.to_dict() for image in self.album_art],
            'ReleaseDate': self.release_date,
        }

        if self.artists:
            out['Artists'] = [artist.to_dict() for artist in self.artists]

        if self.tracks:
            out['Tracks'] = [track.to_dict() for track in self.tracks]

        out['IntegrationID'] = self.integration_id

        return out


@dataclass(frozen = True)
class MusicPlaylist:
    name: str
    playlist_art: List[Image]
    integration_id: str
    tracks: Optional[List[MusicTrack]] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            'Name': self.name,
            'PlaylistArt': [image.to_dict() for image in self.playlist_art],
        }

        if self.tracks:
            out['Tracks'] = [track.to_dict() for track in self.tracks]

        out['IntegrationID'] = self.integration_id

        return out


@dataclass(frozen = True)
class MusicSearchResult:
    tracks: List[MusicTrack] = field(default_factory = list)
    albums: List[MusicAlbum] = field(default_factory = list)
    playlists: List[MusicPlaylist] = field(default_factory = list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'Tracks': [track.to_dict() for track in self.tracks],
            'Albums': [album.to_dict() for album in self.albums],
            'Playlists': [playlist.to_dict() for playlist in self.playlists],
        }
