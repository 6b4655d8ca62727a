from typing import Any, Callable, Dict, List, Optional
from dataclasses import dataclass, field
import logging
import time

import requests
import spotipy
from spotipy.exceptions import SpotifyException
from spotipy.oauth2 import SpotifyClientCredentials, SpotifyOauthError

from spdump.config import Config
from spdump.errors import AuthError, DecodeError, FetchError
from spdump.models import Album, Playlist, PlaylistPage, SearchResult, Track

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 15

# Spotify tokens last an hour; refresh a little before that.
TOKEN_MAX_AGE = 55 * 60

SEARCH_TYPES = 'track,album,playlist'
SEARCH_LIMIT = 50


def extract_id(inp: str, kind: str = 'playlist') -> str:
    """Return the bare id from an id, a ``spotify:<kind>:<id>`` URI or an open.spotify.com URL."""
    s = inp.strip()

    if f'open.spotify.com/{kind}/' in s:
        s = s.split(f'open.spotify.com/{kind}/')[1]
        s = s.split('?')[0].split('/')[0]
    elif s.startswith(f'spotify:{kind}:'):
        s = s[len(f'spotify:{kind}:'):]

    return s


@dataclass(frozen = True)
class Session:
    access_token: str
    acquired_at: float = field(default_factory = time.time)

    def age(self, now: Optional[float] = None) -> float:
        return (time.time() if now is None else now) - self.acquired_at

    def is_stale(self, max_age: float, now: Optional[float] = None) -> bool:
        return self.age(now) >= max_age


class SpotifyAuthenticator:
    """Exchanges a client id/secret for a bearer token (client-credentials grant)."""

    def __init__(self, client_id: str, client_secret: str, timeout: float = REQUEST_TIMEOUT) -> None:
        self.client_id = client_id
        self.client_secret = client_secret
        self.timeout = timeout

    def acquire_token(self) -> Session:
        manager = SpotifyClientCredentials(
            client_id = self.client_id,
            client_secret = self.client_secret,
            requests_timeout = self.timeout,
        )

        try:
            # only access_token is required; get_access_token also reads expires_in
            token_info = manager._request_access_token()
        except SpotifyOauthError as exc:
            logger.error('Error hitting spotify to refresh token: %s', exc)
            raise AuthError(f'spotify token error: {exc}') from exc
        except ValueError as exc:
            logger.error('Problems getting spotify access token from JSON: %s', exc)
            raise AuthError('malformed token response') from exc
        except requests.RequestException as exc:
            logger.error('Error hitting spotify to refresh token: %s', exc)
            raise AuthError(f'spotify token error: {exc}') from exc

        token = token_info.get('access_token') if isinstance(token_info, dict) else None
        if not isinstance(token, str) or not token:
            logger.error('Problems getting spotify access token from JSON')
            raise AuthError('malformed token response')

        return Session(access_token = token)


class SpotifyClient:
    """Fetches tracks, albums and playlists by id with a bearer token.

    When an authenticator is given, a session older than ``max_token_age`` is
    replaced before the next request. Only the first page of any nested
    collection is returned.
    """

    def __init__(self, session: Session, authenticator: Optional[SpotifyAuthenticator] = None,
                 timeout: float = REQUEST_TIMEOUT, max_token_age: float = TOKEN_MAX_AGE) -> None:
        self.session = session
        self.authenticator = authenticator
        self.timeout = timeout
        self.max_token_age = max_token_age

        self._http = requests.Session()
        self._http.hooks['response'].append(self._record_status)
        self._last_status: Optional[int] = None

        self._sp = self._build(session)

    def _record_status(self, response: requests.Response, *args: Any, **kwargs: Any) -> None:
        self._last_status = response.status_code

    def _build(self, session: Session) -> spotipy.Spotify:
        # a caller-supplied session gets no retrying adapter from spotipy
        return spotipy.Spotify(auth = session.access_token, requests_session = self._http, requests_timeout = self.timeout)

    def _api(self) -> spotipy.Spotify:
        if self.authenticator is not None and self.session.is_stale(self.max_token_age):
            logger.info('Spotify token is %d seconds old, requesting a new one', self.session.age())
            self.session = self.authenticator.acquire_token()
            self._sp = self._build(self.session)

        return self._sp

    def _get(self, resource: str, identifier: str, call: Callable[[spotipy.Spotify], Any]) -> Dict[str, Any]:
        sp = self._api()

        logger.debug('Fetching %s %s', resource, identifier)

        self._last_status = None

        try:
            payload = call(sp)
        except SpotifyException as exc:
            logger.error('Error making call to spotify: %s', exc)
            raise FetchError(resource, identifier, f'HTTP {exc.http_status}') from exc
        except requests.RequestException as exc:
            logger.error('Error making call to spotify error: %s', exc)
            raise FetchError(resource, identifier, str(exc)) from exc

        if self._last_status is not None and self._last_status != 200:
            logger.error('Unexpected HTTP %s from spotify for %s %s', self._last_status, resource, identifier)
            raise FetchError(resource, identifier, f'HTTP {self._last_status}')

        if not isinstance(payload, dict):
            logger.error('Invalid JSON response from Spotify for %s %s', resource, identifier)
            raise DecodeError(f'invalid JSON response from spotify for {resource} {identifier}')

        return payload

    def track(self, track_id: str) -> Track:
        tid = extract_id(track_id, 'track')
        return Track.from_json(self._get('track', tid, lambda sp: sp.track(tid)))

    def album(self, album_id: str) -> Album:
        aid = extract_id(album_id, 'album')
        return Album.from_json(self._get('album', aid, lambda sp: sp.album(aid)))

    def playlist(self, playlist_id: str) -> Playlist:
        pid = extract_id(playlist_id, 'playlist')
        return Playlist.from_json(self._get('playlist', pid, lambda sp: sp.playlist(pid)))

    def user_playlists(self, user_id: str) -> List[Playlist]:
        uid = extract_id(user_id, 'user')
        payload = self._get('user playlists', uid, lambda sp: sp.user_playlists(uid, limit = SEARCH_LIMIT))
        return PlaylistPage.from_json(payload).items

    def search(self, query: str, market: str = 'US', limit: int = SEARCH_LIMIT) -> SearchResult:
        if limit <= 0 or limit > SEARCH_LIMIT:
            raise ValueError(f'limit must be between 1 and {SEARCH_LIMIT}')

        payload = self._get('search', query, lambda sp: sp.search(q = query, limit = limit, type = SEARCH_TYPES, market = market or 'US'))
        return SearchResult.from_json(payload)


def get_spotify_client(config: Config, timeout: float = REQUEST_TIMEOUT) -> SpotifyClient:
    """Authenticate with the configured credentials and return a ready client.

    Raises ``AuthError`` before any resource is requested if no token is issued.
    """
    authenticator = SpotifyAuthenticator(config.client_id, config.client_secret, timeout = timeout)
    session = authenticator.acquire_token()

    return SpotifyClient(session, authenticator = authenticator, timeout = timeout)
