import json

import pytest
import requests

TOKEN_URL = 'https://accounts.spotify.com/api/token'
API_URL = 'https://api.spotify.com/v1'


def make_response(method: str, url: str, status: int, body) -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response.url = url
    response.request = requests.Request(method, url).prepare()
    response.headers['Content-Type'] = 'application/json'

    if body is None:
        response._content = b''
    elif isinstance(body, bytes):
        response._content = body
    else:
        response._content = json.dumps(body).encode('utf-8')

    return response


class FakeSpotify:
    """Routes (method, url) pairs to canned responses and records every call."""

    def __init__(self) -> None:
        self.routes = {}
        self.calls = []

    def add(self, method: str, url: str, status: int = 200, body = None, exc: Exception = None) -> None:
        self.routes[(method, url)] = (status, body, exc)

    def token(self, access_token: str = 'test-token', status: int = 200, body = None) -> None:
        if body is None and status == 200:
            body = {'access_token': access_token, 'token_type': 'Bearer', 'expires_in': 3600}

        self.add('POST', TOKEN_URL, status = status, body = body)

    def get(self, path: str, body = None, status: int = 200, exc: Exception = None) -> None:
        self.add('GET', f'{API_URL}/{path}', status = status, body = body, exc = exc)

    def urls(self, method: str = None):
        return [url for m, url, _ in self.calls if method is None or m == method]

    def request(self, method: str, url: str, **kwargs) -> requests.Response:
        method = method.upper()
        self.calls.append((method, url, kwargs))

        if (method, url) not in self.routes:
            raise AssertionError(f'unexpected request {method} {url}')

        status, body, exc = self.routes[(method, url)]
        if exc is not None:
            raise exc

        return make_response(method, url, status, body)


@pytest.fixture
def fake_spotify(monkeypatch):
    fake = FakeSpotify()

    def request(session, method, url, **kwargs):
        response = fake.request(method, url, **kwargs)
        for hook in session.hooks.get('response', []):
            hook(response)

        return response

    monkeypatch.setattr(requests.Session, 'request', request)

    return fake


@pytest.fixture(autouse = True)
def no_credentials_env(monkeypatch):
    monkeypatch.delenv('SPOTIFY_CLIENT_ID', raising = False)
    monkeypatch.delenv('SPOTIFY_CLIENT_SECRET', raising = False)


def track_payload(name: str = 'Song A', track_id: str = 't1', artists = ('Artist X',), album = None) -> dict:
    return {
        'name': name,
        'id': track_id,
        'preview_url': None,
        'duration_ms': 180000,
        'uri': f'spotify:track:{track_id}',
        'external_urls': {'spotify': f'https://open.spotify.com/track/{track_id}'},
        'album': album if album is not None else {
            'name': 'Al1',
            'id': 'al1',
            'release_date': '2020-01-01',
            'images': [
                {'height': 640, 'width': 640, 'url': 'https://i.scdn.co/image/big'},
                {'height': 64, 'width': 64, 'url': 'https://i.scdn.co/image/small'},
            ],
        },
        'artists': [{'name': a, 'id': a.lower().replace(' ', '')} for a in artists],
    }


def playlist_payload(playlist_id: str = 'abc123', tracks = ()) -> dict:
    return {
        'name': 'Road Trip',
        'id': playlist_id,
        'images': [{'height': None, 'width': None, 'url': 'https://mosaic.scdn.co/640/x'}],
        'external_urls': {'spotify': f'https://open.spotify.com/playlist/{playlist_id}'},
        'tracks': {'items': [{'added_at': '2021-01-01T00:00:00Z', 'track': t} for t in tracks], 'total': len(tracks)},
    }
