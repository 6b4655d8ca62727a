import json

import pytest

from conftest import playlist_payload, track_payload
from spdump.scripts import dump

PLAYLIST_ID = '3lLCifNYnouhplcrQIC1iX'


@pytest.fixture
def config_path(tmp_path, monkeypatch):
    monkeypatch.setattr('spdump.config.load_dotenv', lambda *args, **kwargs: None)

    path = tmp_path / 'config.toml'
    path.write_text('[spotify]\nclient_id = "my-id"\nclient_secret = "my-secret"\n', encoding = 'utf-8')

    return str(path)


def test_dump_playlist_prints_json(fake_spotify, config_path, capsys):
    fake_spotify.token('abc')
    fake_spotify.get(f'playlists/{PLAYLIST_ID}', playlist_payload(PLAYLIST_ID, tracks = [track_payload(), track_payload(name = 'Song B')]))

    assert dump.main(['-c', config_path, '-p', PLAYLIST_ID]) == 0

    out = json.loads(capsys.readouterr().out)
    assert out['Name'] == 'Road Trip'
    assert out['IntegrationID'] == PLAYLIST_ID
    assert [t['Name'] for t in out['Tracks']] == ['Song A', 'Song B']
    assert out['Tracks'][0]['Artists'] == 'Artist X'


def test_default_playlist_is_used(fake_spotify, config_path, capsys):
    fake_spotify.token('abc')
    fake_spotify.get(f'playlists/{dump.DEFAULT_PLAYLIST}', playlist_payload(dump.DEFAULT_PLAYLIST))

    assert dump.main(['-c', config_path]) == 0

    out = json.loads(capsys.readouterr().out)
    assert out['IntegrationID'] == dump.DEFAULT_PLAYLIST
    assert 'Tracks' not in out


def test_user_prints_one_name_per_line(fake_spotify, config_path, capsys):
    first = dict(playlist_payload('p1'), name = 'Mornings')
    second = dict(playlist_payload('p2'), name = 'Evenings')
    fake_spotify.token('abc')
    fake_spotify.get('users/someone/playlists', {'items': [first, second]})

    assert dump.main(['-c', config_path, '-u', 'someone']) == 0

    assert capsys.readouterr().out == 'Mornings\nEvenings\n'


def test_track_with_indent(fake_spotify, config_path, capsys):
    track_id = '4uLU6hMCjMI75M1A2tKUQC'
    fake_spotify.token('abc')
    fake_spotify.get(f'tracks/{track_id}', track_payload(track_id = track_id))

    assert dump.main(['-c', config_path, '-t', track_id, '--indent', '2']) == 0

    text = capsys.readouterr().out
    assert text.startswith('{\n  "Name": "Song A"')
    assert json.loads(text)['Source'] == 'spotify'


def test_missing_config_exits_non_zero(tmp_path, fake_spotify, capsys, monkeypatch):
    monkeypatch.setattr('spdump.config.load_dotenv', lambda *args, **kwargs: None)

    assert dump.main(['-c', str(tmp_path / 'missing.toml')]) == 1

    captured = capsys.readouterr()
    assert captured.out == ''
    assert 'config file not found' in captured.err
    assert fake_spotify.calls == []


def test_auth_failure_exits_without_output(fake_spotify, config_path, capsys):
    fake_spotify.token(status = 400, body = {'error': 'invalid_client'})

    assert dump.main(['-c', config_path, '-p', PLAYLIST_ID]) == 1

    captured = capsys.readouterr()
    assert captured.out == ''
    assert 'spdump: error:' in captured.err
    assert fake_spotify.urls('GET') == []


def test_fetch_failure_exits_without_output(fake_spotify, config_path, capsys):
    fake_spotify.token('abc')
    fake_spotify.get(f'playlists/{PLAYLIST_ID}', {'error': {'status': 404, 'message': 'Not found'}}, status = 404)

    assert dump.main(['-c', config_path, '-p', PLAYLIST_ID]) == 1

    captured = capsys.readouterr()
    assert captured.out == ''
    assert PLAYLIST_ID in captured.err


def test_selectors_are_mutually_exclusive():
    with pytest.raises(SystemExit) as excinfo:
        dump.parse_args(['-p', 'x', '-u', 'y'])

    assert excinfo.value.code == 2


def test_logger_follows_module_name():
    assert dump.logger.name == 'spdump.scripts.dump'
