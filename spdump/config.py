from typing import Any, Dict, Optional
from dataclasses import dataclass
import logging
import os
import tomllib

from dotenv import find_dotenv, load_dotenv

from spdump.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = 'config.toml'

ENV_OVERRIDES = {
    'client_id': 'SPOTIFY_CLIENT_ID',
    'client_secret': 'SPOTIFY_CLIENT_SECRET',
}


@dataclass(frozen = True)
class Config:
    client_id: str
    client_secret: str

    def __repr__(self) -> str:
        return f'Config(client_id={self.client_id!r}, client_secret=***)'


def _read_toml(path: str) -> Dict[str, Any]:
    try:
        with open(path, 'rb') as f:
            return tomllib.load(f)
    except FileNotFoundError as exc:
        raise ConfigError(f'config file not found: {path}') from exc
    except OSError as exc:
        raise ConfigError(f'unable to read config file {path}: {exc}') from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f'invalid TOML in {path}: {exc}') from exc


def _credential(section: Dict[str, Any], key: str, path: str) -> str:
    value = os.getenv(ENV_OVERRIDES[key]) or section.get(key)

    if value is None or value == '':
        raise ConfigError(f'spotify.{key} is missing from {path}')

    if not isinstance(value, str):
        raise ConfigError(f'spotify.{key} in {path} must be a string, got {type(value).__name__}')

    return value


def load_config(path: Optional[str] = None, use_dotenv: bool = True) -> Config:
    """Load Spotify credentials from a TOML file.

    The file must contain a ``[spotify]`` table with ``client_id`` and
    ``client_secret``. ``SPOTIFY_CLIENT_ID`` / ``SPOTIFY_CLIENT_SECRET`` from the
    environment (or a ``.env`` file) take precedence over the file values.
    """
    path = path or DEFAULT_CONFIG_PATH

    if use_dotenv:
        load_dotenv(find_dotenv(usecwd = True))

    data = _read_toml(path)

    section = data.get('spotify', {})
    if not isinstance(section, dict):
        raise ConfigError(f'spotify in {path} must be a table')

    config = Config(
        client_id = _credential(section, 'client_id', path),
        client_secret = _credential(section, 'client_secret', path),
    )

    logger.debug('clientID: %s', config.client_id)

    return config
