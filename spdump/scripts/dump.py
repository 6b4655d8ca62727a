from typing import Any, Dict, List, Optional
import argparse
import json
import logging
import sys

from spdump.config import DEFAULT_CONFIG_PATH, load_config
from spdump.errors import SpdumpError
from spdump.spotify_client import SpotifyClient, get_spotify_client
from spdump.translate import convert_album, convert_playlist, convert_search_result, convert_track

logger = logging.getLogger(__name__)

DEFAULT_PLAYLIST = '3rpdjX0UZGjjmk3A86FrU3'


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog = 'spdump', description = 'Dump Spotify playlists, tracks and albums as JSON.')

    target = parser.add_mutually_exclusive_group()
    target.add_argument('-p', '--playlist', help = f'Playlist URL or ID to dump (default: {DEFAULT_PLAYLIST}).')
    target.add_argument('-u', '--user', help = 'User whose playlist names to list.')
    target.add_argument('-t', '--track', help = 'Track URL or ID to dump.')
    target.add_argument('-a', '--album', help = 'Album URL or ID to dump.')
    target.add_argument('-s', '--search', help = 'Search query for tracks, albums and playlists.')

    parser.add_argument('-c', '--config', default = DEFAULT_CONFIG_PATH, help = f'Path to the TOML config (default: {DEFAULT_CONFIG_PATH}).')
    parser.add_argument('--market', default = 'US', help = 'Market for --search (default: US).')
    parser.add_argument('--indent', type = int, default = None, help = 'Pretty-print JSON with this indent.')
    parser.add_argument('-v', '--verbose', action = 'store_true', help = 'Log debug output to stderr.')

    return parser.parse_args(argv)


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level = logging.DEBUG if verbose else logging.WARNING,
        format = '%(asctime)s %(levelname)s %(name)s: %(message)s',
        stream = sys.stderr,
    )

    if not verbose:
        logging.getLogger('spotipy').setLevel(logging.ERROR)
        logging.getLogger('urllib3').setLevel(logging.ERROR)


def dump(args: argparse.Namespace, sp: SpotifyClient) -> str:
    """Run the requested lookup and return the text to print."""
    if args.user:
        return '\n'.join(playlist.name for playlist in sp.user_playlists(args.user))

    document: Dict[str, Any]
    if args.track:
        document = convert_track(sp.track(args.track)).to_dict()
    elif args.album:
        document = convert_album(sp.album(args.album)).to_dict()
    elif args.search:
        document = convert_search_result(sp.search(args.search, market = args.market)).to_dict()
    else:
        document = convert_playlist(sp.playlist(args.playlist or DEFAULT_PLAYLIST)).to_dict()

    return json.dumps(document, indent = args.indent)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(args.verbose)

    try:
        config = load_config(args.config)
        sp = get_spotify_client(config)
        output = dump(args, sp)
    except SpdumpError as exc:
        logger.debug('aborting', exc_info = True)
        print(f'spdump: error: {exc}', file = sys.stderr)
        return 1

    if output:
        print(output)

    return 0


if __name__ == '__main__':
    sys.exit(main())
