#!/usr/bin/env python3
"""
Local file server

Serves a directory tree over HTTP: directories are rendered as listings
(plain or styled), files are streamed with a content type guessed from
their extension.

Usage:
    fileserve [--root DIR] [--port PORT] [--log MODE] [--pretty] [--public] [--en]

Example:
    fileserve --root ./downloads --port 8080 --log both --pretty
"""

import asyncio
import logging
import sys

from fileserve import logger
from fileserve._version import __version__
from fileserve.config import ServerConfig, LogMode
from fileserve.accesslog import AccessLogger
from fileserve.common.target import ServerTarget
from fileserve.dispatcher import FileServerHandler
from fileserve.protocol.httpserver import HTTPServer
from fileserve.render import get_renderer
from fileserve.render.text import get_text
from fileserve.server import NoAvailablePortError


def build_server(config:ServerConfig):
    """Wires the shared pieces once and returns an unbound HTTPServer."""
    access_log = AccessLogger(config.log_mode, config.log_file)
    renderer = get_renderer(config)
    handler_factory = lambda: FileServerHandler(config, renderer, access_log)
    return HTTPServer(handler_factory, ServerTarget.from_config(config))


def print_banner(config:ServerConfig, port:int):
    def t(key, **kw):
        return get_text(config.language, key, **kw)

    print(t('banner_started'))
    print(t('banner_root', root=config.root))
    print(t('banner_address', host='127.0.0.1', port=port))
    print(t('banner_port', port=port))
    print(t('banner_log', mode=config.log_mode.value))
    print(t('banner_public') if config.public else t('banner_local'))
    print()
    print(t('banner_help'))
    print()


async def run_file_server(config:ServerConfig):
    server = build_server(config)
    try:
        port = await server.start()
    except NoAvailablePortError as e:
        logger.debug('%s (last error: %s)' % (e, e.innerexception))
        print(get_text(config.language, 'no_port'), file=sys.stderr)
        sys.exit(1)

    print_banner(config, port)
    try:
        await server.serve()
    finally:
        await server.terminate()


def main():
    import argparse

    parser = argparse.ArgumentParser(
        description='A local file server.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  %(prog)s                              # Serve the current directory on 127.0.0.1:8080
  %(prog)s -r /home/user/files          # Serve another directory
  %(prog)s -p 9000 --public             # Use port 9000 (or the next free one), bind to all interfaces
  %(prog)s --pretty --en                # Styled listing, English text
  %(prog)s --log both                   # Access log to console and access.log
        ''')
    parser.add_argument('-p', '--port', type=int, default=8080, help='Starting port number, the next free one is used if taken (default: 8080)')
    parser.add_argument('-r', '--root', help='Root directory (default: current directory)')
    parser.add_argument('--log', default='none', choices=[m.value for m in LogMode], help='Log mode (default: none)')
    parser.add_argument('--pretty', action='store_true', help='Styled directory listing')
    parser.add_argument('--public', action='store_true', help='Allow access from the local network (bind 0.0.0.0)')
    parser.add_argument('--en', action='store_true', help='Enable English output')
    parser.add_argument('-d', '--debug', action='store_true', help='Enable debug logging')
    parser.add_argument('-v', '--version', action='version', version='fileserve %s' % __version__)

    args = parser.parse_args()

    if args.debug:
        logger.setLevel(logging.DEBUG)

    try:
        config = ServerConfig.create(
            root = args.root,
            pretty = args.pretty,
            english = args.en,
            port = args.port,
            public = args.public,
            log_mode = LogMode.from_string(args.log),
        )
    except ValueError as e:
        print('Error: %s' % e, file=sys.stderr)
        sys.exit(1)

    try:
        asyncio.run(run_file_server(config))
    except KeyboardInterrupt:
        print()
    except Exception as e:
        print(get_text(config.language, 'server_error', error=e), file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
