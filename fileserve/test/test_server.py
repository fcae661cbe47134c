import os
import re
import sys
import socket
import asyncio

import pytest

from fileserve.config import ServerConfig, LogMode
from fileserve.accesslog import AccessLogger
from fileserve.common.target import ServerTarget
from fileserve.server import ListenServer, NoAvailablePortError
from fileserve import dispatcher
from fileserve.test.helpers import make_server, fetch

LOG_LINE = re.compile(r'^\[\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}\] GET /(a|b)\.txt$')
CARD_HREF = re.compile(r'<a href="([^"]*)" class="file-item')


@pytest.fixture
def tree(tmp_path):
    root = tmp_path / 'root'
    root.mkdir()
    (root / 'sub' / 'inner').mkdir(parents=True)
    (root / 'empty').mkdir()
    (root / 'Zdir').mkdir()
    (root / 'a.txt').write_bytes(b'alpha')
    (root / 'b.txt').write_bytes(b'bravo')
    (root / 'B.md').write_bytes(b'# B')
    (root / 'pic.png').write_bytes(b'\x89PNG\r\n\x1a\n')
    (root / 'data.unknownext').write_bytes(b'???')
    (root / 'sub' / 'inner' / 'deep.txt').write_bytes(b'deep')
    (tmp_path / 'secret.txt').write_bytes(b'top secret')
    return root


def serve(config, requests, access_log=None):
    """Starts a server for `config`, runs `requests(port)` against it, returns its result."""
    async def run():
        async with make_server(config, access_log) as server:
            return await requests(server.port)
    return asyncio.run(run())


def test_minimal_listing(tree):
    config = ServerConfig.create(str(tree))
    reply = serve(config, lambda port: fetch(port, '/'))
    assert reply.status == 200
    assert reply.headers['content-type'] == 'text/html; charset=utf-8'
    assert 'access-control-allow-origin' not in reply.headers
    hrefs = re.findall(r'<a href="([^"]*)">', reply.text)
    assert hrefs == ['/Zdir', '/empty', '/sub', '/B.md', '/a.txt', '/b.txt', '/data.unknownext', '/pic.png']


def test_styled_listing_sets_cors_header(tree):
    config = ServerConfig.create(str(tree), pretty=True, english=True)
    reply = serve(config, lambda port: fetch(port, '/'))
    assert reply.status == 200
    assert reply.headers['access-control-allow-origin'] == '*'
    assert '3 folders, 5 files' in reply.text


def test_missing_path_is_404(tree):
    config = ServerConfig.create(str(tree), english=True)
    reply = serve(config, lambda port: fetch(port, '/nothing/here.txt'))
    assert reply.status == 404
    assert reply.headers['content-type'] == 'text/plain; charset=utf-8'
    assert reply.text == '404 - File not found'


def test_file_content_types(tree):
    config = ServerConfig.create(str(tree))

    async def requests(port):
        return await asyncio.gather(
            fetch(port, '/pic.png'),
            fetch(port, '/data.unknownext'),
            fetch(port, '/a.txt'),
        )

    png, unknown, txt = serve(config, requests)
    assert (png.status, png.headers['content-type']) == (200, 'image/png')
    assert (unknown.status, unknown.headers['content-type']) == (200, 'application/octet-stream')
    assert txt.headers['content-type'] == 'text/plain'
    assert txt.body == b'alpha'


def test_round_trip_empty_and_large_files(tree):
    big = os.urandom(3 * 1024 * 1024 + 17)
    (tree / 'big.bin').write_bytes(big)
    (tree / 'zero.bin').write_bytes(b'')
    config = ServerConfig.create(str(tree))

    async def requests(port):
        return await fetch(port, '/zero.bin'), await fetch(port, '/big.bin')

    zero, large = serve(config, requests)
    assert zero.status == 200
    assert zero.body == b''
    assert large.status == 200
    assert large.body == big
    assert 'content-length' not in large.headers


def test_percent_encoded_names(tree):
    (tree / 'with space ä.txt').write_bytes(b'spaced')
    config = ServerConfig.create(str(tree))
    reply = serve(config, lambda port: fetch(port, '/with%20space%20%C3%A4.txt?download=1'))
    assert reply.status == 200
    assert reply.body == b'spaced'


def test_listing_is_idempotent(tree):
    config = ServerConfig.create(str(tree), pretty=True)

    async def requests(port):
        return await fetch(port, '/'), await fetch(port, '/')

    first, second = serve(config, requests)
    assert CARD_HREF.findall(first.text) == CARD_HREF.findall(second.text)


def test_empty_directory(tree):
    styled = ServerConfig.create(str(tree), pretty=True, english=True)
    reply = serve(styled, lambda port: fetch(port, '/empty'))
    assert reply.status == 200
    assert 'class="empty-state"' in reply.text
    assert '0 folders, 0 files' in reply.text

    minimal = ServerConfig.create(str(tree))
    reply = serve(minimal, lambda port: fetch(port, '/empty/'))
    assert reply.status == 200
    assert '<li>📄' not in reply.text
    assert '<li>📁' not in reply.text


def test_parent_link(tree):
    config = ServerConfig.create(str(tree), pretty=True)
    reply = serve(config, lambda port: fetch(port, '/sub/inner'))
    assert reply.status == 200
    assert CARD_HREF.findall(reply.text)[:2] == ['/sub', '/sub/inner/deep.txt']


@pytest.mark.parametrize('target', [
    '/../secret.txt',
    '/%2e%2e/secret.txt',
    '/%2E%2E%2Fsecret.txt',
    '/sub/../../secret.txt',
    '/sub/%2e%2e/%2e%2e/secret.txt',
    '/..',
])
def test_traversal_never_leaves_root(tree, target):
    config = ServerConfig.create(str(tree))
    reply = serve(config, lambda port: fetch(port, target))
    assert reply.status == 404
    assert b'top secret' not in reply.body


def test_dotdot_inside_root_is_served(tree):
    config = ServerConfig.create(str(tree))
    reply = serve(config, lambda port: fetch(port, '/sub/../a.txt'))
    assert reply.status == 200
    assert reply.body == b'alpha'


def test_all_methods_share_one_handler(tree):
    config = ServerConfig.create(str(tree))

    async def requests(port):
        return await fetch(port, '/a.txt', method='POST'), await fetch(port, '/a.txt', method='HEAD')

    post, head = serve(config, requests)
    assert post.status == 200
    assert post.body == b'alpha'
    assert head.status == 200
    assert head.headers['content-type'] == 'text/plain'
    assert head.body == b''


def test_unreadable_directory_is_500(tree, monkeypatch):
    async def broken(path):
        raise PermissionError(13, 'Permission denied', path)
    monkeypatch.setattr(dispatcher, 'list_directory', broken)

    config = ServerConfig.create(str(tree), english=True)
    reply = serve(config, lambda port: fetch(port, '/sub'))
    assert reply.status == 500
    assert reply.text == 'Unable to read directory'
    assert 'Permission' not in reply.text


def test_unopenable_file_is_500(tree, monkeypatch):
    async def broken(path, chunk_size=None):
        raise PermissionError(13, 'Permission denied', path)
    monkeypatch.setattr(dispatcher.FileStream, 'open', staticmethod(broken))

    config = ServerConfig.create(str(tree))
    reply = serve(config, lambda port: fetch(port, '/a.txt'))
    assert reply.status == 500
    assert reply.text == '无法打开文件'


def test_file_log_concurrent_requests(tree, tmp_path):
    log_file = tmp_path / 'access.log'
    config = ServerConfig.create(str(tree), log_mode=LogMode.FILE, log_file=str(log_file))
    access_log = AccessLogger(config.log_mode, config.log_file)

    async def requests(port):
        replies = await asyncio.gather(fetch(port, '/a.txt'), fetch(port, '/b.txt'))
        await access_log.drain()
        return replies

    replies = serve(config, requests, access_log)
    assert [r.status for r in replies] == [200, 200]
    lines = log_file.read_text(encoding='utf-8').splitlines()
    assert len(lines) == 2
    assert all(LOG_LINE.match(line) for line in lines)
    assert sorted(line.split(' ')[-1] for line in lines) == ['/a.txt', '/b.txt']


def test_log_records_raw_path_even_for_404(tree, tmp_path):
    log_file = tmp_path / 'access.log'
    config = ServerConfig.create(str(tree), log_mode='file', log_file=str(log_file))
    access_log = AccessLogger(config.log_mode, config.log_file)

    async def requests(port):
        reply = await fetch(port, '/no%20such?x=1')
        await access_log.drain()
        return reply

    assert serve(config, requests, access_log).status == 404
    assert log_file.read_text(encoding='utf-8').endswith('] GET /no%20such\n')


def test_busy_port_is_skipped():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as busy:
        busy.bind(('127.0.0.1', 0))
        busy.listen()
        port = busy.getsockname()[1]

        async def bind(attempts):
            listener = ListenServer(ServerTarget('127.0.0.1', port, max_attempts=attempts))
            try:
                return await listener.bind()
            finally:
                listener.close()

        with pytest.raises(NoAvailablePortError):
            asyncio.run(bind(1))

        if port < 65535:
            bound = asyncio.run(bind(10))
            assert port < bound <= port + 9


@pytest.mark.skipif(sys.platform != 'linux', reason='needs a filesystem that stores raw name bytes')
@pytest.mark.parametrize('pretty', [False, True])
def test_name_that_is_not_utf8_is_listed_and_served(tree, pretty):
    with open(os.path.join(os.fsencode(str(tree)), b'caf\xe9.txt'), 'wb') as f:
        f.write(b'latin-1 name')
    config = ServerConfig.create(str(tree), pretty=pretty)

    async def requests(port):
        return await fetch(port, '/'), await fetch(port, '/caf%E9.txt')

    listing, download = serve(config, requests)
    assert listing.status == 200
    assert 'href="/caf%E9.txt"' in listing.text
    assert download.status == 200
    assert download.body == b'latin-1 name'


def test_absolute_form_target(tree):
    config = ServerConfig.create(str(tree))

    async def requests(port):
        return await fetch(port, 'http://localhost/a.txt'), await fetch(port, 'http://localhost')

    file_reply, root_reply = serve(config, requests)
    assert file_reply.status == 200
    assert file_reply.body == b'alpha'
    assert root_reply.status == 200
    assert '<a href="/a.txt">' in root_reply.text


def test_connection_passes_bytes_through():
    async def run():
        listener = ListenServer(ServerTarget('127.0.0.1', 0))
        port = await listener.bind()
        connections = listener.serve()
        reader, writer = await asyncio.open_connection('127.0.0.1', port)
        try:
            connection = await connections.__anext__()
            writer.write(b'ping')
            await writer.drain()
            received = await connection.read_one()
            await connection.write(b'pong')
            answered = await reader.readexactly(4)
            peer = connection.get_peer()
            await connection.close()
            return received, answered, peer, await connection.read_one()
        finally:
            writer.close()
            await connections.aclose()

    received, answered, peer, after_close = asyncio.run(run())
    assert received == b'ping'
    assert answered == b'pong'
    assert peer[0] == '127.0.0.1'
    assert after_close == b''
