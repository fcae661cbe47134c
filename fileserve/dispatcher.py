import h11

from fileserve import logger
from fileserve.config import ServerConfig
from fileserve.accesslog import AccessLogger
from fileserve.fs.resolver import resolve, split_target
from fileserve.fs.classifier import EntryKind, classify
from fileserve.fs.listing import list_directory
from fileserve.fs.streamer import FileStream
from fileserve.render import ListingRenderer
from fileserve.render.text import get_text
from fileserve.protocol.httpserver import HTTPServerHandler

TEXT_PLAIN = b'text/plain; charset=utf-8'


class FileServerHandler(HTTPServerHandler):
    """
    Serves the configured root directory.

    Every method is handled the same way: the request path is resolved
    against the root, logged, classified and answered with a directory
    listing (200), the file contents (200), 404 when nothing is there,
    or 500 when the entry exists but can not be read.
    """

    def __init__(self, config:ServerConfig, renderer:ListingRenderer, access_log:AccessLogger):
        super().__init__()
        self.config = config
        self.renderer = renderer
        self.access_log = access_log

    def text(self, key:str):
        return get_text(self.config.language, key)

    async def handle_request(self, request:h11.Request):
        method = request.method.decode('ascii', errors='replace')
        raw_path = split_target(request.target.decode('utf-8', errors='replace'))
        resolved = resolve(raw_path, self.config.root)

        self.access_log.submit(method, raw_path)

        if not resolved.contained:
            logger.warning('Rejected path outside of root: %r' % raw_path)
            return await self._serve_error(404, self.text('not_found'))

        kind = classify(resolved.path)
        if kind is EntryKind.DIRECTORY:
            return await self._serve_directory(resolved)
        if kind is EntryKind.FILE:
            return await self._serve_file(resolved)
        return await self._serve_error(404, self.text('not_found'))

    async def _serve_directory(self, resolved):
        try:
            listing = await list_directory(resolved.path)
        except OSError as e:
            logger.debug('Failed to list %s: %s' % (resolved.path, e))
            return await self._serve_error(500, self.text('dir_unreadable'))

        body = self.renderer.render(resolved, listing).encode('utf-8')
        headers = [('Content-Type', self.renderer.content_type.encode('ascii'))]
        headers.extend(self.renderer.extra_headers())
        await self.send_response(200, headers, body)

    async def _serve_file(self, resolved):
        try:
            stream = await FileStream.open(resolved.path)
        except OSError as e:
            logger.debug('Failed to open %s: %s' % (resolved.path, e))
            return await self._serve_error(500, self.text('file_unopenable'))

        async with stream:
            # no Content-Length: h11 picks chunked (HTTP/1.1) or close-delimited framing
            headers = self.basic_headers()
            headers.append(('Content-Type', stream.content_type.encode('ascii')))
            await self._wrapper.send(h11.Response(status_code=200, headers=headers))
            if self._method != b'HEAD':
                async for chunk in stream:
                    await self.send_data(chunk)
            await self._wrapper.send(h11.EndOfMessage())

    async def _serve_error(self, status_code, message):
        await self.send_response(status_code, [('Content-Type', TEXT_PLAIN)], message.encode('utf-8'))
