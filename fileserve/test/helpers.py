import asyncio

import h11

from fileserve.config import ServerConfig
from fileserve.accesslog import AccessLogger
from fileserve.common.target import ServerTarget
from fileserve.dispatcher import FileServerHandler
from fileserve.protocol.httpserver import HTTPServer
from fileserve.render import get_renderer


def make_server(config:ServerConfig, access_log:AccessLogger = None):
    if access_log is None:
        access_log = AccessLogger(config.log_mode, config.log_file)
    renderer = get_renderer(config)
    return HTTPServer(
        lambda: FileServerHandler(config, renderer, access_log),
        ServerTarget('127.0.0.1', 0),
    )


class Reply:
    def __init__(self, status, headers, body):
        self.status = status
        self.headers = headers
        self.body = body

    @property
    def text(self):
        return self.body.decode('utf-8')


async def fetch(port:int, target:str, method:str = 'GET'):
    reader, writer = await asyncio.open_connection('127.0.0.1', port)
    conn = h11.Connection(h11.CLIENT)
    try:
        request = h11.Request(method=method, target=target, headers=[('Host', 'localhost'), ('Connection', 'close')])
        writer.write(conn.send(request))
        writer.write(conn.send(h11.EndOfMessage()))
        await writer.drain()

        status = None
        headers = {}
        body = bytearray()
        while True:
            event = conn.next_event()
            if event is h11.NEED_DATA:
                conn.receive_data(await reader.read(65536))
                continue
            if type(event) is h11.Response:
                status = event.status_code
                headers = {k.decode('ascii').lower(): v.decode('ascii') for k, v in event.headers}
            elif type(event) is h11.Data:
                body += event.data
            elif type(event) in (h11.EndOfMessage, h11.ConnectionClosed):
                break
        return Reply(status, headers, bytes(body))
    finally:
        writer.close()
