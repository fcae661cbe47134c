import asyncio
import datetime
import email.utils
from itertools import count

import h11

from fileserve import logger
from fileserve._version import __version__
from fileserve.common.connection import Connection
from fileserve.common.target import ServerTarget
from fileserve.server import ListenServer


class HTTPConnectionWrapper:
    def __init__(self, client_id, stream:Connection):
        # client_id only tags debug output, to tell simultaneous clients apart
        self.client_id = client_id
        self.stream = stream
        self.conn = h11.Connection(h11.SERVER)

    def debug(self, msg, *args):
        logger.debug('[%s] ' % self.client_id + msg, *args)

    async def send(self, event):
        # ConnectionClosed is never sent, so data is never None here.
        assert type(event) is not h11.ConnectionClosed
        data = self.conn.send(event)
        try:
            await self.stream.write(data)
        except BaseException:
            # The peer is gone (or we got cancelled mid-write); there is
            # nothing left to do with this connection.
            self.conn.send_failed()
            raise

    async def _read_from_peer(self):
        if self.conn.they_are_waiting_for_100_continue:
            self.debug('Sending 100 Continue')
            go_ahead = h11.InformationalResponse(
                status_code=100, headers=basic_headers()
            )
            await self.send(go_ahead)
        try:
            data = await self.stream.read_one()
        except (ConnectionError, OSError) as exc:
            self.debug('Error reading from peer: %r', exc)
            # They've stopped listening. Not much we can do about it here.
            data = b""
        self.conn.receive_data(data)

    async def next_event(self):
        while True:
            event = self.conn.next_event()
            if event is h11.NEED_DATA:
                await self._read_from_peer()
                continue
            return event

    async def shutdown_and_clean_up(self):
        try:
            await self.stream.close()
        except (ConnectionError, OSError) as exc:
            self.debug('Error closing connection: %r', exc)


SERVER_IDENT = " ".join(
    [f"fileserve/{__version__}", h11.PRODUCT_ID]
).encode("ascii")


def format_date_time(dt=None):
    """Generate a RFC 7231 / RFC 9110 IMF-fixdate string"""
    if dt is None:
        dt = datetime.datetime.now(datetime.timezone.utc)
    return email.utils.format_datetime(dt, usegmt=True)


def basic_headers():
    # HTTP requires these headers in all responses
    return [
        ("Date", format_date_time().encode("ascii")),
        ("Server", SERVER_IDENT),
    ]


class HTTPServerHandler:
    """
    Base class for request handlers. One instance is created per client
    connection; `handle_request` is awaited once per request on it and must
    send a complete response (Response, body Data, EndOfMessage).
    """
    def __init__(self):
        self._wrapper:HTTPConnectionWrapper = None
        self._method:bytes = None

    def basic_headers(self):
        return basic_headers()

    async def _process_request(self, wrapper:HTTPConnectionWrapper, request:h11.Request):
        self._wrapper = wrapper
        self._method = request.method
        await self.handle_request(request)

    async def handle_request(self, request:h11.Request):
        raise NotImplementedError()

    async def send_response(self, status_code, headers, body:bytes = b''):
        headers = self.basic_headers() + list(headers)
        headers.append(("Content-Length", str(len(body)).encode("ascii")))
        await self._wrapper.send(h11.Response(status_code=status_code, headers=headers))
        if body:
            await self.send_data(body)
        await self._wrapper.send(h11.EndOfMessage())

    async def send_data(self, data:bytes):
        # h11 rejects a body on HEAD responses; headers are all we send there
        if self._method == b'HEAD':
            return
        await self._wrapper.send(h11.Data(data=data))


class HTTPServer:
    def __init__(self, client_handler, target:ServerTarget):
        self.target = target
        self.client_handler = client_handler
        self.listener = ListenServer(target)

        self.clients = set()
        self.id_counter = count()
        self.__main_task = None

    @property
    def port(self):
        return self.listener.port

    async def __aenter__(self):
        await self.start()
        self.__main_task = asyncio.create_task(self.serve())
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.terminate()

    async def start(self):
        return await self.listener.bind()

    async def terminate(self):
        self.listener.close()
        tasks = list(self.clients)
        if self.__main_task is not None:
            tasks.append(self.__main_task)
            self.__main_task = None
        for task in tasks:
            task.cancel()
        if len(tasks) > 0:
            await asyncio.gather(*tasks, return_exceptions=True)
        self.clients = set()

    async def __handle_connection(self, connection:Connection):
        client_id = next(self.id_counter)
        wrapper = HTTPConnectionWrapper(client_id, connection)
        try:
            handler = self.client_handler()
            peer_ip, peer_port = connection.get_peer()
            wrapper.debug('New client connected from %s:%s', peer_ip, peer_port)
            while True:
                if wrapper.conn.states == {h11.CLIENT: h11.CLOSED, h11.SERVER: h11.CLOSED}:
                    break

                if wrapper.conn.states[h11.CLIENT] == h11.MUST_CLOSE:
                    break

                if wrapper.conn.states[h11.SERVER] in (h11.MUST_CLOSE, h11.CLOSED):
                    break

                if wrapper.conn.states == {h11.CLIENT: h11.DONE, h11.SERVER: h11.DONE}:
                    wrapper.conn.start_next_cycle()
                    continue

                event = await wrapper.next_event()
                if type(event) is h11.Request:
                    await handler._process_request(wrapper, event)
                    continue
                if type(event) is h11.ConnectionClosed:
                    break
                # request bodies are read and discarded
                if type(event) in (h11.Data, h11.EndOfMessage):
                    continue
                wrapper.debug('Unexpected event %r, closing connection', event)
                break

        except h11.ProtocolError as exc:
            wrapper.debug('HTTP protocol error: %r', exc)
        except (ConnectionError, OSError) as exc:
            wrapper.debug('Connection error: %r', exc)
        except Exception:
            logger.exception('Unhandled error while serving client %s' % client_id)
        finally:
            await wrapper.shutdown_and_clean_up()

    async def serve(self):
        async for connection in self.listener.serve():
            task = asyncio.create_task(self.__handle_connection(connection))
            self.clients.add(task)
            task.add_done_callback(self.clients.discard)
