import asyncio

from fileserve import logger
from fileserve.common.target import ServerTarget
from fileserve.common.connection import Connection


class NoAvailablePortError(Exception):
	def __init__(self, target:ServerTarget, innerexception = None):
		self.target = target
		self.innerexception = innerexception
		self.message = 'No available port on %s in range %s-%s' % (target.ip, target.port, target.port + target.max_attempts - 1)
		super().__init__(self.message)


class ListenServer:
	def __init__(self, target:ServerTarget):
		self.target = target
		self.connection_queue = asyncio.Queue()
		self.server = None
		self.port = None

	async def __handle_connection(self, reader, writer):
		connection = Connection(reader, writer)
		await self.connection_queue.put(connection)

	async def bind(self):
		"""
		Binds to the first free port starting at the target's preferred port.
		Busy ports are skipped with a warning; NoAvailablePortError is raised
		when the attempt budget runs out.
		"""
		if self.server is not None:
			return self.port

		last_error = None
		ports = self.target.get_ports()
		for i, port in enumerate(ports):
			try:
				self.server = await asyncio.start_server(self.__handle_connection, self.target.ip, port)
			except OSError as e:
				last_error = e
				if i + 1 < len(ports):
					logger.warning('Port %s is already in use, trying port %s' % (port, ports[i+1]))
				else:
					logger.warning('Port %s is already in use' % port)
				continue

			self.port = self.server.sockets[0].getsockname()[1]
			logger.debug('Listening on %s:%s' % (self.target.ip, self.port))
			return self.port

		raise NoAvailablePortError(self.target, last_error)

	async def serve(self):
		if self.server is None:
			await self.bind()
		try:
			while self.server.is_serving():
				connection = await self.connection_queue.get()
				yield connection
		finally:
			self.close()

	def close(self):
		if self.server is not None:
			self.server.close()
