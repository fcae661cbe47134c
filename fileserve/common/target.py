import ipaddress


class ServerTarget:
	def __init__(self, ip:str, port:int, max_attempts:int = 1):
		try:
			self.ip = str(ipaddress.ip_address(ip))
		except ValueError:
			raise ValueError('Listen address must be an IP address, got "%s"' % ip) from None
		self.port = port
		self.max_attempts = max_attempts
		if max_attempts < 1:
			raise ValueError('max_attempts must be at least 1')

	@staticmethod
	def from_config(config):
		return ServerTarget(config.bind_ip, config.port, config.port_attempts)

	def get_ports(self):
		"""Candidate ports in probing order. Port 0 lets the OS pick and is tried once."""
		if self.port == 0:
			return [0]
		return [p for p in range(self.port, self.port + self.max_attempts) if p <= 65535]

	def __str__(self):
		return '%s:%s' % (self.ip, self.port)

	def __repr__(self):
		return 'ServerTarget(%r, %r, max_attempts=%r)' % (self.ip, self.port, self.max_attempts)
