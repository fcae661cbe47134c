import os
import enum
from dataclasses import dataclass


class PresentationMode(enum.Enum):
	MINIMAL = 'minimal'
	STYLED = 'styled'

class LogMode(enum.Enum):
	NONE = 'none'
	CONSOLE = 'console'
	FILE = 'file'
	BOTH = 'both'

	@staticmethod
	def from_string(value:str):
		try:
			return LogMode(value.strip().lower())
		except ValueError:
			raise ValueError('Unknown log mode "%s" (expected one of: %s)' % (value, ', '.join(m.value for m in LogMode))) from None

	@property
	def to_console(self):
		return self in (LogMode.CONSOLE, LogMode.BOTH)

	@property
	def to_file(self):
		return self in (LogMode.FILE, LogMode.BOTH)

class Language(enum.Enum):
	ZH = 'zh'
	EN = 'en'


@dataclass(frozen=True)
class ServerConfig:
	"""Process-wide settings, built once at startup and shared read-only by every request."""
	root: str
	mode: PresentationMode = PresentationMode.MINIMAL
	language: Language = Language.ZH
	port: int = 8080
	public: bool = False
	log_mode: LogMode = LogMode.NONE
	log_file: str = 'access.log'
	port_attempts: int = 20

	@staticmethod
	def create(root:str = None, pretty:bool = False, english:bool = False, port:int = 8080, public:bool = False, log_mode = LogMode.NONE, log_file:str = 'access.log', port_attempts:int = 20):
		if root is None:
			root = os.getcwd()
		root = os.path.abspath(root)
		if not os.path.exists(root):
			raise ValueError('Root directory does not exist: %s' % root)
		if not os.path.isdir(root):
			raise ValueError('Root path is not a directory: %s' % root)

		if not isinstance(log_mode, LogMode):
			log_mode = LogMode.from_string(log_mode)

		if port < 0 or port > 65535:
			raise ValueError('Port must be between 0 and 65535, got %s' % port)
		if port_attempts < 1:
			raise ValueError('Port attempts must be at least 1, got %s' % port_attempts)

		return ServerConfig(
			root = root,
			mode = PresentationMode.STYLED if pretty else PresentationMode.MINIMAL,
			language = Language.EN if english else Language.ZH,
			port = port,
			public = public,
			log_mode = log_mode,
			log_file = log_file,
			port_attempts = port_attempts,
		)

	@property
	def bind_ip(self):
		return '0.0.0.0' if self.public else '127.0.0.1'
