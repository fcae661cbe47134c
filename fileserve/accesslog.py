import asyncio
import datetime

from fileserve import logger
from fileserve.config import LogMode

TIME_FORMAT = '%Y-%m-%d %H:%M:%S'


class AccessLogger:
    """
    Writes one `[timestamp] METHOD path` line per request to stdout and/or
    an append-only log file, depending on the log mode.

    submit() never blocks and never raises: file writes run as background
    tasks serialized by a lock owned by this object, and write errors are
    dropped.
    """
    def __init__(self, mode:LogMode = LogMode.NONE, filename:str = 'access.log'):
        self.mode = mode
        self.filename = filename
        self._lock = asyncio.Lock()
        self._pending = set()

    @staticmethod
    def format_line(method:str, path:str, now:datetime.datetime = None):
        if now is None:
            now = datetime.datetime.now()
        return '[%s] %s %s\n' % (now.strftime(TIME_FORMAT), method, path)

    def submit(self, method:str, path:str):
        if self.mode is LogMode.NONE:
            return

        line = self.format_line(method, path)
        if self.mode.to_console:
            try:
                print(line, end='', flush=True)
            except (OSError, ValueError) as e:
                # closed or broken stdout
                logger.debug('Dropping access log line, console write failed: %s' % e)

        if self.mode.to_file:
            task = asyncio.create_task(self.append(line))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)

    def _write_line(self, line:str):
        with open(self.filename, 'a', encoding='utf-8') as f:
            f.write(line)

    async def append(self, line:str):
        async with self._lock:
            try:
                await asyncio.to_thread(self._write_line, line)
            except OSError as e:
                logger.debug('Dropping access log line, write to %s failed: %s' % (self.filename, e))

    async def drain(self):
        """Waits for every file write submitted so far."""
        while self._pending:
            await asyncio.gather(*list(self._pending))
