import asyncio
import mimetypes

DEFAULT_CONTENT_TYPE = 'application/octet-stream'
CHUNK_SIZE = 64 * 1024


def guess_content_type(path:str):
    """
    Get the MIME type for a file from its extension.

    Args:
        path (str): Path to the file

    Returns:
        str: MIME type, application/octet-stream when unknown
    """
    mime_type, _ = mimetypes.guess_type(path, strict=False)
    return mime_type or DEFAULT_CONTENT_TYPE


class FileStream:
    """
    An open file exposed as an async iterator of byte chunks.

    Reads happen in a worker thread, one chunk at a time, so only one chunk
    is held in memory. The handle is closed when iteration finishes, when
    the context manager exits, or by an explicit close().
    """
    def __init__(self, path:str, fileobj, content_type:str, chunk_size:int = CHUNK_SIZE):
        self.path = path
        self.fileobj = fileobj
        self.content_type = content_type
        self.chunk_size = chunk_size

    @staticmethod
    async def open(path:str, chunk_size:int = CHUNK_SIZE):
        """Raises OSError if the file can not be opened."""
        fileobj = await asyncio.to_thread(open, path, 'rb')
        return FileStream(path, fileobj, guess_content_type(path), chunk_size)

    @property
    def closed(self):
        return self.fileobj.closed

    def close(self):
        self.fileobj.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.close()

    def __aiter__(self):
        return self.chunks()

    async def chunks(self):
        try:
            while True:
                chunk = await asyncio.to_thread(self.fileobj.read, self.chunk_size)
                if not chunk:
                    break
                yield chunk
        finally:
            self.close()
