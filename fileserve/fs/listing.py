import os
import asyncio
from typing import List

from fileserve.fs.classifier import EntryKind


class DirectoryEntry:
    def __init__(self, name:str, kind:EntryKind):
        self.name = name
        self.kind = kind

    @property
    def is_dir(self):
        return self.kind is EntryKind.DIRECTORY

    def sort_key(self):
        return (0 if self.is_dir else 1, self.name)

    def __eq__(self, other):
        if not isinstance(other, DirectoryEntry):
            return NotImplemented
        return self.name == other.name and self.kind is other.kind

    def __repr__(self):
        return 'DirectoryEntry(%r, %s)' % (self.name, self.kind.name)


class DirectoryListing:
    """One point-in-time snapshot of a directory: sorted entries plus counts."""
    def __init__(self, entries:List[DirectoryEntry]):
        self.entries = sorted(entries, key=DirectoryEntry.sort_key)
        self.dir_count = sum(1 for e in self.entries if e.is_dir)
        self.file_count = len(self.entries) - self.dir_count

    @property
    def is_empty(self):
        return self.dir_count == 0 and self.file_count == 0

    def __iter__(self):
        return iter(self.entries)

    def __len__(self):
        return len(self.entries)


def scan_directory(path:str):
    entries = []
    with os.scandir(path) as it:
        for item in it:
            try:
                is_dir = item.is_dir()
            except OSError:
                is_dir = False
            entries.append(DirectoryEntry(item.name, EntryKind.DIRECTORY if is_dir else EntryKind.FILE))
    return DirectoryListing(entries)


async def list_directory(path:str):
    """Enumerates `path` in a worker thread. OSError propagates to the caller."""
    return await asyncio.to_thread(scan_directory, path)
