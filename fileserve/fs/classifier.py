import os
import enum
import stat


class EntryKind(enum.Enum):
    DIRECTORY = 'directory'
    FILE = 'file'
    MISSING = 'missing'


def classify(path:str):
    # stat follows symlinks, so a dangling link is MISSING
    try:
        st = os.stat(path)
    except (OSError, ValueError):
        return EntryKind.MISSING
    if stat.S_ISDIR(st.st_mode):
        return EntryKind.DIRECTORY
    if stat.S_ISREG(st.st_mode):
        return EntryKind.FILE
    return EntryKind.MISSING
