import os
import urllib.parse


class ResolvedPath:
    """
    A request path mapped onto the served root.

    Attributes:
        raw (str): the request path as received (query stripped)
        relative (str): decoded, normalized, '/'-separated path below the root;
            the empty string is the root itself
        path (str): absolute filesystem path
        contained (bool): False when the path escapes the root and must not
            be touched
    """
    def __init__(self, raw:str, relative:str, path:str, contained:bool):
        self.raw = raw
        self.relative = relative
        self.path = path
        self.contained = contained

    @property
    def is_root(self):
        return self.relative == ''

    def parent(self):
        """Relative path with the last segment removed ('' at the first level)."""
        return self.relative.rpartition('/')[0]

    def child(self, name:str):
        if self.is_root:
            return name
        return self.relative + '/' + name

    def __repr__(self):
        return 'ResolvedPath(raw=%r, relative=%r, path=%r, contained=%r)' % (self.raw, self.relative, self.path, self.contained)


def split_target(target:str):
    """
    Returns the path of a request target without query string or fragment.
    Absolute-form targets ('http://host/a.txt') are reduced to their path.
    """
    if not target.startswith('/'):
        return urllib.parse.urlsplit(target).path or '/'
    # not urlsplit: an origin-form target starting with '//' would lose its first segment as a netloc
    return target.partition('#')[0].partition('?')[0]


def decode_path(raw:str):
    """
    Percent-decodes `raw` as UTF-8. Byte sequences that are not UTF-8 are
    decoded the way the filesystem decodes names, and when even that fails
    the raw string is used as is.
    """
    try:
        return urllib.parse.unquote(raw, encoding='utf-8', errors='strict')
    except UnicodeDecodeError:
        pass
    try:
        return os.fsdecode(urllib.parse.unquote_to_bytes(raw))
    except UnicodeDecodeError:
        return raw


def resolve(raw_path:str, root:str):
    """
    Decodes `raw_path`, joins it onto `root` and canonicalizes the result.
    Parent segments are collapsed lexically; anything that ends up outside
    `root` is marked as not contained.
    """
    root = os.path.abspath(root)
    relative = decode_path(raw_path).lstrip('/')
    path = os.path.normpath(os.path.join(root, relative))

    try:
        contained = os.path.commonpath([root, path]) == root
    except ValueError:
        # different drives on Windows, or a mix of absolute and relative
        contained = False

    if not contained:
        return ResolvedPath(raw_path, relative, path, False)

    rel = os.path.relpath(path, root)
    if rel == os.curdir:
        rel = ''
    return ResolvedPath(raw_path, rel.replace(os.sep, '/'), path, True)
