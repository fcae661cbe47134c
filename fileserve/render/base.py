import os
import html
import urllib.parse
from typing import List, Tuple

from fileserve.config import Language
from fileserve.fs.resolver import ResolvedPath
from fileserve.fs.listing import DirectoryListing
from fileserve.render.text import get_text


def entry_href(relative:str):
    """Absolute URL path for a root-relative path, percent-encoded and ready for an attribute."""
    # percent-encodes the name's filesystem bytes, which need not be UTF-8
    return html.escape('/' + urllib.parse.quote(os.fsencode(relative), safe='/'), quote=True)


def escape(text:str):
    """HTML-escapes `text`; bytes that are not valid UTF-8 show up as U+FFFD."""
    return html.escape(os.fsencode(text).decode('utf-8', 'replace'), quote=True)


class ListingRenderer:
    """
    Turns a directory listing into an HTML document.

    Subclasses implement `render`. One renderer instance is chosen at
    startup and shared by every request, so implementations must not keep
    per-request state.
    """
    content_type = 'text/html; charset=utf-8'

    def __init__(self, root:str, language:Language = Language.ZH):
        self.root = root
        self.language = language

    def text(self, key:str, **kw):
        return get_text(self.language, key, **kw)

    def extra_headers(self) -> List[Tuple[str, str]]:
        return []

    def render(self, resolved:ResolvedPath, listing:DirectoryListing) -> str:
        raise NotImplementedError()
