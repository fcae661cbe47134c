from fileserve.fs.resolver import ResolvedPath
from fileserve.fs.listing import DirectoryListing
from fileserve.render.base import ListingRenderer, entry_href, escape
from fileserve.render.icons import FOLDER_ICON, PARENT_ICON, DEFAULT_FILE_ICON


class MinimalRenderer(ListingRenderer):
    """Bare `<ul>` index page."""

    def render(self, resolved:ResolvedPath, listing:DirectoryListing) -> str:
        title = '%s %s' % (self.text('index_of'), escape(resolved.path))
        parts = [
            "<html><head><meta charset='utf-8'><title>%s</title></head>" % title,
            '<body><h3>%s %s</h3><ul>' % (FOLDER_ICON, title),
        ]

        if not resolved.is_root:
            parts.append('<li>%s <a href="%s">..</a></li>' % (PARENT_ICON, entry_href(resolved.parent())))

        for entry in listing:
            icon = FOLDER_ICON if entry.is_dir else DEFAULT_FILE_ICON
            parts.append('<li>%s <a href="%s">%s</a></li>' % (
                icon,
                entry_href(resolved.child(entry.name)),
                escape(entry.name),
            ))

        parts.append('</ul></body></html>')
        return ''.join(parts)
