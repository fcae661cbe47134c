from fileserve.fs.resolver import ResolvedPath
from fileserve.fs.listing import DirectoryListing, DirectoryEntry
from fileserve.render.base import ListingRenderer, entry_href, escape
from fileserve.render.icons import FOLDER_ICON, PARENT_ICON, IMAGE_ICON, is_image, file_icon

STYLESHEET = '''
        * {
            margin: 0;
            padding: 0;
            box-sizing: border-box;
        }

        body {
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, 'Helvetica Neue', Arial, sans-serif;
            background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);
            min-height: 100vh;
            padding: 20px;
        }

        .container {
            max-width: 1200px;
            margin: 0 auto;
            background: rgba(255, 255, 255, 0.95);
            border-radius: 20px;
            box-shadow: 0 20px 40px rgba(0, 0, 0, 0.1);
            overflow: hidden;
        }

        .header {
            background: linear-gradient(135deg, #4facfe 0%, #00f2fe 100%);
            color: white;
            padding: 30px;
            text-align: center;
        }

        .header h1 {
            font-size: 2.5em;
            margin-bottom: 10px;
        }

        .header .path {
            font-size: 1.2em;
            opacity: 0.9;
            word-break: break-all;
        }

        .content {
            padding: 40px;
        }

        .breadcrumb {
            margin-bottom: 30px;
            padding: 15px 20px;
            background: #f8f9fa;
            border-radius: 10px;
            border: 1px solid #e9ecef;
        }

        .breadcrumb a {
            color: #007bff;
            text-decoration: none;
            font-weight: 500;
        }

        .breadcrumb a:hover {
            text-decoration: underline;
        }

        .breadcrumb .sep {
            color: #999;
        }

        .file-grid {
            display: grid;
            grid-template-columns: repeat(auto-fill, minmax(300px, 1fr));
            gap: 20px;
            margin-top: 20px;
        }

        .file-item {
            background: white;
            border: 1px solid #e9ecef;
            border-radius: 15px;
            padding: 20px;
            transition: all 0.3s ease;
            overflow: hidden;
            display: block;
            text-decoration: none;
            color: inherit;
        }

        .file-item:hover {
            transform: translateY(-5px);
            box-shadow: 0 15px 30px rgba(0, 0, 0, 0.1);
            border-color: #007bff;
        }

        .file-icon {
            font-size: 2.5em;
            margin-bottom: 10px;
            display: block;
        }

        .file-name {
            color: #333;
            font-weight: 500;
            font-size: 1.1em;
            display: block;
            word-break: break-all;
        }

        .file-item:hover .file-name {
            color: #007bff;
        }

        .file-type {
            color: #666;
            font-size: 0.9em;
            margin-top: 5px;
        }

        .folder {
            background: linear-gradient(135deg, #ffeaa7 0%, #fab1a0 100%);
        }

        .file {
            background: linear-gradient(135deg, #a8e6cf 0%, #88d8c0 100%);
        }

        .image-preview {
            width: 80px;
            height: 80px;
            object-fit: scale-down;
        }

        .empty-state {
            text-align: center;
            padding: 60px 20px;
            color: #666;
        }

        .empty-state .icon {
            font-size: 4em;
            margin-bottom: 20px;
            opacity: 0.5;
        }

        .footer {
            background: #f8f9fa;
            padding: 20px;
            text-align: center;
            color: #666;
            font-size: 0.9em;
            border-top: 1px solid #e9ecef;
        }

        @media (max-width: 768px) {
            .file-grid {
                grid-template-columns: 1fr;
                gap: 15px;
            }

            .header h1 {
                font-size: 2em;
            }

            .content {
                padding: 20px;
            }
        }
'''

# inline so it survives a broken image; the sibling span holds the glyph
IMAGE_ONERROR = "this.style.display='none'; this.nextElementSibling.style.display='block'"


class StyledRenderer(ListingRenderer):
    """Card grid with breadcrumbs, per-type icons and image thumbnails."""

    def extra_headers(self):
        return [('Access-Control-Allow-Origin', '*')]

    def display_path(self, resolved:ResolvedPath):
        if resolved.is_root:
            path = self.root
        else:
            path = self.root.rstrip('/\\') + '/' + resolved.relative
        return path.replace('\\', '/')

    def render_breadcrumbs(self, resolved:ResolvedPath):
        crumbs = ['🏠 <a href="/">%s</a>' % escape(self.text('home'))]
        if resolved.is_root:
            return crumbs[0]

        parts = resolved.relative.split('/')
        current = ''
        for i, part in enumerate(parts):
            current = current + '/' + part if current else part
            if i == len(parts) - 1:
                crumbs.append('%s %s' % (FOLDER_ICON, escape(part)))
            else:
                crumbs.append('%s <a href="%s">%s</a>' % (FOLDER_ICON, entry_href(current), escape(part)))
        return ' <span class="sep">/</span> '.join(crumbs)

    def render_parent(self, resolved:ResolvedPath):
        return '''
                <a href="%s" class="file-item folder">
                    <span class="file-icon">%s</span>
                    <div class="file-name">%s</div>
                    <div class="file-type">%s</div>
                </a>''' % (
            entry_href(resolved.parent()),
            PARENT_ICON,
            escape(self.text('parent_directory')),
            escape(self.text('type_directory')),
        )

    def render_entry(self, resolved:ResolvedPath, entry:DirectoryEntry):
        href = entry_href(resolved.child(entry.name))
        name = escape(entry.name)
        if entry.is_dir:
            icon_html = '<span class="file-icon">%s</span>' % FOLDER_ICON
            css_class, type_text = 'folder', self.text('type_directory')
        elif is_image(entry.name):
            icon_html = (
                '<img src="%s" class="image-preview" alt="%s" loading="lazy" onerror="%s">'
                '<span class="file-icon" style="display:none">%s</span>'
            ) % (href, name, IMAGE_ONERROR, IMAGE_ICON)
            css_class, type_text = 'file image-item', self.text('type_image')
        else:
            icon_html = '<span class="file-icon">%s</span>' % file_icon(entry.name)
            css_class, type_text = 'file', self.text('type_file')

        return '''
                <a href="%s" class="file-item %s">
                    %s
                    <div class="file-name">%s</div>
                    <div class="file-type">%s</div>
                </a>''' % (href, css_class, icon_html, name, escape(type_text))

    def render_empty(self):
        return '''
                <div class="empty-state">
                    <div class="icon">📭</div>
                    <h3>%s</h3>
                    <p>%s</p>
                </div>''' % (escape(self.text('empty_title')), escape(self.text('empty_detail')))

    def render(self, resolved:ResolvedPath, listing:DirectoryListing) -> str:
        current_path = '/' + resolved.relative
        items = []
        if not resolved.is_root:
            items.append(self.render_parent(resolved))
        for entry in listing:
            items.append(self.render_entry(resolved, entry))
        if listing.is_empty:
            items.append(self.render_empty())

        return '''<!DOCTYPE html>
<html lang="%(lang)s">
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>📁 %(title)s - %(current_path)s</title>
    <style>%(stylesheet)s    </style>
</head>
<body>
    <div class="container">
        <div class="header">
            <h1>📁 %(title)s</h1>
            <div class="path">%(current_label)s: %(display_path)s</div>
        </div>

        <div class="content">
            <div class="breadcrumb">
                %(breadcrumbs)s
            </div>

            <div class="file-grid">%(items)s
            </div>
        </div>

        <div class="footer">
            %(stats)s
        </div>
    </div>
</body>
</html>
''' % {
            'lang': self.text('html_lang'),
            'title': escape(self.text('server_title')),
            'current_path': escape(current_path),
            'stylesheet': STYLESHEET,
            'current_label': escape(self.text('current_path')),
            'display_path': escape(self.display_path(resolved)),
            'breadcrumbs': self.render_breadcrumbs(resolved),
            'items': ''.join(items),
            'stats': escape(self.text('stats', dirs=listing.dir_count, files=listing.file_count)),
        }
