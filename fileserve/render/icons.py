
IMAGE_SUFFIXES = frozenset(['jpg', 'jpeg', 'png', 'gif', 'bmp', 'webp', 'svg'])

FOLDER_ICON = '📁'
PARENT_ICON = '⬆️'
IMAGE_ICON = '🖼️'
DEFAULT_FILE_ICON = '📄'

# checked in order, first family containing the suffix wins
FILE_ICON_FAMILIES = [
    ('text', ('txt', 'md'), '📄'),
    ('video', ('mp4', 'avi', 'mov', 'mkv'), '🎬'),
    ('audio', ('mp3', 'wav', 'flac'), '🎵'),
    ('pdf', ('pdf',), '📕'),
    ('archive', ('zip', 'rar', '7z'), '📦'),
    ('web', ('js', 'html', 'css'), '💻'),
    ('doc', ('doc', 'docx'), '📘'),
    ('spreadsheet', ('xls', 'xlsx'), '📗'),
    ('slides', ('ppt', 'pptx'), '📙'),
]


def file_suffix(name:str):
    """Lowercased text after the last dot, '' when the name has no dot."""
    head, sep, tail = name.rpartition('.')
    if not sep:
        return ''
    return tail.lower()


def is_image(name:str):
    return file_suffix(name) in IMAGE_SUFFIXES


def file_icon(name:str):
    suffix = file_suffix(name)
    for _, suffixes, icon in FILE_ICON_FAMILIES:
        if suffix in suffixes:
            return icon
    return DEFAULT_FILE_ICON
