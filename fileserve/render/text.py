from fileserve.config import Language

STRINGS = {
    Language.ZH: {
        'html_lang': 'zh-CN',
        'server_title': '文件服务器',
        'current_path': '当前路径',
        'home': '首页',
        'parent_directory': '.. 返回上级目录',
        'type_directory': '目录',
        'type_file': '文件',
        'type_image': '图片',
        'empty_title': '此目录为空',
        'empty_detail': '没有找到任何文件或文件夹',
        'stats': '📊 统计信息: {dirs} 个文件夹, {files} 个文件 | 🚀 由 fileserve 强力驱动',
        'index_of': 'Index of',
        'not_found': '404 - 文件未找到',
        'dir_unreadable': '无法读取目录',
        'file_unopenable': '无法打开文件',
        'banner_started': '🚀 文件服务器已启动!',
        'banner_root': '📁 根目录: {root}',
        'banner_address': '🌐 地址: http://{host}:{port}',
        'banner_port': '🔌 端口: {port}',
        'banner_log': '📝 日志模式: {mode}',
        'banner_public': '🖥️ 允许局域网访问',
        'banner_local': '🖥️ 仅允许本机访问',
        'banner_help': '📖 使用 fileserve -h 或 --help 查看帮助',
        'no_port': '❌ 没有可用端口，程序退出。',
        'server_error': '❌ 服务器错误: {error}',
    },
    Language.EN: {
        'html_lang': 'en',
        'server_title': 'File Server',
        'current_path': 'Current path',
        'home': 'Home',
        'parent_directory': '.. Parent directory',
        'type_directory': 'Directory',
        'type_file': 'File',
        'type_image': 'Image',
        'empty_title': 'This directory is empty',
        'empty_detail': 'No files or folders found',
        'stats': '📊 Statistics: {dirs} folders, {files} files | 🚀 Powered by fileserve',
        'index_of': 'Index of',
        'not_found': '404 - File not found',
        'dir_unreadable': 'Unable to read directory',
        'file_unopenable': 'Unable to open file',
        'banner_started': '🚀 File Server has started!',
        'banner_root': '📁 Root directory: {root}',
        'banner_address': '🌐 Address: http://{host}:{port}',
        'banner_port': '🔌 Port: {port}',
        'banner_log': '📝 Log mode: {mode}',
        'banner_public': '🖥️ Allowing public access',
        'banner_local': '🖥️ Only allowing local access',
        'banner_help': '📖 Use fileserve -h or --help to view help',
        'no_port': '❌ No available port, exiting.',
        'server_error': '❌ Server error: {error}',
    },
}


def get_text(language:Language, key:str, **kw):
    text = STRINGS[language][key]
    if kw:
        return text.format(**kw)
    return text
