"""
Language <-> file extension helpers.

Generated file paths are normalized so that every file carries an extension
that matches its declared language. ensure_file_extension is idempotent.
"""

from typing import Optional


LANGUAGE_EXTENSIONS = {
    'javascript': 'js',
    'typescript': 'ts',
    'python': 'py',
    'java': 'java',
    'cpp': 'cpp',
    'c': 'c',
    'html': 'html',
    'css': 'css',
    'json': 'json',
    'markdown': 'md',
    'mark': 'md',
    'yaml': 'yml',
    'shell': 'sh',
    'sql': 'sql',
    'go': 'go',
    'rust': 'rs',
    'php': 'php',
    'ruby': 'rb',
    'xml': 'xml',
    'vue': 'vue',
    'svelte': 'svelte',
    'jsx': 'jsx',
    'tsx': 'tsx',
}

EXTENSION_LANGUAGES = {
    'js': 'javascript',
    'jsx': 'javascript',
    'ts': 'typescript',
    'tsx': 'typescript',
    'py': 'python',
    'java': 'java',
    'cpp': 'cpp',
    'c': 'c',
    'html': 'html',
    'htm': 'html',
    'css': 'css',
    'json': 'json',
    'md': 'markdown',
    'yml': 'yaml',
    'yaml': 'yaml',
    'sh': 'shell',
    'sql': 'sql',
    'go': 'go',
    'rs': 'rust',
    'php': 'php',
    'rb': 'ruby',
    'xml': 'xml',
    'vue': 'vue',
    'svelte': 'svelte',
}

DEFAULT_EXTENSION = 'txt'
DEFAULT_LANGUAGE = 'plaintext'


def get_file_extension(language: str) -> str:
    """Map a language name to its file extension, 'txt' when unknown"""
    return LANGUAGE_EXTENSIONS.get(language.strip().lower(), DEFAULT_EXTENSION)


def has_file_extension(path: str) -> bool:
    """
    True when the last path segment contains a dot that is neither its
    first nor its last character ("app.js" yes, ".env" and "build." no).
    """
    file_name = path.split('/')[-1]
    last = len(file_name) - 1
    return any(ch == '.' and 0 < i < last for i, ch in enumerate(file_name))


def ensure_file_extension(path: str, language: Optional[str] = None) -> str:
    """
    Append the extension implied by language when path has none.

    Paths that already have an extension, and calls without a language,
    return path unchanged.
    """
    if has_file_extension(path):
        return path
    if language and language.strip():
        return f"{path}.{get_file_extension(language)}"
    return path


def detect_language_from_path(path: str) -> str:
    """Infer a language name from the path's extension, 'plaintext' when unknown"""
    file_name = path.split('/')[-1]
    if '.' not in file_name:
        return DEFAULT_LANGUAGE
    ext = file_name.rsplit('.', 1)[-1].lower()
    return EXTENSION_LANGUAGES.get(ext, DEFAULT_LANGUAGE)
