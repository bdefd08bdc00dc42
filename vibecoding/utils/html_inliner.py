"""
HTML Preview Builder
Turns a multi-file generated project into one self-contained HTML document

Flow:
1. find_html_file() picks the entry page (index.html > main.html > app.html > any .html)
2. inline_resources() swaps local <link rel=stylesheet> / <script src> tags
   for <style> / <script> blocks holding the matched file's content
3. References that do not resolve are left untouched (they 404 inside the sandbox)
"""

import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

from vibecoding.core.logging_config import logger
from vibecoding.utils.path_resolver import PathResolver, is_external_reference


PRIORITY_HTML_NAMES = ('index.html', 'main.html', 'app.html')
HTML_EXTENSIONS = ('html', 'htm')

LINK_TAG_PATTERN = re.compile(r'<link\b[^>]*>', re.IGNORECASE)
SCRIPT_TAG_PATTERN = re.compile(r'<script\b([^>]*)>\s*</script\s*>', re.IGNORECASE)
HREF_PATTERN = re.compile(r'(?<![\w-])href\s*=\s*["\']([^"\']+)["\']', re.IGNORECASE)
SRC_PATTERN = re.compile(r'(?<![\w-])src\s*=\s*["\']([^"\']+)["\']', re.IGNORECASE)
REL_PATTERN = re.compile(r'(?<![\w-])rel\s*=\s*["\']?([^"\'>]+)', re.IGNORECASE)


@dataclass
class PreviewDocument:
    """Result of assembling a project preview"""
    entry_path: str
    html: str
    inlined: List[str] = field(default_factory=list)
    unresolved: List[str] = field(default_factory=list)


def find_html_file(files: Sequence):
    """Entry HTML file for a project, or None"""
    for name in PRIORITY_HTML_NAMES:
        for file in files:
            normalized = file.path.lower()
            if normalized == name or normalized.endswith(f"/{name}") or normalized.endswith(f"\\{name}"):
                return file

    for file in files:
        file_name = file.path.lower().split('/')[-1]
        if '.' in file_name and file_name.rsplit('.', 1)[-1] in HTML_EXTENSIONS:
            return file
    return None


def _is_stylesheet_link(tag: str, href: str) -> bool:
    rel = REL_PATTERN.search(tag)
    if rel:
        return 'stylesheet' in rel.group(1).lower().split()
    return PathResolver.strip_query(href).lower().endswith('.css')


def inline_resources(html: str, files: Iterable, base_path: str,
                     document: Optional[PreviewDocument] = None) -> str:
    """
    Inline local CSS and JS referenced by html.

    Args:
        html: Document markup
        files: Virtual file set (objects with .path and .content)
        base_path: Path of the document, used for relative references
        document: Optional PreviewDocument collecting inlined/unresolved refs

    Returns:
        Markup with matched resources inlined
    """
    files = list(files)

    def replace_link(match: re.Match) -> str:
        tag = match.group(0)
        href = HREF_PATTERN.search(tag)
        if not href or not _is_stylesheet_link(tag, href.group(1)):
            return tag
        return _inline(tag, href.group(1), 'style')

    def replace_script(match: re.Match) -> str:
        tag = match.group(0)
        src = SRC_PATTERN.search(match.group(1))
        if not src:
            return tag
        return _inline(tag, src.group(1), 'script')

    def _inline(tag: str, reference: str, element: str) -> str:
        if is_external_reference(reference) or not PathResolver.strip_query(reference).strip():
            return tag
        resolved = PathResolver.resolve(reference, base_path)
        matched = PathResolver.find(resolved, files)
        if matched is None:
            logger.warning(f"[Preview] Unresolved reference: {reference} (resolved as {resolved})")
            if document is not None:
                document.unresolved.append(reference)
            return tag
        logger.debug(f"[Preview] Inlined {element}: {reference} -> {matched.path}")
        if document is not None:
            document.inlined.append(matched.path)
        return f"<{element}>{matched.content}</{element}>"

    processed = LINK_TAG_PATTERN.sub(replace_link, html)
    return SCRIPT_TAG_PATTERN.sub(replace_script, processed)


def build_preview(files: Sequence) -> Optional[PreviewDocument]:
    """Assemble the previewable document for a project, None without an HTML file"""
    entry = find_html_file(files)
    if entry is None:
        logger.info(f"[Preview] No HTML file among {len(files)} files")
        return None

    document = PreviewDocument(entry_path=entry.path, html="")
    document.html = inline_resources(entry.content, files, entry.path, document)
    return document
