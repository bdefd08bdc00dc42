"""
Path resolution over a virtual file set.

Generated projects are not consistent about relative paths, so matching
degrades from exact to suffix matches instead of failing.
"""

import re
from typing import Iterable, List, Protocol


_SCHEME_PATTERN = re.compile(r'^[a-zA-Z][a-zA-Z0-9+.\-]*:')


class HasPath(Protocol):
    path: str


def is_external_reference(reference: str) -> bool:
    """URLs (http:, data:, mailto:...) and protocol-relative //host refs"""
    ref = reference.strip()
    return ref.startswith('//') or bool(_SCHEME_PATTERN.match(ref))


class PathResolver:
    """Resolve href/src references against generated file paths"""

    @staticmethod
    def strip_query(reference: str) -> str:
        """Reference without its ?query and #fragment"""
        return reference.split('?', 1)[0].split('#', 1)[0]

    @staticmethod
    def resolve(reference: str, base_path: str) -> str:
        """
        Normalize reference relative to the document at base_path.

        Examples:
            resolve("../styles/main.css", "src/pages/index.html") -> "src/styles/main.css"
            resolve("./app.js", "index.html") -> "app.js"
            resolve("/css/site.css", "src/index.html") -> "/css/site.css"
        """
        path = PathResolver.strip_query(reference)
        if path.startswith('./'):
            path = path[2:]

        # Root-relative references ignore the document's directory
        root_relative = path.startswith('/')
        if root_relative or '/' not in base_path:
            stack: List[str] = []
        else:
            base_dir = base_path[:base_path.rfind('/')]
            stack = [part for part in base_dir.split('/') if part]

        for segment in path.split('/'):
            if segment == '..':
                if stack:
                    stack.pop()
            elif segment not in ('.', ''):
                stack.append(segment)

        resolved = '/'.join(stack)
        if root_relative:
            return '/' + resolved
        return resolved or path

    @staticmethod
    def find(candidate: str, files: Iterable[HasPath]):
        """
        First file matching candidate, trying in order:
        1. exact path
        2. exact path ignoring a leading '/'
        3. path ending with '/<candidate>'
        """
        files = list(files)
        for file in files:
            if file.path == candidate:
                return file

        bare = candidate.lstrip('/')
        if not bare:
            return None
        for file in files:
            if file.path.lstrip('/') == bare:
                return file

        suffix = '/' + bare
        for file in files:
            if file.path.endswith(suffix):
                return file
        return None

    @classmethod
    def resolve_file(cls, reference: str, base_path: str, files: Iterable[HasPath]):
        """Resolve and match in one call; None for external, empty or unmatched references"""
        if is_external_reference(reference) or not cls.strip_query(reference).strip():
            return None
        return cls.find(cls.resolve(reference, base_path), files)
