"""
Generated Code Store - per-conversation storage for generated files

Files are keyed by (conversation_id, path). Writing a path that already
exists replaces its content and language in place (upsert), which is how a
regenerated file updates the editor instead of duplicating it.

Usage:
    store = GeneratedCodeStore()
    store.upsert(conversation_id, CodeFile("index.html", "<html>...", "html"))
    files = store.list_files(conversation_id)
"""

import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from vibecoding.core.exceptions import GeneratedFileNotFoundError
from vibecoding.core.logging_config import logger
from vibecoding.utils.stream_parser import CodeFile


@dataclass
class StoredFile:
    """A generated file plus bookkeeping"""
    conversation_id: str
    path: str
    content: str
    language: Optional[str]
    created_at: datetime
    updated_at: datetime

    def to_code_file(self) -> CodeFile:
        return CodeFile(path=self.path, content=self.content, language=self.language)


class GeneratedCodeStore:
    """
    In-memory generated-code storage.

    - Upsert semantics on (conversation_id, path)
    - Listing ordered by path
    - Thread-safe operations
    """

    def __init__(self):
        self._files: Dict[Tuple[str, str], StoredFile] = {}
        self._lock = threading.Lock()

    def upsert(self, conversation_id: str, file: CodeFile) -> StoredFile:
        """Insert a file or overwrite the existing one with the same path"""
        now = datetime.now(timezone.utc)
        key = (conversation_id, file.path)
        with self._lock:
            existing = self._files.get(key)
            if existing:
                existing.content = file.content
                existing.language = file.language
                existing.updated_at = now
                stored = existing
            else:
                stored = StoredFile(
                    conversation_id=conversation_id,
                    path=file.path,
                    content=file.content,
                    language=file.language,
                    created_at=now,
                    updated_at=now,
                )
                self._files[key] = stored
        logger.debug(f"[FileStore] {'Updated' if existing else 'Saved'} {file.path} for {conversation_id}")
        return stored

    def list_files(self, conversation_id: str) -> List[StoredFile]:
        with self._lock:
            files = [f for (cid, _), f in self._files.items() if cid == conversation_id]
        return sorted(files, key=lambda f: f.path)

    def get_code_files(self, conversation_id: str) -> List[CodeFile]:
        return [f.to_code_file() for f in self.list_files(conversation_id)]

    def get_file(self, conversation_id: str, path: str) -> Optional[StoredFile]:
        with self._lock:
            return self._files.get((conversation_id, path))

    def update_content(self, conversation_id: str, path: str, content: str) -> StoredFile:
        """Replace an existing file's content (editor save)"""
        with self._lock:
            stored = self._files.get((conversation_id, path))
            if stored is None:
                raise GeneratedFileNotFoundError(path, conversation_id)
            stored.content = content
            stored.updated_at = datetime.now(timezone.utc)
            return stored

    def delete_conversation(self, conversation_id: str) -> int:
        """Remove all files of a conversation, returns how many were removed"""
        with self._lock:
            keys = [key for key in self._files if key[0] == conversation_id]
            for key in keys:
                del self._files[key]
        return len(keys)


# Singleton instance
generated_code_store = GeneratedCodeStore()
