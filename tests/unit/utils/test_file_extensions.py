"""
Unit Tests for file extension helpers
"""
import pytest
from vibecoding.utils.file_extensions import (
    get_file_extension,
    has_file_extension,
    ensure_file_extension,
    detect_language_from_path,
)


class TestGetFileExtension:
    """Test language -> extension mapping"""

    @pytest.mark.parametrize("language,expected", [
        ("javascript", "js"),
        ("typescript", "ts"),
        ("python", "py"),
        ("markdown", "md"),
        ("mark", "md"),
        ("yaml", "yml"),
        ("shell", "sh"),
        ("rust", "rs"),
    ])
    def test_known_languages(self, language, expected):
        assert get_file_extension(language) == expected

    def test_case_and_whitespace_insensitive(self):
        assert get_file_extension("  JavaScript ") == "js"

    def test_unknown_language_defaults_to_txt(self):
        assert get_file_extension("brainfuck") == "txt"


class TestHasFileExtension:
    """Test extension detection on the last path segment"""

    def test_regular_file(self):
        assert has_file_extension("src/app.js") is True

    def test_no_dot(self):
        assert has_file_extension("src/Makefile") is False

    def test_leading_dot_only(self):
        """Dotfiles without another dot have no extension"""
        assert has_file_extension(".env") is False

    def test_trailing_dot_only(self):
        assert has_file_extension("build.") is False

    def test_dot_in_directory_is_ignored(self):
        assert has_file_extension("v1.2/README") is False

    def test_dotfile_with_extension(self):
        assert has_file_extension(".eslintrc.json") is True


class TestEnsureFileExtension:
    """Test extension normalization"""

    def test_appends_extension_for_language(self):
        assert ensure_file_extension("src/index", "javascript") == "src/index.js"

    def test_keeps_existing_extension(self):
        """Declared language never overrides an existing extension"""
        assert ensure_file_extension("src/index.jsx", "javascript") == "src/index.jsx"

    def test_without_language_unchanged(self):
        assert ensure_file_extension("Dockerfile") == "Dockerfile"
        assert ensure_file_extension("Dockerfile", "  ") == "Dockerfile"

    def test_unknown_language_uses_txt(self):
        assert ensure_file_extension("notes", "klingon") == "notes.txt"

    def test_idempotent(self):
        once = ensure_file_extension("app", "python")
        assert ensure_file_extension(once, "python") == once == "app.py"


class TestDetectLanguageFromPath:
    """Test extension -> language inference"""

    @pytest.mark.parametrize("path,expected", [
        ("index.html", "html"),
        ("page.HTM", "html"),
        ("src/App.tsx", "typescript"),
        ("scripts/run.sh", "shell"),
        ("config.yaml", "yaml"),
    ])
    def test_known_extensions(self, path, expected):
        assert detect_language_from_path(path) == expected

    def test_unknown_extension(self):
        assert detect_language_from_path("data.bin") == "plaintext"

    def test_no_extension(self):
        assert detect_language_from_path("src/Makefile") == "plaintext"
