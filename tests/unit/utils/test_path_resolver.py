"""
Unit Tests for PathResolver

Covers reference normalization and tiered matching over a virtual file set.
"""
import pytest
from vibecoding.utils.path_resolver import PathResolver, is_external_reference
from vibecoding.utils.stream_parser import CodeFile


def make_files(*paths):
    return [CodeFile(path=p, content=f"/* {p} */") for p in paths]


class TestIsExternalReference:
    """Test detection of references that are never resolved locally"""

    @pytest.mark.parametrize("ref", [
        "https://cdn.example.com/lib.js",
        "http://example.com/a.css",
        "//cdn.example.com/lib.js",
        "data:text/css;base64,AAAA",
    ])
    def test_external(self, ref):
        assert is_external_reference(ref) is True

    @pytest.mark.parametrize("ref", ["app.js", "./css/a.css", "../x.js", "/root.css"])
    def test_local(self, ref):
        assert is_external_reference(ref) is False


class TestResolve:
    """Test reference normalization"""

    def test_parent_segment(self):
        assert PathResolver.resolve("../styles/main.css", "src/pages/index.html") == "src/styles/main.css"

    def test_dot_slash_at_root(self):
        assert PathResolver.resolve("./app.js", "index.html") == "app.js"

    def test_relative_to_document_directory(self):
        assert PathResolver.resolve("app.js", "src/index.html") == "src/app.js"

    def test_query_and_fragment_are_dropped(self):
        assert PathResolver.resolve("css/a.css?v=3#top", "index.html") == "css/a.css"

    def test_root_relative_ignores_base_directory(self):
        assert PathResolver.resolve("/css/site.css", "src/index.html") == "/css/site.css"

    def test_parent_above_root_is_clamped(self):
        assert PathResolver.resolve("../../x.js", "index.html") == "x.js"

    def test_inner_dot_segments(self):
        assert PathResolver.resolve("a/./b/../c.js", "index.html") == "a/c.js"


class TestFind:
    """Test tiered matching"""

    def test_exact_match(self):
        files = make_files("css/a.css", "src/css/a.css")
        assert PathResolver.find("css/a.css", files).path == "css/a.css"

    def test_leading_slash_stripped(self):
        files = make_files("css/site.css")
        assert PathResolver.find("/css/site.css", files).path == "css/site.css"

    def test_file_with_leading_slash(self):
        files = make_files("/js/app.js")
        assert PathResolver.find("js/app.js", files).path == "/js/app.js"

    def test_suffix_match(self):
        files = make_files("project/src/app.js")
        assert PathResolver.find("src/app.js", files).path == "project/src/app.js"

    def test_suffix_requires_segment_boundary(self):
        """'myapp.js' must not match a reference to 'app.js'"""
        files = make_files("myapp.js")
        assert PathResolver.find("app.js", files) is None

    def test_exact_tier_wins_over_earlier_suffix_match(self):
        files = make_files("nested/app.js", "app.js")
        assert PathResolver.find("app.js", files).path == "app.js"

    def test_first_suffix_match_wins(self):
        files = make_files("a/app.js", "b/app.js")
        assert PathResolver.find("app.js", files).path == "a/app.js"

    def test_no_match(self):
        assert PathResolver.find("missing.js", make_files("app.js")) is None

    def test_empty_candidate(self):
        assert PathResolver.find("/", make_files("app.js")) is None


class TestResolveFile:
    """Test resolve + find in one call"""

    def test_resolves_relative_reference(self):
        files = make_files("src/styles/main.css")
        matched = PathResolver.resolve_file("../styles/main.css", "src/pages/index.html", files)
        assert matched.path == "src/styles/main.css"

    def test_external_reference_is_not_resolved(self):
        files = make_files("lib.js")
        assert PathResolver.resolve_file("https://cdn.example.com/lib.js", "index.html", files) is None

    def test_query_or_fragment_only_reference_is_not_resolved(self):
        files = make_files("lib/src", "src/index.html")
        assert PathResolver.resolve_file("?v=1", "src/index.html", files) is None
        assert PathResolver.resolve_file("#top", "src/index.html", files) is None
        assert PathResolver.resolve_file("", "src/index.html", files) is None

    def test_strip_query(self):
        assert PathResolver.strip_query("app.js?v=2#main") == "app.js"
        assert PathResolver.strip_query("?v=1") == ""
