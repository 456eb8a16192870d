"""Tests for infrastructure.i18n.extractor module."""

import pytest

from infrastructure.i18n import ExtractionOptions, ExtractionWarning, TranslationExtractor
from tests.factories.i18n import make_occurrence


@pytest.mark.unit
class TestExtractFromContent:
    """Tests for pattern matching over raw text."""

    def test_single_php_call(self, extractor):
        """A bare __() call yields one occurrence on line 1."""
        results = extractor.extract_from_content("__('auth.failed')", "php")

        assert len(results) == 1
        occurrence = results[0]
        assert occurrence.key == "auth.failed"
        assert occurrence.line == 1
        assert occurrence.namespace == "auth"
        assert occurrence.file is None
        assert occurrence.type == "php"

    def test_line_numbers(self, extractor):
        """Lines are counted up to the key position."""
        content = "<?php\n\n$a = trans('auth.failed');\n$b = __(\"auth.throttle\", []);\n"
        results = extractor.extract_from_content(content, "php")
        assert {(o.key, o.line) for o in results} == {("auth.failed", 3), ("auth.throttle", 4)}

    def test_ordered_by_pattern_then_position(self, extractor):
        """Occurrences follow the pattern table order, then match order."""
        content = "trans('b.second'); __('a.first'); __('c.third');"
        keys = [o.key for o in extractor.extract_from_content(content, "php")]
        assert keys == ["a.first", "c.third", "b.second"]

    def test_context_window(self):
        """Context spans the configured radius around the key."""
        extractor = TranslationExtractor(context_radius=5)
        content = "0123456789__('auth.failed')"
        occurrence = extractor.extract_from_content(content, "php")[0]
        assert occurrence.context == "9__('auth."

    def test_context_clamped_at_start(self, extractor):
        """Context never starts before the beginning of the text."""
        occurrence = extractor.extract_from_content("__('a.b')", "php")[0]
        assert occurrence.context == "__('a.b')"

    @pytest.mark.parametrize(
        "kind,content,key",
        [
            ("blade", "{{ __('messages.welcome') }}", "messages.welcome"),
            ("blade", "@lang('messages.intro')", "messages.intro"),
            ("javascript", "i18n.t('nav.home')", "nav.home"),
            ("vue", "<i18n>nav.about</i18n>", "nav.about"),
            ("python", "_('errors.required')", "errors.required"),
            ("python", "ngettext('cart.item', 'cart.items', n)", "cart.item"),
            ("jinja", "{% trans %}Hello world{% endtrans %}", "Hello world"),
        ],
    )
    def test_kinds(self, extractor, kind, content, key):
        """Each source kind recognises its translation helpers."""
        assert [o.key for o in extractor.extract_from_content(content, kind)] == [key]

    def test_unknown_kind_yields_nothing(self, extractor):
        """No patterns are registered for unknown kinds."""
        assert extractor.extract_from_content("__('a.b')", "cobol") == []


@pytest.mark.unit
class TestPatternConfiguration:
    """Tests for custom patterns, extensions and exclusions."""

    def test_add_pattern(self, extractor):
        """Custom patterns extend a kind."""
        extractor.add_pattern("php", r"__t\(['\"]([^'\"]+)['\"]\)")
        results = extractor.extract_from_content("__t('custom.key')", "php")
        assert "custom.key" in [o.key for o in results]

    def test_add_pattern_does_not_leak(self, extractor):
        """Patterns added to one extractor do not affect others."""
        extractor.add_pattern("php", r"__t\(['\"]([^'\"]+)['\"]\)")
        assert len(TranslationExtractor().get_patterns("php")) == len(extractor.get_patterns("php")) - 1

    def test_add_pattern_new_kind(self, extractor):
        """Adding a pattern to a new kind creates it."""
        extractor.add_pattern("ruby", r"t\(:([a-z_.]+)\)")
        assert extractor.get_patterns("ruby") == [r"t\(:([a-z_.]+)\)"]

    @pytest.mark.parametrize("pattern", [r"__\((", r"__\('[^']+'\)"])
    def test_add_invalid_pattern(self, extractor, pattern):
        """Patterns that do not compile or capture nothing are rejected."""
        with pytest.raises(ValueError):
            extractor.add_pattern("php", pattern)

    @pytest.mark.parametrize(
        "path,kind",
        [
            ("views/home.blade.php", "blade"),
            ("app/Http/Kernel.php", "php"),
            ("src/App.tsx", "javascript"),
            ("src/App.vue", "vue"),
            ("app/views.py", "python"),
            ("templates/base.j2", "jinja"),
            ("README.md", None),
        ],
    )
    def test_determine_kind(self, extractor, path, kind):
        """Compound extensions win over their suffix."""
        assert extractor.determine_kind(path) == kind

    def test_add_extension(self, extractor):
        """New extensions map to a kind."""
        extractor.add_extension("php", ".phtml")
        assert extractor.determine_kind("layout.phtml") == "php"


@pytest.mark.unit
class TestFileAndDirectoryExtraction:
    """Tests for scanning files and trees."""

    def test_extract_from_file(self, extractor, source_tree):
        """Files are scanned with the kind of their extension."""
        path = source_tree / "resources/views/welcome.blade.php"
        results = extractor.extract_from_file(str(path))
        assert [(o.key, o.line, o.type) for o in results] == [
            ("messages.intro", 2, "blade"),
            ("messages.welcome", 1, "blade"),
        ]
        assert results[0].file == str(path)

    def test_extract_missing_file(self, extractor, tmp_path):
        """A missing file raises ExtractionWarning."""
        with pytest.raises(ExtractionWarning):
            extractor.extract_from_file(str(tmp_path / "missing.php"))

    def test_unknown_extension_uses_default_kind(self, extractor, tmp_path):
        """An explicitly named file with an unknown extension is scanned as php."""
        path = tmp_path / "helpers.inc"
        path.write_text("__('legacy.key')")
        assert [o.type for o in extractor.extract_from_file(str(path))] == ["php"]

    def test_invalid_utf8_is_tolerated(self, extractor, tmp_path):
        """Undecodable bytes do not abort the scan."""
        path = tmp_path / "latin1.php"
        path.write_bytes(b"<?php // caf\xe9\n__('auth.failed');\n")
        results = extractor.extract_from_file(str(path))
        assert [(o.key, o.line) for o in results] == [("auth.failed", 2)]

    def test_directory_skips_excluded_and_unknown(self, extractor, source_tree):
        """vendor, node_modules and unmapped extensions are skipped."""
        keys = {o.key for o in extractor.extract_from_directory(str(source_tree))}
        assert keys == {
            "auth.failed",
            "auth.throttle",
            "messages.welcome",
            "messages.intro",
            "messages.title",
            "profile.name",
        }

    def test_directory_non_recursive(self, extractor, source_tree):
        """Without recursion only top-level files are scanned."""
        (source_tree / "top.php").write_text("__('top.level')")
        results = extractor.extract_from_directory(str(source_tree), recursive=False)
        assert [o.key for o in results] == ["top.level"]

    def test_excluded_segment_matches_relative_path(self, tmp_path):
        """Exclusions apply below the scan root, not to the root itself."""
        root = tmp_path / "vendor" / "project"
        root.mkdir(parents=True)
        (root / "a.php").write_text("__('inside.vendor_root')")
        assert len(TranslationExtractor().extract_from_directory(str(root))) == 1

    def test_extra_exclude_directory(self, source_tree):
        """Extra exclusions are added to the defaults."""
        extractor = TranslationExtractor(exclude_directories=["resources/js"])
        keys = {o.key for o in extractor.extract_from_directory(str(source_tree))}
        assert "messages.title" not in keys
        assert "profile.name" not in keys
        assert "messages.welcome" in keys

    def test_missing_directory(self, extractor, tmp_path):
        """A missing directory raises ExtractionWarning."""
        with pytest.raises(ExtractionWarning):
            extractor.extract_from_directory(str(tmp_path / "nope"))


@pytest.mark.unit
class TestExtract:
    """Tests for multi-path extraction and post-processing."""

    def test_extract_sorted_unique(self, extractor, source_tree):
        """Results are deduplicated and sorted by key."""
        (source_tree / "app" / "Again.php").write_text("__('auth.failed')")
        results = extractor.extract([str(source_tree)])
        keys = [o.key for o in results]
        assert keys == sorted(set(keys))
        assert keys.count("auth.failed") == 1

    def test_keep_first_occurrence(self, extractor, source_tree):
        """Deduplication keeps the first occurrence in scan order."""
        (source_tree / "app" / "Again.php").write_text("__('auth.failed')")
        results = extractor.extract([str(source_tree)], ExtractionOptions(sort=None))
        failed = [o for o in results if o.key == "auth.failed"][0]
        assert failed.file.endswith("Again.php")

    def test_namespace_filter(self, extractor, source_tree):
        """Only keys in the namespace are kept."""
        results = extractor.extract([str(source_tree)], ExtractionOptions(namespace="auth"))
        assert [o.key for o in results] == ["auth.failed", "auth.throttle"]

    def test_missing_path_recorded(self, extractor, source_tree, tmp_path):
        """Nonexistent paths are skipped and reported."""
        missing = str(tmp_path / "missing")
        results = extractor.extract([missing, str(source_tree / "resources/js/app.js")])
        assert [o.key for o in results] == ["messages.title"]
        assert [w.path for w in extractor.last_warnings] == [missing]

    def test_deterministic_across_worker_counts(self, source_tree):
        """Sequential and threaded scans return identical results."""
        sequential = TranslationExtractor(max_workers=1).extract(
            [str(source_tree)], ExtractionOptions(sort=None, unique=False)
        )
        threaded = TranslationExtractor(max_workers=4).extract(
            [str(source_tree)], ExtractionOptions(sort=None, unique=False)
        )
        assert sequential == threaded

    def test_invalid_sort_field(self, extractor):
        """Sorting on a non-occurrence field raises ValueError."""
        with pytest.raises(ValueError):
            extractor.process_results([make_occurrence()], ExtractionOptions(sort="size"))

    def test_sort_none_last(self, extractor):
        """None sorts after every value."""
        occurrences = [make_occurrence(key="b", file=None), make_occurrence(key="a", file="x.php")]
        results = extractor.process_results(occurrences, ExtractionOptions(sort="file"))
        assert [o.key for o in results] == ["a", "b"]


@pytest.mark.unit
class TestStatistics:
    """Tests for group_by_namespace and generate_stats."""

    def test_group_by_namespace(self):
        """Occurrences are grouped by namespace and key."""
        grouped = TranslationExtractor.group_by_namespace(
            [make_occurrence(key="auth.failed"), make_occurrence(key="Welcome")]
        )
        assert set(grouped) == {"auth", "default"}
        assert list(grouped["default"]) == ["Welcome"]

    def test_generate_stats(self, extractor):
        """Stats count keys, namespaces, files and types."""
        occurrences = [
            make_occurrence(key="auth.failed", file="a.php"),
            make_occurrence(key="auth.failed", file="b.php"),
            make_occurrence(key="nav.home", file="c.js", type="javascript"),
            make_occurrence(key="nav.home", file=None, type="javascript"),
        ]
        stats = extractor.generate_stats(occurrences)
        assert stats["total_keys"] == 4
        assert stats["unique_keys"] == 2
        assert stats["namespaces"] == 2
        assert stats["files_scanned"] == 3
        assert stats["file_types"] == {"php": 2, "javascript": 2}
        assert stats["namespace_breakdown"] == {"auth": 1, "nav": 1}
        assert stats["most_used_keys"] == {"auth.failed": 2, "nav.home": 2}
