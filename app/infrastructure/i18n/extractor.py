"""Translation key extractor.

Scans raw text, files and directory trees for translation call sites using
the per-kind pattern table, then deduplicates, filters and sorts the
occurrences found.

Usage:
    extractor = TranslationExtractor()
    keys = extractor.extract(["resources/views"], ExtractionOptions(namespace="auth"))
    stats = extractor.generate_stats(keys)
"""

import copy
import re
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, fields
from pathlib import PurePath
from typing import Any, Dict, Iterable, List, Optional, Tuple

from infrastructure.i18n.errors import ExtractionWarning
from infrastructure.i18n.filesystem import FileSystem, LocalFileSystem
from infrastructure.i18n.models import ExtractedKey
from infrastructure.i18n.patterns import EXCLUDE_DIRECTORIES, FILE_EXTENSIONS, PATTERNS
from infrastructure.logging import get_module_logger

logger = get_module_logger()

SORT_FIELDS = tuple(f.name for f in fields(ExtractedKey))


@dataclass
class ExtractionOptions:
    """Options for a multi-path extraction.

    Attributes:
        recursive: Descend into subdirectories.
        unique: Keep only the first occurrence of each key.
        namespace: Keep only keys starting with "<namespace>.".
        sort: Occurrence field to sort by; None keeps scan order.
    """

    recursive: bool = True
    unique: bool = True
    namespace: Optional[str] = None
    sort: Optional[str] = "key"


class TranslationExtractor:
    """Pattern-based translation key extractor.

    Args:
        filesystem: File access (local disk by default).
        context_radius: Characters of context kept on each side of a key.
        max_workers: Files scanned concurrently; 1 scans sequentially.
        default_kind: Kind used for files whose extension is not mapped.
        exclude_directories: Extra directory names appended to the defaults.
    """

    def __init__(
        self,
        filesystem: Optional[FileSystem] = None,
        context_radius: int = 50,
        max_workers: int = 1,
        default_kind: str = "php",
        exclude_directories: Optional[Iterable[str]] = None,
    ):
        self.filesystem = filesystem or LocalFileSystem()
        self.context_radius = context_radius
        self.max_workers = max(1, max_workers)
        self.default_kind = default_kind
        self.patterns: Dict[str, List[str]] = copy.deepcopy(PATTERNS)
        self.file_extensions: Dict[str, List[str]] = copy.deepcopy(FILE_EXTENSIONS)
        self.exclude_directories: List[str] = list(EXCLUDE_DIRECTORIES)
        for name in exclude_directories or []:
            self.add_exclude_directory(name)
        self.last_warnings: List[ExtractionWarning] = []

    # Configuration

    def add_pattern(self, kind: str, pattern: str) -> None:
        """Append a pattern to a kind, creating the kind when new.

        Raises:
            ValueError: If the pattern does not compile or has no capture group.
        """
        try:
            compiled = re.compile(pattern)
        except re.error as e:
            raise ValueError(f"Invalid extraction pattern {pattern!r}: {e}") from e
        if compiled.groups < 1:
            raise ValueError(f"Extraction pattern {pattern!r} must capture the key")
        self.patterns.setdefault(kind, []).append(pattern)
        logger.debug("extraction_pattern_added", kind=kind, pattern=pattern)

    def get_patterns(self, kind: Optional[str] = None) -> Any:
        """Patterns for one kind, or the whole table when kind is None."""
        if kind is None:
            return copy.deepcopy(self.patterns)
        return list(self.patterns.get(kind, []))

    def add_extension(self, kind: str, extension: str) -> None:
        self.file_extensions.setdefault(kind, []).append(extension.lstrip("."))

    def add_exclude_directory(self, name: str) -> None:
        name = name.strip().strip("/")
        if name and name not in self.exclude_directories:
            self.exclude_directories.append(name)

    def determine_kind(self, path: str) -> Optional[str]:
        """Source kind from the file name, compound extensions first.

        Returns:
            The kind, or None when no extension matches.
        """
        filename = PurePath(path).name
        for extension, kind in self._extensions_longest_first():
            if filename.endswith("." + extension):
                return kind
        return None

    # Extraction

    def extract_from_content(self, content: str, kind: str = "php") -> List[ExtractedKey]:
        """Apply every pattern of a kind to raw text.

        Occurrences are ordered by pattern, then by match position. Unknown
        kinds yield no occurrences.
        """
        return self._scan(content, kind, None)

    def extract_from_file(self, path: str) -> List[ExtractedKey]:
        """Extract occurrences from one file.

        Raises:
            ExtractionWarning: If the file is missing or unreadable.
        """
        path = str(path)
        if not self.filesystem.is_file(path):
            raise ExtractionWarning(path, "file does not exist")
        try:
            content = self.filesystem.read_text(path)
        except (OSError, UnicodeError) as e:
            raise ExtractionWarning(path, str(e)) from e
        kind = self.determine_kind(path) or self.default_kind
        return self._scan(content, kind, path)

    def extract_from_directory(self, path: str, recursive: bool = True) -> List[ExtractedKey]:
        """Extract occurrences from every eligible file under a directory.

        Files under excluded directories (relative to path) and files with
        an unmapped extension are skipped. Unreadable files are logged and
        recorded in ``last_warnings``.

        Raises:
            ExtractionWarning: If path is not a directory.
        """
        warnings: List[ExtractionWarning] = []
        results = self._extract_directory(str(path), recursive, warnings)
        self.last_warnings = warnings
        return results

    def extract(
        self, paths: Iterable[str], options: Optional[ExtractionOptions] = None
    ) -> List[ExtractedKey]:
        """Extract from files and directories, then post-process.

        Paths that do not exist are logged, recorded in ``last_warnings``
        and skipped.
        """
        options = options or ExtractionOptions()
        warnings: List[ExtractionWarning] = []
        results: List[ExtractedKey] = []
        scanned = 0

        for raw_path in paths:
            path = str(raw_path)
            if self.filesystem.is_file(path):
                occurrences, warning = self._extract_file_safely(path)
                results.extend(occurrences)
                if warning:
                    warnings.append(warning)
            elif self.filesystem.is_dir(path):
                results.extend(self._extract_directory(path, options.recursive, warnings))
            else:
                warning = ExtractionWarning(path, "path does not exist")
                logger.warning("extraction_path_skipped", path=path, reason=warning.reason)
                warnings.append(warning)
                continue
            scanned += 1

        self.last_warnings = warnings
        processed = self.process_results(results, options)
        logger.info(
            "extraction_completed",
            paths=scanned,
            occurrences=len(results),
            keys=len(processed),
            warnings=len(warnings),
        )
        return processed

    def process_results(
        self, occurrences: List[ExtractedKey], options: Optional[ExtractionOptions] = None
    ) -> List[ExtractedKey]:
        """Deduplicate (keep first), filter by namespace and stable-sort.

        Raises:
            ValueError: If the sort field is not an occurrence field.
        """
        options = options or ExtractionOptions()
        results = list(occurrences)

        if options.unique:
            seen = set()
            unique = []
            for occurrence in results:
                if occurrence.key not in seen:
                    seen.add(occurrence.key)
                    unique.append(occurrence)
            results = unique

        if options.namespace:
            prefix = options.namespace + "."
            results = [o for o in results if o.key.startswith(prefix)]

        if options.sort:
            if options.sort not in SORT_FIELDS:
                raise ValueError(
                    f"Unknown sort field '{options.sort}'. Expected one of: {', '.join(SORT_FIELDS)}"
                )
            results.sort(key=lambda o: _sort_value(getattr(o, options.sort)))

        return results

    # Reporting

    @staticmethod
    def group_by_namespace(
        occurrences: Iterable[ExtractedKey],
    ) -> Dict[str, Dict[str, ExtractedKey]]:
        """Group occurrences by namespace, keyed by key (last write wins)."""
        grouped: Dict[str, Dict[str, ExtractedKey]] = {}
        for occurrence in occurrences:
            grouped.setdefault(occurrence.namespace, {})[occurrence.key] = occurrence
        return grouped

    def generate_stats(self, occurrences: List[ExtractedKey]) -> Dict[str, Any]:
        """Summary counts for a list of occurrences.

        ``most_used_keys`` holds the ten most frequent keys, ties in
        first-seen order.
        """
        grouped = self.group_by_namespace(occurrences)
        key_counts = Counter(o.key for o in occurrences)
        return {
            "total_keys": len(occurrences),
            "unique_keys": len(key_counts),
            "namespaces": len(grouped),
            "files_scanned": len({o.file for o in occurrences if o.file is not None}),
            "file_types": dict(Counter(o.type for o in occurrences)),
            "namespace_breakdown": {ns: len(keys) for ns, keys in grouped.items()},
            "most_used_keys": dict(key_counts.most_common(10)),
        }

    # Internals

    def _scan(self, content: str, kind: str, file: Optional[str]) -> List[ExtractedKey]:
        results = []
        radius = self.context_radius
        for pattern in self.patterns.get(kind, []):
            for match in re.finditer(pattern, content):
                position = match.start(1)
                results.append(
                    ExtractedKey(
                        key=match.group(1),
                        file=file,
                        line=content.count("\n", 0, position) + 1,
                        type=kind,
                        pattern=pattern,
                        context=content[max(0, position - radius) : position + radius],
                    )
                )
        return results

    def _extract_directory(
        self, root: str, recursive: bool, warnings: List[ExtractionWarning]
    ) -> List[ExtractedKey]:
        if not self.filesystem.is_dir(root):
            raise ExtractionWarning(root, "directory does not exist")

        candidates = [
            path
            for path in self.filesystem.list_files(root, recursive=recursive)
            if not self._should_skip(path, root)
        ]
        logger.debug("directory_scan_started", root=root, files=len(candidates))

        if self.max_workers > 1 and len(candidates) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                outcomes = list(executor.map(self._extract_file_safely, candidates))
        else:
            outcomes = [self._extract_file_safely(path) for path in candidates]

        results: List[ExtractedKey] = []
        for occurrences, warning in outcomes:
            results.extend(occurrences)
            if warning:
                warnings.append(warning)
        return results

    def _extract_file_safely(
        self, path: str
    ) -> Tuple[List[ExtractedKey], Optional[ExtractionWarning]]:
        try:
            return self.extract_from_file(path), None
        except ExtractionWarning as warning:
            logger.warning("extraction_file_skipped", path=path, reason=warning.reason)
            return [], warning

    def _should_skip(self, path: str, root: str) -> bool:
        try:
            relative = PurePath(path).relative_to(root)
        except ValueError:
            relative = PurePath(path)
        directories = relative.parts[:-1]
        for excluded in self.exclude_directories:
            segments = tuple(excluded.split("/"))
            width = len(segments)
            for start in range(len(directories) - width + 1):
                if directories[start : start + width] == segments:
                    return True
        return self.determine_kind(path) is None

    def _extensions_longest_first(self) -> List[Tuple[str, str]]:
        pairs = [
            (extension, kind)
            for kind, extensions in self.file_extensions.items()
            for extension in extensions
        ]
        return sorted(pairs, key=lambda pair: len(pair[0]), reverse=True)


def _sort_value(value: Any) -> Tuple[bool, Any]:
    # None sorts last
    return (value is None, value if value is not None else "")
