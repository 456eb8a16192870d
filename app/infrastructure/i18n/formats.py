"""Interchange formats for language packs and extracted keys.

Each format is a writer (or reader) function registered in a dispatch table
keyed by ``PackFormat``. Packs support json, yaml and source; extracted key
lists support json, source, csv and pot.

The source format is a Python literal scaffold: every value is written as
an empty string, so a source export lists the keys to translate rather than
the current translations.
"""

import ast
import csv
import io
import json
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

import yaml

from infrastructure.i18n.errors import FormatError
from infrastructure.i18n.extractor import TranslationExtractor
from infrastructure.i18n.models import ExtractedKey, utcnow


class PackFormat(str, Enum):
    """Supported interchange formats."""

    JSON = "json"
    SOURCE = "source"
    CSV = "csv"
    POT = "pot"
    YAML = "yaml"

    @property
    def extension(self) -> str:
        return _EXTENSIONS[self]


_EXTENSIONS = {
    PackFormat.JSON: "json",
    PackFormat.SOURCE: "py",
    PackFormat.CSV: "csv",
    PackFormat.POT: "pot",
    PackFormat.YAML: "yaml",
}

CSV_HEADER = "Key,File,Line,Type,Context"
POT_CHARSET_LINE = '"Content-Type: text/plain; charset=UTF-8\\n"'


def parse_format(value: "PackFormat | str") -> PackFormat:
    """Coerce a format tag, accepting file extensions ("py", "yml").

    Raises:
        FormatError: If the tag is unknown.
    """
    if isinstance(value, PackFormat):
        return value
    tag = str(value).lower().lstrip(".")
    aliases = {"py": "source", "php": "source", "yml": "yaml"}
    try:
        return PackFormat(aliases.get(tag, tag))
    except ValueError as e:
        raise FormatError(f"Unsupported format: {value}", format=str(value)) from e


def timestamp_slug(moment: Optional[datetime] = None) -> str:
    """Filename timestamp, e.g. 2026-01-31_14-05-09."""
    return (moment or utcnow()).strftime("%Y-%m-%d_%H-%M-%S")


# Pack writers


def _pack_to_json(pack: Dict[str, Any]) -> str:
    return json.dumps(pack, indent=4, ensure_ascii=False)


def _pack_to_yaml(pack: Dict[str, Any]) -> str:
    return yaml.safe_dump(
        pack, allow_unicode=True, sort_keys=False, default_flow_style=False
    )


def _pack_to_source(pack: Dict[str, Any]) -> str:
    lines = [
        "# Language pack scaffold, values left empty for translation",
        "PACK = {",
        f'    "language": {_literal(pack.get("language", {}), 1)},',
        '    "translations": {',
    ]
    lines.extend(_scaffold_groups(pack.get("translations", {}), indent=2))
    lines.append("    },")
    lines.append(f'    "metadata": {_literal(pack.get("metadata", {}), 1)},')
    lines.append("}")
    return "\n".join(lines) + "\n"


PACK_WRITERS: Dict[PackFormat, Callable[[Dict[str, Any]], str]] = {
    PackFormat.JSON: _pack_to_json,
    PackFormat.YAML: _pack_to_yaml,
    PackFormat.SOURCE: _pack_to_source,
}


def serialize_pack(pack: Dict[str, Any], format: "PackFormat | str") -> bytes:
    """Render a language pack.

    Raises:
        FormatError: If the format cannot hold a pack.
    """
    fmt = parse_format(format)
    writer = PACK_WRITERS.get(fmt)
    if writer is None:
        raise FormatError(f"Format '{fmt.value}' cannot export a language pack", format=fmt.value)
    return writer(pack).encode("utf-8")


# Extracted-key writers


def _keys_to_json(occurrences: List[ExtractedKey], **_: Any) -> str:
    grouped = TranslationExtractor.group_by_namespace(occurrences)
    payload = {
        namespace: {key: occurrence.to_dict() for key, occurrence in keys.items()}
        for namespace, keys in grouped.items()
    }
    return json.dumps(payload, indent=4, ensure_ascii=False)


def _keys_to_source(occurrences: List[ExtractedKey], **_: Any) -> str:
    grouped = TranslationExtractor.group_by_namespace(occurrences)
    stripped = {
        namespace: {_strip_namespace(key, namespace): "" for key in keys}
        for namespace, keys in grouped.items()
    }
    lines = ["# Extracted translation keys", "TRANSLATIONS = {"]
    lines.extend(_scaffold_groups(stripped, indent=1))
    lines.append("}")
    return "\n".join(lines) + "\n"


def _keys_to_csv(occurrences: List[ExtractedKey], **_: Any) -> str:
    buffer = io.StringIO()
    buffer.write(CSV_HEADER + "\n")
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for occurrence in occurrences:
        writer.writerow(
            [
                _single_line(occurrence.key),
                _single_line(occurrence.file or ""),
                occurrence.line,
                _single_line(occurrence.type),
                _single_line(occurrence.context),
            ]
        )
    return buffer.getvalue()


def _keys_to_pot(
    occurrences: List[ExtractedKey], title: str = "application", **_: Any
) -> str:
    lines = [
        f"# Translation template for {title}",
        f"# Generated on {utcnow().strftime('%Y-%m-%d %H:%M:%S')}",
        "",
        'msgid ""',
        'msgstr ""',
        POT_CHARSET_LINE,
        "",
    ]
    for occurrence in occurrences:
        if occurrence.file:
            lines.append(f"#: {occurrence.file}:{occurrence.line}")
        lines.append(f'msgid "{_escape_po(occurrence.key)}"')
        lines.append('msgstr ""')
        lines.append("")
    return "\n".join(lines) + "\n"


OCCURRENCE_WRITERS: Dict[PackFormat, Callable[..., str]] = {
    PackFormat.JSON: _keys_to_json,
    PackFormat.SOURCE: _keys_to_source,
    PackFormat.CSV: _keys_to_csv,
    PackFormat.POT: _keys_to_pot,
}


def serialize_occurrences(
    occurrences: List[ExtractedKey], format: "PackFormat | str", **options: Any
) -> bytes:
    """Render extracted key occurrences.

    Args:
        occurrences: Occurrences to render, in output order.
        format: Target format.
        **options: Writer options (``title`` for the pot header).

    Raises:
        FormatError: If the format cannot hold extracted keys.
    """
    fmt = parse_format(format)
    writer = OCCURRENCE_WRITERS.get(fmt)
    if writer is None:
        raise FormatError(f"Format '{fmt.value}' cannot export extracted keys", format=fmt.value)
    return writer(list(occurrences), **options).encode("utf-8")


# Pack readers


def _pack_from_json(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise FormatError(f"Invalid JSON pack: {e}", format="json") from e


def _pack_from_yaml(text: str) -> Any:
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise FormatError(f"Invalid YAML pack: {e}", format="yaml") from e


def _pack_from_source(text: str) -> Any:
    """Evaluate a source pack: one dict literal, or one assignment of one."""
    try:
        module = ast.parse(text)
    except SyntaxError as e:
        raise FormatError(f"Invalid source pack: {e}", format="source") from e

    if len(module.body) != 1:
        raise FormatError(
            "Source pack must hold a single literal or assignment", format="source"
        )
    statement = module.body[0]
    if isinstance(statement, (ast.Assign, ast.AnnAssign, ast.Expr)):
        node = statement.value
    else:
        raise FormatError("Source pack must hold a literal", format="source")
    if node is None:
        raise FormatError("Source pack assignment has no value", format="source")

    try:
        return ast.literal_eval(node)
    except (ValueError, TypeError, SyntaxError) as e:
        raise FormatError(f"Source pack is not a literal: {e}", format="source") from e


PACK_READERS: Dict[PackFormat, Callable[[str], Any]] = {
    PackFormat.JSON: _pack_from_json,
    PackFormat.YAML: _pack_from_yaml,
    PackFormat.SOURCE: _pack_from_source,
}


def deserialize_pack(data: "bytes | str", format: "PackFormat | str") -> Dict[str, Any]:
    """Parse a pack payload into a mapping.

    Raises:
        FormatError: If the format cannot be imported or the payload does
            not parse to a mapping.
    """
    fmt = parse_format(format)
    reader = PACK_READERS.get(fmt)
    if reader is None:
        raise FormatError(f"Format '{fmt.value}' cannot be imported", format=fmt.value)
    if isinstance(data, bytes):
        try:
            data = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise FormatError(f"Pack is not UTF-8: {e}", format=fmt.value) from e
    payload = reader(data)
    if not isinstance(payload, dict):
        raise FormatError("Pack payload must be a mapping", format=fmt.value)
    return payload


# Helpers


def _scaffold_groups(groups: Dict[str, Dict[str, Any]], indent: int) -> List[str]:
    pad = "    " * indent
    lines = []
    for namespace, keys in groups.items():
        lines.append(f"{pad}# {namespace}")
        lines.append(f"{pad}{namespace!r}: {{")
        for key in keys:
            lines.append(f'{pad}    {key!r}: "",')
        lines.append(f"{pad}}},")
    return lines


def _literal(value: Any, indent: int) -> str:
    if not isinstance(value, dict):
        return repr(value)
    if not value:
        return "{}"
    pad = "    " * (indent + 1)
    items = [f"{pad}{key!r}: {_literal(item, indent + 1)}," for key, item in value.items()]
    return "{\n" + "\n".join(items) + "\n" + "    " * indent + "}"


def _single_line(text: str) -> str:
    return text.replace("\r", " ").replace("\n", " ")


def _strip_namespace(key: str, namespace: str) -> str:
    prefix = namespace + "."
    return key[len(prefix) :] if key.startswith(prefix) else key


def _escape_po(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
