"""Key extraction feature settings."""

from typing import List

from pydantic import Field, field_validator

from infrastructure.configuration.base import FeatureSettings


class ExtractionSettings(FeatureSettings):
    """Configuration for translation key extraction.

    Environment Variables:
        EXTRACTION_CONTEXT_RADIUS: Characters of context captured on each side
            of a matched key (default: 50)
        EXTRACTION_MAX_WORKERS: Worker threads used to scan files; 1 scans
            sequentially (default: 1)
        EXTRACTION_DEFAULT_KIND: Source kind assumed for an explicitly named
            file whose extension is unknown (default: php)
        EXTRACTION_EXCLUDE_DIRECTORIES: Comma-separated directory names skipped
            in addition to the built-in list
        EXTRACTION_SORT_FIELD: Occurrence field results are sorted by
            (default: key)

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()
        radius = settings.extraction.context_radius
        extra_excludes = settings.extraction.exclude_directories
        ```
    """

    context_radius: int = Field(default=50, alias="EXTRACTION_CONTEXT_RADIUS", ge=0)
    max_workers: int = Field(default=1, alias="EXTRACTION_MAX_WORKERS", ge=1)
    default_kind: str = Field(default="php", alias="EXTRACTION_DEFAULT_KIND")
    extra_exclude_directories: str = Field(
        default="",
        alias="EXTRACTION_EXCLUDE_DIRECTORIES",
        description="Comma-separated directory names to exclude from scans",
    )
    sort_field: str = Field(default="key", alias="EXTRACTION_SORT_FIELD")

    @field_validator("sort_field")
    @classmethod
    def _validate_sort_field(cls, v: str) -> str:
        """Only occurrence attributes can be sorted on."""
        allowed = ("key", "file", "line", "type", "pattern", "context")
        if v not in allowed:
            raise ValueError(f"sort_field must be one of {allowed}, got {v!r}")
        return v

    @property
    def exclude_directories(self) -> List[str]:
        """Extra excluded directory names parsed from the comma-separated value."""
        return [
            part.strip()
            for part in self.extra_exclude_directories.split(",")
            if part.strip()
        ]
