"""Localization (translation store and language packs) settings."""

from pydantic import Field

from infrastructure.configuration.base import FeatureSettings


class LocalizationSettings(FeatureSettings):
    """Configuration for the translation store and pack export.

    Environment Variables:
        I18N_DEFAULT_GROUP: Group used when none is given (default: default)
        I18N_DEFAULT_PLURAL_RULE: Name of the registered plural rule used when a
            translation does not override it (default: one_other)
        I18N_SEED_DEFAULT_LANGUAGE: Seed English as default and fallback
            language when the registry is created (default: true)
        I18N_PACK_VERSION: Version tag written into exported packs
            (default: 1.0.0)
        I18N_EXPORT_DIR: Directory the CLI writes generated artifacts to
            (default: storage/translations)

    Example:
        ```python
        from infrastructure.services import get_settings

        settings = get_settings()
        group = settings.i18n.default_group
        ```
    """

    default_group: str = Field(default="default", alias="I18N_DEFAULT_GROUP")
    default_plural_rule: str = Field(
        default="one_other", alias="I18N_DEFAULT_PLURAL_RULE"
    )
    seed_default_language: bool = Field(
        default=True, alias="I18N_SEED_DEFAULT_LANGUAGE"
    )
    pack_version: str = Field(default="1.0.0", alias="I18N_PACK_VERSION")
    export_dir: str = Field(default="storage/translations", alias="I18N_EXPORT_DIR")
