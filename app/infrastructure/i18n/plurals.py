"""Plural rule strategies.

A plural rule maps a count to a plural category name ("one", "other", ...).
Only the English one/other rule ships; richer rules are registered by name
and selected per translation through ``Translation.plural_rule``.
"""

from typing import Callable, Dict

from infrastructure.logging import get_module_logger

logger = get_module_logger()

PluralRule = Callable[[int], str]

DEFAULT_PLURAL_RULE = "one_other"


def one_other_rule(count: int) -> str:
    """Return "one" for a count of exactly 1, "other" for everything else."""
    return "one" if count == 1 else "other"


_rules: Dict[str, PluralRule] = {DEFAULT_PLURAL_RULE: one_other_rule}


def register_plural_rule(name: str, rule: PluralRule) -> None:
    """Register (or replace) a named plural rule.

    Args:
        name: Rule name referenced by ``Translation.plural_rule``.
        rule: Callable mapping a count to a category name.
    """
    _rules[name] = rule
    logger.debug("plural_rule_registered", rule=name)


def unregister_plural_rule(name: str) -> None:
    """Remove a registered rule. The one/other baseline cannot be removed."""
    if name != DEFAULT_PLURAL_RULE:
        _rules.pop(name, None)


def available_plural_rules() -> list:
    return sorted(_rules)


def get_plural_rule(name: str | None, default: str = DEFAULT_PLURAL_RULE) -> PluralRule:
    """Look up a plural rule by name.

    Args:
        name: Rule name, or None for the default.
        default: Rule name used when name is None or unknown.

    Returns:
        The rule callable. Unknown names log a warning and resolve to the
        default rule; an unknown default resolves to the one/other rule.
    """
    if name is None:
        name = default
    rule = _rules.get(name)
    if rule is None:
        logger.warning("unknown_plural_rule", rule=name, fallback=default)
        rule = _rules.get(default, one_other_rule)
    return rule
