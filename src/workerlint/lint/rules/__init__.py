"""
workerlint.lint.rules - Rule registry

Every rule class is listed in ALL_RULES. Rule selection follows the
tags/include/exclude model: start from the rules carrying any requested
tag, add explicitly included codes, drop excluded codes.
"""

import logging
from typing import Iterable, List, Optional

from workerlint.lint.rule import LintRule
from workerlint.lint.rules.no_window_prefix import NoWindowPrefix

logger = logging.getLogger(__name__)

ALL_RULES = (
    NoWindowPrefix,
)


def get_all_rules() -> List[LintRule]:
    """Fresh instances of every registered rule, sorted by code."""
    return sorted((rule_cls() for rule_cls in ALL_RULES), key=lambda r: r.code)


def get_recommended_rules() -> List[LintRule]:
    return get_filtered_rules(tags=("recommended",))


def get_filtered_rules(
    tags: Optional[Iterable[str]] = None,
    include: Optional[Iterable[str]] = None,
    exclude: Optional[Iterable[str]] = None,
) -> List[LintRule]:
    """Select rules by tag, then apply include/exclude lists of rule codes."""
    all_rules = get_all_rules()
    known = {rule.code for rule in all_rules}
    tags = set(tags or ())
    include = set(include or ())
    exclude = set(exclude or ())

    for code in sorted((include | exclude) - known):
        logger.warning("Unknown rule code in configuration: %s", code)

    selected = []
    for rule in all_rules:
        if rule.code in exclude:
            continue
        if tags.intersection(rule.tags) or rule.code in include:
            selected.append(rule)

    logger.debug("selected rules: %s", ", ".join(r.code for r in selected) or "(none)")
    return selected


__all__ = [
    "ALL_RULES",
    "LintRule",
    "NoWindowPrefix",
    "get_all_rules",
    "get_recommended_rules",
    "get_filtered_rules",
]
