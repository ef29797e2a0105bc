"""
User-Agent classifier

Maps a client identification string to a coarse operating system and
browser label using ordered, first-match rule tables.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class Taxonomy(Enum):
    """Classification domains"""
    OS = "OS"
    BROWSER = "Browser"


@dataclass(frozen=True)
class ClassificationRule:
    """A label and the case-insensitive pattern that selects it"""
    label: str
    pattern: str
    _regex: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, '_regex', re.compile(self.pattern, re.IGNORECASE))

    def matches(self, identification: str) -> bool:
        """Check whether the pattern occurs anywhere in the subject"""
        return self._regex.search(identification) is not None


@dataclass(frozen=True)
class ClassificationTable:
    """
    Ordered rule table for one taxonomy.

    Rules are evaluated in declaration order and the first match wins.
    There is no scoring: for a subject matching several rules, the earlier
    rule decides the label.
    """
    taxonomy: Taxonomy
    rules: tuple[ClassificationRule, ...]

    @classmethod
    def from_pairs(cls, taxonomy: Taxonomy,
                   pairs: tuple[tuple[str, str], ...]) -> 'ClassificationTable':
        """Build a table from (label, pattern) pairs"""
        return cls(
            taxonomy=taxonomy,
            rules=tuple(ClassificationRule(label, pattern) for label, pattern in pairs)
        )

    @property
    def unknown_label(self) -> str:
        return f"Unknown {self.taxonomy.value}"

    @property
    def labels(self) -> list[str]:
        return [rule.label for rule in self.rules]

    def classify(self, identification: Optional[str]) -> str:
        """
        Classify an identification string.

        Args:
            identification: User-Agent or similar free text. Treated as
                plain text, never as a pattern.

        Returns:
            Label of the first matching rule, or the unknown label
        """
        if not identification:
            return self.unknown_label

        for rule in self.rules:
            if rule.matches(identification):
                return rule.label

        return self.unknown_label


# Linux precedes Android, so Android user agents (which carry a Linux
# token) classify as Linux.
OS_TABLE = ClassificationTable.from_pairs(Taxonomy.OS, (
    ('Windows', 'Win'),
    ('Mac OS', '(Mac_PowerPC)|(Macintosh)'),
    ('Linux', '(X11)|(Linux)'),
    ('Android', 'Android'),
    ('iPhone', 'iPhone'),
    ('iPad', 'iPad'),
))

# Chrome precedes Edge and Safari; Chromium-based Edge classifies as Chrome.
BROWSER_TABLE = ClassificationTable.from_pairs(Taxonomy.BROWSER, (
    ('Chrome', 'Chrome'),
    ('Firefox', 'Firefox'),
    ('Safari', 'Safari'),
    ('Edge', 'Edge'),
    ('Internet Explorer', '(MSIE)|(Trident/7)'),
    ('Opera', 'Opera'),
))


def classify(identification: Optional[str], table: ClassificationTable) -> str:
    """Return the first matching label from table, or its unknown label"""
    return table.classify(identification)


def get_operating_system(user_agent: Optional[str]) -> str:
    """Get the operating system label for a User-Agent string"""
    return OS_TABLE.classify(user_agent)


def get_browser(user_agent: Optional[str]) -> str:
    """Get the browser family label for a User-Agent string"""
    return BROWSER_TABLE.classify(user_agent)
