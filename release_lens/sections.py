"""
Release body parsing.

Each category is extracted by its own line-oriented scan over the release
body: a heading (or bold bullet) opens the section, bullet lines inside it
are captured, and a closing heading ends it.
"""

import re
from typing import NamedTuple

VERSION_PATTERN = re.compile(r"v?(\d+(?:\.\d+)?(?:\.\d+)?)")

_FEATURE_KEYWORDS = (
    r"(?:New Features|Features|Major Changes|Improvements|Enhancements|Changes|Plus|Added)"
)
_DEPRECATION_KEYWORDS = r"(?:Deprecations|Removed|Deprecated)"

FEATURE_HEADING = re.compile(rf"^###?\s+{_FEATURE_KEYWORDS}", re.IGNORECASE)
FEATURE_BULLET_HEADING = re.compile(rf"^[-*]\s+{_FEATURE_KEYWORDS}", re.IGNORECASE)
FEATURE_EXIT_HEADING = re.compile(
    r"^###?\s+(?:Breaking Changes|Deprecations|Bug Fixes|Removed|Fixed)",
    re.IGNORECASE,
)

BREAKING_HEADING = re.compile(
    r"^###?\s+(?:Breaking Changes|BREAKING CHANGES|Breaking|Important Changes)",
    re.IGNORECASE,
)

DEPRECATION_HEADING = re.compile(rf"^###?\s+{_DEPRECATION_KEYWORDS}", re.IGNORECASE)
DEPRECATION_BULLET_HEADING = re.compile(
    rf"^[-*]\s+{_DEPRECATION_KEYWORDS}", re.IGNORECASE
)

PLUS_HEADING = re.compile(r"^Plus\s+(?:changes|everything|features)", re.IGNORECASE)

BULLET = re.compile(r"^[-*]\s+")
H2_PREFIX = re.compile(r"^##")
H3_PREFIX = re.compile(r"^###")

# Lowercase fragments that disqualify a bullet from the feature list
EXCLUDED_FEATURE_TERMS = ("bugfix", "fix bug", "fixed bug", "deprecated", "removed")


class ReleaseSections(NamedTuple):
    """All categorized bullet lists of one release body."""

    features: list[str]
    breaking_changes: list[str]
    deprecations: list[str]
    plus_changes: list[str]


def extract_version(tag_name: str) -> str:
    """
    Extract the version number from a release tag.

    Handles v1.0.0, 1.0.0, v1.0, 1.0, v1, 1 and tags with prefixes such as
    'release-2.3'. Returns the tag unchanged when it holds no number.
    """
    match = VERSION_PATTERN.search(tag_name)
    return match.group(1) if match else tag_name


def clean_bullet_point(text: str) -> str:
    """Strip the bullet marker and normalize whitespace."""
    text = re.sub(r"^\s*[-*]\s*", "", text)
    text = re.sub(r"\s+", " ", text)
    return text.strip()


def _is_feature(text: str) -> bool:
    lowered = text.lower()
    if not text or text.startswith("http"):
        return False
    return not any(term in lowered for term in EXCLUDED_FEATURE_TERMS)


def extract_features(body: str | None) -> list[str]:
    """Extract feature bullets from a release body."""
    if not body:
        return []

    features = []
    in_section = False
    for line in body.split("\n"):
        if FEATURE_HEADING.match(line) or FEATURE_BULLET_HEADING.match(line):
            in_section = True
            continue

        if FEATURE_EXIT_HEADING.match(line):
            in_section = False
            continue

        if in_section and BULLET.match(line):
            feature = clean_bullet_point(line)
            if _is_feature(feature):
                features.append(feature)

    return features


def _extract_section(
    body: str | None,
    entry_patterns: tuple[re.Pattern[str], ...],
    exit_pattern: re.Pattern[str],
) -> list[str]:
    if not body:
        return []

    items = []
    in_section = False
    for line in body.split("\n"):
        if any(pattern.match(line) for pattern in entry_patterns):
            in_section = True
            continue

        if in_section and exit_pattern.match(line):
            in_section = False
            continue

        if in_section and BULLET.match(line):
            item = clean_bullet_point(line)
            if item:
                items.append(item)

    return items


def extract_breaking_changes(body: str | None) -> list[str]:
    """Extract bullets under a breaking-changes heading."""
    return _extract_section(body, (BREAKING_HEADING,), H3_PREFIX)


def extract_deprecations(body: str | None) -> list[str]:
    """Extract bullets under a deprecation or removal heading."""
    return _extract_section(
        body, (DEPRECATION_HEADING, DEPRECATION_BULLET_HEADING), H3_PREFIX
    )


def extract_plus_changes(body: str | None) -> list[str]:
    """Extract bullets following a 'Plus changes/everything/features' line."""
    return _extract_section(body, (PLUS_HEADING,), H2_PREFIX)


def extract_sections(body: str | None) -> ReleaseSections:
    return ReleaseSections(
        features=extract_features(body),
        breaking_changes=extract_breaking_changes(body),
        deprecations=extract_deprecations(body),
        plus_changes=extract_plus_changes(body),
    )
