"""Community dynamics: experience tiers, expertise, cadence and collaboration."""

import re
from datetime import datetime
from enum import Enum
from typing import NamedTuple, Sequence

from release_lens.models import (
    CollaborationPatterns,
    CommunityMetrics,
    Contributor,
    ContributorDemographics,
    ReleaseNote,
)
from release_lens.trend import DAYS_PER_MONTH

EXPERTISE_CATEGORIES = [
    "Documentation",
    "Testing",
    "Frontend",
    "Backend",
    "DevOps",
    "Security",
    "Performance",
]
MIN_EXPERTISE_COUNT = 2
MAX_EXPERTISE_AREAS = 3

REVIEW_INDICATORS = ("review", "approved", "feedback", "suggestion", "comment")

KNOWLEDGE_SHARING_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    (
        re.compile(r"documentation added|docs added", re.IGNORECASE),
        "Documentation Contribution",
    ),
    (re.compile(r"tutorial|guide|how-to", re.IGNORECASE), "Educational Content"),
    (re.compile(r"example|sample|demo", re.IGNORECASE), "Code Examples"),
    (re.compile(r"wiki|knowledge base", re.IGNORECASE), "Knowledge Base"),
    (re.compile(r"workshop|presentation", re.IGNORECASE), "Community Education"),
]


class ExperienceLevel(str, Enum):
    NOVICE = "novice"
    INTERMEDIATE = "intermediate"
    EXPERT = "expert"


class ContributorHistory(NamedTuple):
    """Aggregated participation of one contributor."""

    release_tags: set[str]
    contributions: int


def classify_experience(release_count: int, contributions: int) -> ExperienceLevel:
    if release_count > 10 or contributions > 50:
        return ExperienceLevel.EXPERT
    if release_count > 3 or contributions > 10:
        return ExperienceLevel.INTERMEDIATE
    return ExperienceLevel.NOVICE


def build_contributor_history(
    releases: Sequence[ReleaseNote],
    contributors: Sequence[Contributor],
) -> dict[str, ContributorHistory]:
    """
    Aggregate distinct releases and summed contributions per login.

    `contributors` is usually the flattened contributor list of all releases;
    each entry adds its contribution count to that login's total.
    """
    tags: dict[str, set[str]] = {}
    for release in releases:
        for contributor in release.contributors:
            tags.setdefault(contributor.login, set()).add(release.tag_name)

    totals: dict[str, int] = {}
    for contributor in contributors:
        totals[contributor.login] = (
            totals.get(contributor.login, 0) + contributor.contributions
        )

    return {
        login: ContributorHistory(tags.get(login, set()), total)
        for login, total in totals.items()
    }


class CommunityAnalyzer:
    """Derives contributor demographics and collaboration patterns."""

    def analyze_community_dynamics(
        self,
        releases: Sequence[ReleaseNote],
        contributors: Sequence[Contributor] | None = None,
    ) -> CommunityMetrics:
        if contributors is None:
            contributors = [c for release in releases for c in release.contributors]

        history = build_contributor_history(releases, contributors)
        levels = self.analyze_experience_levels(history)

        distribution: dict[str, int] = {}
        for level in levels.values():
            distribution[level] = distribution.get(level, 0) + 1

        return CommunityMetrics(
            contributor_demographics=ContributorDemographics(
                experience_level=levels,
                experience_distribution=distribution,
                expertise_areas=self.identify_expertise_areas(releases, history),
                activity_patterns=self.analyze_activity_patterns(releases, history),
            ),
            collaboration_patterns=CollaborationPatterns(
                mentorship=self.identify_mentorship_patterns(releases, levels),
                code_review_dynamics=self.analyze_code_review_patterns(releases),
                knowledge_sharing=self.identify_knowledge_sharing(releases),
            ),
        )

    def analyze_experience_levels(
        self, history: dict[str, ContributorHistory]
    ) -> dict[str, str]:
        return {
            login: classify_experience(
                len(entry.release_tags), entry.contributions
            ).value
            for login, entry in history.items()
        }

    def identify_expertise_areas(
        self,
        releases: Sequence[ReleaseNote],
        history: dict[str, ContributorHistory],
    ) -> dict[str, list[str]]:
        """Top categories mentioned in the releases each contributor took part in."""
        counts: dict[str, dict[str, int]] = {}

        for release in releases:
            if not release.body:
                continue
            body = release.body.lower()
            for category in EXPERTISE_CATEGORIES:
                if category.lower() not in body:
                    continue
                for contributor in release.contributors:
                    per_login = counts.setdefault(contributor.login, {})
                    per_login[category] = per_login.get(category, 0) + 1

        expertise = {}
        for login in history:
            category_counts = counts.get(login)
            if not category_counts:
                continue
            ranked = sorted(
                (item for item in category_counts.items() if item[1] >= MIN_EXPERTISE_COUNT),
                key=lambda item: item[1],
                reverse=True,
            )
            areas = [category for category, _ in ranked[:MAX_EXPERTISE_AREAS]]
            if areas:
                expertise[login] = areas

        return expertise

    def analyze_activity_patterns(
        self,
        releases: Sequence[ReleaseNote],
        history: dict[str, ContributorHistory],
    ) -> dict[str, float]:
        """
        Normalized release cadence per contributor.

        A mean gap of one month or less between their releases scores 1.0;
        longer gaps score proportionally lower.
        """
        timestamps: dict[str, dict[str, datetime]] = {}
        for release in releases:
            for contributor in release.contributors:
                timestamps.setdefault(contributor.login, {})[release.tag_name] = (
                    release.created_at
                )

        patterns = {}
        for login in history:
            dates = sorted(timestamps.get(login, {}).values())
            if len(dates) < 2:
                patterns[login] = 0.0
                continue

            gaps = [
                (dates[i] - dates[i - 1]).total_seconds() / 86400
                for i in range(1, len(dates))
            ]
            average_days = sum(gaps) / len(gaps)
            if average_days <= 0:
                patterns[login] = 1.0
                continue
            patterns[login] = min(1.0, DAYS_PER_MONTH / average_days)

        return patterns

    def identify_mentorship_patterns(
        self,
        releases: Sequence[ReleaseNote],
        levels: dict[str, str],
    ) -> dict[str, list[str]]:
        """Pair every expert with every novice sharing a release."""
        mentorship: dict[str, list[str]] = {}

        for release in releases:
            experts = [
                c.login
                for c in release.contributors
                if levels.get(c.login) == ExperienceLevel.EXPERT.value
            ]
            novices = [
                c.login
                for c in release.contributors
                if levels.get(c.login) == ExperienceLevel.NOVICE.value
            ]

            for expert in experts:
                mentees = mentorship.setdefault(expert, [])
                for novice in novices:
                    if novice not in mentees:
                        mentees.append(novice)

        return mentorship

    def analyze_code_review_patterns(
        self, releases: Sequence[ReleaseNote]
    ) -> dict[str, int]:
        """Count releases with review activity per contributor."""
        reviews: dict[str, int] = {}

        for release in releases:
            if not release.body:
                continue
            body = release.body.lower()
            has_review = any(indicator in body for indicator in REVIEW_INDICATORS)
            for contributor in release.contributors:
                reviews[contributor.login] = reviews.get(contributor.login, 0) + (
                    1 if has_review else 0
                )

        return reviews

    def identify_knowledge_sharing(self, releases: Sequence[ReleaseNote]) -> list[str]:
        found: list[str] = []
        for release in releases:
            if not release.body:
                continue
            for pattern, label in KNOWLEDGE_SHARING_PATTERNS:
                if label not in found and pattern.search(release.body):
                    found.append(label)
        return found
