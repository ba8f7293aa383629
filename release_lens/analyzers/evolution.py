"""Project evolution analysis over the recent release window."""

import re
from datetime import datetime
from typing import Sequence

from release_lens.models import (
    CommunityEngagement,
    DevelopmentVelocity,
    FocusArea,
    ProjectEvolutionMetrics,
    ReleaseNote,
)
from release_lens.sections import extract_breaking_changes, extract_features
from release_lens.trend import (
    DAYS_PER_MONTH,
    EVOLUTION_WINDOW_DAYS,
    classify_trend,
    compound_growth_rate,
    releases_within,
    resolve_reference_time,
)

# Category patterns applied to every extracted feature; a feature may
# match several categories.
FOCUS_AREA_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"api|endpoint|rest|graphql", re.IGNORECASE), "API"),
    (re.compile(r"ui|interface|design|css|style", re.IGNORECASE), "UI/UX"),
    (re.compile(r"performance|optimize|speed|faster", re.IGNORECASE), "Performance"),
    (re.compile(r"security|auth|permission|role", re.IGNORECASE), "Security"),
    (re.compile(r"test|coverage|spec|assertion", re.IGNORECASE), "Testing"),
    (re.compile(r"doc|readme|guide|tutorial", re.IGNORECASE), "Documentation"),
    (re.compile(r"bug|fix|issue|resolve", re.IGNORECASE), "Bug Fixes"),
    (re.compile(r"refactor|clean|improve|enhance", re.IGNORECASE), "Code Quality"),
]


def categorize_features(features: Sequence[str]) -> list[str]:
    """Return the distinct focus-area categories matched by any feature."""
    categories: list[str] = []
    for feature in features:
        for pattern, category in FOCUS_AREA_PATTERNS:
            if category not in categories and pattern.search(feature):
                categories.append(category)
    return categories


class EvolutionAnalyzer:
    """Computes velocity, focus-area and community-growth metrics."""

    def __init__(
        self,
        releases: Sequence[ReleaseNote],
        now: datetime | None = None,
        window_days: int = EVOLUTION_WINDOW_DAYS,
    ):
        self.releases = sorted(releases, key=lambda r: r.created_at, reverse=True)
        self.now = resolve_reference_time(now)
        self.window_days = window_days

    def analyze_project_trajectory(self) -> ProjectEvolutionMetrics:
        recent = self.get_recent_releases()
        return ProjectEvolutionMetrics(
            development_velocity=self.analyze_development_velocity(recent),
            focus_areas=self.identify_focus_areas(recent),
            community_engagement=self.analyze_community_engagement(recent),
        )

    def get_recent_releases(self) -> list[ReleaseNote]:
        """Releases inside the analysis window, newest first."""
        return releases_within(self.releases, self.window_days, self.now)

    @property
    def _months(self) -> float:
        return self.window_days / DAYS_PER_MONTH

    def analyze_development_velocity(
        self, recent: Sequence[ReleaseNote]
    ) -> DevelopmentVelocity:
        feature_count = sum(len(extract_features(r.body)) for r in recent)
        breaking_count = sum(len(extract_breaking_changes(r.body)) for r in recent)

        return DevelopmentVelocity(
            release_frequency=len(recent) / self._months,
            feature_velocity=feature_count / self._months,
            breaking_change_frequency=breaking_count / self._months,
        )

    def identify_focus_areas(self, recent: Sequence[ReleaseNote]) -> list[FocusArea]:
        """
        Tally focus-area categories across recent releases.

        Each release adds at most one occurrence per category. The trend is
        the regression slope over the per-occurrence indicator series.
        """
        frequency: dict[str, int] = {}
        series: dict[str, list[int]] = {}

        for release in recent:
            for category in categorize_features(extract_features(release.body)):
                frequency[category] = frequency.get(category, 0) + 1
                series.setdefault(category, []).append(1)

        areas = [
            FocusArea(
                category=category,
                frequency=count,
                trend=classify_trend(series.get(category, [])).value,
            )
            for category, count in frequency.items()
        ]
        return sorted(areas, key=lambda area: area.frequency, reverse=True)

    def analyze_community_engagement(
        self, recent: Sequence[ReleaseNote]
    ) -> CommunityEngagement:
        """
        Growth of the cumulative distinct-contributor count, oldest to newest.

        Issue resolution time and PR merge rate have no data source and are
        always reported as 0.
        """
        seen: set[str] = set()
        cumulative: list[int] = []
        for release in reversed(recent):
            seen.update(contributor.login for contributor in release.contributors)
            cumulative.append(len(seen))

        return CommunityEngagement(
            contributor_growth=compound_growth_rate(cumulative),
            issue_resolution_time=0,
            pr_merge_rate=0,
        )
