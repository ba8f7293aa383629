"""Project maturity indicators."""

import re
from datetime import datetime
from typing import Sequence

from release_lens.models import (
    ProjectMaturityIndicators,
    ReleaseNote,
    RepositoryMetrics,
)
from release_lens.trend import (
    SIX_MONTHS_DAYS,
    THREE_MONTHS_DAYS,
    clamp,
    coefficient_of_variation,
    gini_coefficient,
    releases_within,
    resolve_reference_time,
)

BREAKING_CHANGE_PATTERN = re.compile(r"breaking change", re.IGNORECASE)
BUG_FIX_PATTERN = re.compile(r"fix|bug|issue|resolve", re.IGNORECASE)

# Structural markers rewarded in recent release bodies (case-sensitive)
DOC_QUALITY_MARKERS = ("##", "example", "usage", "migration", "guide")
DOC_QUALITY_MARKER_SCORE = 0.2

# Release counts that earn a full activity / frequency score
EXPECTED_RELEASES_PER_QUARTER = 6
EXPECTED_RELEASES_PER_HALF_YEAR = 12


class MaturityAnalyzer:
    """
    Scores stability, documentation, testing, community and maintenance.

    Each indicator combines weighted factors (weights sum to 100) and is
    clamped to [0, 1].
    """

    def __init__(
        self,
        releases: Sequence[ReleaseNote],
        repo_metrics: RepositoryMetrics,
        now: datetime | None = None,
    ):
        self.releases = sorted(releases, key=lambda r: r.created_at, reverse=True)
        self.repo_metrics = repo_metrics
        self.now = resolve_reference_time(now)

    def analyze_maturity(self) -> ProjectMaturityIndicators:
        return ProjectMaturityIndicators(
            codebase_stability=self.assess_codebase_stability(),
            documentation_completeness=self.assess_documentation(),
            test_coverage=self.assess_test_coverage(),
            community_health=self.assess_community_health(),
            maintenance_level=self.assess_maintenance(),
        )

    def _recent(self, days: int = SIX_MONTHS_DAYS) -> list[ReleaseNote]:
        return releases_within(self.releases, days, self.now)

    # --- Codebase stability ---

    def assess_codebase_stability(self) -> float:
        recent = self._recent()

        breaking_count = sum(
            len(BREAKING_CHANGE_PATTERN.findall(r.body or "")) for r in recent
        )
        bug_fix_count = sum(len(BUG_FIX_PATTERN.findall(r.body or "")) for r in recent)

        breaking_score = max(0, 10 - breaking_count) * 3
        bug_fix_score = max(0, 10 - bug_fix_count) * 3
        consistency_score = self.calculate_release_consistency() * 4

        total = breaking_score + bug_fix_score + consistency_score
        return clamp(min(100, total) / 100)

    def calculate_release_consistency(self) -> float:
        """1 - coefficient of variation of the gaps between recent releases."""
        recent = self._recent()
        if len(recent) < 2:
            return 0.0

        intervals = [
            abs((recent[i].created_at - recent[i - 1].created_at).total_seconds())
            for i in range(1, len(recent))
        ]
        cv = coefficient_of_variation(intervals)
        if cv is None:
            return 0.0
        return max(0.0, 1 - cv)

    # --- Documentation ---

    def assess_documentation(self) -> float:
        coverage_score = self.repo_metrics.code_quality.documentation_ratio * 50
        update_score = self.calculate_documentation_update_frequency() * 30
        quality_score = self.assess_documentation_quality() * 20

        return clamp((coverage_score + update_score + quality_score) / 100)

    def calculate_documentation_update_frequency(self) -> float:
        recent = self._recent()
        if not recent:
            return 0.0

        doc_updates = sum(1 for r in recent if r.body and "doc" in r.body.lower())
        return min(1.0, doc_updates / len(recent))

    def assess_documentation_quality(self) -> float:
        score = 0.0
        for release in self._recent(THREE_MONTHS_DAYS):
            if not release.body:
                continue
            for marker in DOC_QUALITY_MARKERS:
                if marker in release.body:
                    score += DOC_QUALITY_MARKER_SCORE
        return min(1.0, score)

    # --- Testing ---

    def assess_test_coverage(self) -> float:
        return clamp(self.repo_metrics.code_quality.test_coverage)

    # --- Community ---

    def assess_community_health(self) -> float:
        diversity_score = self.calculate_contributor_diversity() * 40
        activity_score = self.calculate_activity_level() * 30
        responsiveness_score = self.calculate_responsiveness() * 30

        return clamp((diversity_score + activity_score + responsiveness_score) / 100)

    def calculate_contributor_diversity(self) -> float:
        """1 - Gini of per-contributor contribution totals across all releases."""
        totals: dict[str, int] = {}
        for release in self.releases:
            for contributor in release.contributors:
                totals[contributor.login] = (
                    totals.get(contributor.login, 0) + contributor.contributions
                )

        if not totals:
            return 0.0
        return clamp(1 - gini_coefficient(sorted(totals.values())))

    def calculate_activity_level(self) -> float:
        recent = self._recent(THREE_MONTHS_DAYS)
        return min(1.0, len(recent) / EXPECTED_RELEASES_PER_QUARTER)

    def calculate_responsiveness(self) -> float:
        # Commit frequency stands in for responsiveness
        return clamp(self.repo_metrics.activity_metrics.commit_frequency / 10)

    # --- Maintenance ---

    def assess_maintenance(self) -> float:
        activity = self.repo_metrics.activity_metrics

        release_score = self.calculate_release_frequency() * 40
        issue_score = (activity.issue_velocity / 10) * 30
        commit_score = (activity.commit_frequency / 10) * 30

        return clamp((release_score + issue_score + commit_score) / 100)

    def calculate_release_frequency(self) -> float:
        return min(1.0, len(self._recent()) / EXPECTED_RELEASES_PER_HALF_YEAR)
