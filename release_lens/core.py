"""
Core analysis logic for Release Lens.
"""

from datetime import datetime
from typing import Any, Sequence

from release_lens.analyzers import (
    CommunityAnalyzer,
    ContributionOpportunityAnalyzer,
    EvolutionAnalyzer,
    MaturityAnalyzer,
    StrategicInsightAnalyzer,
)
from release_lens.models import (
    ComprehensiveAnalysis,
    FeatureStory,
    ReleaseNote,
    ReleaseRating,
    RepositoryMetrics,
    ValidationError,
    format_long_date,
    parse_timestamp,
    release_from_dict,
    repository_metrics_from_dict,
)
from release_lens.report import render_feature_story_markdown, render_rating_markdown
from release_lens.sections import (
    extract_breaking_changes,
    extract_deprecations,
    extract_features,
    extract_plus_changes,
    extract_version,
)
from release_lens.trend import resolve_reference_time

CONTRIBUTOR_POINTS = 10
REACTION_POINTS = 5


def _coerce_releases(
    releases: Sequence[ReleaseNote | dict[str, Any]],
) -> list[ReleaseNote]:
    if isinstance(releases, (str, bytes, dict)) or not isinstance(
        releases, Sequence
    ):
        raise ValidationError(
            f"Releases must be a list, got {type(releases).__name__}"
        )

    coerced = []
    for index, release in enumerate(releases):
        if isinstance(release, ReleaseNote):
            # Naive timestamps are taken as UTC
            coerced.append(
                release._replace(created_at=parse_timestamp(release.created_at))
            )
        elif isinstance(release, dict):
            coerced.append(release_from_dict(release))
        else:
            raise ValidationError(
                f"Release #{index} must be a ReleaseNote or object, "
                f"got {type(release).__name__}"
            )
    return coerced


def _coerce_metrics(metrics: RepositoryMetrics | dict[str, Any]) -> RepositoryMetrics:
    if isinstance(metrics, RepositoryMetrics):
        return metrics
    if isinstance(metrics, dict):
        return repository_metrics_from_dict(metrics)
    raise ValidationError(
        f"Repository metrics must be RepositoryMetrics or an object, "
        f"got {type(metrics).__name__}"
    )


def version_sort_key(version: str) -> list[int]:
    """
    Numeric sort key for dot-separated versions.

    Non-numeric segments count as 0 and trailing zero segments are dropped,
    so "2.0" and "2.0.0" produce the same key.
    """
    key = [int(part) if part.isdecimal() else 0 for part in version.split(".")]
    while key and key[-1] == 0:
        key.pop()
    return key


class ReleaseAnalyzer:
    """
    Facade over all release analyzers.

    Releases are validated and sorted newest first once; every computation
    reads from that snapshot.

    Raises:
        ValidationError: If releases or repository metrics are malformed.
    """

    def __init__(
        self,
        releases: Sequence[ReleaseNote | dict[str, Any]],
        repo_name: str,
        repo_metrics: RepositoryMetrics | dict[str, Any],
        now: datetime | None = None,
    ):
        self.releases = sorted(
            _coerce_releases(releases), key=lambda r: r.created_at, reverse=True
        )
        self.repo_name = repo_name
        self.repo_metrics = _coerce_metrics(repo_metrics)
        self.now = resolve_reference_time(now)

    def analyze_comprehensively(self) -> ComprehensiveAnalysis:
        evolution = EvolutionAnalyzer(
            self.releases, now=self.now
        ).analyze_project_trajectory()
        maturity = MaturityAnalyzer(
            self.releases, self.repo_metrics, now=self.now
        ).analyze_maturity()
        opportunities = ContributionOpportunityAnalyzer().identify_opportunities(
            evolution, self.releases
        )
        insights = StrategicInsightAnalyzer().generate_insights(evolution, maturity)
        community = CommunityAnalyzer().analyze_community_dynamics(
            self.releases,
            [c for release in self.releases for c in release.contributors],
        )

        return ComprehensiveAnalysis(
            ratings=self.compute_ratings(),
            feature_story=self.compute_feature_story(),
            evolution=evolution,
            opportunities=opportunities,
            maturity=maturity,
            insights=insights,
            community=community,
        )

    def compute_ratings(self) -> list[ReleaseRating]:
        """
        Score every release by engagement.

        Each contributor adds 10 points and each reaction adds 5. Sorted by
        score descending; equal scores keep newest-first order.
        """
        ratings = []
        for release in self.releases:
            reaction_count = sum(r.total_count for r in release.reactions)
            contributor_count = len(release.contributors)
            ratings.append(
                ReleaseRating(
                    version=extract_version(release.tag_name),
                    score=contributor_count * CONTRIBUTOR_POINTS
                    + reaction_count * REACTION_POINTS,
                    contributor_count=contributor_count,
                    reaction_count=reaction_count,
                    date=format_long_date(release.created_at),
                )
            )

        return sorted(ratings, key=lambda rating: rating.score, reverse=True)

    def compute_feature_story(self) -> list[FeatureStory]:
        """
        One story per extracted version, newest version first.

        Releases collapsing to the same version keep the latest one.
        """
        by_version: dict[str, ReleaseNote] = {}
        for release in self.releases:
            version = extract_version(release.tag_name)
            current = by_version.get(version)
            if current is None or release.created_at > current.created_at:
                by_version[version] = release

        stories = [
            FeatureStory(
                version=version,
                date=format_long_date(release.created_at),
                major_features=extract_features(release.body)
                + extract_plus_changes(release.body),
                breaking_changes=extract_breaking_changes(release.body),
                deprecations=extract_deprecations(release.body),
            )
            for version, release in by_version.items()
        ]

        return sorted(
            stories, key=lambda story: version_sort_key(story.version), reverse=True
        )

    def generate_rating_markdown(self) -> str:
        return render_rating_markdown(self.repo_name, self.compute_ratings())

    def generate_feature_story_markdown(self) -> str:
        return render_feature_story_markdown(
            self.repo_name, self.compute_feature_story()
        )
