"""
Tests for the core analysis facade.
"""

from datetime import datetime, timezone

import pytest

from release_lens.core import ReleaseAnalyzer, version_sort_key
from release_lens.models import (
    ComprehensiveAnalysis,
    Contributor,
    ReleaseNote,
    ValidationError,
)
from release_lens.report import NO_CHANGES_NOTE

METRICS_WIRE = {
    "codeQuality": {"testCoverage": 0.9, "documentationRatio": 0.8},
    "activityMetrics": {"commitFrequency": 8, "issueVelocity": 6},
}


def _wire(tag, created_at, body=None, contributors=0, reactions=None):
    return {
        "tagName": tag,
        "name": None,
        "body": body,
        "createdAt": created_at,
        "url": f"https://github.com/acme/widget/releases/tag/{tag}",
        "reactions": reactions or [],
        "contributors": [
            {"login": f"user{i}", "contributions": 1} for i in range(contributors)
        ],
    }


class TestVersionSortKey:
    def test_numeric_segments(self):
        assert version_sort_key("2.10") > version_sort_key("2.9")

    def test_trailing_zeros_compare_equal(self):
        assert version_sort_key("2.0") == version_sort_key("2.0.0")

    def test_non_numeric_segment_counts_as_zero(self):
        assert version_sort_key("nightly") == []

    def test_superscript_digits_count_as_zero(self):
        assert version_sort_key("1.\u00b2") == [1]

    def test_superscript_tag_in_feature_story(self, now):
        analyzer = ReleaseAnalyzer(
            [_wire("release.\u00b2", "2024-05-01T00:00:00Z")],
            "acme/widget",
            METRICS_WIRE,
            now=now,
        )
        (story,) = analyzer.compute_feature_story()
        assert story.version == "release.\u00b2"


class TestScenarios:
    def test_single_release_without_body(self, now):
        analyzer = ReleaseAnalyzer(
            [
                _wire(
                    "v1.0.0",
                    "2024-05-20T00:00:00Z",
                    contributors=2,
                    reactions=[{"type": "+1", "totalCount": 3}],
                )
            ],
            "acme/widget",
            METRICS_WIRE,
            now=now,
        )

        (rating,) = analyzer.compute_ratings()
        assert rating.score == 35
        assert rating.contributor_count == 2
        assert rating.reaction_count == 3
        assert rating.date == "May 20, 2024"

        (story,) = analyzer.compute_feature_story()
        assert story.major_features == []
        assert story.breaking_changes == []
        assert story.deprecations == []
        assert NO_CHANGES_NOTE in analyzer.generate_feature_story_markdown()

    def test_breaking_change_is_not_a_feature(self, now):
        analyzer = ReleaseAnalyzer(
            [
                _wire(
                    "v2.0.0",
                    "2024-05-20T00:00:00Z",
                    body="### Breaking Changes\n- Removed legacy API\n",
                )
            ],
            "acme/widget",
            METRICS_WIRE,
            now=now,
        )

        (story,) = analyzer.compute_feature_story()
        assert story.breaking_changes == ["Removed legacy API"]
        assert story.major_features == []

    def test_distinct_version_strings_are_not_collapsed(self, now):
        analyzer = ReleaseAnalyzer(
            [
                _wire("v1.0.0", "2024-01-01T00:00:00Z"),
                _wire("v1.0.1", "2024-02-01T00:00:00Z"),
                _wire("v2.0", "2024-03-01T00:00:00Z"),
                _wire("2.0.0", "2024-03-02T00:00:00Z"),
            ],
            "acme/widget",
            METRICS_WIRE,
            now=now,
        )

        versions = [story.version for story in analyzer.compute_feature_story()]
        assert sorted(versions) == ["1.0.0", "1.0.1", "2.0", "2.0.0"]
        assert versions[-2:] == ["1.0.1", "1.0.0"]


class TestRatings:
    def test_sorted_descending_with_stable_ties(self, now):
        analyzer = ReleaseAnalyzer(
            [
                _wire("v1.0.0", "2024-01-01T00:00:00Z", contributors=1),
                _wire("v1.1.0", "2024-02-01T00:00:00Z", contributors=1),
                _wire("v1.2.0", "2024-03-01T00:00:00Z", contributors=3),
            ],
            "acme/widget",
            METRICS_WIRE,
            now=now,
        )

        ratings = analyzer.compute_ratings()
        assert [r.version for r in ratings] == ["1.2.0", "1.1.0", "1.0.0"]
        assert [r.score for r in ratings] == [30, 10, 10]

    def test_rating_markdown(self, now):
        analyzer = ReleaseAnalyzer(
            [_wire("v1.0.0", "2024-01-05T00:00:00Z", contributors=1)],
            "acme/widget",
            METRICS_WIRE,
            now=now,
        )
        markdown = analyzer.generate_rating_markdown()

        assert markdown.startswith("# acme/widget Release Ratings")
        assert "### Version 1.0.0 (January 5, 2024)" in markdown
        assert "- Overall Score: 10" in markdown


class TestFeatureStory:
    def test_duplicate_versions_keep_latest_release(self, now):
        analyzer = ReleaseAnalyzer(
            [
                _wire("v1.0.0", "2024-01-01T00:00:00Z", body="## Features\n- Old"),
                _wire("release-1.0.0", "2024-01-10T00:00:00Z", body="## Features\n- New"),
            ],
            "acme/widget",
            METRICS_WIRE,
            now=now,
        )

        (story,) = analyzer.compute_feature_story()
        assert story.major_features == ["New"]
        assert story.date == "January 10, 2024"

    def test_numeric_version_order(self, now):
        analyzer = ReleaseAnalyzer(
            [
                _wire("v2.10", "2024-01-01T00:00:00Z"),
                _wire("v2.9", "2024-02-01T00:00:00Z"),
                _wire("v10.0", "2023-01-01T00:00:00Z"),
            ],
            "acme/widget",
            METRICS_WIRE,
            now=now,
        )
        versions = [story.version for story in analyzer.compute_feature_story()]
        assert versions == ["10.0", "2.10", "2.9"]

    def test_plus_changes_are_features(self, now):
        analyzer = ReleaseAnalyzer(
            [
                _wire(
                    "v3.0.0",
                    "2024-05-01T00:00:00Z",
                    body=(
                        "## Features\n- Streaming\n### Bug Fixes\n- Crash\n\n"
                        "Plus everything else:\n- Tweaks\n"
                    ),
                )
            ],
            "acme/widget",
            METRICS_WIRE,
            now=now,
        )
        (story,) = analyzer.compute_feature_story()
        assert story.major_features == ["Streaming", "Tweaks"]


class TestValidation:
    def test_releases_must_be_a_list(self, now):
        with pytest.raises(ValidationError, match="must be a list"):
            ReleaseAnalyzer("not a list", "acme/widget", METRICS_WIRE, now=now)

    def test_malformed_release(self, now):
        with pytest.raises(ValidationError, match="createdAt"):
            ReleaseAnalyzer([{"tagName": "v1"}], "acme/widget", METRICS_WIRE, now=now)

    def test_release_of_wrong_type(self, now):
        with pytest.raises(ValidationError, match="Release #0"):
            ReleaseAnalyzer([42], "acme/widget", METRICS_WIRE, now=now)

    def test_malformed_metrics(self, now):
        with pytest.raises(ValidationError):
            ReleaseAnalyzer([], "acme/widget", {"codeQuality": {}}, now=now)

    def test_naive_release_timestamps_are_utc(self, now):
        releases = [
            ReleaseNote(
                "v1.0.0",
                None,
                None,
                datetime(2024, 5, 1),
                "u",
                [],
                [Contributor("a", 1)],
            ),
            ReleaseNote(
                "v1.1.0",
                None,
                None,
                datetime(2024, 5, 10, tzinfo=timezone.utc),
                "u",
                [],
                [Contributor("b", 1)],
            ),
        ]
        analyzer = ReleaseAnalyzer(releases, "acme/widget", METRICS_WIRE, now=now)

        assert [r.tag_name for r in analyzer.releases] == ["v1.1.0", "v1.0.0"]
        assert all(r.created_at.tzinfo is not None for r in analyzer.releases)
        analysis = analyzer.analyze_comprehensively()
        assert analysis.evolution.development_velocity.release_frequency == 2 / 6

    def test_release_with_invalid_timestamp(self, now):
        release = ReleaseNote("v1.0.0", None, None, None, "u", [], [])
        with pytest.raises(ValidationError, match="Invalid timestamp"):
            ReleaseAnalyzer([release], "acme/widget", METRICS_WIRE, now=now)


def test_comprehensive_analysis(now, repo_metrics):
    analyzer = ReleaseAnalyzer(
        [
            _wire("v1.1.0", "2024-05-01T00:00:00Z", body="## Features\n- Add API", contributors=2),
            _wire("v1.0.0", "2024-04-01T00:00:00Z", body="documentation", contributors=1),
        ],
        "acme/widget",
        repo_metrics,
        now=now,
    )
    analysis = analyzer.analyze_comprehensively()

    assert isinstance(analysis, ComprehensiveAnalysis)
    assert len(analysis.ratings) == 2
    assert len(analysis.feature_story) == 2
    assert analysis.evolution.focus_areas[0].category == "API"
    assert analysis.opportunities[0].priority >= analysis.opportunities[-1].priority
    assert all(0.0 <= value <= 1.0 for value in analysis.maturity)
    assert set(analysis.community.contributor_demographics.experience_level) == {
        "user0",
        "user1",
    }


def test_empty_release_list(now, repo_metrics):
    analysis = ReleaseAnalyzer([], "acme/widget", repo_metrics, now=now).analyze_comprehensively()
    assert analysis.ratings == []
    assert analysis.feature_story == []
    assert analysis.evolution.community_engagement.contributor_growth == 0.0
