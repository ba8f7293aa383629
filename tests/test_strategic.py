"""
Tests for strategic insight generation and ranking.
"""

import pytest

from release_lens.analyzers.strategic import (
    StrategicInsightAnalyzer,
    calculate_actionability_score,
    calculate_impact_score,
    prioritize_insights,
)
from release_lens.models import (
    CommunityEngagement,
    DevelopmentVelocity,
    FocusArea,
    ProjectEvolutionMetrics,
    ProjectMaturityIndicators,
    StrategicInsight,
)


def _evolution(release=2.0, features=5.0, breaking=0.0, focus_areas=None, growth=20.0):
    return ProjectEvolutionMetrics(
        development_velocity=DevelopmentVelocity(release, features, breaking),
        focus_areas=focus_areas or [],
        community_engagement=CommunityEngagement(contributor_growth=growth),
    )


def _maturity(value=0.9):
    return ProjectMaturityIndicators(value, value, value, value, value)


def _observations(insights):
    return [insight.observation for insight in insights]


class TestDevelopmentPatterns:
    def test_healthy_project_has_no_insights(self):
        insights = StrategicInsightAnalyzer().generate_insights(_evolution(), _maturity())
        assert insights == []

    def test_low_release_frequency(self):
        insights = StrategicInsightAnalyzer().analyze_development_patterns(
            _evolution(release=0.5)
        )
        assert _observations(insights) == ["Low release frequency detected"]
        assert insights[0].supporting_data == {
            "currentFrequency": 0.5,
            "recommendedMinimum": 1,
        }

    def test_breaking_change_frequency(self):
        insights = StrategicInsightAnalyzer().analyze_development_patterns(
            _evolution(breaking=1.0)
        )
        assert _observations(insights) == ["High frequency of breaking changes"]


class TestFeatureVelocity:
    def test_low(self):
        insight = StrategicInsightAnalyzer().analyze_feature_velocity(1.0)
        assert insight.observation == "Low feature development velocity"

    def test_high(self):
        insight = StrategicInsightAnalyzer().analyze_feature_velocity(11.0)
        assert insight.observation == "Very high feature velocity"
        assert insight.supporting_data["recommendedMaximum"] == 10

    @pytest.mark.parametrize("velocity", [2.0, 5.0, 10.0])
    def test_within_range(self, velocity):
        assert StrategicInsightAnalyzer().analyze_feature_velocity(velocity) is None


class TestFocusAreas:
    def test_neglected_and_trending(self):
        insights = StrategicInsightAnalyzer().analyze_focus_areas(
            [
                FocusArea("Security", 1, "decreasing"),
                FocusArea("API", 4, "increasing"),
                FocusArea("Testing", 3, "increasing"),
            ]
        )
        assert insights[0].supporting_data == {"neglectedAreas": ["Security"]}
        assert insights[1].supporting_data == {"trendingAreas": ["API"]}

    def test_stable_areas(self):
        areas = [FocusArea("API", 1, "stable")]
        assert StrategicInsightAnalyzer().analyze_focus_areas(areas) == []


class TestGrowthOpportunities:
    def test_all_below_target(self):
        insights = StrategicInsightAnalyzer().identify_growth_opportunities(_maturity(0.1))
        assert _observations(insights) == [
            "Documentation coverage could be improved",
            "Test coverage below recommended threshold",
            "Community health metrics indicate room for improvement",
        ]

    def test_test_coverage_target_is_exclusive(self):
        maturity = _maturity(0.9)._replace(test_coverage=0.8)
        assert StrategicInsightAnalyzer().identify_growth_opportunities(maturity) == []


class TestContributionStrategies:
    def test_barriers_and_maintenance(self):
        insights = StrategicInsightAnalyzer().generate_contribution_strategies(
            _evolution(growth=0.0), _maturity(0.5)
        )
        assert _observations(insights) == [
            "Potential barriers to contribution identified",
            "Maintenance attention needed",
        ]

    def test_growth_removes_barrier_insight(self):
        insights = StrategicInsightAnalyzer().generate_contribution_strategies(
            _evolution(growth=15.0), _maturity(0.65)
        )
        assert insights == []


class TestScoring:
    def test_impact_score(self):
        insight = StrategicInsight(
            observation="Critical gap",
            impact="Hurts adoption and trust",
            recommended_actions=[],
            supporting_data={"x": 1},
        )
        assert calculate_impact_score(insight) == pytest.approx(1.0)

    def test_impact_score_without_data(self):
        insight = StrategicInsight("Plain", "Minor", [], {})
        assert calculate_impact_score(insight) == 0.0

    def test_actionability_score(self):
        insight = StrategicInsight(
            "Obs",
            "Impact",
            ["Set up automated checks", "Consider a rewrite", "Write more"],
            {},
        )
        # 3 * 0.1 + 0.3 (automated) - 0.1 (consider)
        assert calculate_actionability_score(insight) == pytest.approx(0.5)

    def test_actionability_score_is_bounded(self):
        insight = StrategicInsight("Obs", "Impact", ["Review it", "Evaluate it"], {})
        assert calculate_actionability_score(insight) == 0.0

    def test_prioritize_is_descending_and_stable(self):
        first = StrategicInsight("First", "Minor", ["Write"], {})
        second = StrategicInsight("Second", "Minor", ["Write"], {})
        urgent = StrategicInsight(
            "Security gap", "Risk and exposure", ["Add automated scans"], {"n": 1}
        )
        ranked = prioritize_insights([first, second, urgent])
        assert _observations(ranked) == ["Security gap", "First", "Second"]
