"""Strategic insight generation and ranking."""

from typing import Any

from release_lens.models import (
    FocusArea,
    ProjectEvolutionMetrics,
    ProjectMaturityIndicators,
    StrategicInsight,
)
from release_lens.trend import TrendDirection

# Thresholds that trigger insights
MIN_RELEASE_FREQUENCY = 1
MIN_FEATURE_VELOCITY = 2
MAX_FEATURE_VELOCITY = 10
MAX_BREAKING_CHANGE_FREQUENCY = 0.5
NEGLECTED_AREA_MAX_FREQUENCY = 2
TRENDING_AREA_MIN_FREQUENCY = 3
DOCUMENTATION_TARGET = 0.7
TEST_COVERAGE_TARGET = 0.8
COMMUNITY_HEALTH_TARGET = 0.6
BARRIER_HEALTH_THRESHOLD = 0.7
BARRIER_GROWTH_THRESHOLD = 10
MAINTENANCE_TARGET = 0.6

CRITICAL_TERMS = ("security", "stability", "breaking", "critical")
AUTOMATION_TERMS = ("automat", "tool", "ci", "script")
VAGUE_TERMS = ("consider", "evaluate", "review")


def _insight(
    observation: str,
    impact: str,
    actions: list[str],
    supporting_data: dict[str, Any],
) -> StrategicInsight:
    return StrategicInsight(
        observation=observation,
        impact=impact,
        recommended_actions=actions,
        supporting_data=supporting_data,
    )


class StrategicInsightAnalyzer:
    """Synthesizes evolution and maturity metrics into ranked insights."""

    def generate_insights(
        self,
        evolution: ProjectEvolutionMetrics,
        maturity: ProjectMaturityIndicators,
    ) -> list[StrategicInsight]:
        insights: list[StrategicInsight] = []
        insights.extend(self.analyze_development_patterns(evolution))
        insights.extend(self.identify_growth_opportunities(maturity))
        insights.extend(self.generate_contribution_strategies(evolution, maturity))
        return prioritize_insights(insights)

    def analyze_development_patterns(
        self, metrics: ProjectEvolutionMetrics
    ) -> list[StrategicInsight]:
        velocity = metrics.development_velocity
        insights = []

        if velocity.release_frequency < MIN_RELEASE_FREQUENCY:
            insights.append(
                _insight(
                    "Low release frequency detected",
                    "May indicate development bottlenecks or integration challenges",
                    [
                        "Consider implementing automated release processes",
                        "Break down large changes into smaller, more manageable releases",
                        "Establish regular release schedule with smaller increments",
                    ],
                    {
                        "currentFrequency": velocity.release_frequency,
                        "recommendedMinimum": MIN_RELEASE_FREQUENCY,
                    },
                )
            )

        feature_insight = self.analyze_feature_velocity(velocity.feature_velocity)
        if feature_insight:
            insights.append(feature_insight)

        if velocity.breaking_change_frequency > MAX_BREAKING_CHANGE_FREQUENCY:
            insights.append(
                _insight(
                    "High frequency of breaking changes",
                    "May discourage adoption and create upgrade barriers for users",
                    [
                        "Implement more comprehensive API versioning",
                        "Provide better migration guides and tools",
                        "Consider longer deprecation cycles",
                    ],
                    {
                        "breakingChangeFrequency": velocity.breaking_change_frequency,
                        "threshold": MAX_BREAKING_CHANGE_FREQUENCY,
                    },
                )
            )

        insights.extend(self.analyze_focus_areas(metrics.focus_areas))
        return insights

    def analyze_feature_velocity(self, feature_velocity: float) -> StrategicInsight | None:
        if feature_velocity < MIN_FEATURE_VELOCITY:
            return _insight(
                "Low feature development velocity",
                "Project may be losing momentum or facing resource constraints",
                [
                    "Review and streamline feature development process",
                    "Consider increasing community engagement for feature contributions",
                    "Evaluate resource allocation and priorities",
                ],
                {
                    "currentVelocity": feature_velocity,
                    "recommendedMinimum": MIN_FEATURE_VELOCITY,
                },
            )

        if feature_velocity > MAX_FEATURE_VELOCITY:
            return _insight(
                "Very high feature velocity",
                "Rapid development may impact stability and maintenance",
                [
                    "Ensure adequate testing coverage for new features",
                    "Balance feature development with stability improvements",
                    "Consider impact on documentation and maintenance",
                ],
                {
                    "currentVelocity": feature_velocity,
                    "recommendedMaximum": MAX_FEATURE_VELOCITY,
                },
            )

        return None

    def analyze_focus_areas(self, focus_areas: list[FocusArea]) -> list[StrategicInsight]:
        insights = []

        neglected = [
            area.category
            for area in focus_areas
            if area.frequency < NEGLECTED_AREA_MAX_FREQUENCY
            and area.trend == TrendDirection.DECREASING.value
        ]
        if neglected:
            insights.append(
                _insight(
                    "Some important areas are receiving decreased attention",
                    "May create technical debt or user experience gaps",
                    [
                        "Review resource allocation across different areas",
                        "Create dedicated maintenance schedules for neglected areas",
                        "Consider recruiting contributors with specific expertise",
                    ],
                    {"neglectedAreas": neglected},
                )
            )

        trending = [
            area.category
            for area in focus_areas
            if area.trend == TrendDirection.INCREASING.value
            and area.frequency > TRENDING_AREA_MIN_FREQUENCY
        ]
        if trending:
            insights.append(
                _insight(
                    "Strong focus on specific development areas",
                    "Indicates project direction and potential specialization",
                    [
                        "Document best practices in these areas",
                        "Consider creating specialized working groups",
                        "Leverage expertise to attract more contributors",
                    ],
                    {"trendingAreas": trending},
                )
            )

        return insights

    def identify_growth_opportunities(
        self, maturity: ProjectMaturityIndicators
    ) -> list[StrategicInsight]:
        insights = []

        if maturity.documentation_completeness < DOCUMENTATION_TARGET:
            insights.append(
                _insight(
                    "Documentation coverage could be improved",
                    "May hinder new contributor onboarding and user adoption",
                    [
                        "Create a documentation improvement plan",
                        "Add more code examples and tutorials",
                        "Implement documentation review in PR process",
                    ],
                    {
                        "currentCoverage": maturity.documentation_completeness,
                        "target": DOCUMENTATION_TARGET,
                    },
                )
            )

        if maturity.test_coverage < TEST_COVERAGE_TARGET:
            insights.append(
                _insight(
                    "Test coverage below recommended threshold",
                    "May lead to reliability issues and harder maintenance",
                    [
                        "Set up coverage reporting in CI pipeline",
                        "Create testing guidelines for contributors",
                        "Prioritize tests for critical components",
                    ],
                    {
                        "currentCoverage": maturity.test_coverage,
                        "target": TEST_COVERAGE_TARGET,
                    },
                )
            )

        if maturity.community_health < COMMUNITY_HEALTH_TARGET:
            insights.append(
                _insight(
                    "Community health metrics indicate room for improvement",
                    "May affect project sustainability and growth",
                    [
                        "Implement mentorship programs",
                        "Create more good first issues",
                        "Improve response time to community contributions",
                    ],
                    {
                        "healthScore": maturity.community_health,
                        "target": COMMUNITY_HEALTH_TARGET,
                    },
                )
            )

        return insights

    def generate_contribution_strategies(
        self,
        evolution: ProjectEvolutionMetrics,
        maturity: ProjectMaturityIndicators,
    ) -> list[StrategicInsight]:
        insights = []
        growth = evolution.community_engagement.contributor_growth

        if (
            maturity.community_health < BARRIER_HEALTH_THRESHOLD
            and growth < BARRIER_GROWTH_THRESHOLD
        ):
            insights.append(
                _insight(
                    "Potential barriers to contribution identified",
                    "Limiting project growth and community expansion",
                    [
                        "Streamline contribution process",
                        "Create better contributing guidelines",
                        "Set up automated checks for common issues",
                    ],
                    {
                        "communityHealth": maturity.community_health,
                        "contributorGrowth": growth,
                    },
                )
            )

        if maturity.maintenance_level < MAINTENANCE_TARGET:
            insights.append(
                _insight(
                    "Maintenance attention needed",
                    "May accumulate technical debt and reduce project quality",
                    [
                        "Schedule regular maintenance sprints",
                        "Create maintenance-focused contributor roles",
                        "Implement automated maintenance checks",
                    ],
                    {
                        "maintenanceLevel": maturity.maintenance_level,
                        "target": MAINTENANCE_TARGET,
                    },
                )
            )

        return insights


def calculate_impact_score(insight: StrategicInsight) -> float:
    score = 0.0

    # Quantified insights rank higher
    if insight.supporting_data:
        score += 0.3

    # Impacts spanning several areas
    if " and " in insight.impact:
        score += 0.2

    text = f"{insight.observation} {insight.impact}".lower()
    if any(term in text for term in CRITICAL_TERMS):
        score += 0.5

    return score


def calculate_actionability_score(insight: StrategicInsight) -> float:
    actions = [action.lower() for action in insight.recommended_actions]

    score = min(0.5, len(actions) * 0.1)
    score += 0.3 * sum(
        1 for action in actions if any(term in action for term in AUTOMATION_TERMS)
    )
    score -= 0.1 * sum(
        1 for action in actions if any(term in action for term in VAGUE_TERMS)
    )

    return max(0.0, min(1.0, score))


def prioritize_insights(insights: list[StrategicInsight]) -> list[StrategicInsight]:
    """Sort by the mean of impact and actionability, highest first."""
    return sorted(
        insights,
        key=lambda insight: (
            calculate_impact_score(insight) + calculate_actionability_score(insight)
        )
        / 2,
        reverse=True,
    )
