"""Contribution opportunity discovery."""

from typing import NamedTuple, Sequence

from release_lens.models import (
    ContributionOpportunity,
    ProjectEvolutionMetrics,
    ReleaseNote,
)
from release_lens.trend import TrendDirection

COMPLEXITY_LOW = 3
COMPLEXITY_MEDIUM = 6
COMPLEXITY_HIGH = 9

RELEASE_MANAGEMENT_SEVERITY = 8
FOCUS_AREA_SEVERITY = 7
COMMUNITY_GROWTH_SEVERITY = 9
UNDERSERVED_AREA_PRIORITY = 5

MIN_RELEASES_PER_MONTH = 1
MIN_FOCUS_AREA_FREQUENCY = 2
MIN_CONTRIBUTOR_GROWTH = 5  # percent

OPPORTUNITY_TYPES = {
    "Documentation": "documentation",
    "Testing": "improvement",
    "Performance": "improvement",
    "Bug Fixes": "bugfix",
    "Feature Requests": "feature",
}

OPPORTUNITY_COMPLEXITY = {
    "Documentation": COMPLEXITY_LOW,
    "Testing": COMPLEXITY_MEDIUM,
    "Performance": COMPLEXITY_HIGH,
    "Bug Fixes": COMPLEXITY_MEDIUM,
    "Feature Requests": COMPLEXITY_HIGH,
}

OPPORTUNITY_SKILLS = {
    "Documentation": ["Technical Writing", "Markdown"],
    "Testing": ["Unit Testing", "Test Frameworks", "Code Coverage Tools"],
    "Performance": ["Performance Optimization", "Profiling Tools", "Algorithms"],
    "Bug Fixes": ["Debugging", "Problem Solving", "Code Review"],
    "Feature Requests": ["Software Design", "Full Stack Development"],
}

DEFAULT_OPPORTUNITY_TYPE = "improvement"
DEFAULT_SKILLS = ["General Development"]

GAP_INSIGHT = (
    "This area shows significant gaps in recent project history and needs attention."
)
UNDERSERVED_INSIGHT = "This area has been identified as underserved in recent releases."


class ProjectGap(NamedTuple):
    area: str
    severity: int


class ContributionOpportunityAnalyzer:
    """Turns evolution gaps and underserved topics into ranked opportunities."""

    def identify_opportunities(
        self,
        evolution: ProjectEvolutionMetrics,
        releases: Sequence[ReleaseNote],
    ) -> list[ContributionOpportunity]:
        gaps = self.analyze_project_gaps(evolution)
        underserved = self.identify_underserved_areas(releases)

        opportunities = [
            self._create_opportunity(gap.area, gap.severity, GAP_INSIGHT)
            for gap in gaps
        ]
        opportunities.extend(
            self._create_opportunity(area, UNDERSERVED_AREA_PRIORITY, UNDERSERVED_INSIGHT)
            for area in underserved
        )

        return prioritize_opportunities(opportunities)

    def analyze_project_gaps(self, metrics: ProjectEvolutionMetrics) -> list[ProjectGap]:
        gaps = []

        if metrics.development_velocity.release_frequency < MIN_RELEASES_PER_MONTH:
            gaps.append(ProjectGap("Release Management", RELEASE_MANAGEMENT_SEVERITY))

        for area in metrics.focus_areas:
            if (
                area.frequency < MIN_FOCUS_AREA_FREQUENCY
                and area.trend != TrendDirection.INCREASING.value
            ):
                gaps.append(ProjectGap(area.category, FOCUS_AREA_SEVERITY))

        if metrics.community_engagement.contributor_growth < MIN_CONTRIBUTOR_GROWTH:
            gaps.append(ProjectGap("Community Growth", COMMUNITY_GROWTH_SEVERITY))

        return gaps

    def identify_underserved_areas(self, releases: Sequence[ReleaseNote]) -> list[str]:
        """
        Topics missing from at least one release body.

        A topic is flagged on the first release that does not mention it, so
        it stays unflagged only when every release mentions it.
        """
        areas: list[str] = []

        def flag(area: str) -> None:
            if area not in areas:
                areas.append(area)

        for release in releases:
            body = release.body or ""
            if "documentation" not in body:
                flag("Documentation")
            if "test" not in body:
                flag("Testing")
            if "performance" not in body.lower():
                flag("Performance")

        return areas

    def _create_opportunity(
        self, area: str, priority: int, insight: str
    ) -> ContributionOpportunity:
        return ContributionOpportunity(
            area=area,
            type=OPPORTUNITY_TYPES.get(area, DEFAULT_OPPORTUNITY_TYPE),
            complexity=OPPORTUNITY_COMPLEXITY.get(area, COMPLEXITY_MEDIUM),
            priority=priority,
            relevant_skills=list(OPPORTUNITY_SKILLS.get(area, DEFAULT_SKILLS)),
            related_issues=[],
            contextual_insights=insight,
        )


def prioritize_opportunities(
    opportunities: Sequence[ContributionOpportunity],
) -> list[ContributionOpportunity]:
    """Order by priority (highest first), then simplest first."""
    return sorted(opportunities, key=lambda o: (-o.priority, o.complexity))
