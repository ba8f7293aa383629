"""
Data structures for Release Lens.

Release records arrive in the camelCase shape produced by the GitHub fetcher
(or loaded back from a saved JSON file) and are converted into immutable
NamedTuples before any analysis runs.
"""

import math
from datetime import datetime, timezone
from typing import Any, NamedTuple


class ValidationError(ValueError):
    """Raised when release data or repository metrics are structurally invalid."""

    pass


# --- Input Records ---


class Reaction(NamedTuple):
    """Reaction totals for one reaction kind on a release."""

    type: str
    total_count: int


class Contributor(NamedTuple):
    """Commit author within a release's commit range."""

    login: str
    contributions: int


class ReleaseNote(NamedTuple):
    """A single published release."""

    tag_name: str
    name: str | None
    body: str | None
    created_at: datetime
    url: str
    reactions: list[Reaction]
    contributors: list[Contributor]


class CodeQuality(NamedTuple):
    test_coverage: float
    documentation_ratio: float


class ActivityMetrics(NamedTuple):
    commit_frequency: float
    issue_velocity: float


class RepositoryMetrics(NamedTuple):
    """Externally supplied snapshot of repository health ratios."""

    code_quality: CodeQuality
    activity_metrics: ActivityMetrics


# --- Derived Records ---


class ReleaseRating(NamedTuple):
    """Engagement score of one release."""

    version: str
    score: int
    contributor_count: int
    reaction_count: int
    date: str


class FeatureStory(NamedTuple):
    """Changes documented for one version."""

    version: str
    date: str
    major_features: list[str]
    breaking_changes: list[str]
    deprecations: list[str]


class DevelopmentVelocity(NamedTuple):
    release_frequency: float  # releases per 30 days
    feature_velocity: float  # features per 30 days
    breaking_change_frequency: float  # breaking changes per 30 days


class FocusArea(NamedTuple):
    category: str
    frequency: int
    trend: str  # "increasing", "stable", "decreasing"


class CommunityEngagement(NamedTuple):
    contributor_growth: float  # compound growth in percent
    issue_resolution_time: float = 0
    pr_merge_rate: float = 0


class ProjectEvolutionMetrics(NamedTuple):
    development_velocity: DevelopmentVelocity
    focus_areas: list[FocusArea]
    community_engagement: CommunityEngagement


class ProjectMaturityIndicators(NamedTuple):
    """Maturity scores, each within [0, 1]."""

    codebase_stability: float
    documentation_completeness: float
    test_coverage: float
    community_health: float
    maintenance_level: float


class ContributionOpportunity(NamedTuple):
    """A suggested area where contributors could help."""

    area: str
    type: str  # "documentation", "improvement", "bugfix", "feature"
    complexity: int
    priority: int
    relevant_skills: list[str]
    related_issues: list[str]
    contextual_insights: str = ""


class StrategicInsight(NamedTuple):
    """An observation about the project with recommended actions."""

    observation: str
    impact: str
    recommended_actions: list[str]
    supporting_data: dict[str, Any]


class ContributorDemographics(NamedTuple):
    experience_level: dict[str, str]  # login -> tier
    experience_distribution: dict[str, int]  # tier -> head count
    expertise_areas: dict[str, list[str]]
    activity_patterns: dict[str, float]


class CollaborationPatterns(NamedTuple):
    mentorship: dict[str, list[str]]  # expert login -> novice logins
    code_review_dynamics: dict[str, int]
    knowledge_sharing: list[str]


class CommunityMetrics(NamedTuple):
    contributor_demographics: ContributorDemographics
    collaboration_patterns: CollaborationPatterns


class ComprehensiveAnalysis(NamedTuple):
    """Everything derived from one release list."""

    ratings: list[ReleaseRating]
    feature_story: list[FeatureStory]
    evolution: ProjectEvolutionMetrics
    opportunities: list[ContributionOpportunity]
    maturity: ProjectMaturityIndicators
    insights: list[StrategicInsight]
    community: CommunityMetrics


# --- Parsing & Serialization ---


def parse_timestamp(value: str | datetime) -> datetime:
    """
    Parse an ISO-8601 timestamp into a timezone-aware datetime.

    GitHub returns UTC timestamps with a trailing 'Z'. Naive values are
    assumed to be UTC.

    Raises:
        ValidationError: If the value cannot be parsed.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError as e:
            raise ValidationError(f"Invalid timestamp: {value!r}") from e
    else:
        raise ValidationError(f"Invalid timestamp: {value!r}")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_long_date(value: datetime) -> str:
    """Format a datetime as a long US date, e.g. 'January 5, 2024'."""
    return f"{value.strftime('%B')} {value.day}, {value.year}"


def _require(data: dict[str, Any], key: str, context: str) -> Any:
    if key not in data or data[key] is None:
        raise ValidationError(f"{context}: missing required field '{key}'")
    return data[key]


def _require_number(data: dict[str, Any], key: str, context: str) -> float:
    value = _require(data, key, context)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(
            f"{context}: field '{key}' must be a number, got {type(value).__name__}"
        )
    if not math.isfinite(value):
        raise ValidationError(f"{context}: field '{key}' must be finite, got {value}")
    return value


def release_from_dict(data: dict[str, Any]) -> ReleaseNote:
    """
    Build a ReleaseNote from its camelCase wire representation.

    Raises:
        ValidationError: If a required field is missing or has the wrong type.
    """
    if not isinstance(data, dict):
        raise ValidationError(
            f"Release entry must be an object, got {type(data).__name__}"
        )

    tag_name = _require(data, "tagName", "Release")
    if not isinstance(tag_name, str):
        raise ValidationError("Release: field 'tagName' must be a string")
    context = f"Release {tag_name}"

    body = data.get("body")
    if body is not None and not isinstance(body, str):
        raise ValidationError(f"{context}: field 'body' must be a string or null")

    reactions = []
    for entry in data.get("reactions") or []:
        if not isinstance(entry, dict):
            raise ValidationError(f"{context}: reaction entries must be objects")
        reactions.append(
            Reaction(
                type=str(_require(entry, "type", f"{context} reaction")),
                total_count=int(
                    _require_number(entry, "totalCount", f"{context} reaction")
                ),
            )
        )

    contributors = []
    for entry in data.get("contributors") or []:
        if not isinstance(entry, dict):
            raise ValidationError(f"{context}: contributor entries must be objects")
        contributors.append(
            Contributor(
                login=str(_require(entry, "login", f"{context} contributor")),
                contributions=int(
                    _require_number(entry, "contributions", f"{context} contributor")
                ),
            )
        )

    return ReleaseNote(
        tag_name=tag_name,
        name=data.get("name"),
        body=body,
        created_at=parse_timestamp(_require(data, "createdAt", context)),
        url=data.get("url") or "",
        reactions=reactions,
        contributors=contributors,
    )


def release_to_dict(release: ReleaseNote) -> dict[str, Any]:
    """Convert a ReleaseNote back into its camelCase wire representation."""
    return {
        "tagName": release.tag_name,
        "name": release.name,
        "body": release.body,
        "createdAt": release.created_at.isoformat().replace("+00:00", "Z"),
        "url": release.url,
        "reactions": [
            {"type": r.type, "totalCount": r.total_count} for r in release.reactions
        ],
        "contributors": [
            {"login": c.login, "contributions": c.contributions}
            for c in release.contributors
        ],
    }


def repository_metrics_from_dict(data: dict[str, Any]) -> RepositoryMetrics:
    """
    Build RepositoryMetrics from its camelCase wire representation.

    Raises:
        ValidationError: If a required section or field is missing.
    """
    if not isinstance(data, dict):
        raise ValidationError(
            f"Repository metrics must be an object, got {type(data).__name__}"
        )

    code_quality = _require(data, "codeQuality", "Repository metrics")
    activity = _require(data, "activityMetrics", "Repository metrics")
    if not isinstance(code_quality, dict) or not isinstance(activity, dict):
        raise ValidationError(
            "Repository metrics: 'codeQuality' and 'activityMetrics' must be objects"
        )

    return RepositoryMetrics(
        code_quality=CodeQuality(
            test_coverage=_require_number(code_quality, "testCoverage", "codeQuality"),
            documentation_ratio=_require_number(
                code_quality, "documentationRatio", "codeQuality"
            ),
        ),
        activity_metrics=ActivityMetrics(
            commit_frequency=_require_number(
                activity, "commitFrequency", "activityMetrics"
            ),
            issue_velocity=_require_number(
                activity, "issueVelocity", "activityMetrics"
            ),
        ),
    )


def to_serializable(value: Any) -> Any:
    """Recursively convert NamedTuples and datetimes into JSON-ready data."""
    if isinstance(value, tuple) and hasattr(value, "_asdict"):
        return {key: to_serializable(item) for key, item in value._asdict().items()}
    if isinstance(value, dict):
        return {str(key): to_serializable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_serializable(item) for item in value]
    if isinstance(value, datetime):
        return value.isoformat()
    return value
