"""
Markdown rendering and report files for Release Lens.
"""

import json
from pathlib import Path
from typing import Any, Sequence

from release_lens.models import (
    ComprehensiveAnalysis,
    FeatureStory,
    ReleaseNote,
    ReleaseRating,
    format_long_date,
    release_to_dict,
    to_serializable,
)

NO_CHANGES_NOTE = "*No major changes documented for this version.*"
NO_DESCRIPTION = "No description provided."


def render_rating_markdown(repo_name: str, ratings: Sequence[ReleaseRating]) -> str:
    """Render release ratings as a markdown document."""
    lines = [
        f"# {repo_name} Release Ratings",
        "",
        "This document presents release ratings based on community engagement "
        "metrics (contributors and reactions).",
        "",
        "## Rating Methodology",
        "- Each contributor adds 10 points to the release score",
        "- Each reaction adds 5 points to the release score",
        "",
        "## Release Ratings",
        "",
    ]

    for rating in ratings:
        lines.extend(
            [
                f"### Version {rating.version} ({rating.date})",
                f"- Overall Score: {rating.score}",
                f"- Contributors: {rating.contributor_count}",
                f"- Reactions: {rating.reaction_count}",
                "",
            ]
        )

    return "\n".join(lines) + "\n"


def _render_section(title: str, items: Sequence[str]) -> list[str]:
    if not items:
        return []
    return [f"### {title}", *(f"- {item}" for item in items), ""]


def render_feature_story_markdown(
    repo_name: str, stories: Sequence[FeatureStory]
) -> str:
    """Render the feature story as a markdown document, newest version first."""
    lines = [
        f"# {repo_name} Evolution: A Feature Story",
        "",
        f"This document presents a chronological story of {repo_name}'s evolution, "
        "highlighting major features, breaking changes, and deprecations across versions.",
        "",
    ]

    for story in stories:
        lines.extend([f"## Version {story.version} ({story.date})", ""])
        lines.extend(
            _render_section("Major Features & Improvements", story.major_features)
        )
        lines.extend(_render_section("Breaking Changes", story.breaking_changes))
        lines.extend(_render_section("Deprecations & Removals", story.deprecations))

        if not (story.major_features or story.breaking_changes or story.deprecations):
            lines.extend([NO_CHANGES_NOTE, ""])

    return "\n".join(lines) + "\n"


def render_release_markdown(releases: Sequence[ReleaseNote]) -> str:
    """Render the raw release list for human reading."""
    blocks = []
    for release in releases:
        reaction_count = sum(r.total_count for r in release.reactions)
        blocks.append(
            f"# {release.name or release.tag_name}\n\n"
            f"**Tag:** {release.tag_name}\n"
            f"**Created:** {format_long_date(release.created_at)}\n"
            f"**URL:** {release.url}\n"
            f"**Contributors:** {len(release.contributors)}\n"
            f"**Reactions:** {reaction_count}\n\n"
            f"{release.body or NO_DESCRIPTION}\n\n"
            "---\n"
        )
    return "\n".join(blocks)


def _write_json(path: Path, data: Any) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)


def write_reports(
    owner: str,
    repo: str,
    releases: Sequence[ReleaseNote],
    analysis: ComprehensiveAnalysis,
    rating_markdown: str,
    feature_story_markdown: str,
    output_dir: Path,
) -> dict[str, Path]:
    """
    Write every report for one repository.

    Returns:
        Mapping of report kind to the written file path.
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    prefix = f"{owner}-{repo}"

    paths = {
        "releases_json": output_dir / f"{prefix}-releases.json",
        "releases_markdown": output_dir / f"{prefix}-releases.md",
        "feature_story": output_dir / f"{prefix}-feature-story.md",
        "ratings": output_dir / f"{prefix}-ratings.md",
        "analysis": output_dir / f"{prefix}-analysis.json",
    }

    _write_json(paths["releases_json"], [release_to_dict(r) for r in releases])
    paths["releases_markdown"].write_text(
        render_release_markdown(releases), encoding="utf-8"
    )
    paths["feature_story"].write_text(feature_story_markdown, encoding="utf-8")
    paths["ratings"].write_text(rating_markdown, encoding="utf-8")
    _write_json(paths["analysis"], to_serializable(analysis))

    return paths
