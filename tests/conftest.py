"""
Shared fixtures for Release Lens tests.
"""

from datetime import datetime, timedelta, timezone

import pytest

from release_lens.models import (
    ActivityMetrics,
    CodeQuality,
    Contributor,
    Reaction,
    ReleaseNote,
    RepositoryMetrics,
)

NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def make_release():
    """Factory for releases created a number of days before NOW."""

    def _make(
        tag_name="v1.0.0",
        body=None,
        days_ago=1,
        contributors=None,
        reactions=None,
        name=None,
    ):
        return ReleaseNote(
            tag_name=tag_name,
            name=name,
            body=body,
            created_at=NOW - timedelta(days=days_ago),
            url=f"https://github.com/acme/widget/releases/tag/{tag_name}",
            reactions=[Reaction(kind, count) for kind, count in (reactions or [])],
            contributors=[
                Contributor(login, count) for login, count in (contributors or [])
            ],
        )

    return _make


@pytest.fixture
def repo_metrics():
    return RepositoryMetrics(
        code_quality=CodeQuality(test_coverage=0.5, documentation_ratio=0.4),
        activity_metrics=ActivityMetrics(commit_frequency=5.0, issue_velocity=3.0),
    )
