"""
Tests for release body parsing.
"""

import pytest

from release_lens.sections import (
    clean_bullet_point,
    extract_breaking_changes,
    extract_deprecations,
    extract_features,
    extract_plus_changes,
    extract_sections,
    extract_version,
)


class TestExtractVersion:
    @pytest.mark.parametrize(
        "tag, expected",
        [
            ("v1.0.0", "1.0.0"),
            ("1.2.3", "1.2.3"),
            ("v2.0", "2.0"),
            ("v3", "3"),
            ("release-2.3", "2.3"),
            ("v1.2.3-beta.1", "1.2.3"),
        ],
    )
    def test_extracts_numeric_version(self, tag, expected):
        assert extract_version(tag) == expected

    def test_tag_without_number_is_returned_unchanged(self):
        assert extract_version("nightly") == "nightly"


class TestCleanBulletPoint:
    def test_strips_marker_and_collapses_whitespace(self):
        assert clean_bullet_point("-   Added   new\tparser  ") == "Added new parser"

    def test_star_marker(self):
        assert clean_bullet_point("* Faster startup") == "Faster startup"


class TestExtractFeatures:
    def test_none_body(self):
        assert extract_features(None) == []

    def test_empty_body(self):
        assert extract_features("") == []

    def test_bullets_under_features_heading(self):
        body = "## Features\n- Add streaming API\n- New CLI flag\n"
        assert extract_features(body) == ["Add streaming API", "New CLI flag"]

    def test_heading_match_is_case_insensitive(self):
        body = "### new features\n* Dark mode\n"
        assert extract_features(body) == ["Dark mode"]

    def test_bullet_heading_opens_section(self):
        body = "- Improvements\n- Better caching\n"
        assert extract_features(body) == ["Better caching"]

    def test_exit_heading_closes_section(self):
        body = "## Features\n- Add plugin system\n### Bug Fixes\n- Crash on start\n"
        assert extract_features(body) == ["Add plugin system"]

    def test_excluded_terms_are_filtered(self):
        body = (
            "## Changes\n"
            "- Bugfix for parser\n"
            "- Fixed bug in loader\n"
            "- Deprecated old option\n"
            "- Removed legacy flag\n"
            "- Add retry support\n"
        )
        assert extract_features(body) == ["Add retry support"]

    def test_links_are_filtered(self):
        body = "## Features\n- https://example.com/changelog\n- Add export\n"
        assert extract_features(body) == ["Add export"]

    def test_bullets_outside_section_are_ignored(self):
        body = "- Stray bullet\n## Features\n- Real feature\n"
        assert extract_features(body) == ["Real feature"]

    def test_breaking_bullets_are_not_features(self):
        body = "### Breaking Changes\n- Removed legacy API\n"
        assert extract_features(body) == []


class TestExtractBreakingChanges:
    def test_none_body(self):
        assert extract_breaking_changes(None) == []

    def test_bullets_under_breaking_heading(self):
        body = "### Breaking Changes\n- Removed legacy API\n"
        assert extract_breaking_changes(body) == ["Removed legacy API"]

    def test_next_h3_closes_section(self):
        body = "## Breaking\n- Drop Python 3.8\n### Features\n- New thing\n"
        assert extract_breaking_changes(body) == ["Drop Python 3.8"]

    def test_important_changes_heading(self):
        body = "## Important Changes\n* Config file renamed\n"
        assert extract_breaking_changes(body) == ["Config file renamed"]


class TestExtractDeprecations:
    def test_none_body(self):
        assert extract_deprecations(None) == []

    def test_bullets_under_deprecations_heading(self):
        body = "### Deprecations\n- Old client\n- Legacy auth\n"
        assert extract_deprecations(body) == ["Old client", "Legacy auth"]

    def test_bullet_heading_is_not_captured(self):
        body = "- Removed legacy API\n- Old flag\n"
        assert extract_deprecations(body) == ["Old flag"]


class TestExtractPlusChanges:
    def test_none_body(self):
        assert extract_plus_changes(None) == []

    def test_bullets_after_plus_line(self):
        body = "Plus changes from contributors:\n- Faster builds\n- Smaller wheels\n"
        assert extract_plus_changes(body) == ["Faster builds", "Smaller wheels"]

    def test_h2_closes_section(self):
        body = "Plus everything else\n- One\n## Thanks\n- Alice\n"
        assert extract_plus_changes(body) == ["One"]


def test_extract_sections_with_none_body_is_all_empty():
    sections = extract_sections(None)
    assert sections.features == []
    assert sections.breaking_changes == []
    assert sections.deprecations == []
    assert sections.plus_changes == []
