"""
Configuration management for Release Lens.

Settings are read from:
1. .release-lens.toml (local config)
2. pyproject.toml (project-level config, [tool.release-lens])
"""

import os
import tomllib
from pathlib import Path

from dotenv import load_dotenv

from release_lens.models import ActivityMetrics, CodeQuality, RepositoryMetrics

# Load environment variables from .env file
load_dotenv()

# project_root is the working directory the tool runs in
PROJECT_ROOT = Path.cwd()

LOCAL_CONFIG_NAME = ".release-lens.toml"
TOOL_SECTION = "release-lens"

# Global configuration for SSL verification
# Default: True (verify SSL certificates)
# Can be set to False by CLI --insecure flag
VERIFY_SSL = True

# Default output directory for generated reports
DEFAULT_OUTPUT_DIR = Path("release-notes")

# Cache configuration
# Default cache directory: ~/.cache/release-lens
DEFAULT_CACHE_DIR = Path.home() / ".cache" / "release-lens"
# Default TTL: 1 day (in seconds)
DEFAULT_CACHE_TTL = 24 * 60 * 60

# Global cache settings (can be overridden)
_CACHE_DIR: Path | None = None
_CACHE_TTL: int | None = None


def load_config_file(config_path: Path) -> dict:
    """Load a TOML configuration file."""
    if not config_path.exists():
        return {}
    try:
        with open(config_path, "rb") as f:
            return tomllib.load(f)
    except Exception as e:
        raise ValueError(f"Failed to load config from {config_path}: {e}") from e


def get_tool_config() -> dict:
    """
    Return the [tool.release-lens] table.

    Priority:
    1. .release-lens.toml (local config, highest priority)
    2. pyproject.toml (project-level config, fallback)

    Returns:
        The tool configuration, or an empty dict when neither file has one.
    """
    for name in (LOCAL_CONFIG_NAME, "pyproject.toml"):
        config_path = PROJECT_ROOT / name
        if config_path.exists():
            section = load_config_file(config_path).get("tool", {}).get(TOOL_SECTION)
            if section:
                return section
    return {}


def set_verify_ssl(verify: bool) -> None:
    """
    Set the SSL verification setting globally.

    Args:
        verify: Whether to verify SSL certificates.
    """
    global VERIFY_SSL
    VERIFY_SSL = verify


def get_verify_ssl() -> bool:
    return VERIFY_SSL


def get_output_dir() -> Path:
    """
    Get the report output directory.

    Priority:
    1. RELEASE_LENS_OUTPUT_DIR environment variable
    2. output_dir in the tool config
    3. Default: ./release-notes
    """
    env_output_dir = os.getenv("RELEASE_LENS_OUTPUT_DIR")
    if env_output_dir:
        return Path(env_output_dir).expanduser()

    configured = get_tool_config().get("output_dir")
    if configured:
        return Path(configured).expanduser()

    return DEFAULT_OUTPUT_DIR


def get_cache_dir() -> Path:
    """
    Get the cache directory path.

    Priority:
    1. Explicitly set value via set_cache_dir()
    2. RELEASE_LENS_CACHE_DIR environment variable
    3. [cache] directory in the tool config
    4. Default: ~/.cache/release-lens
    """
    if _CACHE_DIR is not None:
        return _CACHE_DIR

    env_cache_dir = os.getenv("RELEASE_LENS_CACHE_DIR")
    if env_cache_dir:
        return Path(env_cache_dir).expanduser()

    cache_config = get_tool_config().get("cache", {})
    if "directory" in cache_config:
        return Path(cache_config["directory"]).expanduser()

    return DEFAULT_CACHE_DIR


def set_cache_dir(path: Path | str) -> None:
    global _CACHE_DIR
    _CACHE_DIR = Path(path).expanduser()


def get_cache_ttl() -> int:
    """
    Get the cache TTL (Time To Live) in seconds.

    Priority:
    1. Explicitly set value via set_cache_ttl()
    2. RELEASE_LENS_CACHE_TTL environment variable
    3. [cache] ttl_seconds in the tool config
    4. Default: 86400 (1 day)
    """
    if _CACHE_TTL is not None:
        return _CACHE_TTL

    env_cache_ttl = os.getenv("RELEASE_LENS_CACHE_TTL")
    if env_cache_ttl:
        try:
            return int(env_cache_ttl)
        except ValueError:
            raise ValueError(
                f"RELEASE_LENS_CACHE_TTL must be an integer, got {env_cache_ttl!r}"
            ) from None

    cache_config = get_tool_config().get("cache", {})
    if "ttl_seconds" in cache_config:
        return int(cache_config["ttl_seconds"])

    return DEFAULT_CACHE_TTL


def set_cache_ttl(seconds: int) -> None:
    global _CACHE_TTL
    _CACHE_TTL = seconds


def is_cache_enabled() -> bool:
    """Cache is enabled unless [cache] enabled = false in the tool config."""
    cache_config = get_tool_config().get("cache", {})
    if "enabled" in cache_config:
        return bool(cache_config["enabled"])
    return True


def get_repository_metrics() -> RepositoryMetrics:
    """
    Static repository metrics snapshot.

    Reads [tool.release-lens.repository-metrics]; every value defaults to 0.0.

    Example:
        [tool.release-lens.repository-metrics]
        test_coverage = 0.82
        documentation_ratio = 0.6
        commit_frequency = 7.5
        issue_velocity = 4.0
    """
    section = get_tool_config().get("repository-metrics", {})

    def value(key: str) -> float:
        raw = section.get(key, 0.0)
        try:
            return float(raw)
        except (TypeError, ValueError):
            raise ValueError(
                f"repository-metrics.{key} must be a number, got {raw!r}"
            ) from None

    return RepositoryMetrics(
        code_quality=CodeQuality(
            test_coverage=value("test_coverage"),
            documentation_ratio=value("documentation_ratio"),
        ),
        activity_metrics=ActivityMetrics(
            commit_frequency=value("commit_frequency"),
            issue_velocity=value("issue_velocity"),
        ),
    )
