"""
Cache management for Release Lens.

Stores fetched release lists per repository to avoid refetching reactions and
commits for every release on each run.
"""

import gzip
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from release_lens.config import get_cache_dir, get_cache_ttl

CACHE_SCHEMA_VERSION = "1.0"


def _get_cache_path(owner: str, repo: str) -> Path:
    return get_cache_dir() / f"{owner}__{repo}.json.gz"


def is_cache_valid(entry: dict[str, Any], now: datetime | None = None) -> bool:
    """
    Check if a cache entry is still valid based on TTL and schema version.

    Args:
        entry: Cache entry dict with cache_metadata.
        now: Reference time (defaults to the current UTC time).

    Returns:
        True if the entry is within its TTL and uses the current schema.
    """
    if entry.get("_schema_version") != CACHE_SCHEMA_VERSION:
        return False

    metadata = entry.get("cache_metadata")
    if not metadata or "fetched_at" not in metadata:
        return False

    try:
        fetched_at = datetime.fromisoformat(metadata["fetched_at"])
        ttl_seconds = metadata.get("ttl_seconds", get_cache_ttl())

        # Make fetched_at timezone-aware if it isn't
        if fetched_at.tzinfo is None:
            fetched_at = fetched_at.replace(tzinfo=timezone.utc)

        now = now or datetime.now(timezone.utc)
        return (now - fetched_at).total_seconds() < ttl_seconds
    except (ValueError, TypeError):
        return False


def load_cached_releases(owner: str, repo: str) -> list[dict[str, Any]] | None:
    """
    Load the cached release list of a repository.

    Returns:
        The releases in wire format, or None when missing, expired or corrupted.
    """
    cache_path = _get_cache_path(owner, repo)
    if not cache_path.exists():
        return None

    try:
        with gzip.open(cache_path, "rt", encoding="utf-8") as f:
            entry = json.load(f)
    except (json.JSONDecodeError, OSError):
        # Corrupted cache
        return None

    if not isinstance(entry, dict) or not is_cache_valid(entry):
        return None
    return entry.get("releases")


def save_cached_releases(
    owner: str, repo: str, releases: list[dict[str, Any]]
) -> Path:
    """Save a release list (wire format) to the cache and return its path."""
    cache_dir = get_cache_dir()
    cache_dir.mkdir(parents=True, exist_ok=True)

    entry = {
        "_schema_version": CACHE_SCHEMA_VERSION,
        "repository": f"{owner}/{repo}",
        "cache_metadata": {
            "fetched_at": datetime.now(timezone.utc).isoformat(),
            "ttl_seconds": get_cache_ttl(),
        },
        "releases": releases,
    }

    cache_path = _get_cache_path(owner, repo)
    with gzip.open(cache_path, "wt", encoding="utf-8") as f:
        json.dump(entry, f, ensure_ascii=False)
    return cache_path


def clear_cache(owner: str | None = None, repo: str | None = None) -> int:
    """
    Clear cache files.

    Args:
        owner: Repository owner. Combined with `repo`, clears one repository;
               otherwise all cached repositories are removed.
        repo: Repository name.

    Returns:
        Number of cache files cleared.
    """
    cache_dir = get_cache_dir()
    if not cache_dir.exists():
        return 0

    if owner and repo:
        cache_path = _get_cache_path(owner, repo)
        if cache_path.exists():
            cache_path.unlink()
            return 1
        return 0

    cleared = 0
    for cache_file in cache_dir.glob("*.json.gz"):
        cache_file.unlink()
        cleared += 1
    return cleared


def get_cache_stats() -> dict[str, Any]:
    """
    Get statistics about the cache.

    Returns:
        Dictionary with the cache directory, entry counts and per-repository
        release counts.
    """
    cache_dir = get_cache_dir()
    stats: dict[str, Any] = {
        "cache_dir": str(cache_dir),
        "exists": cache_dir.exists(),
        "total_entries": 0,
        "valid_entries": 0,
        "expired_entries": 0,
        "repositories": {},
    }

    if not cache_dir.exists():
        return stats

    for cache_file in sorted(cache_dir.glob("*.json.gz")):
        try:
            with gzip.open(cache_file, "rt", encoding="utf-8") as f:
                entry = json.load(f)
        except (json.JSONDecodeError, OSError):
            continue
        if not isinstance(entry, dict):
            continue

        stats["total_entries"] += 1
        valid = is_cache_valid(entry)
        if valid:
            stats["valid_entries"] += 1
        else:
            stats["expired_entries"] += 1

        name = entry.get("repository", cache_file.name)
        stats["repositories"][name] = {
            "releases": len(entry.get("releases") or []),
            "valid": valid,
        }

    return stats
