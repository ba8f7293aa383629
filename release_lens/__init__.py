"""
Release Lens - analytics over the GitHub release history of a repository.
"""

from release_lens.core import ReleaseAnalyzer
from release_lens.models import ReleaseNote, RepositoryMetrics, ValidationError

__version__ = "0.1.0"

__all__ = ["ReleaseAnalyzer", "ReleaseNote", "RepositoryMetrics", "ValidationError"]
