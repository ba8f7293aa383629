"""
Release analyzers.

Each analyzer is a pure transformation over an already-fetched release list.
"""

from release_lens.analyzers.community import CommunityAnalyzer
from release_lens.analyzers.contribution import ContributionOpportunityAnalyzer
from release_lens.analyzers.evolution import EvolutionAnalyzer
from release_lens.analyzers.maturity import MaturityAnalyzer
from release_lens.analyzers.strategic import StrategicInsightAnalyzer

__all__ = [
    "CommunityAnalyzer",
    "ContributionOpportunityAnalyzer",
    "EvolutionAnalyzer",
    "MaturityAnalyzer",
    "StrategicInsightAnalyzer",
]
