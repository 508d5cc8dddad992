"""
Crime weighting strategies for route optimization.
"""

from .proximity_penalty import CrimePenaltyApplier, PenaltyReport, proximity_penalty

__all__ = ['CrimePenaltyApplier', 'PenaltyReport', 'proximity_penalty']
