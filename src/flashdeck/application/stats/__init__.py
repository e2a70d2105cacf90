# Application Stats Package
from .metrics_calculator import DeckStats, MetricsCalculator, OverallStats

__all__ = ["MetricsCalculator", "DeckStats", "OverallStats"]
