"""
Price conversion logic.

Framework-agnostic: no HTTP here. The provider lookups live in
infrastructure.geo and use best_effort to degrade to defaults.
"""

from .conversion import best_effort, convert_price, round_half_away_from_zero

__all__ = ["best_effort", "convert_price", "round_half_away_from_zero"]
