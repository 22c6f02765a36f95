from src.models.curve import Curve, ScoredCurve, SortMode, Tier

__all__ = [
    "Curve",
    "ScoredCurve",
    "SortMode",
    "Tier",
]
