"""
Advice package: suggestion generation, heuristic recommendations and the apply/merge resolver.
"""

from .engine import inspect_facts, InspectionResult
from .suggestions import generate_suggestions
from .heuristics import generate_heuristic_recommendations
from .resolver import apply_advisory

__all__ = [
    "inspect_facts",
    "InspectionResult",
    "generate_suggestions",
    "generate_heuristic_recommendations",
    "apply_advisory",
]
