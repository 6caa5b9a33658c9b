# Route generation package
from .response_builder import ResponseBuilderService
from .scheduler import CandidateScheduler, build_candidates, eligible_bearings
from .selector import SelectionPolicy, backfill, categorize, select_best_routes, select_categories
from .throttle import PacedExecutor

__all__ = [
    "CandidateScheduler",
    "PacedExecutor",
    "ResponseBuilderService",
    "SelectionPolicy",
    "backfill",
    "build_candidates",
    "categorize",
    "eligible_bearings",
    "select_best_routes",
    "select_categories",
]
