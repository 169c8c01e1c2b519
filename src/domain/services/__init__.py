"""Domain services - Business logic that doesn't fit in entities."""

from src.domain.services.downtime_matcher import DowntimeMatcher
from src.domain.services.error_budget_calculator import ErrorBudgetCalculator

__all__ = [
    "DowntimeMatcher",
    "ErrorBudgetCalculator",
]
