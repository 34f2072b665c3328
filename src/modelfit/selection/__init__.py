"""Model selection for a resolved GPU."""

from modelfit.selection.policy import SelectionPolicy, SelectionResult

__all__ = ["SelectionPolicy", "SelectionResult"]
