"""Download plan errors."""


class PlanEditError(Exception):
    """Raised when an edit cannot be applied to a download plan."""
