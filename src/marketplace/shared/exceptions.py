"""Domain-specific exceptions shared across the marketplace aggregates."""

from protean.exceptions import ValidationError


class IllegalTransitionError(ValidationError):
    """Raised when an order is asked to move to a status it cannot reach.

    Subclasses Protean's ``ValidationError`` so callers that only care about
    "the request was refused" can catch the parent, while the API layer maps
    this one to a conflict response.
    """

    def __init__(self, current, target):
        self.current = current
        self.target = target
        super().__init__({"status": [f"Cannot transition from {current} to {target}"]})
