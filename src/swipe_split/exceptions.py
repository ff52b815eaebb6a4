"""Custom exceptions for SwipeSplit."""


class SwipeSplitError(Exception):
    """Base exception for all SwipeSplit errors."""

    pass


class ConfigurationError(SwipeSplitError):
    """Raised when configuration is invalid or missing."""

    pass


class StatementReadError(SwipeSplitError):
    """Raised when a bank statement file cannot be read."""

    pass


class InvalidTransitionError(SwipeSplitError):
    """Raised when a session action is not allowed in the current stage."""

    def __init__(self, stage: str, action: str, message: str | None = None):
        self.stage = stage
        self.action = action
        super().__init__(message or f"Cannot {action} while in the '{stage}' stage")


class InvalidDecisionError(SwipeSplitError):
    """Raised when a decision tag is not one of the recognized categories."""

    def __init__(self, tag: object):
        self.tag = tag
        super().__init__(
            f"Unknown decision {tag!r}; expected one of personal, split50, split"
        )
