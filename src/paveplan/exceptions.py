"""Custom exceptions for paveplan."""


class PaveplanError(Exception):
    """Base exception for all paveplan errors."""

    pass


class ValidationError(PaveplanError):
    """Raised when validation fails."""

    pass


class CircularDependencyError(ValidationError):
    """Raised when a circular dependency is detected."""

    pass


class MissingReferenceError(ValidationError):
    """Raised when a referenced task or milestone ID does not exist."""

    pass


class SelfDependencyError(ValidationError):
    """Raised when a task is made to depend on itself."""

    pass


class InvalidIntervalError(ValidationError):
    """Raised when a task ends before it starts."""

    pass


class ParseError(PaveplanError):
    """Raised when YAML parsing fails."""

    pass
