"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.

Callers distinguish malformed input (ValidationError) from a well-formed
request that the current state of an aggregate refuses (StateError,
ConflictError).
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """Input is malformed: blank or oversized strings, negative amounts, bad codes."""


class StateError(DomainException):
    """The aggregate is not in a state that allows the requested operation."""


class ConflictError(DomainException):
    """The request conflicts with current stock or an existing record."""


class ConcurrencyError(ConflictError):
    """The aggregate was modified by someone else since it was loaded."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""
