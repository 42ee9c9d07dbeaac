"""Exceptions raised while loading and composing SQL query resources."""

from __future__ import annotations


class QueryError(Exception):
    """Base class for all query loading errors."""


class QueryNotFoundError(QueryError, LookupError):
    """Raised when a resource provider has no resource with the given name.

    Attributes:
        name: The dotted resource name that could not be found.
    """

    def __init__(self, name: str) -> None:
        super().__init__(f"No embedded query for {name}.")
        self.name = name


class CyclicIncludeError(QueryError):
    """Raised when an include directive refers to one of its own ancestors.

    Attributes:
        name: The resource name that was included a second time.
        chain: The resource names being resolved when the cycle was found.
    """

    def __init__(self, name: str, chain: frozenset[str] = frozenset()) -> None:
        super().__init__(f"Recursive embedded query include: {name}")
        self.name = name
        self.chain = chain


class IncludePathError(QueryError, ValueError):
    """Raised when a relative include path climbs above the resource root."""


class PreprocessorError(QueryError, ValueError):
    """Raised for unknown flags or unbalanced preprocessor directives."""


class QueryConfigurationError(QueryError):
    """Raised when a repository has not registered a query prefix."""
