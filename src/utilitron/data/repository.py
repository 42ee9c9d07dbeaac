"""Repository base class for loading SQL queries from resources.

Queries live in ``.sql`` resources named after the repository's registered
query prefix. For a repository declaring::

    class BananaRepository(Repository):
        query_prefix = "Utilitron.Example.BananaRepositoryQueries"

``get_query("FindRipe")`` loads ``Utilitron.Example.BananaRepositoryQueries.FindRipe.sql``,
resolves its include directives, applies preprocessor flags and minifies the
result. Both the unminified and the minified text are cached for the lifetime
of the process.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import ClassVar

from utilitron.data.exceptions import QueryConfigurationError
from utilitron.data.include_resolver import IncludeResolver
from utilitron.data.minifier import QueryMinifier
from utilitron.data.preprocessor import QueryPreprocessor
from utilitron.data.query_cache import QueryCache
from utilitron.data.resources import ResourceProvider

logger = logging.getLogger(__name__)

QUERY_EXTENSION = "sql"


@dataclass(frozen=True)
class RepositoryConfiguration:
    """Configuration shared by repositories.

    Attributes:
        resources: Provider serving the query resources.
        newline: Line break inserted after each include directive.
        cache_queries: Whether query text is cached between calls.
    """

    resources: ResourceProvider
    newline: str = "\n"
    cache_queries: bool = True


def flags_key(preprocessor_flags: Mapping[str, bool]) -> str:
    """Render preprocessor flags as a stable cache key fragment.

    Args:
        preprocessor_flags: Flag values by name.

    Returns:
        The flags sorted by name as ``name:1``/``name:0``, comma separated.
    """
    return ",".join(f"{name}:{'1' if value else '0'}" for name, value in sorted(preprocessor_flags.items()))


class Repository:
    """Base class for repositories backed by SQL query resources.

    Subclasses register where their queries live by setting ``query_prefix``.
    A subclass that does not set it uses the prefix of its base class, so
    queries written for a base repository are found from every subclass.
    """

    query_prefix: ClassVar[str | None] = None

    # Process-wide caches keyed by "<prefix>.<name>(<flags>)<newline repr>"
    _queries: ClassVar[QueryCache] = QueryCache()
    _queries_raw: ClassVar[QueryCache] = QueryCache()

    _minifier: ClassVar[QueryMinifier] = QueryMinifier()
    _preprocessor: ClassVar[QueryPreprocessor] = QueryPreprocessor()

    def __init__(self, configuration: RepositoryConfiguration) -> None:
        self.configuration = configuration
        self._resolver = IncludeResolver(configuration.resources, newline=configuration.newline)

    @classmethod
    def query_name(cls, name: str) -> str:
        """Return the dotted resource name of a query.

        Raises:
            QueryConfigurationError: If no query prefix is registered.
        """
        if not cls.query_prefix:
            raise QueryConfigurationError(f"{cls.__name__} does not declare a query_prefix")
        return f"{cls.query_prefix}.{name}.{QUERY_EXTENSION}"

    @classmethod
    def clear_query_cache(cls) -> None:
        """Drop every cached query, for all repositories."""
        Repository._queries.clear()
        Repository._queries_raw.clear()

    def get_query(self, name: str, preprocessor_flags: Mapping[str, bool] | None = None) -> str:
        """Get the minified text of a query.

        Args:
            name: The query name (the resource leaf name, without extension).
            preprocessor_flags: Flag values for ``#if`` directives in the query.

        Returns:
            The query with includes resolved, flags applied and text minified.

        Raises:
            ValueError: If name is None.
            QueryNotFoundError: If the query or one of its includes is missing.
            CyclicIncludeError: If the query's includes form a cycle.
            PreprocessorError: If the query's directives are invalid.
        """
        flags = self._check_arguments(name, preprocessor_flags)
        key = self._cache_key(name, flags)

        def build(_: str) -> str:
            return self._minifier.minify(self._get_query_raw(name, flags, key))

        if not self.configuration.cache_queries:
            return build(key)
        return self._queries.get_or_add(key, build)

    def get_query_raw(self, name: str, preprocessor_flags: Mapping[str, bool] | None = None) -> str:
        """Get the unminified text of a query.

        Args:
            name: The query name (the resource leaf name, without extension).
            preprocessor_flags: Flag values for ``#if`` directives in the query.

        Returns:
            The query with includes resolved and flags applied.
        """
        flags = self._check_arguments(name, preprocessor_flags)
        return self._get_query_raw(name, flags, self._cache_key(name, flags))

    def _get_query_raw(self, name: str, flags: Mapping[str, bool], key: str) -> str:
        def build(_: str) -> str:
            resource_name = self.query_name(name)
            logger.debug(f"Loading query {resource_name} for {type(self).__name__}")
            text = self._resolver.get_resolved_text(resource_name)
            return self._preprocessor.preprocess(flags, text)

        if not self.configuration.cache_queries:
            return build(key)
        return self._queries_raw.get_or_add(key, build)

    def _cache_key(self, name: str, flags: Mapping[str, bool]) -> str:
        return f"{self.query_prefix}.{name}({flags_key(flags)}){self.configuration.newline!r}"

    @staticmethod
    def _check_arguments(name: str, preprocessor_flags: Mapping[str, bool] | None) -> Mapping[str, bool]:
        if name is None:
            raise ValueError("name must not be None")
        return {} if preprocessor_flags is None else preprocessor_flags
