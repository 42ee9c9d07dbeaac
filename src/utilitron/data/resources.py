"""Resource providers for SQL query text.

A resource provider returns the text of a resource given its dotted name,
e.g. ``Utilitron.Tests.Data.RepositoryQueries.QueryTest.sql``. Providers
decode UTF-8 and strip a leading byte-order mark before returning text.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from importlib.resources import files
from pathlib import Path, PurePosixPath

from utilitron.data.exceptions import QueryNotFoundError

logger = logging.getLogger(__name__)

# Decodes UTF-8 and drops a leading byte-order mark
ENCODING = "utf-8-sig"


def name_to_path(name: str) -> PurePosixPath:
    """Convert a dotted resource name to a relative path.

    Every dot becomes a directory separator except the last one, which
    separates the file name from its extension.

    Args:
        name: Dotted resource name, e.g. ``A.B.CQueries.Query.sql``.

    Returns:
        The relative path, e.g. ``A/B/CQueries/Query.sql``.
    """
    parts = name.split(".")
    if len(parts) < 2:
        return PurePosixPath(name)
    *directories, stem, extension = parts
    return PurePosixPath(*directories, f"{stem}.{extension}")


class ResourceProvider(ABC):
    """Base class for resource providers.

    Subclasses implement ``_read``; ``get_text`` handles decoding, BOM
    stripping and the not-found error.
    """

    def get_text(self, name: str) -> str:
        """Return the text of a resource.

        Args:
            name: Dotted resource name.

        Returns:
            The decoded resource text without a leading byte-order mark.

        Raises:
            QueryNotFoundError: If the provider has no such resource.
        """
        data = self._read(name)
        if data is None:
            raise QueryNotFoundError(name)

        logger.debug(f"Read resource {name} ({len(data)} bytes)")
        return data.decode(ENCODING)

    def __contains__(self, name: str) -> bool:
        return self._read(name) is not None

    @abstractmethod
    def _read(self, name: str) -> bytes | None:
        """Return the raw bytes of a resource, or None if it does not exist."""


class InMemoryResourceProvider(ResourceProvider):
    """Serves resources from a mapping of dotted names to text or bytes."""

    def __init__(self, resources: Mapping[str, str | bytes] | None = None) -> None:
        self._resources: dict[str, str | bytes] = dict(resources or {})

    def add(self, name: str, content: str | bytes) -> None:
        """Add or replace a resource."""
        self._resources[name] = content

    def _read(self, name: str) -> bytes | None:
        content = self._resources.get(name)
        if content is None:
            return None
        if isinstance(content, str):
            return content.encode("utf-8")
        return content


class DirectoryResourceProvider(ResourceProvider):
    """Serves resources from files under a root directory.

    ``A.B.CQueries.Query.sql`` is read from ``<root>/A/B/CQueries/Query.sql``.
    """

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    def _read(self, name: str) -> bytes | None:
        path = self._root / name_to_path(name)
        if not path.is_file():
            return None
        return path.read_bytes()


class PackageResourceProvider(ResourceProvider):
    """Serves resources bundled as package data of an importable package.

    ``A.B.CQueries.Query.sql`` is read from ``A/B/CQueries/Query.sql`` inside
    the package directory, through ``importlib.resources``.
    """

    def __init__(self, package: str) -> None:
        self._package = package

    def _read(self, name: str) -> bytes | None:
        resource = files(self._package)
        for part in name_to_path(name).parts:
            resource = resource.joinpath(part)
        if not resource.is_file():
            return None
        return resource.read_bytes()
