"""Include Directive Parser for SQL query resources.

This module provides the IncludeDirectiveParser class for extracting
``/* Include: <path>.sql */`` directives from SQL text and resolving the paths
they name to dotted resource names.

Paths may use forward or backward slashes. A path starting with a slash is
absolute; anything else is relative to the location of the including resource:

    /* Include: IncludeInSameFolder.sql */
    /* Include: ../IncludeInParentFolder.sql */
    /* Include: Includes/IncludeInSubfolder.sql */
    /* Include: /Utilitron/Data/RepositoryQueries/Includes/IncludeInSubfolder.sql */
"""

from __future__ import annotations

import re

from utilitron.data.exceptions import IncludePathError
from utilitron.data.include_directive import IncludeDirective

# Regular expression pattern for include directives
# Matches: /* Include: path/to/Query.sql */
INCLUDE_PATTERN = re.compile(r"/\*\s+Include:\s+([0-9a-zA-Z/\\.]+\.sql)\s+\*/")

PATH_SEPARATORS = "/\\"
NAME_SEPARATOR = "."

# Trailing segments of a resource name that are not part of its location:
# the leaf name and the extension ("Query" and "sql" in "A.BQueries.Query.sql")
RESOURCE_LEAF_SEGMENTS = 2


class IncludeDirectiveParser:
    """Parser for extracting include directives from SQL query text.

    This class finds include directives in SQL content and resolves their
    paths against the dotted name of the resource being parsed.
    """

    def extract_includes(self, content: str, parent_name: str) -> list[IncludeDirective]:
        """Extract include directives from SQL content.

        Args:
            content: The SQL text to scan.
            parent_name: The dotted resource name of the text being scanned.

        Returns:
            A list of IncludeDirective objects, in the order they appear.

        Raises:
            IncludePathError: If a relative path climbs above the resource root.
        """
        directives: list[IncludeDirective] = []

        for match in INCLUDE_PATTERN.finditer(content):
            raw_path = match.group(1)

            directive = IncludeDirective(
                raw_text=match.group(0),
                raw_path=raw_path,
                resolved_name=self.resolve_path(raw_path, parent_name),
                is_absolute=self.is_absolute(raw_path),
                start=match.start(),
                end=match.end(),
            )
            directives.append(directive)

        return directives

    def is_absolute(self, raw_path: str) -> bool:
        """Check whether an include path is absolute (starts with a separator)."""
        return raw_path[:1] in tuple(PATH_SEPARATORS)

    def resolve_path(self, raw_path: str, parent_name: str) -> str:
        """Resolve an include path to a dotted resource name.

        Args:
            raw_path: The path from the include directive.
            parent_name: The dotted resource name of the including resource.

        Returns:
            The dotted resource name of the included resource.
        """
        if self.is_absolute(raw_path):
            return self._resolve_absolute_path(raw_path)
        return self._resolve_relative_path(raw_path, parent_name)

    def _resolve_absolute_path(self, raw_path: str) -> str:
        """Map an absolute path directly onto a dotted resource name.

        Args:
            raw_path: A path starting with a separator.

        Returns:
            The path with outer separators trimmed and the rest replaced by dots.
        """
        trimmed = raw_path.strip(PATH_SEPARATORS)
        for separator in PATH_SEPARATORS:
            trimmed = trimmed.replace(separator, NAME_SEPARATOR)
        return trimmed

    def _resolve_relative_path(self, raw_path: str, parent_name: str) -> str:
        """Resolve a relative path against the parent's location.

        The parent's location is its name without the last two segments. This
        assumes the ``<Namespace>.<Type>Queries.<Name>.sql`` shape; names with
        another shape are resolved with the same arithmetic.

        Args:
            raw_path: A path not starting with a separator.
            parent_name: The dotted resource name of the including resource.

        Returns:
            The dotted resource name of the included resource.

        Raises:
            IncludePathError: If ``..`` climbs above the first segment.
        """
        parent_parts = [part for part in parent_name.split(NAME_SEPARATOR) if part]
        path_parts = [part for part in re.split(r"[/\\]", raw_path) if part]

        resolved: list[str] = parent_parts[: max(len(parent_parts) - RESOURCE_LEAF_SEGMENTS, 0)]
        for part in path_parts:
            if part == ".":
                continue
            if part == "..":
                if not resolved:
                    raise IncludePathError(
                        f"Include path {raw_path} in {parent_name} climbs above the resource root"
                    )
                resolved.pop()
            else:
                resolved.append(part)

        return NAME_SEPARATOR.join(resolved)
