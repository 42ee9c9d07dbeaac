"""Include Resolver for composing SQL query resources.

This module provides the IncludeResolver class, which replaces every include
directive in a resource with the directive itself, a line break, and the fully
resolved text of the included resource. Included resources are resolved
recursively; an include that refers back to one of its ancestors is rejected.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from utilitron.data.exceptions import CyclicIncludeError
from utilitron.data.include_directive_parser import IncludeDirectiveParser
from utilitron.data.resources import ResourceProvider

logger = logging.getLogger(__name__)


class IncludeResolver:
    """Resolves include directives in SQL resources.

    Each branch of the include tree tracks its own chain of ancestors, so the
    same resource may be included any number of times by siblings; only a
    resource including one of its own ancestors is an error.

    The resolver holds no state between calls and does not cache; callers
    that need caching wrap it (see ``Repository``).
    """

    def __init__(self, resources: ResourceProvider, newline: str = "\n") -> None:
        """Initialize the resolver.

        Args:
            resources: Provider used to fetch the root and every included resource.
            newline: Line break inserted between a directive and the text it includes.
        """
        self._resources = resources
        self._newline = newline
        self._parser = IncludeDirectiveParser()

    def get_resolved_text(self, name: str) -> str:
        """Fetch a resource and resolve all of its includes.

        Args:
            name: Dotted resource name of the root resource.

        Returns:
            The resource text with every include inlined.

        Raises:
            QueryNotFoundError: If the root or any included resource is missing.
            CyclicIncludeError: If any resource includes one of its ancestors.
        """
        text = self._resources.get_text(name)
        return self.resolve_includes(text, name)

    def resolve_includes(self, text: str, name: str, ancestors: Iterable[str] = ()) -> str:
        """Resolve the include directives in a piece of text.

        Args:
            text: SQL text that may contain include directives.
            name: Dotted resource name of the text, used for relative paths.
            ancestors: Resource names already being resolved above this one.

        Returns:
            The text with every include inlined. Text outside directives is
            left untouched.

        Raises:
            QueryNotFoundError: If an included resource is missing.
            CyclicIncludeError: If an include refers to an ancestor.
        """
        chain = frozenset(ancestors) | {name}

        directives = self._parser.extract_includes(text, name)
        if not directives:
            return text

        parts: list[str] = []
        position = 0
        for directive in directives:
            target = directive.resolved_name

            if target in chain:
                logger.warning(f"Circular include detected involving: {target}")
                raise CyclicIncludeError(target, chain)

            logger.debug(f"Including {target} into {name}")
            included = self.resolve_includes(self._resources.get_text(target), target, chain)

            parts.append(text[position:directive.start])
            parts.append(directive.raw_text)
            parts.append(self._newline)
            parts.append(included)
            position = directive.end

        parts.append(text[position:])
        return "".join(parts)
