"""Include Directive data model for SQL include directives.

This module provides the IncludeDirective dataclass that represents
``/* Include: <path>.sql */`` directives found in SQL query resources.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class IncludeDirective:
    """Represents a SQL include directive.

    This immutable dataclass holds the directive text exactly as written, the
    path it names, the dotted resource name that path resolves to, and where
    the directive sits in the text that contains it.

    Attributes:
        raw_text: The complete directive text, comment delimiters included
        raw_path: The path written inside the directive
        resolved_name: The dotted resource name the path refers to
        is_absolute: Whether the path starts with a path separator
        start: Offset of the first character of the directive
        end: Offset just past the last character of the directive
    """

    raw_text: str
    raw_path: str
    resolved_name: str
    is_absolute: bool
    start: int
    end: int
