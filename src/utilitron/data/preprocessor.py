"""Query Preprocessor for conditional SQL sections.

Queries can switch sections on and off with named boolean flags:

    select *
    from Bananas
    -- #if OnlyRipe
    where Ripe = 1
    -- #else
    where Ripe is not null
    -- #endif

Directives may be nested and ``#if !Name`` negates a flag. Directive lines and
lines in inactive branches are removed; every other line is kept verbatim.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass

from utilitron.data.exceptions import PreprocessorError

DIRECTIVE_PATTERN = re.compile(r"^\s*--\s*#(if|else|endif)\b[ \t]*(!?)(\w*)\s*$")


@dataclass
class _Branch:
    """One open ``#if`` block."""

    parent_active: bool
    condition: bool
    seen_else: bool = False

    @property
    def active(self) -> bool:
        return self.parent_active and (not self.condition if self.seen_else else self.condition)


class QueryPreprocessor:
    """Applies ``#if``/``#else``/``#endif`` directives to query text."""

    def preprocess(self, flags: Mapping[str, bool], query: str) -> str:
        """Return the query with conditional sections applied.

        Args:
            flags: Flag values by name.
            query: The query text.

        Returns:
            The query with directive lines and inactive lines removed.

        Raises:
            ValueError: If flags or query is None.
            PreprocessorError: For unknown flags or unbalanced directives.
        """
        if flags is None:
            raise ValueError("flags must not be None")
        if query is None:
            raise ValueError("query must not be None")

        if "#" not in query:
            return query

        kept: list[str] = []
        stack: list[_Branch] = []

        for line_number, line in enumerate(query.splitlines(keepends=True), start=1):
            active = stack[-1].active if stack else True

            match = DIRECTIVE_PATTERN.match(line)
            if match is None:
                if active:
                    kept.append(line)
                continue

            keyword, negate, flag = match.groups()
            if keyword != "if" and (negate or flag):
                raise PreprocessorError(f"#{keyword} takes no flag name on line {line_number}")

            if keyword == "if":
                stack.append(_Branch(parent_active=active, condition=self._evaluate(flags, flag, negate, line_number)))
            elif keyword == "else":
                if not stack or stack[-1].seen_else:
                    raise PreprocessorError(f"Unexpected #else on line {line_number}")
                stack[-1].seen_else = True
            else:
                if not stack:
                    raise PreprocessorError(f"Unexpected #endif on line {line_number}")
                stack.pop()

        if stack:
            raise PreprocessorError(f"{len(stack)} #if directive(s) without #endif")

        return "".join(kept)

    def _evaluate(self, flags: Mapping[str, bool], flag: str, negate: str, line_number: int) -> bool:
        if not flag:
            raise PreprocessorError(f"#if without a flag name on line {line_number}")
        if flag not in flags:
            raise PreprocessorError(f"Unknown preprocessor flag {flag} on line {line_number}")
        return not flags[flag] if negate else bool(flags[flag])
