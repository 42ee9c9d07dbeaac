"""Query Minifier for compacting SQL text.

This module provides the QueryMinifier class, a single-pass scanner that strips
single-line and (nested) multi-line comments from SQL, collapses runs of blank
lines into one line break, and removes leading whitespace from every line.

String literals are not recognised: comment markers inside quotes are treated
as comments.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

ASTERISK = "*"
DASH = "-"
SLASH = "/"
SENTINEL = "\0"

# Two-character line break, emitted as a single unit
CRLF = "\r\n"

# Characters treated as line breaks, CHARACTER TABULATION included: a tab
# ends a line the same way a line feed does.
# Both characters of CRLF must also appear here.
NEWLINES = frozenset(
    {
        "\u2028",  # LINE SEPARATOR
        "\u0009",  # CHARACTER TABULATION
        "\u000b",  # LINE TABULATION
        "\u000c",  # FORM FEED
        "\u0085",  # NEXT LINE
        "\u000d",  # CARRIAGE RETURN
        "\u000a",  # LINE FEED
    }
)

# Information separators, which str.isspace counts as whitespace but which are
# kept as line content
SEPARATORS = frozenset({"\u001c", "\u001d", "\u001e", "\u001f"})


class QueryMinifier:
    """Minifies SQL query text.

    The scanner carries four pieces of state across characters:

    - whether the last emitted character was a line break (true at the start)
    - whether a non-whitespace character has been emitted on the current line
    - whether it is inside a ``--`` comment
    - the depth of nested ``/* */`` comments

    All of it is local to one ``minify`` call, so a single instance can be
    shared freely between threads.
    """

    def minify(self, query: str) -> str:
        """Return a minified copy of a query.

        Args:
            query: The SQL text to minify.

        Returns:
            The text with comments, blank lines and leading whitespace removed.

        Raises:
            ValueError: If query is None.
        """
        if query is None:
            raise ValueError("query must not be None")

        parts: list[str] = []

        previous_was_newline = True
        has_seen_non_whitespace = False
        in_single_line_comment = False
        comment_depth = 0

        length = len(query)
        i = 0
        while i < length:
            previous = query[i - 1] if i > 0 else SENTINEL
            current = query[i]
            next_char = query[i + 1] if i + 1 < length else SENTINEL

            # Entering a multi-line comment
            if current == SLASH and next_char == ASTERISK and not in_single_line_comment:
                comment_depth += 1
                i += 2
                continue

            # Leaving a multi-line comment
            if comment_depth > 0 and previous != SLASH and current == ASTERISK and next_char == SLASH:
                comment_depth -= 1
                i += 2
                continue

            if comment_depth > 0:
                i += 1
                continue

            # Entering a single-line comment
            if current == DASH and next_char == DASH:
                in_single_line_comment = True
                i += 2
                continue

            if current in NEWLINES:
                in_single_line_comment = False

                # Only line breaks or whitespace since the last line break
                if previous_was_newline:
                    i += 1
                    continue

                previous_was_newline = True
                has_seen_non_whitespace = False

                if current == CRLF[0] and next_char == CRLF[1]:
                    parts.append(CRLF)
                    i += 2
                else:
                    parts.append(current)
                    i += 1
                continue

            if in_single_line_comment:
                i += 1
                continue

            if current.isspace() and current not in SEPARATORS:
                if not has_seen_non_whitespace:
                    i += 1
                    continue
            else:
                has_seen_non_whitespace = True

            previous_was_newline = False
            parts.append(current)
            i += 1

        if comment_depth > 0:
            logger.debug(f"Query ended inside {comment_depth} unterminated comment(s)")

        return "".join(parts)
