"""
Line-oriented SQL statement splitter.

Known limitation: this is not a SQL lexer. A `;` inside a string literal or an
inline `--` comment after code is not understood. Migration scripts must keep
terminators out of literal values and put comments on their own lines.
"""

from __future__ import annotations

COMMENT_MARKER = "--"
TERMINATOR = ";"


def split_statements(sql: str) -> list[str]:
    """
    Split a migration script into executable statements.

    Whole-line comments are dropped first, then the text is split on `;`;
    pieces are stripped and empty ones discarded.
    """
    lines = [line for line in sql.split("\n") if not line.strip().startswith(COMMENT_MARKER)]
    pieces = "\n".join(lines).split(TERMINATOR)
    return [piece.strip() for piece in pieces if piece.strip()]
