"""
Split SQL scripts into individual statements.

Uses sqlglot's tokenizer so that semicolons inside string literals, quoted
identifiers and comments never split a statement.
"""

import logging
from typing import List, Optional, Tuple

import sqlglot
from sqlglot.errors import TokenError
from sqlglot.tokens import TokenType

logger = logging.getLogger(__name__)

# BEGIN followed by one of these starts a transaction, not a block
_TRANSACTION_WORDS = {'TRANSACTION', 'TRAN', 'WORK'}


def _opens_block(next_token) -> bool:
    """A BEGIN opens a block unless it is a bare or explicit transaction start."""
    if next_token is None or next_token.token_type == TokenType.SEMICOLON:
        return False
    return next_token.text.upper() not in _TRANSACTION_WORDS


def _line_of(script: str, offset: int) -> int:
    """1-based line number of a character offset."""
    return script.count('\n', 0, offset) + 1


def _statement_at(script: str, start: int, end: int) -> Tuple[str, int]:
    segment = script[start:end]
    leading = len(segment) - len(segment.lstrip())
    return segment.strip(), _line_of(script, start + leading)


def split_sql_with_lines(script: str, dialect: Optional[str] = None) -> List[Tuple[str, int]]:
    """
    Split a SQL script into statements, keeping their starting line numbers.

    Statements end at a semicolon outside of ``BEGIN ... END`` and
    ``CASE ... END`` blocks. The semicolon itself is not part of the
    returned text, and segments without any SQL token (empty or comment
    only) are dropped.

    Args:
        script: SQL script with one or more statements
        dialect: Optional sqlglot dialect used to tokenize the script

    Returns:
        List of (statement, line_number) tuples
    """
    try:
        tokens = sqlglot.tokenize(script, read=dialect)
    except TokenError as e:
        logger.warning("Could not tokenize script, keeping it as one statement: %s", e)
        if not script.strip():
            return []
        return [_statement_at(script, 0, len(script))]

    statements = []
    segment_start = 0
    depth = 0
    has_content = False

    for i, token in enumerate(tokens):
        token_type = token.token_type
        if token_type == TokenType.SEMICOLON and depth == 0:
            if has_content:
                statements.append(_statement_at(script, segment_start, token.start))
            segment_start = token.end + 1
            has_content = False
            continue

        has_content = True
        if token_type == TokenType.CASE:
            depth += 1
        elif token_type == TokenType.BEGIN:
            next_token = tokens[i + 1] if i + 1 < len(tokens) else None
            if _opens_block(next_token):
                depth += 1
        elif token_type == TokenType.END and depth > 0:
            depth -= 1

    if has_content:
        statements.append(_statement_at(script, segment_start, len(script)))

    return statements


def split_sql(script: str, dialect: Optional[str] = None) -> List[str]:
    """
    Split a SQL script into individual statements.

    Args:
        script: SQL script with one or more statements
        dialect: Optional sqlglot dialect used to tokenize the script

    Returns:
        List of stripped statements without their terminating semicolons
    """
    return [statement for statement, _ in split_sql_with_lines(script, dialect)]
