"""
SQL tokenizer used by the pattern compiler and the matcher.

Any run of alphanumeric characters, underscores or ``@`` is a token. Every
other character is its own single-character token, except whitespace and
SQL comments (``-- ...`` up to the end of the line, ``/* ... */``), which
produce no tokens at all.

Token offsets always point into the string that was tokenized, so callers
can slice the original text with them even though comments and whitespace
were skipped.
"""

from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class Token:
    """A positioned token. ``start``/``end`` are a half-open range into the source."""
    start: int
    end: int
    text: str


def is_word_char(ch: str) -> bool:
    """Return True if the character belongs to a multi-character token."""
    return ch.isalnum() or ch == '_' or ch == '@'


def tokenize(text: str) -> List[Token]:
    """
    Split a string into tokens.

    Args:
        text: SQL text, a search pattern or any other string

    Returns:
        List of tokens in source order. Input made only of whitespace
        and comments yields an empty list.
    """
    tokens: List[Token] = []
    length = len(text)
    start = 0
    cursor = 0
    in_line_comment = False
    in_block_comment = False
    comment_open = 0

    while cursor < length:
        ch = text[cursor]
        if in_line_comment:
            if ch == '\n':
                in_line_comment = False
                start = cursor + 1
        elif in_block_comment:
            # The closing "*/" may not reuse the "*" of the opening "/*"
            if ch == '/' and text[cursor - 1] == '*' and cursor >= comment_open + 3:
                in_block_comment = False
                start = cursor + 1
        elif not is_word_char(ch):
            # Flush the word run that this character terminates
            if cursor > start:
                tokens.append(Token(start, cursor, text[start:cursor]))

            next_ch = text[cursor + 1] if cursor + 1 < length else ''
            if ch == '-' and next_ch == '-':
                in_line_comment = True
                cursor += 1
            elif ch == '/' and next_ch == '*':
                in_block_comment = True
                comment_open = cursor
                cursor += 1
            elif not ch.isspace():
                tokens.append(Token(cursor, cursor + 1, ch))
            start = cursor + 1
        cursor += 1

    # Unterminated comments swallow the rest of the input
    if not in_line_comment and not in_block_comment and length > start:
        tokens.append(Token(start, length, text[start:length]))

    return tokens
