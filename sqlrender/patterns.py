"""
Search pattern compiler.

A search pattern is tokenized (case-insensitively) into blocks. A token
beginning with ``@`` and at least two characters long is a capturing
variable, everything else is a literal to match. For example::

    ISNULL(@a,@b)   ->  isnull ( @a , @b )
                        lit    lit var lit var lit

A pattern must begin and end with a literal, and every variable must be
followed by a literal that terminates its capture.
"""

from dataclasses import dataclass
from typing import Iterator, Tuple

from .errors import PatternError
from .tokenizer import Token, tokenize


@dataclass(frozen=True)
class Block:
    """A compiled pattern element, either a literal token or a named variable."""
    text: str
    is_variable: bool = False

    @classmethod
    def from_token(cls, token: Token) -> "Block":
        return cls(text=token.text, is_variable=is_variable_name(token.text))

    def __str__(self) -> str:
        return self.text


def is_variable_name(text: str) -> bool:
    """Return True if a token text names a capturing variable (``@x``)."""
    return len(text) > 1 and text[0] == '@'


@dataclass(frozen=True)
class CompiledPattern:
    """An ordered, non-empty sequence of blocks compiled from ``text``."""
    text: str
    blocks: Tuple[Block, ...]

    def __len__(self) -> int:
        return len(self.blocks)

    def __iter__(self) -> Iterator[Block]:
        return iter(self.blocks)

    def __getitem__(self, index: int) -> Block:
        return self.blocks[index]

    @property
    def variables(self) -> Tuple[str, ...]:
        """Names of the capturing variables, in pattern order."""
        return tuple(block.text for block in self.blocks if block.is_variable)


def compile_pattern(pattern_text: str) -> CompiledPattern:
    """
    Compile a search pattern into blocks.

    Args:
        pattern_text: Search pattern, e.g. ``"SELECT TOP @n @rest ;"``

    Returns:
        CompiledPattern with lower-cased literal and variable blocks

    Raises:
        PatternError: If the pattern is empty, starts or ends with a variable,
            or contains two variables with no literal between them
    """
    if not pattern_text or not pattern_text.strip():
        raise PatternError("Error in search pattern: pattern is empty", pattern_text)

    blocks = tuple(Block.from_token(token) for token in tokenize(pattern_text.lower()))
    if not blocks:
        raise PatternError(
            f"Error in search pattern: pattern has no tokens: {pattern_text}", pattern_text
        )

    if blocks[0].is_variable or blocks[-1].is_variable:
        raise PatternError(
            f"Error in search pattern: pattern cannot start or end with a variable: {pattern_text}",
            pattern_text,
        )

    for previous, block in zip(blocks, blocks[1:]):
        if previous.is_variable and block.is_variable:
            raise PatternError(
                f"Error in search pattern: variables {previous.text} and {block.text} "
                f"must be separated by a literal: {pattern_text}",
                pattern_text,
            )

    return CompiledPattern(text=pattern_text, blocks=blocks)
