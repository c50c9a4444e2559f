"""
Single-pass matcher for compiled search patterns.

The matcher walks the subject's tokens once, left to right, advancing
through the pattern blocks:

* A literal block must equal the current token (case-insensitively). On a
  mismatch the attempt is abandoned and matching restarts at the first
  block with the next token. There is no backtracking.
* A variable block swallows tokens until it sees the literal that follows
  it in the pattern, but only at nesting depth zero. Parentheses and quoted
  strings inside a captured value are tracked by ``NestingStack`` so that a
  ``)`` or ``,`` inside them cannot end the capture early.

Captured values are sliced from the original subject, so they keep their
original case and spacing.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from .patterns import CompiledPattern
from .tokenizer import tokenize


class Nesting(Enum):
    """Symbols that can be open on the nesting stack."""
    SINGLE_QUOTE = "'"
    DOUBLE_QUOTE = '"'
    PAREN = "("


_OPENERS = {symbol.value: symbol for symbol in Nesting}


class NestingStack:
    """
    Tracks open quotes and parentheses while a variable is capturing.

    Inside a quote every token is opaque except the same quote character,
    which closes it. A quote of the other kind is ignored, so a stray
    mismatched quote keeps the stack open until the end of the scan.
    """

    def __init__(self):
        self._stack: List[Nesting] = []

    def __len__(self) -> int:
        return len(self._stack)

    @property
    def is_empty(self) -> bool:
        return not self._stack

    @property
    def in_quote(self) -> bool:
        return bool(self._stack) and self._stack[-1] is not Nesting.PAREN

    def feed(self, text: str) -> None:
        """Update the stack with the next token text."""
        if self.in_quote:
            if text == self._stack[-1].value:
                self._stack.pop()
            return

        opener = _OPENERS.get(text)
        if opener is not None:
            self._stack.append(opener)
        elif text == ')' and self._stack and self._stack[-1] is Nesting.PAREN:
            self._stack.pop()


@dataclass
class MatchResult:
    """
    Outcome of a single search.

    ``start`` is None when nothing matched; bindings are only meaningful
    when both offsets are set.
    """
    start: Optional[int] = None
    end: Optional[int] = None
    bindings: Dict[str, str] = field(default_factory=dict)

    @property
    def found(self) -> bool:
        return self.start is not None and self.end is not None

    def __bool__(self) -> bool:
        return self.found


def match(subject: str, pattern: CompiledPattern) -> MatchResult:
    """
    Find the first occurrence of a compiled pattern in a string.

    Args:
        subject: String to search
        pattern: Compiled search pattern

    Returns:
        MatchResult with the matched span and the variable bindings, or an
        empty MatchResult (``start`` is None) if the pattern does not occur
    """
    result = MatchResult()
    match_index = 0
    capture_start = 0
    nesting = NestingStack()

    for token in tokenize(subject):
        text = token.text.lower()
        block = pattern[match_index]

        if block.is_variable:
            if nesting.is_empty and text == pattern[match_index + 1].text:
                result.bindings[block.text] = subject[capture_start:token.start]
                match_index += 2
                if match_index == len(pattern):
                    result.end = token.end
                    return result
                if pattern[match_index].is_variable:
                    capture_start = token.end
            else:
                nesting.feed(text)
        elif text == block.text:
            if match_index == 0:
                result.start = token.start
            match_index += 1
            if match_index == len(pattern):
                result.end = token.end
                return result
            if pattern[match_index].is_variable:
                capture_start = token.end
        else:
            match_index = 0

    return MatchResult()
