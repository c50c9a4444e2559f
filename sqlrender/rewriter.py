"""
Search-and-replace driver built on the matcher.

``search_and_replace`` applies one rule until it no longer matches, and
``translate`` runs an ordered list of rules, feeding the output of each
rule into the next.
"""

import logging
import re
from typing import Dict, Iterable, Optional, Tuple, Union

from .errors import RuleLoopError
from .matcher import match
from .patterns import CompiledPattern, compile_pattern

logger = logging.getLogger(__name__)

RulePair = Tuple[str, str]


def substitute(template: str, bindings: Dict[str, str]) -> str:
    """
    Replace every ``@name`` placeholder in a template with its bound value.

    Placeholders are plain substrings, not tokens. All bound names are
    replaced in a single pass, longest name first, so neither ``@a`` inside
    ``@ab`` nor an ``@name`` inside a substituted value is rewritten twice.

    Args:
        template: Replacement template
        bindings: Variable name (including ``@``) to captured value

    Returns:
        The template with all placeholders substituted
    """
    if not bindings:
        return template

    names = sorted(bindings, key=len, reverse=True)
    placeholder = re.compile("|".join(re.escape(name) for name in names))
    return placeholder.sub(lambda m: bindings[m.group(0)], template)


def search_and_replace(
    subject: str,
    pattern: Union[CompiledPattern, str],
    template: str,
    max_iterations: Optional[int] = None
) -> str:
    """
    Apply one rule to a string until the pattern no longer matches.

    After every replacement the search restarts from the beginning of the
    newly spliced string. A template that reproduces its own pattern loops
    forever unless ``max_iterations`` is given.

    Args:
        subject: String to rewrite
        pattern: Compiled search pattern (a string is compiled first)
        template: Replacement template using the pattern's ``@name`` variables
        max_iterations: Optional cap on the number of replacements

    Returns:
        The rewritten string

    Raises:
        PatternError: If ``pattern`` is a string that does not compile
        RuleLoopError: If more than ``max_iterations`` replacements are made
    """
    if isinstance(pattern, str):
        pattern = compile_pattern(pattern)

    result = subject
    iterations = 0
    found = match(result, pattern)
    while found:
        if max_iterations is not None and iterations >= max_iterations:
            raise RuleLoopError(pattern.text, iterations)
        iterations += 1

        replacement = substitute(template, found.bindings)
        result = result[:found.start] + replacement + result[found.end:]
        found = match(result, pattern)

    if iterations:
        logger.debug("Pattern %r replaced %d time(s)", pattern.text, iterations)
    return result


def translate(
    subject: str,
    rules: Iterable[RulePair],
    max_iterations: Optional[int] = None
) -> str:
    """
    Apply an ordered set of (search pattern, replacement template) rules.

    Args:
        subject: SQL to translate
        rules: Rules in application order
        max_iterations: Optional per-rule cap on replacements

    Returns:
        The translated SQL; ``subject`` unchanged if there are no rules

    Raises:
        PatternError: If any search pattern does not compile
        RuleLoopError: If a rule exceeds ``max_iterations``
    """
    # Compile everything up front so a bad rule rejects the whole set
    compiled = [(compile_pattern(pattern_text), template) for pattern_text, template in rules]

    result = subject
    for pattern, template in compiled:
        result = search_and_replace(result, pattern, template, max_iterations)
    return result
