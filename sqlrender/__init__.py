"""
SQL dialect translator

Translates SQL between dialects by matching token patterns with capturing
@variables and rewriting them with replacement templates.
"""

from .errors import SqlRenderError, PatternError, RuleLoopError, RuleTableError
from .tokenizer import Token, tokenize
from .patterns import Block, CompiledPattern, compile_pattern
from .matcher import MatchResult, match
from .rewriter import search_and_replace, substitute, translate
from .rule_tables import (
    ReplacementRule,
    RuleTable,
    load_rule_table,
    parse_config,
    parse_csv,
    create_sample_config,
    save_sample_config,
    validate_config,
)
from .splitter import split_sql, split_sql_with_lines
from .translator import SqlTranslator, TranslationResult
from .report_generator import ConversionReport, FileConversion, print_conversion_report

__version__ = "0.1.0"
__all__ = [
    "SqlRenderError",
    "PatternError",
    "RuleLoopError",
    "RuleTableError",
    "Token",
    "tokenize",
    "Block",
    "CompiledPattern",
    "compile_pattern",
    "MatchResult",
    "match",
    "search_and_replace",
    "substitute",
    "translate",
    "ReplacementRule",
    "RuleTable",
    "load_rule_table",
    "parse_config",
    "parse_csv",
    "create_sample_config",
    "save_sample_config",
    "validate_config",
    "split_sql",
    "split_sql_with_lines",
    "SqlTranslator",
    "TranslationResult",
    "ConversionReport",
    "FileConversion",
    "print_conversion_report",
]
