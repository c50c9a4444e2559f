"""
Main SQL dialect translator module.

This module provides the primary interface for translating SQL written in
the source dialect (SQL Server style) into a target dialect by applying
the target's replacement patterns from a rule table.
"""

import logging
from typing import Optional, List, Dict
from dataclasses import dataclass, field

import sqlglot
from sqlglot.errors import ParseError, TokenError

from .errors import RuleTableError, SqlRenderError
from .rewriter import search_and_replace
from .rule_tables import RuleTable, ReplacementRule, load_rule_table, normalize_dialect
from .splitter import split_sql_with_lines

logger = logging.getLogger(__name__)

# Rule table dialect names mapped to the sqlglot dialect used to check output
SQLGLOT_DIALECTS: Dict[str, Optional[str]] = {
    'sql server': 'tsql',
    'pdw': 'tsql',
    'synapse': 'tsql',
    'oracle': 'oracle',
    'postgresql': 'postgres',
    'redshift': 'redshift',
    'impala': 'hive',
    'hive': 'hive',
    'bigquery': 'bigquery',
    'spark': 'spark',
    'databricks': 'databricks',
    'snowflake': 'snowflake',
    'sqlite': 'sqlite',
    'sqlite extended': 'sqlite',
    'duckdb': 'duckdb',
    'netezza': None,
}


@dataclass
class TranslationResult:
    """Result of a SQL translation operation."""

    original_sql: str
    translated_sql: str
    success: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    applied_rules: List[str] = field(default_factory=list)
    line_number: Optional[int] = None  # Starting line number in the translated script

    def __str__(self) -> str:
        if self.success:
            return self.translated_sql
        return f"-- Translation failed: {'; '.join(self.errors)}\n-- Original SQL:\n{self.original_sql}"

    def get_detailed_report(self) -> str:
        """Generate a detailed report of the translation result."""
        lines = []

        if not self.success:
            lines.append("=" * 60)
            lines.append("TRANSLATION FAILED")
            lines.append("=" * 60)

        if self.errors:
            lines.append("\n[ERRORS]")
            for error in self.errors:
                lines.append(f"  ✗ {error}")

        if self.applied_rules:
            lines.append("\n[APPLIED RULES]")
            for rule_name in self.applied_rules:
                lines.append(f"  • {rule_name}")

        if self.warnings:
            lines.append("\n[WARNINGS]")
            for warning in self.warnings:
                lines.append(f"  ⚠ {warning}")

        if not self.success:
            lines.append("\n[ORIGINAL SQL]")
            for i, line in enumerate(self.original_sql.split('\n'), 1):
                lines.append(f"  {i:3d} | {line}")

        return "\n".join(lines)


class SqlTranslator:
    """
    Translator applying one dialect's replacement patterns to SQL.

    Example:
        >>> translator = SqlTranslator("postgresql", config_file="rules.json")
        >>> result = translator.translate("SELECT ISNULL(a, 0) FROM t")
        >>> print(result.translated_sql)
        SELECT COALESCE(a, 0) FROM t
    """

    def __init__(
        self,
        target_dialect: Optional[str] = None,
        config_file: Optional[str] = None,
        rule_table: Optional[RuleTable] = None,
        max_iterations: Optional[int] = None,
        check_output: bool = False
    ):
        """
        Initialize the translator.

        Args:
            target_dialect: Dialect whose rules are applied; defaults to the
                rule table's default dialect
            config_file: Optional path to a JSON or CSV rule table
            rule_table: Optional pre-loaded RuleTable object
            max_iterations: Per-rule replacement cap; defaults to the rule
                table's setting, None means unbounded
            check_output: Parse the output with sqlglot and report problems as warnings
        """
        if rule_table is None:
            rule_table = load_rule_table(config_file) if config_file else RuleTable()
        self.rule_table = rule_table

        dialect = target_dialect or rule_table.default_dialect
        if not dialect:
            raise RuleTableError(
                "No target dialect given and the rule table sets no default_dialect",
                rule_table.source_file,
            )
        self.target_dialect = normalize_dialect(dialect)
        self.max_iterations = max_iterations if max_iterations is not None else rule_table.max_iterations
        self.check_output = check_output

        self._rules: List[ReplacementRule] = rule_table.rules_for(self.target_dialect)
        if not self._rules:
            logger.warning("No enabled rules for dialect '%s'; SQL will be returned unchanged",
                           self.target_dialect)
        else:
            logger.info("Using %d rules for dialect '%s'", len(self._rules), self.target_dialect)

    @property
    def rules(self) -> List[ReplacementRule]:
        """Enabled rules for the target dialect, in application order."""
        return list(self._rules)

    def translate(self, sql: str) -> TranslationResult:
        """
        Translate SQL into the target dialect.

        Args:
            sql: SQL text (one statement or a whole script)

        Returns:
            TranslationResult containing the translated SQL and any errors/warnings
        """
        applied_rules = []
        current_sql = sql

        try:
            for rule in self._rules:
                new_sql = search_and_replace(
                    current_sql, rule.compiled_pattern, rule.replacement, self.max_iterations
                )
                if new_sql != current_sql:
                    applied_rules.append(rule.name)
                    logger.debug("Applied rule '%s'", rule.name)
                    current_sql = new_sql
        except SqlRenderError as e:
            return TranslationResult(
                original_sql=sql,
                translated_sql="",
                success=False,
                errors=[f"Translation error: {e}"],
                applied_rules=applied_rules,
            )

        warnings = self._check_translation(current_sql) if self.check_output else []

        return TranslationResult(
            original_sql=sql,
            translated_sql=current_sql,
            success=True,
            warnings=warnings,
            applied_rules=applied_rules,
        )

    def _check_translation(self, translated: str) -> List[str]:
        """
        Parse translated SQL with sqlglot to flag output it cannot read.

        Args:
            translated: Translated SQL

        Returns:
            List of warning messages
        """
        if self.target_dialect not in SQLGLOT_DIALECTS:
            return [f"Output check skipped: no sqlglot dialect known for '{self.target_dialect}'"]

        read = SQLGLOT_DIALECTS[self.target_dialect]
        if read is None:
            return [f"Output check skipped: sqlglot has no '{self.target_dialect}' dialect"]

        try:
            sqlglot.parse(translated, read=read)
        except (ParseError, TokenError) as e:
            first_line = str(e).splitlines()[0] if str(e) else type(e).__name__
            return [f"Translated SQL could not be parsed as {read}: {first_line}"]
        return []

    def translate_script(self, script: str) -> List[TranslationResult]:
        """
        Translate a script and split the output into statements.

        The whole script is translated at once, so rules may span statements.

        Args:
            script: SQL script with multiple statements

        Returns:
            List of TranslationResult for each translated statement, or a
            single failed result if the translation failed
        """
        whole = self.translate(script)
        if not whole.success:
            return [whole]

        results = []
        read = SQLGLOT_DIALECTS.get(self.target_dialect)
        for statement, line_number in split_sql_with_lines(whole.translated_sql, read):
            results.append(TranslationResult(
                original_sql=statement,
                translated_sql=statement,
                success=True,
                warnings=self._check_translation(statement) if self.check_output else [],
                applied_rules=list(whole.applied_rules),
                line_number=line_number,
            ))
        return results

    def translate_file(self, input_path: str, output_path: Optional[str] = None) -> TranslationResult:
        """
        Translate a SQL file.

        Args:
            input_path: Path to the input SQL file
            output_path: Optional path to write the translated SQL to

        Returns:
            TranslationResult for the whole file
        """
        with open(input_path, 'r', encoding='utf-8') as f:
            script = f.read()

        result = self.translate(script)

        if output_path and result.success:
            with open(output_path, 'w', encoding='utf-8') as f:
                f.write(result.translated_sql)

        return result
