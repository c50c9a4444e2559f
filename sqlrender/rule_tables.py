"""
Rule table loading for dialect translation.

A rule table is an ordered list of replacement patterns, each bound to a
target dialect. Tables can be written as JSON or as a CSV file with a
``dialect,pattern,replacement`` header.

Example JSON configuration:
{
  "settings": {
    "default_dialect": "postgresql",
    "max_iterations": null
  },
  "replacement_patterns": [
    {
      "name": "ISNULL to COALESCE",
      "dialect": "postgresql",
      "pattern": "ISNULL(@a,@b)",
      "replacement": "COALESCE(@a,@b)",
      "enabled": true
    }
  ]
}

Rule order is significant: rules for a dialect are applied one after the
other, in the order they appear in the file.
"""

import csv
import io
import json
import logging
from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional, Tuple
from pathlib import Path

from .errors import PatternError, RuleTableError
from .patterns import CompiledPattern, compile_pattern

logger = logging.getLogger(__name__)

_TRUE_STRINGS = {'1', 'true', 'yes', 'y', 'on'}
_FALSE_STRINGS = {'0', 'false', 'no', 'n', 'off'}


@dataclass
class ReplacementRule:
    """A single search pattern / replacement template pair for one dialect."""
    name: str
    dialect: str
    pattern: str
    replacement: str
    description: str = ""
    enabled: bool = True

    def __post_init__(self):
        """Normalise the dialect and compile the search pattern."""
        self.dialect = normalize_dialect(self.dialect)
        self._compiled_pattern: CompiledPattern = compile_pattern(self.pattern)

    @property
    def compiled_pattern(self) -> CompiledPattern:
        """Get the compiled search pattern."""
        return self._compiled_pattern

    def as_pair(self) -> Tuple[str, str]:
        return self.pattern, self.replacement


@dataclass
class RuleTable:
    """Configuration container for an ordered set of replacement rules."""
    rules: List[ReplacementRule] = field(default_factory=list)
    default_dialect: Optional[str] = None
    max_iterations: Optional[int] = None
    source_file: Optional[str] = None  # Path to the config file (for reference)

    def rules_for(self, dialect: str) -> List[ReplacementRule]:
        """Get the enabled rules for a dialect, in file order."""
        dialect = normalize_dialect(dialect)
        return [r for r in self.rules if r.enabled and r.dialect == dialect]

    def as_pairs(self, dialect: str) -> List[Tuple[str, str]]:
        """Get the enabled rules for a dialect as (pattern, replacement) pairs."""
        return [r.as_pair() for r in self.rules_for(dialect)]

    def dialects(self) -> List[str]:
        """Get the sorted list of dialects that have at least one rule."""
        return sorted({r.dialect for r in self.rules})

    def count_by_dialect(self) -> Dict[str, Tuple[int, int]]:
        """Map each dialect to (enabled rule count, total rule count)."""
        counts: Dict[str, Tuple[int, int]] = {}
        for rule in self.rules:
            enabled, total = counts.get(rule.dialect, (0, 0))
            counts[rule.dialect] = (enabled + int(rule.enabled), total + 1)
        return counts


def normalize_dialect(dialect: str) -> str:
    """Dialect names are compared case-insensitively, ignoring outer spaces."""
    return dialect.strip().lower()


def _parse_bool(value: Any, field_name: str, rule_label: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    raise ValueError(f"{rule_label} has an invalid '{field_name}' value: {value!r}")


def _optional_str(value: Any, field_name: str, label: str, source_file: Optional[str]) -> Optional[str]:
    """Return a text field, or None when it is absent."""
    if value is None or isinstance(value, str):
        return value
    raise RuleTableError(
        f"{label} has a non-text '{field_name}' value: {value!r}", source_file
    )


def _build_rule(
    rule_data: Dict[str, Any],
    index: int,
    default_dialect: Optional[str],
    source_file: Optional[str]
) -> ReplacementRule:
    """Build one rule from a mapping, reporting problems against its position."""
    rule_label = f"Rule {index + 1}"
    if not isinstance(rule_data, dict):
        raise RuleTableError(f"{rule_label} must be an object", source_file)

    fields = {
        key: _optional_str(rule_data.get(key), key, rule_label, source_file)
        for key in ('name', 'dialect', 'pattern', 'replacement', 'description')
    }

    # Validate required fields
    for required in ('pattern', 'replacement'):
        if fields[required] is None:
            raise RuleTableError(f"{rule_label} is missing required '{required}' field", source_file)

    dialect = fields['dialect'] or default_dialect
    if not dialect:
        raise RuleTableError(
            f"{rule_label} has no 'dialect' and the table sets no 'default_dialect'", source_file
        )

    enabled_value = rule_data.get('enabled')
    if enabled_value is None or enabled_value == '':
        enabled_value = True
    try:
        enabled = _parse_bool(enabled_value, 'enabled', rule_label)
    except ValueError as e:
        raise RuleTableError(str(e), source_file) from e

    name = fields['name'] or f'Rule_{index + 1}'
    try:
        return ReplacementRule(
            name=name,
            dialect=dialect,
            pattern=fields['pattern'],
            replacement=fields['replacement'],
            description=fields['description'] or '',
            enabled=enabled,
        )
    except PatternError as e:
        raise RuleTableError(f"Invalid search pattern in rule '{name}': {e}", source_file) from e


def parse_config(config_data: Dict[str, Any], source_file: Optional[str] = None) -> RuleTable:
    """
    Parse a configuration dictionary into a RuleTable.

    Args:
        config_data: Dictionary containing the configuration
        source_file: Optional path to the source file (for reference)

    Returns:
        RuleTable object

    Raises:
        RuleTableError: If a rule is incomplete or its pattern does not compile
    """
    if not isinstance(config_data, dict):
        raise RuleTableError("Rule table must be a JSON object", source_file)

    # Parse settings
    settings = config_data.get('settings') or {}
    if not isinstance(settings, dict):
        raise RuleTableError("'settings' must be an object", source_file)
    default_dialect = _optional_str(
        settings.get('default_dialect'), 'default_dialect', "Settings", source_file
    )
    max_iterations = settings.get('max_iterations')
    if max_iterations is not None and (
        isinstance(max_iterations, bool) or not isinstance(max_iterations, int) or max_iterations < 1
    ):
        raise RuleTableError(
            f"'max_iterations' must be a positive integer, got {max_iterations!r}", source_file
        )

    # Parse rules
    rules_data = config_data.get('replacement_patterns', [])
    if not isinstance(rules_data, list):
        raise RuleTableError("'replacement_patterns' must be a list", source_file)

    rules = [
        _build_rule(rule_data, i, default_dialect, source_file)
        for i, rule_data in enumerate(rules_data)
    ]

    return RuleTable(
        rules=rules,
        default_dialect=normalize_dialect(default_dialect) if default_dialect else None,
        max_iterations=max_iterations,
        source_file=source_file,
    )


def parse_csv(text: str, source_file: Optional[str] = None) -> RuleTable:
    """
    Parse a CSV rule table with a ``dialect,pattern,replacement`` header.

    Optional ``name``, ``description`` and ``enabled`` columns are honoured.

    Args:
        text: CSV content
        source_file: Optional path to the source file (for reference)

    Returns:
        RuleTable object
    """
    reader = csv.DictReader(io.StringIO(text))
    columns = {c.strip().lower() for c in (reader.fieldnames or [])}
    missing = {'dialect', 'pattern', 'replacement'} - columns
    if missing:
        raise RuleTableError(
            f"CSV rule table is missing column(s): {', '.join(sorted(missing))}", source_file
        )

    rules = []
    for i, row in enumerate(reader):
        rule_data = {key.strip().lower(): value for key, value in row.items() if key is not None}
        rules.append(_build_rule(rule_data, i, None, source_file))

    return RuleTable(rules=rules, source_file=source_file)


def load_rule_table(config_path: str) -> RuleTable:
    """
    Load a rule table from a JSON or CSV file.

    The format is chosen by suffix: ``.csv`` files are read as CSV,
    anything else as JSON.

    Args:
        config_path: Path to the rule table file

    Returns:
        RuleTable object containing the loaded rules

    Raises:
        FileNotFoundError: If the file doesn't exist
        RuleTableError: If the file is invalid
    """
    path = Path(config_path)

    if not path.exists():
        raise FileNotFoundError(f"Rule table file not found: {config_path}")

    try:
        with open(path, 'r', encoding='utf-8', newline='') as f:
            content = f.read()
    except UnicodeDecodeError as e:
        raise RuleTableError(f"Rule table '{config_path}' is not valid UTF-8: {e}", str(path)) from e

    if path.suffix.lower() == '.csv':
        table = parse_csv(content, source_file=str(path))
    else:
        try:
            config_data = json.loads(content)
        except json.JSONDecodeError as e:
            raise RuleTableError(f"Invalid JSON in rule table '{config_path}': {e}", str(path)) from e
        table = parse_config(config_data, source_file=str(path))

    logger.info("Loaded %d rules for %d dialect(s) from %s",
                len(table.rules), len(table.dialects()), config_path)
    return table


def create_sample_config() -> Dict[str, Any]:
    """
    Create a sample configuration dictionary with example rules.

    Returns:
        Dictionary that can be saved as a JSON rule table
    """
    return {
        "description": "Replacement patterns for translating SQL Server SQL to other dialects",
        "settings": {
            "default_dialect": "postgresql",
            "max_iterations": 1000
        },
        "replacement_patterns": [
            {
                "name": "ISNULL to COALESCE",
                "dialect": "postgresql",
                "pattern": "ISNULL(@a,@b)",
                "replacement": "COALESCE(@a,@b)",
                "description": "SQL Server ISNULL(a, b) becomes COALESCE(a, b)",
                "enabled": True
            },
            {
                "name": "GETDATE to CURRENT_DATE",
                "dialect": "postgresql",
                "pattern": "GETDATE()",
                "replacement": "CURRENT_DATE",
                "enabled": True
            },
            {
                "name": "DATEADD to interval arithmetic",
                "dialect": "postgresql",
                "pattern": "DATEADD(day,@n,@d)",
                "replacement": "(@d + @n * INTERVAL '1 day')",
                "enabled": True
            },
            {
                "name": "LEN to LENGTH",
                "dialect": "postgresql",
                "pattern": "LEN(@a)",
                "replacement": "LENGTH(@a)",
                "enabled": True
            },
            {
                "name": "ISNULL to NVL",
                "dialect": "oracle",
                "pattern": "ISNULL(@a,@b)",
                "replacement": "NVL(@a,@b)",
                "enabled": True
            },
            {
                "name": "GETDATE to SYSDATE",
                "dialect": "oracle",
                "pattern": "GETDATE()",
                "replacement": "SYSDATE",
                "enabled": True
            },
            {
                "name": "DATEADD to date arithmetic",
                "dialect": "oracle",
                "pattern": "DATEADD(day,@n,@d)",
                "replacement": "(@d + @n)",
                "enabled": False
            }
        ]
    }


def save_sample_config(output_path: str) -> None:
    """
    Save a sample configuration file to the specified path.

    Args:
        output_path: Path where the sample config should be saved
    """
    sample = create_sample_config()

    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(sample, f, indent=2, ensure_ascii=False)

    logger.info("Sample rule table saved to %s", output_path)


def validate_config(config_path: str) -> Tuple[bool, List[str]]:
    """
    Validate a rule table file.

    Args:
        config_path: Path to the rule table to validate

    Returns:
        Tuple of (is_valid, list_of_errors)
    """
    try:
        load_rule_table(config_path)
    except (FileNotFoundError, RuleTableError) as e:
        return False, [str(e)]
    return True, []
