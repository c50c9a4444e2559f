#!/usr/bin/env python3
"""
SQL Dialect Translator - Command Line Interface

Usage:
    python sql2dialect.py convert <input_file> --config <rules> [--dialect <name>] [--output <output_file>]
    python sql2dialect.py batch <input_dir> <output_dir> --config <rules> [--dialect <name>] [--recursive] [--report]
    python sql2dialect.py inline "SQL statement" --config <rules> [--dialect <name>]
    python sql2dialect.py split <input_file> [--dialect <sqlglot dialect>]
    python sql2dialect.py dialects --config <rules>
    python sql2dialect.py init-config [--output <config_file>]
    python sql2dialect.py validate-config <config_file>
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from sqlrender import (
    SqlRenderError,
    SqlTranslator,
    ConversionReport,
    load_rule_table,
    save_sample_config,
    split_sql,
    validate_config,
)
from sqlrender.report_generator import (
    FileConversion,
    file_conversion_from_result,
    print_conversion_report,
)

SQL_EXTENSIONS = {'.sql'}


def print_banner():
    """Print application banner."""
    banner = """
╔═══════════════════════════════════════════════════════════════╗
║               SQL Dialect Translator (sqlrender)              ║
╚═══════════════════════════════════════════════════════════════╝
"""
    print(banner)


def configure_logging(args) -> None:
    """Send library log records to stderr at the requested level."""
    level = logging.DEBUG if args.verbose else getattr(logging, args.log_level)
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def build_translator(args) -> SqlTranslator:
    """Create a translator from the common --config/--dialect options."""
    return SqlTranslator(
        target_dialect=args.dialect,
        config_file=args.config,
        max_iterations=getattr(args, 'max_iterations', None),
        check_output=getattr(args, 'check', False),
    )


def print_result_messages(result) -> None:
    """Print warnings and errors of a result to stderr as SQL comments."""
    for warning in result.warnings:
        print(f"-- WARNING: {warning}", file=sys.stderr)
    for error in result.errors:
        print(f"-- ERROR: {error}", file=sys.stderr)


def convert_file(args):
    """Translate a single SQL file."""
    input_path = Path(args.input_file)
    if not input_path.exists():
        print(f"Error: Input file '{input_path}' not found.", file=sys.stderr)
        return 1

    translator = build_translator(args)
    result = translator.translate_file(str(input_path), args.output)
    print_result_messages(result)

    if not result.success:
        return 1

    if args.output:
        print(f"Translated {input_path} -> {args.output} ({translator.target_dialect})")
        if result.applied_rules:
            print(f"  Applied {len(result.applied_rules)} rule(s):")
            for rule_name in result.applied_rules:
                print(f"    • {rule_name}")
    else:
        print(result.translated_sql)
    return 0


def translate_inline(args):
    """Translate inline SQL from command line argument."""
    translator = build_translator(args)
    result = translator.translate(args.sql)
    print_result_messages(result)

    if not result.success:
        return 1

    print(result.translated_sql)
    if args.verbose and result.applied_rules:
        print("-- Applied rules:", file=sys.stderr)
        for rule_name in result.applied_rules:
            print(f"--   • {rule_name}", file=sys.stderr)
    return 0


def find_sql_files(input_dir: Path, recursive: bool) -> List[Path]:
    """List the SQL files of a directory, sorted for a stable processing order."""
    candidates = input_dir.rglob('*') if recursive else input_dir.iterdir()
    return sorted(
        f for f in candidates
        if f.is_file() and f.suffix.lower() in SQL_EXTENSIONS
    )


def process_single_file(translator: SqlTranslator, input_path: Path, output_path: Path) -> FileConversion:
    """Translate one file of a batch; read and write failures only fail that file."""
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        result = translator.translate_file(str(input_path), str(output_path))
    except (OSError, UnicodeDecodeError) as e:
        return FileConversion(
            input_file=str(input_path),
            output_file=str(output_path),
            success=False,
            errors=[f"Could not process file: {e}"],
        )
    return file_conversion_from_result(result, str(input_path), str(output_path))


def batch_translate(args):
    """Batch translate all SQL files in a directory."""
    input_dir = Path(args.input_dir)
    output_dir = Path(args.output_dir)

    if not input_dir.is_dir():
        print(f"Error: '{input_dir}' is not a directory.", file=sys.stderr)
        return 1

    sql_files = find_sql_files(input_dir, args.recursive)
    if not sql_files:
        print(f"No SQL files found in '{input_dir}'")
        return 0

    translator = build_translator(args)

    print_banner()
    print("Batch Translation")
    print(f"  Input directory:  {input_dir}")
    print(f"  Output directory: {output_dir}")
    print(f"  Target dialect:   {translator.target_dialect}")
    print(f"  Files to process: {len(sql_files)}")
    print(f"  Recursive:        {args.recursive}")
    print("-" * 60)

    report = ConversionReport(target_dialect=translator.target_dialect)
    for input_file in sql_files:
        output_file = output_dir / input_file.relative_to(input_dir)
        conversion = process_single_file(translator, input_file, output_file)
        report.add(conversion)

        status = "✓" if conversion.success else "✗"
        print(f"  {status} {input_file.relative_to(input_dir)} ({len(conversion.applied_rules)} rules applied)")
        for error in conversion.errors:
            print(f"      {error}")

    print("-" * 60)
    print(f"Translated {report.successful_files}/{report.total_files} files")

    if args.report:
        print_conversion_report(report, output_format=args.report_format, output_file=args.report_output)

    return 0 if report.failed_files == 0 else 1


def split_file(args):
    """Print the statements of a SQL script, one per block."""
    input_path = Path(args.input_file)
    if not input_path.exists():
        print(f"Error: Input file '{input_path}' not found.", file=sys.stderr)
        return 1

    with open(input_path, 'r', encoding='utf-8') as f:
        script = f.read()

    try:
        statements = split_sql(script, args.dialect)
    except ValueError as e:
        # sqlglot rejects unknown dialect names
        print(f"Error: {e}", file=sys.stderr)
        return 1

    for statement in statements:
        print(statement + ";")
        print()
    return 0


def list_dialects(args):
    """List the dialects available in a rule table."""
    table = load_rule_table(args.config)
    counts = table.count_by_dialect()
    if not counts:
        print(f"No rules found in {args.config}")
        return 0

    print(f"Dialects in {args.config}:")
    for dialect in table.dialects():
        enabled, total = counts[dialect]
        marker = " (default)" if dialect == table.default_dialect else ""
        print(f"  {dialect:<20} {enabled:>4}/{total:<4} rules enabled{marker}")
    return 0


def init_config(args):
    """Generate a sample rule table."""
    output_path = Path(args.output)

    output_dir = output_path.parent
    if not output_dir.exists():
        output_dir.mkdir(parents=True, exist_ok=True)

    save_sample_config(str(output_path))
    print(f"✓ Rule table created: {output_path}")
    print("\nUsage:")
    print(f"  python sql2dialect.py convert input.sql -o output.sql --config {output_path} --dialect postgresql")
    return 0


def validate_config_cmd(args):
    """Validate a rule table file."""
    config_path = args.config_file

    print(f"Validating rule table: {config_path}")

    is_valid, errors = validate_config(config_path)
    if not is_valid:
        print("\n✗ Rule table is invalid!")
        print("\nErrors:")
        for error in errors:
            print(f"  • {error}")
        return 1

    table = load_rule_table(config_path)
    enabled_rules = [r for r in table.rules if r.enabled]

    print("\n✓ Rule table is valid!")
    print("\nRules summary:")
    print(f"  Total rules:    {len(table.rules)}")
    print(f"  Enabled rules:  {len(enabled_rules)}")
    print(f"  Disabled rules: {len(table.rules) - len(enabled_rules)}")
    print(f"  Dialects:       {', '.join(table.dialects()) or '-'}")

    print("\nSettings:")
    print(f"  Default dialect: {table.default_dialect or '-'}")
    print(f"  Max iterations:  {table.max_iterations or 'unbounded'}")
    return 0


def positive_int(value: str) -> int:
    """argparse type for counts that must be at least 1."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}")
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {number}")
    return number


def _add_translation_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        '--config', '-c',
        required=True,
        help='Path to the JSON or CSV rule table'
    )
    parser.add_argument(
        '--dialect', '-d',
        help='Target dialect (default: the rule table\'s default_dialect)'
    )
    parser.add_argument(
        '--max-iterations',
        type=positive_int,
        default=None,
        help='Fail a rule that keeps matching after this many replacements'
    )
    parser.add_argument(
        '--check',
        action='store_true',
        default=False,
        help='Parse the translated SQL with sqlglot and report problems as warnings'
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="SQL Dialect Translator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Translate a file to PostgreSQL
  python sql2dialect.py convert input.sql -o output.sql -c rules.json -d postgresql

  # Batch translate a directory with a report
  python sql2dialect.py batch ./mssql ./postgresql -c rules.json -d postgresql -r --report

  # Quick inline translation
  python sql2dialect.py inline "SELECT ISNULL(a, 0) FROM t" -c rules.json -d oracle

  # Split a script into statements
  python sql2dialect.py split script.sql

  # Generate and validate a rule table
  python sql2dialect.py init-config -o rules.json
  python sql2dialect.py validate-config rules.json
"""
    )
    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        default='WARNING',
        help='Logging level for diagnostics on stderr (default: WARNING)'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        default=False,
        help='Show debug logging and the rules applied'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    convert_parser = subparsers.add_parser('convert', help='Translate a SQL file')
    convert_parser.add_argument('input_file', help='Input SQL file')
    convert_parser.add_argument(
        '--output', '-o',
        help='Output file path (prints to stdout if not specified)'
    )
    _add_translation_options(convert_parser)
    convert_parser.set_defaults(func=convert_file)

    batch_parser = subparsers.add_parser('batch', help='Translate all SQL files in a directory')
    batch_parser.add_argument('input_dir', help='Input directory containing SQL files')
    batch_parser.add_argument('output_dir', help='Output directory for translated SQL files')
    _add_translation_options(batch_parser)
    batch_parser.add_argument(
        '--recursive', '-r',
        action='store_true',
        default=False,
        help='Recursively process subdirectories'
    )
    batch_parser.add_argument(
        '--report', '-R',
        action='store_true',
        default=False,
        help='Generate a conversion report after batch processing'
    )
    batch_parser.add_argument(
        '--report-format',
        choices=['text', 'json'],
        default='text',
        help='Format for the conversion report (default: text)'
    )
    batch_parser.add_argument(
        '--report-output',
        help='Write report to file instead of stdout'
    )
    batch_parser.set_defaults(func=batch_translate)

    inline_parser = subparsers.add_parser('inline', help='Translate a SQL statement from the command line')
    inline_parser.add_argument('sql', help='SQL statement to translate')
    _add_translation_options(inline_parser)
    inline_parser.set_defaults(func=translate_inline)

    split_parser = subparsers.add_parser('split', help='Split a SQL script into statements')
    split_parser.add_argument('input_file', help='Input SQL script')
    split_parser.add_argument(
        '--dialect', '-d',
        help='sqlglot dialect used to tokenize the script (e.g. tsql, postgres)'
    )
    split_parser.set_defaults(func=split_file)

    dialects_parser = subparsers.add_parser('dialects', help='List the dialects of a rule table')
    dialects_parser.add_argument(
        '--config', '-c',
        required=True,
        help='Path to the JSON or CSV rule table'
    )
    dialects_parser.set_defaults(func=list_dialects)

    init_config_parser = subparsers.add_parser('init-config', help='Generate a sample rule table')
    init_config_parser.add_argument(
        '--output', '-o',
        default='rules/replacement_patterns.json',
        help='Output path for the rule table (default: rules/replacement_patterns.json)'
    )
    init_config_parser.set_defaults(func=init_config)

    validate_config_parser = subparsers.add_parser('validate-config', help='Validate a rule table')
    validate_config_parser.add_argument('config_file', help='Path to the rule table to validate')
    validate_config_parser.set_defaults(func=validate_config_cmd)

    return parser


def main(argv: Optional[List[str]] = None):
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        print_banner()
        parser.print_help()
        return 0

    configure_logging(args)

    try:
        return args.func(args)
    except (SqlRenderError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
