"""
Conversion report generation for batch SQL translation.
"""

import json
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Dict, Any, Optional

from .translator import TranslationResult


@dataclass
class FileConversion:
    """Outcome of translating a single file."""
    input_file: str
    output_file: str
    success: bool
    applied_rules: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


@dataclass
class ConversionReport:
    """Aggregated results of a batch conversion."""
    target_dialect: str
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())
    files: List[FileConversion] = field(default_factory=list)
    rule_hits: Counter = field(default_factory=Counter)

    @property
    def total_files(self) -> int:
        return len(self.files)

    @property
    def successful_files(self) -> int:
        return sum(1 for f in self.files if f.success)

    @property
    def failed_files(self) -> int:
        return self.total_files - self.successful_files

    @property
    def conversion_rate(self) -> float:
        """Percentage of files translated successfully."""
        if self.total_files == 0:
            return 0.0
        return self.successful_files / self.total_files * 100

    def add(self, conversion: FileConversion) -> None:
        self.files.append(conversion)
        self.rule_hits.update(conversion.applied_rules)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'timestamp': self.timestamp,
            'target_dialect': self.target_dialect,
            'summary': {
                'total_files': self.total_files,
                'successful': self.successful_files,
                'failed': self.failed_files,
                'conversion_rate': f"{self.conversion_rate:.1f}%",
            },
            'rule_hits': dict(self.rule_hits.most_common()),
            'failed_files': [
                {'file': f.input_file, 'errors': f.errors}
                for f in self.files if not f.success
            ],
            'warnings': [
                {'file': f.input_file, 'warnings': f.warnings}
                for f in self.files if f.warnings
            ],
        }


def file_conversion_from_result(
    result: TranslationResult,
    input_file: str,
    output_file: str
) -> FileConversion:
    """Summarise a whole-file TranslationResult for the report."""
    return FileConversion(
        input_file=input_file,
        output_file=output_file,
        success=result.success,
        applied_rules=list(result.applied_rules),
        errors=list(result.errors),
        warnings=list(result.warnings),
    )


def format_text_report(report: ConversionReport, width: int = 70) -> str:
    """Render a report as plain text."""
    lines = []
    lines.append("")
    lines.append("=" * width)
    lines.append(f" SQL TRANSLATION REPORT ({report.target_dialect}) ".center(width))
    lines.append("=" * width)
    lines.append(f"  Generated: {report.timestamp}")
    lines.append("")

    bar_width = 40
    filled = int(bar_width * report.conversion_rate / 100)
    bar = "█" * filled + "░" * (bar_width - filled)
    lines.append(f"  Conversion rate:  [{bar}] {report.conversion_rate:.1f}%")
    lines.append(f"  Total files:      {report.total_files:>6}")
    lines.append(f"  ✓ Translated:     {report.successful_files:>6}")
    lines.append(f"  ✗ Failed:         {report.failed_files:>6}")

    if report.rule_hits:
        lines.append("")
        lines.append("-" * width)
        lines.append(" RULES APPLIED ".center(width))
        lines.append("-" * width)
        lines.append(f"  {'Rule':<50} {'Files':>8}")
        for rule_name, count in report.rule_hits.most_common():
            lines.append(f"  {rule_name:<50} {count:>8}")

    failed = [f for f in report.files if not f.success]
    if failed:
        lines.append("")
        lines.append("-" * width)
        lines.append(" FAILED FILES ".center(width))
        lines.append("-" * width)
        for conversion in failed:
            lines.append(f"  ✗ {conversion.input_file}")
            for error in conversion.errors:
                lines.append(f"      {error}")

    with_warnings = [f for f in report.files if f.warnings]
    if with_warnings:
        lines.append("")
        lines.append("-" * width)
        lines.append(" WARNINGS ".center(width))
        lines.append("-" * width)
        for conversion in with_warnings:
            lines.append(f"  ⚠ {conversion.input_file}")
            for warning in conversion.warnings:
                lines.append(f"      {warning}")

    lines.append("")
    return "\n".join(lines)


def print_conversion_report(
    report: ConversionReport,
    output_format: str = 'text',
    output_file: Optional[str] = None
) -> None:
    """
    Print the conversion report in the specified format.

    Args:
        report: ConversionReport to print
        output_format: 'text' or 'json'
        output_file: Optional file path to write the report
    """
    if output_format == 'json':
        output = json.dumps(report.to_dict(), indent=2, ensure_ascii=False)
    else:
        output = format_text_report(report)

    if output_file:
        with open(output_file, 'w', encoding='utf-8') as f:
            f.write(output)
        print(f"Report written to: {output_file}")
    else:
        print(output)
