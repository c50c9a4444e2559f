"""Shared fixtures for the sqlrender test suite."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

RULE_TABLE = {
    "settings": {"default_dialect": "postgresql"},
    "replacement_patterns": [
        {"name": "isnull", "dialect": "postgresql", "pattern": "ISNULL(@a,@b)", "replacement": "COALESCE(@a,@b)"},
        {"name": "getdate", "dialect": "postgresql", "pattern": "GETDATE()", "replacement": "CURRENT_DATE"},
        {"name": "len", "dialect": "postgresql", "pattern": "LEN(@a)", "replacement": "LENGTH(@a)", "enabled": False},
        {"name": "nvl", "dialect": "Oracle", "pattern": "ISNULL(@a,@b)", "replacement": "NVL(@a,@b)"},
        {"name": "loop", "dialect": "netezza", "pattern": "f(@a)", "replacement": "f(@a)"},
    ],
}


@pytest.fixture
def rule_table_data() -> dict:
    """A fresh copy of the rule table used across tests."""
    return json.loads(json.dumps(RULE_TABLE))


@pytest.fixture
def rules_file(tmp_path: Path, rule_table_data: dict) -> Path:
    """Write the shared rule table to a JSON file."""
    path = tmp_path / "rules.json"
    path.write_text(json.dumps(rule_table_data), encoding="utf-8")
    return path
