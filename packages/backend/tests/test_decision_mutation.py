"""Partial-update builder tests (no database).

Learn: Compiling the statement against a dialect shows exactly what SQL
would run. Client text must only ever appear as bound parameters.
"""

from datetime import datetime, timezone

import pytest
from sqlalchemy.dialects import postgresql

from sentinent.errors import ValidationError
from sentinent.services.decision_mutation import build_decision_update, collect_changes

NOW = datetime(2026, 3, 1, 12, 0, 0, 123456, tzinfo=timezone.utc)


def _compile(stmt):
    return stmt.compile(dialect=postgresql.dialect())


def test_collect_changes_skips_none_and_trims():
    assert collect_changes(title="  New  ", status=None) == {"title": "New"}


def test_collect_changes_requires_something():
    with pytest.raises(ValidationError) as exc:
        collect_changes()
    assert exc.value.detail == "At least one field is required"


def test_collect_changes_rejects_blank():
    with pytest.raises(ValidationError) as exc:
        collect_changes(title="ok", description="   ")
    assert exc.value.detail == "Description cannot be empty"


def test_update_sets_only_supplied_columns():
    compiled = _compile(build_decision_update(5, 9, {"status": "accepted"}, NOW))
    sql = str(compiled)
    assert sql.startswith("UPDATE decisions SET")
    assert "status=" in sql
    assert "updated_at=" in sql
    assert "title" not in sql
    assert "description" not in sql
    assert "decisions.id = " in sql
    assert "decisions.owner_id = " in sql


def test_update_values_are_bound_parameters():
    hostile = "x'; DROP TABLE users; --"
    compiled = _compile(build_decision_update(5, 9, {"title": hostile}, NOW))
    assert "DROP TABLE" not in str(compiled)
    params = compiled.params
    assert hostile in params.values()
    assert NOW in params.values()
    assert 5 in params.values()
    assert 9 in params.values()


def test_update_refuses_unknown_columns():
    with pytest.raises(ValueError):
        build_decision_update(5, 9, {"owner_id": "1"}, NOW)


def test_update_refuses_empty_change_set():
    with pytest.raises(ValueError):
        build_decision_update(5, 9, {}, NOW)
