"""Partial-update builder for decisions.

Learn: A PATCH body names any subset of the mutable fields. The caller
only ever influences bound parameter VALUES — the set of columns that
can appear in the UPDATE comes from the fixed map below, never from
request keys, so no request text reaches the statement itself.

Rules:
- omitted (or null) field  → left unchanged
- present but blank field  → ValidationError (not "leave unchanged")
- nothing supplied         → ValidationError, before any DB access
- updated_at               → always bumped, never caller-settable
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Update, update

from sentinent.db.models import Decision
from sentinent.errors import ValidationError
from sentinent.validation import require_text

UPDATABLE_COLUMNS = {
    "title": Decision.title,
    "description": Decision.description,
    "status": Decision.status,
}


def collect_changes(
    title: Optional[str] = None,
    description: Optional[str] = None,
    status: Optional[str] = None,
) -> dict[str, str]:
    """Validate the supplied fields and return {field: trimmed value}."""
    supplied = {"title": title, "description": description, "status": status}
    changes = {}
    for field in UPDATABLE_COLUMNS:
        value = supplied[field]
        if value is None:
            continue
        changes[field] = require_text(value, field)

    if not changes:
        raise ValidationError("At least one field is required")
    return changes


def build_decision_update(
    decision_id: int,
    owner_id: int,
    changes: dict[str, str],
    now: datetime,
) -> Update:
    """UPDATE decisions SET <changes>, updated_at WHERE id AND owner_id.

    Scoping by owner_id in the WHERE clause means a non-owner's update
    simply matches zero rows.
    """
    unknown = set(changes) - set(UPDATABLE_COLUMNS)
    if unknown:
        raise ValueError(f"not updatable: {sorted(unknown)}")
    if not changes:
        raise ValueError("empty change set")

    values = {UPDATABLE_COLUMNS[field]: value for field, value in changes.items()}
    values[Decision.updated_at] = now
    return (
        update(Decision)
        .where(Decision.id == decision_id, Decision.owner_id == owner_id)
        .values(values)
        .execution_options(synchronize_session=False)
    )
