"""Use cases for exporting todos as downloadable files."""

from __future__ import annotations

import csv
import io
import json
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, Sequence

from sqlalchemy.orm import Session

from taskboard.domain.entities import Todo, User
from taskboard.infrastructure.repositories import TodoRepository
from taskboard.utils import isoformat_or_none, utc_now

EXPORT_JSON = "json"
EXPORT_CSV = "csv"
EXPORT_FORMATS = (EXPORT_JSON, EXPORT_CSV)

_USER_CSV_FIELDS = (
    "id",
    "title",
    "description",
    "completed",
    "createdAt",
    "updatedAt",
    "dueDate",
    "tags",
)
_ADMIN_CSV_FIELDS = (
    "ID",
    "Title",
    "Description",
    "Completed",
    "Due Date",
    "Tags",
    "Created At",
    "Updated At",
    "User Email",
    "User Name",
)


@dataclass(frozen=True)
class ExportFile:
    content: str
    media_type: str
    filename: str


def _ensure_format(export_format: str) -> str:
    normalized = (export_format or EXPORT_JSON).lower()
    if normalized not in EXPORT_FORMATS:
        raise ValueError("Format must be json or csv")
    return normalized


def _write_csv(fieldnames: Sequence[str], rows: Iterable[dict[str, Any]]) -> str:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=list(fieldnames))
    writer.writeheader()
    for row in rows:
        writer.writerow(row)
    return buffer.getvalue()


def _user_row(todo: Todo) -> dict[str, Any]:
    return {
        "id": todo.id,
        "title": todo.title,
        "description": todo.description or "",
        "completed": "Yes" if todo.completed else "No",
        "createdAt": isoformat_or_none(todo.created_at) or "",
        "updatedAt": isoformat_or_none(todo.updated_at) or "",
        "dueDate": isoformat_or_none(todo.due_date) or "",
        "tags": ", ".join(todo.tags),
    }


def export_user_todos(session: Session, *, owner: User, export_format: str) -> ExportFile:
    """Return every todo of ``owner`` serialised as JSON or CSV."""

    export_format = _ensure_format(export_format)
    todos = TodoRepository(session).list_for_user(owner.id)
    rows = [_user_row(todo) for todo in todos]

    if export_format == EXPORT_CSV:
        return ExportFile(
            content=_write_csv(_USER_CSV_FIELDS, rows),
            media_type="text/csv",
            filename="todos.csv",
        )
    return ExportFile(
        content=json.dumps(rows, indent=2),
        media_type="application/json",
        filename="todos.json",
    )


def export_all_todos(
    session: Session, *, export_format: str, reference: datetime | None = None
) -> ExportFile:
    """Return every todo in the system together with its owner."""

    export_format = _ensure_format(export_format)
    exported_at = reference or utc_now()
    pairs = TodoRepository(session).list_with_owners()
    filename = f"todos_export_{exported_at.date().isoformat()}.{export_format}"

    if export_format == EXPORT_CSV:
        rows = [
            {
                "ID": todo.id,
                "Title": todo.title,
                "Description": todo.description or "",
                "Completed": "Yes" if todo.completed else "No",
                "Due Date": todo.due_date.date().isoformat() if todo.due_date else "",
                "Tags": ", ".join(todo.tags),
                "Created At": todo.created_at.date().isoformat() if todo.created_at else "",
                "Updated At": todo.updated_at.date().isoformat() if todo.updated_at else "",
                "User Email": owner.email,
                "User Name": owner.name or "",
            }
            for todo, owner in pairs
        ]
        return ExportFile(
            content=_write_csv(_ADMIN_CSV_FIELDS, rows),
            media_type="text/csv",
            filename=filename,
        )

    document = {
        "exportDate": exported_at.isoformat(),
        "totalTodos": len(pairs),
        "todos": [
            {
                "id": todo.id,
                "title": todo.title,
                "description": todo.description or "",
                "completed": todo.completed,
                "dueDate": isoformat_or_none(todo.due_date),
                "tags": list(todo.tags),
                "createdAt": isoformat_or_none(todo.created_at),
                "updatedAt": isoformat_or_none(todo.updated_at),
                "user": {"email": owner.email, "name": owner.name or ""},
            }
            for todo, owner in pairs
        ],
    }
    return ExportFile(
        content=json.dumps(document, indent=2),
        media_type="application/json",
        filename=filename,
    )
