"""Use cases for managing todos."""

from .bulk_update_todos import (
    BULK_ACTIONS,
    BULK_COMPLETE,
    BULK_DELETE,
    BulkResult,
    bulk_update_todos,
)
from .create_todo import create_todo
from .delete_todo import delete_todo
from .export_todos import (
    EXPORT_CSV,
    EXPORT_FORMATS,
    EXPORT_JSON,
    ExportFile,
    export_all_todos,
    export_user_todos,
)
from .list_todos import STATUS_FILTERS, get_todo, list_todos
from .toggle_todo import toggle_todo
from .update_todo import update_todo

__all__ = [
    "BULK_ACTIONS",
    "BULK_COMPLETE",
    "BULK_DELETE",
    "BulkResult",
    "bulk_update_todos",
    "create_todo",
    "delete_todo",
    "EXPORT_CSV",
    "EXPORT_FORMATS",
    "EXPORT_JSON",
    "ExportFile",
    "export_all_todos",
    "export_user_todos",
    "STATUS_FILTERS",
    "get_todo",
    "list_todos",
    "toggle_todo",
    "update_todo",
]
