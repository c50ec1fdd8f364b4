"""Session-scoped store of notification records."""

from __future__ import annotations

from typing import Any, Iterator

from taskboard.domain.entities import NotificationRecord
from taskboard.utils import isoformat_or_none


class NotificationInbox:
    """Ordered, newest-first notification records keyed by id."""

    def __init__(self) -> None:
        self._records: list[NotificationRecord] = []

    def insert(self, record: NotificationRecord) -> bool:
        """Prepend ``record`` unless a record with the same id is present."""

        if record.id in self:
            return False
        self._records.insert(0, record)
        return True

    def get(self, record_id: str) -> NotificationRecord | None:
        for record in self._records:
            if record.id == record_id:
                return record
        return None

    def mark_read(self, record_id: str) -> bool:
        record = self.get(record_id)
        if record is None or record.read:
            return False
        record.read = True
        return True

    def mark_all_read(self) -> int:
        changed = 0
        for record in self._records:
            if not record.read:
                record.read = True
                changed += 1
        return changed

    def remove(self, record_id: str) -> bool:
        record = self.get(record_id)
        if record is None:
            return False
        self._records.remove(record)
        return True

    def clear_all(self) -> int:
        removed = len(self._records)
        self._records.clear()
        return removed

    def unread_count(self) -> int:
        return sum(1 for record in self._records if not record.read)

    @property
    def records(self) -> tuple[NotificationRecord, ...]:
        return tuple(self._records)

    def as_payload(self) -> dict[str, Any]:
        """Return a JSON-serialisable view of the inbox."""

        return {
            "unreadCount": self.unread_count(),
            "items": [
                {
                    "id": record.id,
                    "type": record.kind,
                    "title": record.title,
                    "message": record.message,
                    "createdAt": isoformat_or_none(record.created_at),
                    "read": record.read,
                    "action": (
                        {"label": record.action.label, "url": record.action.target}
                        if record.action is not None
                        else None
                    ),
                }
                for record in self._records
            ],
        }

    def __contains__(self, record_id: object) -> bool:
        return any(record.id == record_id for record in self._records)

    def __iter__(self) -> Iterator[NotificationRecord]:
        return iter(tuple(self._records))

    def __len__(self) -> int:
        return len(self._records)


__all__ = ["NotificationInbox"]
