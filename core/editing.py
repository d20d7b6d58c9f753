"""
Inline edit/delete state for list views, keyed by row id.

    viewing --start_edit--> editing(draft) --begin_save--> saving
    saving --save_succeeded--> viewing
    saving --save_failed--> editing(draft kept, error set)
    editing --cancel--> viewing (draft dropped)

Deletes go through an explicit confirmation step:

    viewing --request_delete--> confirming --confirm_delete--> deleting
    deleting --delete_succeeded--> (row gone)
    deleting --delete_failed--> viewing (error set until take_error)
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Hashable, Mapping, Optional, Sequence

VIEWING = "viewing"
EDITING = "editing"
SAVING = "saving"
CONFIRMING = "confirming"
DELETING = "deleting"


class InvalidTransition(RuntimeError):
    pass


@dataclass(frozen=True)
class RowState:
    status: str = VIEWING
    draft: dict = field(default_factory=dict)
    error: Optional[str] = None

    @property
    def editing(self) -> bool:
        return self.status in (EDITING, SAVING)


class RowEditor:
    def __init__(self, fields: Sequence[str]):
        self.fields = tuple(fields)
        self._rows: dict[Hashable, RowState] = {}

    def state(self, row_id: Hashable) -> RowState:
        return self._rows.get(row_id, RowState())

    @property
    def busy(self) -> bool:
        return any(s.status in (SAVING, DELETING) for s in self._rows.values())

    def _expect(self, row_id: Hashable, *statuses: str) -> RowState:
        st = self.state(row_id)
        if st.status not in statuses:
            raise InvalidTransition(f"row {row_id!r} is {st.status}, expected {' or '.join(statuses)}")
        return st

    def _set(self, row_id: Hashable, st: RowState) -> RowState:
        if st.status == VIEWING and st.error is None:
            self._rows.pop(row_id, None)
        else:
            self._rows[row_id] = st
        return st

    # ---- edit ----
    def start_edit(self, row_id: Hashable, row: Mapping[str, Any]) -> RowState:
        self._expect(row_id, VIEWING)
        draft = {f: ("" if row.get(f) is None else row.get(f)) for f in self.fields}
        return self._set(row_id, RowState(status=EDITING, draft=draft))

    def update_draft(self, row_id: Hashable, name: str, value: Any) -> RowState:
        st = self._expect(row_id, EDITING)
        if name not in self.fields:
            raise KeyError(name)
        return self._set(row_id, replace(st, draft={**st.draft, name: value}))

    def cancel(self, row_id: Hashable) -> RowState:
        self._expect(row_id, EDITING, CONFIRMING)
        return self._set(row_id, RowState())

    def begin_save(self, row_id: Hashable) -> dict:
        st = self._expect(row_id, EDITING)
        self._set(row_id, replace(st, status=SAVING, error=None))
        return dict(st.draft)

    def save_succeeded(self, row_id: Hashable) -> RowState:
        self._expect(row_id, SAVING)
        return self._set(row_id, RowState())

    def save_failed(self, row_id: Hashable, error: str) -> RowState:
        st = self._expect(row_id, SAVING)
        return self._set(row_id, replace(st, status=EDITING, error=str(error)))

    # ---- delete ----
    def request_delete(self, row_id: Hashable) -> RowState:
        self._expect(row_id, VIEWING)
        return self._set(row_id, RowState(status=CONFIRMING))

    def cancel_delete(self, row_id: Hashable) -> RowState:
        return self.cancel(row_id)

    def confirm_delete(self, row_id: Hashable) -> RowState:
        self._expect(row_id, CONFIRMING)
        return self._set(row_id, RowState(status=DELETING))

    def delete_succeeded(self, row_id: Hashable) -> None:
        self._expect(row_id, DELETING)
        self._rows.pop(row_id, None)

    def delete_failed(self, row_id: Hashable, error: str) -> RowState:
        self._expect(row_id, DELETING)
        return self._set(row_id, RowState(error=str(error)))

    def clear_error(self, row_id: Hashable) -> RowState:
        return self._set(row_id, replace(self.state(row_id), error=None))

    def take_error(self, row_id: Hashable) -> Optional[str]:
        """
        Return a viewing row's error and clear it, so a failed delete is
        reported once. Editing rows keep their error next to the draft.
        """
        st = self.state(row_id)
        if st.status == VIEWING and st.error is not None:
            self._set(row_id, replace(st, error=None))
        return st.error

    def forget_missing(self, row_ids) -> None:
        # Drop state for rows that no longer exist after a reload.
        keep = set(row_ids)
        for rid in [r for r in self._rows if r not in keep]:
            del self._rows[rid]
