"""
SurveyApp — the survey store and form controller behind the screen.

Data flow:
    Draft --save--> records --save_all--> key-value slot
    key-value slot --load_all (once, at startup)--> records
    records --export--> encuestas.csv --share-->

ERROR HANDLING:
    Storage and export failures are caught here, logged, and recorded in
    state.status. They never propagate to the front end and never roll
    back the in-memory list. The app always stays interactive.

ORDERING:
    The in-memory list changes first, then the whole list is persisted.
    The "saved"/"deleted" notice fires, and the draft is cleared, only if
    the write returned without raising.
"""

import logging
from dataclasses import replace
from pathlib import Path
from typing import Callable, Optional, Tuple

from canvass import transitions
from canvass.clock import Clock
from canvass.errors import CanvassError, RecordNotFound
from canvass.export import Exporter
from canvass.model import AppState, Draft, Mode, OperationStatus, SurveyRecord
from canvass.storage import SurveyRepository

logger = logging.getLogger(__name__)

# (title, message) -> True to go ahead
Confirm = Callable[[str, str], bool]
# (title, message) -> None
Notify = Callable[[str, str], None]

SAVED_TITLE = "Guardado"
SAVED_MESSAGE = "Encuesta guardada exitosamente"
DELETED_TITLE = "Eliminado"
DELETED_MESSAGE = "Encuesta eliminada exitosamente"
CONFIRM_TITLE = "Confirmación"
CONFIRM_MESSAGE = "¿Estás seguro de que deseas eliminar esta encuesta?"


def _decline(title: str, message: str) -> bool:
    return False


def _ignore(title: str, message: str) -> None:
    return None


class SurveyApp:
    """
    Owns the one AppState and applies user interactions to it.

    Args:
        repository: Where the survey list is persisted
        clock: Stamps recorded_at on save (defaults to the system clock)
        exporter: Writes and shares the export file (optional)
        confirm: Two-choice prompt (Cancelar / Eliminar) asked before a delete;
            without one, deletes are declined
        notify: Dismissable notice shown after a successful save or delete
    """

    def __init__(
        self,
        repository: SurveyRepository,
        clock: Optional[Clock] = None,
        exporter: Optional[Exporter] = None,
        confirm: Confirm = _decline,
        notify: Notify = _ignore,
    ):
        self.repository = repository
        self.clock = clock or Clock()
        self.exporter = exporter
        self.confirm = confirm
        self.notify = notify
        self.state = AppState()

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def records(self) -> Tuple[SurveyRecord, ...]:
        return self.state.records

    @property
    def draft(self) -> Draft:
        return self.state.draft

    @property
    def mode(self) -> Mode:
        return self.state.mode

    @property
    def status(self) -> OperationStatus:
        return self.state.status

    def __len__(self) -> int:
        return len(self.state.records)

    def record_at(self, index: int) -> SurveyRecord:
        return self.state.records[index]

    def id_at(self, index: int) -> str:
        return self.state.records[index].id

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _set_status(self, ok: bool, operation: str, message: str = "") -> None:
        self.state = replace(self.state, status=OperationStatus(ok=ok, operation=operation, message=message))

    def _persist(self, operation: str) -> bool:
        try:
            self.repository.save_all(self.state.records)
        except (CanvassError, OSError) as e:
            logger.error("Error saving surveys during %s: %s", operation, e)
            self._set_status(False, operation, str(e))
            return False
        return True

    # ------------------------------------------------------------------
    # Survey store
    # ------------------------------------------------------------------

    def load_all(self) -> None:
        """Replace the in-memory list with the persisted one (startup only)."""
        try:
            records = self.repository.load_all()
        except (CanvassError, OSError) as e:
            logger.error("Error loading surveys: %s", e)
            self._set_status(False, "load", str(e))
            return
        self.state = replace(self.state, records=tuple(records))
        self._set_status(True, "load", f"{len(records)} encuestas")

    def add(self, record: SurveyRecord) -> bool:
        """Append, persist, then clear the draft. Returns whether the write succeeded."""
        self.state = replace(self.state, records=transitions.apply_add(self.state.records, record))
        if not self._persist("add"):
            return False
        self.state = transitions.clear(self.state)
        self._set_status(True, "add", SAVED_MESSAGE)
        logger.info("Saved survey %s (%d total)", self.state.records[-1].id, len(self.state.records))
        self.notify(SAVED_TITLE, SAVED_MESSAGE)
        return True

    def update(self, record_id: str, record: SurveyRecord) -> bool:
        """
        Replace the record carrying record_id in place, persist, then clear
        the draft and the edit target.

        The stored record keeps record_id as its id; every other field comes
        from `record`.

        A record_id that no longer exists (deleted meanwhile) is reported in
        status and changes nothing.
        """
        record = replace(record, id=record_id)
        try:
            records = transitions.apply_update(self.state.records, record_id, record)
        except RecordNotFound as e:
            logger.error("Error updating survey: %s", e)
            self._set_status(False, "update", str(e))
            return False

        self.state = replace(self.state, records=records)
        if not self._persist("update"):
            return False
        self.state = transitions.clear(self.state)
        self._set_status(True, "update", SAVED_MESSAGE)
        logger.info("Updated survey %s", record_id)
        self.notify(SAVED_TITLE, SAVED_MESSAGE)
        return True

    def update_at(self, index: int, record: SurveyRecord) -> bool:
        """Replace the record at index. Raises IndexError outside the list."""
        return self.update(self.id_at(index), record)

    def delete(self, index: int) -> bool:
        """
        Ask for confirmation, then remove the record at index and persist.

        Returns:
            True if a record was removed from the list

        Raises:
            IndexError: If index is outside the list
        """
        if index < 0 or index >= len(self.state.records):
            raise IndexError(f"No survey record at index {index}")
        record = self.state.records[index]

        if not self.confirm(CONFIRM_TITLE, CONFIRM_MESSAGE):
            logger.debug("Delete of survey %s cancelled", record.id)
            return False

        self.state = replace(self.state, records=transitions.apply_delete_at(self.state.records, index))
        if self.state.draft.editing_id == record.id:
            # The edit target is gone; keep the typed values as a new draft.
            self.state = replace(self.state, draft=replace(self.state.draft, editing_id=None))

        if self._persist("delete"):
            self._set_status(True, "delete", DELETED_MESSAGE)
            logger.info("Deleted survey %s (%d left)", record.id, len(self.state.records))
            self.notify(DELETED_TITLE, DELETED_MESSAGE)
        return True

    # ------------------------------------------------------------------
    # Form
    # ------------------------------------------------------------------

    def save(self) -> bool:
        """Stamp the draft with the clock and add it, or update the edit target."""
        draft = self.state.draft
        record = transitions.record_from_draft(draft, recorded_at=self.clock.timestamp())
        if draft.editing_id is None:
            return self.add(record)
        return self.update(draft.editing_id, record)

    def edit(self, index: int) -> None:
        self.state = transitions.enter_edit_mode(self.state, index)

    def clear(self) -> None:
        self.state = transitions.clear(self.state)

    def increment(self, field_name: str) -> int:
        draft = transitions.increment(self.state.draft, field_name)
        self.state = replace(self.state, draft=draft)
        return getattr(draft, field_name)

    def decrement(self, field_name: str) -> int:
        draft = transitions.decrement(self.state.draft, field_name)
        self.state = replace(self.state, draft=draft)
        return getattr(draft, field_name)

    def set_address(self, value: str) -> None:
        self.state = replace(self.state, draft=transitions.set_text(self.state.draft, "address", value))

    def set_notes(self, value: str) -> None:
        self.state = replace(self.state, draft=transitions.set_text(self.state.draft, "notes", value))

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def export(self) -> Optional[Path]:
        """Write and share the export file. Returns its path, or None on failure."""
        if self.exporter is None:
            logger.error("Error exporting surveys: no exporter configured")
            self._set_status(False, "export", "No exporter configured")
            return None
        try:
            path = self.exporter.export(self.state.records)
        except CanvassError as e:
            logger.error("Error exporting surveys: %s", e)
            self._set_status(False, "export", str(e))
            return None
        self._set_status(True, "export", str(path))
        return path
