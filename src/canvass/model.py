"""
Core Survey Model Objects

Defines the data structures of the survey recorder:
    - SurveyRecord (one saved respondent)
    - Draft (the form being edited)
    - Mode (Create / Edit)
    - OperationStatus (outcome of the last persistence or export step)
    - AppState (everything the screen shows, in one record)

ARCHITECTURAL RULE:
    These objects:
        - Know nothing about storage, files or the front end
        - Are immutable (frozen dataclasses, tuples for lists)
        - Are fully serializable
    Changes happen only through the functions in canvass.transitions.
"""

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


TALLY_FIELDS: Tuple[str, ...] = ("si", "no", "ct", "interest")
TEXT_FIELDS: Tuple[str, ...] = ("address", "notes")


def new_record_id() -> str:
    """Generate an immutable identifier for a freshly created record."""
    return uuid.uuid4().hex


@dataclass(frozen=True)
class SurveyRecord:
    """
    One respondent's answer and tally captured in a single save action.

    Properties:
        address:
            Postal address as typed, may be empty

        si, no, ct, interest:
            Tally counters. Signed and unbounded, negative values are legal

        notes:
            Free text ("Información adicional"). May contain commas,
            quotes and line breaks

        recorded_at:
            Human-readable timestamp stamped at save time, not edit time.
            Not sortable; never used for ordering or identity

        id:
            Generated at creation and kept across edits. Records are
            otherwise told apart only by content
    """

    address: str = ""
    si: int = 0
    no: int = 0
    ct: int = 0
    interest: int = 0
    notes: str = ""
    recorded_at: str = ""
    id: str = field(default_factory=new_record_id)


class Mode(Enum):
    """The two screen modes, told apart solely by Draft.editing_id."""
    CREATE = "create"
    EDIT = "edit"


@dataclass(frozen=True)
class Draft:
    """
    The not-yet-saved form state.

    Blank in Create mode; pre-populated from an existing record in Edit
    mode, where editing_id names the record the draft will replace.
    """

    address: str = ""
    si: int = 0
    no: int = 0
    ct: int = 0
    interest: int = 0
    notes: str = ""
    editing_id: Optional[str] = None

    @property
    def mode(self) -> Mode:
        return Mode.CREATE if self.editing_id is None else Mode.EDIT


@dataclass(frozen=True)
class OperationStatus:
    """
    Outcome of the most recent load, save, delete or export.

    Failures never interrupt the user; this is the non-blocking
    indicator a front end can show next to the form.
    """

    ok: bool = True
    operation: str = ""
    message: str = ""


@dataclass(frozen=True)
class AppState:
    """
    Root container for everything the screen shows.

    INVARIANTS:
        - records is in insertion order
        - at most one record is in edit (draft.editing_id)
        - draft.editing_id, when set, names a record in records
          unless that record was deleted underneath the draft
    """

    records: Tuple[SurveyRecord, ...] = ()
    draft: Draft = field(default_factory=Draft)
    status: OperationStatus = field(default_factory=OperationStatus)

    @property
    def mode(self) -> Mode:
        return self.draft.mode
