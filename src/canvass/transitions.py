"""
State transitions for the survey form.

Every user interaction maps to one function here. Each takes the current
value and returns a new one; nothing is mutated and nothing touches
storage, so every transition can be tested without a screen.

State machine:
    CREATE --enter_edit_mode--> EDIT
    EDIT   --save / clear-----> CREATE
    any    --tally tap / keystroke--> same mode
"""

from dataclasses import replace
from typing import Optional, Sequence, Tuple

from canvass.errors import RecordNotFound
from canvass.model import (
    TALLY_FIELDS,
    TEXT_FIELDS,
    AppState,
    Draft,
    SurveyRecord,
    new_record_id,
)


def blank_draft() -> Draft:
    return Draft()


def enter_edit_mode(state: AppState, index: int) -> AppState:
    """
    Copy the record at `index` into the draft and make it the edit target.

    Raises:
        IndexError: If index is outside the list
    """
    if index < 0 or index >= len(state.records):
        raise IndexError(f"No survey record at index {index}")
    record = state.records[index]
    draft = Draft(
        address=record.address,
        si=record.si,
        no=record.no,
        ct=record.ct,
        interest=record.interest,
        notes=record.notes,
        editing_id=record.id,
    )
    return replace(state, draft=draft)


def clear(state: AppState) -> AppState:
    """Reset every draft field and drop the edit target."""
    return replace(state, draft=blank_draft())


def _check_tally(field_name: str) -> None:
    if field_name not in TALLY_FIELDS:
        raise ValueError(
            f"Unknown tally field {field_name!r}; expected one of {', '.join(TALLY_FIELDS)}"
        )


def increment(draft: Draft, field_name: str) -> Draft:
    _check_tally(field_name)
    return replace(draft, **{field_name: getattr(draft, field_name) + 1})


def decrement(draft: Draft, field_name: str) -> Draft:
    # No floor: counters may go negative.
    _check_tally(field_name)
    return replace(draft, **{field_name: getattr(draft, field_name) - 1})


def set_text(draft: Draft, field_name: str, value: str) -> Draft:
    if field_name not in TEXT_FIELDS:
        raise ValueError(
            f"Unknown text field {field_name!r}; expected one of {', '.join(TEXT_FIELDS)}"
        )
    return replace(draft, **{field_name: value})


def record_from_draft(draft: Draft, recorded_at: str, record_id: Optional[str] = None) -> SurveyRecord:
    """
    Build the record a save would store.

    In Edit mode the record keeps the id of the one it replaces, so its
    identity survives edits; in Create mode a new id is generated.
    """
    if record_id is None:
        record_id = draft.editing_id or new_record_id()
    return SurveyRecord(
        address=draft.address,
        si=draft.si,
        no=draft.no,
        ct=draft.ct,
        interest=draft.interest,
        notes=draft.notes,
        recorded_at=recorded_at,
        id=record_id,
    )


def index_of(records: Sequence[SurveyRecord], record_id: str) -> int:
    """
    Current position of a record.

    Raises:
        RecordNotFound: If no record carries record_id
    """
    for i, record in enumerate(records):
        if record.id == record_id:
            return i
    raise RecordNotFound(record_id)


def apply_add(records: Sequence[SurveyRecord], record: SurveyRecord) -> Tuple[SurveyRecord, ...]:
    """Append; a record whose id is already taken is stored under a new id."""
    if any(r.id == record.id for r in records):
        record = replace(record, id=new_record_id())
    return tuple(records) + (record,)


def apply_update(
    records: Sequence[SurveyRecord], record_id: str, record: SurveyRecord
) -> Tuple[SurveyRecord, ...]:
    """Replace the record carrying record_id, keeping its position."""
    position = index_of(records, record_id)
    updated = list(records)
    updated[position] = record
    return tuple(updated)


def apply_delete_at(records: Sequence[SurveyRecord], index: int) -> Tuple[SurveyRecord, ...]:
    """Remove the record at index; every later record shifts left by one."""
    if index < 0 or index >= len(records):
        raise IndexError(f"No survey record at index {index}")
    return tuple(records[:index]) + tuple(records[index + 1:])
