"""
Serialization helpers for survey records.

Provides JSON/YAML round-trip of the record list via an intermediate dict
representation. The dict keys match the payload the mobile app already
writes to the "surveys" slot (additionalInfo, date), so data recorded on
a device loads unchanged. Records from that payload carry no id and get
one on load.
"""
from __future__ import annotations

import json
from dataclasses import replace
from typing import Any, Dict, List, Sequence

import yaml

from canvass.errors import PayloadError
from canvass.model import TALLY_FIELDS, SurveyRecord, new_record_id


def record_to_dict(r: SurveyRecord) -> Dict[str, Any]:
    return {
        "id": r.id,
        "address": r.address,
        "si": r.si,
        "no": r.no,
        "ct": r.ct,
        "interest": r.interest,
        "additionalInfo": r.notes,
        "date": r.recorded_at,
    }


def _tally_from(d: Dict[str, Any], key: str) -> int:
    value = d.get(key, 0)
    if value is None:
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        raise PayloadError(f"Tally {key!r} is not an integer: {value!r}")


def _text_from(d: Dict[str, Any], key: str) -> str:
    value = d.get(key, "")
    return "" if value is None else str(value)


def record_from_dict(d: Any) -> SurveyRecord:
    if not isinstance(d, dict):
        raise PayloadError(f"Survey record must be an object, got {type(d).__name__}")
    tallies = {key: _tally_from(d, key) for key in TALLY_FIELDS}
    return SurveyRecord(
        address=_text_from(d, "address"),
        notes=_text_from(d, "additionalInfo"),
        recorded_at=_text_from(d, "date"),
        id=d.get("id") or new_record_id(),
        **tallies,
    )


def records_to_list(records: Sequence[SurveyRecord]) -> List[Dict[str, Any]]:
    return [record_to_dict(r) for r in records]


def records_from_list(items: Any) -> List[SurveyRecord]:
    if not isinstance(items, list):
        raise PayloadError(f"Survey payload must be a list, got {type(items).__name__}")
    records = []
    seen = set()
    for item in items:
        record = record_from_dict(item)
        if record.id in seen:
            # Ids must be unique; a repeated one is replaced, keeping the content.
            record = replace(record, id=new_record_id())
        seen.add(record.id)
        records.append(record)
    return records


def records_to_json(records: Sequence[SurveyRecord]) -> str:
    return json.dumps(records_to_list(records), ensure_ascii=False)


def records_from_json(s: str) -> List[SurveyRecord]:
    try:
        items = json.loads(s)
    except json.JSONDecodeError as e:
        raise PayloadError(f"Malformed survey payload: {e}") from e
    return records_from_list(items)


def records_to_yaml(records: Sequence[SurveyRecord]) -> str:
    return yaml.safe_dump(records_to_list(records), allow_unicode=True, sort_keys=False)


def records_from_yaml(s: str) -> List[SurveyRecord]:
    try:
        items = yaml.safe_load(s)
    except yaml.YAMLError as e:
        raise PayloadError(f"Malformed survey YAML: {e}") from e
    if items is None:
        return []
    return records_from_list(items)
