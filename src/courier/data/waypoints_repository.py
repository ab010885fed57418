"""Helpers for turning spreadsheet rows into delivery waypoints."""

from __future__ import annotations

import logging
import math
from io import BytesIO
from typing import Any, Iterable, Mapping, Optional

from openpyxl import load_workbook

from ..models.domain import Waypoint

logger = logging.getLogger(__name__)

# Header aliases, compared after strip() + lower()
STOP_COLUMNS = ("stop",)
SEQUENCE_COLUMNS = ("sequence",)
LATITUDE_COLUMNS = ("latitude", "lat")
LONGITUDE_COLUMNS = ("longitude", "lng", "lon")
ADDRESS_COLUMNS = ("destination address", "address")
TRACKING_COLUMNS = ("spx tn", "tracking code")
GROUPING_COLUMNS = ("zipcode", "postal code", "cep", "grouping code")


def _normalize_keys(row: Mapping[Any, Any]) -> dict[str, Any]:
    return {str(key).strip().lower(): value for key, value in row.items() if key is not None}


def _lookup(row: Mapping[str, Any], aliases: Iterable[str]) -> Any:
    for alias in aliases:
        value = row.get(alias)
        if value is not None:
            return value
    return None


def _is_missing(value: Any) -> bool:
    """Zero and blank values count as missing for the required columns."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value == 0
    return False


def _coerce_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        # Spreadsheets exported with a decimal comma, e.g. "-23,5501"
        if text.count(",") == 1 and "." not in text:
            text = text.replace(",", ".")
        try:
            number = float(text)
        except ValueError:
            return None
    return number if math.isfinite(number) else None


def _coerce_int(value: Any) -> Optional[int]:
    number = _coerce_float(value)
    if number is None or not number.is_integer():
        return None
    return int(number)


def _optional_text(value: Any) -> Optional[str]:
    if _is_missing(value) or value is False:
        return None
    text = str(value).strip()
    return text or None


def parse_row(row: Mapping[Any, Any]) -> Optional[Waypoint]:
    """Build a waypoint from one loosely typed record, or None if it is unusable."""

    normalized = _normalize_keys(row)
    raw_stop = _lookup(normalized, STOP_COLUMNS)
    raw_sequence = _lookup(normalized, SEQUENCE_COLUMNS)
    raw_lat = _lookup(normalized, LATITUDE_COLUMNS)
    raw_lng = _lookup(normalized, LONGITUDE_COLUMNS)
    if any(_is_missing(value) for value in (raw_stop, raw_sequence, raw_lat, raw_lng)):
        return None

    stop_id = _coerce_int(raw_stop)
    sequence = _coerce_int(raw_sequence)
    lat = _coerce_float(raw_lat)
    lng = _coerce_float(raw_lng)
    if stop_id is None or sequence is None or lat is None or lng is None:
        logger.debug(
            f"Rejecting row with non-numeric required fields: "
            f"stop={raw_stop!r} sequence={raw_sequence!r} lat={raw_lat!r} lng={raw_lng!r}"
        )
        return None

    address = _lookup(normalized, ADDRESS_COLUMNS)
    return Waypoint(
        stop_id=stop_id,
        sequence=sequence,
        lat=lat,
        lng=lng,
        address="" if address is None else str(address),
        tracking_code=_optional_text(_lookup(normalized, TRACKING_COLUMNS)),
        grouping_code=_optional_text(_lookup(normalized, GROUPING_COLUMNS)),
    )


def parse_rows(rows: Iterable[Mapping[Any, Any]]) -> list[Waypoint]:
    """Normalize raw rows into waypoints, silently dropping incomplete ones."""

    waypoints: list[Waypoint] = []
    total = 0
    for row in rows:
        total += 1
        waypoint = parse_row(row)
        if waypoint is not None:
            waypoints.append(waypoint)
    if total != len(waypoints):
        logger.info(f"Parsed {len(waypoints)} waypoints from {total} rows ({total - len(waypoints)} dropped)")
    return waypoints


def read_workbook_rows(payload: bytes) -> list[dict[str, Any]]:
    """Read the first worksheet of an .xlsx file into header-keyed dictionaries."""

    workbook = load_workbook(filename=BytesIO(payload), read_only=True, data_only=True)
    try:
        worksheet = workbook.worksheets[0]
        rows = worksheet.iter_rows(values_only=True)
        header = next(rows, None)
        if not header:
            return []
        headers = [str(cell).strip() if cell is not None else "" for cell in header]

        records: list[dict[str, Any]] = []
        for values in rows:
            if all(cell is None or (isinstance(cell, str) and not cell.strip()) for cell in values):
                continue
            records.append(
                {name: values[index] if index < len(values) else None for index, name in enumerate(headers) if name}
            )
        return records
    finally:
        workbook.close()


def load_waypoints_from_workbook(payload: bytes) -> list[Waypoint]:
    return parse_rows(read_workbook_rows(payload))
