"""
Stage form state

The form keeps camelCase keys (as on the wire) and "" for unset inputs.
build_payload turns it into the PATCH body the stages route expects.
"""
from datetime import date, datetime
from typing import Any, Dict, Optional

from pydantic.alias_generators import to_camel

from app.models.shipping_stage import CHECKLIST_FLAGS, VENDOR_FIELDS

FLAG_FIELDS = tuple(to_camel(name) for name in CHECKLIST_FLAGS)
ID_FIELDS = tuple(to_camel(name) for name in VENDOR_FIELDS) + ("yardId",)
INT_FIELDS = ("unitsInside",)
DATE_FIELDS = ("purchasePaymentDeadline", "purchasePaymentDate", "etd", "eta")
ENUM_FIELDS = ("bookingType", "bookingStatus")
TEXT_FIELDS = (
    "bookingNumber",
    "pod",
    "pol",
    "vesselName",
    "voyageNo",
    "containerNumber",
    "containerSize",
    "sealNumber",
    "dhlTracking",
    "notes",
)
VALUE_FIELDS = ID_FIELDS + INT_FIELDS + DATE_FIELDS + ENUM_FIELDS + TEXT_FIELDS
FORM_FIELDS = FLAG_FIELDS + VALUE_FIELDS


def default_form_state() -> Dict[str, Any]:
    state: Dict[str, Any] = {name: False for name in FLAG_FIELDS}
    state.update({name: "" for name in VALUE_FIELDS})
    return state


def form_from_record(record: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Form state for a stored record (defaults when there is none)"""
    state = default_form_state()
    if not record:
        return state
    for name in FLAG_FIELDS:
        state[name] = bool(record.get(name))
    for name in VALUE_FIELDS:
        value = record.get(name)
        state[name] = "" if value is None else value
    return state


def _to_number(value: Any) -> Any:
    # "12" -> 12, "12.5" -> 12.5, "vendor-3" stays a string
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            return float(text)
        except ValueError:
            return text
    return value


def _to_date(value: Any) -> Optional[str]:
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value).split("T")[0]


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def build_payload(stage: str, state: Dict[str, Any]) -> Dict[str, Any]:
    """Full upsert body for the stages PATCH"""
    payload: Dict[str, Any] = {"stage": stage}
    for name in FLAG_FIELDS:
        payload[name] = bool(state.get(name))
    for name in VALUE_FIELDS:
        value = state.get(name)
        if _blank(value):
            payload[name] = None
        elif name in ID_FIELDS or name in INT_FIELDS:
            payload[name] = _to_number(value)
        elif name in DATE_FIELDS:
            payload[name] = _to_date(value)
        else:
            payload[name] = value
    return payload
