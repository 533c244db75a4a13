"""
Gated checklist flags

Some flags may only be ticked once their prerequisite record exists: a cost
entry (charge gate) or an uploaded document (document gate).
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from app.models.enums import DocumentCategory

YARD_VENDOR_REQUIRED = "Please select a yard first. The yard must have an associated vendor."
REQUIRED_FIELDS_MISSING = "Please fill in all required fields"
INVALID_AMOUNT = "Please enter a valid amount greater than 0"


class GateKind(str, Enum):
    CHARGE = "charge"
    DOCUMENT = "document"


@dataclass(frozen=True)
class GateDefinition:
    flag: str
    kind: GateKind
    title: str
    cost_type: Optional[str] = None
    document_category: Optional[DocumentCategory] = None
    requires_yard_vendor: bool = False


GATES: Dict[str, GateDefinition] = {
    gate.flag: gate
    for gate in (
        GateDefinition("transportArranged", GateKind.CHARGE, "Inland Transport", cost_type="Inland Transport"),
        GateDefinition(
            "photosRequested", GateKind.CHARGE, "Photo Inspection",
            cost_type="Photo Inspection", requires_yard_vendor=True,
        ),
        GateDefinition(
            "exportCertificateUploaded", GateKind.DOCUMENT, "Export Certificate",
            document_category=DocumentCategory.EXPORT_CERTIFICATE,
        ),
        GateDefinition(
            "blCopyUploaded", GateKind.DOCUMENT, "Bill of Lading",
            document_category=DocumentCategory.BILL_OF_LADING,
        ),
        GateDefinition(
            "lcCopyUploaded", GateKind.DOCUMENT, "Letter of Credit",
            document_category=DocumentCategory.LETTER_OF_CREDIT,
        ),
        GateDefinition(
            "exportDeclarationUploaded", GateKind.DOCUMENT, "Export Declaration",
            document_category=DocumentCategory.EXPORT_DECLARATION,
        ),
    )
}


class GatePrerequisiteError(Exception):
    """The gate cannot even be opened (e.g. no yard vendor)"""


class GateValidationError(ValueError):
    """Gate form input rejected before any request"""


@dataclass
class PendingGate:
    """An open gate waiting for its charge or document"""
    definition: GateDefinition
    vendor_id: Optional[int] = None
    error: Optional[str] = None
    submitting: bool = False

    @property
    def flag(self) -> str:
        return self.definition.flag

    @property
    def kind(self) -> GateKind:
        return self.definition.kind


def is_gated(flag: str) -> bool:
    return flag in GATES


def parse_charge(amount: Any, vendor_id: Any) -> float:
    """Validated charge amount; raises GateValidationError"""
    if vendor_id in (None, "") or amount in (None, ""):
        raise GateValidationError(REQUIRED_FIELDS_MISSING)
    try:
        value = float(amount)
    except (TypeError, ValueError):
        raise GateValidationError(INVALID_AMOUNT)
    if not value > 0:
        raise GateValidationError(INVALID_AMOUNT)
    return value
