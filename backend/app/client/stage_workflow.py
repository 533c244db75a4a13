"""
Stage workflow controller

Holds the form state for one vehicle's shipping stage and saves it back with
a debounced autosave. Gated flags (see app.client.gates) only turn true after
their cost or document has been created, and that save is immediate.
"""
import asyncio
import logging
from enum import Enum
from typing import Any, Dict, List, Optional

from app.client.api import ApiError, BackofficeClient
from app.client.gates import (
    GATES,
    YARD_VENDOR_REQUIRED,
    REQUIRED_FIELDS_MISSING,
    GateKind,
    GatePrerequisiteError,
    GateValidationError,
    PendingGate,
    parse_charge,
)
from app.client.stage_form import FLAG_FIELDS, FORM_FIELDS, build_payload, default_form_state, form_from_record
from app.core.config import settings

logger = logging.getLogger(__name__)

SAVE_FAILED_MESSAGE = "Failed to save shipping stage"


class SaveStatus(str, Enum):
    IDLE = "idle"
    SAVING = "saving"
    SAVED = "saved"
    ERROR = "error"


class StageWorkflowController:
    """Form state + autosave for one (vehicle, stage)"""

    def __init__(
        self,
        client: BackofficeClient,
        vehicle_id: int,
        stage: str,
        debounce_seconds: Optional[float] = None
    ):
        self.client = client
        self.vehicle_id = vehicle_id
        self.stage = stage
        self.debounce_seconds = (
            settings.AUTOSAVE_DEBOUNCE_SECONDS if debounce_seconds is None else debounce_seconds
        )

        self.form: Dict[str, Any] = default_form_state()
        self.record: Optional[Dict[str, Any]] = None
        self.yards: List[Dict[str, Any]] = []
        self.pending_gate: Optional[PendingGate] = None
        self.last_gate_result: Optional[Dict[str, Any]] = None
        self.status = SaveStatus.IDLE
        self.error: Optional[str] = None

        self._initialized_for: Optional[tuple] = None
        self._debounce_task: Optional[asyncio.Task] = None
        self._save_lock: Optional[asyncio.Lock] = None
        self._save_seq = 0

    # ==================== LOADING ====================

    async def load_stage(self, vehicle_id: int, stage: str) -> Optional[Dict[str, Any]]:
        """
        Fetch the stored record (None if never saved) and the yard list.

        The form is filled from the server only on the first load for a
        vehicle; later loads keep whatever the user has typed.
        """
        envelope = await self.client.get_stage(vehicle_id, stage)
        record = envelope.get("shippingStage")
        self.yards = await self.client.list_yards()

        key = (vehicle_id, stage)
        if self._initialized_for != key:
            self._cancel_debounce()
            self.vehicle_id = vehicle_id
            self.stage = stage
            self.form = form_from_record(record)
            self.pending_gate = None
            self.status = SaveStatus.IDLE
            self.error = None
            self._initialized_for = key

        self.record = record
        return record

    async def load(self) -> Optional[Dict[str, Any]]:
        return await self.load_stage(self.vehicle_id, self.stage)

    async def refresh(self) -> Optional[Dict[str, Any]]:
        """Refetch server data without touching local edits"""
        return await self.load_stage(self.vehicle_id, self.stage)

    # ==================== EDITING ====================

    def selected_yard_vendor_id(self) -> Optional[int]:
        yard_id = self.form.get("yardId")
        if yard_id in (None, ""):
            return None
        for yard in self.yards:
            if str(yard.get("id")) == str(yard_id):
                return yard.get("vendorId")
        return None

    def set_flag(self, name: str, value: bool) -> Optional[PendingGate]:
        """
        Tick or untick a checklist flag.

        Ticking a gated flag opens its gate instead (the flag stays false)
        and returns the PendingGate. Unticking never needs a gate.
        """
        if name not in FLAG_FIELDS:
            raise ValueError(f"Unknown checklist flag: {name}")
        value = bool(value)

        definition = GATES.get(name)
        if definition and value:
            if self.form.get(name):
                return None
            if self.pending_gate is not None and self.pending_gate.flag == name:
                return self.pending_gate
            vendor_id = None
            if definition.requires_yard_vendor:
                vendor_id = self.selected_yard_vendor_id()
                if vendor_id is None:
                    raise GatePrerequisiteError(YARD_VENDOR_REQUIRED)
            elif definition.kind == GateKind.CHARGE:
                vendor_id = self._form_int("transportVendorId")

            # one gate at a time: opening another closes the current one
            if self.pending_gate is not None:
                logger.info(f"Closing open {self.pending_gate.flag} gate for {name}")
                self.cancel_gate()
            self.pending_gate = PendingGate(definition, vendor_id=vendor_id)
            return self.pending_gate

        self.form[name] = value
        if name == "repairSkipped" and value:
            self.form["repairVendorId"] = ""
        self._changed()
        return None

    def set_field(self, name: str, value: Any):
        """Edit a text/select/date field (or an ungated flag)"""
        if name in GATES:
            raise ValueError(f"{name} can only be changed with set_flag")
        if name not in FORM_FIELDS:
            raise ValueError(f"Unknown stage field: {name}")
        if name in FLAG_FIELDS:
            self.set_flag(name, value)
            return
        self.form[name] = "" if value is None else value
        self._changed()

    def _form_int(self, name: str) -> Optional[int]:
        value = self.form.get(name)
        if value in (None, ""):
            return None
        try:
            return int(value)
        except (TypeError, ValueError):
            return None

    def _changed(self):
        if self.status == SaveStatus.ERROR:
            self.status = SaveStatus.IDLE
        self.error = None
        self._schedule_save()

    # ==================== GATES ====================

    def _require_gate(self, kind: GateKind) -> PendingGate:
        gate = self.pending_gate
        if gate is None or gate.kind != kind:
            raise RuntimeError(f"No open {kind.value} gate")
        return gate

    async def submit_charge(
        self,
        amount: Any,
        currency: Optional[str] = None,
        vendor_id: Optional[int] = None
    ) -> Optional[Dict[str, Any]]:
        """Create the gate's cost entry, then tick the flag. None on failure."""
        gate = self._require_gate(GateKind.CHARGE)
        if gate.definition.requires_yard_vendor or vendor_id in (None, ""):
            vendor_id = gate.vendor_id

        try:
            parsed_amount = parse_charge(amount, vendor_id)
        except GateValidationError as e:
            gate.error = str(e)
            return None

        payload = {
            "stage": self.stage,
            "costType": gate.definition.cost_type,
            "amount": parsed_amount,
            "currency": currency or settings.DEFAULT_CURRENCY,
            "vendorId": int(vendor_id),
        }
        gate.error = None
        gate.submitting = True
        try:
            cost = await self.client.create_cost(self.vehicle_id, payload)
        except ApiError as e:
            gate.error = e.message
            logger.warning(f"{gate.definition.cost_type} cost for vehicle {self.vehicle_id} failed: {e.message}")
            return None
        finally:
            gate.submitting = False

        await self.commit_gate(gate.flag, cost)
        return cost

    async def submit_document(
        self,
        name: str,
        file_url: str,
        file_type: Optional[str] = None,
        file_size: Optional[int] = None,
        description: Optional[str] = None,
        visible_to_customer: bool = False
    ) -> Optional[Dict[str, Any]]:
        """Register the gate's document, then tick the flag. None on failure."""
        gate = self._require_gate(GateKind.DOCUMENT)
        if not (name or "").strip() or not (file_url or "").strip():
            gate.error = REQUIRED_FIELDS_MISSING
            return None

        payload = {
            "name": name.strip(),
            "fileUrl": file_url.strip(),
            "category": gate.definition.document_category.value,
            "stage": self.stage,
            "fileType": file_type,
            "fileSize": file_size,
            "description": description,
            "visibleToCustomer": visible_to_customer,
        }
        gate.error = None
        gate.submitting = True
        try:
            document = await self.client.create_document(self.vehicle_id, payload)
        except ApiError as e:
            gate.error = e.message
            logger.warning(f"{gate.definition.title} upload for vehicle {self.vehicle_id} failed: {e.message}")
            return None
        finally:
            gate.submitting = False

        await self.commit_gate(gate.flag, document)
        return document

    def cancel_gate(self):
        """Close the gate; its flag stays false"""
        if self.pending_gate is not None:
            self.form[self.pending_gate.flag] = False
        self.pending_gate = None

    async def commit_gate(self, flag: str, side_effect_result: Any = None) -> Optional[Dict[str, Any]]:
        """Tick a gated flag once its prerequisite exists and save right away"""
        self._cancel_debounce()
        self.form[flag] = True
        self.pending_gate = None
        self.last_gate_result = side_effect_result
        self.error = None
        return await self.save()

    # ==================== SAVING ====================

    async def save(self) -> Optional[Dict[str, Any]]:
        """
        PATCH the whole form. Local state is kept on failure.

        Saves run one at a time; a save started while another is in flight
        waits for it and then sends the form as it is at that point. Only
        the newest save updates record/status.
        """
        if self._save_lock is None:
            self._save_lock = asyncio.Lock()
        self._save_seq += 1
        seq = self._save_seq

        async with self._save_lock:
            payload = build_payload(self.stage, self.form)
            self.status = SaveStatus.SAVING
            try:
                record = await self.client.save_stage(self.vehicle_id, payload)
            except ApiError as e:
                message = e.message or SAVE_FAILED_MESSAGE
                logger.warning(f"Autosave for vehicle {self.vehicle_id} ({self.stage}) failed: {message}")
                if seq == self._save_seq:
                    self.status = SaveStatus.ERROR
                    self.error = message
                return None

            if seq != self._save_seq:
                # superseded by a save queued behind this one
                return record

            self.record = record
            self.status = SaveStatus.SAVED
            self.error = None
            return record

    def _schedule_save(self):
        self._cancel_debounce()
        self._debounce_task = asyncio.create_task(self._debounced_save())

    async def _debounced_save(self):
        await asyncio.sleep(self.debounce_seconds)
        # past this point the save is in flight and no longer cancellable
        self._debounce_task = None
        await self.save()

    def _cancel_debounce(self):
        if self._debounce_task is not None:
            self._debounce_task.cancel()
            self._debounce_task = None

    @property
    def has_pending_save(self) -> bool:
        return self._debounce_task is not None

    async def close(self):
        """Drop any pending autosave"""
        task = self._debounce_task
        self._cancel_debounce()
        if task is not None:
            try:
                await task
            except asyncio.CancelledError:
                pass
