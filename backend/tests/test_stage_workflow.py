"""
tests/test_stage_workflow.py
============================
StageWorkflowController against the real app: gated flags, debounced
autosave and the keep-local-edits rule on refetch.
"""
import asyncio
from datetime import date, datetime

import pytest

from app.client.api import ApiError
from app.client.gates import (
    INVALID_AMOUNT,
    REQUIRED_FIELDS_MISSING,
    YARD_VENDOR_REQUIRED,
    GatePrerequisiteError,
    GateValidationError,
    parse_charge,
)
from app.client.stage_form import FLAG_FIELDS, build_payload, default_form_state, form_from_record
from app.client.stage_workflow import SaveStatus, StageWorkflowController


async def wait_for_save(controller, timeout=2.0):
    """Until the debounced save (if any) has finished"""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while controller.has_pending_save or controller.status == SaveStatus.SAVING:
        if loop.time() > deadline:
            raise AssertionError("autosave did not finish")
        await asyncio.sleep(0.01)


@pytest.fixture
def patches(api, monkeypatch):
    """Every stage PATCH payload the client sends"""
    sent = []
    original = api.save_stage

    async def spy(vehicle_id, payload):
        sent.append(dict(payload))
        return await original(vehicle_id, payload)

    monkeypatch.setattr(api, "save_stage", spy)
    return sent


@pytest.fixture
async def vehicle(make_vehicle):
    return await make_vehicle()


@pytest.fixture
async def controller(api, vehicle):
    ctrl = StageWorkflowController(api, vehicle["id"], "TRANSPORT", debounce_seconds=0.05)
    await ctrl.load()
    yield ctrl
    await ctrl.close()


# ── form helpers (no HTTP) ────────────────────────────────────────────────────

class TestStageForm:

    def test_defaults(self):
        state = default_form_state()
        assert all(state[name] is False for name in FLAG_FIELDS)
        assert state["vesselName"] == ""
        assert "repairSkipped" in FLAG_FIELDS

    def test_payload_normalisation(self):
        state = default_form_state()
        state.update({
            "purchaseVendorId": "12",
            "yardId": "vendor-3",
            "unitsInside": "4",
            "etd": date(2026, 11, 2),
            "eta": "2026-12-01T00:00:00.000Z",
            "purchasePaymentDate": datetime(2026, 10, 1, 9, 30),
            "bookingType": "",
            "notes": "Keys in glovebox",
            "blPaid": True,
        })
        payload = build_payload("BOOKING", state)

        assert payload["stage"] == "BOOKING"
        assert payload["purchaseVendorId"] == 12
        assert payload["yardId"] == "vendor-3"
        assert payload["unitsInside"] == 4
        assert payload["etd"] == "2026-11-02"
        assert payload["eta"] == "2026-12-01"
        assert payload["purchasePaymentDate"] == "2026-10-01"
        assert payload["bookingType"] is None
        assert payload["transportVendorId"] is None
        assert payload["notes"] == "Keys in glovebox"
        assert payload["blPaid"] is True
        assert payload["purchasePaid"] is False

    def test_form_from_record_blanks_nulls(self):
        state = form_from_record({"vesselName": None, "bookingNumber": "BK-9", "blPaid": True})
        assert state["vesselName"] == ""
        assert state["bookingNumber"] == "BK-9"
        assert state["blPaid"] is True


class TestParseCharge:

    def test_valid(self):
        assert parse_charge("1500.5", 3) == 1500.5

    @pytest.mark.parametrize("amount,vendor_id", [("", 3), (None, 3), ("100", None), ("100", "")])
    def test_missing_fields(self, amount, vendor_id):
        with pytest.raises(GateValidationError, match=REQUIRED_FIELDS_MISSING):
            parse_charge(amount, vendor_id)

    @pytest.mark.parametrize("amount", ["0", "-5", "abc"])
    def test_bad_amount(self, amount):
        with pytest.raises(GateValidationError, match=INVALID_AMOUNT):
            parse_charge(amount, 3)


# ── controller ────────────────────────────────────────────────────────────────

class TestLoading:

    async def test_defaults_when_nothing_saved(self, controller):
        assert controller.record is None
        assert controller.form["transportArranged"] is False
        assert controller.status == SaveStatus.IDLE

    async def test_refetch_keeps_local_edits(self, api, client, vehicle):
        ctrl = StageWorkflowController(api, vehicle["id"], "BOOKING", debounce_seconds=10)
        await ctrl.load()
        ctrl.set_field("vesselName", "Local Edit")

        # another component saves the same stage
        await client.patch(f"/api/vehicles/{vehicle['id']}/stages", json={
            "stage": "BOOKING", "vesselName": "Server Value",
        })
        record = await ctrl.refresh()

        assert record["vesselName"] == "Server Value"
        assert ctrl.form["vesselName"] == "Local Edit"
        await ctrl.close()

    async def test_first_load_fills_form_from_server(self, api, client, vehicle):
        await client.patch(f"/api/vehicles/{vehicle['id']}/stages", json={
            "stage": "BOOKING", "vesselName": "Morning Cara", "bookingRequested": True,
        })
        ctrl = StageWorkflowController(api, vehicle["id"], "BOOKING")
        await ctrl.load()
        assert ctrl.form["vesselName"] == "Morning Cara"
        assert ctrl.form["bookingRequested"] is True


class TestAutosave:

    async def test_rapid_edits_coalesce_into_one_patch(self, controller, patches):
        controller.set_field("transportVendorId", "")
        controller.set_flag("yardNotified", True)
        controller.set_field("notes", "first")
        controller.set_field("notes", "second")
        controller.set_field("notes", "final")
        assert patches == []

        await wait_for_save(controller)

        assert len(patches) == 1
        assert patches[0]["notes"] == "final"
        assert patches[0]["yardNotified"] is True
        assert controller.status == SaveStatus.SAVED
        assert controller.record["notes"] == "final"

    async def test_close_cancels_pending_save(self, controller, patches):
        controller.set_field("notes", "never saved")
        await controller.close()
        await asyncio.sleep(0.15)
        assert patches == []

    async def test_save_error_keeps_local_state(self, controller, patches):
        controller.set_field("transportVendorId", "999")
        await wait_for_save(controller)

        assert controller.status == SaveStatus.ERROR
        assert controller.error == "Vendor 999 not found"
        assert controller.form["transportVendorId"] == "999"

        # next edit clears the message
        controller.set_field("transportVendorId", "")
        assert controller.error is None
        await wait_for_save(controller)
        assert controller.status == SaveStatus.SAVED

    async def test_repair_skipped_drops_repair_vendor_locally(self, api, vehicle, make_vendor):
        garage = await make_vendor("Chiba Body Works", "GARAGE")
        ctrl = StageWorkflowController(api, vehicle["id"], "REPAIR", debounce_seconds=0.05)
        await ctrl.load()
        ctrl.set_field("repairVendorId", str(garage["id"]))
        ctrl.set_flag("repairSkipped", True)
        assert ctrl.form["repairVendorId"] == ""

        await wait_for_save(ctrl)
        assert ctrl.record["repairSkipped"] is True
        assert ctrl.record["repairVendorId"] is None
        await ctrl.close()

    async def test_gated_save_waits_for_in_flight_autosave(self, api, controller, make_vendor, vehicle, monkeypatch):
        vendor = await make_vendor()
        sent = []
        original = api.save_stage

        async def slow_first_save(vehicle_id, payload):
            sent.append(dict(payload))
            if len(sent) == 1:
                await asyncio.sleep(0.3)
            return await original(vehicle_id, payload)

        monkeypatch.setattr(api, "save_stage", slow_first_save)

        controller.set_field("notes", "Keys with yard office")
        while not sent:
            await asyncio.sleep(0.01)
        assert controller.status == SaveStatus.SAVING

        controller.set_flag("transportArranged", True)
        cost = await controller.submit_charge("25000", vendor_id=vendor["id"])
        assert cost["costType"] == "Inland Transport"

        # the gated save goes out after the slow one, with every edit
        assert [p["transportArranged"] for p in sent] == [False, True]
        assert sent[1]["notes"] == "Keys with yard office"
        assert controller.status == SaveStatus.SAVED
        assert controller.record["transportArranged"] is True

        stored = (await api.get_stage(vehicle["id"], "TRANSPORT"))["shippingStage"]
        assert stored["transportArranged"] is True
        assert stored["notes"] == "Keys with yard office"

    async def test_queued_save_failure_is_reported(self, api, controller, monkeypatch):
        calls = []
        original = api.save_stage

        async def first_slow_then_fail(vehicle_id, payload):
            calls.append(payload["notes"])
            if len(calls) == 1:
                await asyncio.sleep(0.2)
                return await original(vehicle_id, payload)
            raise ApiError(500, "Database is locked")

        monkeypatch.setattr(api, "save_stage", first_slow_then_fail)

        controller.set_field("notes", "first")
        while not calls:
            await asyncio.sleep(0.01)
        controller.set_field("notes", "second")
        await wait_for_save(controller)

        assert calls == ["first", "second"]
        assert controller.status == SaveStatus.ERROR
        assert controller.error == "Database is locked"
        assert controller.form["notes"] == "second"

    async def test_unknown_field_rejected(self, controller):
        with pytest.raises(ValueError):
            controller.set_field("colour", "red")


class TestChargeGates:

    async def test_transport_gate_creates_cost_before_flag(self, api, controller, patches, make_vendor, vehicle):
        vendor = await make_vendor()

        gate = controller.set_flag("transportArranged", True)
        assert gate is not None and gate.flag == "transportArranged"
        assert controller.form["transportArranged"] is False
        assert patches == []

        cost = await controller.submit_charge("25000", vendor_id=vendor["id"])
        assert cost["costType"] == "Inland Transport"
        assert cost["amount"] == 25000
        assert cost["currency"] == "JPY"

        # saved immediately, not debounced
        assert len(patches) == 1
        assert patches[0]["transportArranged"] is True
        assert controller.pending_gate is None
        assert controller.record["transportArranged"] is True
        assert controller.last_gate_result["id"] == cost["id"]

        costs = await api.list_costs(vehicle["id"], "TRANSPORT")
        assert [c["costType"] for c in costs] == ["Inland Transport"]

    async def test_transport_gate_defaults_to_transport_vendor(self, controller, make_vendor):
        vendor = await make_vendor()
        controller.form["transportVendorId"] = str(vendor["id"])
        gate = controller.set_flag("transportArranged", True)
        assert gate.vendor_id == vendor["id"]

        cost = await controller.submit_charge(18000)
        assert cost["vendorId"] == vendor["id"]

    async def test_invalid_charge_keeps_gate_open(self, api, controller, patches, make_vendor, vehicle):
        vendor = await make_vendor()
        controller.set_flag("transportArranged", True)

        assert await controller.submit_charge("", vendor_id=vendor["id"]) is None
        assert controller.pending_gate.error == REQUIRED_FIELDS_MISSING

        assert await controller.submit_charge("-3", vendor_id=vendor["id"]) is None
        assert controller.pending_gate.error == INVALID_AMOUNT

        assert controller.form["transportArranged"] is False
        assert controller.error is None
        assert patches == []
        assert await api.list_costs(vehicle["id"]) == []

    async def test_server_rejection_stays_on_gate(self, controller, patches):
        controller.set_flag("transportArranged", True)

        assert await controller.submit_charge("1000", vendor_id=4242) is None
        assert controller.pending_gate is not None
        assert controller.pending_gate.error == "Vendor not found"
        assert controller.pending_gate.submitting is False
        assert controller.form["transportArranged"] is False
        assert controller.error is None
        assert patches == []

    async def test_cancel_leaves_flag_false_everywhere(self, api, controller, patches, vehicle):
        controller.set_flag("transportArranged", True)
        controller.cancel_gate()

        assert controller.pending_gate is None
        assert controller.form["transportArranged"] is False
        envelope = await api.get_stage(vehicle["id"], "TRANSPORT")
        assert envelope["shippingStage"] is None
        assert patches == []

    async def test_unticking_needs_no_gate(self, controller, patches, make_vendor):
        vendor = await make_vendor()
        controller.set_flag("transportArranged", True)
        await controller.submit_charge("25000", vendor_id=vendor["id"])

        assert controller.set_flag("transportArranged", False) is None
        assert controller.form["transportArranged"] is False
        await wait_for_save(controller)
        assert patches[-1]["transportArranged"] is False

    async def test_gated_flag_not_settable_as_field(self, controller):
        with pytest.raises(ValueError):
            controller.set_field("transportArranged", True)

    async def test_photo_gate_requires_yard_vendor(self, controller, patches):
        with pytest.raises(GatePrerequisiteError, match=YARD_VENDOR_REQUIRED):
            controller.set_flag("photosRequested", True)
        assert controller.pending_gate is None
        assert controller.form["photosRequested"] is False
        assert patches == []

    async def test_photo_gate_charges_yard_vendor(self, api, vehicle, make_vendor, patches):
        yard_vendor = await make_vendor("Yokohama Yard", "YARD")
        other = await make_vendor()
        ctrl = StageWorkflowController(api, vehicle["id"], "TRANSPORT", debounce_seconds=10)
        await ctrl.load()

        ctrl.set_field("yardId", f"vendor-{yard_vendor['id']}")
        gate = ctrl.set_flag("photosRequested", True)
        assert gate.vendor_id == yard_vendor["id"]

        cost = await ctrl.submit_charge("3000", vendor_id=other["id"])
        assert cost["costType"] == "Photo Inspection"
        assert cost["vendorId"] == yard_vendor["id"]

        # the pending yard edit went out with the gated save
        assert len(patches) == 1
        assert patches[0]["photosRequested"] is True
        assert patches[0]["yardId"] == f"vendor-{yard_vendor['id']}"
        assert ctrl.record["photosRequested"] is True
        await ctrl.close()


DOCUMENT_GATES = [
    ("exportCertificateUploaded", "EXPORT_CERTIFICATE"),
    ("blCopyUploaded", "BILL_OF_LADING"),
    ("lcCopyUploaded", "LETTER_OF_CREDIT"),
    ("exportDeclarationUploaded", "EXPORT_DECLARATION"),
]


class TestDocumentGates:

    @pytest.fixture
    async def documents_controller(self, api, vehicle):
        ctrl = StageWorkflowController(api, vehicle["id"], "DOCUMENTS", debounce_seconds=0.05)
        await ctrl.load()
        yield ctrl
        await ctrl.close()

    @pytest.mark.parametrize("flag,category", DOCUMENT_GATES)
    async def test_document_registered_before_flag(self, api, vehicle, documents_controller, patches, flag, category):
        ctrl = documents_controller
        gate = ctrl.set_flag(flag, True)
        assert gate.flag == flag
        assert ctrl.form[flag] is False

        assert await ctrl.submit_document("", "") is None
        assert ctrl.pending_gate.error == REQUIRED_FIELDS_MISSING
        assert patches == []

        document = await ctrl.submit_document("scan.pdf", "https://files.example.com/scan.pdf")
        assert document["category"] == category
        assert document["stage"] == "DOCUMENTS"
        assert ctrl.pending_gate is None
        assert ctrl.record[flag] is True
        assert len(patches) == 1
        assert patches[0][flag] is True

        documents = await api.list_documents(vehicle["id"], category=category)
        assert [d["id"] for d in documents] == [document["id"]]

    @pytest.mark.parametrize("flag,category", DOCUMENT_GATES)
    async def test_cancel_leaves_flag_false_everywhere(self, api, vehicle, documents_controller, patches, flag, category):
        ctrl = documents_controller
        ctrl.set_flag(flag, True)
        ctrl.cancel_gate()

        assert ctrl.pending_gate is None
        assert ctrl.form[flag] is False
        assert patches == []
        assert (await api.get_stage(vehicle["id"], "DOCUMENTS"))["shippingStage"] is None
        assert await api.list_documents(vehicle["id"], category=category) == []

    @pytest.mark.parametrize("flag,category", DOCUMENT_GATES)
    async def test_failed_upload_stays_on_gate(self, api, vehicle, documents_controller, patches, monkeypatch,
                                               flag, category):
        ctrl = documents_controller

        async def unavailable(vehicle_id, payload):
            assert payload["category"] == category
            raise ApiError(500, "Document storage unavailable")

        monkeypatch.setattr(api, "create_document", unavailable)

        ctrl.set_flag(flag, True)
        assert await ctrl.submit_document("scan.pdf", "https://files.example.com/scan.pdf") is None

        assert ctrl.pending_gate is not None
        assert ctrl.pending_gate.error == "Document storage unavailable"
        assert ctrl.pending_gate.submitting is False
        assert ctrl.form[flag] is False
        assert ctrl.error is None
        assert patches == []
        assert (await api.get_stage(vehicle["id"], "DOCUMENTS"))["shippingStage"] is None

    async def test_submitting_wrong_gate_kind(self, controller):
        controller.set_flag("transportArranged", True)
        with pytest.raises(RuntimeError):
            await controller.submit_document("a.pdf", "https://files.example.com/a.pdf")


class TestOneGateAtATime:

    async def test_reopening_same_gate_keeps_its_state(self, controller):
        gate = controller.set_flag("transportArranged", True)
        await controller.submit_charge("", vendor_id=1)
        assert gate.error == REQUIRED_FIELDS_MISSING

        assert controller.set_flag("transportArranged", True) is gate
        assert controller.pending_gate.error == REQUIRED_FIELDS_MISSING

    async def test_opening_another_gate_closes_the_first(self, controller, patches):
        controller.set_flag("transportArranged", True)
        second = controller.set_flag("blCopyUploaded", True)

        assert controller.pending_gate is second
        assert controller.form["transportArranged"] is False
        assert controller.form["blCopyUploaded"] is False
        with pytest.raises(RuntimeError):
            await controller.submit_charge("25000", vendor_id=1)
        assert patches == []

    async def test_refused_photo_gate_keeps_open_gate(self, controller):
        first = controller.set_flag("transportArranged", True)
        with pytest.raises(GatePrerequisiteError):
            controller.set_flag("photosRequested", True)
        assert controller.pending_gate is first
