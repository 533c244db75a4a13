"""
tests/test_shipping_stages.py
=============================
Stage record upsert, current-stage moves, costs, documents and the booking mail.
"""
import pytest
from sqlalchemy import func, select

from app.models import VehicleShippingStage, Yard


class TestStageRecord:

    async def test_unsaved_stage_is_null(self, client, make_vehicle):
        vehicle = await make_vehicle()
        response = await client.get(f"/api/vehicles/{vehicle['id']}/stages")
        assert response.status_code == 200
        body = response.json()
        assert body["shippingStage"] is None
        assert body["currentStage"] == "PURCHASE"
        assert body["vehicleId"] == vehicle["id"]

    async def test_unknown_vehicle_is_404(self, client):
        response = await client.get("/api/vehicles/999/stages")
        assert response.status_code == 404
        assert response.json() == {"error": "Vehicle not found"}

    async def test_patch_creates_then_updates_single_row(self, client, make_vehicle, session_factory):
        vehicle = await make_vehicle()
        url = f"/api/vehicles/{vehicle['id']}/stages"

        first = await client.patch(url, json={"stage": "DOCUMENTS", "numberPlatesReceived": True})
        assert first.status_code == 200
        second = await client.patch(url, json={"stage": "DOCUMENTS", "manualsReceived": True})
        assert second.status_code == 200

        record = second.json()
        assert record["id"] == first.json()["id"]
        assert record["numberPlatesReceived"] is True
        assert record["manualsReceived"] is True

        async with session_factory() as session:
            count = (await session.execute(
                select(func.count(VehicleShippingStage.id)).where(
                    VehicleShippingStage.vehicle_id == vehicle["id"]
                )
            )).scalar()
        assert count == 1

    async def test_identical_patch_is_idempotent(self, client, make_vehicle):
        vehicle = await make_vehicle()
        url = f"/api/vehicles/{vehicle['id']}/stages"
        payload = {
            "stage": "BOOKING",
            "bookingType": "CONTAINER",
            "bookingStatus": "PENDING",
            "vesselName": "Morning Cara",
            "etd": "2026-11-02",
            "unitsInside": 3,
            "siEcSentToForwarder": True,
        }
        first = (await client.patch(url, json=payload)).json()
        second = (await client.patch(url, json=payload)).json()

        for key in ("id", "bookingType", "bookingStatus", "vesselName", "etd", "unitsInside", "siEcSentToForwarder"):
            assert first[key] == second[key]
        assert second["etd"] == "2026-11-02"

    async def test_get_by_stage(self, client, make_vehicle):
        vehicle = await make_vehicle()
        url = f"/api/vehicles/{vehicle['id']}/stages"
        await client.patch(url, json={"stage": "SHIPPED", "blPaid": True})

        body = (await client.get(url, params={"stage": "SHIPPED"})).json()
        assert body["shippingStage"]["blPaid"] is True
        assert body["currentStage"] == "PURCHASE"

    async def test_blank_strings_clear_fields(self, client, make_vehicle):
        vehicle = await make_vehicle()
        url = f"/api/vehicles/{vehicle['id']}/stages"
        await client.patch(url, json={"stage": "BOOKING", "bookingNumber": "BK-1", "pod": "Mombasa"})

        record = (await client.patch(url, json={"stage": "BOOKING", "bookingNumber": ""})).json()
        assert record["bookingNumber"] is None
        assert record["pod"] == "Mombasa"

    async def test_null_flag_is_stored_false(self, client, make_vehicle):
        vehicle = await make_vehicle()
        url = f"/api/vehicles/{vehicle['id']}/stages"
        await client.patch(url, json={"stage": "PURCHASE", "purchasePaid": True})

        record = (await client.patch(url, json={"stage": "PURCHASE", "purchasePaid": None})).json()
        assert record["purchasePaid"] is False

    async def test_repair_skipped_clears_repair_vendor(self, client, make_vehicle, make_vendor):
        vehicle = await make_vehicle()
        garage = await make_vendor("Chiba Body Works", "GARAGE")
        url = f"/api/vehicles/{vehicle['id']}/stages"

        record = (await client.patch(url, json={"stage": "REPAIR", "repairVendorId": garage["id"]})).json()
        assert record["repairVendorId"] == garage["id"]

        record = (await client.patch(url, json={
            "stage": "REPAIR", "repairVendorId": garage["id"], "repairSkipped": True,
        })).json()
        assert record["repairSkipped"] is True
        assert record["repairVendorId"] is None

    async def test_unknown_vendor_rejected(self, client, make_vehicle):
        vehicle = await make_vehicle()
        response = await client.patch(
            f"/api/vehicles/{vehicle['id']}/stages",
            json={"stage": "TRANSPORT", "transportVendorId": 4242},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Vendor 4242 not found"

    async def test_invalid_stage_is_validation_error(self, client, make_vehicle):
        vehicle = await make_vehicle()
        response = await client.patch(f"/api/vehicles/{vehicle['id']}/stages", json={"stage": "SAILING"})
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Validation failed"
        assert "stage" in body["details"]


class TestYardResolution:

    async def test_vendor_yard_creates_yard_row(self, client, make_vehicle, make_vendor, session_factory):
        vehicle = await make_vehicle()
        yard_vendor = await make_vendor("Yokohama Yard", "YARD", email="yard@example.com")

        yards = (await client.get("/api/yards")).json()
        assert yards[0]["id"] == f"vendor-{yard_vendor['id']}"
        assert yards[0]["name"] == "Yokohama Yard"
        assert yards[0]["vendorId"] == yard_vendor["id"]

        record = (await client.patch(
            f"/api/vehicles/{vehicle['id']}/stages",
            json={"stage": "TRANSPORT", "yardId": f"vendor-{yard_vendor['id']}"},
        )).json()

        async with session_factory() as session:
            yard = (await session.execute(select(Yard))).scalar_one()
        assert record["yardId"] == str(yard.id)
        assert yard.vendor_id == yard_vendor["id"]
        assert yard.name == "Yokohama Yard"

        # the yard row now stands in for the vendor entry
        yards = (await client.get("/api/yards")).json()
        assert [y["id"] for y in yards] == [str(yard.id)]

    async def test_vendor_yard_reuses_existing_yard(self, client, make_vehicle, make_vendor, session_factory):
        vehicle = await make_vehicle()
        yard_vendor = await make_vendor("Kobe Yard", "YARD")
        url = f"/api/vehicles/{vehicle['id']}/stages"

        first = (await client.patch(url, json={"stage": "TRANSPORT", "yardId": f"vendor-{yard_vendor['id']}"})).json()
        second = (await client.patch(url, json={"stage": "TRANSPORT", "yardId": f"vendor-{yard_vendor['id']}"})).json()
        assert first["yardId"] == second["yardId"]

        async with session_factory() as session:
            assert (await session.execute(select(func.count(Yard.id)))).scalar() == 1

    async def test_unknown_yard_rejected(self, client, make_vehicle):
        vehicle = await make_vehicle()
        response = await client.patch(
            f"/api/vehicles/{vehicle['id']}/stages", json={"stage": "TRANSPORT", "yardId": "77"}
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Yard not found"


class TestCurrentStage:

    async def test_move_writes_history(self, client, make_vehicle):
        vehicle = await make_vehicle()
        response = await client.put(
            f"/api/vehicles/{vehicle['id']}/current-stage",
            json={"stage": "TRANSPORT", "notes": "Paid at auction", "changedBy": "kenji"},
        )
        assert response.status_code == 200
        assert response.json()["currentStage"] == "TRANSPORT"

        history = (await client.get(f"/api/vehicles/{vehicle['id']}/history")).json()
        assert len(history) == 1
        assert history[0]["previousStage"] == "PURCHASE"
        assert history[0]["newStage"] == "TRANSPORT"
        assert history[0]["changedBy"] == "kenji"

    async def test_same_stage_writes_no_history(self, client, make_vehicle):
        vehicle = await make_vehicle()
        await client.put(f"/api/vehicles/{vehicle['id']}/current-stage", json={"stage": "PURCHASE"})
        history = (await client.get(f"/api/vehicles/{vehicle['id']}/history")).json()
        assert history == []

    async def test_vehicle_list_filters_by_stage(self, client, make_vehicle):
        moved = await make_vehicle("VIN0000000000001")
        await make_vehicle("VIN0000000000002")
        await client.put(f"/api/vehicles/{moved['id']}/current-stage", json={"stage": "BOOKING"})

        body = (await client.get("/api/vehicles", params={"stage": "BOOKING"})).json()
        assert body["total"] == 1
        assert body["data"][0]["vin"] == "VIN0000000000001"


class TestCostsAndDocuments:

    async def test_cost_round_trip(self, client, make_vehicle, make_vendor):
        vehicle = await make_vehicle()
        vendor = await make_vendor()
        url = f"/api/vehicles/{vehicle['id']}/costs"

        response = await client.post(url, json={
            "stage": "TRANSPORT", "costType": "Inland Transport", "amount": 25000,
            "currency": "jpy", "vendorId": vendor["id"],
        })
        assert response.status_code == 201
        cost = response.json()
        assert cost["vendorName"] == "Tokyo Auto Transport"
        assert cost["currency"] == "JPY"

        listed = (await client.get(url, params={"stage": "TRANSPORT"})).json()
        assert [c["id"] for c in listed] == [cost["id"]]
        assert (await client.get(url, params={"stage": "REPAIR"})).json() == []

        assert (await client.delete(f"{url}/{cost['id']}")).status_code == 200
        assert (await client.get(url)).json() == []

    @pytest.mark.parametrize("amount", [0, -10])
    async def test_cost_amount_must_be_positive(self, client, make_vehicle, make_vendor, amount):
        vehicle = await make_vehicle()
        vendor = await make_vendor()
        response = await client.post(f"/api/vehicles/{vehicle['id']}/costs", json={
            "stage": "TRANSPORT", "costType": "Inland Transport", "amount": amount, "vendorId": vendor["id"],
        })
        assert response.status_code == 400
        assert "amount" in response.json()["details"]

    async def test_cost_requires_existing_vendor(self, client, make_vehicle):
        vehicle = await make_vehicle()
        response = await client.post(f"/api/vehicles/{vehicle['id']}/costs", json={
            "stage": "TRANSPORT", "costType": "Inland Transport", "amount": 100, "vendorId": 99,
        })
        assert response.status_code == 400
        assert response.json()["error"] == "Vendor not found"

    async def test_document_filters(self, client, make_vehicle):
        vehicle = await make_vehicle()
        url = f"/api/vehicles/{vehicle['id']}/documents"
        for category in ("EXPORT_CERTIFICATE", "BILL_OF_LADING"):
            response = await client.post(url, json={
                "name": f"{category.lower()}.pdf", "fileUrl": f"https://files.example.com/{category}.pdf",
                "category": category, "stage": "DOCUMENTS",
            })
            assert response.status_code == 201

        listed = (await client.get(url, params={"category": "BILL_OF_LADING"})).json()
        assert len(listed) == 1
        assert listed[0]["fileUrl"].endswith("BILL_OF_LADING.pdf")

    async def test_deleting_vehicle_removes_its_stage_rows(self, client, make_vehicle, session_factory):
        vehicle = await make_vehicle()
        await client.patch(f"/api/vehicles/{vehicle['id']}/stages", json={"stage": "PURCHASE", "purchasePaid": True})

        assert (await client.delete(f"/api/vehicles/{vehicle['id']}")).status_code == 200
        async with session_factory() as session:
            assert (await session.execute(select(func.count(VehicleShippingStage.id)))).scalar() == 0


class TestBookingEmail:

    async def test_sends_mail_and_ticks_booking_requested(self, client, make_vehicle, make_customer, mailer):
        customer = await make_customer(email="orders@kamau.example.com")
        vehicle = await make_vehicle(customerId=customer["id"])
        await client.patch(f"/api/vehicles/{vehicle['id']}/stages", json={
            "stage": "BOOKING", "pol": "Yokohama", "pod": "Mombasa",
        })

        response = await client.post(
            f"/api/vehicles/{vehicle['id']}/send-booking-email",
            json={"shippingAgentEmail": "agent@example.com"},
        )
        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Booking request email sent successfully"}

        to_email, subject, body = mailer.sent[0]
        assert to_email == "agent@example.com"
        assert subject == "Booking Request - JTDBR32E720012345 - Toyota Prius"
        assert "POD: Mombasa" in body
        assert "Name: Kamau Motors" in body

        stage = (await client.get(f"/api/vehicles/{vehicle['id']}/stages", params={"stage": "BOOKING"})).json()
        assert stage["shippingStage"]["bookingRequested"] is True

    async def test_mail_failure_leaves_flag_unset(self, client, make_vehicle, mailer):
        vehicle = await make_vehicle()
        mailer.fail_with = "Email service is not configured"

        response = await client.post(
            f"/api/vehicles/{vehicle['id']}/send-booking-email",
            json={"shippingAgentEmail": "agent@example.com"},
        )
        assert response.status_code == 500
        assert response.json() == {
            "error": "Failed to send booking email",
            "details": "Email service is not configured",
        }
        stage = (await client.get(f"/api/vehicles/{vehicle['id']}/stages", params={"stage": "BOOKING"})).json()
        assert stage["shippingStage"] is None

    async def test_invalid_agent_email(self, client, make_vehicle):
        vehicle = await make_vehicle()
        response = await client.post(
            f"/api/vehicles/{vehicle['id']}/send-booking-email", json={"shippingAgentEmail": "not-an-email"}
        )
        assert response.status_code == 400
