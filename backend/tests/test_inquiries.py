"""
tests/test_inquiries.py
=======================
Inquiry CRUD, assignment, the failed-lead rule, assignment release and the
kanban board (API and client).
"""
import asyncio
from datetime import datetime, timedelta

import pytest
from sqlalchemy import select

from app.client.kanban import MOVE_FAILED_MESSAGE, KanbanBoard
from app.models import Inquiry, KanbanStage
from app.services.inquiries import DEFAULT_KANBAN_STAGES, release_expired_assignments


async def history_of(client, inquiry_id):
    return (await client.get(f"/api/inquiries/{inquiry_id}/history")).json()


class TestInquiryCrud:

    async def test_create_stores_looking_for_in_metadata(self, make_inquiry):
        inquiry = await make_inquiry(lookingFor="Toyota Hiace 2018")
        assert inquiry["status"] == "NEW"
        assert inquiry["metadata"] == {"lookingFor": "Toyota Hiace 2018"}

    async def test_update_merges_metadata(self, client, make_inquiry):
        inquiry = await make_inquiry(lookingFor="Hiace", metadata={"budget": "1.2M JPY"})
        response = await client.put(f"/api/inquiries/{inquiry['id']}", json={"lookingFor": "Land Cruiser"})
        assert response.json()["metadata"] == {"budget": "1.2M JPY", "lookingFor": "Land Cruiser"}

    async def test_status_change_is_recorded(self, client, make_inquiry):
        inquiry = await make_inquiry()
        await client.put(f"/api/inquiries/{inquiry['id']}", json={"status": "CONTACTED", "changedBy": "mary"})

        history = await history_of(client, inquiry["id"])
        assert history[0]["action"] == "STATUS_CHANGED"
        assert history[0]["previousStatus"] == "NEW"
        assert history[0]["newStatus"] == "CONTACTED"
        assert history[0]["changedBy"] == "mary"

    async def test_invalid_status_rejected(self, client, make_inquiry):
        inquiry = await make_inquiry()
        response = await client.put(f"/api/inquiries/{inquiry['id']}", json={"status": "WON"})
        assert response.status_code == 400

    async def test_list_filters(self, client, make_inquiry):
        await make_inquiry(customerName="Juma", assignedTo="mary")
        await make_inquiry(customerName="Otieno", source="WHATSAPP")

        unassigned = (await client.get("/api/inquiries", params={"unassigned": "true"})).json()
        assert [i["customerName"] for i in unassigned["data"]] == ["Otieno"]

        by_source = (await client.get("/api/inquiries", params={"source": "WHATSAPP"})).json()
        assert by_source["total"] == 1

        by_owner = (await client.get("/api/inquiries", params={"assignedTo": "mary"})).json()
        assert by_owner["data"][0]["customerName"] == "Juma"

    async def test_missing_inquiry(self, client):
        response = await client.get("/api/inquiries/404")
        assert response.status_code == 404
        assert response.json() == {"error": "Inquiry not found"}


class TestAssignment:

    async def test_assign_counts_attempts(self, client, make_inquiry):
        inquiry = await make_inquiry()
        response = await client.post(f"/api/inquiries/{inquiry['id']}/assign", json={"assignedTo": "mary"})
        assert response.status_code == 200
        body = response.json()
        assert body["assignedTo"] == "mary"
        assert body["assignedAt"] is not None
        assert body["metadata"]["attemptCount"] == 1

    async def test_cannot_steal_without_force(self, client, make_inquiry):
        inquiry = await make_inquiry()
        url = f"/api/inquiries/{inquiry['id']}/assign"
        await client.post(url, json={"assignedTo": "mary"})

        response = await client.post(url, json={"assignedTo": "john"})
        assert response.status_code == 400
        assert response.json()["error"] == "Inquiry already assigned to another user"

        response = await client.post(url, json={"assignedTo": "john", "force": True})
        body = response.json()
        assert body["assignedTo"] == "john"
        assert body["metadata"]["attemptCount"] == 2
        assert body["metadata"]["previouslyTriedBy"]["assignee"] == "mary"

    async def test_release(self, client, make_inquiry):
        inquiry = await make_inquiry(assignedTo="mary")
        url = f"/api/inquiries/{inquiry['id']}/release"

        body = (await client.post(url, json={"notes": "Customer went quiet"})).json()
        assert body["assignedTo"] is None

        history = await history_of(client, inquiry["id"])
        assert history[0]["action"] == "RELEASED"
        assert history[0]["changedBy"] == "mary"

        response = await client.post(url)
        assert response.status_code == 400
        assert response.json()["error"] == "Inquiry is not assigned"


class TestReleaseExpired:

    async def _age_assignment(self, session_factory, inquiry_id, days):
        async with session_factory() as session:
            inquiry = await session.get(Inquiry, inquiry_id)
            inquiry.assigned_at = datetime.utcnow() - timedelta(days=days)
            await session.commit()

    async def test_releases_only_old_unconverted(self, client, make_inquiry, session_factory, db):
        old = await make_inquiry(assignedTo="mary")
        won = await make_inquiry(assignedTo="mary", status="CLOSED_WON")
        fresh = await make_inquiry(assignedTo="john")
        await self._age_assignment(session_factory, old["id"], 31)
        await self._age_assignment(session_factory, won["id"], 31)
        await self._age_assignment(session_factory, fresh["id"], 3)

        released = await release_expired_assignments(db, days=30)
        assert released == [old["id"]]

        assert (await client.get(f"/api/inquiries/{old['id']}")).json()["assignedTo"] is None
        assert (await client.get(f"/api/inquiries/{won['id']}")).json()["assignedTo"] == "mary"
        assert (await client.get(f"/api/inquiries/{fresh['id']}")).json()["assignedTo"] == "john"

        history = await history_of(client, old["id"])
        assert history[0]["action"] == "AUTO_RELEASED"

    async def test_endpoint(self, client, make_inquiry, session_factory):
        inquiry = await make_inquiry(assignedTo="mary")
        await self._age_assignment(session_factory, inquiry["id"], 10)

        body = (await client.post("/api/inquiries/release-expired", params={"days": 7})).json()
        assert body == {"released": 1, "inquiryIds": [inquiry["id"]]}


class TestKanbanApi:

    async def test_board_seeds_columns_once(self, client, session_factory):
        first = (await client.get("/api/kanban")).json()
        await client.get("/api/kanban")

        assert [c["status"] for c in first["stages"]] == [s.value for _, s, _ in DEFAULT_KANBAN_STAGES]
        async with session_factory() as session:
            stages = (await session.execute(select(KanbanStage))).scalars().all()
        assert len(stages) == len(DEFAULT_KANBAN_STAGES)

    async def test_board_lists_assigned_only(self, client, make_inquiry):
        assigned = await make_inquiry(assignedTo="mary")
        await make_inquiry()
        await make_inquiry(assignedTo="john")

        board = (await client.get("/api/kanban", params={"assignedTo": "mary"})).json()
        new_column = next(c for c in board["stages"] if c["status"] == "NEW")
        assert [i["id"] for i in new_column["inquiries"]] == [assigned["id"]]

        board = (await client.get("/api/kanban")).json()
        new_column = next(c for c in board["stages"] if c["status"] == "NEW")
        assert len(new_column["inquiries"]) == 2

    @pytest.mark.parametrize("payload,message", [
        ({"newStatus": "CONTACTED"}, "Missing inquiryId or newStatus"),
        ({"inquiryId": 1}, "Missing inquiryId or newStatus"),
        ({"inquiryId": 1, "newStatus": "LOST"}, "Invalid status"),
    ])
    async def test_move_validation(self, client, payload, message):
        response = await client.patch("/api/kanban", json=payload)
        assert response.status_code == 400
        assert response.json()["error"] == message

    async def test_move_unknown_inquiry(self, client):
        response = await client.patch("/api/kanban", json={"inquiryId": 999, "newStatus": "CONTACTED"})
        assert response.status_code == 404

    async def test_second_attempt_marks_failed_lead(self, client, make_inquiry):
        inquiry = await make_inquiry()
        url = f"/api/inquiries/{inquiry['id']}/assign"
        await client.post(url, json={"assignedTo": "mary"})
        await client.post(url, json={"assignedTo": "john", "force": True})

        body = (await client.patch("/api/kanban", json={
            "inquiryId": inquiry["id"], "newStatus": "CONTACTED",
        })).json()
        assert body["status"] == "CONTACTED"
        assert body["metadata"]["isFailedLead"] is True
        assert "failedAt" in body["metadata"]

        history = await history_of(client, inquiry["id"])
        assert history[0]["action"] == "STATUS_CHANGED"
        assert history[0]["notes"] == "Marked as failed lead after second attempt"
        assert history[0]["changedBy"] == "john"

    async def test_closed_won_is_never_failed(self, client, make_inquiry):
        inquiry = await make_inquiry()
        url = f"/api/inquiries/{inquiry['id']}/assign"
        await client.post(url, json={"assignedTo": "mary"})
        await client.post(url, json={"assignedTo": "john", "force": True})

        body = (await client.patch("/api/kanban", json={
            "inquiryId": inquiry["id"], "newStatus": "CLOSED_WON",
        })).json()
        assert "isFailedLead" not in body["metadata"]

    async def test_first_attempt_is_not_failed(self, client, make_inquiry):
        inquiry = await make_inquiry()
        await client.post(f"/api/inquiries/{inquiry['id']}/assign", json={"assignedTo": "mary"})

        body = (await client.patch("/api/kanban", json={
            "inquiryId": inquiry["id"], "newStatus": "QUALIFIED",
        })).json()
        assert "isFailedLead" not in body["metadata"]


class TestKanbanBoardClient:

    def _cards(self, board, status):
        column = next(c for c in board.columns if c["status"] == status)
        return [card["id"] for card in column["inquiries"]]

    async def test_move_by_status_and_by_card(self, api, client, make_inquiry):
        first = await make_inquiry(assignedTo="mary")
        second = await make_inquiry(assignedTo="mary")
        await client.patch("/api/kanban", json={"inquiryId": second["id"], "newStatus": "QUALIFIED"})

        board = KanbanBoard(api)
        await board.refresh()

        assert await board.move_card(first["id"], "CONTACTED") is True
        assert self._cards(board, "CONTACTED") == [first["id"]]
        assert first["id"] not in self._cards(board, "NEW")

        # dropping onto a card lands in that card's column
        assert await board.move_card(first["id"], board.card(second["id"])) is True
        assert set(self._cards(board, "QUALIFIED")) == {first["id"], second["id"]}

        server = (await client.get(f"/api/inquiries/{first['id']}")).json()
        assert server["status"] == "QUALIFIED"

    async def test_move_by_column_id(self, api, client, make_inquiry):
        inquiry = await make_inquiry(assignedTo="mary")
        board = KanbanBoard(api)
        await board.refresh()
        deposit = next(c for c in board.columns if c["status"] == "DEPOSIT")

        assert await board.move_card(inquiry["id"], deposit["id"]) is True
        assert (await client.get(f"/api/inquiries/{inquiry['id']}")).json()["status"] == "DEPOSIT"

    async def test_same_column_and_unknown_target_are_noops(self, api, make_inquiry):
        inquiry = await make_inquiry(assignedTo="mary")
        board = KanbanBoard(api)
        await board.refresh()

        assert await board.move_card(inquiry["id"], "NEW") is False
        assert await board.move_card(inquiry["id"], "NOT_A_COLUMN") is False
        assert self._cards(board, "NEW") == [inquiry["id"]]

    async def test_failed_move_refetches_server_truth(self, api, client, make_inquiry):
        keep = await make_inquiry(assignedTo="mary")
        gone = await make_inquiry(assignedTo="mary")
        board = KanbanBoard(api)
        await board.refresh()

        # deleted elsewhere after the board was loaded
        await client.delete(f"/api/inquiries/{gone['id']}")

        assert await board.move_card(gone["id"], "CONTACTED") is False
        assert board.error == MOVE_FAILED_MESSAGE
        assert self._cards(board, "NEW") == [keep["id"]]
        assert self._cards(board, "CONTACTED") == []

        server = await api.get_kanban()
        assert board.columns == server["stages"]

    async def test_polling_picks_up_new_cards(self, api, make_inquiry):
        board = KanbanBoard(api, poll_seconds=0.05)
        await board.refresh()
        inquiry = await make_inquiry(assignedTo="mary")
        assert self._cards(board, "NEW") == []

        board.start()
        assert board.polling
        for _ in range(100):
            if inquiry["id"] in self._cards(board, "NEW"):
                break
            await asyncio.sleep(0.02)
        assert self._cards(board, "NEW") == [inquiry["id"]]

        await board.stop()
        assert not board.polling
