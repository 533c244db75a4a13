"""
Inquiry kanban board

Columns come from GET /api/kanban. Cards move optimistically; when the
server refuses a move the whole board is refetched.
"""
import asyncio
import logging
from typing import Any, Dict, List, Optional

from app.client.api import ApiError, BackofficeClient
from app.core.config import settings

logger = logging.getLogger(__name__)

MOVE_FAILED_MESSAGE = "Failed to update inquiry status"


class KanbanBoard:
    def __init__(
        self,
        client: BackofficeClient,
        assigned_to: Optional[str] = None,
        changed_by: Optional[str] = None,
        poll_seconds: Optional[float] = None
    ):
        self.client = client
        self.assigned_to = assigned_to
        self.changed_by = changed_by
        self.poll_seconds = settings.KANBAN_POLL_SECONDS if poll_seconds is None else poll_seconds

        self.columns: List[Dict[str, Any]] = []
        self.error: Optional[str] = None
        self._poll_task: Optional[asyncio.Task] = None

    async def refresh(self) -> List[Dict[str, Any]]:
        """Replace the columns with the server's board"""
        board = await self.client.get_kanban(self.assigned_to)
        self.columns = board.get("stages", [])
        return self.columns

    def column_of(self, inquiry_id: int) -> Optional[Dict[str, Any]]:
        for column in self.columns:
            if any(card["id"] == inquiry_id for card in column.get("inquiries", [])):
                return column
        return None

    def card(self, inquiry_id: int) -> Optional[Dict[str, Any]]:
        column = self.column_of(inquiry_id)
        if column is None:
            return None
        return next(c for c in column["inquiries"] if c["id"] == inquiry_id)

    def resolve_column(self, target: Any) -> Optional[Dict[str, Any]]:
        """
        Column for a drop target: a status, a column id, or the column or
        card dict that was dropped onto (a card resolves to its column).
        """
        if isinstance(target, dict):
            if "inquiries" in target:
                return self.resolve_column(target.get("id"))
            return self.column_of(target.get("id"))
        if isinstance(target, str):
            return next((c for c in self.columns if c.get("status") == target), None)
        return next((c for c in self.columns if c.get("id") == target), None)

    async def move_card(self, inquiry_id: int, target: Any) -> bool:
        """
        Move a card to the target column.

        Returns False when nothing was sent (unknown card or target, or the
        same column) or when the server rejected the move.
        """
        source = self.column_of(inquiry_id)
        destination = self.resolve_column(target)
        if source is None or destination is None or source is destination:
            return False

        card = self.card(inquiry_id)
        source["inquiries"] = [c for c in source["inquiries"] if c["id"] != inquiry_id]
        destination["inquiries"] = [dict(card, status=destination["status"])] + destination.get("inquiries", [])

        try:
            await self.client.move_inquiry(inquiry_id, destination["status"], self.changed_by)
        except ApiError as e:
            self.error = MOVE_FAILED_MESSAGE
            logger.warning(f"Moving inquiry {inquiry_id} to {destination['status']} failed: {e.message}")
            await self.refresh()
            return False

        self.error = None
        return True

    # ==================== POLLING ====================

    async def _poll(self):
        while True:
            await asyncio.sleep(self.poll_seconds)
            try:
                await self.refresh()
            except ApiError as e:
                logger.warning(f"Kanban refresh failed: {e.message}")

    def start(self):
        """Refetch the board every poll_seconds until stop()"""
        if self._poll_task is None:
            self._poll_task = asyncio.create_task(self._poll())

    async def stop(self):
        task = self._poll_task
        self._poll_task = None
        if task is not None:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

    @property
    def polling(self) -> bool:
        return self._poll_task is not None
