"""
Request-level facade over the session controller.

Whatever transport serves the UI (HTTP + server-sent events, websockets, a
CLI) calls these methods and forwards the progress events. Results of a
harvest are only delivered through the progress channel.
"""

import asyncio
import logging
from typing import AsyncIterator

from errors import LeadHarvestError
from models import FilterSpec
from progress import ProgressChannel, ProgressEvent, ProgressStatus
from session_controller import SessionController

logger = logging.getLogger(__name__)


class LeadHarvestService:
    def __init__(self, controller: SessionController = None, channel: ProgressChannel = None):
        self.controller = controller or SessionController()
        self.channel = channel or ProgressChannel()
        self._task: asyncio.Task | None = None

    async def begin_authentication(self) -> dict:
        try:
            return await self.controller.begin_manual_auth()
        except LeadHarvestError as e:
            logger.error("[service] Could not open browser for login: %s", e)
            return {"success": False, "error": str(e)}

    async def start_harvest(self, filters: dict, session_id: str) -> dict:
        """Validate the request and start the harvest in the background.

        Args:
            filters: {"jobTitle", "location", "maxLeads"}
            session_id: Key the progress events are published under
        """
        if not session_id:
            return {"success": False, "error": "Session ID required"}
        try:
            filter_spec = FilterSpec.from_dict(filters or {})
        except ValueError as e:
            return {"success": False, "error": str(e)}
        if self.is_running():
            return {"success": False, "error": "Harvest already in progress"}

        self._task = asyncio.create_task(self._run(filter_spec, session_id))
        return {"success": True, "message": "Harvest started"}

    async def _run(self, filter_spec: FilterSpec, session_id: str) -> None:
        # The controller publishes starting/page/completed/error itself
        try:
            await self.controller.harvest(filter_spec, reporter=self.channel.reporter(session_id))
        except LeadHarvestError as e:
            logger.info("[service] Harvest for %s ended with error: %s", session_id, e)
        except Exception:
            logger.exception("[service] Unexpected harvest failure for %s", session_id)

    def is_running(self) -> bool:
        # The task may be scheduled but not yet started
        task_pending = self._task is not None and not self._task.done()
        return task_pending or self.controller.session.is_harvesting

    async def wait(self) -> None:
        """Wait for the background harvest, if any, to finish."""
        if self._task is not None:
            await self._task

    async def subscribe(self, session_id: str) -> AsyncIterator[ProgressEvent]:
        """Stream events for session_id, starting with a connected event."""
        yield ProgressEvent(ProgressStatus.CONNECTED, "Progress stream established")
        async for event in self.channel.subscribe(session_id):
            yield event

    async def stop(self) -> dict:
        """Stop and release the browser.

        Subscribers stay attached: a harvest in flight still publishes its
        completed event with the leads collected before the stop.
        """
        await self.controller.stop()
        return {"success": True, "message": "Harvest stopped"}

    def status(self) -> dict:
        snapshot = self.controller.status()
        return {
            "isAuthenticated": snapshot["is_authenticated"],
            "isHarvesting": snapshot["is_harvesting"],
        }
