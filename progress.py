"""
Progress events for harvest runs.

The controller publishes typed events; whatever serves the user (an SSE
endpoint, a websocket, the CLI) subscribes by session id and forwards them.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, AsyncIterator, Optional


class ProgressStatus:
    CONNECTED = "connected"
    STARTING = "starting"
    PAGE = "page"
    COMPLETED = "completed"
    ERROR = "error"

    TERMINAL = (COMPLETED, ERROR)


@dataclass(frozen=True)
class ProgressEvent:
    status: str
    message: str
    data: Optional[Any] = None

    @property
    def is_terminal(self) -> bool:
        return self.status in ProgressStatus.TERMINAL

    def to_dict(self) -> dict:
        result = {"status": self.status, "message": self.message}
        if self.data is not None:
            result["data"] = self.data
        return result


class ProgressChannel:
    """Per-session queues of progress events.

    Events published for a session nobody subscribed to yet are buffered, so
    a client that connects during the run still sees all of it. A terminal
    event with no subscriber drops the buffer; the run is over and nobody
    is listening.
    """

    def __init__(self):
        self._queues: dict[str, asyncio.Queue] = {}
        self._subscribers: set[str] = set()

    def _queue(self, session_id: str) -> asyncio.Queue:
        if session_id not in self._queues:
            self._queues[session_id] = asyncio.Queue()
        return self._queues[session_id]

    def publish(self, session_id: str, event: ProgressEvent) -> None:
        if not session_id:
            return
        if event.is_terminal and session_id not in self._subscribers:
            self.discard(session_id)
            return
        self._queue(session_id).put_nowait(event)

    def reporter(self, session_id: str):
        """A callable the controller can push events to for one session."""
        def report(event: ProgressEvent) -> None:
            self.publish(session_id, event)
        return report

    async def subscribe(self, session_id: str) -> AsyncIterator[ProgressEvent]:
        """Yield events for session_id until a terminal one, then forget it."""
        queue = self._queue(session_id)
        self._subscribers.add(session_id)
        try:
            while True:
                event = await queue.get()
                yield event
                if event.is_terminal:
                    break
        finally:
            self._subscribers.discard(session_id)
            self.discard(session_id)

    def discard(self, session_id: str) -> None:
        self._queues.pop(session_id, None)

    def pending(self, session_id: str) -> int:
        queue = self._queues.get(session_id)
        return queue.qsize() if queue else 0

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._queues
