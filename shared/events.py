"""In-process profile event channel feeding SSE subscribers."""
from __future__ import annotations

import asyncio
import logging
import uuid
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any, AsyncIterator, Dict, List

logger = logging.getLogger(__name__)

PROFILE_READY = "profile_ready"


class ProfileEventBroker:
    """Fans profile events out to every subscriber listening for a user.

    Publishing never waits on consumers: each subscriber owns an unbounded
    queue, and users nobody is listening for are simply skipped.
    """

    def __init__(self) -> None:
        self._subscribers: Dict[uuid.UUID, List["asyncio.Queue[Dict[str, Any]]"]] = {}
        self._lock = asyncio.Lock()

    async def publish(self, user_id: uuid.UUID, payload: Dict[str, Any]) -> int:
        """Deliver ``payload`` to current subscribers, returning how many got it."""

        async with self._lock:
            queues = list(self._subscribers.get(user_id, []))
        for queue in queues:
            queue.put_nowait(payload)
        return len(queues)

    @asynccontextmanager
    async def subscribe(self, user_id: uuid.UUID) -> AsyncIterator["asyncio.Queue[Dict[str, Any]]"]:
        queue: "asyncio.Queue[Dict[str, Any]]" = asyncio.Queue()
        async with self._lock:
            self._subscribers.setdefault(user_id, []).append(queue)
        try:
            yield queue
        finally:
            async with self._lock:
                queues = self._subscribers.get(user_id, [])
                if queue in queues:
                    queues.remove(queue)
                if not queues:
                    self._subscribers.pop(user_id, None)

    async def stream(self, user_id: uuid.UUID) -> AsyncIterator[Dict[str, Any]]:
        async with self.subscribe(user_id) as queue:
            while True:
                yield await queue.get()

    def subscriber_count(self, user_id: uuid.UUID) -> int:
        return len(self._subscribers.get(user_id, []))


broker = ProfileEventBroker()


def profile_ready_event(
    user_id: uuid.UUID, industry_type: str | None, brand_logo_url: str | None
) -> Dict[str, Any]:
    return {
        "type": PROFILE_READY,
        "user_id": str(user_id),
        "industry_type": industry_type,
        "brand_logo_url": brand_logo_url,
        "created_at": datetime.now(UTC).isoformat(),
    }


async def emit_profile_ready(
    event_broker: ProfileEventBroker,
    user_id: uuid.UUID,
    industry_type: str | None,
    brand_logo_url: str | None = None,
) -> Dict[str, Any]:
    """Announce that a user's brand profile is complete; never waits on listeners."""

    payload = profile_ready_event(user_id, industry_type, brand_logo_url)
    delivered = await event_broker.publish(user_id, payload)
    logger.info(
        "Profile ready for user %s (industry=%s, listeners=%d)", user_id, industry_type, delivered
    )
    return payload
