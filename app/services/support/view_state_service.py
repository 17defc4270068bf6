# app/services/support/view_state_service.py

import asyncio
import json
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.support.view_state_models import VIEW_STATE_ID, CustomerViewState
from app.schemas.support.view_state_schemas import ViewStateOut, ViewStateSet
from app.utils.time_utils import utc_now

logger = logging.getLogger(__name__)


class ViewStateBroadcaster:
    """In-process fan-out of view-state changes to connected displays."""

    def __init__(self, max_queue: int = 16):
        self._subscribers: set[asyncio.Queue] = set()
        self._max_queue = max_queue

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self) -> asyncio.Queue:
        queue: asyncio.Queue = asyncio.Queue(maxsize=self._max_queue)
        self._subscribers.add(queue)
        logger.debug("View-state subscriber added", extra={"subscribers": len(self._subscribers)})
        return queue

    def unsubscribe(self, queue: asyncio.Queue) -> None:
        self._subscribers.discard(queue)
        logger.debug("View-state subscriber removed", extra={"subscribers": len(self._subscribers)})

    def publish(self, state: ViewStateOut) -> None:
        for queue in list(self._subscribers):
            if queue.full():
                # slow display: drop its oldest update, the newest one wins
                queue.get_nowait()
            queue.put_nowait(state)


broadcaster = ViewStateBroadcaster()


async def _get_or_create(db: AsyncSession) -> CustomerViewState:
    state = await db.get(CustomerViewState, VIEW_STATE_ID)
    if state is None:
        state = CustomerViewState(id=VIEW_STATE_ID, enabled=False, session_id=None)
        db.add(state)
        await db.flush()
    return state


async def _save(db: AsyncSession, state: CustomerViewState) -> ViewStateOut:
    state.updated_at = utc_now()
    await db.commit()
    await db.refresh(state)

    out = ViewStateOut.model_validate(state)
    broadcaster.publish(out)

    logger.info(
        "Customer view updated",
        extra={"enabled": out.enabled, "session_id": out.session_id},
    )
    return out


# =====================================================
# GET / SET / STOP
# =====================================================
async def get_view_state(db: AsyncSession) -> ViewStateOut:
    state = await db.get(CustomerViewState, VIEW_STATE_ID)
    if state is None:
        return ViewStateOut(enabled=False, session_id=None, updated_at=None)
    return ViewStateOut.model_validate(state)


async def set_view_state(db: AsyncSession, payload: ViewStateSet) -> ViewStateOut:
    state = await _get_or_create(db)

    session_id = (payload.session_id or "").strip() or None
    state.enabled = bool(payload.enabled and session_id)
    state.session_id = session_id if state.enabled else None

    return await _save(db, state)


async def stop_view_state(db: AsyncSession) -> ViewStateOut:
    state = await _get_or_create(db)
    state.enabled = False
    state.session_id = None
    return await _save(db, state)


async def is_viewing(db: AsyncSession, session_id: str | int) -> bool:
    state = await get_view_state(db)
    return state.enabled and state.session_id == str(session_id)


# =====================================================
# SERVER-SENT EVENTS
# =====================================================
def _sse(state: ViewStateOut) -> str:
    return f"event: view-state\ndata: {json.dumps(state.model_dump(mode='json'))}\n\n"


async def view_state_events(initial: ViewStateOut, *, heartbeat: float = 15.0):
    """Yield the current state, then every change, as SSE frames."""
    queue = broadcaster.subscribe()
    try:
        yield _sse(initial)
        while True:
            try:
                state = await asyncio.wait_for(queue.get(), timeout=heartbeat)
            except asyncio.TimeoutError:
                yield ": keep-alive\n\n"
                continue
            yield _sse(state)
    finally:
        broadcaster.unsubscribe(queue)
