from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.utils.response import success_response, APIResponse, ViewingFlag

from app.schemas.support.view_state_schemas import ViewStateOut, ViewStateSet

from app.services.support.view_state_service import (
    get_view_state,
    set_view_state,
    stop_view_state,
    is_viewing,
    view_state_events,
)

router = APIRouter(
    prefix="/customer-view",
    tags=["Customer View"],
)


@router.get(
    "",
    response_model=APIResponse[ViewStateOut],
)
async def get_view_state_api(
    db: AsyncSession = Depends(get_db),
):
    state = await get_view_state(db)
    return success_response("Customer view retrieved successfully", state)


@router.put(
    "",
    response_model=APIResponse[ViewStateOut],
)
async def set_view_state_api(
    payload: ViewStateSet,
    db: AsyncSession = Depends(get_db),
):
    state = await set_view_state(db, payload)
    return success_response("Customer view updated", state)


@router.post(
    "/stop",
    response_model=APIResponse[ViewStateOut],
)
async def stop_view_state_api(
    db: AsyncSession = Depends(get_db),
):
    state = await stop_view_state(db)
    return success_response("Customer view stopped", state)


@router.get(
    "/viewing/{session_id}",
    response_model=APIResponse[ViewingFlag],
)
async def is_viewing_api(
    session_id: str,
    db: AsyncSession = Depends(get_db),
):
    viewing = await is_viewing(db, session_id)
    return success_response("Customer view checked", ViewingFlag(viewing=viewing))


@router.get("/events")
async def view_state_events_api(
    db: AsyncSession = Depends(get_db),
):
    # read once up front; the stream itself holds no database session
    initial = await get_view_state(db)
    return StreamingResponse(
        view_state_events(initial),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache"},
    )
