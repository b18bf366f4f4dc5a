"""Navigation session endpoints."""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, HTTPException, WebSocket, WebSocketDisconnect, status

from ...config import settings
from ...models.domain import NavigationState
from ...schemas.navigation import NavigationSessionRequest, NavigationSessionResponse, NavigationStateModel
from ...services.geolocation import ReportedPositionProvider, resolve_position
from ...services.navigation import NavigationSession, NavigationSessionStore, SimulatorStatus
from ...services.outputs.formatter import navigation_state_to_model, route_summary, route_to_model
from ...services.routing import RouteAcquisition, RouteUnreachable

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/navigation", tags=["navigation"])

session_store = NavigationSessionStore()


def _get_session(session_id: str) -> NavigationSession:
    try:
        return session_store.get(session_id)
    except KeyError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc.args[0])) from exc


def _state_model(session: NavigationSession, state: NavigationState | None = None) -> NavigationStateModel:
    simulator = session.simulator
    return navigation_state_to_model(state or simulator.snapshot(), simulator.status.value)


@router.post("/sessions", response_model=NavigationSessionResponse, status_code=status.HTTP_201_CREATED)
async def create_session(payload: NavigationSessionRequest) -> NavigationSessionResponse:
    """Acquire a route from the device position (or fallback start) and prepare playback."""
    fallback = (payload.start.lng, payload.start.lat) if payload.start else tuple(settings.default_start)
    device = (payload.device_position.lng, payload.device_position.lat) if payload.device_position else None
    start_lng, start_lat = resolve_position(ReportedPositionProvider(device), fallback)
    end_lng, end_lat = (payload.end.lng, payload.end.lat) if payload.end else tuple(settings.default_end)

    try:
        route = await RouteAcquisition().get_route(
            start_lng, start_lat, end_lng, end_lat, payload.rain_avoidance
        )
    except RouteUnreachable as exc:
        logger.info(f"No viable route for navigation: {exc}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=RouteUnreachable.user_message) from exc
    except Exception as exc:
        logging.exception(f"Error creating navigation session: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to create navigation session: {str(exc)}",
        ) from exc

    try:
        session = session_store.create(route)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return NavigationSessionResponse(
        session_id=session.session_id,
        route=route_to_model(route),
        summary=route_summary(route),
        state=_state_model(session),
    )


@router.get("/sessions/{session_id}", response_model=NavigationStateModel)
def get_session_state(session_id: str) -> NavigationStateModel:
    return _state_model(_get_session(session_id))


@router.post("/sessions/{session_id}/start", response_model=NavigationStateModel)
async def start_session(session_id: str) -> NavigationStateModel:
    session = _get_session(session_id)
    try:
        state = session.simulator.start()
    except RuntimeError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return _state_model(session, state)


@router.post("/sessions/{session_id}/stop", response_model=NavigationStateModel)
async def stop_session(session_id: str) -> NavigationStateModel:
    session = _get_session(session_id)
    return _state_model(session, session.simulator.stop())


@router.post("/sessions/{session_id}/resume", response_model=NavigationStateModel)
async def resume_session(session_id: str) -> NavigationStateModel:
    session = _get_session(session_id)
    try:
        state = session.simulator.resume()
    except RuntimeError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return _state_model(session, state)


@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(session_id: str) -> None:
    try:
        session_store.discard(session_id)
    except KeyError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc.args[0])) from exc


@router.websocket("/sessions/{session_id}/stream")
async def stream_session(websocket: WebSocket, session_id: str) -> None:
    """Push the current state, then each new state until the run completes or the session is discarded."""
    try:
        session = session_store.get(session_id)
    except KeyError:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    queue: asyncio.Queue[NavigationState] = asyncio.Queue()
    unsubscribe = session.simulator.subscribe(queue.put_nowait)
    try:
        state = session.simulator.snapshot()
        while True:
            await websocket.send_json(_state_model(session, state).model_dump())
            if state.is_complete or session.simulator.status is SimulatorStatus.CLOSED:
                break
            state = await queue.get()
        await websocket.close()
    except WebSocketDisconnect:
        logger.info(f"Stream client for session {session_id} disconnected")
    finally:
        unsubscribe()
