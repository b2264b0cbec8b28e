"""Share link routes."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request

from services.link_service import LinkService
from tubeloop.config import Settings
from tubeloop.exceptions import InvalidInputError

from .schemas import (
    BuildLinkRequest,
    BuildLinkResponse,
    ResolveLinkRequest,
    ResolveLinkResponse,
    SegmentResponse,
    SessionStateResponse,
)

router = APIRouter(tags=["links"])


def service(request: Request) -> LinkService:
    settings: Settings | None = getattr(request.app.state, "settings", None)
    if settings is None:
        raise HTTPException(status_code=500, detail="settings not initialized")
    return LinkService(settings)


def _bad_request(exc: InvalidInputError) -> HTTPException:
    code = getattr(exc.error_code, "value", exc.error_code)
    return HTTPException(status_code=400, detail={"error_code": code, "message": exc.message})


@router.get("/state", response_model=SessionStateResponse)
async def get_state(request: Request) -> SessionStateResponse:
    svc = service(request)
    state = svc.initial_state(str(request.url.query))
    return SessionStateResponse(
        video_id=state.video_id,
        input_text=state.input_text,
        selected_segment_id=state.selected_segment_id,
        segments=[SegmentResponse.from_segment(s) for s in state.segments],
        address_query=svc.address_query_for(state.video_id, state.segments),
    )


@router.post("/links/resolve", response_model=ResolveLinkResponse)
async def resolve_link(request: Request, payload: ResolveLinkRequest) -> ResolveLinkResponse:
    svc = service(request)
    try:
        resolved = svc.resolve(payload.text)
    except InvalidInputError as exc:
        raise _bad_request(exc) from exc
    return ResolveLinkResponse(
        video_id=resolved.video_id,
        segments=[SegmentResponse.from_segment(s) for s in resolved.segments],
        link=svc.link_for(resolved.video_id, resolved.segments),
    )


@router.post("/links/build", response_model=BuildLinkResponse)
async def build_link(request: Request, payload: BuildLinkRequest) -> BuildLinkResponse:
    try:
        link, address_query, segments = service(request).build(payload.video_id, payload.segments)
    except InvalidInputError as exc:
        raise _bad_request(exc) from exc
    return BuildLinkResponse(
        link=link,
        address_query=address_query,
        segments=[SegmentResponse.from_segment(s) for s in segments],
    )
