"""Session services (links, controller)."""

from tubeloop.services.controller import LinkEditState, LooperController
from tubeloop.services.links import (
    InitialAppState,
    ResolvedInput,
    build_address_query,
    build_video_link,
    extract_segments_from_input,
    initial_state_from_query,
    resolve_input,
)

__all__ = [
    "InitialAppState",
    "LinkEditState",
    "LooperController",
    "ResolvedInput",
    "build_address_query",
    "build_video_link",
    "extract_segments_from_input",
    "initial_state_from_query",
    "resolve_input",
]
