from __future__ import annotations

import asyncio
from typing import Any

import pytest

from tubeloop.config import Settings
from tubeloop.error_codes import ErrorCode
from tubeloop.exceptions import PlayerLoadError
from tubeloop.models.segment import LoopRange, LoopSegment
from tubeloop.playback.synchronizer import PlaybackSynchronizer
from tubeloop.players.simulated import SimulatedPlayerLoader
from tubeloop.services.controller import LinkEditState, LooperController
from tubeloop.services.links import build_address_query, build_video_link, extract_segments_from_input

VIDEO_ID = "dQw4w9WgXcQ"
OTHER_ID = "aaaaaaaaaaa"


class RecordingSynchronizer:
    """Stands in for PlaybackSynchronizer; records every pushed input."""

    def __init__(self) -> None:
        self.calls: list[tuple[Any, ...]] = []
        self.on_ready = None
        self.on_state_change = None
        self.on_time_update = None
        self.on_error = None

    def set_video(self, video_id: str | None) -> None:
        self.calls.append(("video", video_id))

    def set_playback_rate(self, rate: float) -> None:
        self.calls.append(("rate", rate))

    def set_loop_range(self, loop_range: LoopRange | None) -> None:
        self.calls.append(("range", loop_range))

    def set_looping(self, enabled: bool) -> None:
        self.calls.append(("looping", enabled))

    def play(self) -> None:
        self.calls.append(("play",))

    def pause(self) -> None:
        self.calls.append(("pause",))

    def seek_to(self, seconds: float, allow_seek_ahead: bool | None = None) -> None:
        self.calls.append(("seek", seconds))

    def last(self, name: str) -> Any:
        for call in reversed(self.calls):
            if call[0] == name:
                return call[1] if len(call) > 1 else True
        raise AssertionError(f"no {name} call recorded")


def _link(*segments: tuple[str, float, float], video_id: str = VIDEO_ID) -> str:
    return build_video_link(video_id, [LoopSegment.create(*s) for s in segments])


async def _wait_until(predicate, timeout: float = 1.0) -> None:
    async def _poll() -> None:
        while not predicate():
            await asyncio.sleep(0.005)

    await asyncio.wait_for(_poll(), timeout=timeout)


@pytest.fixture()
def controller(settings: Settings) -> LooperController:
    return LooperController(settings)


def test_load_from_link_replaces_video_and_segments(controller: LooperController) -> None:
    controller.playback.current_time = 42.0
    controller.playback.duration = 100.0
    controller.playback.is_playing = True
    controller.draft = controller.draft.with_label("leftover")

    link = _link(("Solo", 60, 75), ("Intro", 0, 12.5))
    assert controller.load_from(link) is True

    assert controller.video_id == VIDEO_ID
    assert [s.label for s in controller.segments] == ["Intro", "Solo"]
    assert controller.selected_segment_id == controller.segments[0].id
    assert controller.draft.label == ""
    assert (controller.playback.current_time, controller.playback.duration) == (0.0, 0.0)
    assert controller.playback.is_playing is False
    assert controller.input_text == controller.canonical_link
    assert controller.link_state == LinkEditState.CLEAN
    assert controller.input_error is None


def test_load_from_invalid_text_changes_nothing_but_the_error(controller: LooperController) -> None:
    controller.load_from(_link(("Intro", 0, 5)))
    before = (controller.video_id, controller.segments, controller.selected_segment_id)

    controller.edit_input("definitely not a video")
    assert controller.load_from() is False

    assert controller.input_error == "Please enter a valid YouTube URL or ID."
    assert controller.input_error_code == ErrorCode.INVALID_VIDEO_REFERENCE
    assert (controller.video_id, controller.segments, controller.selected_segment_id) == before
    assert controller.input_text == "definitely not a video"


def test_bare_id_load_has_no_selection(controller: LooperController) -> None:
    assert controller.load_from(VIDEO_ID)
    assert controller.segments == []
    assert controller.selected_segment is None
    assert controller.loop_range is None
    assert controller.input_text == f"https://www.youtube.com/watch?v={VIDEO_ID}"


def test_mark_and_commit_draft(controller: LooperController) -> None:
    controller.load_from(VIDEO_ID)
    controller.playback.duration = 200.0

    controller.playback.current_time = 10.004
    controller.mark_start()
    controller.playback.current_time = 25.5
    controller.mark_end()
    assert controller.draft.start_text == "00:10"
    assert controller.draft.end_text == "00:25.50"
    assert controller.can_add_segment

    segment = controller.commit_draft()
    assert segment is not None
    assert (segment.label, segment.start, segment.end) == ("Loop 1", 10.0, 25.5)
    assert controller.selected_segment_id == segment.id
    assert controller.draft.start is None
    assert controller.input_text == controller.canonical_link
    assert [s.label for s in extract_segments_from_input(controller.input_text)] == ["Loop 1"]


def test_commit_rejects_incomplete_or_short_drafts(controller: LooperController) -> None:
    controller.load_from(VIDEO_ID)
    assert controller.commit_draft() is None

    controller.set_draft_start_text("10")
    controller.set_draft_end_text("10.1")
    assert controller.draft_errors == {"end": ErrorCode.SEGMENT_TOO_SHORT}
    assert controller.commit_draft() is None

    controller.set_draft_end_text("10.2")
    assert controller.draft_errors == {}
    assert controller.commit_draft() is not None


def test_commit_clamps_into_duration_and_keeps_sorted(controller: LooperController) -> None:
    controller.load_from(_link(("Chorus", 50, 60)))
    controller.playback.duration = 90.0

    controller.set_draft_label("  Outro ")
    controller.set_draft_start_text("1:20")
    controller.set_draft_end_text("2:00")
    outro = controller.commit_draft()
    assert outro is not None
    assert (outro.label, outro.start, outro.end) == ("Outro", 80.0, 90.0)

    controller.set_draft_start_text("5")
    controller.set_draft_end_text("8")
    intro = controller.commit_draft()
    assert intro is not None
    assert intro.label == "Loop 3"
    assert [s.label for s in controller.segments] == ["Loop 3", "Chorus", "Outro"]


def test_cyclic_navigation(controller: LooperController) -> None:
    assert controller.select_next() is None
    controller.load_from(_link(("A", 0, 1), ("B", 2, 3), ("C", 4, 5)))
    def labels() -> str:
        return controller.selected_segment.label

    assert labels() == "A"
    controller.select_previous()
    assert labels() == "C"
    controller.select_next()
    assert labels() == "A"
    controller.select_next()
    assert labels() == "B"

    controller.select(None)
    controller.select_next()
    assert labels() == "A"
    controller.select(None)
    controller.select_previous()
    assert labels() == "C"


def test_select_unknown_id_is_rejected(controller: LooperController) -> None:
    controller.load_from(_link(("A", 0, 1)))
    selected = controller.selected_segment_id
    assert controller.select("missing") is False
    assert controller.selected_segment_id == selected


def test_remove_and_clear(controller: LooperController) -> None:
    controller.load_from(_link(("A", 0, 1), ("B", 2, 3)))
    first, second = controller.segments

    assert controller.remove(second.id)
    assert controller.selected_segment_id == first.id
    assert controller.remove_selected()
    assert controller.selected_segment_id is None
    assert controller.segments == []
    assert controller.remove("missing") is False
    assert controller.remove_selected() is False
    assert controller.input_text == f"https://www.youtube.com/watch?v={VIDEO_ID}"

    controller.load_from(_link(("A", 0, 1), ("B", 2, 3)))
    controller.clear_all()
    assert controller.segments == []
    assert controller.selected_segment is None
    assert not controller.can_navigate_segments


def test_dirty_input_is_not_overwritten(controller: LooperController) -> None:
    controller.load_from(_link(("A", 0, 1), ("B", 2, 3)))
    controller.edit_input("half typed")
    assert controller.link_state == LinkEditState.DIRTY

    controller.remove(controller.segments[0].id)
    assert controller.input_text == "half typed"

    controller.blur_input()
    assert controller.link_state == LinkEditState.DIRTY

    controller.edit_input(controller.canonical_link)
    assert controller.link_state == LinkEditState.CLEAN
    controller.clear_all()
    assert controller.input_text == f"https://www.youtube.com/watch?v={VIDEO_ID}"


def test_blur_without_video_returns_to_clean(controller: LooperController) -> None:
    controller.edit_input("something")
    assert controller.link_state == LinkEditState.DIRTY
    controller.blur_input()
    assert controller.link_state == LinkEditState.CLEAN
    assert controller.input_text == "something"


def test_submitting_dirty_text_overwrites_it(controller: LooperController) -> None:
    controller.edit_input(f"  https://youtu.be/{OTHER_ID}  ")
    assert controller.load_from()
    assert controller.input_text == f"https://www.youtube.com/watch?v={OTHER_ID}"
    assert controller.link_state == LinkEditState.CLEAN


def test_playback_rate_ignores_invalid_values(controller: LooperController) -> None:
    assert controller.set_playback_rate("1.5")
    assert controller.playback.playback_rate == 1.5
    for bad in ("fast", None, float("nan"), 0, -1):
        assert controller.set_playback_rate(bad) is False
    assert controller.playback.playback_rate == 1.5


def test_bind_pushes_state_and_follows_changes(controller: LooperController) -> None:
    controller.load_from(_link(("A", 0, 10), ("B", 20, 30)))
    sync = RecordingSynchronizer()
    controller.bind(sync)

    assert sync.calls == [
        ("video", VIDEO_ID),
        ("rate", 1.0),
        ("range", LoopRange(0.0, 10.0)),
        ("looping", True),
    ]

    controller.select_next()
    assert sync.last("range") == LoopRange(20.0, 30.0)
    controller.toggle_looping()
    assert sync.last("looping") is False
    controller.set_playback_rate(0.75)
    assert sync.last("rate") == 0.75
    controller.select(None)
    assert sync.last("range") is None


def test_transport_commands(controller: LooperController) -> None:
    controller.load_from(_link(("A", 0, 10), ("B", 20, 30)))
    sync = RecordingSynchronizer()
    controller.bind(sync)
    second = controller.segments[1]
    sync.calls.clear()

    assert controller.play_segment(second.id)
    assert controller.selected_segment_id == second.id
    assert sync.calls[-2:] == [("seek", 20.0), ("play",)]

    controller.handle_state_change(1)
    controller.toggle_play()
    assert sync.calls[-1] == ("pause",)

    controller.handle_state_change(2)
    controller.toggle_play()
    assert sync.calls[-2:] == [("seek", 20.0), ("play",)]
    assert controller.play_segment("missing") is False


def test_selecting_a_segment_jumps_to_it_without_looping(controller: LooperController) -> None:
    controller.load_from(_link(("A", 0, 10), ("B", 20, 30)))
    sync = RecordingSynchronizer()
    controller.bind(sync)
    controller.toggle_looping()
    sync.calls.clear()

    controller.select_next()
    assert sync.calls[-2:] == [("seek", 20.0), ("play",)]

    sync.calls.clear()
    controller.select(controller.selected_segment_id)
    assert ("play",) not in sync.calls

    controller.select_previous()
    assert sync.calls[-2:] == [("seek", 0.0), ("play",)]

    sync.calls.clear()
    controller.select(None)
    assert sync.calls == [
        ("video", VIDEO_ID),
        ("rate", 1.0),
        ("range", None),
        ("looping", False),
    ]


def test_segments_with_identical_bounds_still_jump(controller: LooperController) -> None:
    controller.load_from(_link(("A", 5, 9), ("B", 5, 9)))
    sync = RecordingSynchronizer()
    controller.bind(sync)
    sync.calls.clear()

    controller.select_next()
    assert sync.last("range") == LoopRange(5.0, 9.0)
    assert sync.calls[-2:] == [("seek", 5.0), ("play",)]


def test_committed_segment_starts_playing(controller: LooperController) -> None:
    controller.load_from(VIDEO_ID)
    sync = RecordingSynchronizer()
    controller.bind(sync)
    controller.set_draft_start_text("12")
    controller.set_draft_end_text("18")
    sync.calls.clear()

    assert controller.commit_draft() is not None
    assert sync.calls[-2:] == [("seek", 12.0), ("play",)]


def test_player_callbacks_update_playback(controller: LooperController) -> None:
    controller.handle_player_ready(120.0)
    assert controller.playback.duration == 120.0

    controller.handle_time_update(30.0, 0.0)
    assert controller.playback.current_time == 30.0
    assert controller.playback.duration == 120.0
    assert controller.progress_percent == 25.0

    controller.handle_state_change(3)
    assert controller.playback.is_playing is True
    controller.handle_state_change(0)
    assert controller.playback.is_playing is False

    controller.handle_player_error(PlayerLoadError("simulated", "script blocked"))
    assert controller.player_error == "script blocked"


def test_from_query_restores_session(settings: Settings) -> None:
    query = build_address_query(VIDEO_ID, [LoopSegment.create("Riff", 3, 9)])
    controller = LooperController.from_query(query, settings)

    assert controller.video_id == VIDEO_ID
    assert controller.selected_segment.label == "Riff"
    assert controller.input_text == controller.canonical_link
    assert controller.address_query() == query
    assert controller.has_video and controller.can_loop


def test_from_query_without_video(settings: Settings) -> None:
    controller = LooperController.from_query({"video": "bad"}, settings)
    assert not controller.has_video
    assert controller.input_text == ""
    assert controller.canonical_link == ""
    assert controller.address_query() == ""


@pytest.mark.asyncio
async def test_controller_drives_simulated_player(settings: Settings) -> None:
    controller = LooperController(settings)
    controller.load_from(_link(("A", 5, 8)))

    loader = SimulatedPlayerLoader(durations={VIDEO_ID: 60.0})
    async with PlaybackSynchronizer.from_settings(settings, loader=loader) as sync:
        controller.bind(sync)
        await _wait_until(lambda: sync.is_ready)
        assert controller.playback.duration == 60.0
        assert sync.current_time() == 5.0

        controller.toggle_play()
        assert controller.playback.is_playing is True

