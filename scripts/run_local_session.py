from __future__ import annotations

import argparse
import asyncio

from tubeloop.config import Settings
from tubeloop.playback import PlaybackSynchronizer
from tubeloop.players.simulated import SimulatedPlayerLoader
from tubeloop.services.controller import LooperController
from tubeloop.utils.logging_setup import setup_logging
from tubeloop.utils.timestamps import format_editable


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Loop segments of a YouTube link against a simulated player."
    )
    parser.add_argument("--input", required=True, help="YouTube URL, share link or 11-char video id")
    parser.add_argument(
        "--segment",
        nargs=2,
        action="append",
        metavar=("START", "END"),
        default=[],
        help="Add a segment (e.g. --segment 1:05 1:12.5); may be repeated",
    )
    parser.add_argument("--label", default="", help="Label for the first added segment")
    parser.add_argument("--seconds", type=float, default=5.0, help="How long to run the session")
    parser.add_argument("--duration-s", type=float, default=300.0, help="Simulated media duration")
    parser.add_argument("--rate", default="1", help="Playback rate")
    parser.add_argument("--sample-s", type=float, default=0.5, help="Play-head sampling interval")
    parser.add_argument("--next", action="store_true", help="Step to the next segment halfway through")
    parser.add_argument("--no-loop", action="store_true", help="Disable looping")
    return parser.parse_args()


def _add_segments(controller: LooperController, segments: list[list[str]], label: str) -> None:
    for index, (start, end) in enumerate(segments):
        if index == 0 and label:
            controller.set_draft_label(label)
        controller.set_draft_start_text(start)
        controller.set_draft_end_text(end)
        errors = controller.draft_errors
        if errors or controller.commit_draft() is None:
            detail = ", ".join(f"{k}={v.value}" for k, v in errors.items()) or "incomplete"
            raise SystemExit(f"Invalid segment {start}..{end}: {detail}")


async def _wait_ready(sync: PlaybackSynchronizer, timeout: float = 5.0) -> None:
    async def _poll() -> None:
        while not sync.is_ready:
            await asyncio.sleep(0.01)

    await asyncio.wait_for(_poll(), timeout=timeout)


async def _run() -> int:
    args = _parse_args()
    settings = Settings()
    setup_logging(settings)

    controller = LooperController(settings)
    if not controller.load_from(args.input):
        raise SystemExit(f"Invalid input: {controller.input_error}")
    _add_segments(controller, args.segment, str(args.label))
    if not controller.set_playback_rate(args.rate):
        raise SystemExit(f"Invalid playback rate: {args.rate}")
    if args.no_loop:
        controller.toggle_looping()

    loader = SimulatedPlayerLoader(durations={str(controller.video_id): float(args.duration_s)})
    sync = PlaybackSynchronizer.from_settings(settings, loader=loader)
    controller.bind(sync)
    async with sync:
        if controller.player_error:
            raise SystemExit(f"Player failed: {controller.player_error}")
        await _wait_ready(sync)
        controller.toggle_play()

        selected = controller.selected_segment
        if selected is not None:
            print(f"looping {selected.label} {format_editable(selected.start)}-{format_editable(selected.end)}")

        elapsed = 0.0
        stepped = False
        while elapsed < float(args.seconds):
            await asyncio.sleep(float(args.sample_s))
            elapsed += float(args.sample_s)
            print(f"t={elapsed:.1f}s position={format_editable(controller.playback.current_time)}")
            if args.next and not stepped and elapsed >= float(args.seconds) / 2:
                segment = controller.select_next()
                stepped = True
                if segment is not None:
                    print(f"next segment {segment.label}")

    print(f"link={controller.canonical_link}")
    print(f"address_query={controller.address_query()}")
    return 0


def main() -> None:
    raise SystemExit(asyncio.run(_run()))


if __name__ == "__main__":
    main()
