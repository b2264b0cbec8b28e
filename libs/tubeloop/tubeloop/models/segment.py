"""Loop segment models."""

from __future__ import annotations

from dataclasses import dataclass
from uuid import uuid4


def generate_segment_id() -> str:
    return str(uuid4())


@dataclass(frozen=True)
class LoopRange:
    """Active loop boundaries handed to the playback synchronizer."""

    start: float
    end: float


@dataclass(frozen=True)
class LoopSegment:
    """A named [start, end] range; ids are ephemeral UI keys, never shared."""

    id: str
    label: str
    start: float
    end: float

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(f"segment start {self.start} is after end {self.end}")

    @classmethod
    def create(cls, label: str, start: float, end: float) -> "LoopSegment":
        """Build a segment with a fresh id, reordering the bounds if needed."""
        low, high = (start, end) if start <= end else (end, start)
        return cls(id=generate_segment_id(), label=label, start=float(low), end=float(high))

    @property
    def length(self) -> float:
        return self.end - self.start

    def to_range(self) -> LoopRange:
        return LoopRange(start=self.start, end=self.end)


def sort_segments(segments: list[LoopSegment]) -> list[LoopSegment]:
    return sorted(segments, key=lambda s: s.start)
