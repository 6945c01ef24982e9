"""Bounded buffer of outcome glyphs shown next to a suite or test header."""

from __future__ import annotations

DEFAULT_CAPACITY = 1024


class StatusLine:
    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError(f"status line capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._glyphs: list[str] = []

    def __len__(self) -> int:
        return len(self._glyphs)

    def __str__(self) -> str:
        return "".join(self._glyphs)

    @property
    def full(self) -> bool:
        return len(self._glyphs) >= self.capacity

    def append(self, glyph: str) -> None:
        if self.full:
            raise OverflowError("status line is full; flush it before appending")
        self._glyphs.append(glyph)

    def reset(self) -> None:
        self._glyphs.clear()
