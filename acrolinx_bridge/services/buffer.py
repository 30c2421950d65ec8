"""
Editor-style text buffer with ranges that follow edits.

Positions are 1-based like the editor's: the first character sits at
position 1 and ``point_max`` is one past the last character.
"""
from __future__ import annotations
from typing import List, Optional


class TrackedRange:
    def __init__(self, buffer: "DocumentBuffer", start: int, end: int, face: Optional[str] = None):
        self._buffer = buffer
        self.start = start
        self.end = end
        self.face = face
        self.released = False

    def _check_live(self):
        if self.released:
            raise ValueError("range has been released")

    @property
    def text(self) -> str:
        self._check_live()
        return self._buffer.substring(self.start, self.end)

    def clear_face(self):
        self.face = None

    def release(self):
        if not self.released:
            self._buffer._forget(self)
            self.released = True

    def _shift(self, begin: int, end: int, delta: int):
        self.start = _map_position(self.start, begin, end, delta, advance=True)
        self.end = max(self.start, _map_position(self.end, begin, end, delta))

    def __repr__(self):
        state = "released" if self.released else f"{self.start}-{self.end}"
        return f"<TrackedRange {state}>"


def _map_position(pos: int, begin: int, end: int, delta: int, advance: bool = False) -> int:
    # advance: stay after text inserted exactly at pos
    if pos < begin or (pos == begin and not (advance and begin == end)):
        return pos
    if pos >= end:
        return pos + delta
    # inside the replaced text
    return begin


class DocumentBuffer:
    def __init__(self, text: str, identifier: str, path: Optional[str] = None, mode: str = "text-mode"):
        self.text = text
        self.identifier = identifier
        self.path = path
        self.mode = mode
        self.point = 1
        self._ranges: List[TrackedRange] = []

    @property
    def point_min(self) -> int:
        return 1

    @property
    def point_max(self) -> int:
        return len(self.text) + 1

    @property
    def reference(self) -> str:
        return self.path or self.identifier

    def _clamp(self, pos: int) -> int:
        return max(self.point_min, min(pos, self.point_max))

    def _validate(self, begin: int, end: int):
        if not (self.point_min <= begin <= end <= self.point_max):
            raise ValueError(f"invalid region {begin}-{end} for buffer of size {len(self.text)}")

    def substring(self, begin: int, end: int) -> str:
        self._validate(begin, end)
        return self.text[begin - 1:end - 1]

    def replace(self, begin: int, end: int, text: str):
        self._validate(begin, end)
        self.text = self.text[:begin - 1] + text + self.text[end - 1:]
        delta = len(text) - (end - begin)
        for r in self._ranges:
            r._shift(begin, end, delta)
        self.point = self._clamp(_map_position(self.point, begin, end, delta, advance=True))

    def insert(self, pos: int, text: str):
        self.replace(pos, pos, text)

    def delete(self, begin: int, end: int):
        self.replace(begin, end, "")

    def goto(self, pos: int) -> int:
        self.point = self._clamp(pos)
        return self.point

    def track(self, begin: int, end: int, face: Optional[str] = None) -> TrackedRange:
        begin, end = self._clamp(begin), self._clamp(end)
        r = TrackedRange(self, begin, max(begin, end), face=face)
        self._ranges.append(r)
        return r

    @property
    def ranges(self) -> List[TrackedRange]:
        return list(self._ranges)

    def _forget(self, r: TrackedRange):
        self._ranges = [x for x in self._ranges if x is not r]
