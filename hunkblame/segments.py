# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of HunkBlame, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

import dataclasses
from collections.abc import Sequence

from hunkblame.appconsts import NULL_HASH


@dataclasses.dataclass(frozen=True)
class BlameSegment:
    """
    Run of consecutive lines attributed to the same commit.

    lineStart is the line number that the run's first line held in the file
    version produced by the commit that introduced it. It is a stable
    back-reference, not the line's current position.
    """

    lineCount: int
    lineStart: int
    commitHash: str

    def __repr__(self):
        return f"({self.commitHash[:7] or '-'},{self.lineStart}+{self.lineCount})"


@dataclasses.dataclass(frozen=True)
class BlameLine:
    commitHash: str
    lineNumber: int


BlameSegments = list[BlameSegment]
BlameVector = list[BlameLine]


def countLines(segments: Sequence[BlameSegment]) -> int:
    return sum(segment.lineCount for segment in segments)


def wipeSegments(segments: Sequence[BlameSegment]) -> BlameSegments:
    """ Collapse the segments into a single unattributed run of the same length. """
    n = countLines(segments)
    if n == 0:
        return []
    return [BlameSegment(n, 1, NULL_HASH)]


def flattenSegments(segments: Sequence[BlameSegment]) -> BlameVector:
    return [BlameLine(segment.commitHash, segment.lineStart + i)
            for segment in segments
            for i in range(segment.lineCount)]


class SegmentCursor:
    """
    Walks an immutable list of old segments while emitting a new list.

    The position in the old list is tracked as a segment index plus the number
    of lines that remain to be consumed in that segment. Segments are split
    wherever a walk stops inside them.
    """

    oldSegments: Sequence[BlameSegment]
    newSegments: BlameSegments

    oldIndex: int
    """ Index of the current old segment. """

    oldRemaining: int
    """ Lines not consumed yet in the current old segment. """

    oldLineNo: int
    """ 1-based number of the next old line to consume. """

    newLineNo: int
    """ 1-based number of the next line to emit. """

    def __init__(self, oldSegments: Sequence[BlameSegment]):
        self.oldSegments = oldSegments
        self.oldTotal = countLines(oldSegments)
        self.newSegments = []
        self.oldLineNo = 1
        self.newLineNo = 1
        self.oldIndex = -1
        self.oldRemaining = 0
        self._nextOldSegment()

    def _nextOldSegment(self):
        # Zero-length segments are never emitted, but tolerate them in the input
        self.oldIndex += 1
        while self.oldIndex < len(self.oldSegments) and self.oldSegments[self.oldIndex].lineCount == 0:
            self.oldIndex += 1
        if self.oldIndex < len(self.oldSegments):
            self.oldRemaining = self.oldSegments[self.oldIndex].lineCount
        else:
            self.oldRemaining = 0

    def _consume(self, n: int, keep: bool):
        assert n >= 0, f"can't move cursor backwards ({n})"
        assert self.oldLineNo - 1 + n <= self.oldTotal, \
            f"cursor overrun: {n} lines past line {self.oldLineNo - 1} of {self.oldTotal}"

        while n > 0:
            segment = self.oldSegments[self.oldIndex]
            chunk = min(n, self.oldRemaining)

            if keep:
                progress = segment.lineCount - self.oldRemaining
                self.newSegments.append(BlameSegment(chunk, segment.lineStart + progress, segment.commitHash))
                self.newLineNo += chunk

            n -= chunk
            self.oldLineNo += chunk
            self.oldRemaining -= chunk

            if self.oldRemaining == 0:
                self._nextOldSegment()

    def fastForward(self, n: int):
        """ Copy n old lines into the new list, keeping their attribution. """
        self._consume(n, keep=True)

    def skip(self, n: int):
        """ Drop n old lines. """
        self._consume(n, keep=False)

    def append(self, n: int, commitHash: str):
        """ Emit n new lines attributed to commitHash. """
        assert n > 0
        self.newSegments.append(BlameSegment(n, self.newLineNo, commitHash))
        self.newLineNo += n

    def finish(self) -> BlameSegments:
        """ Copy the unchanged tail of the old list and return the new list. """
        self.fastForward(self.oldTotal - (self.oldLineNo - 1))
        assert self.oldIndex >= len(self.oldSegments)
        return self.newSegments
