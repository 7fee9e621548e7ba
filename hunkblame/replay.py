# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of HunkBlame, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

"""
Replay the hunks in a file's history to annotate (blame) every line.

The same transition function runs both forward in time (who last wrote each
line?) and backward in time, with each hunk's old/new sides swapped (who will
next modify or delete each line?).
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from hunkblame.appconsts import APP_DEBUG
from hunkblame.errors import HunkMismatchError, ResourceLimitError
from hunkblame.history import FileCommit, FileHistory, Hunk
from hunkblame.segments import BlameSegment, BlameSegments, BlameVector, SegmentCursor, countLines, flattenSegments, wipeSegments
from hunkblame.settings import Prefs

_logger = logging.getLogger(__name__)


def _checkHunkFits(cursor: SegmentCursor, gap: int, length: int, commitHash: str, hunk: Hunk):
    # Hunks come from ingested logs, so don't leave this to the cursor's assertions
    if gap < 0 or cursor.oldLineNo - 1 + gap + length > cursor.oldTotal:
        raise HunkMismatchError(commitHash, hunk, cursor.oldTotal)


def replayHunks(
        oldSegments: Sequence[BlameSegment],
        hunks: Sequence[Hunk],
        commitHash: str,
        reverse: bool = False,
) -> BlameSegments:
    """
    Apply a commit's hunks to the segments describing the file before the
    commit. Return new segments describing the file after the commit, in which
    the lines added by the commit are attributed to commitHash.

    With reverse=True, the hunks are applied backwards (old and new sides
    swapped): oldSegments then describe the file *after* the commit, and the
    result describes the file before it, with the lines that the commit
    removed or replaced attributed to commitHash.
    """

    cursor = SegmentCursor(oldSegments)

    for originalHunk in hunks:
        hunk = originalHunk.swapped() if reverse else originalHunk

        if hunk.oldLength > 0:
            # Copy unchanged lines up to the hunk, then drop the lines it replaces
            gap = hunk.oldStart - cursor.oldLineNo
            _checkHunkFits(cursor, gap, hunk.oldLength, commitHash, originalHunk)
            cursor.fastForward(gap)
            cursor.skip(hunk.oldLength)

        if hunk.newLength > 0:
            # Unchanged spans have the same length on both sides, so this only
            # has work to do for pure insertions (the gap wasn't copied above)
            gap = hunk.newStart - cursor.newLineNo
            _checkHunkFits(cursor, gap, 0, commitHash, originalHunk)
            cursor.fastForward(gap)
            cursor.append(hunk.newLength, commitHash)

    newSegments = cursor.finish()

    if APP_DEBUG:
        removed = sum(h.newLength if reverse else h.oldLength for h in hunks)
        added = sum(h.oldLength if reverse else h.newLength for h in hunks)
        assert countLines(newSegments) == cursor.oldTotal - removed + added, \
            f"line count not conserved after {commitHash}"

    return newSegments


def _step(segments: BlameSegments, fileCommit: FileCommit, prefs: Prefs, reverse=False) -> BlameSegments:
    segments = replayHunks(segments, fileCommit.hunks, fileCommit.hash, reverse)
    if countLines(segments) > prefs.maxLines:
        raise ResourceLimitError("lines", prefs.maxLines)
    return segments


def blameHistory(
        fileHistory: FileHistory,
        blameEnd: int,
        futureStart: int,
        prefs: Prefs | None = None,
) -> tuple[BlameVector, BlameVector]:
    """
    Annotate a file at two points of its history.

    The blame vector describes the file after commits [0, blameEnd): each line
    is attributed to the commit that last wrote it.

    The future vector describes the file after commits [0, futureStart): each
    line is attributed to the commit that will next modify or delete it, or
    NULL_HASH if the line survives until the end of the history.
    """

    prefs = prefs or Prefs()
    numCommits = len(fileHistory)

    if numCommits > prefs.maxCommits:
        raise ResourceLimitError("commits", prefs.maxCommits)

    assert 0 <= blameEnd <= numCommits
    assert 0 <= futureStart <= numCommits

    # Forward pass: replay commits up to blameEnd
    segments: BlameSegments = []
    for fileCommit in fileHistory[:blameEnd]:
        segments = _step(segments, fileCommit, prefs)
    blameVector = flattenSegments(segments)

    # Keep going until the end of history, but only the final line count matters
    for fileCommit in fileHistory[blameEnd:]:
        segments = _step(segments, fileCommit, prefs)

    # Forget who wrote the lines at the tip, then walk back in time
    segments = wipeSegments(segments)
    for fileCommit in reversed(fileHistory[futureStart:]):
        segments = _step(segments, fileCommit, prefs, reverse=True)
    futureVector = flattenSegments(segments)

    _logger.debug(f"Replayed {numCommits + numCommits - futureStart} commits "
                  f"(blame: {len(blameVector)} lines, future: {len(futureVector)} lines)")

    return blameVector, futureVector
