# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of HunkBlame, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

"""
Annotate (blame) the lines of a file at any point of its history by replaying
the diff hunks of the commits that touched it.

Besides classic blame (which commit last wrote each line?), also computes
"future blame" (which commit will next modify or delete each line?).

CAVEAT: Renames aren't followed, and merges are diffed against their first
parent only.
"""

from hunkblame.appconsts import NULL_HASH
from hunkblame.errors import (
    BlameError,
    CommitDoesNotTouchPathError,
    CommitNotFoundError,
    FileNotPresentError,
    GitLogParseError,
    HistoryOrderError,
    HunkMismatchError,
    PathNotFoundError,
    ResourceLimitError,
)
from hunkblame.gitlog import (
    GIT_LOG_ARGS,
    loadHistoryFromLog,
    loadHistoryFromRepo,
    parseGitLog,
    stripGitLog,
)
from hunkblame.history import (
    CommitRecord,
    FileCommit,
    FileHistory,
    GitHistory,
    Hunk,
)
from hunkblame.query import (
    BlameResult,
    diffBlame,
    fileBlame,
)
from hunkblame.replay import (
    blameHistory,
    replayHunks,
)
from hunkblame.segments import (
    BlameLine,
    BlameSegment,
    BlameSegments,
    BlameVector,
    SegmentCursor,
    flattenSegments,
    wipeSegments,
)
from hunkblame.settings import Prefs
