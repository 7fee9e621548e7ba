# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of HunkBlame, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

import dataclasses
import logging

from hunkblame.appconsts import NULL_HASH
from hunkblame.errors import CommitDoesNotTouchPathError, CommitNotFoundError, FileNotPresentError
from hunkblame.history import FileHistory, GitHistory, Hunk, indexOfCommit
from hunkblame.replay import blameHistory
from hunkblame.segments import BlameVector
from hunkblame.settings import Prefs

_logger = logging.getLogger(__name__)


@dataclasses.dataclass
class BlameResult:
    blameVector: BlameVector
    futureVector: BlameVector
    previousCommitHash: str = NULL_HASH
    nextCommitHash: str = NULL_HASH
    hunks: tuple[Hunk, ...] = ()

    def toDict(self) -> dict:
        return {
            "blame": [[line.commitHash, line.lineNumber] for line in self.blameVector],
            "future": [[line.commitHash, line.lineNumber] for line in self.futureVector],
            "previousCommit": self.previousCommitHash,
            "nextCommit": self.nextCommitHash,
            "hunks": [dataclasses.astuple(hunk) for hunk in self.hunks],
        }


def _neighbors(fileHistory: FileHistory, i: int) -> tuple[str, str]:
    previousHash = fileHistory[i - 1].hash if i - 1 >= 0 else NULL_HASH
    nextHash = fileHistory[i + 1].hash if i + 1 < len(fileHistory) else NULL_HASH
    return previousHash, nextHash


def diffBlame(history: GitHistory, commitHash: str, path: str, prefs: Prefs | None = None) -> BlameResult:
    """
    Annotate both sides of the diff that a commit applied to a file.

    The blame vector describes the file just before the commit (who wrote the
    lines that the commit removes?). The future vector describes the file just
    after the commit (who will next modify or delete the lines that it adds?).
    """

    fileHistory = history.fileHistory(path)

    try:
        i = indexOfCommit(fileHistory, commitHash)
    except ValueError:
        raise CommitDoesNotTouchPathError(commitHash, path) from None

    blameVector, futureVector = blameHistory(fileHistory, i, i + 1, prefs)
    previousHash, nextHash = _neighbors(fileHistory, i)

    return BlameResult(
        blameVector=blameVector,
        futureVector=futureVector,
        previousCommitHash=previousHash,
        nextCommitHash=nextHash,
        hunks=fileHistory[i].hunks)


def fileBlame(history: GitHistory, commitHash: str, path: str, prefs: Prefs | None = None) -> BlameResult:
    """
    Annotate a file as it stands right after an arbitrary commit, which need
    not have touched the file itself.
    """

    fileHistory = history.fileHistory(path)

    # Count the file's commits that occur at or before commitHash
    # (GitHistory guarantees that they appear in the same order)
    count = 0
    for h in history.commitHashes:
        if count < len(fileHistory) and fileHistory[count].hash == h:
            count += 1
        if h == commitHash:
            break
    else:
        raise CommitNotFoundError(commitHash)

    if count == 0:
        raise FileNotPresentError(commitHash, path)

    blameVector, futureVector = blameHistory(fileHistory, count, count, prefs)

    # Same anchor as the blame passes: "previous" is the commit that set the state
    previousHash, nextHash = _neighbors(fileHistory, count)

    _logger.debug(f"{path} at {commitHash}: state set by {fileHistory[count - 1].hash}")

    return BlameResult(
        blameVector=blameVector,
        futureVector=futureVector,
        previousCommitHash=previousHash,
        nextCommitHash=nextHash)
