# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of HunkBlame, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

"""
Read-only model of a repository's history, reduced to the hunk coordinates
that each commit applied to each file.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterable, Mapping
from types import MappingProxyType

from hunkblame.errors import HistoryOrderError, PathNotFoundError

_logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class Hunk:
    """
    Contiguous range substitution from a unified diff (1-based).

    A zero length denotes a pure insertion (newStart is where the new lines
    go) or a pure deletion (oldStart is where the old lines were). Following
    git's convention, the start of a zero-length side is the line *before*
    the boundary.
    """

    oldStart: int
    oldLength: int
    newStart: int
    newLength: int

    def __str__(self):
        return f"@@ -{self.oldStart},{self.oldLength} +{self.newStart},{self.newLength} @@"

    def swapped(self) -> Hunk:
        """ The same hunk, applied backwards in time. """
        return Hunk(self.newStart, self.newLength, self.oldStart, self.oldLength)


@dataclasses.dataclass(frozen=True)
class FileCommit:
    hash: str
    hunks: tuple[Hunk, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "hunks", tuple(self.hunks))

    @property
    def linesRemoved(self) -> int:
        return sum(h.oldLength for h in self.hunks)

    @property
    def linesAdded(self) -> int:
        return sum(h.newLength for h in self.hunks)


FileHistory = tuple[FileCommit, ...]
""" Commits that touched a file, oldest first. """


def indexOfCommit(fileHistory: FileHistory, commitHash: str) -> int:
    for i, fileCommit in enumerate(fileHistory):
        if fileCommit.hash == commitHash:
            return i
    raise ValueError("commit is not in file history")


@dataclasses.dataclass(frozen=True)
class CommitRecord:
    """ One commit as produced by ingestion: the hunks it applied to each path. """

    hash: str
    files: Mapping[str, tuple[Hunk, ...]] = dataclasses.field(default_factory=dict)


@dataclasses.dataclass(frozen=True)
class GitHistory:
    fileHistories: Mapping[str, FileHistory]
    commitHashes: tuple[str, ...]

    def __post_init__(self):
        fileHistories = {path: tuple(commits) for path, commits in self.fileHistories.items()}
        object.__setattr__(self, "fileHistories", MappingProxyType(fileHistories))
        object.__setattr__(self, "commitHashes", tuple(self.commitHashes))
        self.validate()

    @classmethod
    def fromRecords(cls, records: Iterable[CommitRecord]) -> GitHistory:
        commitHashes = []
        fileHistories: dict[str, list[FileCommit]] = {}

        for record in records:
            commitHashes.append(record.hash)
            for path, hunks in record.files.items():
                fileHistories.setdefault(path, []).append(FileCommit(record.hash, hunks))

        _logger.debug(f"History: {len(commitHashes)} commits, {len(fileHistories)} paths")
        return cls(fileHistories, commitHashes)

    def validate(self):
        """
        Make sure that every file history is a subsequence of the global commit
        sequence, in the same relative order. Queries in point-in-time mode
        rely on this to locate a file's state at an arbitrary commit.
        """
        positions = {}
        for i, commitHash in enumerate(self.commitHashes):
            positions.setdefault(commitHash, i)

        for path, fileHistory in self.fileHistories.items():
            previous = -1
            for fileCommit in fileHistory:
                position = positions.get(fileCommit.hash, -1)
                if position <= previous:
                    raise HistoryOrderError(path, fileCommit.hash)
                previous = position

    def fileHistory(self, path: str) -> FileHistory:
        try:
            return self.fileHistories[path]
        except KeyError:
            raise PathNotFoundError(path) from None

    def __contains__(self, path: str) -> bool:
        return path in self.fileHistories
