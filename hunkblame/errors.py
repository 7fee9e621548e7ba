# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of HunkBlame, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

class BlameError(Exception):
    """ Base class for errors that terminate a blame query or an ingestion. """


class PathNotFoundError(BlameError, LookupError):
    def __init__(self, path: str):
        super().__init__(f"no such file: {path}")
        self.path = path


class CommitNotFoundError(BlameError, LookupError):
    def __init__(self, commitHash: str):
        super().__init__(f"no such commit: {commitHash}")
        self.commitHash = commitHash


class CommitDoesNotTouchPathError(BlameError):
    def __init__(self, commitHash: str, path: str):
        super().__init__(f"file {path} is never touched by commit {commitHash}")
        self.commitHash = commitHash
        self.path = path


class FileNotPresentError(BlameError):
    def __init__(self, commitHash: str, path: str):
        super().__init__(f"file {path} does not exist at commit {commitHash}")
        self.commitHash = commitHash
        self.path = path


class ResourceLimitError(BlameError):
    def __init__(self, what: str, limit: int):
        super().__init__(f"too many {what} (limit: {limit:,d})")
        self.what = what
        self.limit = limit


class HistoryOrderError(BlameError, ValueError):
    """
    The commits in a file's history don't appear in the same order
    in the repository's global commit sequence.
    """

    def __init__(self, path: str, commitHash: str):
        super().__init__(f"history of {path}: commit {commitHash} is missing or out of order in the commit sequence")
        self.path = path
        self.commitHash = commitHash


class GitLogParseError(BlameError, ValueError):
    def __init__(self, lineNumber: int, line: str, reason: str):
        super().__init__(f"git log line {lineNumber}: {reason}: {line!r}")
        self.lineNumber = lineNumber
        self.line = line
        self.reason = reason


class HunkMismatchError(BlameError, ValueError):
    """
    A hunk doesn't fit the file it applies to: it starts before the end of the
    previous hunk, or reaches past the last line.
    """

    def __init__(self, commitHash: str, hunk, lineCount: int):
        super().__init__(f"commit {commitHash}: hunk {hunk} doesn't fit a file of {lineCount} lines")
        self.commitHash = commitHash
        self.hunk = hunk
        self.lineCount = lineCount
