# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of HunkBlame, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

"""
Ingest a repository's history as hunk coordinates.

Two sources are supported:
- the text output of `git log` invoked with GIT_LOG_ARGS, either complete or
  "stripped" of diff bodies (see stripGitLog);
- a repository opened with pygit2, walked along its first-parent chain.

Both produce CommitRecords that GitHistory.fromRecords assembles.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Generator, Iterable, Iterator

import pygit2
from pygit2.enums import DeltaStatus, SortMode

from hunkblame.appconsts import APP_TESTMODE
from hunkblame.errors import GitLogParseError
from hunkblame.history import CommitRecord, GitHistory, Hunk
from hunkblame.toolbox.benchmark import Benchmark

_logger = logging.getLogger(__name__)

LOAD_PROGRESS_INTERVAL = 200 if not APP_TESTMODE else 1

DEFAULT_HASH_LENGTH = 16

GIT_LOG_ARGS = (
    "log",
    "-U0",
    "--format=commit %H",
    "--no-prefix",
    "--no-renames",
    "--reverse",
    # Avoid invoking custom diff commands or conversions
    "--no-ext-diff",
    "--no-textconv",
    # Treat a merge as a simple diff against its first parent
    "--first-parent",
    "-m",
)
""" Arguments to `git` that produce a log that parseGitLog understands. """

# A dash after the closing "@@" means that stripGitLog removed the hunk's body.
_hunkHeaderPattern = re.compile(r"^@@ -(\d+)(?:,(\d*))? \+(\d+)(?:,(\d*))? @@(-?)")


def _dummyProgressCallback(n: int):
    pass


def _parseHunkHeader(lineNumber: int, line: str) -> tuple[Hunk, bool]:
    match = _hunkHeaderPattern.match(line)
    if match is None:
        raise GitLogParseError(lineNumber, line, "malformed hunk header")

    oldStart, oldLength, newStart, newLength, dash = match.groups()
    hunk = Hunk(
        oldStart=int(oldStart),
        oldLength=int(oldLength) if oldLength else 1,
        newStart=int(newStart),
        newLength=int(newLength) if newLength else 1)
    return hunk, bool(dash)


def _skipHunkBody(lines: Iterator[tuple[int, str]], hunk: Hunk):
    # "\ No newline at end of file" markers don't count towards the hunk's length
    remaining = hunk.oldLength + hunk.newLength
    while remaining > 0:
        try:
            _lineNumber, line = next(lines)
        except StopIteration:
            return
        if not line.startswith("\\"):
            remaining -= 1


def parseGitLog(lines: Iterable[str], hashLength: int = DEFAULT_HASH_LENGTH) -> Generator[CommitRecord, None, None]:
    """
    Parse the output of `git <GIT_LOG_ARGS>` (or its stripped version) into one
    CommitRecord per commit. Commit hashes are truncated to hashLength.
    """

    commitHash = None
    files: dict[str, list[Hunk]] = {}
    currentHunks: list[Hunk] | None = None

    numberedLines = enumerate((line.rstrip("\n") for line in lines), 1)

    for lineNumber, line in numberedLines:
        if line.startswith("commit "):
            if commitHash is not None:
                yield CommitRecord(commitHash, {path: tuple(hunks) for path, hunks in files.items()})
            commitHash = line[7:7 + hashLength]
            files = {}
            currentHunks = None

        elif line.startswith("--- "):
            if commitHash is None:
                raise GitLogParseError(lineNumber, line, "file header outside of a commit")

            path = line[4:]
            try:
                nextLineNumber, nextLine = next(numberedLines)
            except StopIteration:
                raise GitLogParseError(lineNumber, line, "truncated file header") from None
            if not nextLine.startswith("+++ "):
                raise GitLogParseError(nextLineNumber, nextLine, "expected '+++' line")

            # Use the new path if the file was created in this commit
            if path == "/dev/null":
                path = nextLine[4:]

            currentHunks = files.setdefault(path, [])

        elif line.startswith("@@ "):
            if currentHunks is None:
                raise GitLogParseError(lineNumber, line, "hunk outside of a file")

            hunk, isStripped = _parseHunkHeader(lineNumber, line)
            currentHunks.append(hunk)

            if not isStripped:
                _skipHunkBody(numberedLines, hunk)

    if commitHash is not None:
        yield CommitRecord(commitHash, {path: tuple(hunks) for path, hunks in files.items()})


def stripGitLog(lines: Iterable[str]) -> Generator[str, None, None]:
    """
    Abbreviate a log from `git <GIT_LOG_ARGS>` by removing the "+" and "-"
    lines that carry the contents of each diff. The closing "@@" of every hunk
    header gets a dash suffix ("@@-") so that parseGitLog knows not to expect
    a body.
    """

    numberedLines = enumerate((line.rstrip("\n") for line in lines), 1)

    for lineNumber, line in numberedLines:
        if line.startswith(("commit ", "--- ", "+++ ")):
            yield line + "\n"
        elif line.startswith("@@ "):
            hunk, isStripped = _parseHunkHeader(lineNumber, line)
            rest = line[3:]
            ranges = rest[:rest.index(" @@")]
            yield f"@@ {ranges} @@-\n"
            if not isStripped:
                _skipHunkBody(numberedLines, hunk)


def iterRepoCommits(
        repo: pygit2.Repository,
        topCommit: str = "HEAD",
        hashLength: int = DEFAULT_HASH_LENGTH,
        progressCallback: Callable[[int], None] = _dummyProgressCallback,
) -> Generator[CommitRecord, None, None]:
    """
    Walk the first-parent chain leading to topCommit, oldest commit first, and
    diff each commit against its first parent with zero context lines.

    Renames are not detected (they appear as a deletion plus an addition),
    and binary files are skipped.
    """

    if topCommit == "HEAD" and repo.head_is_unborn:
        return

    tip = repo.revparse_single(topCommit).peel(pygit2.Commit)

    walker = repo.walk(tip.id, SortMode.TOPOLOGICAL | SortMode.REVERSE)
    walker.simplify_first_parent()

    for i, commit in enumerate(walker):
        if i % LOAD_PROGRESS_INTERVAL == 0:
            progressCallback(i)

        if commit.parents:
            diff = commit.parents[0].tree.diff_to_tree(commit.tree, context_lines=0)
        else:
            # Initial commit: diff from the empty tree
            diff = commit.tree.diff_to_tree(context_lines=0, swap=True)

        files = {}
        for patch in diff:
            # Same as vanilla git: no header for binary files or empty files
            if patch is None or patch.delta.is_binary or not patch.hunks:
                continue
            delta = patch.delta
            path = delta.new_file.path if delta.status == DeltaStatus.ADDED else delta.old_file.path
            files[path] = tuple(Hunk(h.old_start, h.old_lines, h.new_start, h.new_lines) for h in patch.hunks)

        yield CommitRecord(str(commit.id)[:hashLength], files)


def loadHistoryFromRepo(
        repoPath: str,
        topCommit: str = "HEAD",
        hashLength: int = DEFAULT_HASH_LENGTH,
        progressCallback: Callable[[int], None] = _dummyProgressCallback,
) -> GitHistory:
    repo = pygit2.Repository(repoPath)
    try:
        with Benchmark("Load history", "commits") as bench:
            records = []
            for record in iterRepoCommits(repo, topCommit, hashLength, progressCallback):
                records.append(record)
                bench.units += 1
            history = GitHistory.fromRecords(records)
    finally:
        repo.free()

    _logger.info(f"Loaded {len(history.commitHashes)} commits from {repoPath}")
    return history


def loadHistoryFromLog(lines: Iterable[str], hashLength: int = DEFAULT_HASH_LENGTH) -> GitHistory:
    with Benchmark("Parse log", "commits") as bench:
        records = []
        for record in parseGitLog(lines, hashLength):
            records.append(record)
            bench.units += 1
        return GitHistory.fromRecords(records)
