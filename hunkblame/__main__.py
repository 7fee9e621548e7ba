# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of HunkBlame, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from __future__ import annotations

import json
import logging
import sys
from argparse import ArgumentParser, Namespace

import pygit2

from hunkblame.appconsts import APP_DISPLAY_NAME, APP_VERSION, NULL_HASH
from hunkblame.errors import BlameError, CommitNotFoundError
from hunkblame.gitlog import loadHistoryFromLog, loadHistoryFromRepo, stripGitLog
from hunkblame.history import GitHistory
from hunkblame.query import BlameResult, diffBlame, fileBlame
from hunkblame.segments import BlameVector
from hunkblame.settings import LoggingLevel, Prefs
from hunkblame.toolbox.benchmark import Benchmark

_logger = logging.getLogger(__name__)


def makeParser() -> ArgumentParser:
    parser = ArgumentParser(prog="hunkblame", description=f"{APP_DISPLAY_NAME} line provenance tool")
    parser.add_argument("--version", action="version", version=f"{APP_DISPLAY_NAME} {APP_VERSION}")
    parser.add_argument("--prefs", default="", help="JSON prefs file")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="More logging (repeat for debug output)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    blameParser = subparsers.add_parser("blame", help="Annotate a file as it stands after a commit")
    diffParser = subparsers.add_parser("diff", help="Annotate both sides of a commit's diff to a file")

    for sub in blameParser, diffParser:
        sub.add_argument("path", help="File path, relative to the repository root")
        sub.add_argument("-c", "--commit", default="", required=sub is diffParser,
                         help="Commit hash (as long as the 'hashLength' pref); defaults to the last commit")
        source = sub.add_mutually_exclusive_group()
        source.add_argument("-C", "--repo", default=".", help="Repository to read history from")
        source.add_argument("--log", default="", help="Read history from a git log file instead ('-' for stdin)")
        sub.add_argument("--json", action="store_true", help="Print the result as JSON")
        sub.add_argument("-b", "--benchmark", action="store_true", help="Report timings")

    subparsers.add_parser("strip-log", help="Remove diff bodies from a git log (stdin to stdout)")

    return parser


def setUpLogging(prefs: Prefs, args: Namespace):
    level = prefs.loggingLevel
    if args.verbose >= 2:
        level = LoggingLevel.Debug
    elif args.verbose == 1:
        level = min(level, LoggingLevel.Info)
    if getattr(args, "benchmark", False):
        level = LoggingLevel.Benchmark

    logging.basicConfig(
        stream=sys.stderr,
        level=level,
        format='%(levelname).1s %(asctime)s %(filename)-16s | %(message)s',
        datefmt="%H:%M:%S")
    logging.captureWarnings(True)


def loadHistory(args: Namespace, prefs: Prefs) -> GitHistory:
    if args.log == "-":
        return loadHistoryFromLog(sys.stdin, prefs.hashLength)
    elif args.log:
        with open(args.log, encoding="utf-8", errors="replace") as f:
            return loadHistoryFromLog(f, prefs.hashLength)
    else:
        return loadHistoryFromRepo(args.repo, hashLength=prefs.hashLength)


def formatVector(vector: BlameVector, title: str) -> str:
    text = f"{title}\n"
    for i, line in enumerate(vector, 1):
        commitHash = line.commitHash or "-"
        text += f"{i:6} {commitHash:16} {line.lineNumber:6}\n"
    return text


def formatResult(result: BlameResult, isDiff: bool) -> str:
    text = ""
    if result.previousCommitHash != NULL_HASH:
        text += f"previous: {result.previousCommitHash}\n"
    if result.nextCommitHash != NULL_HASH:
        text += f"next: {result.nextCommitHash}\n"

    if not isDiff:
        text += formatVector(result.blameVector, "line   commit           origin")
        text += formatVector(result.futureVector, "line   next change      line")
        return text

    for hunk in result.hunks:
        text += f"{hunk}\n"
    text += formatVector(result.blameVector, "--- before (line, commit, origin)")
    text += formatVector(result.futureVector, "+++ after (line, next change, line)")
    return text


def blameCommand(args: Namespace, prefs: Prefs) -> int:
    with Benchmark("Load"):
        history = loadHistory(args, prefs)

    commitHash = args.commit
    if not commitHash:
        try:
            commitHash = history.commitHashes[-1]
        except IndexError:
            raise CommitNotFoundError("HEAD") from None

    isDiff = args.command == "diff"
    query = diffBlame if isDiff else fileBlame

    with Benchmark("Blame"):
        result = query(history, commitHash, args.path, prefs)

    if args.json:
        print(json.dumps(result.toDict(), indent=1))
    else:
        print(formatResult(result, isDiff), end="")
    return 0


def stripLogCommand() -> int:
    sys.stdout.writelines(stripGitLog(sys.stdin))
    return 0


def main(argv: list[str] | None = None) -> int:
    args = makeParser().parse_args(argv)

    try:
        prefs = Prefs.load(args.prefs)
    except (OSError, ValueError, TypeError) as exc:
        print(f"{APP_DISPLAY_NAME}: can't load prefs: {exc}", file=sys.stderr)
        return 1

    setUpLogging(prefs, args)

    try:
        if args.command == "strip-log":
            return stripLogCommand()
        return blameCommand(args, prefs)
    except (BlameError, pygit2.GitError, OSError) as exc:
        _logger.debug("Query failed", exc_info=True)
        print(f"{APP_DISPLAY_NAME}: {exc}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
