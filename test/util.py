# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of HunkBlame, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import hashlib
import os
import tempfile
import textwrap

import pygit2
import pytest

from hunkblame import *

TEST_SIGNATURE = pygit2.Signature("Test Person", "toto@example.com", 1672600000, 0)

# The three commits recorded in SCENARIO_LOG, truncated to 16 characters.
SCENARIO_HASHES = ["b9a26a4383eb51c1", "b0539826eadc3feb", "42838bca4ba13c3f"]

# `git log` output for a file that is created with 3 lines,
# then has its first 2 lines replaced, then gets deleted.
SCENARIO_LOG = textwrap.dedent("""\
    commit b9a26a4383eb51c1ac1ab5b1bd1be1b8bc1d5c5f
    diff --git test.txt test.txt
    new file mode 100644
    index 0000000..de98044
    --- /dev/null
    +++ test.txt
    @@ -0,0 +1,3 @@
    +Hello
    +World
    +!
    commit b0539826eadc3feb1bbf1e5e7c6ea1a1c2bd2f10
    diff --git test.txt test.txt
    index de98044..0a4f1e5 100644
    --- test.txt
    +++ test.txt
    @@ -1,2 +1,2 @@
    -Hello
    -World
    +Bonjour
    +le monde
    commit 42838bca4ba13c3fa5f8bb59a1f3ee4b1c8b0d3e
    diff --git test.txt test.txt
    deleted file mode 100644
    index 0a4f1e5..0000000
    --- test.txt
    +++ /dev/null
    @@ -1,3 +0,0 @@
    -Bonjour
    -le monde
    -!
    """)


def fakeHash(seed) -> str:
    return hashlib.sha1(str(seed).encode()).hexdigest()[:16]


def scenarioHistory() -> GitHistory:
    return GitHistory.fromRecords(parseGitLog(SCENARIO_LOG.splitlines(keepends=True)))


def writeFile(path, text):
    # Prevent accidental littering of current working directory
    assert os.path.isabs(path), "pass me an absolute path"

    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "wb") as f:
        f.write(text.encode("utf-8"))


def commitFiles(
        repo: pygit2.Repository,
        files: dict[str, str | bytes | None],
        parents: list[pygit2.Oid] | None = None,
        updateRef: str | None = "HEAD",
        message: str = "",
) -> pygit2.Oid:
    """
    Commit the given file contents (None deletes the file).
    By default, the commit goes on top of HEAD.
    """

    workdir = repo.workdir

    for relPath, contents in files.items():
        fullPath = os.path.join(workdir, relPath)
        if contents is None:
            os.unlink(fullPath)
            repo.index.remove(relPath)
            continue
        if isinstance(contents, bytes):
            with open(fullPath, "wb") as f:
                f.write(contents)
        else:
            writeFile(fullPath, contents)
        repo.index.add(relPath)

    repo.index.write()
    tree = repo.index.write_tree()

    if parents is None:
        parents = [] if repo.head_is_unborn else [repo.head.target]

    message = message or f"Change {', '.join(files)}"
    return repo.create_commit(updateRef, TEST_SIGNATURE, TEST_SIGNATURE, message, tree, parents)


def makeRepo(
        tempDir: tempfile.TemporaryDirectory | str,
        revisions: list[dict[str, str | bytes | None]],
        name: str = "TestRepo",
) -> tuple[str, list[str]]:
    """
    Create a repository with a linear history, one commit per revision.
    Return the repository's path and the full hashes of its commits.
    """

    tempDirPath = tempDir if isinstance(tempDir, str) else tempDir.name
    path = os.path.join(tempDirPath, name)
    assert not os.path.exists(path)

    repo = pygit2.init_repository(path, initial_head="main")
    commitIds = [str(commitFiles(repo, revision)) for revision in revisions]
    repo.free()

    return path, commitIds


def commitHashes(vector: BlameVector) -> list[str]:
    return [line.commitHash for line in vector]


def lineNumbers(vector: BlameVector) -> list[int]:
    return [line.lineNumber for line in vector]
