# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of HunkBlame, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

from .util import *

H1, H2, H3 = SCENARIO_HASHES


def testFileBlameAfterCreation():
    result = fileBlame(scenarioHistory(), H1, "test.txt")
    assert commitHashes(result.blameVector) == [H1, H1, H1]
    assert lineNumbers(result.blameVector) == [1, 2, 3]
    # First 2 lines get replaced by H2, the last one gets deleted by H3
    assert commitHashes(result.futureVector) == [H2, H2, H3]
    assert lineNumbers(result.futureVector) == [1, 2, 3]
    assert result.previousCommitHash == H1
    assert result.nextCommitHash == H3
    assert result.hunks == ()


def testDiffBlameOnReplacement():
    history = scenarioHistory()
    result = diffBlame(history, H2, "test.txt")

    # Before the commit: 3 lines from H1
    assert commitHashes(result.blameVector) == [H1, H1, H1]

    # After the commit: 2 new lines + 1 surviving line, all deleted by H3 later on
    assert commitHashes(result.futureVector) == [H3, H3, H3]

    assert result.hunks == (Hunk(1, 2, 1, 2),)
    assert result.previousCommitHash == H1
    assert result.nextCommitHash == H3

    # The state after the commit, seen from the point-in-time mode
    after = fileBlame(history, H2, "test.txt")
    assert commitHashes(after.blameVector) == [H2, H2, H1]
    assert lineNumbers(after.blameVector) == [1, 2, 3]
    assert after.previousCommitHash == H2
    assert after.nextCommitHash == NULL_HASH


def testDiffBlameOnDeletion():
    result = diffBlame(scenarioHistory(), H3, "test.txt")

    assert commitHashes(result.blameVector) == [H2, H2, H1]
    assert lineNumbers(result.blameVector) == [1, 2, 3]

    # No lines left after the deletion, so nothing to attribute
    assert all(line.commitHash == NULL_HASH for line in result.futureVector)
    assert result.futureVector == []

    assert result.hunks == (Hunk(1, 3, 0, 0),)
    assert result.previousCommitHash == H2
    assert result.nextCommitHash == NULL_HASH


def testDiffBlameOnCreation():
    result = diffBlame(scenarioHistory(), H1, "test.txt")
    assert result.blameVector == []
    assert commitHashes(result.futureVector) == [H2, H2, H3]
    assert result.previousCommitHash == NULL_HASH
    assert result.nextCommitHash == H2


def testFileBlameAfterDeletion():
    result = fileBlame(scenarioHistory(), H3, "test.txt")
    assert result.blameVector == []
    assert result.futureVector == []
    assert result.previousCommitHash == H3
    assert result.nextCommitHash == NULL_HASH


@pytest.mark.parametrize("commitHash, previousHash, nextHash", [
    (H1, H1, H3),
    (H2, H2, NULL_HASH),
    (H3, H3, NULL_HASH),
])
def testFileBlameNeighborsAroundCommitCount(commitHash, previousHash, nextHash):
    # "previous" is the file commit that set the state at commitHash
    result = fileBlame(scenarioHistory(), commitHash, "test.txt")
    assert (result.previousCommitHash, result.nextCommitHash) == (previousHash, nextHash)


def testFileBlameAtUnrelatedCommit():
    other = fakeHash("other")
    history = GitHistory.fromRecords([
        CommitRecord(H1, {"test.txt": (Hunk(0, 0, 1, 3),)}),
        CommitRecord(other, {"other.txt": (Hunk(0, 0, 1, 1),)}),
        CommitRecord(H2, {"test.txt": (Hunk(1, 2, 1, 2),)}),
    ])

    # The file's state at an unrelated commit is the one its last commit left behind
    result = fileBlame(history, other, "test.txt")
    assert commitHashes(result.blameVector) == [H1, H1, H1]
    assert commitHashes(result.futureVector) == [H2, H2, NULL_HASH]
    assert result.previousCommitHash == H1
    assert result.nextCommitHash == NULL_HASH

    # other.txt didn't exist yet at H1
    with pytest.raises(FileNotPresentError):
        fileBlame(history, H1, "other.txt")


def testErrors():
    history = scenarioHistory()

    with pytest.raises(PathNotFoundError) as excInfo:
        diffBlame(history, H1, "missing.txt")
    assert excInfo.value.path == "missing.txt"

    with pytest.raises(PathNotFoundError):
        fileBlame(history, H1, "missing.txt")

    with pytest.raises(CommitDoesNotTouchPathError):
        diffBlame(history, fakeHash("nope"), "test.txt")

    with pytest.raises(CommitNotFoundError) as excInfo:
        fileBlame(history, fakeHash("nope"), "test.txt")
    assert excInfo.value.commitHash == fakeHash("nope")

    # All errors share a base class
    with pytest.raises(BlameError):
        diffBlame(history, H1, "missing.txt")


def testDiffBlameOnCommitThatDidNotTouchPath():
    other = fakeHash("other")
    history = GitHistory.fromRecords([
        CommitRecord(H1, {"test.txt": (Hunk(0, 0, 1, 3),)}),
        CommitRecord(other, {"other.txt": (Hunk(0, 0, 1, 1),)}),
    ])

    with pytest.raises(CommitDoesNotTouchPathError):
        diffBlame(history, other, "test.txt")


def testHistoryOrderIsChecked():
    with pytest.raises(HistoryOrderError):
        GitHistory({"test.txt": [FileCommit(H2), FileCommit(H1)]}, [H1, H2])

    with pytest.raises(HistoryOrderError):
        GitHistory({"test.txt": [FileCommit(H3)]}, [H1, H2])

    history = GitHistory({"test.txt": [FileCommit(H1), FileCommit(H3)]}, [H1, H2, H3])
    assert "test.txt" in history
    assert len(history.fileHistory("test.txt")) == 2


def testHistoryIsReadOnly():
    history = scenarioHistory()
    with pytest.raises(TypeError):
        history.fileHistories["new.txt"] = ()
    assert isinstance(history.fileHistory("test.txt"), tuple)


def testResultToDict():
    result = diffBlame(scenarioHistory(), H2, "test.txt")
    d = result.toDict()
    assert d["blame"] == [[H1, 1], [H1, 2], [H1, 3]]
    assert d["hunks"] == [(1, 2, 1, 2)]
    assert d["previousCommit"] == H1
    assert d["nextCommit"] == H3
