# Tests for reposync.sync.reconcile
# Replay fold and the remote-wins conflict policy

from unittest.mock import MagicMock

import pytest

from reposync.config.identity import CommitIdentity
from reposync.errors import ConflictResolutionError
from reposync.git.operations import Side
from reposync.sync.divergence import DivergenceReport
from reposync.sync.reconcile import (
    ReplayPosition,
    ReplayStep,
    reconcile,
    replay_commit,
    resolve_conflicts,
)

IDENTITY = CommitIdentity(name="webdav", email="webdav@host")


def make_repo(local_commits: list[str]) -> MagicMock:
    repo = MagicMock()
    repo.begin_replay.return_value = list(local_commits)
    repo.apply_commit.return_value = True
    repo.conflicted_paths.return_value = []
    repo.next_conflict.return_value = None
    repo.commit_replayed.side_effect = lambda commit, identity: f"new-{commit}"
    return repo


class TestReplayPosition:
    """Tests for the fold value."""

    def test_advance_is_pure(self):
        start = ReplayPosition(tip="upstream")
        step = ReplayStep(original="c1", replayed="n1")

        moved = start.advance(step)

        assert start.tip == "upstream"
        assert start.steps == ()
        assert moved.tip == "n1"
        assert moved.steps == (step,)


class TestResolveConflicts:
    """Tests for the remote-wins policy pass."""

    def test_every_path_takes_remote(self):
        repo = MagicMock()
        repo.next_conflict.side_effect = ["a.txt", "b.txt", None]

        resolved = resolve_conflicts(repo, "c1")

        assert resolved == ("a.txt", "b.txt")
        repo.resolve.assert_any_call("a.txt", Side.REMOTE)
        repo.resolve.assert_any_call("b.txt", Side.REMOTE)

    def test_stuck_path_raises(self):
        repo = MagicMock()
        repo.next_conflict.return_value = "a.txt"
        repo.conflicted_paths.return_value = ["a.txt"]

        with pytest.raises(ConflictResolutionError) as exc_info:
            resolve_conflicts(repo, "c1" * 20)

        assert exc_info.value.paths == ["a.txt"]
        assert exc_info.value.exit_code == 6
        assert repo.resolve.call_count == 1


class TestReplayCommit:
    """Tests for a single replay step."""

    def test_clean_apply(self):
        repo = make_repo([])

        position = replay_commit(repo, ReplayPosition(tip="up"), "c1", IDENTITY)

        assert position.tip == "new-c1"
        assert position.steps == (ReplayStep(original="c1", replayed="new-c1"),)
        repo.resolve.assert_not_called()

    def test_conflicted_apply(self):
        repo = make_repo([])
        repo.apply_commit.return_value = False
        repo.next_conflict.side_effect = ["test-file.txt", None]

        position = replay_commit(repo, ReplayPosition(tip="up"), "c1", IDENTITY)

        assert position.steps[0].resolved_paths == ("test-file.txt",)
        repo.resolve.assert_called_once_with("test-file.txt", Side.REMOTE)

    def test_remaining_conflicts_abort_without_cleanup(self):
        repo = make_repo([])
        repo.apply_commit.return_value = False
        repo.next_conflict.side_effect = ["a.txt", None]
        repo.conflicted_paths.return_value = ["b.txt"]

        with pytest.raises(ConflictResolutionError, match="b.txt"):
            replay_commit(repo, ReplayPosition(tip="up"), "c1", IDENTITY)

        repo.commit_replayed.assert_not_called()
        repo.finish_replay.assert_not_called()


class TestReconcile:
    """Tests for the full replay."""

    def test_replays_in_order_and_moves_branch(self):
        repo = make_repo(["c1", "c2", "c3"])
        report = DivergenceReport(ahead=3, behind=2, local_tip="local", remote_tip="up")

        result = reconcile(repo, "main", report, IDENTITY)

        repo.begin_replay.assert_called_once_with("local", "up")
        assert [call.args[0] for call in repo.apply_commit.call_args_list] == ["c1", "c2", "c3"]
        repo.finish_replay.assert_called_once_with("main", "new-c3")
        assert result.tip == "new-c3"
        assert result.upstream == "up"
        assert result.replayed_count == 3

    def test_no_local_commits_fast_forwards(self):
        repo = make_repo([])
        report = DivergenceReport(ahead=0, behind=1, local_tip="local", remote_tip="up")

        result = reconcile(repo, "main", report, IDENTITY)

        repo.finish_replay.assert_called_once_with("main", "up")
        assert result.tip == "up"
        assert result.steps == []

    def test_failure_stops_replay(self):
        repo = make_repo(["c1", "c2"])
        repo.apply_commit.side_effect = [True, False]
        repo.next_conflict.side_effect = ["x.txt", "x.txt"]
        repo.conflicted_paths.side_effect = [[], ["x.txt"]]
        report = DivergenceReport(ahead=2, behind=1, local_tip="local", remote_tip="up")

        with pytest.raises(ConflictResolutionError) as exc_info:
            reconcile(repo, "main", report, IDENTITY)

        assert exc_info.value.commit == "c2"
        repo.finish_replay.assert_not_called()
