# tests/engine/test_runs.py
"""Tests for the in-memory run store."""

import pytest

from foundry.contracts.enums import LogLevel, RunStatus


class TestRunLifecycle:
    def test_create_is_pending(self) -> None:
        from foundry.engine.runs import RunStore

        store = RunStore()
        record = store.create("run-1", "bp-1")

        assert record.status is RunStatus.PENDING
        assert record.blueprint_id == "bp-1"
        assert store.get("run-1") is record

    def test_happy_path(self) -> None:
        from foundry.engine.runs import RunStore

        store = RunStore()
        store.create("run-1", "bp-1")
        store.start("run-1")
        record = store.complete("run-1")

        assert record.status is RunStatus.COMPLETED
        assert record.started_at is not None
        assert record.finished_at is not None

    def test_fail_records_error_and_log(self) -> None:
        from foundry.engine.runs import RunStore

        store = RunStore()
        store.create("run-1", "bp-1")
        store.start("run-1")
        record = store.fail("run-1", "Node x validation failed")

        assert record.status is RunStatus.FAILED
        assert record.error == "Node x validation failed"
        assert record.logs[-1].level is LogLevel.ERROR

    def test_cancel_from_running(self) -> None:
        from foundry.engine.runs import RunStore

        store = RunStore()
        store.create("run-1", "bp-1")
        store.start("run-1")

        assert store.cancel("run-1", "user request").status is RunStatus.CANCELLED

    @pytest.mark.parametrize("terminal", ["complete", "fail", "cancel"])
    def test_terminal_states_reject_transitions(self, terminal: str) -> None:
        from foundry.engine.runs import InvalidRunTransitionError, RunStore

        store = RunStore()
        store.create("run-1", "bp-1")
        store.start("run-1")
        if terminal == "fail":
            store.fail("run-1", "x")
        else:
            getattr(store, terminal)("run-1")

        with pytest.raises(InvalidRunTransitionError):
            store.start("run-1")

    def test_cannot_complete_pending_run(self) -> None:
        from foundry.engine.runs import InvalidRunTransitionError, RunStore

        store = RunStore()
        store.create("run-1", "bp-1")

        with pytest.raises(InvalidRunTransitionError, match="pending"):
            store.complete("run-1")

    def test_duplicate_run_id(self) -> None:
        from foundry.engine.runs import RunStore

        store = RunStore()
        store.create("run-1", "bp-1")

        with pytest.raises(ValueError, match="already exists"):
            store.create("run-1", "bp-2")

    def test_unknown_run(self) -> None:
        from foundry.engine.runs import RunNotFoundError, RunStore

        with pytest.raises(RunNotFoundError):
            RunStore().get("missing")


class TestLogsAndArtifacts:
    def test_logs_and_artifacts_append(self) -> None:
        from foundry.engine.runs import Artifact, LogEntry, RunStore

        store = RunStore()
        store.create("run-1", "bp-1")
        store.add_log("run-1", LogEntry(level=LogLevel.INFO, message="hello", node_id="n1"))
        store.add_artifact("run-1", Artifact(kind="manifest", name="manifest.json", content={"files": []}))

        record = store.get("run-1")
        assert [entry.message for entry in record.logs] == ["hello"]
        assert record.logs[0].node_id == "n1"
        assert record.artifacts[0].kind == "manifest"

    def test_list_in_creation_order(self) -> None:
        from foundry.engine.runs import RunStore

        store = RunStore()
        store.create("a", "bp")
        store.create("b", "bp")

        assert [r.run_id for r in store.list()] == ["a", "b"]
