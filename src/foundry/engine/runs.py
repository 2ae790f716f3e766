# src/foundry/engine/runs.py
"""In-memory run store.

Records the lifecycle, log lines and artifacts of each run. Persistence is
out of scope; anything implementing the same methods can replace it.

State machine:
    PENDING -> RUNNING -> COMPLETED | FAILED | CANCELLED
Terminal states accept no further transitions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from foundry.contracts.enums import LogLevel, RunStatus


class RunNotFoundError(KeyError):
    """Raised when a run id is unknown to the store."""


class InvalidRunTransitionError(ValueError):
    """Raised on a status change the state machine does not allow."""

    def __init__(self, run_id: str, current: RunStatus, target: RunStatus) -> None:
        self.run_id = run_id
        self.current = current
        self.target = target
        super().__init__(f"Run {run_id}: cannot move from {current} to {target}")


_ALLOWED: dict[RunStatus, frozenset[RunStatus]] = {
    RunStatus.PENDING: frozenset({RunStatus.RUNNING, RunStatus.FAILED, RunStatus.CANCELLED}),
    RunStatus.RUNNING: frozenset({RunStatus.COMPLETED, RunStatus.FAILED, RunStatus.CANCELLED}),
}


@dataclass(frozen=True, slots=True)
class LogEntry:
    level: LogLevel
    message: str
    node_id: str | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))


@dataclass(frozen=True, slots=True)
class Artifact:
    kind: str
    name: str
    content: Any


@dataclass
class RunRecord:
    run_id: str
    blueprint_id: str
    status: RunStatus = RunStatus.PENDING
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    started_at: datetime | None = None
    finished_at: datetime | None = None
    error: str | None = None
    logs: list[LogEntry] = field(default_factory=list)
    artifacts: list[Artifact] = field(default_factory=list)


class RunStore:
    """Run records keyed by run id.

    Not thread-safe; each run is driven by one coroutine and concurrent runs
    touch disjoint records.
    """

    def __init__(self) -> None:
        self._runs: dict[str, RunRecord] = {}

    def create(self, run_id: str, blueprint_id: str) -> RunRecord:
        if run_id in self._runs:
            raise ValueError(f"Run {run_id} already exists")
        record = RunRecord(run_id=run_id, blueprint_id=blueprint_id)
        self._runs[run_id] = record
        return record

    def get(self, run_id: str) -> RunRecord:
        try:
            return self._runs[run_id]
        except KeyError:
            raise RunNotFoundError(run_id) from None

    def list(self) -> list[RunRecord]:
        return sorted(self._runs.values(), key=lambda r: r.created_at)

    def _transition(self, run_id: str, target: RunStatus) -> RunRecord:
        record = self.get(run_id)
        if target not in _ALLOWED.get(record.status, frozenset()):
            raise InvalidRunTransitionError(run_id, record.status, target)
        record.status = target
        if target is RunStatus.RUNNING:
            record.started_at = datetime.now(UTC)
        else:
            record.finished_at = datetime.now(UTC)
        return record

    def start(self, run_id: str) -> RunRecord:
        return self._transition(run_id, RunStatus.RUNNING)

    def complete(self, run_id: str) -> RunRecord:
        return self._transition(run_id, RunStatus.COMPLETED)

    def fail(self, run_id: str, error: str) -> RunRecord:
        record = self._transition(run_id, RunStatus.FAILED)
        record.error = error
        record.logs.append(LogEntry(level=LogLevel.ERROR, message=error))
        return record

    def cancel(self, run_id: str, reason: str | None = None) -> RunRecord:
        record = self._transition(run_id, RunStatus.CANCELLED)
        record.error = reason
        return record

    def add_log(self, run_id: str, entry: LogEntry) -> None:
        self.get(run_id).logs.append(entry)

    def add_artifact(self, run_id: str, artifact: Artifact) -> None:
        self.get(run_id).artifacts.append(artifact)
