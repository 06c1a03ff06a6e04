from __future__ import annotations
"""Result lattice: task verdicts, hook results and their join."""

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, TypeVar, Union

from .entities import TaskStatus


class TaskResult(IntEnum):
    """Verdict of a single task invocation, ordered by severity."""

    ACCEPTED = 0
    MODIFIED = 1
    REJECTED = 2

    def raise_to(self, other: TaskResult) -> TaskResult:
        return raise_to(self, other)


class HookResult(IntEnum):
    """Overall outcome of a hooks run.

    The value doubles as the detailed process exit code:

    Code                   | Exit | Success
    -----------------------|------|--------
    `CLEAN`                | 0    | yes
    `HAS_CHANGES`          | 1    | yes
    `HAS_UNSTAGED_CHANGES` | 2    | no
    `REJECTED`             | 3    | no
    """

    CLEAN = 0
    HAS_CHANGES = 1
    HAS_UNSTAGED_CHANGES = 2
    REJECTED = 3

    @property
    def exit_code(self) -> int:
        return int(self)

    @property
    def is_success(self) -> bool:
        return self <= HookResult.HAS_CHANGES

    def raise_to(self, other: HookResult) -> HookResult:
        return raise_to(self, other)

    def to_status(self) -> TaskStatus:
        return _STATUS_BY_RESULT[self]


_STATUS_BY_RESULT = {
    HookResult.CLEAN: TaskStatus.CLEAN,
    HookResult.HAS_CHANGES: TaskStatus.HAS_CHANGES,
    HookResult.HAS_UNSTAGED_CHANGES: TaskStatus.HAS_UNSTAGED_CHANGES,
    HookResult.REJECTED: TaskStatus.REJECTED,
}

_ResultT = TypeVar("_ResultT", TaskResult, HookResult)


def raise_to(current: _ResultT, candidate: _ResultT) -> _ResultT:
    """Join two lattice values by keeping the more severe one."""
    return candidate if candidate > current else current


def fold_results(results: Iterable[_ResultT], base: _ResultT) -> _ResultT:
    """Fold results into `base` one at a time.

    `base` should be the bottom element (`ACCEPTED` / `CLEAN`) unless an
    earlier partial join is being continued.
    """
    state = base
    for result in results:
        state = raise_to(state, result)
    return state


@dataclass(frozen=True, slots=True)
class Continue:
    """Step finished; `result` joins into the running outcome."""

    result: HookResult = HookResult.CLEAN


@dataclass(frozen=True, slots=True)
class Abort:
    """Step hit a rejection under the abort policy; stop the run."""

    result: HookResult = HookResult.REJECTED


StepOutcome = Union[Continue, Abort]
