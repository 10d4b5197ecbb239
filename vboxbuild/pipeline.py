"""Sequential step runner with halt and reverse-order cleanup semantics."""

from __future__ import annotations

from typing import Protocol, Sequence

from loguru import logger

from .state import CONTINUE, BuildState, Halt, StepAction

log = logger


class Step(Protocol):
    def run(self, state: BuildState) -> StepAction: ...

    def cleanup(self, state: BuildState) -> None: ...


def _step_name(step: Step) -> str:
    return type(step).__name__


def run_steps(steps: Sequence[Step], state: BuildState) -> StepAction:
    """
    Run ``steps`` in order against ``state``.

    The first :class:`Halt` stops the run; later steps never start. Every step
    whose ``run`` was entered gets its ``cleanup`` called afterwards, last
    step first, including when ``run`` raised.
    """
    entered: list[Step] = []
    action: StepAction = CONTINUE
    try:
        for step in steps:
            entered.append(step)
            log.debug('Running step {}', _step_name(step))
            action = step.run(state)
            if isinstance(action, Halt):
                log.debug(
                    'Step {} halted the build: {}', _step_name(step), action.reason
                )
                state.put_error(action.reason)
                break
    finally:
        for step in reversed(entered):
            try:
                step.cleanup(state)
            except Exception as ex:
                log.error('Cleanup of step {} failed: {}', _step_name(step), ex)
    return action


class BasicRunner:
    def __init__(self, steps: Sequence[Step]):
        self.steps = list(steps)

    def run(self, state: BuildState) -> StepAction:
        return run_steps(self.steps, state)
