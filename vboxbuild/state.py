"""Typed build state shared by pipeline steps, and the step result type."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Union

from .driver import Driver
from .errors import MissingStateError
from .ui import Ui


@dataclass(frozen=True)
class Continue:
    pass


@dataclass(frozen=True)
class Halt:
    reason: BaseException


StepAction = Union[Continue, Halt]

CONTINUE = Continue()


@dataclass
class BuildState:
    """
    Mutable state threaded through every step of one build run.

    Earlier steps provide ``vm_name`` and ``ssh_host_port``; the export step
    produces ``export_path``. ``error`` holds the cause of the first halt.
    Fields owned by steps outside this package live in ``extra``.
    """

    driver: Driver
    ui: Ui
    vm_name: str = ''
    ssh_host_port: Optional[int] = None
    export_path: Optional[str] = None
    error: Optional[BaseException] = None
    extra: dict[str, Any] = field(default_factory=dict)

    def put_error(self, err: BaseException) -> None:
        if self.error is None:
            self.error = err

    def require_vm_name(self) -> str:
        name = self.vm_name
        if not isinstance(name, str) or not name.strip():
            raise MissingStateError(
                f'Build state has no usable vm_name (got {name!r}); '
                'the VM must be created by an earlier step.'
            )
        return name
