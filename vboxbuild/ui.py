"""Status and error channel used by build steps."""

from __future__ import annotations

from typing import Protocol

from loguru import logger

log = logger


class Ui(Protocol):
    def say(self, msg: str) -> None: ...

    def message(self, msg: str) -> None: ...

    def error(self, msg: str) -> None: ...


class LogUi:
    """Emit step progress through loguru."""

    def say(self, msg: str) -> None:
        log.opt(depth=1).info('==> {}', msg)

    def message(self, msg: str) -> None:
        log.opt(depth=1).info('    {}', msg)

    def error(self, msg: str) -> None:
        log.opt(depth=1).error('{}', msg)
