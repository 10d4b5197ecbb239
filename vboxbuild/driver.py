"""VBoxManage driver: the single command capability build steps depend on."""

from __future__ import annotations

from typing import Optional, Protocol

from loguru import logger

from .errors import DriverNotFoundError
from .util import run_cmd, shell_join, which

log = logger

VBOXMANAGE_NAMES = ('VBoxManage', 'vboxmanage')


class Driver(Protocol):
    def vboxmanage(self, *args: str) -> None:
        """Run one VBoxManage command; raise on failure."""


def find_vboxmanage() -> Optional[str]:
    for name in VBOXMANAGE_NAMES:
        path = which(name)
        if path:
            return path
    return None


class VBoxManageDriver:
    """Run VBoxManage commands on the host via :func:`run_cmd`."""

    def __init__(self, executable: str | None = None, *, dry_run: bool = False):
        self.dry_run = dry_run
        exe = (executable or '').strip() or find_vboxmanage()
        if not exe:
            if not dry_run:
                raise DriverNotFoundError(
                    'VBoxManage not found on PATH. Install VirtualBox or set '
                    'driver.vboxmanage in the config.'
                )
            exe = VBOXMANAGE_NAMES[0]
        self.executable = exe

    def vboxmanage(self, *args: str) -> None:
        cmd = [self.executable, *args]
        if self.dry_run:
            log.info('DRYRUN: {}', shell_join(cmd))
            return
        run_cmd(cmd, check=True, capture=True)
