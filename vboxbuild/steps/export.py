"""Export step: drop the provisioning SSH forward, then export the VM."""

from __future__ import annotations

import time
from typing import Sequence

from loguru import logger

from ..config import ExportConfig
from ..driver import Driver
from ..errors import ExportError, PortForwardDeleteError
from ..runtime import delete_forward_rule_args, export_args, export_output_path
from ..state import CONTINUE, BuildState, Halt, StepAction

log = logger


def delete_port_forward(
    driver: Driver,
    vm_name: str,
    *,
    retry_max: int = 5,
    retry_interval_s: float = 0.2,
) -> int:
    """
    Delete the ``packerssh`` NAT rule, retrying while VirtualBox still holds
    the machine lock after shutdown.

    Returns the number of attempts used. Raises
    :class:`PortForwardDeleteError` once ``retry_max`` attempts have failed.
    A rule that was never installed fails the same way.
    """
    if retry_max < 1:
        raise ValueError(f'retry_max must be >= 1, got {retry_max}')
    cmd = delete_forward_rule_args(vm_name)
    last_err: Exception | None = None
    for attempt in range(1, retry_max + 1):
        try:
            driver.vboxmanage(*cmd)
        except Exception as ex:
            last_err = ex
            log.debug(
                'Deleting port forward failed (attempt {}/{}): {}',
                attempt,
                retry_max,
                ex,
            )
            time.sleep(retry_interval_s)
            continue
        return attempt
    raise PortForwardDeleteError(last_err, retry_max) from last_err


def export_vm(
    driver: Driver,
    vm_name: str,
    output_path: str,
    export_opts: Sequence[str] = (),
) -> None:
    try:
        driver.vboxmanage(*export_args(vm_name, output_path, export_opts))
    except Exception as ex:
        raise ExportError(ex) from ex


class StepExport:
    """
    Cleans up the forwarded SSH port and exports the VM.

    Uses ``vm_name`` and ``ssh_host_port`` from the build state; produces
    ``export_path``.
    """

    def __init__(self, config: ExportConfig | None = None):
        self.config = config if config is not None else ExportConfig()
        self.export_opts = tuple(self.config.export_opts)

    def run(self, state: BuildState) -> StepAction:
        cfg = self.config
        vm_name = state.require_vm_name()
        ui = state.ui

        # Let a freshly stopped VM release its session lock.
        log.debug('{}s timeout to ensure VM is really shutdown', cfg.settle_s)
        time.sleep(cfg.settle_s)

        ui.say('Preparing to export machine...')
        msg = 'Deleting forwarded port mapping for SSH'
        if state.ssh_host_port is not None:
            msg += f' (host port {state.ssh_host_port})'
        ui.message(msg)
        try:
            attempts = delete_port_forward(
                state.driver,
                vm_name,
                retry_max=cfg.retry_max,
                retry_interval_s=cfg.retry_interval_s,
            )
        except PortForwardDeleteError as ex:
            return self._halt(state, ex)
        log.debug('Port forward removed after {} attempt(s)', attempts)

        output_path = export_output_path(cfg.output_dir, vm_name, cfg.format)
        command = export_args(vm_name, output_path, self.export_opts)
        ui.say('Exporting virtual machine...')
        ui.message(f'Executing: {" ".join(command)}')
        try:
            export_vm(state.driver, vm_name, output_path, self.export_opts)
        except ExportError as ex:
            return self._halt(state, ex)

        state.export_path = output_path
        return CONTINUE

    def cleanup(self, state: BuildState) -> None:
        pass

    @staticmethod
    def _halt(state: BuildState, err: Exception) -> Halt:
        state.put_error(err)
        state.ui.error(str(err))
        return Halt(err)
