"""Tests for the VBoxManage driver."""

from __future__ import annotations

import pytest

from vboxbuild.driver import VBoxManageDriver, find_vboxmanage
from vboxbuild.errors import DriverNotFoundError
from vboxbuild.util import CmdError, CmdResult


def test_find_vboxmanage_falls_back_to_lowercase(monkeypatch) -> None:
    monkeypatch.setattr(
        'vboxbuild.driver.which',
        lambda cmd: '/usr/bin/vboxmanage' if cmd == 'vboxmanage' else None,
    )
    assert find_vboxmanage() == '/usr/bin/vboxmanage'


def test_driver_missing_binary(monkeypatch) -> None:
    monkeypatch.setattr('vboxbuild.driver.which', lambda cmd: None)
    with pytest.raises(DriverNotFoundError):
        VBoxManageDriver()
    drv = VBoxManageDriver(dry_run=True)
    assert drv.executable == 'VBoxManage'


def test_driver_runs_command(monkeypatch) -> None:
    calls = []

    def fake_run_cmd(cmd, **kwargs):
        calls.append((cmd, kwargs))
        return CmdResult(0, '', '')

    monkeypatch.setattr('vboxbuild.driver.run_cmd', fake_run_cmd)
    drv = VBoxManageDriver('/opt/vbox/VBoxManage')
    drv.vboxmanage('export', 'vmx', '--output', '/out/vmx.ovf')
    assert calls == [
        (
            ['/opt/vbox/VBoxManage', 'export', 'vmx', '--output', '/out/vmx.ovf'],
            {'check': True, 'capture': True},
        )
    ]


def test_driver_propagates_failure(monkeypatch) -> None:
    def fake_run_cmd(cmd, **kwargs):
        raise CmdError(cmd, CmdResult(1, '', 'Could not find a registered machine'))

    monkeypatch.setattr('vboxbuild.driver.run_cmd', fake_run_cmd)
    drv = VBoxManageDriver('VBoxManage')
    with pytest.raises(CmdError, match='registered machine'):
        drv.vboxmanage('modifyvm', 'vmx', '--natpf1', 'delete', 'packerssh')


def test_driver_dry_run_skips_execution(monkeypatch) -> None:
    calls = []
    monkeypatch.setattr(
        'vboxbuild.driver.run_cmd', lambda *a, **k: calls.append(a)
    )
    drv = VBoxManageDriver('VBoxManage', dry_run=True)
    drv.vboxmanage('export', 'vmx')
    assert calls == []
