"""Helpers for constructing VBoxManage command arguments."""

from __future__ import annotations

import os
from typing import Sequence

# NAT rule installed on adapter 1 for provisioning SSH access.
FORWARD_RULE_NAME = 'packerssh'


def delete_forward_rule_args(vm_name: str) -> list[str]:
    return ['modifyvm', vm_name, '--natpf1', 'delete', FORWARD_RULE_NAME]


def export_output_path(output_dir: str, vm_name: str, fmt: str) -> str:
    return os.path.join(output_dir, vm_name + '.' + fmt)


def export_args(
    vm_name: str, output_path: str, extra_opts: Sequence[str] = ()
) -> list[str]:
    """
    Build the ``VBoxManage export`` argument list.

    Operator supplied options come last and in the given order so they can
    extend or override the built-in arguments.
    """
    return ['export', vm_name, '--output', output_path, *extra_opts]
