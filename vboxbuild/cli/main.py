"""Top-level modal CLI wiring, the export command, and logging setup."""

from __future__ import annotations

import os
import shlex
import sys

import scriptconfig as scfg
import ubelt as ub
from loguru import logger

from ..config import BuildConfig
from ..driver import VBoxManageDriver
from ..pipeline import run_steps
from ..state import BuildState, Halt
from ..steps import StepExport
from ..ui import LogUi
from ._common import _BaseCommand, _cfg_path, _load_cfg, log
from .config import ConfigModalCLI


class ExportCLI(_BaseCommand):
    """Remove the provisioning SSH forward and export an existing VM."""

    vm_name = scfg.Value(
        '', position=1, help='VirtualBox VM name (default: vm.name in config).'
    )
    export_format = scfg.Value(
        None,
        alias=['format'],
        help='Export format / file extension, e.g. ovf or ova.',
    )
    output_dir = scfg.Value(None, help='Directory that receives the export.')
    export_opts = scfg.Value(
        None,
        help='Extra VBoxManage export options, shell-quoted, appended verbatim. '
        'Accepts `--export_opts --ovf20` or `--export_opts="--ovf20 --manifest"`.',
    )
    ssh_host_port = scfg.Value(
        None, help='Host port of the forward rule (reported only).'
    )
    dry_run = scfg.Value(
        False, isflag=True, help='Print actions without running.'
    )

    @classmethod
    def main(cls, argv=True, **kwargs):
        args = cls.cli(argv=argv, data=kwargs)
        cfg = _apply_overrides(_load_cfg(args.config), args)
        if not cfg.vm.name:
            raise RuntimeError(
                'No VM name given. Pass it positionally or set vm.name in the config.'
            )
        if not args.dry_run:
            ub.Path(cfg.export.output_dir).ensuredir()
        state = BuildState(
            driver=VBoxManageDriver(cfg.driver.vboxmanage, dry_run=args.dry_run),
            ui=LogUi(),
            vm_name=cfg.vm.name,
            ssh_host_port=cfg.vm.ssh_host_port or None,
        )
        action = run_steps([StepExport(cfg.export)], state)
        if isinstance(action, Halt):
            # LogUi already reported the cause.
            return 1
        print(state.export_path)
        return 0


def _apply_overrides(cfg: BuildConfig, args) -> BuildConfig:
    vm_name = str(args.vm_name or '').strip()
    if vm_name:
        cfg.vm.name = vm_name
    if args.export_format:
        cfg.export.format = str(args.export_format).strip().lstrip('.')
    if args.output_dir:
        cfg.export.output_dir = str(ub.Path(str(args.output_dir)).expand())
    if args.export_opts is not None:
        cfg.export.export_opts = shlex.split(str(args.export_opts))
    if args.ssh_host_port not in (None, ''):
        cfg.vm.ssh_host_port = int(args.ssh_host_port)
    return cfg


class BuildModalCLI(scfg.ModalCLI):
    """Finalize VirtualBox builds: drop the SSH forward and export the VM."""

    config = ConfigModalCLI
    export = ExportCLI


def main(argv: list[str] | None = None) -> None:
    verbosity = 1
    config_value = None
    if argv is None:
        argv = sys.argv[1:]
    argv = _normalize_argv(argv)
    if '--config' in argv:
        try:
            config_value = argv[argv.index('--config') + 1]
        except IndexError:
            pass
    try:
        if config_value is not None or _cfg_path(None).exists():
            verbosity = _load_cfg(config_value).verbosity
    except Exception:
        verbosity = 1

    _setup_logging(_count_verbose(argv), verbosity)

    try:
        rc = BuildModalCLI.main(argv=argv, _noexit=True)
    except Exception as ex:
        print(f'ERROR: {ex}', file=sys.stderr)
        log.error('Unhandled vboxbuild error: {}', ex)
        sys.exit(2)

    if any(flag in argv for flag in ('-h', '--help')):
        sys.exit(0)
    if isinstance(rc, int):
        sys.exit(rc)
    sys.exit(0)


def _setup_logging(args_verbose: int, cfg_verbosity: int) -> None:
    logger.remove()
    effective_verbosity = args_verbose if args_verbose > 0 else cfg_verbosity
    level = 'WARNING'
    if effective_verbosity == 1:
        level = 'INFO'
    elif effective_verbosity >= 2:
        level = 'DEBUG'
    colorize = sys.stderr.isatty() and os.getenv('NO_COLOR') is None
    logger.add(
        sys.stderr,
        level=level,
        colorize=colorize,
        format='<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>',
    )
    log.debug(
        'Logging configured at {} (effective_verbosity={}, colorize={})',
        level,
        effective_verbosity,
        colorize,
    )


def _count_verbose(argv: list[str]) -> int:
    count = 0
    for item in argv:
        if item == '--verbose':
            count += 1
        elif item.startswith('-') and not item.startswith('--'):
            short = item[1:]
            if short and set(short) <= {'v'}:
                count += len(short)
    return count


def _normalize_argv(argv: list[str]) -> list[str]:
    """Attach option-like ``--export_opts`` values so argparse keeps them."""
    out: list[str] = []
    items = iter(argv)
    for item in items:
        if item in ('--export_opts', '--export-opts'):
            value = next(items, None)
            if value is not None:
                out.append(f'--export_opts={value}')
                continue
        out.append(item)
    return out
