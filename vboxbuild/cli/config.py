"""CLI commands for creating and inspecting the build config file."""

from __future__ import annotations

import sys

import scriptconfig as scfg

from ..config import BuildConfig, dump_toml, save
from ..util import ensure_dir
from ._common import _BaseCommand, _cfg_path, _load_cfg


class InitCLI(_BaseCommand):
    """Write a default config file."""

    vm_name = scfg.Value('', position=1, help='Optional VM name to record.')
    force = scfg.Value(
        False, isflag=True, help='Overwrite an existing config file.'
    )

    @classmethod
    def main(cls, argv=True, **kwargs):
        args = cls.cli(argv=argv, data=kwargs)
        path = _cfg_path(args.config)
        if path.exists() and not args.force:
            print(f'Config already exists: {path}', file=sys.stderr)
            print('Use --force to overwrite it.', file=sys.stderr)
            return 2
        cfg = BuildConfig()
        cfg.vm.name = str(args.vm_name or '').strip()
        ensure_dir(path.parent)
        save(path, cfg)
        print(f'Wrote config: {path}')
        return 0


class ConfigShowCLI(_BaseCommand):
    """Show the resolved config."""

    @classmethod
    def main(cls, argv=True, **kwargs):
        args = cls.cli(argv=argv, data=kwargs)
        cfg = _load_cfg(args.config)
        print(f'# Config: {_cfg_path(args.config)}')
        print(dump_toml(cfg), end='')
        return 0


class ConfigModalCLI(scfg.ModalCLI):
    """Config subcommands."""

    init = InitCLI
    show = ConfigShowCLI
