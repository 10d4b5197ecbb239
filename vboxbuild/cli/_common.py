from __future__ import annotations

from pathlib import Path

import scriptconfig as scfg
from loguru import logger

from ..config import BuildConfig, load

log = logger

DEFAULT_CONFIG_NAME = '.vboxbuild.toml'


class _BaseCommand(scfg.DataConfig):
    """Base options shared by all commands."""

    config = scfg.Value(
        None, help=f'Path to config TOML (default: {DEFAULT_CONFIG_NAME}).'
    )
    verbose = scfg.Value(
        0,
        short_alias=['v'],
        isflag='counter',
        help='Increase verbosity (-v, -vv).',
    )


def _cfg_path(p: str | None) -> Path:
    return Path(p or DEFAULT_CONFIG_NAME).resolve()


def _load_cfg(config_path: str | None, *, required: bool = False) -> BuildConfig:
    """Load the config file, or defaults when it is absent and optional."""
    path = _cfg_path(config_path)
    if not path.exists():
        if required or config_path is not None:
            raise FileNotFoundError(
                f'Config not found: {path}. '
                f'Run: vboxbuild config init --config {path}'
            )
        log.debug('No config at {}; using defaults', path)
        return BuildConfig().expanded_paths()
    return load(path).expanded_paths()


__all__ = [name for name in globals() if not name.startswith('__')]
