from __future__ import annotations

import shlex
import tomllib
from dataclasses import asdict, dataclass, field
from pathlib import Path

from .errors import ConfigError
from .util import expand


@dataclass
class VMConfig:
    name: str = ''
    ssh_host_port: int = 0


@dataclass
class ExportConfig:
    format: str = 'ovf'
    output_dir: str = 'output-virtualbox'
    export_opts: list[str] = field(default_factory=list)
    settle_s: float = 1.0
    retry_max: int = 5
    retry_interval_s: float = 0.2


@dataclass
class DriverConfig:
    vboxmanage: str = ''


@dataclass
class BuildConfig:
    vm: VMConfig = field(default_factory=VMConfig)
    export: ExportConfig = field(default_factory=ExportConfig)
    driver: DriverConfig = field(default_factory=DriverConfig)
    verbosity: int = 1

    def expanded_paths(self) -> 'BuildConfig':
        self.export.output_dir = expand(self.export.output_dir)
        self.driver.vboxmanage = (
            expand(self.driver.vboxmanage) if self.driver.vboxmanage else ''
        )
        return self


SECTIONS = ('vm', 'export', 'driver')


def _toml_escape(s: str) -> str:
    return s.replace('\\', '\\\\').replace('"', '\\"')


def dump_toml(cfg: BuildConfig) -> str:
    d = asdict(cfg)
    lines: list[str] = []
    # Bare keys must precede the first table or they land inside it.
    if d['verbosity'] != 1:
        lines.append(f'verbosity = {d["verbosity"]}')
        lines.append('')
    for section in SECTIONS:
        lines.append(f'[{section}]')
        for k, v in d[section].items():
            if isinstance(v, bool):
                lines.append(f'{k} = {"true" if v else "false"}')
            elif isinstance(v, (int, float)):
                lines.append(f'{k} = {v}')
            elif isinstance(v, list):
                parts = [f'"{_toml_escape(str(item))}"' for item in v]
                lines.append(f'{k} = [{", ".join(parts)}]')
            else:
                lines.append(f'{k} = "{_toml_escape(str(v))}"')
        lines.append('')
    return '\n'.join(lines).rstrip() + '\n'


def _coerce(where: str, default: object, value: object) -> object:
    """Check ``value`` against the type of the field's default."""
    if isinstance(default, list):
        # A single string is taken as a shell-quoted option list.
        if isinstance(value, str):
            return shlex.split(value)
        if isinstance(value, list):
            return [str(item) for item in value]
    elif isinstance(default, bool):
        if isinstance(value, bool):
            return value
    elif isinstance(default, int):
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    elif isinstance(default, float):
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
    elif isinstance(value, str):
        return value
    raise ConfigError(
        f'{where} must be {type(default).__name__}, '
        f'got {type(value).__name__} {value!r}'
    )


def load(path: Path) -> BuildConfig:
    raw = tomllib.loads(path.read_text(encoding='utf-8'))
    cfg = BuildConfig()
    for section in SECTIONS:
        if section in raw and isinstance(raw[section], dict):
            sec = raw[section]
            obj = getattr(cfg, section)
            for k, v in sec.items():
                if hasattr(obj, k):
                    setattr(
                        obj, k, _coerce(f'{section}.{k}', getattr(obj, k), v)
                    )
    if 'verbosity' in raw:
        cfg.verbosity = _coerce('verbosity', cfg.verbosity, raw['verbosity'])
    return cfg


def save(path: Path, cfg: BuildConfig) -> None:
    path.write_text(dump_toml(cfg), encoding='utf-8')
