"""Project-specific exception types."""

from __future__ import annotations


class VBoxBuildError(RuntimeError):
    """Base error for domain-level vboxbuild failures."""


class MissingStateError(VBoxBuildError):
    """Raised when a required build-state field is absent or mistyped."""


class DriverNotFoundError(VBoxBuildError):
    """Raised when no VBoxManage executable can be located."""


class PortForwardDeleteError(VBoxBuildError):
    """Raised when the forwarded port rule survives every delete attempt."""

    def __init__(self, cause: BaseException | None, attempts: int):
        self.attempts = attempts
        super().__init__(f'Error deleting port forwarding rule: {cause}')


class ExportError(VBoxBuildError):
    """Raised when ``VBoxManage export`` fails."""

    def __init__(self, cause: BaseException):
        super().__init__(f'Error exporting virtual machine: {cause}')


class ConfigError(VBoxBuildError):
    """Raised when a config file value has the wrong type."""
