"""Build pipeline steps."""

from __future__ import annotations

from .export import StepExport, delete_port_forward, export_vm

__all__ = ['StepExport', 'delete_port_forward', 'export_vm']
