"""Finalize VirtualBox builds: drop the provisioning SSH forward and export the VM."""

__version__ = '0.1.0'
