# fale_proxy/__init__.py
"""
FaleProxy package initializer.
Defines package version and exposes CLI.
"""
__version__ = "0.1.0"

# Expose CLI entry point; the alias keeps fale_proxy.cli bound to the submodule
from fale_proxy.cli import cli as main_cli  # noqa: E402
