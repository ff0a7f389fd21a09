"""Loaders package: plain configuration → engine models."""

from charge_engine.loaders.config_loader import (
    BillConfiguration,
    ConfigurationError,
    dump_configuration,
    load_configuration,
    load_configuration_file,
)

__all__ = [
    "BillConfiguration",
    "ConfigurationError",
    "dump_configuration",
    "load_configuration",
    "load_configuration_file",
]
