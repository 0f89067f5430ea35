"""Configuration model and parser for backup configuration files."""

from .model import BackableDir, BackableFile, Configuration, Section
from .parser import ConfigParser, parse_config

__all__ = [
    "BackableDir",
    "BackableFile",
    "ConfigParser",
    "Configuration",
    "Section",
    "parse_config",
]
