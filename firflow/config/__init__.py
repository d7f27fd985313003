# firflow/config/__init__.py

"""
Configuration management for firflow.

Loads configuration from TOML files, environment variables and internal
defaults into a single validated FirflowConfig object.
"""

from .models import FirflowConfig
from .loaders import load_configuration

__all__ = [
    "FirflowConfig",
    "load_configuration",
]
