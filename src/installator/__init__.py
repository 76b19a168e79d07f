"""
installator: installation snippets for Neovim plugins.

This package finds plugin-manager installation examples in plugin READMEs
and migrates them to lazy.nvim specs and vim.pack code.
"""

__version__ = "0.1.0"

from .core.models import Installation, InstallSource, PluginManager, Repository, RepositoryInstallation
from .core.config import Config
from .core.engine import InstallationEngine

# For convenient imports
from .cli.main import main as cli_main

__all__ = [
    "Installation",
    "InstallSource",
    "PluginManager",
    "Repository",
    "RepositoryInstallation",
    "Config",
    "InstallationEngine",
    "cli_main",
]
