"""
MCInstall - Minecraft 服务器安装工具
"""

from mcinstall.models import DistributionKind, InstallerConfig
from mcinstall.orchestrator import Installer

__version__ = "0.1.0"

__all__ = ["DistributionKind", "InstallerConfig", "Installer", "__version__"]
