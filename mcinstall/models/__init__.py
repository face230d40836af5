"""
MCInstall 数据模型包

包含配置模型和核心数据模型定义。
"""

from mcinstall.models.api import (
    DistributionKind,
    ArtifactLocation,
    ConfigEntry,
    DownloadAttempt,
    InstallStage,
    InstallResult,
)
from mcinstall.models.config import (
    DEFAULT_PROPERTIES,
    EndpointConfig,
    DownloadConfig,
    LaunchConfig,
    InstallerConfig,
)

__all__ = [
    # 核心模型
    "DistributionKind",
    "ArtifactLocation",
    "ConfigEntry",
    "DownloadAttempt",
    "InstallStage",
    "InstallResult",
    # 配置模型
    "DEFAULT_PROPERTIES",
    "EndpointConfig",
    "DownloadConfig",
    "LaunchConfig",
    "InstallerConfig",
]
