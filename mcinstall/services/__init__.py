"""
MCInstall 服务层

包含元数据 API 客户端和服务端版本解析。
"""

from mcinstall.services.api_client import MetadataClient
from mcinstall.services.version_resolver import (
    VersionResolver,
    select_latest_version,
    select_latest_build,
    version_key,
)

__all__ = [
    "MetadataClient",
    "VersionResolver",
    "select_latest_version",
    "select_latest_build",
    "version_key",
]
