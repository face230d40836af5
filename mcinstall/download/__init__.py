"""
MCInstall 下载层

包含单文件下载管理和文件校验。
"""

from mcinstall.download.manager import DownloadManager, DownloadStats
from mcinstall.download.verifier import FileVerifier

__all__ = [
    "DownloadManager",
    "DownloadStats",
    "FileVerifier",
]
