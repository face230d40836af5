"""
核心数据模型

定义服务端类型、下载制品、配置项和安装结果等数据类。
"""

import subprocess
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

from mcinstall.exceptions import InvalidChoiceError


class DistributionKind(Enum):
    """服务端类型"""

    VANILLA = "vanilla"
    PAPER = "paper"
    FORGE = "forge"

    @property
    def default_filename(self) -> str:
        """该类型下载到本地时使用的文件名"""
        return _DEFAULT_FILENAMES[self]

    @classmethod
    def from_choice(cls, choice: str) -> "DistributionKind":
        """
        解析用户选择

        支持菜单序号 (1/2/3) 或类型名称，不区分大小写。
        """
        value = (choice or "").strip().lower()
        if value in _MENU_CHOICES:
            return _MENU_CHOICES[value]
        for kind in cls:
            if kind.value == value:
                return kind
        raise InvalidChoiceError(
            f"无效的服务端类型选择: {choice!r}", context={"choice": choice}
        )


_DEFAULT_FILENAMES = {
    DistributionKind.VANILLA: "vanilla_server.jar",
    DistributionKind.PAPER: "paper_server.jar",
    DistributionKind.FORGE: "forge_installer.jar",
}

_MENU_CHOICES = {
    "1": DistributionKind.VANILLA,
    "2": DistributionKind.PAPER,
    "3": DistributionKind.FORGE,
}


@dataclass(frozen=True)
class ArtifactLocation:
    """
    解析得到的下载制品

    url 在交给下载器之前保证非空。
    """

    url: str
    suggested_filename: str
    kind: DistributionKind
    version: str = ""
    build: Optional[int] = None
    sha1: Optional[str] = None


@dataclass(frozen=True)
class ConfigEntry:
    """server.properties 中的一行"""

    key: str
    value: str

    def to_line(self) -> str:
        # 不转义值中的 "=" 或换行
        return f"{self.key}={self.value}"


@dataclass
class DownloadAttempt:
    """单次下载调用中的尝试计数"""

    attempt_number: int = 0
    max_attempts: int = 3

    def next(self) -> int:
        if self.attempt_number >= self.max_attempts:
            raise ValueError("已达到最大尝试次数")
        self.attempt_number += 1
        return self.attempt_number

    @property
    def exhausted(self) -> bool:
        return self.attempt_number >= self.max_attempts


class InstallStage(Enum):
    """安装流程阶段"""

    START = "start"
    NAMED_DIRECTORY = "named_directory"
    TYPE_SELECTED = "type_selected"
    RESOLVED = "resolved"
    DOWNLOADED = "downloaded"
    EULA_DECISION = "eula_decision"
    CONFIG_CUSTOMIZED = "config_customized"
    CONFIG_SKIPPED = "config_skipped"
    LAUNCHING = "launching"
    DONE = "done"


@dataclass
class InstallResult:
    """安装结果"""

    server_dir: Path
    stage: InstallStage = InstallStage.START
    kind: Optional[DistributionKind] = None
    artifact: Optional[ArtifactLocation] = None
    server_file: Optional[Path] = None
    properties_written: bool = False
    properties_error: Optional[Exception] = None
    process: Optional[subprocess.Popen] = field(default=None, repr=False)
