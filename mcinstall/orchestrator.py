"""
安装协调器

按固定顺序执行安装流程：
创建目录 -> 选择类型 -> 解析版本 -> 下载 -> EULA -> 配置 -> 启动。
"""

import subprocess
from pathlib import Path
from typing import Callable, Optional, Sequence, Union

from loguru import logger

from mcinstall.download import DownloadManager
from mcinstall.exceptions import (
    EulaNotAcceptedError,
    FileWriteError,
    InvalidNameError,
)
from mcinstall.launcher import build_command, launch_server
from mcinstall.models import (
    ArtifactLocation,
    DistributionKind,
    InstallerConfig,
    InstallResult,
    InstallStage,
)
from mcinstall.prompts import Prompter
from mcinstall.services import MetadataClient, VersionResolver
from mcinstall.writer import (
    PROPERTIES_FILENAME,
    merge_properties,
    write_eula,
    write_properties,
)


Launcher = Callable[[Sequence[str], Path], subprocess.Popen]

_INVALID_NAMES = {".", ".."}


def validate_server_name(name: Optional[str]) -> str:
    """校验服务器名称，返回去除首尾空白后的名称"""
    stripped = (name or "").strip()
    if not stripped:
        raise InvalidNameError("服务器名称不能为空")
    if stripped in _INVALID_NAMES or "/" in stripped or "\\" in stripped:
        raise InvalidNameError(
            f"服务器名称不合法: {name!r}", context={"name": name}
        )
    return stripped


class Installer:
    """服务器安装协调器"""

    def __init__(
        self,
        config: InstallerConfig,
        prompter: Prompter,
        base_dir: Union[str, Path, None] = None,
        launcher: Optional[Launcher] = None,
        client: Optional[MetadataClient] = None,
        download_manager: Optional[DownloadManager] = None,
    ):
        self.config = config
        self.prompter = prompter
        self.base_dir = Path(base_dir) if base_dir is not None else Path.cwd()
        self.launcher = launcher or launch_server
        self.client = client or MetadataClient(timeout=config.download.timeout)
        self.resolver = VersionResolver(self.client, config)
        self.download_manager = download_manager or DownloadManager(
            max_attempts=config.download.max_attempts,
            retry_delay=config.download.retry_delay,
            timeout=config.download.timeout,
        )
        self.stage = InstallStage.START

    def _advance(self, stage: InstallStage, result: InstallResult):
        self.stage = stage
        result.stage = stage
        logger.debug(f"[阶段] {stage.value}")

    async def run(self) -> InstallResult:
        """运行完整的安装流程"""
        logger.info("开始安装 Minecraft 服务器...")
        try:
            name = validate_server_name(self.prompter.ask_server_name())
            server_dir = self.base_dir / name
            result = InstallResult(server_dir=server_dir)

            self._create_directory(server_dir)
            self._advance(InstallStage.NAMED_DIRECTORY, result)

            kind = DistributionKind.from_choice(self.prompter.ask_distribution())
            result.kind = kind
            self._advance(InstallStage.TYPE_SELECTED, result)
            logger.info(f"服务端类型: {kind.value}")

            artifact = await self.resolver.resolve(kind)
            result.artifact = artifact
            self._advance(InstallStage.RESOLVED, result)

            result.server_file = await self._download(artifact, server_dir, kind)
            self._advance(InstallStage.DOWNLOADED, result)

            await self._accept_eula(server_dir)
            self._advance(InstallStage.EULA_DECISION, result)

            await self._configure(server_dir, result)

            self._advance(InstallStage.LAUNCHING, result)
            argv = build_command(self.config.launch, result.server_file.name)
            result.process = self.launcher(argv, server_dir)
            self._advance(InstallStage.DONE, result)

            logger.success(f"服务器 '{name}' 安装完成: {server_dir}")
            return result

        except Exception as e:
            logger.error(f"安装失败 ({self.stage.value}): {e}")
            raise
        finally:
            await self.close()

    def _create_directory(self, server_dir: Path):
        try:
            existed = server_dir.is_dir()
            server_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FileWriteError(
                f"无法创建目录 {server_dir}: {e}", context={"path": str(server_dir)}
            )
        if existed:
            logger.warning(f"目录已存在，将在其中安装: {server_dir}")
        else:
            logger.success(f"目录创建成功: {server_dir}")

    async def _download(
        self, artifact: ArtifactLocation, server_dir: Path, kind: DistributionKind
    ) -> Path:
        filename = artifact.suggested_filename or kind.default_filename
        sha1 = artifact.sha1 if self.config.download.verify_checksum else None
        return await self.download_manager.download_file(
            artifact.url, server_dir / filename, expected_sha1=sha1
        )

    async def _accept_eula(self, server_dir: Path):
        if not self.prompter.confirm_eula():
            raise EulaNotAcceptedError("未同意 EULA，服务器无法运行")
        await write_eula(server_dir)

    async def _configure(self, server_dir: Path, result: InstallResult):
        """可选地生成 server.properties，写入失败不中断安装"""
        if not self.prompter.confirm_customize():
            self._advance(InstallStage.CONFIG_SKIPPED, result)
            logger.info("跳过 server.properties 自定义")
            return

        overrides = {}
        for entry in self.config.properties:
            overrides[entry.key] = self.prompter.ask_property(entry.key, entry.value)
        entries = merge_properties(self.config.properties, overrides)

        try:
            await write_properties(entries, server_dir / PROPERTIES_FILENAME)
            result.properties_written = True
            logger.success(f"[完成] 已写入 {PROPERTIES_FILENAME}")
        except FileWriteError as e:
            result.properties_error = e
            logger.error(f"[错误] {e}，继续启动服务器")
        self._advance(InstallStage.CONFIG_CUSTOMIZED, result)

    async def close(self):
        """关闭网络资源"""
        await self.client.close()
        await self.download_manager.close()
