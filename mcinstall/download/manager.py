"""
下载管理器

单文件下载，带有限次数重试、固定退避和原子替换。
"""

import asyncio
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import aiohttp
import aiofiles
from loguru import logger

from mcinstall.download.verifier import FileVerifier
from mcinstall.exceptions import (
    DownloadError,
    DownloadChecksumError,
    DownloadExhaustedError,
)
from mcinstall.models import DownloadAttempt


PART_SUFFIX = ".part"


@dataclass
class DownloadStats:
    """下载统计"""

    attempts: int = 0
    completed: int = 0
    failed: int = 0
    bytes_downloaded: int = 0


class DownloadManager:
    """下载管理器"""

    def __init__(
        self,
        max_attempts: int = 3,
        retry_delay: float = 2.0,
        timeout: float = 30.0,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts 必须大于 0")
        self.max_attempts = max_attempts
        self.retry_delay = retry_delay
        # 大文件下载不限制总时长，只限制连接和单次读取
        self.timeout = aiohttp.ClientTimeout(
            total=None, connect=timeout, sock_read=timeout
        )
        self.verifier = FileVerifier()
        self.stats = DownloadStats()
        self._session = session
        self._owned_session = session is None

    @property
    def session(self) -> aiohttp.ClientSession:
        """获取或创建 aiohttp session"""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
            self._owned_session = True
        return self._session

    async def download_file(
        self,
        url: str,
        destination: Union[str, Path],
        expected_sha1: Optional[str] = None,
    ) -> Path:
        """
        下载单个文件到 destination

        先写入 "<destination>.part"，成功后再替换为目标文件；
        每次尝试都重新打开临时文件，失败时删除它。

        Returns:
            目标文件路径

        Raises:
            DownloadExhaustedError: 所有尝试均失败
        """
        if not url:
            raise DownloadError("下载地址为空")

        file_path = Path(destination)
        part_path = file_path.with_name(file_path.name + PART_SUFFIX)
        filename = file_path.name
        file_path.parent.mkdir(parents=True, exist_ok=True)

        logger.info(f"[开始] 下载: {filename}")

        attempt = DownloadAttempt(max_attempts=self.max_attempts)
        last_error: Optional[Exception] = None

        while not attempt.exhausted:
            number = attempt.next()
            self.stats.attempts += 1
            try:
                await self._fetch(url, part_path, filename, first=(number == 1))

                if expected_sha1 and not await self.verifier.verify_sha1(
                    str(part_path), expected_sha1
                ):
                    raise DownloadChecksumError(
                        f"SHA1 校验失败: {filename}",
                        context={"file": filename, "expected": expected_sha1},
                    )

                os.replace(part_path, file_path)
                self.stats.completed += 1
                logger.success(f"[完成] '{filename}' 下载完成")
                return file_path

            except (
                aiohttp.ClientError,
                asyncio.TimeoutError,
                OSError,
                ValueError,
                DownloadError,
            ) as e:
                last_error = e
                self._discard(part_path)

                if not attempt.exhausted:
                    logger.warning(
                        f"[重试] 下载 '{filename}' 失败 (第 {number}/{self.max_attempts} 次): {e}. "
                        f"{self.retry_delay:.1f}s 后重试..."
                    )
                    await asyncio.sleep(self.retry_delay)

        self.stats.failed += 1
        logger.error(f"[错误] 下载 '{filename}' 最终失败: {last_error}")
        raise DownloadExhaustedError(
            f"下载失败，已尝试 {self.max_attempts} 次: {filename}",
            context={
                "url": url,
                "attempts": self.max_attempts,
                "error": str(last_error),
            },
        )

    async def _fetch(self, url: str, part_path: Path, filename: str, first: bool):
        """执行一次流式下载，写入临时文件"""
        async with self.session.get(url, timeout=self.timeout) as response:
            if not 200 <= response.status < 300:
                raise DownloadError(
                    f"HTTP {response.status}",
                    context={"url": url, "status": response.status},
                )

            total_size = int(response.headers.get("Content-Length", 0) or 0)
            if first and total_size:
                logger.info(f"[信息] 文件大小: {total_size / (1024 * 1024):.2f} MB")

            downloaded = 0
            last_percent = 0.0
            async with aiofiles.open(part_path, "wb") as f:
                async for chunk in response.content.iter_chunked(8192):
                    await f.write(chunk)
                    downloaded += len(chunk)
                    self.stats.bytes_downloaded += len(chunk)

                    if total_size > 0:
                        percent = (downloaded / total_size) * 100
                        if percent - last_percent >= 5:
                            logger.info(f"[进度] {filename}: {percent:.1f}%")
                            last_percent = percent

            if total_size and downloaded < total_size:
                raise DownloadError(
                    f"文件不完整: {downloaded}/{total_size} 字节",
                    context={"url": url},
                )

    @staticmethod
    def _discard(part_path: Path):
        """清理不完整的文件"""
        if part_path.exists():
            try:
                part_path.unlink()
            except OSError as e:
                logger.warning(f"[清理] 无法删除临时文件 {part_path}: {e}")

    async def close(self):
        """关闭 session"""
        if self._owned_session and self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        """异步上下文管理器入口"""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """异步上下文管理器出口"""
        await self.close()
