"""
元数据 API 客户端

通过共享的 aiohttp session 获取 JSON 元数据，统一处理超时与错误。
"""

import asyncio
import json
from typing import Any, Optional

import aiohttp
from loguru import logger

from mcinstall.exceptions import NetworkError, MetadataFormatError


DEFAULT_TIMEOUT = 30.0


class MetadataClient:
    """元数据 API 客户端"""

    def __init__(
        self,
        session: Optional[aiohttp.ClientSession] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self._session = session
        self._owned_session = session is None
        self.timeout = aiohttp.ClientTimeout(total=timeout)

    @property
    def session(self) -> aiohttp.ClientSession:
        """获取或创建 aiohttp session"""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
            self._owned_session = True
        return self._session

    async def get_json(self, url: str, params: Optional[dict] = None) -> Any:
        """
        发送 GET 请求并解析 JSON

        Raises:
            NetworkError: 连接失败、超时或非 2xx 响应
            MetadataFormatError: 响应不是合法的 JSON
        """
        logger.debug(f"[请求] GET {url}")
        try:
            async with self.session.get(
                url, params=params, timeout=self.timeout
            ) as response:
                if not 200 <= response.status < 300:
                    raise NetworkError(
                        f"API 请求失败 (状态码: {response.status})",
                        response=response,
                    )
                try:
                    return await response.json(content_type=None)
                except (json.JSONDecodeError, ValueError) as e:
                    raise MetadataFormatError(
                        f"响应不是合法的 JSON: {e}", context={"url": url}
                    )
        except asyncio.TimeoutError:
            raise NetworkError("API 请求超时", context={"url": url})
        except aiohttp.ClientError as e:
            raise NetworkError(f"API 请求失败: {e}", context={"url": url})

    async def close(self):
        """关闭客户端"""
        if self._owned_session and self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        """异步上下文管理器入口"""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """异步上下文管理器出口"""
        await self.close()
