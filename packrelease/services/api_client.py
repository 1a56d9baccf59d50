"""
模组仓库客户端抽象

提供统一的仓库客户端接口，CurseForge 与 Modrinth 共用同一能力约定。
"""

from abc import ABC, abstractmethod
from typing import Any, List, Optional, Sequence

import aiohttp
from loguru import logger

from packrelease.exceptions import RegistryError
from packrelease.models import NormalizedMod, Registry


class RegistryClient(ABC):
    """
    模组仓库客户端基类

    fetch_batch 返回结果的顺序不保证与输入一致，调用方需按 ID 重新索引。
    任何非成功响应都会抛出 RegistryError，批量请求整体成功或整体失败。
    """

    backend: Registry

    def __init__(
        self,
        base_url: str,
        headers: Optional[dict] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.headers = headers or {}
        self._session = session
        self._owned_session = session is None

    @property
    def session(self) -> aiohttp.ClientSession:
        """获取或创建 aiohttp session"""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owned_session = True
        return self._session

    async def _request(
        self,
        method: str,
        endpoint: str,
        ids: Sequence[str],
        params: Optional[dict] = None,
        json: Optional[Any] = None,
    ) -> Any:
        """发送 API 请求，非 2xx 响应或传输失败均抛出 RegistryError"""
        url = f"{self.base_url}{endpoint}"
        logger.debug(f"{method} {url}")
        try:
            async with self.session.request(
                method, url, params=params, json=json, headers=self.headers
            ) as response:
                if 200 <= response.status < 300:
                    return await response.json()
                raise RegistryError(
                    self.backend.value, ids, status=response.status, response=response
                )
        except aiohttp.ClientError as e:
            logger.debug(f"{method} {url} 传输失败: {e}")
            raise RegistryError(self.backend.value, ids) from e

    @abstractmethod
    async def fetch_one(self, idx: str) -> NormalizedMod:
        """获取单个模组的标准化信息"""

    @abstractmethod
    async def fetch_batch(self, ids: Sequence[str]) -> List[NormalizedMod]:
        """批量获取模组的标准化信息，一次网络请求完成"""

    async def close(self):
        """关闭客户端"""
        if self._owned_session and self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
