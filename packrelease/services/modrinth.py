"""
Modrinth 仓库客户端
"""

import json
from typing import List, Optional, Sequence

import aiohttp
from loguru import logger

from packrelease.models import NormalizedMod, Registry
from packrelease.models.options import DEFAULT_USER_AGENT, MODRINTH_BASE_URL
from packrelease.services.api_client import RegistryClient


class ModrinthClient(RegistryClient):
    """
    Modrinth API 客户端

    Modrinth 的分类本身已是标准标签，直接透传；
    其数据无法推断依赖库属性，library 始终为 None。
    """

    backend = Registry.MODRINTH

    def __init__(
        self,
        token: Optional[str] = None,
        base_url: str = MODRINTH_BASE_URL,
        session: Optional[aiohttp.ClientSession] = None,
        user_agent: str = DEFAULT_USER_AGENT,
    ):
        headers = {"Accept": "application/json", "User-Agent": user_agent}
        if token:
            headers["Authorization"] = token
        super().__init__(base_url, headers=headers, session=session)

    def _resolve_mod(self, data: dict) -> NormalizedMod:
        return NormalizedMod(
            external_id=data["id"],
            name=data["title"],
            slug=data["slug"],
            categories=tuple(data.get("categories") or ()),
            library=None,
            popularity_score=data.get("downloads"),
            icon=data.get("icon_url"),
            website_url=f"https://modrinth.com/mod/{data['slug']}",
            summary=data.get("description"),
        )

    async def fetch_one(self, idx: str) -> NormalizedMod:
        logger.debug(f"从 Modrinth 获取模组 {idx}")
        response = await self._request("GET", f"/project/{idx}", [idx])
        return self._resolve_mod(response)

    async def fetch_batch(self, ids: Sequence[str]) -> List[NormalizedMod]:
        if not ids:
            return []
        logger.info(f"从 Modrinth 获取 {len(ids)} 个模组")
        response = await self._request(
            "GET",
            "/projects",
            list(ids),
            params={"ids": json.dumps(list(ids), separators=(",", ":"))},
        )
        return [self._resolve_mod(item) for item in response]
