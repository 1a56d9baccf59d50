"""
CurseForge 仓库客户端
"""

from typing import FrozenSet, List, Optional, Sequence

import aiohttp
from loguru import logger

from packrelease.models import NormalizedMod, Registry
from packrelease.models.options import CURSEFORGE_BASE_URL, DEFAULT_USER_AGENT
from packrelease.services.api_client import RegistryClient
from packrelease.services.categories import CategoryNormalizer

# API and Library, Miscellaneous
LIBRARY_PRIMARY_CATEGORIES: FrozenSet[int] = frozenset({421, 425})
# 依赖库允许出现的全部分类: 额外包括 Map and Information, Server Utility
LIBRARY_CATEGORIES: FrozenSet[int] = frozenset({421, 425, 423, 435})


def is_library(data: dict) -> bool:
    """主分类属于依赖库分类，且所有分类都在依赖库分类集合内"""
    if data.get("primaryCategoryId") not in LIBRARY_PRIMARY_CATEGORIES:
        return False
    return all(
        category.get("id") in LIBRARY_CATEGORIES
        for category in data.get("categories") or []
    )


class CurseForgeClient(RegistryClient):
    """CurseForge API 客户端"""

    backend = Registry.CURSEFORGE

    def __init__(
        self,
        api_key: str,
        base_url: str = CURSEFORGE_BASE_URL,
        session: Optional[aiohttp.ClientSession] = None,
        normalizer: Optional[CategoryNormalizer] = None,
        user_agent: str = DEFAULT_USER_AGENT,
    ):
        super().__init__(
            base_url,
            headers={
                "Accept": "application/json",
                "x-api-key": api_key,
                "User-Agent": user_agent,
            },
            session=session,
        )
        self.normalizer = normalizer or CategoryNormalizer()

    def _resolve_mod(self, data: dict) -> NormalizedMod:
        links = data.get("links") or {}
        logo = data.get("logo") or {}
        return NormalizedMod(
            external_id=str(data["id"]),
            name=data["name"],
            slug=data["slug"],
            categories=self.normalizer.normalize(
                category["name"] for category in data.get("categories") or []
            ),
            library=is_library(data),
            popularity_score=data.get("gamePopularityRank"),
            icon=logo.get("thumbnailUrl"),
            website_url=links.get("websiteUrl"),
            summary=data.get("summary"),
        )

    async def fetch_one(self, idx: str) -> NormalizedMod:
        logger.debug(f"从 CurseForge 获取模组 {idx}")
        response = await self._request("GET", f"/mods/{idx}", [str(idx)])
        return self._resolve_mod(response["data"])

    async def fetch_batch(self, ids: Sequence[str]) -> List[NormalizedMod]:
        if not ids:
            return []
        logger.info(f"从 CurseForge 获取 {len(ids)} 个模组")
        response = await self._request(
            "POST",
            "/mods",
            [str(i) for i in ids],
            json={"modIds": [int(i) for i in ids]},
        )
        return [self._resolve_mod(item) for item in response["data"]]
