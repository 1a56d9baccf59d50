"""
模组信息聚合服务

按来源分组模组引用，对每个仓库发起一次批量请求（不同仓库并发），
再与解析器给出的安装版本和依赖库标记合并为最终的模组列表。
"""

import asyncio
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from loguru import logger

from packrelease.exceptions import ConfigValidationError, UnresolvedMod
from packrelease.models import (
    ModReference,
    NormalizedMod,
    ReferenceKind,
    Registry,
    RegistryRef,
    ResolvedMod,
    unique_ordered,
)
from packrelease.services.api_client import RegistryClient
from packrelease.services.packwiz_resolver import group_references, resolve_local

ProgressCallback = Callable[[str, int], None]

LOCAL_KINDS = (ReferenceKind.FILE, ReferenceKind.GITHUB)


def merge_library(override: Optional[bool], inferred: Optional[bool]) -> bool:
    """
    合并依赖库标记

    两者都已知时取逻辑与；只有一方已知时采用该值；都未知时为 False。
    """
    if override is None:
        return bool(inferred)
    if inferred is None:
        return override
    return override and inferred


class Aggregator:
    """模组信息聚合器"""

    def __init__(
        self,
        clients: Mapping[Registry, RegistryClient],
        progress_callback: Optional[ProgressCallback] = None,
    ):
        self.clients = dict(clients)
        self._progress_callback = progress_callback

    def _report(self, stage: str, count: int):
        if self._progress_callback:
            self._progress_callback(stage, count)

    def _client(self, registry: Registry) -> RegistryClient:
        client = self.clients.get(registry)
        if client is None:
            raise ConfigValidationError(
                f"未配置 {registry.value} 客户端", context={"registry": registry.value}
            )
        return client

    async def _fetch_group(
        self, registry: Registry, refs: Sequence[RegistryRef]
    ) -> Tuple[Registry, Dict[str, NormalizedMod]]:
        """对单个仓库发起一次批量请求，并按 ID 重新索引"""
        client = self._client(registry)
        ids = list(unique_ordered(ref.external_id for ref in refs))
        self._report(f"fetch:{registry.value}", len(ids))

        mods = await client.fetch_batch(ids)

        by_id: Dict[str, NormalizedMod] = {}
        for mod in mods:
            by_id.setdefault(mod.external_id, mod)
        for mod in mods:
            by_id.setdefault(mod.slug, mod)

        missing = [idx for idx in ids if idx not in by_id]
        if missing:
            raise UnresolvedMod(registry.value, missing)

        self._report(f"fetched:{registry.value}", len(ids))
        return registry, by_id

    async def aggregate(self, references: Sequence[ModReference]) -> Tuple[ResolvedMod, ...]:
        """
        聚合模组引用

        输出顺序与输入引用顺序一致。任何批量请求失败都会使整个聚合失败。
        """
        groups = group_references(list(references))
        for kind, refs in groups.items():
            logger.debug(f"{kind.value}: {len(refs)} 个模组")

        registry_groups: List[Tuple[Registry, List[RegistryRef]]] = [
            (Registry(kind.value), refs)
            for kind, refs in groups.items()
            if kind not in LOCAL_KINDS and refs
        ]
        fetched = dict(
            await asyncio.gather(
                *(self._fetch_group(registry, refs) for registry, refs in registry_groups)
            )
        )

        resolved = []
        for ref in references:
            if ref.kind in LOCAL_KINDS:
                resolved.append(resolve_local(ref))
                continue
            mod = fetched[ref.registry][ref.external_id]
            resolved.append(
                ResolvedMod.from_normalized(
                    mod,
                    id=ref.external_id,
                    version=ref.installed_version,
                    library=merge_library(ref.library, mod.library),
                )
            )

        self._report("resolved", len(resolved))
        logger.info(f"共解析 {len(resolved)} 个模组")
        return tuple(resolved)
