"""
packrelease 服务层

包含业务逻辑服务：仓库客户端、分类标准化、整合包解析、来源检测与聚合。
"""

from packrelease.services.api_client import RegistryClient
from packrelease.services.categories import CategoryNormalizer, CategoryTag
from packrelease.services.curseforge import CurseForgeClient
from packrelease.services.modrinth import ModrinthClient
from packrelease.services.packwiz_resolver import PackwizPack, PackwizResolver
from packrelease.services.instance_resolver import InstancePack, InstanceResolver
from packrelease.services.detector import PackSource, SourceKind, detect_source
from packrelease.services.aggregator import Aggregator

__all__ = [
    "RegistryClient",
    "CategoryNormalizer",
    "CategoryTag",
    "CurseForgeClient",
    "ModrinthClient",
    "PackwizPack",
    "PackwizResolver",
    "InstancePack",
    "InstanceResolver",
    "PackSource",
    "SourceKind",
    "detect_source",
    "Aggregator",
]
