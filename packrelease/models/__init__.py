"""
packrelease 数据模型包

包含模组引用、标准化模组、实例快照和配置模型定义。
"""

from packrelease.models.reference import (
    Registry,
    ReferenceKind,
    FileRef,
    RegistryRef,
    GithubRef,
    ModReference,
)
from packrelease.models.mod import (
    NormalizedMod,
    ResolvedMod,
    ImportedPack,
    unique_ordered,
)
from packrelease.models.instance import (
    BaseModLoader,
    AddonModule,
    AddonDependency,
    InstalledFile,
    InstalledAddon,
    MinecraftInstance,
)
from packrelease.models.options import PackOptions

__all__ = [
    # 引用模型
    "Registry",
    "ReferenceKind",
    "FileRef",
    "RegistryRef",
    "GithubRef",
    "ModReference",
    # 模组模型
    "NormalizedMod",
    "ResolvedMod",
    "ImportedPack",
    "unique_ordered",
    # 实例快照模型
    "BaseModLoader",
    "AddonModule",
    "AddonDependency",
    "InstalledFile",
    "InstalledAddon",
    "MinecraftInstance",
    # 配置模型
    "PackOptions",
]
