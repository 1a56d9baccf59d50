"""
CurseForge 实例快照解析服务

从 minecraftinstance.json 中筛选真正的模组，并计算依赖库标记。
"""

import json
import os
from dataclasses import dataclass, field
from typing import Dict, Optional, Set, Tuple

from loguru import logger

from packrelease.exceptions import PackFileMissing, PackParseError
from packrelease.models import (
    InstalledAddon,
    MinecraftInstance,
    Registry,
    RegistryRef,
)

# 真正的模组 JAR 中包含此目录，资源包和配置包没有
MOD_MODULE_MARKER = "META-INF"


@dataclass(frozen=True)
class InstancePack:
    """实例快照解析结果"""

    references: Tuple[RegistryRef, ...] = field(default_factory=tuple)
    name: Optional[str] = None
    minecraft_version: Optional[str] = None
    mod_loader: Optional[str] = None
    version: Optional[str] = None


def is_mod(addon: InstalledAddon) -> bool:
    return any(
        module.foldername == MOD_MODULE_MARKER
        for module in addon.installed_file.modules
    )


def dependents(instance: MinecraftInstance) -> Dict[int, Set[int]]:
    """依赖 ID -> 声明该依赖的其他插件 ID"""
    result: Dict[int, Set[int]] = {}
    for addon in instance.installed_addons:
        for dep in addon.installed_file.dependencies:
            if dep.addon_id != addon.addon_id:
                result.setdefault(dep.addon_id, set()).add(addon.addon_id)
    return result


class InstanceResolver:
    """实例快照解析器"""

    def __init__(self, snapshot_path: str):
        self.snapshot_path = snapshot_path

    def load(self) -> MinecraftInstance:
        if not os.path.isfile(self.snapshot_path):
            raise PackFileMissing(self.snapshot_path)
        try:
            with open(self.snapshot_path, encoding="utf-8") as f:
                data = json.load(f)
            return MinecraftInstance.from_dict(data)
        except (json.JSONDecodeError, KeyError, TypeError, AttributeError) as e:
            raise PackParseError(
                f"无法解析实例快照 {self.snapshot_path}: {e}",
                context={"path": self.snapshot_path},
            ) from e

    def resolve(self) -> InstancePack:
        return self.resolve_instance(self.load())

    def resolve_instance(self, instance: MinecraftInstance) -> InstancePack:
        """将快照转换为 CurseForge 模组引用"""
        required_by = dependents(instance)
        references = []
        for addon in instance.installed_addons:
            if not is_mod(addon):
                logger.debug(f"插件 {addon.addon_id} 不是模组，跳过")
                continue
            references.append(
                RegistryRef(
                    registry=Registry.CURSEFORGE,
                    external_id=str(addon.addon_id),
                    installed_version=addon.installed_file.installed_version,
                    library=bool(required_by.get(addon.addon_id)),
                )
            )

        logger.info(
            f"实例快照中发现 {len(references)} 个模组 "
            f"(共 {len(instance.installed_addons)} 个插件)"
        )

        loader = instance.base_mod_loader
        return InstancePack(
            references=tuple(references),
            name=instance.name,
            minecraft_version=loader.minecraft_version,
            mod_loader=loader.name or None,
        )
