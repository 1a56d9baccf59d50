"""
CurseForge 实例快照模型

对应安装器生成的 minecraftinstance.json，只保留解析所需的字段。
"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class BaseModLoader:
    """基础模组加载器"""

    name: str
    minecraft_version: Optional[str] = None
    forge_version: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "BaseModLoader":
        return cls(
            name=data.get("name", ""),
            minecraft_version=data.get("minecraftVersion"),
            forge_version=data.get("forgeVersion"),
        )


@dataclass(frozen=True)
class AddonModule:
    foldername: str


@dataclass(frozen=True)
class AddonDependency:
    addon_id: int


@dataclass(frozen=True)
class InstalledFile:
    """已安装的文件信息"""

    id: int
    file_name: Optional[str] = None
    display_name: Optional[str] = None
    category_section_package_type: Optional[int] = None
    dependencies: List[AddonDependency] = field(default_factory=list)
    modules: List[AddonModule] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "InstalledFile":
        return cls(
            id=data["id"],
            file_name=data.get("fileName") or None,
            display_name=data.get("displayName") or None,
            category_section_package_type=data.get("categorySectionPackageType"),
            dependencies=[
                AddonDependency(addon_id=dep["addonId"])
                for dep in data.get("dependencies") or []
            ],
            modules=[
                AddonModule(foldername=module.get("foldername", ""))
                for module in data.get("modules") or []
            ],
        )

    @property
    def installed_version(self) -> Optional[str]:
        return self.file_name or self.display_name


@dataclass(frozen=True)
class InstalledAddon:
    addon_id: int
    installed_file: InstalledFile

    @classmethod
    def from_dict(cls, data: dict) -> "InstalledAddon":
        return cls(
            addon_id=data["addonID"],
            installed_file=InstalledFile.from_dict(data["installedFile"]),
        )


@dataclass(frozen=True)
class MinecraftInstance:
    """实例快照"""

    base_mod_loader: BaseModLoader
    installed_addons: List[InstalledAddon]
    name: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "MinecraftInstance":
        return cls(
            name=data.get("name"),
            base_mod_loader=BaseModLoader.from_dict(data.get("baseModLoader") or {}),
            installed_addons=[
                InstalledAddon.from_dict(addon)
                for addon in data.get("installedAddons") or []
            ],
        )
