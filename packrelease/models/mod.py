"""
模组数据模型

定义仓库无关的标准化模组信息，以及最终导出的整合包结构。
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Tuple


def unique_ordered(items: Iterable[str]) -> Tuple[str, ...]:
    """去重并保留首次出现的顺序"""
    return tuple(dict.fromkeys(items))


@dataclass(frozen=True)
class NormalizedMod:
    """
    标准化模组信息。

    categories 不含重复项并保持首次出现顺序；
    library 为 None 表示该仓库无法推断依赖库属性。
    """

    external_id: str
    name: str
    slug: str
    categories: Tuple[str, ...] = ()
    library: Optional[bool] = None
    popularity_score: Optional[float] = None
    icon: Optional[str] = None
    website_url: Optional[str] = None
    summary: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "categories", unique_ordered(self.categories))


@dataclass(frozen=True)
class ResolvedMod:
    """整合包中的一个模组，version 为实际安装的版本"""

    id: str
    name: str
    slug: str
    categories: Tuple[str, ...] = ()
    library: bool = False
    version: Optional[str] = None
    popularity_score: Optional[float] = None
    icon: Optional[str] = None
    website_url: Optional[str] = None
    summary: Optional[str] = None

    @classmethod
    def from_normalized(
        cls,
        mod: NormalizedMod,
        id: str,
        version: Optional[str],
        library: bool,
    ) -> "ResolvedMod":
        return cls(
            id=id,
            name=mod.name,
            slug=mod.slug,
            categories=mod.categories,
            library=library,
            version=version,
            popularity_score=mod.popularity_score,
            icon=mod.icon,
            website_url=mod.website_url,
            summary=mod.summary,
        )

    def to_dict(self) -> Dict[str, Any]:
        """转换为发布接口使用的字典格式，省略未设置的可选字段"""
        data: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
            "categories": list(self.categories),
            "library": self.library,
        }
        optional = {
            "version": self.version,
            "popularityScore": self.popularity_score,
            "icon": self.icon,
            "websiteUrl": self.website_url,
            "summary": self.summary,
        }
        data.update({k: v for k, v in optional.items() if v is not None})
        return data


@dataclass(frozen=True)
class ImportedPack:
    """整合包导入结果"""

    mods: Tuple[ResolvedMod, ...] = field(default_factory=tuple)
    version: Optional[str] = None
    name: Optional[str] = None
    minecraft_version: Optional[str] = None
    mod_loader: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"mods": [mod.to_dict() for mod in self.mods]}
        optional = {
            "version": self.version,
            "name": self.name,
            "minecraftVersion": self.minecraft_version,
            "modLoader": self.mod_loader,
        }
        data.update({k: v for k, v in optional.items() if v is not None})
        return data
