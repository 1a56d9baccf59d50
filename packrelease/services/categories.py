"""
分类标准化服务

将各仓库不一致的分类名称映射为统一的分类标签。
"""

import re
from enum import Enum
from typing import Dict, Iterable, List, Tuple, Union

from packrelease.models.mod import unique_ordered


class CategoryTag(Enum):
    """替换表中的特殊标签"""

    # 同时保留标准化后的原始名称
    KEEP_ORIGINAL = "keep-original"


Replacement = Union[str, CategoryTag]

_SEPARATORS = re.compile(r"[\s,]+")

# 标准化名称 -> 标签列表，空列表表示丢弃该分类
CATEGORY_REPLACEMENTS: Dict[str, Tuple[Replacement, ...]] = {
    "api-and-library": ("library",),
    "adventure-and-rpg": ("adventure",),
    "armor-tools-and-weapons": ("equipment",),
    "cosmetic": ("decoration",),
    "world-gen": ("worldgen",),
    "biomes": ("worldgen",),
    "dimensions": ("worldgen",),
    "structures": ("worldgen",),
    "ores-and-resources": ("worldgen", "technology"),
    "farming": ("food",),
    "processing": ("technology",),
    "redstone": ("technology",),
    "genetics": ("technology",),
    "energy": ("technology",),
    "player-transport": ("transportation",),
    "energy-fluid-and-item-transport": ("technology", "transportation"),
    "map-and-information": ("utility",),
    "server-utility": (CategoryTag.KEEP_ORIGINAL, "utility"),
    "utility-&-qol": ("utility",),
    "performance": ("optimization",),
    "education": (CategoryTag.KEEP_ORIGINAL, "utility"),
    "miscellaneous": (),
    "addons": (),
}


def normalize_label(label: str) -> str:
    """转为小写，并将连续的空白和逗号替换为单个连字符"""
    return _SEPARATORS.sub("-", label.strip().lower())


class CategoryNormalizer:
    """分类标准化器"""

    def __init__(self, replacements: Dict[str, Tuple[Replacement, ...]] = None):
        self.replacements = (
            CATEGORY_REPLACEMENTS if replacements is None else replacements
        )

    def map_label(self, label: str) -> List[str]:
        """将单个原始分类映射为零个或多个标签"""
        normalized = normalize_label(label)
        if not normalized:
            return []
        if normalized not in self.replacements:
            return [normalized]
        return [
            normalized if tag is CategoryTag.KEEP_ORIGINAL else tag
            for tag in self.replacements[normalized]
        ]

    def normalize(self, labels: Iterable[str]) -> Tuple[str, ...]:
        """映射一个模组的全部分类，去重并保留首次出现顺序"""
        return unique_ordered(tag for label in labels for tag in self.map_label(label))
