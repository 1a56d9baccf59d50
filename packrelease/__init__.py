"""
packrelease - 整合包发布工具

检测整合包来源 (packwiz / CurseForge 实例)，解析模组列表，
并从 CurseForge 与 Modrinth 获取标准化的模组信息。
"""

__version__ = "0.1.0"

from packrelease.models import ImportedPack, PackOptions, ResolvedMod
from packrelease.orchestrator import PackImporter, parse_pack

__all__ = [
    "__version__",
    "ImportedPack",
    "PackOptions",
    "ResolvedMod",
    "PackImporter",
    "parse_pack",
]
