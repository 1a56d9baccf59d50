"""
整合包来源检测

根据显式指定的路径或工作目录中的标记文件，选择唯一一种整合包来源。
"""

import os
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from packrelease.exceptions import NoPackDetected, PackFileMissing
from packrelease.models import PackOptions

INSTANCE_MARKER = "minecraftinstance.json"
PACKWIZ_MARKER = "pack.toml"


class SourceKind(Enum):
    CURSEFORGE_INSTANCE = "curseforge-instance"
    PACKWIZ = "packwiz"


@dataclass(frozen=True)
class PackSource:
    kind: SourceKind
    path: str


def _pick(override: Optional[str], marker: str, cwd: str) -> Optional[str]:
    if override:
        path = os.path.join(cwd, override)
        if not os.path.isfile(path):
            raise PackFileMissing(path)
        return path
    default = os.path.join(cwd, marker)
    if os.path.isfile(default):
        return default
    return None


def detect_source(options: PackOptions, cwd: Optional[str] = None) -> PackSource:
    """
    检测整合包来源

    CurseForge 实例优先于 packwiz，来源互斥，不会合并。
    """
    cwd = cwd or os.getcwd()

    path = _pick(options.curseforge_pack_file, INSTANCE_MARKER, cwd)
    if path:
        return PackSource(SourceKind.CURSEFORGE_INSTANCE, path)

    path = _pick(options.packwiz_file, PACKWIZ_MARKER, cwd)
    if path:
        return PackSource(SourceKind.PACKWIZ, path)

    raise NoPackDetected(
        f"未在 {cwd} 中检测到整合包 ({INSTANCE_MARKER} 或 {PACKWIZ_MARKER})",
        context={"cwd": cwd},
    )
