"""
模组引用模型

整合包定义中的每个模组条目在解析时被构造为唯一一种引用变体，
下游只按 kind 分派，不再检查原始字段。
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union


class Registry(Enum):
    """模组仓库"""

    CURSEFORGE = "curseforge"
    MODRINTH = "modrinth"


class ReferenceKind(Enum):
    """引用变体标签"""

    FILE = "file"
    CURSEFORGE = "curseforge"
    MODRINTH = "modrinth"
    GITHUB = "github"


@dataclass(frozen=True)
class FileRef:
    """直接放在 mods 目录下的文件"""

    file_name: str
    kind: ReferenceKind = field(default=ReferenceKind.FILE, init=False)


@dataclass(frozen=True)
class RegistryRef:
    """
    指向模组仓库的引用。

    installed_version 为整合包中实际安装的版本（文件 ID、版本号或文件名），
    library 为解析器给出的依赖库判断，None 表示解析器无法判断。
    """

    registry: Registry
    external_id: str
    installed_version: Optional[str] = None
    library: Optional[bool] = None

    @property
    def kind(self) -> ReferenceKind:
        return ReferenceKind(self.registry.value)


@dataclass(frozen=True)
class GithubRef:
    """通过 GitHub Release 更新的模组"""

    repo_slug: str
    tag: str
    kind: ReferenceKind = field(default=ReferenceKind.GITHUB, init=False)

    @property
    def repo_name(self) -> str:
        return self.repo_slug.split("/")[-1]


ModReference = Union[FileRef, RegistryRef, GithubRef]
