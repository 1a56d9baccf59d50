"""
packwiz 整合包解析服务

读取 pack.toml -> index.toml -> 每个模组的定义文件，
并按 update 信息将每个条目分类为唯一一种模组引用。
"""

import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import toml
from loguru import logger

from packrelease.exceptions import MissingUpdateInfo, PackFileMissing, PackParseError
from packrelease.models import (
    FileRef,
    GithubRef,
    ModReference,
    ReferenceKind,
    Registry,
    RegistryRef,
    ResolvedMod,
)

MODS_DIR = "mods/"
LOADER_KEYS = ("forge", "neoforge", "fabric", "quilt", "liteloader")


@dataclass(frozen=True)
class PackwizPack:
    """packwiz 解析结果"""

    references: Tuple[ModReference, ...] = field(default_factory=tuple)
    version: Optional[str] = None
    name: Optional[str] = None
    minecraft_version: Optional[str] = None
    mod_loader: Optional[str] = None


def parse_toml(path: str) -> dict:
    try:
        return toml.load(path)
    except FileNotFoundError as e:
        raise PackFileMissing(path) from e
    except (toml.TomlDecodeError, UnicodeDecodeError) as e:
        raise PackParseError(
            f"无法解析 TOML 文件 {path}: {e}", context={"path": path}
        ) from e


def group_references(
    references: List[ModReference],
) -> Dict[ReferenceKind, List[ModReference]]:
    """按引用变体分组，每个引用恰好属于一组"""
    groups: Dict[ReferenceKind, List[ModReference]] = {
        kind: [] for kind in ReferenceKind
    }
    for ref in references:
        groups[ref.kind].append(ref)
    return groups


def resolve_local(ref: ModReference) -> ResolvedMod:
    """无需网络请求的引用直接在本地生成模组信息"""
    if isinstance(ref, FileRef):
        return ResolvedMod(id=ref.file_name, name=ref.file_name, slug=ref.file_name)
    if isinstance(ref, GithubRef):
        return ResolvedMod(
            id=ref.repo_slug,
            name=ref.repo_name,
            slug=ref.repo_slug,
            version=ref.tag,
            website_url=f"https://github.com/{ref.repo_slug}",
        )
    raise TypeError(f"引用需要通过仓库解析: {ref!r}")


class PackwizResolver:
    """packwiz 整合包解析器"""

    def __init__(self, manifest_path: str):
        self.manifest_path = manifest_path

    def resolve(self) -> PackwizPack:
        """解析整个整合包"""
        if not os.path.isfile(self.manifest_path):
            raise PackFileMissing(self.manifest_path)

        pack_dir = os.path.dirname(self.manifest_path)
        manifest = parse_toml(self.manifest_path)

        index_file = (manifest.get("index") or {}).get("file")
        if not index_file:
            raise PackParseError(
                f"{self.manifest_path} 缺少 index.file",
                context={"path": self.manifest_path},
            )

        index_path = os.path.join(pack_dir, index_file)
        if not os.path.isfile(index_path):
            raise PackFileMissing(index_path)

        # index 中的路径相对于 index 文件所在目录，与 packwiz 本身一致
        index_dir = os.path.dirname(index_path)
        index = parse_toml(index_path)
        files = index.get("files")
        if not isinstance(files, list):
            raise PackParseError(
                f"{index_path} 缺少 files 列表", context={"path": index_path}
            )

        references = tuple(
            self.resolve_reference(os.path.join(index_dir, entry["file"]))
            for entry in files
            if str(entry.get("file", "")).startswith(MODS_DIR)
        )
        logger.info(f"packwiz 整合包中发现 {len(references)} 个模组")

        versions = manifest.get("versions") or {}
        mod_loader = next((key for key in LOADER_KEYS if key in versions), None)

        return PackwizPack(
            references=references,
            version=_optional_str(manifest.get("version")),
            name=_optional_str(manifest.get("name")),
            minecraft_version=_optional_str(versions.get("minecraft")),
            mod_loader=mod_loader,
        )

    def resolve_reference(self, path: str) -> ModReference:
        """
        将单个模组文件分类为模组引用

        非 .toml 文件视为直接放入的模组文件；
        .toml 定义按 curseforge -> modrinth -> github 的优先级检查 update 信息。
        """
        if os.path.splitext(path)[1] != ".toml":
            return FileRef(file_name=os.path.basename(path))

        definition = parse_toml(path)
        update = definition.get("update") or {}

        try:
            return self._classify(path, update)
        except KeyError as e:
            raise PackParseError(
                f"{path} 的 update 信息缺少字段 {e}", context={"path": path}
            ) from e

    def _classify(self, path: str, update: dict) -> ModReference:
        if "curseforge" in update:
            data = update["curseforge"]
            project_id = str(data["project-id"])
            if not project_id.isdigit():
                raise PackParseError(
                    f"{path} 的 project-id 不是数字: {project_id}",
                    context={"path": path},
                )
            return RegistryRef(
                registry=Registry.CURSEFORGE,
                external_id=project_id,
                installed_version=_optional_str(data.get("file-id")),
            )

        if "modrinth" in update:
            data = update["modrinth"]
            return RegistryRef(
                registry=Registry.MODRINTH,
                external_id=str(data["mod-id"]),
                installed_version=_optional_str(data.get("version")),
            )

        if "github" in update:
            data = update["github"]
            return GithubRef(repo_slug=data["slug"], tag=str(data["tag"]))

        raise MissingUpdateInfo(path)


def _optional_str(value) -> Optional[str]:
    return None if value is None else str(value)
