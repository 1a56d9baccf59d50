"""
主协调器

整合来源检测、整合包解析、仓库客户端与聚合器，完成一次整合包导入。
"""

from typing import Dict, Optional

from loguru import logger

from packrelease.models import ImportedPack, PackOptions, ReferenceKind, Registry
from packrelease.services import (
    Aggregator,
    CurseForgeClient,
    InstanceResolver,
    ModrinthClient,
    PackwizResolver,
    RegistryClient,
    SourceKind,
    detect_source,
)
from packrelease.services.aggregator import ProgressCallback


class PackImporter:
    """
    整合包导入协调器

    clients 可由调用方注入；未注入时根据配置创建，且只创建实际需要的客户端。
    由本类创建的客户端在 run 结束时关闭。
    """

    def __init__(
        self,
        options: PackOptions,
        clients: Optional[Dict[Registry, RegistryClient]] = None,
        cwd: Optional[str] = None,
        progress_callback: Optional[ProgressCallback] = None,
    ):
        self.options = options
        self.cwd = cwd
        self.progress_callback = progress_callback
        self._injected = dict(clients or {})
        self._owned: Dict[Registry, RegistryClient] = {}

    def _create_client(self, registry: Registry) -> RegistryClient:
        if registry is Registry.CURSEFORGE:
            return CurseForgeClient(
                api_key=self.options.require_curseforge_token(),
                base_url=self.options.curseforge_api_url,
                user_agent=self.options.user_agent,
            )
        return ModrinthClient(
            token=self.options.modrinth_token,
            base_url=self.options.modrinth_api_url,
            user_agent=self.options.user_agent,
        )

    def _clients_for(self, references) -> Dict[Registry, RegistryClient]:
        needed = {
            Registry(ref.kind.value)
            for ref in references
            if ref.kind in (ReferenceKind.CURSEFORGE, ReferenceKind.MODRINTH)
        }
        clients: Dict[Registry, RegistryClient] = {}
        for registry in needed:
            if registry in self._injected:
                clients[registry] = self._injected[registry]
            else:
                client = self._create_client(registry)
                self._owned[registry] = client
                clients[registry] = client
        return clients

    async def run(self) -> ImportedPack:
        """运行完整的导入流程"""
        source = detect_source(self.options, self.cwd)
        logger.info(f"检测到整合包来源: {source.kind.value} ({source.path})")

        if source.kind is SourceKind.CURSEFORGE_INSTANCE:
            pack = InstanceResolver(source.path).resolve()
        else:
            pack = PackwizResolver(source.path).resolve()

        try:
            aggregator = Aggregator(
                self._clients_for(pack.references),
                progress_callback=self.progress_callback,
            )
            mods = await aggregator.aggregate(pack.references)
        finally:
            await self.close()

        return ImportedPack(
            mods=mods,
            version=pack.version,
            name=pack.name,
            minecraft_version=pack.minecraft_version,
            mod_loader=pack.mod_loader,
        )

    async def close(self):
        """关闭由本类创建的客户端"""
        for client in self._owned.values():
            await client.close()
        self._owned.clear()


async def parse_pack(
    options: PackOptions,
    cwd: Optional[str] = None,
    progress_callback: Optional[ProgressCallback] = None,
) -> ImportedPack:
    """检测并导入当前整合包"""
    return await PackImporter(
        options, cwd=cwd, progress_callback=progress_callback
    ).run()
