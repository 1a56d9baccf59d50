from __future__ import annotations

import json
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

import pytest

from packrelease.models import NormalizedMod, Registry
from packrelease.services.api_client import RegistryClient


class FakeResponse:
    def __init__(self, status: int, payload, url: str):
        self.status = status
        self.payload = payload
        self.url = url

    async def json(self):
        return self.payload

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False


class FakeSession:
    """Stands in for aiohttp.ClientSession; responder maps a request to (status, payload)."""

    def __init__(self, responder: Callable[..., tuple]):
        self.responder = responder
        self.calls: List[dict] = []
        self.closed = False

    def request(self, method, url, params=None, json=None, headers=None):
        call = {"method": method, "url": url, "params": params, "json": json, "headers": headers}
        self.calls.append(call)
        status, payload = self.responder(**call)
        return FakeResponse(status, payload, url)

    async def close(self):
        self.closed = True


class FakeRegistryClient(RegistryClient):
    def __init__(self, backend: Registry, mods: Sequence[NormalizedMod], fail: Optional[Exception] = None):
        super().__init__("http://registry.invalid")
        self.backend = backend
        self.mods: Dict[str, NormalizedMod] = {mod.external_id: mod for mod in mods}
        self.fail = fail
        self.batches: List[List[str]] = []
        self.closed = False

    async def fetch_one(self, idx):
        return self.mods[idx]

    async def fetch_batch(self, ids):
        self.batches.append(list(ids))
        if self.fail:
            raise self.fail
        # reversed to make sure callers re-key by id
        return [self.mods[i] for i in reversed(ids) if i in self.mods]

    async def close(self):
        self.closed = True


def write_toml(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def packwiz_pack(tmp_path: Path) -> Path:
    """A pack with one curseforge mod (project 10, file 20) and one bare jar."""
    write_toml(
        tmp_path / "pack.toml",
        'name = "Test Pack"\n'
        'version = "1.2.3"\n'
        '[index]\nfile = "index.toml"\n'
        '[versions]\nminecraft = "1.20.1"\nforge = "47.2.0"\n',
    )
    write_toml(
        tmp_path / "index.toml",
        '[[files]]\nfile = "mods/a.toml"\nmetafile = true\n'
        '[[files]]\nfile = "mods/b.jar"\n'
        '[[files]]\nfile = "config/c.toml"\n',
    )
    write_toml(
        tmp_path / "mods" / "a.toml",
        'name = "Mod A"\nfilename = "a.jar"\n'
        "[update.curseforge]\nproject-id = 10\nfile-id = 20\n",
    )
    (tmp_path / "mods" / "b.jar").write_bytes(b"PK")
    return tmp_path / "pack.toml"


def addon(addon_id: int, file_name: Optional[str] = "mod.jar", modules=("META-INF",), dependencies=(), display_name=None) -> dict:
    installed = {
        "id": addon_id * 100,
        "categorySectionPackageType": 6,
        "dependencies": [{"addonId": dep, "type": 3} for dep in dependencies],
        "modules": [{"foldername": name, "fingerprint": 1} for name in modules],
    }
    if file_name is not None:
        installed["fileName"] = file_name
    if display_name is not None:
        installed["displayName"] = display_name
    return {"addonID": addon_id, "installedFile": installed}


def write_instance(path: Path, addons: List[dict]) -> Path:
    data = {
        "name": "Instance Pack",
        "baseModLoader": {"name": "forge-47.2.0", "minecraftVersion": "1.20.1", "forgeVersion": "47.2.0"},
        "installedAddons": addons,
    }
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def cf_payload(mod_id: int, name: str = "Mod", primary: int = 406, categories=((406, "World Gen"),)) -> dict:
    return {
        "id": mod_id,
        "name": name,
        "slug": name.lower().replace(" ", "-"),
        "summary": f"{name} summary",
        "primaryCategoryId": primary,
        "categories": [{"id": cid, "name": cname} for cid, cname in categories],
        "gamePopularityRank": 42,
        "links": {"websiteUrl": f"https://www.curseforge.com/minecraft/mc-mods/{mod_id}"},
        "logo": {"thumbnailUrl": f"https://media.forgecdn.net/{mod_id}.png"},
    }


def mr_payload(project_id: str, slug: str, categories=("utility",)) -> dict:
    return {
        "id": project_id,
        "slug": slug,
        "title": slug.title(),
        "description": f"{slug} description",
        "categories": list(categories),
        "downloads": 1000,
        "icon_url": f"https://cdn.modrinth.com/{project_id}.png",
        "project_type": "mod",
    }
