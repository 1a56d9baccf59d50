"""
配置模型

整合包导入所需的令牌、文件路径和 API 地址。
"""

import os
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Mapping, Optional

from packrelease.exceptions import ConfigParseError, ConfigValidationError

CURSEFORGE_BASE_URL = "https://api.curseforge.com/v1"
MODRINTH_BASE_URL = "https://api.modrinth.com/v2"
DEFAULT_USER_AGENT = "packrelease/0.1.0"

ENV_MAPPING = {
    "CURSEFORGE_TOKEN": "curseforge_token",
    "MODRINTH_TOKEN": "modrinth_token",
    "CURSEFORGE_PACK_FILE": "curseforge_pack_file",
    "PACKWIZ_FILE": "packwiz_file",
}


@dataclass(frozen=True)
class PackOptions:
    """整合包导入配置"""

    curseforge_token: Optional[str] = None
    modrinth_token: Optional[str] = None
    curseforge_pack_file: Optional[str] = None
    packwiz_file: Optional[str] = None
    curseforge_api_url: str = CURSEFORGE_BASE_URL
    modrinth_api_url: str = MODRINTH_BASE_URL
    user_agent: str = DEFAULT_USER_AGENT

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PackOptions":
        """
        从配置字典创建，键名可使用 kebab-case 或 snake_case。

        未知键会被拒绝，避免拼写错误被静默忽略。
        """
        known = {f.name for f in fields(cls)}
        values: Dict[str, Any] = {}
        for key, value in data.items():
            name = str(key).replace("-", "_")
            if name not in known:
                raise ConfigParseError(f"未知的配置项: {key}", context={"key": key})
            if value is not None and not isinstance(value, str):
                raise ConfigParseError(
                    f"配置项 {key} 必须为字符串", context={"key": key}
                )
            values[name] = value
        return cls(**values)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "PackOptions":
        """从环境变量创建"""
        if environ is None:
            environ = os.environ
        values = {
            attr: environ[var] for var, attr in ENV_MAPPING.items() if environ.get(var)
        }
        return cls(**values)

    def merged(self, other: "PackOptions") -> "PackOptions":
        """合并配置，other 中显式设置的值优先"""
        defaults = PackOptions()
        overrides = {
            f.name: getattr(other, f.name)
            for f in fields(other)
            if getattr(other, f.name) != getattr(defaults, f.name)
        }
        return replace(self, **overrides)

    def require_curseforge_token(self) -> str:
        if not self.curseforge_token:
            raise ConfigValidationError("缺少 CurseForge API Token")
        return self.curseforge_token
