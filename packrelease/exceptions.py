"""
packrelease 统一异常体系

提供分层的异常结构，支持错误代码、上下文信息和 JSON 序列化。
所有异常原样向调用方传播，核心逻辑内部不做恢复或重试。
"""

from typing import Any, Dict, Iterable, Optional

import aiohttp


class PackReleaseError(Exception):
    """packrelease 基础异常类"""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self._get_default_code()
        self.context = context or {}

    def _get_default_code(self) -> str:
        """获取默认错误代码"""
        return "E000"

    def to_dict(self) -> Dict[str, Any]:
        """将异常转换为字典格式"""
        return {
            "error": True,
            "code": self.code,
            "message": self.message,
            "context": self.context,
            "type": self.__class__.__name__,
        }

    def __str__(self) -> str:
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message


class ConfigError(PackReleaseError):
    """配置相关错误"""

    def _get_default_code(self) -> str:
        return "E100"


class ConfigParseError(ConfigError):
    """配置解析错误"""

    def _get_default_code(self) -> str:
        return "E101"


class ConfigValidationError(ConfigError):
    """配置验证错误"""

    def _get_default_code(self) -> str:
        return "E102"


class APIError(PackReleaseError):
    """API 相关错误"""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        response: Optional[aiohttp.ClientResponse] = None,
    ):
        super().__init__(message, code, context)
        self.response = response
        if response is not None:
            self.context["status_code"] = response.status
            self.context["url"] = str(response.url)

    def _get_default_code(self) -> str:
        return "E200"


class RegistryError(APIError):
    """
    模组仓库拒绝了请求

    携带后端名称与本次请求的全部 ID。批量请求整体失败，不拆分部分结果。
    """

    def __init__(
        self,
        backend: str,
        ids: Iterable[str],
        status: Optional[int] = None,
        response: Optional[aiohttp.ClientResponse] = None,
    ):
        self.backend = backend
        self.ids = [str(i) for i in ids]
        self.status = status
        super().__init__(
            f"{backend} 请求失败 (状态码: {status}, ID: {', '.join(self.ids)})",
            context={"backend": backend, "ids": self.ids},
            response=response,
        )
        if status is not None:
            self.context["status_code"] = status

    def _get_default_code(self) -> str:
        return "E201"


class PackSourceError(PackReleaseError):
    """整合包定义相关错误"""

    def _get_default_code(self) -> str:
        return "E600"


class NoPackDetected(PackSourceError):
    """未找到任何整合包标记文件"""

    def _get_default_code(self) -> str:
        return "E601"


class PackFileMissing(PackSourceError):
    """显式指定的整合包文件不存在"""

    def __init__(self, path: str):
        super().__init__(f"整合包文件不存在: {path}", context={"path": str(path)})
        self.path = str(path)

    def _get_default_code(self) -> str:
        return "E602"


class MissingUpdateInfo(PackSourceError):
    """模组定义文件缺少 update 信息"""

    def __init__(self, path: str):
        super().__init__(
            f"模组定义文件缺少 update 信息: {path}", context={"path": str(path)}
        )
        self.path = str(path)

    def _get_default_code(self) -> str:
        return "E603"


class PackParseError(PackSourceError):
    """整合包文件结构无效"""

    def _get_default_code(self) -> str:
        return "E604"


class ResolutionError(PackReleaseError):
    """模组解析相关错误"""

    def _get_default_code(self) -> str:
        return "E700"


class UnresolvedMod(ResolutionError):
    """批量请求的响应中缺少某些 ID"""

    def __init__(self, backend: str, ids: Iterable[str]):
        self.backend = backend
        self.ids = [str(i) for i in ids]
        super().__init__(
            f"{backend} 未返回以下模组: {', '.join(self.ids)}",
            context={"backend": backend, "ids": self.ids},
        )

    def _get_default_code(self) -> str:
        return "E701"


__all__ = [
    # 基础异常
    "PackReleaseError",
    # 配置异常
    "ConfigError",
    "ConfigParseError",
    "ConfigValidationError",
    # API 异常
    "APIError",
    "RegistryError",
    # 整合包异常
    "PackSourceError",
    "NoPackDetected",
    "PackFileMissing",
    "MissingUpdateInfo",
    "PackParseError",
    # 解析异常
    "ResolutionError",
    "UnresolvedMod",
]
