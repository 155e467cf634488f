"""
EchoRegistry 统一异常体系

提供分层的异常结构，支持错误代码、上下文信息和 JSON 序列化。
"""

from typing import Any, Dict, Optional


class EchoRegistryError(Exception):
    """EchoRegistry 基础异常类"""

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


class ConfigError(EchoRegistryError):
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


class APIError(EchoRegistryError):
    """上游 API 相关错误"""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        status: Optional[int] = None,
        url: Optional[str] = None,
    ):
        super().__init__(message, code, context)
        self.status = status
        self.url = url
        if status is not None:
            self.context["status_code"] = status
        if url:
            self.context["url"] = url

    def _get_default_code(self) -> str:
        return "E200"

    @classmethod
    def from_status(cls, message: str, status: int, url: str) -> "APIError":
        """根据 HTTP 状态码选择最具体的异常类型"""
        if status == 404:
            error_cls = APINotFoundError
        elif status == 408:
            error_cls = APITimeoutError
        elif status == 429:
            error_cls = APIRateLimitError
        elif status >= 500:
            error_cls = APIServerError
        else:
            error_cls = APIError
        return error_cls(message, status=status, url=url)


class APINotFoundError(APIError):
    """API 资源不存在"""

    def _get_default_code(self) -> str:
        return "E404"


class APITimeoutError(APIError):
    """API 请求超时"""

    def _get_default_code(self) -> str:
        return "E408"


class APIRateLimitError(APIError):
    """API 速率限制"""

    def _get_default_code(self) -> str:
        return "E429"


class APIServerError(APIError):
    """API 服务器错误"""

    def _get_default_code(self) -> str:
        return "E500"


class ResolutionError(EchoRegistryError):
    """版本解析相关错误"""

    def _get_default_code(self) -> str:
        return "E300"


class NoMatchingVersionError(ResolutionError):
    """上游数据中没有符合条件的版本"""

    def _get_default_code(self) -> str:
        return "E301"


class FallbackExhaustedError(ResolutionError):
    """回退链中所有候选版本都失败"""

    def _get_default_code(self) -> str:
        return "E302"


class ValidationError(EchoRegistryError):
    """请求参数验证错误"""

    def _get_default_code(self) -> str:
        return "E700"


__all__ = [
    # 基础异常
    "EchoRegistryError",
    # 配置异常
    "ConfigError",
    "ConfigParseError",
    "ConfigValidationError",
    # API 异常
    "APIError",
    "APINotFoundError",
    "APITimeoutError",
    "APIRateLimitError",
    "APIServerError",
    # 解析异常
    "ResolutionError",
    "NoMatchingVersionError",
    "FallbackExhaustedError",
    # 验证异常
    "ValidationError",
]
