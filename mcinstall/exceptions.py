"""
MCInstall 统一异常体系

提供分层的异常结构，支持错误代码、上下文信息和字典序列化。
"""

from typing import Any, Dict, Optional
import aiohttp


class InstallerError(Exception):
    """MCInstall 基础异常类"""

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


class ConfigError(InstallerError):
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


class NetworkError(InstallerError):
    """元数据请求失败（HTTP 错误、超时、连接失败）"""

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


class MetadataFormatError(NetworkError):
    """元数据缺少字段或格式错误"""

    def _get_default_code(self) -> str:
        return "E201"


class DownloadError(InstallerError):
    """下载相关错误"""

    def _get_default_code(self) -> str:
        return "E300"


class DownloadExhaustedError(DownloadError):
    """所有下载尝试均失败"""

    def _get_default_code(self) -> str:
        return "E301"


class DownloadChecksumError(DownloadError):
    """下载校验错误"""

    def _get_default_code(self) -> str:
        return "E302"


class InputError(InstallerError):
    """用户输入错误"""

    def _get_default_code(self) -> str:
        return "E400"


class InvalidNameError(InputError):
    """服务器名称为空"""

    def _get_default_code(self) -> str:
        return "E401"


class InvalidChoiceError(InputError):
    """无法识别的服务端类型选择"""

    def _get_default_code(self) -> str:
        return "E402"


class EulaNotAcceptedError(InputError):
    """用户拒绝 EULA"""

    def _get_default_code(self) -> str:
        return "E403"


class FileWriteError(InstallerError):
    """文件或目录写入失败"""

    def _get_default_code(self) -> str:
        return "E500"


class LaunchError(InstallerError):
    """服务器进程启动失败"""

    def _get_default_code(self) -> str:
        return "E600"


__all__ = [
    # 基础异常
    "InstallerError",
    # 配置异常
    "ConfigError",
    "ConfigParseError",
    "ConfigValidationError",
    # 网络异常
    "NetworkError",
    "MetadataFormatError",
    # 下载异常
    "DownloadError",
    "DownloadExhaustedError",
    "DownloadChecksumError",
    # 输入异常
    "InputError",
    "InvalidNameError",
    "InvalidChoiceError",
    "EulaNotAcceptedError",
    # 文件与进程异常
    "FileWriteError",
    "LaunchError",
]
