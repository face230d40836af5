"""
配置模型

定义安装器配置的数据类，支持从字典构建与校验。
"""

from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional

from mcinstall.exceptions import ConfigValidationError
from mcinstall.models.api import ConfigEntry


DEFAULT_PROPERTIES: List[tuple] = [
    ("motd", "A Minecraft Server"),
    ("max-players", "20"),
    ("difficulty", "easy"),
    ("gamemode", "survival"),
    ("pvp", "true"),
    ("spawn-protection", "16"),
    ("allow-nether", "true"),
    ("enable-command-block", "false"),
    ("server-port", "25565"),
    ("server-ip", ""),
]


@dataclass
class EndpointConfig:
    """元数据与下载地址"""

    vanilla_manifest_url: str = (
        "https://piston-meta.mojang.com/mc/game/version_manifest_v2.json"
    )
    paper_api_url: str = "https://api.papermc.io/v2/projects/paper"
    forge_promotions_url: str = (
        "https://files.minecraftforge.net/net/minecraftforge/forge/promotions_slim.json"
    )
    forge_maven_url: str = "https://maven.minecraftforge.net/net/minecraftforge/forge"


@dataclass
class DownloadConfig:
    """下载配置"""

    max_attempts: int = 3
    retry_delay: float = 2.0
    timeout: float = 30.0
    verify_checksum: bool = True


@dataclass
class LaunchConfig:
    """服务器启动配置"""

    java: str = "java"
    jvm_args: List[str] = field(default_factory=lambda: ["-Xmx1024M", "-Xms1024M"])
    server_args: List[str] = field(default_factory=lambda: ["nogui"])


@dataclass
class InstallerConfig:
    """安装器总配置"""

    endpoints: EndpointConfig = field(default_factory=EndpointConfig)
    download: DownloadConfig = field(default_factory=DownloadConfig)
    launch: LaunchConfig = field(default_factory=LaunchConfig)
    forge_minecraft_version: str = "1.20.1"
    paper_allow_prerelease: bool = False
    properties: List[ConfigEntry] = field(
        default_factory=lambda: [ConfigEntry(k, v) for k, v in DEFAULT_PROPERTIES]
    )

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "InstallerConfig":
        """从字典创建配置，未出现的字段使用默认值"""
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigValidationError("配置根节点必须是字典")

        config = cls(
            endpoints=_build_section(EndpointConfig, data.get("endpoints"), "endpoints"),
            download=_build_section(DownloadConfig, data.get("download"), "download"),
            launch=_build_section(LaunchConfig, data.get("launch"), "launch"),
        )

        if "forge_minecraft_version" in data:
            config.forge_minecraft_version = str(data["forge_minecraft_version"])
        if "paper_allow_prerelease" in data:
            config.paper_allow_prerelease = _coerce(
                data["paper_allow_prerelease"], False, "paper_allow_prerelease"
            )
        if "properties" in data:
            config.properties = _parse_properties(data["properties"])

        config.validate()
        return config

    def validate(self) -> None:
        """校验数值范围"""
        if self.download.max_attempts < 1:
            raise ConfigValidationError(
                "download.max_attempts 必须大于 0",
                context={"max_attempts": self.download.max_attempts},
            )
        if self.download.retry_delay < 0:
            raise ConfigValidationError(
                "download.retry_delay 不能为负数",
                context={"retry_delay": self.download.retry_delay},
            )
        if self.download.timeout <= 0:
            raise ConfigValidationError(
                "download.timeout 必须大于 0",
                context={"timeout": self.download.timeout},
            )
        if not self.forge_minecraft_version:
            raise ConfigValidationError("forge_minecraft_version 不能为空")


def _build_section(section_cls, raw: Any, name: str):
    if raw is None:
        return section_cls()
    if not isinstance(raw, dict):
        raise ConfigValidationError(f"{name} 必须是字典", context={"section": name})

    kwargs = {}
    for f in fields(section_cls):
        if f.name not in raw:
            continue
        value = raw[f.name]
        default = getattr(section_cls(), f.name)
        kwargs[f.name] = _coerce(value, default, f"{name}.{f.name}")
    return section_cls(**kwargs)


def _coerce(value: Any, default: Any, key: str) -> Any:
    """按默认值的类型转换配置值"""
    try:
        if isinstance(default, bool):
            if not isinstance(value, bool):
                raise TypeError
            return value
        if isinstance(default, int):
            if isinstance(value, bool):
                raise TypeError
            return int(value)
        if isinstance(default, float):
            if isinstance(value, bool):
                raise TypeError
            return float(value)
        if isinstance(default, list):
            if not isinstance(value, list):
                raise TypeError
            return [str(v) for v in value]
        if isinstance(default, str):
            if not isinstance(value, str):
                raise TypeError
            return value
    except (TypeError, ValueError):
        raise ConfigValidationError(
            f"配置项 {key} 类型错误", context={"key": key, "value": value}
        )
    return value


def _parse_properties(raw: Any) -> List[ConfigEntry]:
    """
    解析默认 server.properties 条目

    支持 {key: value} 字典或 [[key, value], ...] 列表，均保持原顺序。
    """
    if isinstance(raw, dict):
        items = list(raw.items())
    elif isinstance(raw, list):
        items = []
        for item in raw:
            if not isinstance(item, (list, tuple)) or len(item) != 2:
                raise ConfigValidationError(
                    "properties 列表项必须是 [key, value]", context={"item": item}
                )
            items.append((item[0], item[1]))
    else:
        raise ConfigValidationError("properties 必须是字典或列表")

    return [ConfigEntry(str(k), _format_value(v)) for k, v in items]


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
