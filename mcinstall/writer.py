"""
配置文件写入

生成 server.properties 与 eula.txt。
"""

from pathlib import Path
from typing import Iterable, List, Mapping, Optional, Union

import aiofiles
from loguru import logger

from mcinstall.exceptions import FileWriteError
from mcinstall.models import ConfigEntry


EULA_FILENAME = "eula.txt"
PROPERTIES_FILENAME = "server.properties"
EULA_CONTENT = "eula=true"


async def write_properties(
    entries: Iterable[ConfigEntry], path: Union[str, Path]
) -> Path:
    """
    按顺序写入 key=value 行

    覆盖已有文件，不做合并。值中的 "=" 和换行不会被转义。
    文本模式写入，换行符使用平台默认值。
    """
    path = Path(path)
    lines = [entry.to_line() for entry in entries]
    try:
        async with aiofiles.open(path, "w", encoding="utf-8") as f:
            for line in lines:
                await f.write(line + "\n")
    except OSError as e:
        raise FileWriteError(
            f"写入 {path.name} 失败: {e}", context={"path": str(path)}
        )
    logger.debug(f"[写入] {path} ({len(lines)} 项)")
    return path


async def write_eula(server_dir: Union[str, Path]) -> Path:
    """写入 eula.txt"""
    path = Path(server_dir) / EULA_FILENAME
    try:
        async with aiofiles.open(path, "w", encoding="utf-8") as f:
            await f.write(EULA_CONTENT + "\n")
    except OSError as e:
        raise FileWriteError(
            f"写入 {EULA_FILENAME} 失败: {e}", context={"path": str(path)}
        )
    logger.success(f"[完成] 已写入 {EULA_FILENAME}")
    return path


def merge_properties(
    defaults: Iterable[ConfigEntry],
    overrides: Optional[Mapping[str, Optional[str]]] = None,
) -> List[ConfigEntry]:
    """用户输入覆盖默认值，保持默认顺序；None 表示保留默认值"""
    overrides = overrides or {}
    merged = []
    for entry in defaults:
        value = overrides.get(entry.key)
        merged.append(ConfigEntry(entry.key, entry.value if value is None else value))
    return merged
