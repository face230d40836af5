"""
服务器进程启动
"""

import shlex
import subprocess
from pathlib import Path
from typing import List, Sequence, Union

from loguru import logger

from mcinstall.exceptions import LaunchError
from mcinstall.models import LaunchConfig


def build_command(launch: LaunchConfig, server_file: str) -> List[str]:
    """组装 java 启动参数"""
    return [launch.java, *launch.jvm_args, "-jar", server_file, *launch.server_args]


def launch_server(argv: Sequence[str], cwd: Union[str, Path]) -> subprocess.Popen:
    """
    启动服务器进程，不等待其退出

    Raises:
        LaunchError: 可执行文件不存在或无法启动
    """
    argv = list(argv)
    logger.info(f"[启动] {' '.join(shlex.quote(a) for a in argv)} (cwd={cwd})")
    try:
        return subprocess.Popen(argv, cwd=str(cwd))
    except OSError as e:
        raise LaunchError(
            f"无法启动服务器: {e}", context={"argv": argv, "cwd": str(cwd)}
        )
