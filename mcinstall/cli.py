"""
CLI 模块

命令行接口实现。
"""

import asyncio
import json
from pathlib import Path
from typing import Optional

import click
import toml
import yaml
from loguru import logger

from mcinstall.exceptions import ConfigError, ConfigParseError, InstallerError
from mcinstall.logger import setup_logger
from mcinstall.models import DistributionKind, InstallerConfig
from mcinstall.orchestrator import Installer
from mcinstall.prompts import ClickPrompter
from mcinstall.services import MetadataClient, VersionResolver


def load_config(config_path: Optional[str]) -> InstallerConfig:
    """加载配置文件，未指定时使用默认配置"""
    if not config_path:
        return InstallerConfig()

    path = Path(config_path)
    if not path.exists():
        raise ConfigError(f"配置文件不存在: {config_path}")

    suffix = path.suffix.lower()
    try:
        if suffix == ".toml":
            data = toml.load(str(path))
        elif suffix == ".json":
            data = json.loads(path.read_text(encoding="utf-8"))
        elif suffix in (".yaml", ".yml"):
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        else:
            raise ConfigParseError(f"不支持的配置文件格式: {suffix}")
    except (toml.TomlDecodeError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigParseError(
            f"配置文件解析失败: {e}", context={"path": str(path)}
        )

    return InstallerConfig.from_dict(data)


async def resolve_only(config: InstallerConfig, choice: str):
    """干运行：只解析下载地址"""
    kind = DistributionKind.from_choice(choice)
    async with MetadataClient(timeout=config.download.timeout) as client:
        artifact = await VersionResolver(client, config).resolve(kind)
    click.echo(f"版本: {artifact.version}")
    click.echo(f"地址: {artifact.url}")
    click.echo(f"文件: {artifact.suggested_filename}")
    return artifact


async def run_async(
    config: InstallerConfig,
    prompter: ClickPrompter,
    base_dir: str,
    dry_run: bool = False,
):
    """异步运行"""
    if dry_run:
        logger.info("[干运行模式] 只解析下载地址")
        await resolve_only(config, prompter.ask_distribution())
        return None

    installer = Installer(config, prompter, base_dir=base_dir)
    result = await installer.run()
    if result.properties_error:
        logger.warning(f"server.properties 未写入: {result.properties_error}")
    return result


@click.command()
@click.option("-c", "--config", "config_path", type=click.Path(), help="配置文件 (toml/json/yaml)")
@click.option("--base-dir", default=".", type=click.Path(file_okay=False), help="服务器目录的父目录")
@click.option("-n", "--name", help="服务器名称")
@click.option("-t", "--type", "distribution", help="服务端类型: vanilla/paper/forge 或 1/2/3")
@click.option("--accept-eula", is_flag=True, default=None, help="同意 Minecraft EULA")
@click.option("--no-customize", is_flag=True, help="不自定义 server.properties")
@click.option("--dry-run", is_flag=True, help="干运行模式（只解析下载地址）")
@click.option("--debug", is_flag=True, help="启用调试模式")
@click.version_option(version="0.1.0")
def main(
    config_path: Optional[str],
    base_dir: str,
    name: Optional[str],
    distribution: Optional[str],
    accept_eula: Optional[bool],
    no_customize: bool,
    dry_run: bool,
    debug: bool,
):
    """MCInstall - Minecraft 服务器安装工具"""
    setup_logger(level="DEBUG" if debug else None)

    prompter = ClickPrompter(
        name=name,
        distribution=distribution,
        accept_eula=accept_eula,
        customize=False if no_customize else None,
    )

    try:
        config = load_config(config_path)
        asyncio.run(run_async(config, prompter, base_dir, dry_run))
    except InstallerError as e:
        raise click.ClickException(str(e))
    except Exception as e:
        logger.exception(f"运行时错误: {e}")
        raise click.ClickException(f"运行时错误: {e}")


if __name__ == "__main__":
    main()
