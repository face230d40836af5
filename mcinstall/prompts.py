"""
交互输入

Prompter 协议描述安装流程需要的所有问题，ClickPrompter 基于 click 实现，
命令行参数预先给出的答案不会再次询问。
"""

from typing import Optional, Protocol

import click


class Prompter(Protocol):
    """安装流程的交互输入"""

    def ask_server_name(self) -> str:
        ...

    def ask_distribution(self) -> str:
        ...

    def confirm_eula(self) -> bool:
        ...

    def confirm_customize(self) -> bool:
        ...

    def ask_property(self, key: str, default: str) -> str:
        ...


class ClickPrompter:
    """基于 click 的交互输入"""

    def __init__(
        self,
        name: Optional[str] = None,
        distribution: Optional[str] = None,
        accept_eula: Optional[bool] = None,
        customize: Optional[bool] = None,
    ):
        self.name = name
        self.distribution = distribution
        self.accept_eula = accept_eula
        self.customize = customize

    def ask_server_name(self) -> str:
        if self.name is not None:
            return self.name
        return click.prompt("服务器名称", default="", show_default=False)

    def ask_distribution(self) -> str:
        if self.distribution is not None:
            return self.distribution
        click.echo("请选择服务端类型:")
        click.echo("  1) Vanilla")
        click.echo("  2) Paper")
        click.echo("  3) Forge")
        return click.prompt("选择", default="", show_default=False)

    def confirm_eula(self) -> bool:
        if self.accept_eula is not None:
            return self.accept_eula
        return click.confirm(
            "是否同意 Minecraft EULA (https://aka.ms/MinecraftEULA)?", default=False
        )

    def confirm_customize(self) -> bool:
        if self.customize is not None:
            return self.customize
        return click.confirm("是否自定义 server.properties?", default=False)

    def ask_property(self, key: str, default: str) -> str:
        return click.prompt(key, default=default, show_default=True)
