"""
版本解析器

将服务端类型解析为当前最新版本的下载地址。
"""

import re
from typing import Any, Iterable, List, Optional, Tuple

from loguru import logger

from mcinstall.models import ArtifactLocation, DistributionKind, InstallerConfig
from mcinstall.exceptions import MetadataFormatError
from mcinstall.services.api_client import MetadataClient


_RELEASE_RE = re.compile(r"^\d+(\.\d+)*$")
_NUMERIC_PREFIX_RE = re.compile(r"\d+(\.\d+)*")

PAPER_DOWNLOAD_TEMPLATE = (
    "{base}/versions/{version}/builds/{build}/downloads/paper-{version}-{build}.jar"
)
FORGE_INSTALLER_TEMPLATE = (
    "{base}/{mc_version}-{build}/forge-{mc_version}-{build}-installer.jar"
)


def is_release(version: str) -> bool:
    """版本号是否只由数字段组成（如 1.20.4）"""
    return bool(_RELEASE_RE.match(version))


def version_key(version: str) -> Tuple:
    """
    版本排序键

    (正式版数字段, 是否正式版, 预发布类型, 预发布序号)，
    1.10 > 1.9，且 1.21 > 1.21-rc1 > 1.21-pre2 > 1.21-pre1。
    """
    match = _NUMERIC_PREFIX_RE.match(version)
    numbers = tuple(int(p) for p in match.group(0).split(".")) if match else ()
    suffix = version[match.end():] if match else version
    if not suffix:
        return (numbers, 1, 0, ())
    label = suffix.lower()
    rank = 1 if "rc" in label else 0
    counters = tuple(int(p) for p in re.findall(r"\d+", suffix))
    return (numbers, 0, rank, counters)


def select_latest_version(
    versions: Iterable[str], allow_prerelease: bool = False
) -> Optional[str]:
    """
    选出最新版本

    不依赖 API 返回的列表顺序，而是显式比较版本号。
    没有正式版时回退到预发布版本。
    """
    candidates = [str(v) for v in versions]
    if not candidates:
        return None

    if not allow_prerelease:
        releases = [v for v in candidates if is_release(v)]
        if releases:
            candidates = releases

    return max(candidates, key=version_key)


def select_latest_build(builds: Iterable[Any]) -> Optional[int]:
    """选出最大的构建号，兼容整数列表和 {"build": n} 对象列表"""
    numbers: List[int] = []
    for build in builds:
        if isinstance(build, dict):
            build = build.get("build")
        if isinstance(build, bool):
            continue
        try:
            numbers.append(int(build))
        except (TypeError, ValueError):
            continue
    return max(numbers) if numbers else None


def _require(data: Any, *keys: str, source: str) -> Any:
    """按路径取出字段，缺失时抛出 MetadataFormatError"""
    current = data
    for key in keys:
        if not isinstance(current, dict) or key not in current:
            raise MetadataFormatError(
                f"{source} 缺少字段: {'.'.join(keys)}",
                context={"source": source, "field": ".".join(keys)},
            )
        current = current[key]
    if current is None or current == "":
        raise MetadataFormatError(
            f"{source} 字段为空: {'.'.join(keys)}",
            context={"source": source, "field": ".".join(keys)},
        )
    return current


class VersionResolver:
    """服务端版本解析器"""

    def __init__(self, client: MetadataClient, config: Optional[InstallerConfig] = None):
        self.client = client
        self.config = config or InstallerConfig()

    async def resolve(self, kind: DistributionKind) -> ArtifactLocation:
        """根据服务端类型解析下载制品"""
        if kind == DistributionKind.VANILLA:
            artifact = await self.resolve_vanilla()
        elif kind == DistributionKind.PAPER:
            artifact = await self.resolve_paper()
        elif kind == DistributionKind.FORGE:
            artifact = await self.resolve_forge()
        else:
            raise ValueError(f"未知的服务端类型: {kind}")

        logger.success(f"[解析] {kind.value} {artifact.version} -> {artifact.url}")
        return artifact

    async def resolve_vanilla(self) -> ArtifactLocation:
        """通过版本清单获取最新正式版服务端"""
        manifest_url = self.config.endpoints.vanilla_manifest_url
        manifest = await self.client.get_json(manifest_url)

        release = _require(manifest, "latest", "release", source="版本清单")
        versions = _require(manifest, "versions", source="版本清单")
        if not isinstance(versions, list):
            raise MetadataFormatError("版本清单 versions 不是列表")

        detail_url = None
        for entry in versions:
            if isinstance(entry, dict) and entry.get("id") == release:
                detail_url = entry.get("url")
                break
        if not detail_url:
            raise MetadataFormatError(
                f"版本清单中找不到 {release}", context={"version": release}
            )

        logger.info(f"[解析] 最新正式版: {release}")
        detail = await self.client.get_json(detail_url)
        server = _require(detail, "downloads", "server", source=f"版本 {release}")
        url = _require(server, "url", source=f"版本 {release} 服务端")

        return ArtifactLocation(
            url=url,
            suggested_filename=DistributionKind.VANILLA.default_filename,
            kind=DistributionKind.VANILLA,
            version=release,
            sha1=server.get("sha1"),
        )

    async def resolve_paper(self) -> ArtifactLocation:
        """获取 Paper 最新版本的最新构建"""
        base = self.config.endpoints.paper_api_url.rstrip("/")
        project = await self.client.get_json(base)

        versions = _require(project, "versions", source="Paper 项目")
        if not isinstance(versions, list):
            raise MetadataFormatError("Paper 项目 versions 不是列表")
        version = select_latest_version(
            versions, allow_prerelease=self.config.paper_allow_prerelease
        )
        if version is None:
            raise MetadataFormatError("Paper 项目没有任何版本")

        logger.info(f"[解析] Paper 最新版本: {version}")
        detail = await self.client.get_json(f"{base}/versions/{version}")
        builds = _require(detail, "builds", source=f"Paper {version}")
        if not isinstance(builds, list):
            raise MetadataFormatError(f"Paper {version} builds 不是列表")
        build = select_latest_build(builds)
        if build is None:
            raise MetadataFormatError(
                f"Paper {version} 没有可用构建", context={"version": version}
            )

        return ArtifactLocation(
            url=PAPER_DOWNLOAD_TEMPLATE.format(base=base, version=version, build=build),
            suggested_filename=DistributionKind.PAPER.default_filename,
            kind=DistributionKind.PAPER,
            version=version,
            build=build,
        )

    async def resolve_forge(self) -> ArtifactLocation:
        """通过 promotions 获取指定 Minecraft 版本的最新 Forge 安装器"""
        mc_version = self.config.forge_minecraft_version
        data = await self.client.get_json(self.config.endpoints.forge_promotions_url)

        promos = _require(data, "promos", source="Forge promotions")
        build = _require(promos, f"{mc_version}-latest", source="Forge promotions")
        build = str(build)

        base = self.config.endpoints.forge_maven_url.rstrip("/")
        return ArtifactLocation(
            url=FORGE_INSTALLER_TEMPLATE.format(
                base=base, mc_version=mc_version, build=build
            ),
            suggested_filename=DistributionKind.FORGE.default_filename,
            kind=DistributionKind.FORGE,
            version=f"{mc_version}-{build}",
        )
