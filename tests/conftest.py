"""
测试夹具

用 aiohttp 的 TestServer 在本地模拟 Mojang / Paper / Forge 元数据服务。
"""

import asyncio
import hashlib
import threading
from dataclasses import dataclass, field
from typing import Dict, List

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from mcinstall.models import InstallerConfig


VANILLA_JAR = b"vanilla-server-bytes"
PAPER_JAR = b"paper-server-bytes"
FORGE_JAR = b"forge-installer-bytes"

PAPER_VERSIONS = ["1.19.4", "1.20.4", "1.20", "1.21-pre1", "1.9"]
PAPER_BUILDS = [400, 12, 496, 3]
FORGE_MC_VERSION = "1.20.1"
FORGE_BUILD = "47.2.20"


@dataclass
class Backend:
    """本地元数据服务的状态"""

    base: str = ""
    hits: Dict[str, int] = field(default_factory=dict)
    failures: Dict[str, int] = field(default_factory=dict)
    payloads: Dict[str, bytes] = field(default_factory=dict)
    bad_payloads: Dict[str, bytes] = field(default_factory=dict)
    paper_versions: List[str] = field(default_factory=lambda: list(PAPER_VERSIONS))
    paper_builds: List = field(default_factory=lambda: list(PAPER_BUILDS))
    manifest_status: int = 200
    promos: Dict[str, str] = field(
        default_factory=lambda: {
            f"{FORGE_MC_VERSION}-latest": FORGE_BUILD,
            f"{FORGE_MC_VERSION}-recommended": "47.2.0",
        }
    )

    def url(self, path: str) -> str:
        return f"{self.base}{path}"

    def hit(self, key: str) -> int:
        self.hits[key] = self.hits.get(key, 0) + 1
        return self.hits[key]


def build_app(state: Backend) -> web.Application:
    async def manifest(request):
        state.hit("manifest")
        if state.manifest_status != 200:
            return web.Response(status=state.manifest_status)
        return web.json_response(
            {
                "latest": {"release": "1.20.4", "snapshot": "24w01a"},
                "versions": [
                    {"id": "24w01a", "url": state.url("/v/24w01a.json")},
                    {"id": "1.20.4", "url": state.url("/v/1.20.4.json")},
                ],
            }
        )

    async def version_detail(request):
        version = request.match_info["version"]
        return web.json_response(
            {
                "id": version,
                "downloads": {
                    "server": {
                        "url": state.url("/files/vanilla.jar"),
                        "sha1": hashlib.sha1(VANILLA_JAR).hexdigest(),
                    }
                },
            }
        )

    async def paper_project(request):
        return web.json_response({"project_id": "paper", "versions": state.paper_versions})

    async def paper_version(request):
        version = request.match_info["version"]
        return web.json_response({"version": version, "builds": state.paper_builds})

    async def paper_download(request):
        state.hit("paper_download")
        return web.Response(body=PAPER_JAR)

    async def forge_promos(request):
        return web.json_response({"homepage": "", "promos": state.promos})

    async def forge_maven(request):
        state.hit("forge_download")
        return web.Response(body=FORGE_JAR)

    async def vanilla_file(request):
        state.hit("vanilla_download")
        return web.Response(body=VANILLA_JAR)

    async def flaky(request):
        name = request.match_info["name"]
        count = state.hit(name)
        if count <= state.failures.get(name, 0):
            if name in state.bad_payloads:
                return web.Response(body=state.bad_payloads[name])
            return web.Response(status=503, text="unavailable")
        return web.Response(body=state.payloads.get(name, b""))

    async def not_json(request):
        return web.Response(text="<html>oops</html>", content_type="text/html")

    app = web.Application()
    app.router.add_get("/mc/version_manifest.json", manifest)
    app.router.add_get("/v/{version}.json", version_detail)
    app.router.add_get("/paper", paper_project)
    app.router.add_get("/paper/versions/{version}", paper_version)
    app.router.add_get(
        "/paper/versions/{version}/builds/{build}/downloads/{file}", paper_download
    )
    app.router.add_get("/forge/promotions_slim.json", forge_promos)
    app.router.add_get("/maven/{coord}/{file}", forge_maven)
    app.router.add_get("/files/vanilla.jar", vanilla_file)
    app.router.add_get("/flaky/{name}", flaky)
    app.router.add_get("/not-json", not_json)
    return app


@pytest.fixture
async def backend():
    state = Backend()
    server = TestServer(build_app(state))
    await server.start_server()
    state.base = str(server.make_url("/")).rstrip("/")
    yield state
    await server.close()


@pytest.fixture
def config(backend):
    """指向本地服务的配置，重试无延迟"""
    return InstallerConfig.from_dict(backend_config_dict(backend))


@pytest.fixture
def threaded_backend():
    """在独立线程的事件循环中运行的本地服务，供同步的 CLI 测试使用"""
    state = Backend()
    loop = asyncio.new_event_loop()
    thread = threading.Thread(target=loop.run_forever, daemon=True)
    thread.start()
    runner = web.AppRunner(build_app(state))

    async def start():
        await runner.setup()
        site = web.TCPSite(runner, "127.0.0.1", 0)
        await site.start()
        return runner.addresses[0][1]

    port = asyncio.run_coroutine_threadsafe(start(), loop).result(10)
    state.base = f"http://127.0.0.1:{port}"
    yield state

    asyncio.run_coroutine_threadsafe(runner.cleanup(), loop).result(10)
    loop.call_soon_threadsafe(loop.stop)
    thread.join(5)
    loop.close()


def backend_config_dict(state: Backend) -> dict:
    return {
        "endpoints": {
            "vanilla_manifest_url": state.url("/mc/version_manifest.json"),
            "paper_api_url": state.url("/paper"),
            "forge_promotions_url": state.url("/forge/promotions_slim.json"),
            "forge_maven_url": state.url("/maven"),
        },
        "download": {"max_attempts": 3, "retry_delay": 0, "timeout": 5},
        "forge_minecraft_version": FORGE_MC_VERSION,
    }
