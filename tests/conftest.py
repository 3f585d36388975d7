"""
Inspect proxy 测试配置

包含通用的 pytest fixtures 和配置。
"""

from typing import Any, Dict, Optional

import pytest
from fastapi.testclient import TestClient

from inspect_proxy.context import AppContext
from inspect_proxy.drivers.base import ContainerInspector
from inspect_proxy.main import create_app
from inspect_proxy.models import HostDescriptor


# ============================================================================
# pytest 标记注册
# ============================================================================

def pytest_configure(config):
    """注册自定义标记"""
    config.addinivalue_line(
        "markers", "unit: 单元测试，不需要外部依赖"
    )


SETTINGS_ENV_VARS = (
    "BIND_HOST",
    "BIND_PORT",
    "LOG_LEVEL",
    "DOCKER_HOST",
    "DOCKER_TLS_VERIFY",
    "DOCKER_TLS_CACERT",
    "DOCKER_TLS_CERT",
    "DOCKER_TLS_KEY",
    "ROUTE_TABLE_PATH",
    "EXPOSE_UPSTREAM_ERRORS",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """清理会影响 Settings 的环境变量和 .env 文件"""
    for name in SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


# ============================================================================
# 路由表样例
# ============================================================================

ROUTE_HEADER = (
    "Iface\tDestination\tGateway \tFlags\tRefCnt\tUse\tMetric\tMask\t\tMTU\tWindow\tIRTT"
)

ROUTE_DEFAULT_ETH0 = "eth0\t00000000\t0101EB0A\t0003\t0\t0\t1024\t00000000\t0\t0\t0"
ROUTE_LINK_ETH0 = "eth0\t0001EB0A\t00000000\t0001\t0\t0\t0\t00FFFFFF\t0\t0\t0"
ROUTE_HOST_ETH0 = "eth0\t0101EB0A\t00000000\t0005\t0\t0\t1024\tFFFFFFFF\t0\t0\t0"
ROUTE_DOCKER0 = "docker0\t000011AC\t00000000\t0001\t0\t0\t0\t0000FFFF\t0\t0\t0"
ROUTE_DEFAULT_WLAN0 = "wlan0\t00000000\t0101A8C0\t0003\t0\t0\t600\t00000000\t0\t0\t0"


def make_route_table(*lines: str) -> str:
    """生成带表头的路由表文本"""
    return "\n".join((ROUTE_HEADER,) + lines) + "\n"


@pytest.fixture
def sample_routes() -> Dict[str, str]:
    """常见路由行"""
    return {
        "default_eth0": ROUTE_DEFAULT_ETH0,
        "link_eth0": ROUTE_LINK_ETH0,
        "host_eth0": ROUTE_HOST_ETH0,
        "docker0": ROUTE_DOCKER0,
        "default_wlan0": ROUTE_DEFAULT_WLAN0,
    }


@pytest.fixture
def route_table_file(tmp_path):
    """写入路由表文件并返回路径的工厂"""

    def _write(*lines: str) -> str:
        path = tmp_path / "route"
        path.write_text(make_route_table(*lines), encoding="ascii")
        return str(path)

    return _write


# ============================================================================
# 容器客户端 mock
# ============================================================================

class FakeInspector(ContainerInspector):
    """按 ID 返回固定描述或抛出指定异常的 inspector"""

    def __init__(
        self,
        containers: Optional[Dict[str, Any]] = None,
        error: Optional[Exception] = None,
    ):
        self.containers = containers or {}
        self.error = error
        self.calls: list[str] = []
        self.initialized = False
        self.closed = False

    async def initialize(self) -> None:
        self.initialized = True

    async def close(self) -> None:
        self.closed = True

    async def inspect_container(self, container_id: str) -> Dict[str, Any]:
        self.calls.append(container_id)
        if self.error is not None:
            raise self.error
        return self.containers[container_id]


@pytest.fixture
def host_descriptor() -> HostDescriptor:
    return HostDescriptor(public_ip="10.0.0.5")


@pytest.fixture
def fake_inspector():
    """返回 FakeInspector 类，便于构造出错的客户端"""
    return FakeInspector


@pytest.fixture
def inspector() -> FakeInspector:
    return FakeInspector({"abc123": {"Id": "abc123", "State": "running"}})


@pytest.fixture
def make_client(host_descriptor):
    """根据 inspector 创建 TestClient 的工厂"""
    clients = []

    def _make(inspector: ContainerInspector, expose_upstream_errors: bool = True):
        context = AppContext(
            inspector=inspector,
            host=host_descriptor,
            expose_upstream_errors=expose_upstream_errors,
        )
        client = TestClient(create_app(context))
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.close()


@pytest.fixture
def client(make_client, inspector):
    return make_client(inspector)
