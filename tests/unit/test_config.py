"""
单元测试：配置测试

测试环境变量与命令行参数对 Settings 的影响。
"""

import pytest
from pydantic import ValidationError

from inspect_proxy.config import Settings, load_settings
from inspect_proxy.main import build_parser, settings_from_args


class TestSettings:
    """Settings 单元测试"""

    def test_defaults(self):
        """测试默认配置"""
        settings = Settings()

        assert settings.bind_host == "0.0.0.0"
        assert settings.bind_port == 2204
        assert settings.docker_host == "unix:///var/run/docker.sock"
        assert settings.docker_tls_verify is False
        assert settings.docker_tls_cacert is None
        assert settings.docker_tls_cert is None
        assert settings.docker_tls_key is None
        assert settings.route_table_path == "/proc/net/route"
        assert settings.expose_upstream_errors is True
        assert settings.use_tls is False

    def test_from_env(self, monkeypatch):
        """测试从环境变量读取"""
        monkeypatch.setenv("BIND_PORT", "8080")
        monkeypatch.setenv("DOCKER_HOST", "tcp://10.0.0.1:2376")
        monkeypatch.setenv("DOCKER_TLS_VERIFY", "1")
        monkeypatch.setenv("DOCKER_TLS_CACERT", "/certs/ca.pem")

        settings = Settings()

        assert settings.bind_port == 8080
        assert settings.docker_host == "tcp://10.0.0.1:2376"
        assert settings.docker_tls_verify is True
        assert settings.docker_tls_cacert == "/certs/ca.pem"
        assert settings.use_tls is True

    def test_from_env_file(self, tmp_path):
        """测试从 .env 文件读取"""
        (tmp_path / ".env").write_text("BIND_PORT=9000\n", encoding="utf-8")

        assert Settings().bind_port == 9000

    def test_invalid_port(self, monkeypatch):
        """测试无法解析的端口"""
        monkeypatch.setenv("BIND_PORT", "not-a-port")

        with pytest.raises(ValidationError):
            Settings()

    def test_invalid_tls_verify(self, monkeypatch):
        """测试无法解析的 DOCKER_TLS_VERIFY"""
        monkeypatch.setenv("DOCKER_TLS_VERIFY", "maybe")

        with pytest.raises(ValidationError):
            Settings()

    def test_cert_enables_tls(self):
        """测试设置客户端证书即启用 TLS"""
        assert Settings(docker_tls_cert="/certs/cert.pem").use_tls is True

    def test_load_settings_ignores_none(self, monkeypatch):
        """测试 load_settings 忽略未给出的值"""
        monkeypatch.setenv("BIND_PORT", "8080")

        assert load_settings(bind_port=None).bind_port == 8080
        assert load_settings(bind_port=9090).bind_port == 9090


class TestCommandLine:
    """命令行参数单元测试"""

    def test_no_args(self, monkeypatch):
        """测试不带参数时使用环境变量"""
        monkeypatch.setenv("DOCKER_HOST", "tcp://10.0.0.1:2375")

        settings = settings_from_args(build_parser().parse_args([]))

        assert settings.docker_host == "tcp://10.0.0.1:2375"
        assert settings.bind_port == 2204
        assert settings.docker_tls_verify is False

    def test_args_override_env(self, monkeypatch):
        """测试命令行参数覆盖环境变量"""
        monkeypatch.setenv("BIND_PORT", "8080")
        args = build_parser().parse_args(
            [
                "-p",
                "3000",
                "--tlsVerify",
                "-H",
                "tcp://10.0.0.1:2376",
                "--cert",
                "/certs/cert.pem",
                "--key",
                "/certs/key.pem",
                "--cacert",
                "/certs/ca.pem",
            ]
        )

        settings = settings_from_args(args)

        assert settings.bind_port == 3000
        assert settings.docker_tls_verify is True
        assert settings.docker_host == "tcp://10.0.0.1:2376"
        assert settings.docker_tls_cert == "/certs/cert.pem"
        assert settings.docker_tls_key == "/certs/key.pem"
        assert settings.docker_tls_cacert == "/certs/ca.pem"
