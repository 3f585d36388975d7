from pydantic import Field
from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    # Server settings
    bind_host: str = Field(default="0.0.0.0", description="Server host")
    bind_port: int = Field(default=2204, ge=1, le=65535, description="Server port")
    log_level: str = Field(default="INFO", description="Root log level")

    # Docker daemon settings
    docker_host: str = Field(
        default="unix:///var/run/docker.sock", description="Docker daemon endpoint"
    )
    docker_tls_verify: bool = Field(
        default=False, description="Verify the daemon with TLS"
    )
    docker_tls_cacert: Optional[str] = Field(
        default=None, description="Path to the CA certificate used for TLS"
    )
    docker_tls_cert: Optional[str] = Field(
        default=None, description="Path to the client certificate used for TLS"
    )
    docker_tls_key: Optional[str] = Field(
        default=None, description="Path to the client key used for TLS"
    )

    # Host detection settings
    route_table_path: str = Field(
        default="/proc/net/route", description="Kernel IPv4 route table source"
    )

    # Error reporting
    expose_upstream_errors: bool = Field(
        default=True,
        description="Echo docker daemon error messages back to callers",
    )

    @property
    def use_tls(self) -> bool:
        return self.docker_tls_verify or bool(self.docker_tls_cert)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


def load_settings(**overrides) -> Settings:
    """Build settings from the environment, letting explicit values win."""
    values = {key: value for key, value in overrides.items() if value is not None}
    return Settings(**values)
