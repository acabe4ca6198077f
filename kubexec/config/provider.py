"""Configuration provider following Black Box Design principles."""
import os
from dataclasses import dataclass
from typing import List, Optional, Protocol


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


def _env_number(name: str, default: str, cast=float):
    raw = os.getenv(name, default)
    try:
        return cast(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")


@dataclass
class ClusterConfig:
    """Kubernetes connection configuration."""
    namespace: str
    kubeconfig: Optional[str]
    in_cluster: bool


@dataclass
class ExecConfig:
    """Remote execution configuration."""
    timeout_seconds: float
    probe_timeout_seconds: float
    poll_interval: float


@dataclass
class RateLimitConfig:
    """Dispatch rate limiting configuration."""
    enabled: bool
    rate: float
    burst: int


@dataclass
class APIConfig:
    """API configuration."""
    port: int
    host: str
    debug: bool
    log_level: str


@dataclass
class AuthConfig:
    """Authentication configuration."""
    require_auth: bool
    api_keys: List[str]


class ConfigProvider(Protocol):
    """Protocol for configuration providers."""

    def get_cluster_config(self) -> ClusterConfig:
        """Get cluster configuration."""
        ...

    def get_exec_config(self) -> ExecConfig:
        """Get execution configuration."""
        ...

    def get_rate_limit_config(self) -> RateLimitConfig:
        """Get rate limit configuration."""
        ...

    def get_api_config(self) -> APIConfig:
        """Get API configuration."""
        ...

    def get_auth_config(self) -> AuthConfig:
        """Get authentication configuration."""
        ...


class EnvConfigProvider:
    """Environment-based configuration provider."""

    def get_cluster_config(self) -> ClusterConfig:
        """Get cluster configuration from environment variables."""
        return ClusterConfig(
            namespace=os.getenv("KUBEXEC_NAMESPACE", "default"),
            kubeconfig=os.getenv("KUBECONFIG") or None,
            in_cluster=_env_bool("KUBEXEC_IN_CLUSTER", "false"),
        )

    def get_exec_config(self) -> ExecConfig:
        """Get execution configuration from environment variables."""
        return ExecConfig(
            timeout_seconds=_env_number("KUBEXEC_EXEC_TIMEOUT", "30"),
            probe_timeout_seconds=_env_number("KUBEXEC_PROBE_TIMEOUT", "5"),
            poll_interval=_env_number("KUBEXEC_POLL_INTERVAL", "0.1"),
        )

    def get_rate_limit_config(self) -> RateLimitConfig:
        """Get rate limit configuration from environment variables."""
        return RateLimitConfig(
            enabled=_env_bool("KUBEXEC_RATE_LIMIT_ENABLED", "true"),
            rate=_env_number("KUBEXEC_RATE", "10"),
            burst=_env_number("KUBEXEC_BURST", "5", cast=int),
        )

    def get_api_config(self) -> APIConfig:
        """Get API configuration from environment variables."""
        return APIConfig(
            port=_env_number("API_PORT", "8080", cast=int),
            host=os.getenv("API_HOST", "0.0.0.0"),
            debug=_env_bool("API_DEBUG", "false"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    def get_auth_config(self) -> AuthConfig:
        """Get authentication configuration from environment variables."""
        require_auth = _env_bool("REQUIRE_AUTH", "true")

        # API keys are required - no default for security
        api_keys_env = os.getenv("API_KEYS")
        if require_auth and not api_keys_env:
            raise ValueError(
                "API_KEYS environment variable is required. "
                "Format: service:key,service:key. "
                "Example: admin:your-generated-key"
            )

        api_keys = (api_keys_env or "").split(",")

        return AuthConfig(
            require_auth=require_auth,
            api_keys=[key.strip() for key in api_keys if key.strip()],
        )
