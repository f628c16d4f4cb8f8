"""
Supervisor configuration records

Built by ConfigManager from config/supervisor.yaml. Every field has a default
matching the observed supervisor behavior, so an empty YAML file yields the
plain "init, start, wait for INT/QUIT/TERM, stop" contract.
"""

from dataclasses import dataclass, field
from typing import Any, Dict

from models.enums import LogFormat, LogLevel
from utils.enum_helper import EnumHelper


def _as_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    raise ValueError(f"'{key}' must be true or false, got {value!r}")


@dataclass(frozen=True)
class APIConfig:
    """Bind address of the demo HTTP service"""
    host: str = "127.0.0.1"
    port: int = 8000

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'APIConfig':
        host = data.get("host", cls.host)
        port = data.get("port", cls.port)
        if not isinstance(host, str) or not host:
            raise ValueError(f"'api.host' must be a non-empty string, got {host!r}")
        if isinstance(port, bool) or not isinstance(port, int) or not 0 <= port <= 65535:
            raise ValueError(f"'api.port' must be an integer in 0..65535, got {port!r}")
        return cls(host=host, port=port)


@dataclass(frozen=True)
class SupervisorConfig:
    """
    Immutable supervisor settings

    Attributes:
        log_level: Minimum level printed by the logger
        log_format: CONSOLE (colored tree) or JSON (one object per line)
        use_colors: ANSI colors for CONSOLE output
        reload_on_hup: Dispatch SIGHUP to reload() on lifecycles that support it
        strict_shutdown: Raise ShutdownError from serve() when wait or stop fails
        shutdown_on_start_failure: Stop the lifecycle when its start task raises
        api: Demo service bind address
    """
    log_level: LogLevel = LogLevel.INFO
    log_format: LogFormat = LogFormat.CONSOLE
    use_colors: bool = True
    reload_on_hup: bool = False
    strict_shutdown: bool = False
    shutdown_on_start_failure: bool = False
    api: APIConfig = field(default_factory=APIConfig)

    KNOWN_KEYS = (
        "log_level",
        "log_format",
        "use_colors",
        "reload_on_hup",
        "strict_shutdown",
        "shutdown_on_start_failure",
        "api",
    )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SupervisorConfig':
        """
        Build config from a parsed YAML mapping.

        Missing keys take defaults; unknown keys are left for the caller to
        report (see ConfigManager).

        Raises:
            ValueError: A known key has an invalid value
        """
        data = data or {}
        api_data = data.get("api") or {}
        if not isinstance(api_data, dict):
            raise ValueError(f"'api' must be a mapping, got {type(api_data).__name__}")

        return cls(
            log_level=EnumHelper.to_enum(LogLevel, data.get("log_level", "info")),
            log_format=EnumHelper.to_enum(LogFormat, data.get("log_format", "console")),
            use_colors=_as_bool("use_colors", data.get("use_colors", True)),
            reload_on_hup=_as_bool("reload_on_hup", data.get("reload_on_hup", False)),
            strict_shutdown=_as_bool("strict_shutdown", data.get("strict_shutdown", False)),
            shutdown_on_start_failure=_as_bool(
                "shutdown_on_start_failure", data.get("shutdown_on_start_failure", False)
            ),
            api=APIConfig.from_dict(api_data),
        )
