# config.py
import math
import os
from dataclasses import dataclass, fields, replace
from typing import Mapping, Optional

DEFAULT_HOST = "srv.msk01.gigacorp.local"
STATS_ENDPOINT = "/_stats"
ENV_PREFIX = "HEALTH_AGENT_"


def stats_url(host: str) -> str:
    return f"http://{host}{STATS_ENDPOINT}"


@dataclass(frozen=True)
class AgentConfig:
    """Immutable settings shared by the fetcher, evaluator and poll loop."""
    url: str = stats_url(DEFAULT_HOST)
    host_header: Optional[str] = None
    poll_interval: float = 60.0
    request_timeout: float = 10.0
    client_timeout: float = 15.0
    failure_budget: int = 3
    load_threshold: float = 30.0
    memory_threshold: float = 0.80
    disk_free_threshold_mib: float = 10.0
    network_threshold: float = 0.90

    def __post_init__(self):
        if not self.url:
            raise ValueError("url must not be empty")
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, float) and not math.isfinite(value):
                raise ValueError(f"{f.name} must be a finite number, got {value}")
        if self.poll_interval < 0:
            raise ValueError(f"poll_interval must be >= 0, got {self.poll_interval}")
        if self.request_timeout <= 0 or self.client_timeout <= 0:
            raise ValueError("timeouts must be positive")
        if self.client_timeout < self.request_timeout:
            raise ValueError(
                f"client_timeout ({self.client_timeout}) must not be below request_timeout ({self.request_timeout})"
            )
        if self.failure_budget < 1:
            raise ValueError(f"failure_budget must be >= 1, got {self.failure_budget}")
        if self.load_threshold < 0 or self.disk_free_threshold_mib < 0:
            raise ValueError("load and disk thresholds must be >= 0")
        for name in ("memory_threshold", "network_threshold"):
            value = getattr(self, name)
            if not 0 < value <= 1:
                raise ValueError(f"{name} must be in (0, 1], got {value}")


# env var suffix -> (field name, converter)
_ENV_FIELDS = {
    "URL": ("url", str),
    "HOST_HEADER": ("host_header", str),
    "POLL_INTERVAL": ("poll_interval", float),
    "REQUEST_TIMEOUT": ("request_timeout", float),
    "CLIENT_TIMEOUT": ("client_timeout", float),
    "FAILURE_BUDGET": ("failure_budget", int),
    "LOAD_THRESHOLD": ("load_threshold", float),
    "MEMORY_THRESHOLD": ("memory_threshold", float),
    "DISK_FREE_THRESHOLD_MIB": ("disk_free_threshold_mib", float),
    "NETWORK_THRESHOLD": ("network_threshold", float),
}


def load_config(env: Optional[Mapping[str, str]] = None, host: Optional[str] = None, **overrides) -> AgentConfig:
    """Build an AgentConfig from HEALTH_AGENT_* variables, then explicit overrides.

    ``host`` is a shortcut for ``url=http://<host>/_stats``. Overrides whose
    value is None are ignored so argparse defaults can be passed straight in.
    Raises ValueError on unparsable or out-of-range values.
    """
    env = os.environ if env is None else env
    values = {}
    env_host = env.get(ENV_PREFIX + "HOST")
    if env_host:
        values["url"] = stats_url(env_host)
    for suffix, (field, convert) in _ENV_FIELDS.items():
        raw = env.get(ENV_PREFIX + suffix)
        if raw is None or raw == "":
            continue
        try:
            values[field] = convert(raw)
        except ValueError:
            raise ValueError(f"invalid value for {ENV_PREFIX + suffix}: {raw!r}") from None

    if host:
        values["url"] = stats_url(host)
    values.update({k: v for k, v in overrides.items() if v is not None})
    return replace(AgentConfig(), **values)
