"""Telemetry configuration helpers."""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Any, Dict

from pydantic import BaseModel, Field

_TRUTHY = {"1", "true", "yes", "on"}

_SIGNALS: dict[str, tuple[str, str, str]] = {
    # signal -> (enable field, flag env var, OTLP per-signal endpoint env var)
    "traces": (
        "enable_tracing",
        "SEABATTLE_ENABLE_TRACING",
        "OTEL_EXPORTER_OTLP_TRACES_ENDPOINT",
    ),
    "metrics": (
        "enable_metrics",
        "SEABATTLE_ENABLE_METRICS",
        "OTEL_EXPORTER_OTLP_METRICS_ENDPOINT",
    ),
    "logs": (
        "enable_logging",
        "SEABATTLE_ENABLE_LOGGING",
        "OTEL_EXPORTER_OTLP_LOGS_ENDPOINT",
    ),
}


class TelemetryConfig(BaseModel):
    """Which OpenTelemetry signals to export and where."""

    enable_tracing: bool = False
    enable_metrics: bool = False
    enable_logging: bool = False
    console_traces: bool = False
    otlp_traces_endpoint: str | None = None
    otlp_metrics_endpoint: str | None = None
    otlp_logs_endpoint: str | None = None
    service_name: str = "seabattle"
    service_namespace: str = "game"
    resource_attributes: dict[str, str] = Field(default_factory=dict)

    def resource_dict(self) -> dict[str, str]:
        """Attributes attached to every exported span, metric and log record."""
        attributes = {
            "service.name": self.service_name,
            "service.namespace": self.service_namespace,
        }
        attributes.update(self.resource_attributes)
        return attributes

    @classmethod
    def from_env(cls, **overrides: Any) -> "TelemetryConfig":
        """Build a config from `SEABATTLE_*` and the standard `OTEL_*` variables."""

        data: Dict[str, Any] = cls().model_dump()
        data.update(overrides)

        base_endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
        for signal, (enable_field, flag_name, endpoint_name) in _SIGNALS.items():
            flag = os.getenv(flag_name)
            if flag is not None:
                data[enable_field] = flag.strip().lower() in _TRUTHY

            endpoint = os.getenv(endpoint_name)
            if not endpoint and base_endpoint:
                endpoint = f"{base_endpoint.rstrip('/')}/v1/{signal}"
            if endpoint and not data.get(f"otlp_{signal}_endpoint"):
                data[f"otlp_{signal}_endpoint"] = endpoint
                # An endpoint implies the signal is wanted unless explicitly disabled.
                if flag is None:
                    data[enable_field] = True

        console = os.getenv("SEABATTLE_CONSOLE_TRACES")
        if console is not None:
            data["console_traces"] = console.strip().lower() in _TRUTHY

        if os.getenv("OTEL_SERVICE_NAME"):
            data["service_name"] = os.environ["OTEL_SERVICE_NAME"]
        if os.getenv("OTEL_SERVICE_NAMESPACE"):
            data["service_namespace"] = os.environ["OTEL_SERVICE_NAMESPACE"]

        resource_env = os.getenv("OTEL_RESOURCE_ATTRIBUTES")
        if resource_env:
            attrs = dict(data.get("resource_attributes") or {})
            for part in resource_env.split(","):
                key, sep, value = part.partition("=")
                if sep:
                    attrs[key.strip()] = value.strip()
            data["resource_attributes"] = attrs

        return cls(**data)


@lru_cache(maxsize=1)
def load_telemetry_config() -> TelemetryConfig:
    """Load and cache telemetry config from the environment."""

    return TelemetryConfig.from_env()


def init_telemetry(config: TelemetryConfig | None = None) -> TelemetryConfig:
    """Install providers for every enabled signal."""

    from .logger import init_logging
    from .metrics import init_metrics
    from .tracer import init_tracing

    resolved = config or load_telemetry_config()

    if resolved.enable_tracing or resolved.console_traces:
        init_tracing(resolved)
    if resolved.enable_metrics:
        init_metrics(resolved)
    if resolved.enable_logging:
        init_logging(resolved)
    return resolved
