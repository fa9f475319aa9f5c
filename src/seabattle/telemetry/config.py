"""Telemetry configuration helpers."""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Any, Dict

from opentelemetry.sdk.resources import Resource
from pydantic import BaseModel, Field

from .logger import init_logging
from .metrics import init_metrics
from .tracer import init_tracing

_TRUTHY = {"1", "true", "yes", "on"}

_FLAG_ENV = {
    "enable_tracing": ("SEABATTLE_ENABLE_TRACING", "OTEL_TRACES_ENABLED"),
    "enable_metrics": ("SEABATTLE_ENABLE_METRICS", "OTEL_METRICS_ENABLED"),
    "enable_logging": ("SEABATTLE_ENABLE_LOGGING", "OTEL_LOGS_ENABLED"),
}
_ENDPOINT_ENV = {
    "otlp_traces_endpoint": ("OTEL_EXPORTER_OTLP_TRACES_ENDPOINT", "v1/traces", "enable_tracing"),
    "otlp_metrics_endpoint": ("OTEL_EXPORTER_OTLP_METRICS_ENDPOINT", "v1/metrics", "enable_metrics"),
    "otlp_logs_endpoint": ("OTEL_EXPORTER_OTLP_LOGS_ENDPOINT", "v1/logs", "enable_logging"),
}


class TelemetryConfig(BaseModel):
    """Which exporters the engine's spans, counters and log records go to."""

    enable_tracing: bool = False
    enable_metrics: bool = False
    enable_logging: bool = False
    otlp_traces_endpoint: str | None = None
    otlp_metrics_endpoint: str | None = None
    otlp_logs_endpoint: str | None = None
    service_name: str = "seabattle"
    service_namespace: str = "game"
    log_level: str = "INFO"
    resource_attributes: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_env(cls, **overrides: Any) -> "TelemetryConfig":
        """Build a config from ``SEABATTLE_*`` and ``OTEL_*`` variables.

        An OTLP endpoint switches its exporter on. Explicit ``overrides``
        are applied last and win over both.
        """

        data: Dict[str, Any] = cls().model_dump()

        for name, env_names in _FLAG_ENV.items():
            value = _flag_from_env(*env_names)
            if value is not None:
                data[name] = value

        base_endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
        for name, (env_name, suffix, flag) in _ENDPOINT_ENV.items():
            endpoint = os.getenv(env_name) or _with_suffix(base_endpoint, suffix)
            data[name] = endpoint
            if endpoint:
                data[flag] = True

        for name, env_name in (
            ("service_name", "OTEL_SERVICE_NAME"),
            ("service_namespace", "OTEL_SERVICE_NAMESPACE"),
            ("log_level", "SEABATTLE_LOG_LEVEL"),
        ):
            value = os.getenv(env_name)
            if value:
                data[name] = value

        resource_env = os.getenv("OTEL_RESOURCE_ATTRIBUTES")
        if resource_env:
            data["resource_attributes"] = {
                **data["resource_attributes"],
                **_parse_resource_attributes(resource_env),
            }

        data.update(overrides)
        return cls(**data)

    def resource(self) -> Resource:
        """OpenTelemetry resource shared by the tracer, meter and logger providers."""
        attributes = {
            "service.name": self.service_name,
            "service.namespace": self.service_namespace,
        }
        attributes.update(self.resource_attributes)
        return Resource.create(attributes)


def _flag_from_env(*names: str) -> bool | None:
    for name in names:
        value = os.getenv(name)
        if value is not None:
            return value.strip().lower() in _TRUTHY
    return None


def _with_suffix(base: str | None, suffix: str) -> str | None:
    if not base:
        return None
    return f"{base.rstrip('/')}/{suffix}"


def _parse_resource_attributes(raw: str) -> dict[str, str]:
    # Entries without "=" are skipped.
    pairs = (part.split("=", 1) for part in raw.split(",") if "=" in part)
    return {key.strip(): value.strip() for key, value in pairs}


@lru_cache(maxsize=1)
def load_telemetry_config() -> TelemetryConfig:
    """Load and cache telemetry config from the environment."""

    return TelemetryConfig.from_env()


def init_telemetry(config: TelemetryConfig | None = None) -> TelemetryConfig:
    """Install providers for every enabled exporter and return the config used."""

    resolved = config or load_telemetry_config()

    if resolved.enable_tracing:
        init_tracing(resolved)
    if resolved.enable_metrics:
        init_metrics(resolved)
    if resolved.enable_logging:
        init_logging(resolved)
    return resolved
