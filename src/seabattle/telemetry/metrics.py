"""Meters for the engine counters and ad-hoc game metrics."""

from __future__ import annotations

from typing import TYPE_CHECKING, Mapping

from opentelemetry import metrics as otel_metrics
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter
from opentelemetry.metrics import Counter, Meter
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader

if TYPE_CHECKING:  # pragma: no cover
    from .config import TelemetryConfig

MetricAttributes = Mapping[str, str | bool | int | float]

EXPORT_INTERVAL_MILLIS = 5000

_METERS: dict[str, Meter] = {}
# Counters created by record_game_metric, keyed by metric name.
_GAME_COUNTERS: dict[str, Counter] = {}


def get_meter(name: str = "seabattle") -> Meter:
    meter = _METERS.get(name)
    if meter is None:
        meter = otel_metrics.get_meter(name)
        _METERS[name] = meter
    return meter


def init_metrics(config: TelemetryConfig) -> Meter:
    readers = []
    if config.otlp_metrics_endpoint:
        exporter = OTLPMetricExporter(endpoint=config.otlp_metrics_endpoint, insecure=True)
        readers.append(
            PeriodicExportingMetricReader(exporter, export_interval_millis=EXPORT_INTERVAL_MILLIS)
        )

    provider = MeterProvider(resource=config.resource(), metric_readers=readers)
    otel_metrics.set_meter_provider(provider)

    _GAME_COUNTERS.clear()
    meter = provider.get_meter(config.service_name)
    _METERS[config.service_name] = meter
    return meter


def record_game_metric(name: str, value: float, attrs: MetricAttributes | None = None) -> None:
    """Add ``value`` to the game counter ``name``, creating it on first use."""
    counter = _GAME_COUNTERS.get(name)
    if counter is None:
        counter = get_meter().create_counter(name, unit="1")
        _GAME_COUNTERS[name] = counter
    counter.add(value, attributes=attrs or {})
