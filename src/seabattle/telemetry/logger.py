"""Console and OTLP log output for the ``seabattle`` logger hierarchy."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from opentelemetry._logs import set_logger_provider
from opentelemetry.exporter.otlp.proto.grpc._log_exporter import OTLPLogExporter
from opentelemetry.sdk._logs import LoggerProvider, LoggingHandler
from opentelemetry.sdk._logs.export import BatchLogRecordProcessor

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .config import TelemetryConfig

PACKAGE_LOGGER = "seabattle"
LOG_FORMAT = (
    "%(asctime)s | %(levelname)s | %(name)s | %(message)s "
    "| trace_id=%(otelTraceID)s span_id=%(otelSpanID)s"
)

_OTLP_HANDLER: logging.Handler | None = None


class _OtelContextFilter(logging.Filter):
    """Fills the trace/span placeholders of ``LOG_FORMAT`` outside any span."""

    def filter(self, record: logging.LogRecord) -> bool:  # pragma: no cover - trivial
        if not hasattr(record, "otelTraceID"):
            record.otelTraceID = "-"
        if not hasattr(record, "otelSpanID"):
            record.otelSpanID = "-"
        return True


def init_logging(config: TelemetryConfig) -> logging.Logger:
    """Set the engine log level, console format and, with an endpoint, OTLP export.

    Returns the ``seabattle`` package logger every engine module logs under.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(config.log_level.upper())
    _install_console_format()

    if config.otlp_logs_endpoint:
        _install_otlp_handler(config)
    return logger


def _install_console_format() -> None:
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(format=LOG_FORMAT)
    for handler in root_logger.handlers:
        if not any(isinstance(f, _OtelContextFilter) for f in handler.filters):
            handler.addFilter(_OtelContextFilter())


def _install_otlp_handler(config: TelemetryConfig) -> None:
    global _OTLP_HANDLER
    if _OTLP_HANDLER is not None:
        return

    provider = LoggerProvider(resource=config.resource())
    exporter = OTLPLogExporter(endpoint=config.otlp_logs_endpoint, insecure=True)
    provider.add_log_record_processor(BatchLogRecordProcessor(exporter))
    set_logger_provider(provider)

    handler = LoggingHandler(level=logging.NOTSET, logger_provider=provider)
    handler.addFilter(_OtelContextFilter())
    logging.getLogger(PACKAGE_LOGGER).addHandler(handler)
    _OTLP_HANDLER = handler
