# ldatune/utils/telemetry.py
from __future__ import annotations
import contextlib, time
from dataclasses import dataclass
from typing import Optional, Iterator, Any

from opentelemetry import trace, metrics
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.exporter.otlp.proto.http.metric_exporter import OTLPMetricExporter
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.trace.sampling import ParentBased, TraceIdRatioBased

from ldatune.core.config import settings
import logging

logger = logging.getLogger("ldatune.obs")


@dataclass
class ObsConfig:
    env: str = settings.ENV
    service_name: str = settings.OTEL_SERVICE_NAME
    service_version: Optional[str] = settings.OTEL_SERVICE_VERSION
    sample_ratio: float = settings.OTEL_SAMPLE_RATIO
    enable_metrics: bool = settings.OTEL_ENABLE_METRICS
    endpoint: Optional[str] = settings.OTEL_EXPORTER_OTLP_ENDPOINT


_cfg = ObsConfig()
_tracer = trace.get_tracer(__name__)
_meter = None
_step_hist = None
_failure_counter = None


def _clamp_ratio(x, default=1.0) -> float:
    try:
        v = float(x)
        return max(0.0, min(1.0, v))
    except (TypeError, ValueError):
        return default


def _join(base: str, path: str) -> str:
    base = base.rstrip("/")
    path = path if path.startswith("/") else "/" + path
    return base + path


def _build_resource() -> Resource:
    attrs = {
        "service.name": _cfg.service_name,
        "deployment.environment": _cfg.env,
    }
    if _cfg.service_version:
        attrs["service.version"] = _cfg.service_version
    return Resource.create(attrs)


def setup_observability() -> None:
    """Install tracer/meter providers. Without an OTLP endpoint spans are
    recorded but not exported."""
    resource = _build_resource()
    tp = TracerProvider(
        resource=resource,
        sampler=ParentBased(TraceIdRatioBased(_clamp_ratio(_cfg.sample_ratio))),
    )
    if _cfg.endpoint:
        traces_ep = _join(_cfg.endpoint, "/v1/traces")
        tp.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=traces_ep)))
        logger.info("OTEL traces_ep=%s", traces_ep)
    trace.set_tracer_provider(tp)

    global _meter, _step_hist, _failure_counter
    if _cfg.enable_metrics and _cfg.endpoint:
        metrics_ep = _join(_cfg.endpoint, "/v1/metrics")
        mp = MeterProvider(
            resource=resource,
            metric_readers=[
                PeriodicExportingMetricReader(OTLPMetricExporter(endpoint=metrics_ep))
            ],
        )
        metrics.set_meter_provider(mp)
        logger.info("OTEL metrics_ep=%s", metrics_ep)

    _meter = metrics.get_meter("ldatune.obs")
    if _cfg.enable_metrics:
        _step_hist = _meter.create_histogram(
            "ldatune.step.duration", unit="ms", description="Evaluation step duration"
        )
        _failure_counter = _meter.create_counter(
            "ldatune.job.failures_total", description="Failed (k, fold) jobs by kind"
        )


# helpers
@contextlib.contextmanager
def step(name: str, **attrs: Any) -> Iterator[None]:
    start = time.perf_counter()
    with _tracer.start_as_current_span(name) as span:
        for k, v in attrs.items():
            if v is not None:
                span.set_attribute(f"ldatune.{k}", v)
        try:
            yield
            span.set_attribute("ldatune.success", True)
        except Exception as e:
            span.record_exception(e)
            span.set_attribute("ldatune.success", False)
            span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
            raise
        finally:
            if _step_hist:
                _step_hist.record((time.perf_counter() - start) * 1000, {"step": name})


def mark_failure(kind: str) -> None:
    if _failure_counter:
        _failure_counter.add(1, {"kind": kind})
