"""Prometheus instruments for the API and the story pipeline."""

from __future__ import annotations

from time import perf_counter
from typing import Any, Optional

from fastapi import FastAPI, Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request

_NAMESPACE = "storytime"

HTTP_REQUESTS = Counter(
    "http_requests_total",
    "HTTP requests handled, by route template and status",
    labelnames=("service", "method", "route", "status"),
    namespace=_NAMESPACE,
)
HTTP_LATENCY = Histogram(
    "http_request_duration_seconds",
    "Wall time spent serving HTTP requests",
    labelnames=("service", "method", "route"),
    namespace=_NAMESPACE,
)
STAGE_DURATION = Histogram(
    "stage_duration_seconds",
    "Time a generation run spent in each stage",
    labelnames=("service", "stage"),
    namespace=_NAMESPACE,
)
STAGE_OUTCOMES = Counter(
    "stage_runs_total",
    "Stages left, by outcome",
    labelnames=("service", "stage", "status"),
    namespace=_NAMESPACE,
)
STORIES = Counter(
    "stories_total",
    "Finished generation runs, by final story status",
    labelnames=("service", "status"),
    namespace=_NAMESPACE,
)
STORY_PAGES = Histogram(
    "story_pages",
    "Pages per generated story",
    labelnames=("service",),
    buckets=(1, 2, 3, 4, 5, 6, 8, 10, 12, 15),
    namespace=_NAMESPACE,
)
AUDIO_CACHE_LOOKUPS = Counter(
    "audio_cache_lookups_total",
    "Narration cache lookups, by result",
    labelnames=("service", "result"),
    namespace=_NAMESPACE,
)
PROVIDER_TOKENS = Counter(
    "provider_tokens_total",
    "Tokens billed by text providers",
    labelnames=("service", "stage", "provider", "token_type"),
    namespace=_NAMESPACE,
)
PROVIDER_CHARACTERS = Counter(
    "provider_characters_total",
    "Characters sent to speech providers",
    labelnames=("service", "stage", "provider"),
    namespace=_NAMESPACE,
)
PROVIDER_COST = Counter(
    "provider_cost_usd_total",
    "Estimated provider spend in USD",
    labelnames=("service", "stage", "provider"),
    namespace=_NAMESPACE,
)
PROVIDER_LATENCY = Histogram(
    "provider_latency_seconds",
    "Latency of a single provider call",
    labelnames=("service", "stage", "provider"),
    namespace=_NAMESPACE,
)


def _route_template(request: Request) -> str:
    # Label by the matched template (``/api/stories/{story_id}``), not the raw path.
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Count and time every request that reaches the app."""

    def __init__(self, app: FastAPI, service_name: str) -> None:
        super().__init__(app)
        self.service_name = service_name

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        started = perf_counter()
        response = await call_next(request)
        route = _route_template(request)
        HTTP_REQUESTS.labels(self.service_name, request.method, route, str(response.status_code)).inc()
        HTTP_LATENCY.labels(self.service_name, request.method, route).observe(perf_counter() - started)
        return response


def setup_fastapi_metrics(app: FastAPI, service_name: str, endpoint: str = "/metrics") -> None:
    """Install the middleware and expose ``endpoint``; repeated calls are ignored."""

    if getattr(app.state, "metrics_configured", False):
        return

    app.add_middleware(PrometheusMiddleware, service_name=service_name)

    async def metrics() -> Response:
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.add_api_route(endpoint, metrics, methods=["GET"], include_in_schema=False)
    app.state.metrics_configured = True


def observe_stage_duration(
    stage: str,
    duration_seconds: float,
    *,
    service_name: str,
    status: str = "success",
) -> None:
    STAGE_DURATION.labels(service_name, stage).observe(max(duration_seconds, 0.0))
    STAGE_OUTCOMES.labels(service_name, stage, status).inc()


def observe_story_outcome(status: str, page_count: int, *, service_name: str) -> None:
    """Record how a generation run ended and how many pages it produced."""

    STORIES.labels(service_name, status).inc()
    if page_count > 0:
        STORY_PAGES.labels(service_name).observe(page_count)


def observe_audio_cache(hit: bool, *, service_name: str) -> None:
    AUDIO_CACHE_LOOKUPS.labels(service_name, "hit" if hit else "miss").inc()


def _non_negative(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
        return None
    return float(value)


def observe_provider_response(
    *,
    stage: str,
    provider: str,
    service_name: str,
    response: Optional[Any],
) -> None:
    """Record usage from a text, image or speech response.

    Responses only carry the fields relevant to their kind, so each one is
    read with ``getattr`` and skipped when absent.
    """

    if response is None:
        return

    for token_type, attr in (("prompt", "prompt_tokens"), ("completion", "completion_tokens")):
        tokens = _non_negative(getattr(response, attr, None))
        if tokens is not None:
            PROVIDER_TOKENS.labels(service_name, stage, provider, token_type).inc(tokens)

    characters = _non_negative(getattr(response, "characters", None))
    if characters is not None:
        PROVIDER_CHARACTERS.labels(service_name, stage, provider).inc(characters)

    latency_ms = _non_negative(getattr(response, "latency_ms", None))
    if latency_ms is not None:
        PROVIDER_LATENCY.labels(service_name, stage, provider).observe(latency_ms / 1000)

    cost = _non_negative(getattr(response, "cost_usd", None))
    if cost is not None:
        PROVIDER_COST.labels(service_name, stage, provider).inc(cost)


__all__ = [
    "PrometheusMiddleware",
    "setup_fastapi_metrics",
    "observe_stage_duration",
    "observe_story_outcome",
    "observe_audio_cache",
    "observe_provider_response",
]
