"""
Contract expected of the caching HTTP layer.

The engine never fetches anything itself.  Views that show a
server-generated forecast obtain it through an object satisfying
ConditionalGetter, then decode it with io.serializers.dict_to_forecast.
"""

from dataclasses import dataclass
from typing import Any, Generic, Literal, Protocol, TypeVar

from ..core.models import RtfForecast
from .serializers import dict_to_forecast

CacheStatus = Literal["hit", "miss", "stale", "fresh"]
CACHE_STATUSES: tuple[str, ...] = ("hit", "miss", "stale", "fresh")

T = TypeVar("T")


@dataclass(frozen=True)
class CachedResponse(Generic[T]):
    """Payload plus the cache metadata the transport reports."""

    data: T
    cache_status: CacheStatus
    etag: str | None = None

    def __post_init__(self) -> None:
        if self.cache_status not in CACHE_STATUSES:
            raise ValueError(f"Invalid cache_status: {self.cache_status!r}")


class ConditionalGetter(Protocol):
    """
    ETag-aware GET keyed by endpoint.

    ``max_age`` is in seconds; entries older than that are revalidated.
    """

    def conditional_get(
        self, key: str, max_age: float | None = None
    ) -> CachedResponse[Any]: ...


def forecast_endpoint(routine_id: str) -> str:
    """Cache key / path of the forecast endpoint for a routine."""
    return f"/routines/{routine_id}/rtf-forecast"


def fetch_forecast(
    client: ConditionalGetter,
    routine_id: str,
    max_age: float | None = None,
) -> CachedResponse[RtfForecast]:
    """
    Fetch a server forecast through *client* and decode it.

    Returns:
        CachedResponse whose data is an RtfForecast

    Raises:
        ValidationError: If the payload is not a valid forecast
    """
    response = client.conditional_get(forecast_endpoint(routine_id), max_age=max_age)
    return CachedResponse(
        data=dict_to_forecast(response.data),
        cache_status=response.cache_status,
        etag=response.etag,
    )
