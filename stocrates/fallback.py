from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
import logging
from typing import Dict, Iterable, Optional

from .models import FetchResult, ProviderStatus
from .providers.base import NewsProvider, ProviderList, RateLimitError
from .ratelimit import MinIntervalLimiter, SystemClock

logger = logging.getLogger(__name__)

RATE_LIMIT_COOLDOWN = 60 * 60
MIN_REQUEST_INTERVAL = 1.0


def is_rate_limit_error(exc: BaseException) -> bool:
    return isinstance(exc, RateLimitError) or "RATE_LIMIT" in str(exc)


class FallbackManager:
    """Tries news providers in priority order, skipping rate-limited ones.

    A provider that reports a rate limit is skipped for a fixed cooldown.
    Other errors are recorded but leave the provider available. The status
    map belongs to this instance; build one per process and pass it around.
    """

    def __init__(
        self,
        providers: Iterable[NewsProvider],
        cooldown: float = RATE_LIMIT_COOLDOWN,
        limiter: Optional[MinIntervalLimiter] = None,
        clock: Optional[SystemClock] = None,
    ) -> None:
        self.providers: ProviderList = list(providers)
        if not self.providers:
            raise ValueError("FallbackManager needs at least one provider")
        self.cooldown = cooldown
        self.clock = clock or (limiter.clock if limiter is not None else SystemClock())
        self.limiter = limiter or MinIntervalLimiter(MIN_REQUEST_INTERVAL, self.clock)
        self._status: Dict[str, ProviderStatus] = {}
        for provider in self.providers:
            if provider.name in self._status:
                raise ValueError(f"Duplicate provider name: {provider.name}")
            self._status[provider.name] = ProviderStatus(
                name=provider.name,
                display_name=provider.display_name or provider.name,
                configured=provider.configured,
                last_error=None if provider.configured else "API key not configured",
            )

    def fetch_with_fallback(
        self,
        symbol: str,
        company_name: Optional[str] = None,
        days_back: int = 30,
    ) -> FetchResult:
        fallback_used = False
        for provider in self.providers:
            status = self._status[provider.name]
            if not self.is_available(provider.name):
                logger.info("Skipping %s - rate limited or unavailable", status.display_name)
                fallback_used = True
                continue

            self.limiter.acquire(provider.name)
            status.last_request_at = self.clock.now()

            try:
                logger.info("Attempting to fetch %s news from %s", symbol, status.display_name)
                articles = list(provider.fetch(symbol, company_name, days_back))
            except Exception as exc:
                if is_rate_limit_error(exc):
                    logger.warning("%s rate limit exceeded, marking as unavailable", status.display_name)
                    self.mark_rate_limited(provider.name)
                else:
                    logger.error("Error fetching from %s: %s", status.display_name, exc)
                    status.last_error = str(exc) or exc.__class__.__name__
                fallback_used = True
                continue

            self._mark_success(status)
            if articles:
                logger.info("Fetched %d articles from %s", len(articles), status.display_name)
                return FetchResult(articles=articles, source=status.display_name, fallback_used=fallback_used)
            logger.info("%s returned 0 articles, trying next provider", status.display_name)
            fallback_used = True

        logger.error("All news providers failed or are rate limited")
        return FetchResult(articles=[], source="none", fallback_used=True)

    def is_available(self, name: str) -> bool:
        status = self._status.get(name)
        if status is None or not status.configured:
            return False
        if status.rate_limit_reset_at is not None:
            if self.clock.now() < status.rate_limit_reset_at:
                return False
            status.available = True
            status.rate_limit_reset_at = None
            logger.info("%s rate limit reset, marking as available", status.display_name)
        return status.available

    def mark_rate_limited(self, name: str) -> None:
        status = self._status[name]
        status.available = False
        status.rate_limit_reset_at = self.clock.now() + self.cooldown
        status.last_error = "Rate limit exceeded"
        logger.warning(
            "%s will be unavailable until %s",
            status.display_name,
            datetime.fromtimestamp(status.rate_limit_reset_at, tz=timezone.utc).isoformat(),
        )

    def get_status(self) -> Dict[str, ProviderStatus]:
        # Expired cooldowns are restored before the snapshot is taken.
        for name in self._status:
            self.is_available(name)
        return {name: replace(status) for name, status in self._status.items()}

    def reset(self) -> None:
        for status in self._status.values():
            status.available = True
            status.rate_limit_reset_at = None
            status.last_error = None
        logger.info("All provider statuses reset")

    @staticmethod
    def _mark_success(status: ProviderStatus) -> None:
        status.available = True
        status.request_count += 1
        status.last_error = None
