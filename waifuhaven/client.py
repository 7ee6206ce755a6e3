from __future__ import annotations
import random
import logging
from typing import Any, Callable, Dict, Optional

import requests

from .base_client import BaseClient
from .cache import CATEGORY_CACHE_TTL, CategoryCache
from .config import BOT_USER_AGENT, DEFAULT_BASE_URL, DEFAULT_TIMEOUT, DEFAULT_USER_AGENT, BotMetadata, ClientConfig
from .exceptions import UnknownApiError, ValidationError, WaifuHavenError
from .models import IMAGE_TYPES, CategorySet, ImageResult, RequestStats, ServiceResponse

logger = logging.getLogger(__name__)

Hook = Callable[[str, Dict[str, Any]], None]


class WaifuHavenClient(BaseClient):
    """Client for the Waifu Haven image API.

    Each instance owns its category cache and request counters; nothing is
    shared between clients.
    """

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        bot: Optional[BotMetadata] = None,
        requests_per_second: Optional[float] = None,
        session: Optional[requests.Session] = None,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], float]] = None,
        hook: Optional[Hook] = None,
    ):
        config = ClientConfig(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            user_agent=user_agent,
            bot=bot or BotMetadata(),
            requests_per_second=requests_per_second,
        )
        super().__init__(timeout=config.timeout, session=session, requests_per_second=config.requests_per_second)
        self.config = config
        self.BASE_URL = config.base_url
        self.rng = rng or random.Random()
        self.hook = hook
        self._categories = CategoryCache(ttl_seconds=CATEGORY_CACHE_TTL, clock=clock)
        self.stats = RequestStats()

    @classmethod
    def from_config(cls, config: ClientConfig, **kwargs: Any) -> 'WaifuHavenClient':
        return cls(
            config.api_key,
            base_url=config.base_url,
            timeout=config.timeout,
            user_agent=config.user_agent,
            bot=config.bot,
            requests_per_second=config.requests_per_second,
            **kwargs,
        )

    @classmethod
    def from_env(cls, **kwargs: Any) -> 'WaifuHavenClient':
        return cls.from_config(ClientConfig.from_env(), **kwargs)

    @classmethod
    def create_bot(cls, api_key: str, **kwargs: Any) -> 'WaifuHavenClient':
        """Client preconfigured for Discord bots."""
        kwargs.setdefault('user_agent', BOT_USER_AGENT)
        return cls(api_key, **kwargs)

    @staticmethod
    def validate_api_key(api_key: Any) -> bool:
        """Format check only: a string of at least 10 characters."""
        return isinstance(api_key, str) and len(api_key) >= 10

    def _headers(self) -> Dict[str, str]:
        headers = {
            'Authorization': f"Bearer {self.config.api_key}",
            'User-Agent': self.config.user_agent,
            'Accept': 'application/json',
        }
        headers.update(self.config.bot.headers())
        return headers

    def _emit(self, event: str, **fields: Any) -> None:
        if self.hook is None:
            return
        try:
            self.hook(event, fields)
        except Exception:
            logger.exception('Observability hook failed on %s', event)

    # categories

    def get_categories(self) -> CategorySet:
        """Return the known categories, refetching once the cached copy expires.

        Falls back to the static default set on any failure. The fallback is
        not cached, so the next call asks the service again.
        """
        cached = self._categories.load()
        if cached is not None:
            self._emit('categories.cache_hit')
            return cached
        try:
            payload = self._request('GET', 'categories', headers=self._headers())
            if payload.get('success') is not True or not isinstance(payload.get('data'), dict):
                raise UnknownApiError('Failed to fetch categories', status_code=200, payload=payload)
            categories = CategorySet.from_payload(payload['data'], fetched_at=self._categories.now())
        except (WaifuHavenError, ValueError) as e:
            logger.warning('Falling back to default categories: %s', e)
            self._emit('categories.fallback', error=str(e))
            return CategorySet.default(fetched_at=self._categories.now())
        self._categories.save(categories)
        logger.debug('Fetched %d sfw / %d nsfw categories', len(categories.sfw), len(categories.nsfw))
        self._emit('categories.fetched', sfw=len(categories.sfw), nsfw=len(categories.nsfw))
        return categories

    def invalidate_categories(self) -> None:
        self._categories.invalidate()

    # images

    def get_image(self, category: str, image_type: str = 'sfw') -> ImageResult:
        self.stats.total_requests += 1
        try:
            result = self._fetch_image(category, image_type)
        except WaifuHavenError as e:
            self.stats.failed_requests += 1
            logger.error('Error fetching image: %s', e)
            self._emit('image.failed', category=category, type=image_type, error=str(e))
            raise
        self.stats.successful_requests += 1
        self._emit('image.fetched', category=result.category, type=image_type, url=result.url)
        return result

    def _fetch_image(self, category: str, image_type: str) -> ImageResult:
        if not category or not isinstance(category, str):
            raise ValidationError('Category is required and must be a string')
        if image_type not in IMAGE_TYPES:
            raise ValidationError('Type must be either "sfw" or "nsfw"')

        valid = self.get_categories()[image_type]
        if category not in valid:
            raise ValidationError(f"Invalid {image_type.upper()} category. Valid categories: {', '.join(valid)}")

        payload = self._request('GET', f"{image_type}/{category}", headers=self._headers(), category=category)
        data = payload.get('data')
        if payload.get('success') is not True or not isinstance(data, dict):
            raise UnknownApiError(f"API error (200): {payload.get('message') or 'Failed to fetch image'}", status_code=200, payload=payload)
        meta = payload.get('meta')
        return ImageResult.from_payload(data, meta if isinstance(meta, dict) else None)

    def get_sfw(self, category: str) -> ImageResult:
        return self.get_image(category, 'sfw')

    def get_nsfw(self, category: str) -> ImageResult:
        return self.get_image(category, 'nsfw')

    def get_random_image(self, image_type: str = 'sfw') -> ImageResult:
        """Fetch an image from a random category.

        ``image_type`` is ``sfw``, ``nsfw`` or ``any``. For ``any`` a coin flip picks
        the list to draw from, then the picked name is requested under the
        type it belongs to (sfw when listed under both).
        """
        if image_type not in IMAGE_TYPES + ('any',):
            raise ValidationError('Type must be "sfw", "nsfw", or "any"')
        categories = self.get_categories()

        if image_type == 'any':
            chosen = self.rng.choice(IMAGE_TYPES)
            other = 'nsfw' if chosen == 'sfw' else 'sfw'
            if not categories[chosen]:
                chosen = other
            available = categories[chosen]
        else:
            chosen = image_type
            available = categories[image_type]

        if not available:
            raise ValidationError(f"No categories available for type: {image_type}")

        picked = self.rng.choice(available)
        if image_type == 'any':
            # names listed under both types resolve to sfw
            chosen = 'sfw' if picked in categories.sfw else 'nsfw'
        return self.get_image(picked, chosen)

    # service info

    def get_health(self) -> ServiceResponse:
        try:
            payload = self._request('GET', 'health')
        except WaifuHavenError as e:
            logger.warning('Health check failed: %s', e)
            return ServiceResponse(success=False, error=str(e))
        status = payload.get('status')
        return ServiceResponse(success=True, data=payload, status=str(status) if status is not None else None)

    def get_status(self) -> ServiceResponse:
        try:
            payload = self._request('GET', 'status', headers=self._headers())
        except WaifuHavenError as e:
            logger.warning('Status check failed: %s', e)
            return ServiceResponse(success=False, error=str(e))
        return ServiceResponse(success=True, data=payload)

    # stats

    def get_stats(self) -> Dict[str, Any]:
        return self.stats.snapshot()

    def reset_stats(self) -> None:
        self.stats = RequestStats()
