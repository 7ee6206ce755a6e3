from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Tuple

IMAGE_TYPES = ('sfw', 'nsfw')

# Static default used only when /categories cannot be reached; not service data.
DEFAULT_SFW_CATEGORIES = (
    'kurumi', 'rushia', 'waifu', 'maid', 'marin-kitagawa',
    'mori-calliope', 'raiden-shogun', 'oppai', 'uniform', 'kamisato-ayaka',
)
DEFAULT_NSFW_CATEGORIES = ('ass', 'hentai', 'redo-of-healer', 'blowjob', 'waifu', 'milf')


def _unique(names: Iterable[Any]) -> Tuple[str, ...]:
    seen: Dict[str, None] = {}
    for n in names:
        if isinstance(n, str) and n:
            seen.setdefault(n, None)
    return tuple(seen)


@dataclass(frozen=True)
class CategorySet:
    """Known category names per image type."""
    sfw: Tuple[str, ...]
    nsfw: Tuple[str, ...]
    fetched_at: float = 0.0
    source: str = 'service'  # service | default

    @classmethod
    def from_payload(cls, data: Dict[str, Any], fetched_at: float) -> 'CategorySet':
        sfw = data.get('sfw')
        nsfw = data.get('nsfw')
        if not isinstance(sfw, list) or not isinstance(nsfw, list):
            raise ValueError('categories payload must contain sfw and nsfw lists')
        return cls(sfw=_unique(sfw), nsfw=_unique(nsfw), fetched_at=fetched_at)

    @classmethod
    def default(cls, fetched_at: float = 0.0) -> 'CategorySet':
        return cls(sfw=DEFAULT_SFW_CATEGORIES, nsfw=DEFAULT_NSFW_CATEGORIES, fetched_at=fetched_at, source='default')

    def __getitem__(self, image_type: str) -> Tuple[str, ...]:
        if image_type == 'sfw':
            return self.sfw
        if image_type == 'nsfw':
            return self.nsfw
        raise KeyError(image_type)

    def is_stale(self, now: float, ttl_seconds: float) -> bool:
        return now - self.fetched_at >= ttl_seconds

    def to_dict(self) -> Dict[str, Any]:
        return {'sfw': list(self.sfw), 'nsfw': list(self.nsfw), 'source': self.source}


@dataclass(frozen=True)
class ImageResult:
    url: str
    mime_type: str
    size: int
    category: str
    filename: str
    meta: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, data: Dict[str, Any], meta: Optional[Dict[str, Any]] = None) -> 'ImageResult':
        try:
            size = int(data.get('size') or 0)
        except (TypeError, ValueError):
            size = 0
        return cls(
            url=str(data.get('url', '')),
            mime_type=str(data.get('mimeType', '')),
            size=max(size, 0),
            category=str(data.get('category', '')),
            filename=str(data.get('filename', '')),
            meta=dict(meta or {}),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'url': self.url,
            'mimeType': self.mime_type,
            'size': self.size,
            'category': self.category,
            'filename': self.filename,
            'meta': self.meta,
        }


@dataclass
class RequestStats:
    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0

    @property
    def success_rate(self) -> float:
        if self.total_requests == 0:
            return 0.0
        return self.successful_requests / self.total_requests * 100

    def snapshot(self) -> Dict[str, Any]:
        rate = f"{self.success_rate:.1f}%" if self.total_requests else '0%'
        return {
            'total_requests': self.total_requests,
            'successful_requests': self.successful_requests,
            'failed_requests': self.failed_requests,
            'success_rate': rate,
        }


@dataclass
class ServiceResponse:
    """Outcome of /health or /status; failures are captured, never raised."""
    success: bool
    data: Optional[Dict[str, Any]] = None
    status: Optional[str] = None
    error: Optional[str] = None
