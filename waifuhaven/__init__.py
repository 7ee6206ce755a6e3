"""Client for the Waifu Haven image API.

Usage example:
    from waifuhaven import WaifuHavenClient
    client = WaifuHavenClient.from_env()
    image = client.get_sfw('waifu')
    print(image.url)
"""
from .client import WaifuHavenClient  # noqa: F401
from .config import BotMetadata, ClientConfig  # noqa: F401
from .models import CategorySet, ImageResult, RequestStats, ServiceResponse  # noqa: F401
from .exceptions import (  # noqa: F401
    AccessDeniedError,
    ApiAuthError,
    ApiRateLimitError,
    ApiRequestError,
    CategoryNotFoundError,
    ConfigError,
    InvalidCredentialsError,
    InvalidRequestError,
    RateLimitedError,
    ServerError,
    TransportError,
    UnknownApiError,
    ValidationError,
    WaifuHavenError,
)

__version__ = '2.1.0'
