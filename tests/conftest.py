import random
from typing import Any, Dict, List, Optional

import pytest
import requests

from waifuhaven import WaifuHavenClient

BASE_URL = 'http://api.test'
API_KEY = 'waifu_live_test123456'


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, headers: Optional[Dict[str, str]] = None):
        self.status_code = status_code
        self._payload = payload
        self.headers = headers or {}

    def json(self):
        if self._payload is None:
            raise ValueError('No JSON object could be decoded')
        return self._payload


class FakeSession:
    """Stands in for requests.Session; routes by path and records calls."""

    def __init__(self):
        self.routes: Dict[str, Any] = {}
        self.calls: List[Dict[str, Any]] = []
        self.closed = False

    def add(self, path: str, response):
        self.routes[path] = response

    def request(self, method, url, headers=None, timeout=None):
        path = url[len(BASE_URL):]
        self.calls.append({'method': method, 'url': url, 'path': path, 'headers': headers, 'timeout': timeout})
        resp = self.routes.get(path)
        if resp is None:
            raise requests.ConnectionError(f'no route for {path}')
        if isinstance(resp, Exception):
            raise resp
        return resp

    def paths(self) -> List[str]:
        return [c['path'] for c in self.calls]

    def close(self):
        self.closed = True


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def categories_response(sfw=('waifu', 'maid'), nsfw=('hentai', 'milf')):
    return FakeResponse(200, {'success': True, 'data': {'sfw': list(sfw), 'nsfw': list(nsfw)}})


def image_response(category: str, image_type: str = 'sfw'):
    return FakeResponse(200, {
        'success': True,
        'data': {
            'url': f'https://cdn.test/{image_type}/{category}/1.png',
            'mimeType': 'image/png',
            'size': 2048,
            'category': category,
            'filename': '1.png',
        },
        'meta': {'requestId': 'abc'},
    })


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def client(session, clock):
    return WaifuHavenClient(API_KEY, base_url=BASE_URL, session=session, clock=clock, rng=random.Random(1234))
