import pytest
import requests

from waifuhaven import ImageResult, UnknownApiError, ValidationError

from conftest import API_KEY, FakeResponse, categories_response, image_response


@pytest.fixture
def known(session):
    session.add('/categories', categories_response())
    session.add('/sfw/waifu', image_response('waifu'))
    session.add('/nsfw/hentai', image_response('hentai', 'nsfw'))
    return session


def test_get_image_builds_result(client, known):
    image = client.get_image('waifu', 'sfw')
    assert isinstance(image, ImageResult)
    assert image.url == 'https://cdn.test/sfw/waifu/1.png'
    assert image.mime_type == 'image/png'
    assert image.size == 2048
    assert image.category == 'waifu'
    assert image.filename == '1.png'
    assert image.meta == {'requestId': 'abc'}


def test_get_image_sends_bearer_auth(client, known):
    client.get_image('waifu')
    call = known.calls[-1]
    assert call['path'] == '/sfw/waifu'
    assert call['method'] == 'GET'
    assert call['headers']['Authorization'] == f'Bearer {API_KEY}'


def test_get_sfw_and_get_nsfw(client, known):
    assert client.get_sfw('waifu').category == 'waifu'
    assert client.get_nsfw('hentai').category == 'hentai'
    assert known.paths() == ['/categories', '/sfw/waifu', '/nsfw/hentai']


@pytest.mark.parametrize('image_type', ['', 'SFW', 'any', 'gore', None])
def test_invalid_type_rejected(client, known, image_type):
    with pytest.raises(ValidationError, match='Type must be'):
        client.get_image('waifu', image_type)
    assert known.calls == []


@pytest.mark.parametrize('category', ['', None, 42, ['waifu']])
def test_empty_or_non_string_category_rejected(client, known, category):
    with pytest.raises(ValidationError, match='Category is required'):
        client.get_image(category)
    assert known.calls == []


def test_unknown_category_lists_valid_options(client, known):
    with pytest.raises(ValidationError) as exc:
        client.get_image('hentai', 'sfw')
    assert 'Invalid SFW category' in str(exc.value)
    assert 'waifu, maid' in str(exc.value)
    assert known.paths() == ['/categories']


def test_validation_uses_default_set_when_service_unreachable(client, session):
    session.add('/categories', requests.ConnectionError('down'))
    session.add('/sfw/kurumi', image_response('kurumi'))
    assert client.get_sfw('kurumi').category == 'kurumi'
    with pytest.raises(ValidationError, match='kamisato-ayaka'):
        client.get_sfw('not-a-category')


def test_unsuccessful_payload_raises(client, known):
    known.add('/sfw/waifu', FakeResponse(200, {'success': False, 'message': 'empty bucket'}))
    with pytest.raises(UnknownApiError, match='empty bucket'):
        client.get_sfw('waifu')


def test_non_json_body_raises(client, known):
    known.add('/sfw/waifu', FakeResponse(200, None))
    with pytest.raises(UnknownApiError, match='decode'):
        client.get_sfw('waifu')


def test_negative_size_clamped():
    image = ImageResult.from_payload({'url': 'u', 'size': -3})
    assert image.size == 0
    assert image.mime_type == ''


def test_failing_hook_does_not_change_result_or_stats(client, known):
    def hook(event, fields):
        raise RuntimeError('hook boom')
    client.hook = hook
    assert client.get_sfw('waifu').category == 'waifu'
    assert client.get_stats()['successful_requests'] == 1
