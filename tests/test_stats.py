import pytest

from waifuhaven import CategoryNotFoundError, ValidationError
from waifuhaven.models import RequestStats

from conftest import FakeResponse, categories_response, image_response


@pytest.fixture
def routed(session):
    session.add('/categories', categories_response())
    session.add('/sfw/waifu', image_response('waifu'))
    session.add('/sfw/maid', FakeResponse(404, {}))
    return session


def test_fresh_client_reports_zero(client):
    assert client.get_stats() == {
        'total_requests': 0,
        'successful_requests': 0,
        'failed_requests': 0,
        'success_rate': '0%',
    }


def test_counts_successes_and_failures(client, routed):
    for _ in range(2):
        client.get_sfw('waifu')
    with pytest.raises(CategoryNotFoundError):
        client.get_sfw('maid')
    stats = client.get_stats()
    assert stats['total_requests'] == 3
    assert stats['successful_requests'] == 2
    assert stats['failed_requests'] == 1
    assert stats['success_rate'] == '66.7%'


def test_validation_failures_count_as_failed(client, routed):
    with pytest.raises(ValidationError):
        client.get_sfw('')
    with pytest.raises(ValidationError):
        client.get_sfw('hentai')
    stats = client.get_stats()
    assert stats['total_requests'] == 2
    assert stats['failed_requests'] == 2
    assert stats['success_rate'] == '0.0%'


def test_random_image_counts_once(client, routed):
    routed.add('/categories', categories_response(sfw=('waifu',)))
    client.get_random_image('sfw')
    assert client.get_stats()['total_requests'] == 1


def test_reset_zeroes_counters(client, routed):
    client.get_sfw('waifu')
    with pytest.raises(CategoryNotFoundError):
        client.get_sfw('maid')
    client.reset_stats()
    stats = client.get_stats()
    assert (stats['total_requests'], stats['successful_requests'], stats['failed_requests']) == (0, 0, 0)


def test_success_rate_property():
    stats = RequestStats(total_requests=4, successful_requests=3, failed_requests=1)
    assert stats.success_rate == 75.0
    assert stats.snapshot()['success_rate'] == '75.0%'
    assert RequestStats().success_rate == 0.0
