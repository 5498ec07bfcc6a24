import pytest
import requests

from sui_harness.exceptions.provider import ProviderReadTimeout, ProviderUnreachable
from sui_harness.utils.http import make_session

URL = "http://fullnode.test:9000/"


@pytest.mark.parametrize(
    "exception, expected",
    argvalues=[
        (requests.exceptions.ReadTimeout, ProviderReadTimeout),
        (requests.exceptions.ConnectTimeout, ProviderUnreachable),
        (requests.exceptions.ConnectionError, ProviderUnreachable),
    ],
)
def test_transport_errors_are_converted(exception, expected, mocked_responses):
    mocked_responses.add(mocked_responses.POST, URL, body=exception("boom"))

    with pytest.raises(expected) as exc_info:
        make_session(timeout=1).post(URL, json={})
    assert exc_info.value.url == URL


def test_error_statuses_are_returned_untouched(mocked_responses):
    mocked_responses.add(mocked_responses.POST, URL, status=503)
    assert make_session(timeout=1).post(URL, json={}).status_code == 503
