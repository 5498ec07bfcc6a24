import requests
from requests.adapters import HTTPAdapter

from sui_harness.exceptions.provider import ProviderReadTimeout, ProviderUnreachable


# Seriously requests? For Humans?
class TimeOutHTTPAdapter(HTTPAdapter):
    def __init__(self, *args, **kwargs):
        self.timeout = kwargs.pop("timeout", None)
        super().__init__(*args, **kwargs)

    def send(self, *args, **kwargs):
        if "timeout" not in kwargs or not kwargs["timeout"]:
            kwargs["timeout"] = self.timeout
        return super().send(*args, **kwargs)


class ProviderAdapter(TimeOutHTTPAdapter):
    """Error handling for requests to the fullnode and faucet endpoints.

    Converts the transport level exceptions of :mod:`requests` into
    :class:`ProviderError` subclasses before other code gets the chance to
    see them. Non-2xx responses are handed up to the requesting code untouched,
    since the faucet and the fullnode give different meanings to them.
    """

    def send(self, request, *args, **kwargs):
        try:
            return super(ProviderAdapter, self).send(request, *args, **kwargs)
        except requests.exceptions.ReadTimeout as e:
            raise ProviderReadTimeout(str(e), url=request.url) from e
        except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as e:
            raise ProviderUnreachable(str(e), url=request.url) from e


def make_session(timeout: int) -> requests.Session:
    session = requests.Session()
    session.mount("http://", ProviderAdapter(timeout=timeout))
    session.mount("https://", ProviderAdapter(timeout=timeout))
    return session
