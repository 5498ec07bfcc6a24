class ProviderError(ConnectionError):
    """There was an error while sending a request to/receiving a response from a Sui endpoint.

    Typically, errors subclassing from this exception are raised on the
    communication layer level (the :class:`ProviderAdapter` and the
    :class:`JsonRpcProvider`). Raising them in other parts of the code should
    not be necessary.
    """

    def __init__(self, reason=None, url=None):
        self.url = url
        if url:
            message = f"Error communicating with '{url}'! {reason or ''}".strip()
        else:
            message = f"Error communicating with a Sui endpoint! {reason or ''}".strip()
        super(ProviderError, self).__init__(message)


class ProviderConnectionError(ProviderError):
    """An error occurred while trying to connect to an endpoint.

    This exception is raised from:

        * :exc:`requests.ConnectionError`
        * :exc:`requests.Timeout`
    """


class ProviderUnreachable(ProviderConnectionError):
    """The endpoint could not be reached at all.

    Raised from:

        * :exc:`requests.ProxyError`
        * :exc:`requests.SSLError`
        * :exc:`requests.ConnectTimeout`
        * :exc:`requests.ConnectionError`
    """


class ProviderReadTimeout(ProviderConnectionError):
    """The endpoint was too slow when responding."""


class ProviderResponseError(ProviderError):
    """We received a response, but there was a problem with it.

    Generally speaking, this is raised for any non-2xx-range http status codes.
    """

    def __init__(self, reason=None, url=None, status_code=None):
        self.status_code = status_code
        super(ProviderResponseError, self).__init__(reason, url)


class JsonRpcError(ProviderResponseError):
    """The fullnode answered a JSON-RPC request with an `error` member."""

    def __init__(self, code, message, data=None, url=None):
        self.code = code
        self.rpc_message = message
        self.data = data
        super(JsonRpcError, self).__init__(f"JSON-RPC error {code}: {message}", url)
