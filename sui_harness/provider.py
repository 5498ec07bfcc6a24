import itertools
from dataclasses import dataclass
from typing import Any, Iterator, List, Optional

import requests
import structlog

from sui_harness.constants import (
    DEFAULT_FAUCET_URL,
    DEFAULT_FULLNODE_URL,
    REQUEST_TIMEOUT,
    SUI_TYPE_ARG,
)
from sui_harness.exceptions import FaucetRateLimitError, FaucetSchemaError, TransientFaucetError
from sui_harness.exceptions.provider import (
    JsonRpcError,
    ProviderConnectionError,
    ProviderResponseError,
)
from sui_harness.utils.http import make_session

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Connection:
    fullnode: str
    faucet: str


localnet_connection = Connection(fullnode=DEFAULT_FULLNODE_URL, faucet=DEFAULT_FAUCET_URL)


class JsonRpcProvider:
    """Read chain state from and submit transactions to a Sui fullnode.

    Also knows how to ask the network's faucet for gas. Transport errors are
    raised as :class:`ProviderError` subclasses.
    """

    def __init__(
        self,
        connection: Connection = localnet_connection,
        session: Optional[requests.Session] = None,
        timeout: int = REQUEST_TIMEOUT,
    ) -> None:
        self.connection = connection
        self.session = session or make_session(timeout)
        self._request_ids = itertools.count(1)

    def __repr__(self):
        return f"<{self.__class__.__name__} fullnode={self.connection.fullnode}>"

    def call(self, method: str, *params) -> Any:
        """Send a JSON-RPC 2.0 request and return its `result` member.

        :raises JsonRpcError: if the response carries an `error` member.
        :raises ProviderResponseError: on non-2xx responses and malformed bodies.
        """
        url = self.connection.fullnode
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._request_ids),
            "method": method,
            "params": list(params),
        }
        log.debug("JSON-RPC request", method=method, request_id=payload["id"])
        resp = self.session.post(url, json=payload)
        try:
            resp.raise_for_status()
        except requests.HTTPError as e:
            raise ProviderResponseError(str(e), url=url, status_code=resp.status_code) from e

        try:
            body = resp.json()
        except ValueError as e:
            raise ProviderResponseError("Response body is not JSON", url=url) from e

        if not isinstance(body, dict):
            raise ProviderResponseError(f"Unexpected response type: {body!r}", url=url)
        if body.get("error"):
            error = body["error"]
            raise JsonRpcError(error.get("code"), error.get("message"), error.get("data"), url)
        if "result" not in body:
            raise ProviderResponseError("Response has neither result nor error", url=url)
        return body["result"]

    def get_owned_objects(
        self,
        owner: str,
        options: Optional[dict] = None,
        cursor: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> dict:
        query = {"filter": None, "options": options or {}}
        return self.call("suix_getOwnedObjects", owner, query, cursor, limit)

    def iter_owned_objects(self, owner: str, options: Optional[dict] = None) -> Iterator[dict]:
        cursor = None
        while True:
            page = self.get_owned_objects(owner, options=options, cursor=cursor)
            yield from page["data"]
            if not page.get("hasNextPage"):
                return
            cursor = page["nextCursor"]

    def get_coins(
        self,
        owner: str,
        coin_type: str = SUI_TYPE_ARG,
        cursor: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> dict:
        return self.call("suix_getCoins", owner, coin_type, cursor, limit)

    def get_balance(self, owner: str, coin_type: str = SUI_TYPE_ARG) -> dict:
        return self.call("suix_getBalance", owner, coin_type)

    def get_object(self, object_id: str, options: Optional[dict] = None) -> dict:
        """Return the `data` member of the object response.

        :raises ProviderResponseError: if the fullnode reports an error for the object.
        """
        response = self.call("sui_getObject", object_id, options or {})
        if response.get("error") or not response.get("data"):
            raise ProviderResponseError(
                f"Cannot fetch object {object_id}: {response.get('error')}",
                url=self.connection.fullnode,
            )
        return response["data"]

    def get_reference_gas_price(self) -> int:
        return int(self.call("suix_getReferenceGasPrice"))

    def get_latest_sui_system_state(self) -> dict:
        return self.call("suix_getLatestSuiSystemState")

    def execute_transaction_block(
        self,
        transaction_block: str,
        signatures: List[str],
        options: Optional[dict] = None,
        request_type: str = "WaitForLocalExecution",
    ) -> dict:
        """Submit base64 encoded transaction data and its serialized signatures."""
        return self.call(
            "sui_executeTransactionBlock",
            transaction_block,
            signatures,
            options or {},
            request_type,
        )

    def request_sui_from_faucet(self, recipient: str) -> dict:
        """Ask the faucet to send gas to `recipient` and return the raw response payload.

        :raises FaucetRateLimitError: if the faucet answers with 429 Too Many Requests.
        :raises TransientFaucetError:
            for any other non-2xx response, or if the faucet cannot be reached.
        :raises FaucetSchemaError: if the response body is not JSON.
        """
        url = self.connection.faucet
        try:
            resp = self.session.post(url, json={"FixedAmountRequest": {"recipient": recipient}})
        except ProviderConnectionError as e:
            raise TransientFaucetError(f"Faucet at {url} is not reachable: {e}") from e

        if resp.status_code == 429:
            raise FaucetRateLimitError(f"Faucet at {url} rate limited request for {recipient}")
        try:
            resp.raise_for_status()
        except requests.HTTPError as e:
            raise TransientFaucetError(f"Faucet at {url} responded with {resp.status_code}") from e

        try:
            return resp.json()
        except ValueError as e:
            raise FaucetSchemaError(f"Faucet at {url} returned a non-JSON body") from e
