import json

import pytest
import requests

from sui_harness.exceptions import FaucetRateLimitError, FaucetSchemaError, TransientFaucetError
from sui_harness.exceptions.provider import JsonRpcError, ProviderResponseError
from sui_harness.provider import Connection, JsonRpcProvider
from tests.unittests.conftest import FAUCET_URL, FULLNODE_URL

RECIPIENT = "0x" + "e" * 64


@pytest.fixture
def provider():
    return JsonRpcProvider(Connection(fullnode=FULLNODE_URL, faucet=FAUCET_URL), timeout=1)


class TestJsonRpc:
    def test_call_returns_result_member(self, provider, mocked_responses):
        mocked_responses.add(
            mocked_responses.POST, FULLNODE_URL, json={"jsonrpc": "2.0", "id": 1, "result": "1000"}
        )

        assert provider.get_reference_gas_price() == 1000

        body = json.loads(mocked_responses.calls[0].request.body)
        assert body["method"] == "suix_getReferenceGasPrice"
        assert body["params"] == []
        assert body["jsonrpc"] == "2.0"

    def test_parameters_are_sent_positionally(self, provider, mocked_responses):
        mocked_responses.add(
            mocked_responses.POST,
            FULLNODE_URL,
            json={"jsonrpc": "2.0", "id": 1, "result": {"data": [], "hasNextPage": False}},
        )

        provider.get_coins(RECIPIENT, limit=5)

        body = json.loads(mocked_responses.calls[0].request.body)
        assert body["method"] == "suix_getCoins"
        assert body["params"] == [RECIPIENT, "0x2::sui::SUI", None, 5]

    def test_error_member_raises_json_rpc_error(self, provider, mocked_responses):
        mocked_responses.add(
            mocked_responses.POST,
            FULLNODE_URL,
            json={"jsonrpc": "2.0", "id": 1, "error": {"code": -32602, "message": "bad params"}},
        )

        with pytest.raises(JsonRpcError) as exc_info:
            provider.get_balance(RECIPIENT)
        assert exc_info.value.code == -32602

    def test_http_error_raises_response_error(self, provider, mocked_responses):
        mocked_responses.add(mocked_responses.POST, FULLNODE_URL, status=502)

        with pytest.raises(ProviderResponseError) as exc_info:
            provider.get_latest_sui_system_state()
        assert exc_info.value.status_code == 502

    def test_owned_objects_are_paginated(self, provider, mocked_responses):
        pages = [
            {"data": [{"data": {"objectId": "0x1"}}], "hasNextPage": True, "nextCursor": "c1"},
            {"data": [{"data": {"objectId": "0x2"}}], "hasNextPage": False, "nextCursor": None},
        ]
        for page in pages:
            mocked_responses.add(
                mocked_responses.POST, FULLNODE_URL, json={"jsonrpc": "2.0", "id": 1, "result": page}
            )

        objects = list(provider.iter_owned_objects(RECIPIENT))

        assert [obj["data"]["objectId"] for obj in objects] == ["0x1", "0x2"]
        second = json.loads(mocked_responses.calls[1].request.body)
        assert second["params"][2] == "c1"

    def test_get_object_raises_for_missing_objects(self, provider, mocked_responses):
        mocked_responses.add(
            mocked_responses.POST,
            FULLNODE_URL,
            json={"jsonrpc": "2.0", "id": 1, "result": {"error": {"code": "notExists"}}},
        )
        with pytest.raises(ProviderResponseError):
            provider.get_object("0x5")


class TestFaucet:
    def test_request_body_names_the_recipient(self, provider, mocked_responses):
        mocked_responses.add(
            mocked_responses.POST, FAUCET_URL, json={"transferredGasObjects": [], "error": None}
        )

        assert provider.request_sui_from_faucet(RECIPIENT) == {
            "transferredGasObjects": [],
            "error": None,
        }
        body = json.loads(mocked_responses.calls[0].request.body)
        assert body == {"FixedAmountRequest": {"recipient": RECIPIENT}}

    @pytest.mark.parametrize(
        "status, expected",
        argvalues=[(429, FaucetRateLimitError), (500, TransientFaucetError),
                   (503, TransientFaucetError)],
    )
    def test_error_statuses(self, status, expected, provider, mocked_responses):
        mocked_responses.add(mocked_responses.POST, FAUCET_URL, status=status)
        with pytest.raises(expected):
            provider.request_sui_from_faucet(RECIPIENT)

    def test_non_json_body_raises_schema_error(self, provider, mocked_responses):
        mocked_responses.add(mocked_responses.POST, FAUCET_URL, body="<html>oops</html>")
        with pytest.raises(FaucetSchemaError):
            provider.request_sui_from_faucet(RECIPIENT)

    def test_unreachable_faucet_raises_transient_error(self, provider, mocked_responses):
        mocked_responses.add(
            mocked_responses.POST, FAUCET_URL, body=requests.exceptions.ConnectionError("refused")
        )
        with pytest.raises(TransientFaucetError):
            provider.request_sui_from_faucet(RECIPIENT)
