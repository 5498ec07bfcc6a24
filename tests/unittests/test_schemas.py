import base64
import json

import pytest

from sui_harness.exceptions import ArtifactDecodeError, FaucetSchemaError
from sui_harness.schemas import decode_artifact_bundle, load_faucet_response

RECIPIENT = "0x" + "d" * 64


class TestFaucetResponse:
    def test_valid_payload_is_loaded(self):
        response = load_faucet_response(
            {
                "transferredGasObjects": [
                    {"amount": 10_000, "id": "0x5", "transferTxDigest": "digest"}
                ],
                "error": None,
            },
            RECIPIENT,
        )
        assert response.amount == 10_000
        [gas_object] = response.transferred_gas_objects
        assert gas_object.id == "0x" + "0" * 63 + "5"
        assert gas_object.transfer_tx_digest == "digest"

    @pytest.mark.parametrize(
        "payload",
        argvalues=[
            [],
            {"transferredGasObjects": []},
            {"transferredGasObjects": [{"amount": "lots", "id": "0x5", "transferTxDigest": "d"}]},
            {"transferredGasObjects": [{"amount": 1, "id": "nope", "transferTxDigest": "d"}]},
            {"transferredGasObjects": [{"amount": 1, "id": "0x5"}]},
            {
                "transferredGasObjects": [{"amount": 1, "id": "0x5", "transferTxDigest": "d"}],
                "error": "Faucet is out of gas",
            },
        ],
        ids=["not an object", "no gas objects", "bad amount", "bad id", "missing digest",
             "error reported"],
    )
    def test_invalid_payloads_raise_schema_error(self, payload):
        with pytest.raises(FaucetSchemaError):
            load_faucet_response(payload, RECIPIENT)


class TestArtifactBundle:
    def test_compiler_output_is_decoded(self):
        raw = json.dumps(
            {
                "modules": [base64.b64encode(b"\xa1\x1c\xeb\x0b").decode()],
                "dependencies": ["0x1", "0x2"],
                "digest": [1, 2, 3],
            }
        )
        bundle = decode_artifact_bundle(raw)
        assert bundle.modules == (b"\xa1\x1c\xeb\x0b",)
        assert bundle.dependencies == ("0x" + "0" * 63 + "1", "0x" + "0" * 63 + "2")

    @pytest.mark.parametrize(
        "raw",
        argvalues=[
            "BUILDING MyPackage",
            "[]",
            json.dumps({"modules": [], "dependencies": []}),
            json.dumps({"modules": ["!!not base64!!"], "dependencies": []}),
            json.dumps({"modules": ["AQI="]}),
            json.dumps({"modules": ["AQI="], "dependencies": ["0xnothex"]}),
        ],
        ids=["not json", "not an object", "no modules", "bad module", "no dependencies",
             "bad dependency"],
    )
    def test_malformed_compiler_output_raises(self, raw):
        with pytest.raises(ArtifactDecodeError):
            decode_artifact_bundle(raw)
