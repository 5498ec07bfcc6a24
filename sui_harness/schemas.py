"""Validation of the payloads the harness receives from the faucet and the package compiler."""
import base64
import binascii
import json
from dataclasses import dataclass
from typing import List, Tuple

from marshmallow import (
    EXCLUDE,
    Schema,
    ValidationError,
    fields,
    post_load,
    validate,
    validates_schema,
)

from sui_harness.exceptions import ArtifactDecodeError, FaucetSchemaError
from sui_harness.utils.addresses import normalize_sui_object_id


@dataclass(frozen=True)
class TransferredGasObject:
    amount: int
    id: str
    transfer_tx_digest: str


@dataclass(frozen=True)
class FaucetResponse:
    recipient: str
    amount: int
    transferred_gas_objects: Tuple[TransferredGasObject, ...]


@dataclass(frozen=True)
class ArtifactBundle:
    modules: Tuple[bytes, ...]
    dependencies: Tuple[str, ...]


class Base64Bytes(fields.String):
    """A field for (de)serializing :class:`bytes` from and to base64 :class:`str` values."""

    default_error_messages = {
        "not_base64": "Must be a base64 encoded string!",
        "empty": "Must not be empty!",
    }

    def _deserialize(self, value, attr, data, **kwargs) -> bytes:
        deserialized_string = super(Base64Bytes, self)._deserialize(value, attr, data, **kwargs)
        if not deserialized_string:
            raise self.make_error("empty")
        try:
            return base64.b64decode(deserialized_string, validate=True)
        except (binascii.Error, ValueError):
            raise self.make_error("not_base64")

    def _serialize(self, value, attr, obj, **kwargs):
        if value is None:
            return None
        return base64.b64encode(value).decode("ascii")


class ObjectIdField(fields.String):
    """A field loading hex object ids in their normalized, zero-padded form."""

    default_error_messages = {"not_object_id": "Must be a hex encoded object id!"}

    def _deserialize(self, value, attr, data, **kwargs) -> str:
        deserialized_string = super(ObjectIdField, self)._deserialize(value, attr, data, **kwargs)
        try:
            return normalize_sui_object_id(deserialized_string)
        except ValueError:
            raise self.make_error("not_object_id")


class TransferredGasObjectSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    amount = fields.Integer(required=True, strict=True, validate=validate.Range(min=0))
    id = ObjectIdField(required=True)
    transfer_tx_digest = fields.String(required=True, data_key="transferTxDigest")

    @post_load
    def make_object(self, data, **kwargs) -> TransferredGasObject:
        return TransferredGasObject(**data)


class FaucetResponseSchema(Schema):
    """Validator for the faucet's response to a ``FixedAmountRequest``::

        {"transferredGasObjects": [{"amount": 10000, "id": "0x..", "transferTxDigest": ".."}],
         "error": null}
    """

    class Meta:
        unknown = EXCLUDE

    transferred_gas_objects = fields.List(
        fields.Nested(TransferredGasObjectSchema),
        required=True,
        data_key="transferredGasObjects",
        validate=validate.Length(min=1),
    )
    error = fields.String(allow_none=True, load_default=None)

    @validates_schema
    def validate_no_error(self, data, **kwargs):
        if data.get("error"):
            raise ValidationError(f"Faucet reported an error: {data['error']}", "error")


class ArtifactBundleSchema(Schema):
    """Validator for the JSON the compiler prints with ``--dump-bytecode-as-base64``."""

    class Meta:
        unknown = EXCLUDE

    modules = fields.List(Base64Bytes(), required=True, validate=validate.Length(min=1))
    dependencies = fields.List(ObjectIdField(), required=True)

    @post_load
    def make_bundle(self, data, **kwargs) -> ArtifactBundle:
        return ArtifactBundle(
            modules=tuple(data["modules"]), dependencies=tuple(data["dependencies"])
        )


def load_faucet_response(payload, recipient: str) -> FaucetResponse:
    """Validate a raw faucet payload.

    :raises FaucetSchemaError: if `payload` does not match :class:`FaucetResponseSchema`.
    """
    if not isinstance(payload, dict):
        raise FaucetSchemaError(f"Faucet response must be a JSON object, not {payload!r}")
    try:
        loaded = FaucetResponseSchema().load(payload)
    except ValidationError as e:
        raise FaucetSchemaError(f"Unexpected faucet response: {e.messages}") from e

    gas_objects: List[TransferredGasObject] = loaded["transferred_gas_objects"]
    return FaucetResponse(
        recipient=recipient,
        amount=sum(gas_object.amount for gas_object in gas_objects),
        transferred_gas_objects=tuple(gas_objects),
    )


def decode_artifact_bundle(raw: str) -> ArtifactBundle:
    """Parse the compiler's standard output.

    :raises ArtifactDecodeError:
        if `raw` is not JSON or does not match :class:`ArtifactBundleSchema`.
    """
    try:
        payload = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise ArtifactDecodeError(f"Compiler output is not valid JSON: {e}") from e
    if not isinstance(payload, dict):
        raise ArtifactDecodeError(f"Compiler output must be a JSON object, not {type(payload)}")
    try:
        return ArtifactBundleSchema().load(payload)
    except ValidationError as e:
        raise ArtifactDecodeError(f"Unexpected compiler output: {e.messages}") from e
