import re
from typing import Callable, List, Optional

import structlog

from sui_harness.constants import SUI_TYPE_ARG
from sui_harness.faucet import faucet_retry_policy, request_funds
from sui_harness.keypair import Ed25519Keypair, generate_account
from sui_harness.provider import Connection, JsonRpcProvider
from sui_harness.signer import RawSigner
from sui_harness.utils.configuration.settings import HarnessConfig

log = structlog.get_logger(__name__)

SUI_COIN_TYPE = re.compile(r"^0x0*2::coin::Coin<0x0*2::sui::SUI>$")


def is_sui_coin(obj: dict) -> bool:
    """Whether an owned object response (fetched with ``showType``) is a SUI coin."""
    object_type = (obj.get("data") or {}).get("type") or ""
    return bool(SUI_COIN_TYPE.match(object_type))


def get_provider(config: Optional[HarnessConfig] = None) -> JsonRpcProvider:
    config = config or HarnessConfig.from_env()
    return JsonRpcProvider(
        Connection(fullnode=config.fullnode_url, faucet=config.faucet_url),
        timeout=config.request_timeout,
    )


class TestContext:
    """A funded account plus the provider and signer used to act on its behalf.

    Contexts live for one test run. Nothing about them is persisted.
    """

    # Not a test class, despite the name.
    __test__ = False

    def __init__(
        self, keypair: Ed25519Keypair, provider, config: Optional[HarnessConfig] = None
    ) -> None:
        self.keypair = keypair
        self.provider = provider
        self.signer = RawSigner(self.keypair, self.provider)
        self.config = config or HarnessConfig.from_env()

    def __repr__(self):
        return f"<TestContext {self.address()}>"

    @classmethod
    def create(cls, *args, **kwargs) -> "TestContext":
        return setup(*args, **kwargs)

    def address(self) -> str:
        return self.keypair.get_public_key().to_sui_address()

    def get_gas_objects_owned_by_address(self) -> List[dict]:
        objects = self.provider.iter_owned_objects(
            self.address(), options={"showType": True, "showContent": True, "showOwner": True}
        )
        return [obj for obj in objects if is_sui_coin(obj)]

    def get_active_validators(self) -> List[dict]:
        return self.provider.get_latest_sui_system_state()["activeValidators"]

    def get_balance(self, coin_type: str = SUI_TYPE_ARG) -> int:
        return int(self.provider.get_balance(self.address(), coin_type)["totalBalance"])


def setup(
    config: Optional[HarnessConfig] = None,
    provider=None,
    request: Optional[Callable[[str], dict]] = None,
    **retry_kwargs,
) -> TestContext:
    """Generate an account, fund it from the faucet and wrap it in a :class:`TestContext`.

    `request` defaults to the provider's faucet endpoint. `retry_kwargs`
    (`policy`, `sleep`, `clock`) are passed through to :func:`request_funds`; the
    policy defaults to one bounded by `config.faucet_timeout`.

    :raises FaucetRateLimitError: if the faucet rate limits the request.
    """
    config = config or HarnessConfig.from_env()
    provider = provider or get_provider(config)
    keypair, address = generate_account()

    retry_kwargs.setdefault("policy", faucet_retry_policy(config.faucet_timeout))
    request_funds(address, request or provider.request_sui_from_faucet, **retry_kwargs)
    log.info("Test context ready", address=address, fullnode=config.fullnode_url)
    return TestContext(keypair, provider, config)
