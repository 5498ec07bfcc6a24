import pytest
import responses

from sui_harness.context import setup
from sui_harness.utils.configuration.settings import HarnessConfig
from tests.unittests.fakes import FakeChain

FULLNODE_URL = "http://fullnode.test:9000/"
FAUCET_URL = "http://faucet.test:9123/gas"


@pytest.fixture
def harness_config():
    return HarnessConfig(
        fullnode_url=FULLNODE_URL,
        faucet_url=FAUCET_URL,
        sui_bin="sui",
        gas_budget=2_000,
        send_amount=1_000,
        faucet_timeout=5,
    )


@pytest.fixture
def chain():
    return FakeChain()


@pytest.fixture
def funded_context(harness_config, chain):
    """A TestContext whose account received two 5000 MIST coins from the fake faucet."""
    return setup(harness_config, provider=chain, sleep=lambda seconds: None)


@pytest.fixture
def mocked_responses():
    with responses.RequestsMock() as requests_mock:
        yield requests_mock


class FakeClock:
    """A monotonic clock which only advances when `sleep` is called."""

    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()
