import dataclasses
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union
from urllib.parse import urlparse

import structlog
import yaml

from sui_harness.constants import (
    DEFAULT_FAUCET_URL,
    DEFAULT_FULLNODE_URL,
    DEFAULT_GAS_BUDGET,
    DEFAULT_RECIPIENT,
    DEFAULT_RECIPIENT_2,
    DEFAULT_SEND_AMOUNT,
    DEFAULT_SUI_BIN,
    FAUCET_TIMEOUT,
    REQUEST_TIMEOUT,
)
from sui_harness.exceptions.config import ConfigFileError, ConfigurationError
from sui_harness.utils.addresses import is_valid_sui_address, normalize_sui_address

log = structlog.get_logger(__name__)

#: Environment variables consulted by :meth:`HarnessConfig.from_env`, in order of precedence.
ENVIRONMENT_VARIABLES: Dict[str, Tuple[str, ...]] = {
    "fullnode_url": ("SUI_HARNESS_FULLNODE_URL", "VITE_FULLNODE_URL"),
    "faucet_url": ("SUI_HARNESS_FAUCET_URL", "VITE_FAUCET_URL"),
    "sui_bin": ("SUI_HARNESS_SUI_BIN", "VITE_SUI_BIN"),
    "gas_budget": ("SUI_HARNESS_GAS_BUDGET",),
    "send_amount": ("SUI_HARNESS_SEND_AMOUNT",),
    "request_timeout": ("SUI_HARNESS_REQUEST_TIMEOUT",),
    "faucet_timeout": ("SUI_HARNESS_FAUCET_TIMEOUT",),
}

_INTEGER_OPTIONS = ("gas_budget", "send_amount", "request_timeout", "faucet_timeout")


def assert_option(expression, err: Optional[str] = None) -> None:
    """Raise a ConfigurationError instead of an AssertionError if `expression` is falsy."""
    if not expression:
        raise ConfigurationError(err)


def _coerce(key: str, value: Any) -> Any:
    if key in _INTEGER_OPTIONS:
        try:
            return int(value)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"{key} must be an integer, not {value!r}") from e
    if key == "default_recipients":
        assert_option(
            isinstance(value, (list, tuple)), "default_recipients must be a list of addresses"
        )
        return tuple(value)
    return value


@dataclass(frozen=True)
class HarnessConfig:
    """Settings shared by every step of a harness run.

    Instances are immutable and passed explicitly; use :meth:`replace` to
    derive a variant.

    Example configuration file::

        >harness.yaml
        harness:
          fullnode_url: http://127.0.0.1:9000
          faucet_url: http://127.0.0.1:9123/gas
          sui_bin: sui
          gas_budget: 100000000
          send_amount: 1000
    """

    fullnode_url: str = DEFAULT_FULLNODE_URL
    faucet_url: str = DEFAULT_FAUCET_URL
    sui_bin: str = DEFAULT_SUI_BIN
    gas_budget: int = DEFAULT_GAS_BUDGET
    send_amount: int = DEFAULT_SEND_AMOUNT
    default_recipients: Tuple[str, ...] = (DEFAULT_RECIPIENT, DEFAULT_RECIPIENT_2)
    request_timeout: int = REQUEST_TIMEOUT
    faucet_timeout: int = FAUCET_TIMEOUT

    def __post_init__(self):
        self.validate()
        object.__setattr__(
            self,
            "default_recipients",
            tuple(normalize_sui_address(address) for address in self.default_recipients),
        )

    def validate(self) -> None:
        """Validate the configuration.

        :raises ConfigurationError: if any option has an unusable value.
        """
        for key in ("fullnode_url", "faucet_url"):
            url = getattr(self, key)
            assert_option(
                isinstance(url, str) and urlparse(url).scheme in ("http", "https"),
                f"{key} must be an http(s) URL, not {url!r}",
            )
        assert_option(
            isinstance(self.sui_bin, str) and self.sui_bin.strip(), "sui_bin must not be empty"
        )
        for key in _INTEGER_OPTIONS:
            value = getattr(self, key)
            assert_option(
                isinstance(value, int) and value > 0, f"{key} must be a positive integer"
            )
        for address in self.default_recipients:
            assert_option(
                is_valid_sui_address(address), f"Invalid default recipient: {address!r}"
            )

    def replace(self, **changes) -> "HarnessConfig":
        return dataclasses.replace(self, **changes)

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> "HarnessConfig":
        fields = {f.name for f in dataclasses.fields(cls)}
        unknown = set(options) - fields
        assert_option(not unknown, f"Unknown configuration options: {sorted(unknown)}")
        return cls(**{key: _coerce(key, value) for key, value in options.items()})

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "HarnessConfig":
        """Load the configuration from environment variables.

        Unset variables fall back to the local network defaults.
        """
        return cls.from_mapping(_read_environment(os.environ if environ is None else environ))

    @classmethod
    def from_file(
        cls, path: Union[str, Path], environ: Optional[Mapping[str, str]] = None
    ) -> "HarnessConfig":
        """Load the `harness` section of a YAML file on top of :meth:`from_env`.

        :raises ConfigFileError: if the file cannot be read or is not valid YAML.
        """
        path = Path(path)
        try:
            loaded = yaml.safe_load(path.read_text()) or {}
        except OSError as e:
            raise ConfigFileError(f"Cannot read configuration file {path}") from e
        except yaml.YAMLError as e:
            raise ConfigFileError(f"Configuration file {path} is not valid YAML") from e

        assert_option(isinstance(loaded, dict), f"{path} must contain a mapping")
        section = loaded.get("harness") or {}
        assert_option(isinstance(section, dict), "The 'harness' section must be a mapping")

        options = _read_environment(os.environ if environ is None else environ)
        options.update(section)
        log.debug("Loaded configuration file", path=str(path), options=sorted(section))
        return cls.from_mapping(options)


def _read_environment(environ: Mapping[str, str]) -> Dict[str, Any]:
    options: Dict[str, Any] = {}
    for key, names in ENVIRONMENT_VARIABLES.items():
        for name in names:
            if environ.get(name):
                options[key] = environ[name]
                break
    return options
