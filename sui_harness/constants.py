DEFAULT_FULLNODE_URL = "http://127.0.0.1:9000"
DEFAULT_FAUCET_URL = "http://127.0.0.1:9123/gas"
DEFAULT_SUI_BIN = "cargo run --bin sui"

# Fixed addresses other test code sends to. They are not generated per run.
DEFAULT_RECIPIENT = "0x0c567ffdf8162cb6d51af74be0199443b92e823d4ba6ced24de5c6c463797d46"
DEFAULT_RECIPIENT_2 = "0xbb967ddbebfee8c40d8fdd2c24cb02452834cd3a7061d18564448f900eb9e66d"

DEFAULT_GAS_BUDGET = 10_000
DEFAULT_SEND_AMOUNT = 1_000

REQUEST_TIMEOUT = 30  # seconds
FAUCET_TIMEOUT = 60  # seconds
FAUCET_BACKOFF_BASE = 1.0  # seconds
FAUCET_BACKOFF_FACTOR = 2.0
FAUCET_BACKOFF_MAX = 8.0  # seconds

SUI_TYPE_ARG = "0x2::sui::SUI"
SUI_ADDRESS_LENGTH = 32

#: Signature scheme flag prepended to public keys and serialized signatures.
ED25519_FLAG = 0x00

#: Intent prefix for signing transaction data: (scope, version, app id).
TRANSACTION_DATA_INTENT = bytes([0, 0, 0])

#: Execution result options requested for every transaction the harness submits.
EXECUTION_OPTIONS = {"showEffects": True, "showObjectChanges": True}

#: Upper bound on the number of coins used as gas payment.
MAX_GAS_OBJECTS = 256
