# confidential_core/constants.py

NONCE_SIZE = 16
PUBLIC_KEY_SIZE = 32
TAG_SIZE = 16
FRAME_HEADER_SIZE = NONCE_SIZE + PUBLIC_KEY_SIZE
MIN_FRAME_SIZE = FRAME_HEADER_SIZE + TAG_SIZE

BOX_INFO = b"confidential-core-box-v1"

JSONRPC_VERSION = "2.0"
METHOD_GET_PUBLIC_KEY = "confidential_getPublicKey"

ENV_KEY_PROVIDER = "CONFIDENTIAL_KEY_PROVIDER"
ENV_GATEWAY_URL = "CONFIDENTIAL_GATEWAY_URL"
ENV_RPC_TIMEOUT = "CONFIDENTIAL_RPC_TIMEOUT"

DEFAULT_KEY_PROVIDER = "http"
DEFAULT_GATEWAY_URL = "http://localhost:8545"
DEFAULT_RPC_TIMEOUT = 5.0
