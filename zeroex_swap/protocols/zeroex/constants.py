"""
0x Swap API endpoints and protocol constants
"""

# Endpoint paths relative to the API base URL
PRICE_ENDPOINT = "swap/permit2/price"
QUOTE_ENDPOINT = "swap/permit2/quote"
SOURCES_ENDPOINT = "sources"

# Request headers
API_KEY_HEADER = "0x-api-key"
API_VERSION_HEADER = "0x-version"
DEFAULT_API_VERSION = "v2"

# Canonical Permit2 deployment (same address on every supported chain)
PERMIT2_ADDRESS = "0x000000000022D473030F116dDEE9F6B43aC78BA3"

# Size in bytes of the big-endian signature length prefix appended to calldata
SIGNATURE_LENGTH_FIELD_BYTES = 32
