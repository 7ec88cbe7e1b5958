"""
JSON-RPC client and hashing helpers.

Lightweight alternative to a full web3 stack: httpx for HTTP, eth-abi for
call encoding and eth-hash for Keccak-256. Only read-only calls are
supported; the generators never sign or send transactions.
"""

from typing import Any, List, Optional, Sequence

import httpx
from eth_abi import decode, encode
from eth_hash.auto import keccak


DEFAULT_TIMEOUT = 30


class RpcError(RuntimeError):
    """Raised when an RPC endpoint returns an error or an unusable response."""


# =============================================================================
# HASHING
# =============================================================================

def keccak256(data: bytes) -> bytes:
    """Keccak-256 (not NIST SHA3-256)."""
    return keccak(data)


def keccak256_hex(text: str) -> str:
    """0x-prefixed Keccak-256 of a UTF-8 string."""
    return '0x' + keccak256(text.encode('utf-8')).hex()


def to_checksum_address(address: str) -> str:
    """Convert an address to EIP-55 checksummed format."""
    addr = address.lower().replace('0x', '')
    if len(addr) != 40 or any(c not in '0123456789abcdef' for c in addr):
        raise ValueError(f'Invalid address: {address}')
    addr_hash = keccak256(addr.encode('utf-8')).hex()
    result = '0x'
    for i, c in enumerate(addr):
        if c in 'abcdef':
            result += c.upper() if int(addr_hash[i], 16) >= 8 else c
        else:
            result += c
    return result


def function_selector(signature: str) -> bytes:
    """First 4 bytes of the Keccak-256 of a canonical signature."""
    return keccak256(signature.encode('utf-8'))[:4]


def encode_call(function_name: str, input_types: Sequence[str], args: Sequence[Any]) -> str:
    """
    ABI-encode a function call.

    Returns:
        0x-prefixed hex encoded calldata
    """
    signature = f'{function_name}({",".join(input_types)})'
    encoded_args = encode(list(input_types), list(args)) if input_types else b''
    return '0x' + function_selector(signature).hex() + encoded_args.hex()


def decode_result(output_types: Sequence[str], data: str) -> tuple:
    """ABI-decode 0x-prefixed return data."""
    raw = bytes.fromhex(data[2:] if data.startswith('0x') else data)
    if not raw:
        raise RpcError('Empty return data (is the contract deployed on this chain?)')
    return decode(list(output_types), raw)


# =============================================================================
# CLIENT
# =============================================================================

class RpcClient:
    """
    Minimal JSON-RPC client.

    Args:
        url: RPC endpoint URL
        timeout: Request timeout in seconds
        transport: Optional httpx transport (used by tests)
    """

    def __init__(self, url: str, timeout: float = DEFAULT_TIMEOUT,
                 transport: Optional[httpx.BaseTransport] = None):
        self.url = url
        self.timeout = timeout
        self._transport = transport
        self._request_id = 0

    def call(self, method: str, params: Optional[List[Any]] = None) -> Any:
        """
        Make a JSON-RPC call and return its result.

        Raises:
            RpcError: On transport failures, HTTP errors or JSON-RPC errors
        """
        self._request_id += 1
        payload = {
            'jsonrpc': '2.0',
            'method': method,
            'params': params or [],
            'id': self._request_id,
        }

        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.post(self.url, json=payload)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as e:
            raise RpcError(f'{method} failed: {e}') from e
        except ValueError as e:
            raise RpcError(f'{method} returned invalid JSON: {e}') from e

        if 'error' in data:
            raise RpcError(f'RPC error: {data["error"]}')

        return data.get('result')

    def chain_id(self) -> int:
        return int(self.call('eth_chainId'), 16)

    def eth_call(self, to: str, data: str, block: str = 'latest') -> str:
        return self.call('eth_call', [{'to': to, 'data': data}, block])

    def call_function(
        self,
        to: str,
        function_name: str,
        input_types: Sequence[str],
        args: Sequence[Any],
        output_types: Sequence[str],
    ) -> tuple:
        """Encode, eth_call and decode in one step."""
        result = self.eth_call(to, encode_call(function_name, input_types, args))
        return decode_result(output_types, result)
