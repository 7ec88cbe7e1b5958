"""
Chain module for the Puppet code generators.

JSON-RPC access, Keccak/EIP-55 helpers and GMX data loading.
"""

from .rpc import (
    RpcClient,
    RpcError,
    keccak256,
    keccak256_hex,
    to_checksum_address,
    encode_call,
    decode_result,
)
from .gmx import (
    CONTRACT_MAPPINGS,
    GmxContract,
    GmxMarket,
    load_gmx_deployments,
    select_gmx_contracts,
    fetch_markets,
)

__all__ = [
    'RpcClient',
    'RpcError',
    'keccak256',
    'keccak256_hex',
    'to_checksum_address',
    'encode_call',
    'decode_result',
    'CONTRACT_MAPPINGS',
    'GmxContract',
    'GmxMarket',
    'load_gmx_deployments',
    'select_gmx_contracts',
    'fetch_markets',
]
