"""
Type mappings and conversion utilities for Solidity to ABI types.

This module contains the tables used to turn Solidity type names and
expression shapes into ABI type strings for event parameters.
"""

import re
from typing import Dict, List, Mapping, Tuple

from ..scanner.definitions import StructDefinition


# =============================================================================
# TYPE MAPPING CONSTANTS
# =============================================================================

UNKNOWN_TYPE = 'unknown'

# Base Solidity to ABI type mapping
SOLIDITY_TO_ABI_TYPE: Dict[str, str] = {
    # Integer types
    'uint': 'uint256',
    'uint8': 'uint8',
    'uint16': 'uint16',
    'uint32': 'uint32',
    'uint64': 'uint64',
    'uint128': 'uint128',
    'uint256': 'uint256',
    'int': 'int256',
    'int8': 'int8',
    'int16': 'int16',
    'int32': 'int32',
    'int64': 'int64',
    'int128': 'int128',
    'int256': 'int256',
    # Address and boolean
    'address': 'address',
    'bool': 'bool',
    # Bytes and string
    'bytes': 'bytes',
    'bytes32': 'bytes32',
    'bytes4': 'bytes4',
    'string': 'string',
}

# Global variables with a fixed type
SPECIAL_VARS: Dict[str, str] = {
    'msg.value': 'uint256',
    'msg.sender': 'address',
    'block.timestamp': 'uint256',
    'block.number': 'uint256',
}

LITERAL_PATTERNS: List[Tuple[re.Pattern, str]] = [
    (re.compile(r'^0$'), 'uint256'),
    (re.compile(r'^\d+$'), 'uint256'),
    (re.compile(r'^true$'), 'bool'),
    (re.compile(r'^false$'), 'bool'),
    (re.compile(r'^0x[a-fA-F0-9]{64}$'), 'bytes32'),
    (re.compile(r'^bytes32\(0\)$'), 'bytes32'),
    (re.compile(r'^address\(0\)$'), 'address'),
]

# Contract-valued names that are passed around as addresses
ADDRESS_LIKE_SUFFIXES = ('Router', 'Store', 'Contract')

SOLIDITY_KEYWORDS = frozenset({
    'true', 'false', 'null',
    'address', 'bool', 'string', 'bytes',
    'uint', 'int',
    'uint8', 'uint16', 'uint32', 'uint64', 'uint128', 'uint256',
    'int8', 'int16', 'int32', 'int64', 'int128', 'int256',
    'bytes1', 'bytes2', 'bytes4', 'bytes8', 'bytes16', 'bytes32',
    'if', 'else', 'for', 'while', 'do', 'break', 'continue', 'return',
    'function', 'modifier', 'event', 'struct', 'enum', 'mapping',
    'public', 'private', 'internal', 'external',
    'pure', 'view', 'payable',
    'memory', 'storage', 'calldata',
    'constant', 'immutable',
    'contract', 'interface', 'library', 'abstract', 'virtual', 'override',
    'constructor', 'receive', 'fallback',
    'error', 'revert', 'require', 'assert',
})


# =============================================================================
# TYPE CONVERSION FUNCTIONS
# =============================================================================

def is_interface_name(type_name: str) -> bool:
    """IERC20-style names: 'I' followed by an uppercase letter (or a non-letter)."""
    return type_name == 'IERC20' or (
        type_name.startswith('I') and len(type_name) > 1 and type_name[1] == type_name[1].upper()
    )


def convert_solidity_type_to_abi(sol_type: str, structs: Mapping[str, StructDefinition]) -> str:
    """
    Convert a Solidity type name to an ABI type string.

    Args:
        sol_type: The declared Solidity type, optionally suffixed with []
        structs: Known struct definitions, expanded to tuple types

    Returns:
        The ABI type string. Names that cannot be mapped are returned as-is.
    """
    is_array = sol_type.endswith('[]')
    base_type = sol_type[:-2] if is_array else sol_type
    suffix = '[]' if is_array else ''

    if base_type in SOLIDITY_TO_ABI_TYPE:
        return f'{SOLIDITY_TO_ABI_TYPE[base_type]}{suffix}'

    if is_interface_name(base_type):
        return f'address{suffix}'

    struct = structs.get(base_type)
    if struct:
        tuple_types = [convert_solidity_type_to_abi(f.type, structs) for f in struct.fields]
        return f'({", ".join(tuple_types)}){suffix}'

    if base_type.endswith(ADDRESS_LIKE_SUFFIXES):
        return f'address{suffix}'

    return f'{base_type}{suffix}'


def literal_type(expression: str):
    """Return the ABI type of a literal expression, or None if it is not one."""
    for pattern, abi_type in LITERAL_PATTERNS:
        if pattern.match(expression):
            return abi_type
    return None
