"""
Types module for the Puppet code generators.

This module provides the struct registry, Solidity to ABI type mappings and
the scope-chain resolver used to type event parameters.
"""

from .registry import StructRegistry
from .mappings import (
    convert_solidity_type_to_abi,
    SOLIDITY_TO_ABI_TYPE,
    SPECIAL_VARS,
    SOLIDITY_KEYWORDS,
    UNKNOWN_TYPE,
)
from .resolver import TypeScope, extract_variable_name, extract_param_name, unique_name

__all__ = [
    'StructRegistry',
    'convert_solidity_type_to_abi',
    'SOLIDITY_TO_ABI_TYPE',
    'SPECIAL_VARS',
    'SOLIDITY_KEYWORDS',
    'UNKNOWN_TYPE',
    'TypeScope',
    'extract_variable_name',
    'extract_param_name',
    'unique_name',
]
