"""
Code generation module for the Puppet code generators.

This module renders the generated TypeScript modules: event map, error
ABIs, contract ABIs and address maps, and the GMX data modules.
"""

from .base import json_literal, ts_literal, write_file, write_if_changed
from .abi_params import AbiParameterError, parse_abi_parameters
from .events import event_hash, generate_event_params_code
from .errors import generate_error_abi_code, generate_gmx_error_abi_code
from .contracts import (
    generate_abi_module_code,
    generate_abi_index_code,
    generate_contracts_map_code,
    generate_index_code,
)
from .gmx import (
    generate_gmx_abi_module_code,
    generate_gmx_contracts_code,
    generate_market_list_code,
    generate_gmx_index_code,
)

__all__ = [
    'json_literal',
    'ts_literal',
    'write_file',
    'write_if_changed',
    'AbiParameterError',
    'parse_abi_parameters',
    'event_hash',
    'generate_event_params_code',
    'generate_error_abi_code',
    'generate_gmx_error_abi_code',
    'generate_abi_module_code',
    'generate_abi_index_code',
    'generate_contracts_map_code',
    'generate_index_code',
    'generate_gmx_abi_module_code',
    'generate_gmx_contracts_code',
    'generate_market_list_code',
    'generate_gmx_index_code',
]
