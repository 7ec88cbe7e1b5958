"""
Scanner module for the Puppet code generators.

Regex and brace-counting scanners over raw Solidity source text.
"""

from .source import (
    get_all_sol_files,
    extract_contract_name,
    get_function_containing,
    strip_comments,
)
from .definitions import (
    StructField,
    StructDefinition,
    TypeMap,
    parse_structs,
    parse_function_signatures,
    parse_local_variables,
    parse_mapping_declarations,
    parse_error_definitions,
    parse_gmx_error_definitions,
    locale_sort_key,
)
from .log_events import LogEventCall, extract_log_event_calls, split_encode_args

__all__ = [
    'get_all_sol_files',
    'extract_contract_name',
    'get_function_containing',
    'strip_comments',
    'StructField',
    'StructDefinition',
    'TypeMap',
    'parse_structs',
    'parse_function_signatures',
    'parse_local_variables',
    'parse_mapping_declarations',
    'parse_error_definitions',
    'parse_gmx_error_definitions',
    'locale_sort_key',
    'LogEventCall',
    'extract_log_event_calls',
    'split_encode_args',
]
