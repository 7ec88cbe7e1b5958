"""
Deployments module for the Puppet code generators.

Reads deployed addresses, forge artifacts and broadcast runs, and records
new deployments into the legacy JSON address book.
"""

from .artifacts import artifact_path, find_abi
from .addresses import (
    ContractInfo,
    is_puppet_contract,
    resolve_chain_id,
    load_deployments,
    load_block_numbers,
    parse_block_number,
    load_contracts,
)
from .broadcast import BroadcastArtifact, broadcast_run_path, record_deployment

__all__ = [
    'artifact_path',
    'find_abi',
    'ContractInfo',
    'is_puppet_contract',
    'resolve_chain_id',
    'load_deployments',
    'load_block_numbers',
    'parse_block_number',
    'load_contracts',
    'BroadcastArtifact',
    'broadcast_run_path',
    'record_deployment',
]
