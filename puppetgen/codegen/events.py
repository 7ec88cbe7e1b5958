"""
Generation of the CONTRACT_EVENT_MAP module.

Each contract maps its `_logEvent` names to the event hash (Keccak-256 of
the event name, which is what the EventEmitter indexes) and to the ABI
parameters needed to decode the payload.
"""

from typing import Dict, Optional

from ..chain.rpc import keccak256_hex
from ..events.extractor import ContractEvents, EventDefinition
from ..scanner.definitions import locale_sort_key
from .abi_params import parse_abi_parameters
from .base import ts_literal


HEADER = (
    '// This file is auto-generated from Solidity source files. Do not edit manually.\n'
    '// Generated by: puppetgen-events\n'
)


def event_hash(event_name: str) -> str:
    return keccak256_hex(event_name)


def generate_event_entry(event: EventDefinition) -> str:
    args = ts_literal(parse_abi_parameters(event.signature()), indent=None)
    return (
        f'    {event.name}: {{\n'
        f"      hash: '{event_hash(event.name)}',\n"
        f'      args: {args}\n'
        f'    }}'
    )


def generate_event_params_code(
    contract_events: ContractEvents,
    contract_name_map: Optional[Dict[str, str]] = None,
) -> str:
    """
    Render the events module.

    Args:
        contract_events: Contract name -> inferred events
        contract_name_map: Optional renames for the map's contract keys

    Returns:
        TypeScript source for events.ts
    """
    contract_name_map = contract_name_map or {}
    contract_blocks = []

    for solidity_name in sorted(contract_events, key=locale_sort_key):
        contract_name = contract_name_map.get(solidity_name, solidity_name)
        events = sorted(contract_events[solidity_name], key=lambda e: locale_sort_key(e.name))
        event_lines = ',\n'.join(generate_event_entry(event) for event in events)
        contract_blocks.append(f'  {contract_name}: {{\n{event_lines}\n  }}')

    contract_lines = ',\n'.join(contract_blocks)
    return (
        f'{HEADER}\n'
        f'export const CONTRACT_EVENT_MAP = {{\n'
        f'{contract_lines}\n'
        f'}} as const\n'
    )
