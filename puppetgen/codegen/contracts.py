"""
Generation of the Puppet contract modules.

Emits one ABI module per deployed contract (abi/puppet<Name>.ts), an
abi/index.ts barrel, the PUPPET_CONTRACT_MAP of addresses, chain ids,
deployment blocks and ABIs (contracts.ts), and the top-level index.ts.
"""

from typing import List

from ..deployments.addresses import ContractInfo
from .base import AUTO_GENERATED, DO_NOT_EDIT, abi_import_name, json_literal


def abi_module_name(contract_name: str) -> str:
    return f'puppet{contract_name}'


def generate_abi_module_code(contract: ContractInfo) -> str:
    """Render abi/puppet<Name>.ts for a contract with a known ABI."""
    return (
        f'// This file is auto-generated from forge-artifacts/{contract.name}.sol/{contract.name}.json\n'
        f'{DO_NOT_EDIT}\n'
        '\n'
        f'export default {json_literal(contract.abi)} as const\n'
    )


def generate_abi_index_code(contracts: List[ContractInfo]) -> str:
    exports = '\n'.join(
        f"export {{ default as {abi_import_name(c.name)} }} from './{abi_module_name(c.name)}.js'"
        for c in contracts if c.abi is not None
    )
    return f'{AUTO_GENERATED}\n\n{exports}\n'


def _contract_entry(contract: ContractInfo) -> str:
    lines = [f"    address: '{contract.address}'"]
    if contract.chain_id is not None:
        lines.append(f'    chainId: {contract.chain_id}')
    if contract.block_number is not None:
        lines.append(f'    blockNumber: {contract.block_number}')
    if contract.abi is not None:
        lines.append(f'    abi: {abi_import_name(contract.name)}')
    body = ',\n'.join(lines)
    return f'  {contract.name}: {{\n{body}\n  }}'


def generate_contracts_map_code(contracts: List[ContractInfo], deployments_label: str = 'deployments.toml') -> str:
    """Render contracts.ts exporting PUPPET_CONTRACT_MAP."""
    imports = '\n'.join(
        f"import {abi_import_name(c.name)} from './abi/{abi_module_name(c.name)}.js'"
        for c in contracts if c.abi is not None
    )
    entries = ',\n'.join(_contract_entry(c) for c in contracts)
    return (
        f'// This file is auto-generated from Puppet {deployments_label} and forge-artifacts\n'
        f'{DO_NOT_EDIT}\n'
        '\n'
        f'{imports}\n'
        '\n'
        'export const PUPPET_CONTRACT_MAP = {\n'
        f'{entries}\n'
        '} as const\n'
    )


def generate_index_code() -> str:
    return (
        f'{AUTO_GENERATED}\n'
        '\n'
        "export * from './contracts.js'\n"
        "export * from './events.js'\n"
        "export * from './errors.js'\n"
    )
