"""
Deployment address books.

Two layouts are understood:

deployments.toml (current)
    [universal.address]        contracts deployed at the same address on
    Name = "0x..."             every chain (CREATE2), no chain id
    [arbitrum.address]         per-chain contracts, keyed by chain alias
    Name = "0x..."             or numeric chain id
    usdc = "0x..."             lowercase/snake_case names are external
                               contracts and are ignored

deployments.json (legacy)
    {"42161": {"Name": "0x..."}}

Block numbers for chain contracts are recovered from forge broadcast
artifacts so indexers know where to start scanning.
"""

import json
import re
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..config import CHAIN_ID_MAP, ZERO_ADDRESS
from .artifacts import find_abi


PUPPET_CONTRACT_RE = re.compile(r'^[A-Z]')


@dataclass
class ContractInfo:
    name: str
    address: str
    chain_id: Optional[int] = None
    block_number: Optional[int] = None
    abi: Optional[list] = None


def is_puppet_contract(name: str) -> bool:
    """Puppet contracts are PascalCase; external ones (usdc, gmx_*) are not."""
    return bool(PUPPET_CONTRACT_RE.match(name))


def resolve_chain_id(chain_key: str) -> Optional[int]:
    """Chain id for an alias ('arbitrum') or numeric key ('42161')."""
    if chain_key in CHAIN_ID_MAP:
        return CHAIN_ID_MAP[chain_key]
    try:
        return int(chain_key)
    except ValueError:
        return None


def load_deployments(path: Path) -> Dict[str, Any]:
    """
    Read a deployments.toml or legacy deployments.json file.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file cannot be parsed
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f'Deployments file not found: {path}')

    try:
        if path.suffix == '.json':
            with open(path, 'r') as f:
                return json.load(f)
        with open(path, 'rb') as f:
            return tomllib.load(f)
    except (json.JSONDecodeError, tomllib.TOMLDecodeError) as e:
        raise ValueError(f'Failed to parse {path}: {e}') from e


def parse_block_number(value: Union[str, int]) -> int:
    """Block numbers appear as 0x-hex strings, decimal strings or plain JSON integers."""
    if isinstance(value, str):
        value = value.strip()
        if value[:2].lower() == '0x':
            return int(value, 16)
        return int(value, 10)
    return int(value)


def load_block_numbers(broadcast_dir: Path, chain_id: int, diagnostics=None) -> Dict[str, int]:
    """
    Map lower-cased CREATE addresses to their deployment block numbers.

    Scans <broadcast>/*/<chain_id>/run-latest.json. Files that cannot be
    parsed are skipped.
    """
    block_numbers: Dict[str, int] = {}
    broadcast_dir = Path(broadcast_dir)
    if not broadcast_dir.is_dir():
        return block_numbers

    for run_file in sorted(broadcast_dir.glob(f'*/{chain_id}/run-latest.json')):
        try:
            with open(run_file, 'r') as f:
                broadcast = json.load(f)

            receipt_blocks = {
                receipt['transactionHash']: parse_block_number(receipt['blockNumber'])
                for receipt in broadcast.get('receipts', [])
            }

            for tx in broadcast.get('transactions', []):
                if tx.get('transactionType') == 'CREATE' and tx.get('contractAddress'):
                    block_number = receipt_blocks.get(tx.get('hash'))
                    if block_number:
                        block_numbers[tx['contractAddress'].lower()] = block_number
        except (OSError, json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            if diagnostics:
                diagnostics.warn_unreadable_file(str(run_file), str(e))

    return block_numbers


def collect_contracts(
    deployments: Dict[str, Any],
    artifacts_dir: Path,
    broadcast_dir: Path,
    diagnostics=None,
) -> List[ContractInfo]:
    """Build the contract list from a deployments.toml document."""
    contracts: List[ContractInfo] = []

    universal = deployments.get('universal')
    universal_addresses = universal.get('address') if isinstance(universal, dict) else None
    if isinstance(universal_addresses, dict):
        for name, address in universal_addresses.items():
            if address:
                contracts.append(ContractInfo(
                    name=name,
                    address=address,
                    abi=find_abi(artifacts_dir, name, diagnostics),
                ))
        print(f'  Found {len(contracts)} universal contracts')

    for chain_alias, chain_data in deployments.items():
        if chain_alias == 'universal' or not isinstance(chain_data, dict):
            continue

        chain_id = resolve_chain_id(chain_alias)
        if chain_id is None:
            continue

        addresses = chain_data.get('address')
        if not isinstance(addresses, dict):
            continue

        block_numbers = load_block_numbers(broadcast_dir, chain_id, diagnostics)

        puppet_contracts = [(n, a) for n, a in addresses.items() if is_puppet_contract(n)]
        print(f'  Found {len(puppet_contracts)} chain-specific contracts on {chain_alias} ({chain_id})')

        for name, address in puppet_contracts:
            abi = find_abi(artifacts_dir, name, diagnostics)
            if address == ZERO_ADDRESS:
                contracts.append(ContractInfo(name=name, address=address, abi=abi))
            else:
                contracts.append(ContractInfo(
                    name=name,
                    address=address,
                    chain_id=chain_id,
                    block_number=block_numbers.get(address.lower()),
                    abi=abi,
                ))

    return contracts


def collect_legacy_contracts(
    deployments: Dict[str, Any],
    artifacts_dir: Path,
    diagnostics=None,
) -> List[ContractInfo]:
    """Build the contract list from a legacy {chainId: {Name: address}} document."""
    contracts: List[ContractInfo] = []
    for chain_key, addresses in deployments.items():
        chain_id = resolve_chain_id(chain_key)
        if chain_id is None or not isinstance(addresses, dict):
            continue
        print(f'  Found {len(addresses)} contracts on chain {chain_id}')
        for name, address in addresses.items():
            contracts.append(ContractInfo(
                name=name,
                address=address,
                chain_id=chain_id,
                abi=find_abi(artifacts_dir, name, diagnostics),
            ))
    return contracts


def load_contracts(
    deployments_path: Path,
    artifacts_dir: Path,
    broadcast_dir: Path,
    diagnostics=None,
) -> List[ContractInfo]:
    """Load every deployed contract with its ABI and deployment block."""
    deployments = load_deployments(deployments_path)
    if Path(deployments_path).suffix == '.json':
        contracts = collect_legacy_contracts(deployments, artifacts_dir, diagnostics)
    else:
        contracts = collect_contracts(deployments, artifacts_dir, broadcast_dir, diagnostics)

    seen = set()
    for contract in contracts:
        if contract.name in seen and diagnostics:
            diagnostics.warn_duplicate_contract(contract.name)
        seen.add(contract.name)

    print(f'  Loaded {len(contracts)} contracts across {len(deployments)} chain(s)')
    return contracts
