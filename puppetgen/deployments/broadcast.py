"""
forge broadcast artifacts and the legacy deployments.json address book.

After `forge script --broadcast`, forge writes
broadcast/<Script>.s.sol/<chainId>/run-latest.json. Every transaction that
names a contract is recorded into deployments.json under its chain.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

from ..chain.rpc import to_checksum_address


@dataclass
class BroadcastTransaction:
    hash: str
    transaction_type: str
    contract_name: str
    contract_address: str


@dataclass
class BroadcastArtifact:
    chain: int
    transactions: List[BroadcastTransaction] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> 'BroadcastArtifact':
        transactions = [
            BroadcastTransaction(
                hash=tx.get('hash') or '',
                transaction_type=tx.get('transactionType') or '',
                contract_name=tx.get('contractName') or '',
                contract_address=tx.get('contractAddress') or '',
            )
            for tx in data.get('transactions', [])
        ]
        return cls(chain=int(data['chain']), transactions=transactions)

    @classmethod
    def load(cls, path: Path) -> 'BroadcastArtifact':
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f'Broadcast file not found: {path}')
        with open(path, 'r') as f:
            return cls.from_dict(json.load(f))


def broadcast_run_path(broadcast_dir: Path, script_name: str, chain_id: int) -> Path:
    return Path(broadcast_dir) / f'{script_name}.s.sol' / str(chain_id) / 'run-latest.json'


def record_deployment(deployments_path: Path, broadcast: BroadcastArtifact) -> Dict[str, Dict[str, str]]:
    """
    Merge a broadcast run's named contracts into deployments.json.

    Existing chains and contracts are preserved; contracts present in the
    run overwrite earlier addresses. Addresses are stored EIP-55 checksummed.

    Returns:
        The full address book as written
    """
    deployments_path = Path(deployments_path)
    deployments: Dict[str, Dict[str, str]] = {}
    if deployments_path.exists():
        with open(deployments_path, 'r') as f:
            deployments = json.load(f)

    chain_key = str(broadcast.chain)
    chain_deployments = deployments.setdefault(chain_key, {})

    for tx in broadcast.transactions:
        if tx.contract_name:
            chain_deployments[tx.contract_name] = to_checksum_address(tx.contract_address)

    deployments_path.parent.mkdir(parents=True, exist_ok=True)
    with open(deployments_path, 'w') as f:
        f.write(json.dumps(deployments, indent=2))

    return deployments
