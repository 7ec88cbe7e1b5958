"""
GMX V2 deployment and market data.

Reads the GMX synthetics deployment files shipped with the GMX library
checkout and queries the GMX Reader contract for the market list.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from ..config import ZERO_ADDRESS
from .rpc import RpcClient, to_checksum_address


# Deployment name -> name used in generated code
CONTRACT_MAPPINGS: Dict[str, str] = {
    'Reader': 'GmxReaderV2',
    'ExchangeRouter': 'GmxExchangeRouter',
    'OrderVault': 'GmxOrderVault',
    'DataStore': 'GmxDatastore',
    'EventEmitter': 'GmxEventEmitter',
}

MARKET_PAGE_START = 0
MARKET_PAGE_END = 200

MARKET_TUPLE = '(address,address,address,address)[]'


@dataclass
class GmxContract:
    name: str
    address: str
    abi: Optional[list] = None


@dataclass
class GmxMarket:
    market_token: str
    index_token: str
    long_token: str
    short_token: str

    @property
    def market_type(self) -> str:
        """Markets without an index token are swap-only."""
        return 'SWAP' if self.index_token.lower() == ZERO_ADDRESS else 'PERP'


def arbitrum_deployments_dir(gmx_path: Path) -> Path:
    return Path(gmx_path) / 'deployments' / 'arbitrum'


def errors_sol_path(gmx_path: Path) -> Path:
    return Path(gmx_path) / 'contracts' / 'error' / 'Errors.sol'


def load_gmx_deployments(gmx_path: Path) -> Dict[str, dict]:
    """
    Load every Arbitrum deployment JSON (metadata files excluded).

    Raises:
        FileNotFoundError: If the deployments directory does not exist
        ValueError: If a deployment file is not valid JSON
    """
    deployments_dir = arbitrum_deployments_dir(gmx_path)
    if not deployments_dir.is_dir():
        raise FileNotFoundError(f'GMX deployments not found: {deployments_dir}')

    deployments: Dict[str, dict] = {}
    for file_path in sorted(deployments_dir.glob('**/*.json')):
        if 'metadata' in file_path.name:
            continue
        try:
            with open(file_path, 'r') as f:
                deployments[file_path.stem] = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f'Failed to load GMX deployment {file_path}: {e}') from e
    return deployments


def select_gmx_contracts(deployments: Dict[str, dict], diagnostics=None) -> List[GmxContract]:
    """
    Pick the mapped contracts out of the deployment set.

    Raises:
        ValueError: If none of the mapped contracts could be loaded
    """
    contracts = []
    for deployment_name, contract_name in CONTRACT_MAPPINGS.items():
        data = deployments.get(deployment_name)
        if not data or not data.get('address'):
            print(f'  Warning: Deployment not found or missing address: {deployment_name}')
            if diagnostics:
                diagnostics.warn_missing_deployment(deployment_name)
            continue
        contracts.append(GmxContract(name=contract_name, address=data['address'], abi=data.get('abi')))

    if not contracts:
        raise ValueError('No contracts were successfully loaded')
    return contracts


def fetch_markets(client: RpcClient, reader_address: str, datastore_address: str) -> List[GmxMarket]:
    """Query Reader.getMarkets(dataStore, 0, 200) and checksum every address."""
    (markets,) = client.call_function(
        reader_address,
        'getMarkets',
        ['address', 'uint256', 'uint256'],
        [datastore_address, MARKET_PAGE_START, MARKET_PAGE_END],
        [MARKET_TUPLE],
    )
    return [
        GmxMarket(*(to_checksum_address(address) for address in market))
        for market in markets
    ]
