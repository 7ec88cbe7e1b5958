"""
Generation of the GMX V2 modules.

gmxContracts.ts maps the GMX contracts Puppet talks to onto their
Arbitrum addresses and ABIs; marketList.ts snapshots the markets the GMX
Reader reports. Both are read by the TypeScript SDK at build time.
"""

from typing import List

from ..chain.gmx import GmxContract, GmxMarket
from .base import AUTO_GENERATED, json_literal


SOURCE_NOTE = '// Source: GMX deployment files from the gmx-synthetics library'


def gmx_short_name(contract_name: str) -> str:
    """'GmxReaderV2' -> 'ReaderV2'."""
    return contract_name.replace('Gmx', '')


def gmx_abi_module_name(contract_name: str) -> str:
    return f'gmx{gmx_short_name(contract_name)}'


def gmx_abi_import_name(contract_name: str) -> str:
    return f'{gmx_short_name(contract_name).lower()}Abi'


def generate_gmx_abi_module_code(contract: GmxContract) -> str:
    return (
        f'{AUTO_GENERATED}\n'
        f'{SOURCE_NOTE}\n'
        '\n'
        f'export default {json_literal(contract.abi)} as const\n'
    )


def _gmx_contract_entry(contract: GmxContract) -> str:
    if contract.abi:
        return (
            f'  {contract.name}: {{\n'
            f"    address: '{contract.address}',\n"
            f'    abi: {gmx_abi_import_name(contract.name)}\n'
            f'  }}'
        )
    return (
        f'  {contract.name}: {{\n'
        f"    address: '{contract.address}'\n"
        f'  }}'
    )


def generate_gmx_contracts_code(contracts: List[GmxContract]) -> str:
    """Render gmx/gmxContracts.ts exporting GMX_V2_CONTRACT_MAP."""
    imports = '\n'.join(
        f"import {gmx_abi_import_name(c.name)} from './abi/{gmx_abi_module_name(c.name)}.js'"
        for c in contracts if c.abi
    )
    entries = ',\n'.join(_gmx_contract_entry(c) for c in contracts)
    return (
        f'{AUTO_GENERATED}\n'
        f'{SOURCE_NOTE}\n'
        '\n'
        '// Import generated ABIs\n'
        f'{imports}\n'
        '\n'
        'export const GMX_V2_CONTRACT_MAP = {\n'
        f'{entries}\n'
        '} as const\n'
    )


def generate_market_list_code(markets: List[GmxMarket], reader_address: str) -> str:
    """Render gmx/marketList.ts exporting ARBITRUM_MARKET_LIST."""
    entries = ',\n'.join(
        '  {\n'
        f'    marketToken: "{m.market_token}",\n'
        f'    indexToken: "{m.index_token}",\n'
        f'    longToken: "{m.long_token}",\n'
        f'    shortToken: "{m.short_token}",\n'
        f'    marketType: "{m.market_type}"\n'
        '  }'
        for m in markets
    )
    return (
        f'{AUTO_GENERATED}\n'
        f'// Source: GMX V2 Reader Contract ({reader_address}) on Arbitrum\n'
        '\n'
        'export const ARBITRUM_MARKET_LIST = [\n'
        f'{entries}\n'
        '] as const\n'
    )


def generate_gmx_index_code() -> str:
    return (
        f'{AUTO_GENERATED}\n'
        '\n'
        "export * from './gmxContracts.js'\n"
        "export * from './marketList.js'\n"
        "export { gmxErrorAbi } from './abi/gmxErrors.js'\n"
    )
