#!/usr/bin/env python3
"""
Puppet Contracts TypeScript Generator

Regenerates the TypeScript SDK sources from the Solidity project:

- abi/puppet<Name>.ts, abi/index.ts and contracts.ts from the deployment
  address book and forge artifacts
- errors.ts from src/utils/Error.sol
- events.ts from the _logEvent calls found in src/
- gmx/ from the GMX synthetics library and the GMX Reader on Arbitrum

Usage:
    python -m puppetgen.generate
    SKIP_GMX=1 python -m puppetgen.generate --output ./src-ts
"""

import subprocess
import sys
from pathlib import Path
from typing import Dict, List, Optional

from .chain.gmx import (
    errors_sol_path,
    fetch_markets,
    load_gmx_deployments,
    select_gmx_contracts,
)
from .chain.rpc import RpcClient
from .codegen.base import write_file, write_if_changed
from .codegen.contracts import (
    abi_module_name,
    generate_abi_index_code,
    generate_abi_module_code,
    generate_contracts_map_code,
    generate_index_code,
)
from .codegen.errors import generate_error_abi_code, generate_gmx_error_abi_code
from .codegen.events import generate_event_params_code
from .codegen.gmx import (
    gmx_abi_module_name,
    generate_gmx_abi_module_code,
    generate_gmx_contracts_code,
    generate_gmx_index_code,
    generate_market_list_code,
)
from .config import GeneratorConfig, env_flag
from .deployments.addresses import ContractInfo, load_contracts
from .diagnostics import GeneratorDiagnostics
from .events.extractor import ContractEvents, EventExtractor
from .scanner.definitions import parse_error_definitions, parse_gmx_error_definitions


# Hand-maintained ABI modules living next to the generated ones
KEEP_ABI_FILES = {'erc20.ts', 'externalReferralStorage.ts'}

TOP_LEVEL_FILES = ['contracts.ts', 'contract.ts', 'events.ts', 'errors.ts', 'index.ts']

BIOME_COMMAND = ['bunx', '@biomejs/biome', 'check', '--fix', '--unsafe']


class PuppetCodeGenerator:
    """Main generator class that orchestrates one generation run."""

    def __init__(
        self,
        config: Optional[GeneratorConfig] = None,
        diagnostics: Optional[GeneratorDiagnostics] = None,
    ):
        self.config = config if config is not None else GeneratorConfig.from_env()
        self.diagnostics = diagnostics if diagnostics is not None else GeneratorDiagnostics(self.config.verbose)
        self.contracts: List[ContractInfo] = []
        self.contract_events: ContractEvents = {}

    @property
    def output_dir(self) -> Path:
        return Path(self.config.output_dir)

    # =========================================================================
    # PUPPET MODULES
    # =========================================================================

    def clean_generated_files(self) -> None:
        """Remove previously generated modules. gmx/ is left alone."""
        print('Cleaning old generated files...')

        abi_dir = self.output_dir / 'abi'
        if abi_dir.is_dir():
            for abi_file in sorted(abi_dir.glob('*.ts')):
                if abi_file.name not in KEEP_ABI_FILES:
                    abi_file.unlink()

        for name in TOP_LEVEL_FILES:
            (self.output_dir / name).unlink(missing_ok=True)

    def generate_contracts(self) -> List[ContractInfo]:
        """Write one ABI module per contract, the ABI barrel and contracts.ts."""
        print(f'Loading Puppet contract deployments from {Path(self.config.deployments_path).name}...')

        self.contracts = load_contracts(
            self.config.deployments_path,
            self.config.artifacts_dir,
            self.config.broadcast_dir,
            self.diagnostics,
        )

        abi_dir = self.output_dir / 'abi'
        for contract in self.contracts:
            if contract.abi is not None:
                write_file(abi_dir / f'{abi_module_name(contract.name)}.ts', generate_abi_module_code(contract))

        write_file(abi_dir / 'index.ts', generate_abi_index_code(self.contracts))
        write_file(
            self.output_dir / 'contracts.ts',
            generate_contracts_map_code(self.contracts, Path(self.config.deployments_path).name),
        )
        print('  Generated contracts map')
        return self.contracts

    def generate_error_abi(self) -> List[dict]:
        print('Generating Error ABI from Error.sol...')

        error_sol = Path(self.config.error_sol_path)
        if not error_sol.exists():
            raise FileNotFoundError(f'Error definitions not found: {error_sol}')

        errors = parse_error_definitions(error_sol.read_text())
        write_file(self.output_dir / 'errors.ts', generate_error_abi_code(errors))
        print(f'  Generated error ABI with {len(errors)} errors')
        return errors

    def generate_events(self) -> ContractEvents:
        print('Parsing Solidity for event definitions...')

        self.contract_events = EventExtractor().parse_directory(self.config.src_dir)
        contract_name_map = self.config.load_contract_name_map()
        code = generate_event_params_code(self.contract_events, contract_name_map)
        write_file(self.output_dir / 'events.ts', code)

        total_events = 0
        unknown_total = 0
        for contract_name, events in self.contract_events.items():
            for event in events:
                total_events += 1
                unknowns = event.unknown_count
                if unknowns > 0:
                    print(f'    Warning: {contract_name}.{event.name} has {unknowns} unknown param type(s)',
                          file=sys.stderr)
                    self.diagnostics.warn_unknown_param_types(
                        contract_name, event.name, unknowns, event.source_file, event.line
                    )
                    unknown_total += unknowns

        print(f'  Generated {total_events} event definitions across {len(self.contract_events)} contracts')
        if unknown_total > 0:
            print(f'  Total unknown types: {unknown_total} (may need manual fixes)', file=sys.stderr)
        return self.contract_events

    def generate_index(self) -> None:
        write_file(self.output_dir / 'index.ts', generate_index_code())

    # =========================================================================
    # GMX MODULES
    # =========================================================================

    def gmx_available(self) -> bool:
        reader = Path(self.config.gmx_path) / 'deployments' / 'arbitrum' / 'Reader.json'
        return reader.exists()

    def generate_gmx_errors(self) -> bool:
        """
        Write gmx/abi/gmxErrors.ts from the GMX Errors.sol library.

        A missing or unreadable Errors.sol is reported and skipped so the
        contract list can still be generated.

        Returns:
            True if the file was written
        """
        print('Generating GMX error ABI...')
        errors_path = errors_sol_path(self.config.gmx_path)
        try:
            errors = parse_gmx_error_definitions(errors_path.read_text())
        except OSError as e:
            print(f'  Warning: Failed to generate GMX errors, continuing with contracts... ({e})',
                  file=sys.stderr)
            self.diagnostics.warn_unreadable_file(str(errors_path), str(e))
            return False

        print(f'  Found {len(errors)} GMX custom errors')
        output_path = self.output_dir / 'gmx' / 'abi' / 'gmxErrors.ts'
        updated = write_if_changed(output_path, generate_gmx_error_abi_code(errors))
        if updated:
            print('  Generated GMX error ABI file')
        else:
            print('  GMX error ABI unchanged')
            self.diagnostics.info_unchanged(str(output_path))
        return updated

    def generate_gmx_contracts(self) -> Dict[str, str]:
        """
        Write the GMX ABI modules and gmx/gmxContracts.ts.

        Returns:
            Generated contract name -> address
        """
        print('Loading GMX deployments...')
        deployments = load_gmx_deployments(self.config.gmx_path)
        print(f'  Loaded {len(deployments)} deployments')

        contracts = select_gmx_contracts(deployments, self.diagnostics)
        print(f'  Selected {len(contracts)} contracts')

        abi_dir = self.output_dir / 'gmx' / 'abi'
        abi_files_updated = 0
        for contract in contracts:
            if not contract.abi:
                continue
            abi_path = abi_dir / f'{gmx_abi_module_name(contract.name)}.ts'
            if write_if_changed(abi_path, generate_gmx_abi_module_code(contract)):
                abi_files_updated += 1
                print(f'  Updated ABI for {contract.name}')
            else:
                self.diagnostics.info_unchanged(str(abi_path))

        list_path = self.output_dir / 'gmx' / 'gmxContracts.ts'
        list_updated = write_if_changed(list_path, generate_gmx_contracts_code(contracts))
        if not list_updated:
            self.diagnostics.info_unchanged(str(list_path))

        print(f'  {abi_files_updated} ABI file(s) updated')
        print(f"  Main contract list: {'updated' if list_updated else 'unchanged'}")
        return {contract.name: contract.address for contract in contracts}

    def generate_gmx_markets(self, addresses: Dict[str, str], client: Optional[RpcClient] = None) -> int:
        """
        Snapshot the GMX market list into gmx/marketList.ts.

        Returns:
            Number of markets written
        """
        print('Fetching GMX markets from Reader...')
        reader = addresses['GmxReaderV2']
        datastore = addresses['GmxDatastore']

        if client is None:
            client = RpcClient(self.config.gmx_rpc_url)
        markets = fetch_markets(client, reader, datastore)

        write_file(self.output_dir / 'gmx' / 'marketList.ts', generate_market_list_code(markets, reader))

        perp_count = sum(1 for m in markets if m.market_type == 'PERP')
        print(f'  Generated market list with {len(markets)} markets')
        print(f'  - PERP markets: {perp_count}')
        print(f'  - SWAP markets: {len(markets) - perp_count}')
        return len(markets)

    def generate_gmx(self, client: Optional[RpcClient] = None) -> None:
        print('Generating GMX contracts and data...')
        self.generate_gmx_errors()
        addresses = self.generate_gmx_contracts()
        self.generate_gmx_markets(addresses, client)
        write_file(self.output_dir / 'gmx' / 'index.ts', generate_gmx_index_code())

    # =========================================================================
    # FORMATTING AND RUN
    # =========================================================================

    def format_generated_files(self) -> None:
        print('Formatting generated files...')
        subprocess.run([*BIOME_COMMAND, str(self.output_dir)], check=True)

    def run(self, client: Optional[RpcClient] = None) -> None:
        """Run every generation step in order."""
        print('=== Puppet Contracts TypeScript Generator ===\n')

        self.clean_generated_files()
        (self.output_dir / 'abi').mkdir(parents=True, exist_ok=True)

        self.generate_contracts()
        self.generate_error_abi()
        self.generate_events()
        self.generate_index()

        if not self.config.skip_gmx:
            if self.gmx_available():
                self.generate_gmx(client)
            else:
                print('Skipping GMX generation (gmx-synthetics lib not found)')

        if not self.config.skip_format:
            self.format_generated_files()

        self.diagnostics.print_summary()

        print('\n=== Generation complete ===')
        print(f'Output: {self.output_dir}/')


# =============================================================================
# CLI INTERFACE
# =============================================================================

def main(argv=None):
    import argparse

    parser = argparse.ArgumentParser(description='Puppet Contracts TypeScript Generator')
    parser.add_argument('--src', help='Solidity source directory (default: ./src)')
    parser.add_argument('--artifacts', help='forge artifacts directory (default: ./forge-artifacts)')
    parser.add_argument('--deployments', help='Deployment address book (default: ./deployments.toml)')
    parser.add_argument('--broadcast', help='forge broadcast directory (default: ./broadcast)')
    parser.add_argument('--errors', help='Custom error definitions (default: ./src/utils/Error.sol)')
    parser.add_argument('-o', '--output', help='Output directory (default: ./src-ts)')
    parser.add_argument('--gmx-path', help='GMX synthetics checkout (default: ./lib/gmx-synthetics)')
    parser.add_argument('--gmx-rpc-url', help='Arbitrum RPC used for the GMX market list')
    parser.add_argument('--skip-gmx', action='store_true', default=None, help='Skip GMX generation')
    parser.add_argument('--format', action='store_true', help='Format output with biome')
    parser.add_argument('-v', '--verbose', action='store_true', default=None,
                        help='List every diagnostic in the summary')

    args = parser.parse_args(argv)

    try:
        config = GeneratorConfig.from_env(
            src_dir=args.src,
            artifacts_dir=args.artifacts,
            deployments_path=args.deployments,
            broadcast_dir=args.broadcast,
            error_sol_path=args.errors,
            output_dir=args.output,
            gmx_path=args.gmx_path,
            gmx_rpc_url=args.gmx_rpc_url,
            skip_gmx=args.skip_gmx,
            skip_format=False if args.format and not env_flag('SKIP_FORMAT') else None,
            verbose=args.verbose,
        )
        PuppetCodeGenerator(config).run()
    except Exception as e:
        print(f'Generation failed: {e}', file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
