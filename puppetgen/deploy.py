#!/usr/bin/env python3
"""
Deploy a forge script and record its contracts:
1. Resolve the chain id from RPC_URL
2. Run script/<SCRIPT_NAME>.s.sol with --broadcast --verify --resume
3. Merge the broadcast's contracts into deployments.json (EIP-55 addresses)
4. Regenerate the TypeScript sources

Environment (also read from .env):
    RPC_URL, SCRIPT_NAME, DEPLOYER_PRIVATE_KEY

Usage:
    python -m puppetgen.deploy [--dry-run] [--skip-generate]
"""

import argparse
import os
import subprocess
import sys
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from .chain.rpc import RpcClient
from .config import load_dotenv_file, require_env
from .deployments.broadcast import BroadcastArtifact, broadcast_run_path, record_deployment


REQUIRED_ENV = ('RPC_URL', 'SCRIPT_NAME', 'DEPLOYER_PRIVATE_KEY')

DEPLOYMENTS_JSON = 'deployments.json'
BROADCAST_DIR = 'broadcast'

REGENERATE_COMMANDS = [
    [sys.executable, '-m', 'puppetgen.generate'],
    ['bun', 'run', 'build:ts'],
]


def load_deploy_env(project_dir: Path, environ: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """Process environment on top of the project's .env file."""
    environ = os.environ if environ is None else environ
    merged = load_dotenv_file(project_dir / '.env')
    merged.update({k: v for k, v in environ.items() if v})
    return require_env(REQUIRED_ENV, merged)


def forge_script_command(script_name: str, rpc_url: str, private_key: str) -> List[str]:
    return [
        'forge', 'script', f'script/{script_name}.s.sol:{script_name}',
        '--broadcast',
        '--verify',
        '--resume',
        '-vvvv',
        '--rpc-url', rpc_url,
        '--private-key', private_key,
    ]


def redact_command(cmd: List[str]) -> str:
    """Printable command line with the private key hidden."""
    shown = list(cmd)
    if '--private-key' in shown:
        shown[shown.index('--private-key') + 1] = '***'
    return ' '.join(shown)


def run_forge_script(cmd: List[str], project_dir: Path, dry_run: bool = False) -> None:
    """Run forge, streaming its output. Exits with code 1 on failure."""
    print(f"\n{'='*60}")
    print(f'Running: {redact_command(cmd)}')
    print(f"{'='*60}")

    if dry_run:
        print('[DRY RUN] forge script not executed')
        return

    result = subprocess.run(cmd, cwd=project_dir)
    if result.returncode != 0:
        print('Forge script failed', file=sys.stderr)
        sys.exit(1)


def regenerate_typescript(project_dir: Path, dry_run: bool = False) -> None:
    print('Regenerating TypeScript...')
    for cmd in REGENERATE_COMMANDS:
        if dry_run:
            print(f"[DRY RUN] Would execute: {' '.join(cmd)}")
            continue
        result = subprocess.run(cmd, cwd=project_dir)
        if result.returncode != 0:
            print(f"ERROR: {' '.join(cmd)} failed", file=sys.stderr)
            sys.exit(1)


def deploy(project_dir: Path, dry_run: bool = False, skip_generate: bool = False) -> None:
    """Run SCRIPT_NAME against RPC_URL, record the broadcast and regenerate the SDK."""
    env = load_deploy_env(project_dir)
    script_name = env['SCRIPT_NAME']
    rpc_url = env['RPC_URL']

    chain_id = RpcClient(rpc_url).chain_id()
    print(f'Deploying {script_name} on chain {chain_id}...')

    cmd = forge_script_command(script_name, rpc_url, env['DEPLOYER_PRIVATE_KEY'])
    run_forge_script(cmd, project_dir, dry_run=dry_run)

    run_path = broadcast_run_path(project_dir / BROADCAST_DIR, script_name, chain_id)
    if dry_run:
        print(f'[DRY RUN] Would record {run_path}')
    else:
        broadcast = BroadcastArtifact.load(run_path)
        record_deployment(project_dir / DEPLOYMENTS_JSON, broadcast)
        print(f'Updated {DEPLOYMENTS_JSON} for chain {broadcast.chain}')

    if not skip_generate:
        regenerate_typescript(project_dir, dry_run=dry_run)
    print('Done!')


# =============================================================================
# CLI INTERFACE
# =============================================================================

def main(argv=None):
    parser = argparse.ArgumentParser(description='Deploy a forge script and record its contracts')
    parser.add_argument('--project-dir', default='.', help='Foundry project root (default: .)')
    parser.add_argument('--dry-run', action='store_true', help='Print commands without executing')
    parser.add_argument('--skip-generate', action='store_true',
                        help='Do not regenerate TypeScript after recording')
    args = parser.parse_args(argv)

    try:
        deploy(Path(args.project_dir), dry_run=args.dry_run, skip_generate=args.skip_generate)
    except Exception as e:
        print(f'Error: {e}', file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
