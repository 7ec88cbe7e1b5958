"""
Configuration for the Puppet contract code generators.

Holds the filesystem layout the generators read from and write to, the
environment switches that skip network-bound steps, and the optional
contract-name overrides used when emitting the event map.
"""

import json
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Mapping, Optional


# Chain alias to chain ID mapping (matches Alloy/Foundry)
CHAIN_ID_MAP: Dict[str, int] = {
    'mainnet': 1,
    'arbitrum': 42161,
    'optimism': 10,
    'base': 8453,
    'sepolia': 11155111,
}

ZERO_ADDRESS = '0x0000000000000000000000000000000000000000'

DEFAULT_GMX_RPC_URL = 'https://arb1.arbitrum.io/rpc'

CONTRACT_NAME_MAP_FILE = 'contract-name-map.json'


class ConfigError(ValueError):
    """Raised when required configuration is missing or malformed."""


def env_flag(name: str, environ: Optional[Mapping[str, str]] = None) -> bool:
    """Return True when an environment switch is set to '1' or 'true'."""
    environ = os.environ if environ is None else environ
    return environ.get(name, '') in ('1', 'true')


def require_env(names, environ: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """
    Fetch required environment variables.

    Raises:
        ConfigError: naming the first variable that is missing or empty
    """
    environ = os.environ if environ is None else environ
    values = {}
    for name in names:
        value = environ.get(name)
        if not value:
            raise ConfigError(f'Missing {name}')
        values[name] = value
    return values


def load_dotenv_file(path: Path) -> Dict[str, str]:
    """Read KEY=VALUE pairs from a .env file, ignoring blanks and comments."""
    values: Dict[str, str] = {}
    if not path.exists():
        return values
    with open(path, 'r') as f:
        for line in f:
            line = line.strip()
            if line and '=' in line and not line.startswith('#'):
                key, value = line.split('=', 1)
                values[key.strip()] = value.strip().strip('"').strip("'")
    return values


@dataclass
class GeneratorConfig:
    """Paths and switches for one generation run."""

    src_dir: Path = Path('./src')
    artifacts_dir: Path = Path('./forge-artifacts')
    deployments_path: Path = Path('./deployments.toml')
    broadcast_dir: Path = Path('./broadcast')
    error_sol_path: Path = Path('./src/utils/Error.sol')
    output_dir: Path = Path('./src-ts')
    gmx_path: Path = Path('./lib/gmx-synthetics')
    gmx_rpc_url: str = DEFAULT_GMX_RPC_URL
    skip_gmx: bool = False
    skip_format: bool = True
    verbose: bool = False
    contract_name_map: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> 'GeneratorConfig':
        """
        Build a config from environment switches.

        SKIP_GMX / SKIP_NETWORK skip the GMX step, FORMAT=1 turns formatting
        on unless SKIP_FORMAT is also set, GMX_RPC_URL overrides the Arbitrum RPC.
        Keyword overrides win over the environment.
        """
        environ = os.environ if environ is None else environ
        config = cls(
            gmx_rpc_url=environ.get('GMX_RPC_URL') or DEFAULT_GMX_RPC_URL,
            skip_gmx=env_flag('SKIP_GMX', environ) or env_flag('SKIP_NETWORK', environ),
            skip_format=not env_flag('FORMAT', environ) or env_flag('SKIP_FORMAT', environ),
        )
        for key, value in overrides.items():
            if value is None:
                continue
            if not hasattr(config, key):
                raise ConfigError(f'Unknown configuration option: {key}')
            if isinstance(getattr(config, key), Path):
                value = Path(value)
            setattr(config, key, value)
        return config

    def load_contract_name_map(self, path: Optional[Path] = None) -> Dict[str, str]:
        """
        Load Solidity contract name -> event map key overrides.

        A missing file means no overrides. A malformed file is reported and ignored.
        """
        map_path = Path(path) if path else Path(CONTRACT_NAME_MAP_FILE)
        if not map_path.exists():
            return self.contract_name_map
        try:
            with open(map_path, 'r') as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError('expected a JSON object')
            self.contract_name_map.update({str(k): str(v) for k, v in data.items()})
        except (json.JSONDecodeError, ValueError) as e:
            print(f'Warning: Failed to load {map_path}: {e}', file=sys.stderr)
        return self.contract_name_map
