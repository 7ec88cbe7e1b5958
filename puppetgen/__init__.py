"""
Puppet contract code generators

This package regenerates the Puppet TypeScript SDK sources from the
Solidity project: event signatures inferred from `_logEvent` calls, custom
error ABIs, deployed contract ABIs and addresses, and the GMX V2 data the
SDK depends on.

Module Structure:
- scanner/: Regex and brace-counting scanners over Solidity source text
- type_system/: Struct registry, Solidity to ABI type mappings, scope resolver
- events/: `_logEvent` signature inference (EventExtractor)
- codegen/: TypeScript module emission
- deployments/: Address books, forge artifacts and broadcast runs
- chain/: JSON-RPC client, Keccak/EIP-55 helpers, GMX data
- generate.py: Main generator (PuppetCodeGenerator, `puppetgen-generate`)
- deploy.py / docgen.py: forge deploy and documentation helpers

Usage:
    from puppetgen.events import parse_events_from_solidity
    from puppetgen.codegen import generate_event_params_code

    events = parse_events_from_solidity('./src')
    print(generate_event_params_code(events))
"""

from .config import GeneratorConfig, ConfigError
from .diagnostics import GeneratorDiagnostics
from .events import EventExtractor, parse_events_from_solidity

__all__ = [
    'GeneratorConfig',
    'ConfigError',
    'GeneratorDiagnostics',
    'EventExtractor',
    'parse_events_from_solidity',
]
