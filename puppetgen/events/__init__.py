"""
Event module for the Puppet code generators.

Infers `_logEvent` signatures from Solidity sources.
"""

from .extractor import (
    ContractEvents,
    EventDefinition,
    EventExtractor,
    EventParam,
    parse_events_from_solidity,
)

__all__ = [
    'ContractEvents',
    'EventDefinition',
    'EventExtractor',
    'EventParam',
    'parse_events_from_solidity',
]
