"""
Event signature extraction from Solidity sources.

Puppet contracts do not declare Solidity events; they encode payloads with
`abi.encode` and hand them to a shared EventEmitter through `_logEvent`.
The EventExtractor recovers a typed signature for every such call so the
TypeScript side can decode the payloads.

The result is best-effort: parameters whose type cannot be inferred are
kept with the type 'unknown'.

Usage:
    python -m puppetgen.events.extractor --src src -o src-ts
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from ..scanner import (
    extract_contract_name,
    extract_log_event_calls,
    get_all_sol_files,
    get_function_containing,
    parse_function_signatures,
    parse_local_variables,
    parse_mapping_declarations,
    split_encode_args,
)
from ..type_system import (
    StructRegistry,
    TypeScope,
    UNKNOWN_TYPE,
    extract_param_name,
    extract_variable_name,
    unique_name,
)


@dataclass
class EventParam:
    type: str
    name: str


@dataclass
class EventDefinition:
    """A `_logEvent` signature inferred from source."""
    name: str
    params: List[EventParam] = field(default_factory=list)
    contract_name: str = ''
    source_file: str = ''
    line: Optional[int] = None

    @property
    def unknown_count(self) -> int:
        return sum(1 for p in self.params if p.type == UNKNOWN_TYPE)

    def signature(self) -> str:
        """Human-readable parameter list, e.g. 'address user, uint256 amount'."""
        return ', '.join(f'{p.type} {p.name}' for p in self.params)


ContractEvents = Dict[str, List[EventDefinition]]


class EventExtractor:
    """
    Infers `_logEvent` signatures for every contract under a source tree.

    Two passes: the first discovers struct definitions in every file, the
    second walks each contract's `_logEvent` calls and types their
    arguments against the file's declaration tables.
    """

    def __init__(self, registry: Optional[StructRegistry] = None):
        self.registry = registry if registry is not None else StructRegistry()

    def parse_directory(self, src_dir) -> ContractEvents:
        """Extract events from every .sol file below src_dir."""
        sol_files = get_all_sol_files(src_dir)
        sources = {sol_file: sol_file.read_text() for sol_file in sol_files}

        for sol_file, content in sources.items():
            self.registry.discover_from_source(content)

        contract_events: ContractEvents = {}
        for sol_file, content in sources.items():
            self.parse_source(content, sol_file.name, contract_events)
        return contract_events

    def parse_source(
        self,
        content: str,
        source_file: str = '',
        contract_events: Optional[ContractEvents] = None,
    ) -> ContractEvents:
        """
        Extract events from one source string into contract_events.

        Structs must already be registered; call discover on the registry
        first when parsing a standalone source.
        """
        if contract_events is None:
            contract_events = {}

        contract_name = extract_contract_name(content)
        if not contract_name:
            return contract_events

        function_signatures = parse_function_signatures(content)
        function_params = parse_mapping_declarations(content)
        for params in function_signatures.values():
            function_params.update(params)

        for call in extract_log_event_calls(content):
            func_body = get_function_containing(content, call.line_number)
            scope = TypeScope(
                structs=self.registry,
                function_params=function_params,
                local_vars=parse_local_variables(func_body) if func_body else {},
            )

            used_names: set = set()
            params = []
            for arg in split_encode_args(call.encode_args):
                resolved_type = scope.resolve(extract_variable_name(arg))
                params.append(EventParam(
                    type=resolved_type,
                    name=unique_name(extract_param_name(arg), used_names),
                ))

            self._add_event(contract_events, EventDefinition(
                name=call.event_name,
                params=params,
                contract_name=contract_name,
                source_file=source_file,
                line=call.line_number,
            ))

        return contract_events

    @staticmethod
    def _add_event(contract_events: ContractEvents, event: EventDefinition) -> None:
        """Add an event, keeping the variant with fewer unknowns on name clashes."""
        events = contract_events.setdefault(event.contract_name, [])
        for idx, existing in enumerate(events):
            if existing.name == event.name:
                if event.unknown_count < existing.unknown_count:
                    events[idx] = event
                return
        events.append(event)


def parse_events_from_solidity(src_dir) -> ContractEvents:
    """Convenience wrapper: extract events with a fresh struct registry."""
    return EventExtractor().parse_directory(src_dir)


# =============================================================================
# CLI INTERFACE
# =============================================================================

def main():
    import argparse
    import sys

    from ..codegen.events import generate_event_params_code
    from ..codegen.base import write_file
    from ..config import GeneratorConfig

    parser = argparse.ArgumentParser(description='Extract _logEvent signatures from Solidity sources')
    parser.add_argument('--src', default='./src', help='Solidity source directory')
    parser.add_argument('-o', '--output', default='./src-ts', help='Output directory for events.ts')
    parser.add_argument('--stdout', action='store_true', help='Print the events module instead of writing it')
    parser.add_argument('--contract-name-map', metavar='FILE',
                        help='JSON file renaming contracts in the event map')
    args = parser.parse_args()

    src_dir = Path(args.src)
    if not src_dir.is_dir():
        print(f'Error: {args.src} is not a valid directory', file=sys.stderr)
        sys.exit(1)

    print('Parsing Solidity files for _logEvent calls...')
    contract_events = parse_events_from_solidity(src_dir)

    total_events = 0
    for contract_name, events in contract_events.items():
        print(f'\n{contract_name}:')
        for event in events:
            print(f'  {event.name}: ({event.signature()})')
            total_events += 1
    print(f'\nTotal: {total_events} events across {len(contract_events)} contracts')

    config = GeneratorConfig(output_dir=Path(args.output))
    contract_name_map = config.load_contract_name_map(args.contract_name_map)
    code = generate_event_params_code(contract_events, contract_name_map)

    if args.stdout:
        print(code)
        return

    output_path = config.output_dir / 'events.ts'
    write_file(output_path, code)
    print(f'\nWritten to {output_path}')


if __name__ == '__main__':
    main()
