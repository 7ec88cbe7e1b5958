"""
Struct registry for discovered Solidity structs.

The StructRegistry performs a first pass over Solidity source files so
that struct-typed event parameters can be expanded into tuples no matter
which file declared the struct.
"""

from pathlib import Path
from typing import Dict, Iterable, Optional

from ..scanner.definitions import StructDefinition, parse_structs


class StructRegistry:
    """
    Registry of struct definitions discovered across source files.

    Later definitions of the same name replace earlier ones.
    """

    def __init__(self):
        self.structs: Dict[str, StructDefinition] = {}

    def discover_from_source(self, source: str) -> None:
        """Discover structs from a single Solidity source string."""
        for name, struct in parse_structs(source).items():
            self.structs[name] = struct

    def discover_from_files(self, files: Iterable[Path]) -> None:
        """Discover structs from a list of Solidity files."""
        for sol_file in files:
            self.discover_from_source(Path(sol_file).read_text())

    def get(self, name: str, default=None) -> Optional[StructDefinition]:
        return self.structs.get(name, default)

    def __contains__(self, name: str) -> bool:
        return name in self.structs

    def __len__(self) -> int:
        return len(self.structs)

