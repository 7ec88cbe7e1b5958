"""
ABI type inference for `abi.encode` argument expressions.

Each argument of a `_logEvent` call is a Solidity expression. Its ABI type
is guessed by looking the expression up in a chain of scopes, in a fixed
order:

1. Special global variables (msg.sender, block.timestamp, ...)
2. Literal shapes (integers, booleans, 32-byte hex, bytes32(0), address(0))
3. Struct fields, for `var.field` where `var` is declared with a struct type
4. Function parameters (and mapping declarations)
5. Local variables of the enclosing function span
6. Steps 4 and 5 again with one leading underscore removed

Anything left over is reported as 'unknown'.
"""

import re
from dataclasses import dataclass, field
from typing import Mapping, Optional

from ..scanner.definitions import StructDefinition, TypeMap
from .mappings import (
    SOLIDITY_KEYWORDS,
    SPECIAL_VARS,
    UNKNOWN_TYPE,
    convert_solidity_type_to_abi,
    literal_type,
)


MEMBER_ACCESS_RE = re.compile(r'^(\w+)\.(\w+)$')
ARRAY_INDEX_RE = re.compile(r'^(\w+)\[\d+\]$')
MAPPING_ACCESS_RE = re.compile(r'^(\w+)\[.+\]$')
IDENTIFIER_RE = re.compile(r'^_?(\w+)$')
ZERO_BYTES32_RE = re.compile(r'^bytes32\(0\)$')
ZERO_ADDRESS_RE = re.compile(r'^address\(0\)$')


@dataclass
class TypeScope:
    """
    The declaration tables visible from one `_logEvent` call site.

    Attributes:
        structs: All known struct definitions, by name
        function_params: Parameter (and mapping) name -> Solidity type
        local_vars: Local variable name -> Solidity type
    """
    structs: Mapping[str, StructDefinition]
    function_params: TypeMap = field(default_factory=dict)
    local_vars: TypeMap = field(default_factory=dict)

    def lookup(self, name: str) -> Optional[str]:
        """Declared Solidity type of a name, parameters first."""
        return self.function_params.get(name) or self.local_vars.get(name) or None

    def resolve(self, var_name: str) -> str:
        """Guess the ABI type of an expression, or return 'unknown'."""
        if var_name in SPECIAL_VARS:
            return SPECIAL_VARS[var_name]

        abi_type = literal_type(var_name)
        if abi_type:
            return abi_type

        member_match = MEMBER_ACCESS_RE.match(var_name)
        if member_match:
            struct_var, field_name = member_match.groups()
            struct_type_name = self.lookup(struct_var)
            if struct_type_name:
                struct = self.structs.get(struct_type_name)
                field_type = struct.field_type(field_name) if struct else None
                if field_type:
                    return convert_solidity_type_to_abi(field_type, self.structs)

        sol_type = self.lookup(var_name)
        if not sol_type and var_name.startswith('_'):
            sol_type = self.lookup(var_name[1:])

        if not sol_type:
            return UNKNOWN_TYPE

        return convert_solidity_type_to_abi(sol_type, self.structs)


def extract_variable_name(arg: str) -> str:
    """
    Reduce an argument expression to the name to resolve.

    Member access is kept whole (the resolver handles struct fields);
    indexed access resolves through the indexed variable.
    """
    if MEMBER_ACCESS_RE.match(arg):
        return arg

    index_match = ARRAY_INDEX_RE.match(arg) or MAPPING_ACCESS_RE.match(arg)
    if index_match:
        return index_match.group(1)

    return arg


def extract_param_name(arg: str) -> str:
    """
    Derive an ABI parameter name from an argument expression.

    `a.b` -> `b`, `a[i]` -> `a`, `_a` -> `a`; zero-value casts get generic
    names and anything else becomes `param`. Names that collide with
    Solidity keywords get a `Value` suffix and names that start with a
    digit get a `param` prefix.
    """
    member_match = MEMBER_ACCESS_RE.match(arg)
    index_match = ARRAY_INDEX_RE.match(arg) or MAPPING_ACCESS_RE.match(arg)
    identifier_match = IDENTIFIER_RE.match(arg)

    if member_match:
        name = member_match.group(2)
    elif index_match:
        name = index_match.group(1)
    elif identifier_match:
        name = identifier_match.group(1)
    elif ZERO_BYTES32_RE.match(arg):
        name = 'data'
    elif ZERO_ADDRESS_RE.match(arg):
        name = 'addr'
    else:
        name = 'param'

    if name in SOLIDITY_KEYWORDS:
        name = f'{name}Value'

    if name[0].isdigit():
        name = f'param{name}'

    return name


def unique_name(name: str, used: set) -> str:
    """Append 2, 3, ... until the name is not in `used`, then record it."""
    if name in used:
        i = 2
        while f'{name}{i}' in used:
            i += 1
        name = f'{name}{i}'
    used.add(name)
    return name
