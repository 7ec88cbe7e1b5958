"""
Regex scanners for Solidity declarations.

Extracts the declaration tables the event type resolver consults:
struct definitions, function parameter and named-return tables, local
variable declarations and mapping value types. Also extracts custom
error declarations for the error ABI generators.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional


TypeMap = Dict[str, str]


@dataclass
class StructField:
    type: str
    name: str


@dataclass
class StructDefinition:
    name: str
    fields: List[StructField] = field(default_factory=list)

    def field_type(self, name: str) -> Optional[str]:
        for struct_field in self.fields:
            if struct_field.name == name:
                return struct_field.type
        return None


# =============================================================================
# PATTERNS
# =============================================================================

STRUCT_RE = re.compile(r'struct\s+(\w+)\s*\{([^}]+)\}')
STRUCT_FIELD_RE = re.compile(r'(\w+(?:\[\])?)\s+(\w+)\s*;')

FUNCTION_RE = re.compile(
    r'function\s+(\w+)\s*\(([\s\S]*?)\)\s*[^{]*?(?:returns\s*\(([\s\S]*?)\))?\s*\{'
)
PARAM_RE = re.compile(r'^(\w+(?:\[\])?)\s+(?:memory\s+|calldata\s+|storage\s+)?(\w+)$')
RETURN_PARAM_RE = re.compile(r'^(\w+(?:\[\])?)\s+(?:memory\s+)?(\w+)$')

LOCAL_VAR_PATTERNS = (
    re.compile(r'(\w+(?:\[\])?)\s+(?:memory\s+|storage\s+|calldata\s+)?(\w+)\s*='),
    re.compile(r'(\w+(?:\[\])?)\s+(\w+)\s*;'),
)
STATEMENT_KEYWORDS = frozenset({
    'if', 'for', 'while', 'return', 'require', 'emit', 'delete',
    'memory', 'storage', 'calldata',
})

MAPPING_RE = re.compile(r'mapping\s*\([^)]+\s*=>\s*(\w+(?:\[\])?)\)\s*(?:public\s+)?(\w+)')

ERROR_RE = re.compile(r'error\s+(\w+)\s*\((.*?)\)\s*;')
GMX_ERROR_RE = re.compile(r'error\s+(\w+)\s*\(([^)]*)\)\s*;')
ERROR_PARAM_RE = re.compile(r'^(.+?)\s+(\w+)$')
GMX_ERROR_PARAM_RE = re.compile(r'^(.+?)(?:\s+(\w+))?$')


def _squash(text: str) -> str:
    return re.sub(r'\s+', ' ', text).strip()


# =============================================================================
# DECLARATION TABLES
# =============================================================================

def parse_structs(content: str) -> Dict[str, StructDefinition]:
    """Parse every struct definition in a source file."""
    structs: Dict[str, StructDefinition] = {}
    for match in STRUCT_RE.finditer(content):
        struct = StructDefinition(name=match.group(1))
        for field_match in STRUCT_FIELD_RE.finditer(match.group(2)):
            struct.fields.append(StructField(type=field_match.group(1), name=field_match.group(2)))
        structs[struct.name] = struct
    return structs


def _parse_param_list(params: str, pattern: re.Pattern, into: TypeMap) -> None:
    if not params:
        return
    for part in params.split(','):
        param_match = pattern.match(part.strip())
        if param_match:
            into[param_match.group(2)] = param_match.group(1)


def parse_function_signatures(content: str) -> Dict[str, TypeMap]:
    """
    Map each function name to its parameter and named-return types.

    Overloads share a name, so the last declaration wins.
    """
    function_params: Dict[str, TypeMap] = {}
    for match in FUNCTION_RE.finditer(content):
        param_map: TypeMap = {}
        _parse_param_list(_squash(match.group(2)), PARAM_RE, param_map)
        if match.group(3) is not None:
            _parse_param_list(_squash(match.group(3)), RETURN_PARAM_RE, param_map)
        function_params[match.group(1)] = param_map
    return function_params


def parse_local_variables(function_body: str) -> TypeMap:
    """Collect "Type name = ..." and "Type name;" declarations from a body."""
    local_vars: TypeMap = {}
    for pattern in LOCAL_VAR_PATTERNS:
        for match in pattern.finditer(function_body):
            var_type, name = match.group(1), match.group(2)
            if var_type not in STATEMENT_KEYWORDS:
                local_vars[name] = var_type
    return local_vars


def parse_mapping_declarations(content: str) -> TypeMap:
    """Map each mapping state variable to its value type."""
    return {match.group(2): match.group(1) for match in MAPPING_RE.finditer(content)}


# =============================================================================
# CUSTOM ERRORS
# =============================================================================

def parse_error_definitions(content: str) -> List[dict]:
    """
    Build ABI error entries from single-line custom error declarations.

    uint is widened to uint256 and IERC20 parameters become addresses with
    a "contract IERC20" internal type. Errors without parameters get an
    empty inputs list; errors whose parameters cannot be read get none.
    """
    errors = []
    for match in ERROR_RE.finditer(content):
        params = match.group(2).strip()
        error_abi: dict = {'type': 'error', 'name': match.group(1)}

        if not params:
            error_abi['inputs'] = []
            errors.append(error_abi)
            continue

        inputs = []
        for param in (p.strip() for p in params.split(',')):
            param_match = ERROR_PARAM_RE.match(param)
            if not param_match:
                continue
            param_type, name = param_match.group(1), param_match.group(2)
            if param_type == 'uint':
                param_type = 'uint256'
            if param_type == 'IERC20':
                param_type = 'address'

            internal_type = param_type
            if param_type == 'address' and 'IERC20' in param:
                internal_type = 'contract IERC20'

            inputs.append({'name': name, 'internalType': internal_type, 'type': param_type})

        if inputs:
            error_abi['inputs'] = inputs
        errors.append(error_abi)

    return errors


def parse_gmx_error_definitions(content: str) -> List[dict]:
    """
    Build ABI error entries from the GMX Errors.sol library.

    Unnamed parameters are named param<index>. Entries are sorted by name.
    """
    errors = []
    for match in GMX_ERROR_RE.finditer(content):
        params_str = match.group(2).strip()
        inputs = []
        if params_str:
            for param in (p.strip() for p in params_str.split(',')):
                if not param:
                    continue
                param_match = GMX_ERROR_PARAM_RE.match(param)
                if not param_match:
                    continue
                abi_type = param_match.group(1).strip()
                if abi_type == 'uint':
                    abi_type = 'uint256'
                if abi_type == 'int':
                    abi_type = 'int256'
                inputs.append({
                    'internalType': abi_type,
                    'type': abi_type,
                    'name': param_match.group(2) or f'param{len(inputs)}',
                })
        errors.append({'name': match.group(1), 'type': 'error', 'inputs': inputs})

    errors.sort(key=lambda entry: locale_sort_key(entry['name']))
    return errors


def _collation_weight(char: str):
    if char.isdigit():
        return (1, char)
    if char.isalpha():
        return (2, char.casefold())
    return (0, char)


def locale_sort_key(name: str):
    """
    Approximates ICU root collation as used by localeCompare.

    Punctuation sorts before digits, digits before letters, letters compare
    case-insensitively and lowercase comes first on ties.
    """
    return (tuple(_collation_weight(c) for c in name), name.swapcase())
