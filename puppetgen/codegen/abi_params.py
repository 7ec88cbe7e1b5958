"""
Human-readable ABI parameter parsing.

Turns parameter lists such as "address user, (uint256, address)[] legs"
into ABI parameter objects:

    [{'type': 'address', 'name': 'user'},
     {'type': 'tuple[]', 'name': 'legs',
      'components': [{'type': 'uint256'}, {'type': 'address'}]}]

Types the extractor could not resolve ('unknown', enum or contract names)
are passed through untouched.
"""

import re
from typing import List


TUPLE_SUFFIX_RE = re.compile(r'^((?:\[\d*\])*)\s*(\w+)?$')
PLAIN_PARAM_RE = re.compile(r'^(\S+)(?:\s+(\w+))?$')


class AbiParameterError(ValueError):
    """Raised when a parameter list cannot be parsed."""


def split_parameters(text: str) -> List[str]:
    """Split on commas outside parentheses."""
    parts = []
    current = []
    depth = 0
    for char in text:
        if char == '(':
            depth += 1
        elif char == ')':
            depth -= 1
            if depth < 0:
                raise AbiParameterError(f'Unbalanced parentheses in "{text}"')
        if char == ',' and depth == 0:
            parts.append(''.join(current).strip())
            current = []
        else:
            current.append(char)
    if depth != 0:
        raise AbiParameterError(f'Unbalanced parentheses in "{text}"')
    parts.append(''.join(current).strip())
    return [p for p in parts if p]


def _closing_paren(text: str) -> int:
    depth = 0
    for i, char in enumerate(text):
        if char == '(':
            depth += 1
        elif char == ')':
            depth -= 1
            if depth == 0:
                return i
    raise AbiParameterError(f'Unbalanced parentheses in "{text}"')


def parse_abi_parameter(text: str) -> dict:
    """Parse a single "type [name]" declaration."""
    text = text.strip()

    if text.startswith('('):
        close = _closing_paren(text)
        suffix_match = TUPLE_SUFFIX_RE.match(text[close + 1:].strip())
        if not suffix_match:
            raise AbiParameterError(f'Invalid tuple parameter "{text}"')
        param = {'type': f'tuple{suffix_match.group(1)}'}
        if suffix_match.group(2):
            param['name'] = suffix_match.group(2)
        param['components'] = parse_abi_parameters(text[1:close])
        return param

    match = PLAIN_PARAM_RE.match(text)
    if not match:
        raise AbiParameterError(f'Invalid parameter "{text}"')
    param = {'type': match.group(1)}
    if match.group(2):
        param['name'] = match.group(2)
    return param


def parse_abi_parameters(text: str) -> List[dict]:
    """Parse a comma-separated parameter list. An empty string yields []."""
    return [parse_abi_parameter(part) for part in split_parameters(text)]
