"""
Shared helpers for emitting generated TypeScript modules.

Generated modules are mostly data: JSON payloads wrapped in an export with
an `as const` assertion. These helpers format those payloads the way the
TypeScript consumers expect and write them to disk.
"""

import json
import re
from pathlib import Path
from typing import Any, Optional


DO_NOT_EDIT = '// Do not edit manually.'
AUTO_GENERATED = '// This file is auto-generated. Do not edit manually.'

QUOTED_KEY_RE = re.compile(r'"(\w+)":')


def json_literal(value: Any, indent: Optional[int] = 2) -> str:
    """Serialize a value as JSON. Compact when indent is None."""
    if indent is None:
        return json.dumps(value, separators=(',', ':'), ensure_ascii=False)
    return json.dumps(value, indent=indent, ensure_ascii=False)


def ts_literal(value: Any, indent: Optional[int] = 2) -> str:
    """Serialize a value as a TypeScript object literal with bare keys."""
    return QUOTED_KEY_RE.sub(r'\1:', json_literal(value, indent))


def abi_import_name(contract_name: str) -> str:
    """Identifier used for a contract's imported ABI, e.g. 'tokenrouterAbi'."""
    return f'{contract_name.lower()}Abi'


def write_file(path: Path, content: str) -> None:
    """Write content, creating parent directories as needed."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f:
        f.write(content)


def write_if_changed(path: Path, content: str) -> bool:
    """
    Write content only when it differs from what is on disk.

    Returns:
        True if the file was written, False if it was already up to date
    """
    path = Path(path)
    if path.exists():
        try:
            if path.read_text() == content:
                return False
        except (OSError, UnicodeDecodeError):
            pass
    write_file(path, content)
    return True
