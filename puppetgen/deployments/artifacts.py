"""
ABI loading from forge build artifacts.

forge writes one artifact per contract at <artifacts>/<Name>.sol/<Name>.json;
the generators only need its "abi" member.
"""

import json
import sys
from pathlib import Path
from typing import Optional


def artifact_path(artifacts_dir: Path, contract_name: str) -> Path:
    return Path(artifacts_dir) / f'{contract_name}.sol' / f'{contract_name}.json'


def find_abi(artifacts_dir: Path, contract_name: str, diagnostics=None) -> Optional[list]:
    """
    Load a contract's ABI from its forge artifact.

    Returns:
        The ABI list, or None when the artifact is missing or unreadable
        (both are reported, neither aborts the run)
    """
    path = artifact_path(artifacts_dir, contract_name)
    if not path.exists():
        print(f'  Warning: No ABI found for {contract_name}', file=sys.stderr)
        if diagnostics:
            diagnostics.warn_missing_abi(contract_name, str(path))
        return None

    try:
        with open(path, 'r') as f:
            artifact = json.load(f)
        return artifact['abi']
    except (OSError, json.JSONDecodeError, KeyError, TypeError) as e:
        print(f'  Error loading ABI for {contract_name}: {e}', file=sys.stderr)
        if diagnostics:
            diagnostics.warn_unreadable_file(str(path), str(e))
        return None
