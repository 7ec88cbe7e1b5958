"""
Generation of custom error ABI modules.

Custom errors are declared in a single Solidity file per project
(Puppet's utils/Error.sol and GMX's error/Errors.sol). They are parsed
with the declaration scanners and emitted as ABI arrays so revert data
can be decoded on the TypeScript side.
"""

from typing import List

from .base import DO_NOT_EDIT, AUTO_GENERATED, json_literal, ts_literal


def generate_error_abi_code(errors: List[dict]) -> str:
    """Render errors.ts exporting puppetErrorAbi."""
    return (
        '// This file is auto-generated from contracts/src/utils/Error.sol\n'
        f'{DO_NOT_EDIT}\n'
        '\n'
        f'export const puppetErrorAbi = {ts_literal(errors)} as const\n'
    )


def generate_gmx_error_abi_code(errors: List[dict]) -> str:
    """Render gmx/abi/gmxErrors.ts exporting gmxErrorAbi."""
    return (
        f'{AUTO_GENERATED}\n'
        '// Source: GMX contracts/error/Errors.sol from the gmx-synthetics library\n'
        '\n'
        f'export const gmxErrorAbi = {json_literal(errors)} as const\n'
    )
