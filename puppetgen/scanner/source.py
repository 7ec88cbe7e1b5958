"""
Source-level helpers for scanning Solidity files as plain text.

These helpers locate source files, find the contract a file declares and
carve out function spans by counting braces. None of them understand
Solidity grammar; they are deliberately line/regex oriented.
"""

import re
from pathlib import Path
from typing import List, Optional


EXCLUDED_DIR_MARKERS = ('/interface/', '/test/')

CONTRACT_NAME_RE = re.compile(r'\bcontract\s+(\w+)\s*(?:is|\{)')
FUNCTION_HEADER_RE = re.compile(r'function\s+\w+')
LINE_COMMENT_RE = re.compile(r'//[^\n]*')
BLOCK_COMMENT_RE = re.compile(r'/\*[\s\S]*?\*/')
WHITESPACE_RE = re.compile(r'\s+')


def get_all_sol_files(directory) -> List[Path]:
    """
    Collect every .sol file below a directory.

    Files under interface/ or test/ directories are skipped. The result is
    sorted so repeated runs visit files in the same order.
    """
    base_dir = Path(directory).resolve()
    files = []
    for sol_file in base_dir.glob('**/*.sol'):
        posix = sol_file.as_posix()
        if any(marker in posix for marker in EXCLUDED_DIR_MARKERS):
            continue
        files.append(sol_file)
    return sorted(files)


def normalize_newlines(content: str) -> str:
    return content.replace('\r\n', '\n')


def strip_comments(text: str) -> str:
    """Remove // and /* */ comments."""
    return BLOCK_COMMENT_RE.sub('', LINE_COMMENT_RE.sub('', text))


def collapse_whitespace(text: str) -> str:
    return WHITESPACE_RE.sub(' ', text).strip()


def line_number_at(content: str, index: int) -> int:
    """1-based line number of a character offset."""
    return content.count('\n', 0, index) + 1


def extract_contract_name(content: str) -> Optional[str]:
    """
    Return the first contract declared in a file.

    Matches "contract Name is ..." and "contract Name {", which also covers
    abstract contracts. Libraries and interfaces yield None.
    """
    match = CONTRACT_NAME_RE.search(content)
    return match.group(1) if match else None


def get_function_containing(content: str, line_number: int) -> Optional[str]:
    """
    Return the source span that encloses a 1-based line number.

    A span opens on the first "function name" line seen while no span is
    open, and closes on the brace that brings the running depth back to
    zero. Depth is counted from the top of the file, so for functions
    nested in a contract the span extends to the contract's closing brace
    and covers every function declared after the first one.
    """
    lines = content.split('\n')
    brace_depth = 0
    func_start = -1

    for i, line in enumerate(lines):
        if func_start == -1 and FUNCTION_HEADER_RE.search(line):
            func_start = i

        for char in line:
            if char == '{':
                brace_depth += 1
            elif char == '}':
                brace_depth -= 1
                if brace_depth == 0 and func_start != -1:
                    if func_start + 1 <= line_number <= i + 1:
                        return '\n'.join(lines[func_start:i + 1])
                    func_start = -1

    return None
