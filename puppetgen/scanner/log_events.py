"""
Extraction of `_logEvent(...)` call sites.

Puppet contracts emit events through a shared EventEmitter by calling
`_logEvent("Name", abi.encode(arg1, arg2, ...))`. This module finds those
calls in raw source text and returns the encoded argument expressions.
"""

import re
from dataclasses import dataclass
from typing import List

from .source import collapse_whitespace, line_number_at, normalize_newlines, strip_comments


LOG_EVENT_RE = re.compile(r'_logEvent\s*\(\s*"(\w+)"\s*,\s*abi\.encode\s*\(')


@dataclass
class LogEventCall:
    """A `_logEvent` call site."""
    event_name: str
    encode_args: str
    line_number: int


def extract_log_event_calls(content: str) -> List[LogEventCall]:
    """
    Find every `_logEvent("Name", abi.encode(...))` call.

    The argument text runs up to the parenthesis that closes abi.encode,
    with comments removed and whitespace collapsed. Line numbers are
    1-based and refer to the line holding `_logEvent`.
    """
    normalized = normalize_newlines(content)
    calls: List[LogEventCall] = []

    for match in LOG_EVENT_RE.finditer(normalized):
        start_idx = match.end()
        depth = 1
        end_idx = start_idx

        i = start_idx
        while i < len(normalized) and depth > 0:
            if normalized[i] == '(':
                depth += 1
            elif normalized[i] == ')':
                depth -= 1
            end_idx = i
            i += 1

        encode_args = normalized[start_idx:end_idx].strip()
        encode_args = collapse_whitespace(strip_comments(encode_args))

        calls.append(LogEventCall(
            event_name=match.group(1),
            encode_args=encode_args,
            line_number=line_number_at(normalized, match.start()),
        ))

    return calls


def split_encode_args(encode_args: str) -> List[str]:
    """Split an argument list on top-level commas, respecting () and []."""
    args = []
    current = []
    depth = 0

    for char in encode_args:
        if char in '([':
            depth += 1
            current.append(char)
        elif char in ')]':
            depth -= 1
            current.append(char)
        elif char == ',' and depth == 0:
            arg = ''.join(current).strip()
            if arg:
                args.append(arg)
            current = []
        else:
            current.append(char)

    arg = ''.join(current).strip()
    if arg:
        args.append(arg)

    return args
