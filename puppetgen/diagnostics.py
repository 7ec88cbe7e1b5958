"""
Warning collector for the code generators.

Generation never stops on a degraded input (an event parameter whose type
cannot be resolved, a deployed contract without a forge artifact, a broken
broadcast file). Each such case is recorded here and summarised at the end
of the run so the affected generated entries can be fixed by hand.
"""

import sys
from collections import Counter
from dataclasses import dataclass
from typing import Dict, List, Optional

WARNING = 'warning'
INFO = 'info'


@dataclass
class Diagnostic:
    severity: str
    code: str
    category: str
    message: str
    file_path: str = ''
    line: Optional[int] = None

    def __str__(self) -> str:
        location = f'{self.file_path}:{self.line}' if self.line else self.file_path
        prefix = f'[{self.severity}] {location}: ' if location else f'[{self.severity}] '
        return f'{prefix}{self.message} ({self.code})'


class GeneratorDiagnostics:
    """
    Records warnings raised while generating the TypeScript bindings.

        diagnostics = GeneratorDiagnostics(verbose=True)
        extractor = EventExtractor(src_dir, diagnostics)
        ...
        diagnostics.print_summary()
    """

    def __init__(self, verbose: bool = False):
        self.verbose = verbose
        self.entries: List[Diagnostic] = []

    def _record(self, severity: str, code: str, category: str, message: str,
                file_path: str = '', line: Optional[int] = None) -> None:
        self.entries.append(Diagnostic(severity, code, category, message, file_path, line))

    @property
    def count(self) -> int:
        return len(self.entries)

    @property
    def warnings(self) -> List[Diagnostic]:
        return [d for d in self.entries if d.severity == WARNING]

    # =========================================================================
    # RECORDING
    # =========================================================================

    def warn_unknown_param_types(self, contract_name: str, event_name: str, unknown_count: int,
                                 file_path: str = '', line: Optional[int] = None) -> None:
        self._record(WARNING, 'W001', 'unknown-type',
                     f'{contract_name}.{event_name} has {unknown_count} unknown param type(s)',
                     file_path, line)

    def warn_missing_abi(self, contract_name: str, artifact_path: str = '') -> None:
        self._record(WARNING, 'W002', 'missing-abi', f'No ABI found for {contract_name}', artifact_path)

    def warn_unreadable_file(self, file_path: str, error: str) -> None:
        self._record(WARNING, 'W003', 'unreadable-file', f'Skipped unreadable file: {error}', file_path)

    def warn_duplicate_contract(self, contract_name: str) -> None:
        """The generated contract map will repeat this key; the later entry wins at runtime."""
        self._record(WARNING, 'W004', 'duplicate-contract',
                     f'Contract "{contract_name}" is listed more than once')

    def warn_missing_deployment(self, deployment_name: str) -> None:
        self._record(WARNING, 'W005', 'missing-deployment',
                     f'Deployment not found or missing address: {deployment_name}')

    def info_unchanged(self, file_path: str) -> None:
        self._record(INFO, 'I001', 'unchanged', 'Content unchanged, write skipped', file_path)

    # =========================================================================
    # REPORTING
    # =========================================================================

    def _warnings_by_category(self) -> Dict[str, List[Diagnostic]]:
        grouped: Dict[str, List[Diagnostic]] = {}
        for warning in self.warnings:
            grouped.setdefault(warning.category, []).append(warning)
        return dict(sorted(grouped.items()))

    def print_summary(self, file=None) -> None:
        """Print warning counts per category to stderr; verbose mode lists every entry."""
        out = file if file is not None else sys.stderr
        grouped = self._warnings_by_category()
        if grouped:
            print(f'\nGenerator warnings ({len(self.warnings)}):', file=out)
            for category, entries in grouped.items():
                print(f'  {category}: {len(entries)} occurrence(s)', file=out)
                if self.verbose:
                    for entry in entries:
                        print(f'    {entry}', file=out)

        infos = [d for d in self.entries if d.severity == INFO]
        if infos and self.verbose:
            print(f'\nGenerator info ({len(infos)}):', file=out)
            for entry in infos:
                print(f'  {entry}', file=out)

    def get_summary(self) -> str:
        counts = Counter(d.category for d in self.warnings)
        if not counts:
            return 'No generator warnings.'
        return 'Generator warnings: ' + ', '.join(
            f'{n} {category}' for category, n in sorted(counts.items())
        )
