#!/usr/bin/env python3
"""
Build contract documentation pages with `forge doc`.

forge writes a full mdBook under docs/generated; only the contract pages
are kept (interfaces and utils are skipped) and copied into the docs
site's pages directory.
"""

import re
import shutil
import subprocess
import sys
from pathlib import Path
from typing import List


GENERATED_DIR = Path('docs/generated')
GENERATED_SRC_DIR = GENERATED_DIR / 'src'
PAGES_DIR = Path('docs/contracts/pages')

EXCLUDED_PAGE_RE = re.compile(r'/(interface|utils)/')


def is_contract_page(path: str) -> bool:
    """Markdown pages outside any interface/ or utils/ directory."""
    return path.endswith('.md') and not EXCLUDED_PAGE_RE.search(path)


def copy_contract_pages(project_dir: Path) -> List[Path]:
    """
    Copy generated contract pages into the docs site.

    Returns:
        Destination paths written
    """
    generated = project_dir / GENERATED_DIR
    generated_src = project_dir / GENERATED_SRC_DIR
    pages_dir = project_dir / PAGES_DIR

    copied = []
    for page in sorted(generated.glob('**/*')):
        if not page.is_file():
            continue
        rel = page.relative_to(project_dir).as_posix()
        if not is_contract_page(rel):
            continue
        if page.is_relative_to(generated_src):
            dest = pages_dir / page.relative_to(generated_src)
        else:
            dest = pages_dir / page.relative_to(generated)
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(page, dest)
        copied.append(dest)
    return copied


def build_docs(project_dir: Path) -> List[Path]:
    """Run forge doc, keep the contract pages and drop the generated book."""
    result = subprocess.run(['forge', 'doc', '--out', str(GENERATED_DIR), '--build'], cwd=project_dir)
    if result.returncode != 0:
        raise RuntimeError(f'forge doc exited with code {result.returncode}')

    copied = copy_contract_pages(project_dir)
    shutil.rmtree(project_dir / GENERATED_DIR, ignore_errors=True)
    return copied


def main(argv=None):
    import argparse

    parser = argparse.ArgumentParser(description='Generate contract docs with forge doc')
    parser.add_argument('--project-dir', default='.', help='Foundry project root (default: .)')
    args = parser.parse_args(argv)

    try:
        copied = build_docs(Path(args.project_dir))
    except Exception as e:
        print(f'forge doc failed: {e}', file=sys.stderr)
        sys.exit(1)
    print(f'Copied {len(copied)} pages to {PAGES_DIR}')


if __name__ == '__main__':
    main()
