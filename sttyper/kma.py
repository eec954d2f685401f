"""Thin wrapper around the KMA aligner.

KMA maps the sample reads against the allele FASTA and writes a ``.res``
table of template hits and scores. It is run once per sample, blocking, and
never retried.
"""

import shutil
import subprocess
from pathlib import Path
from typing import List, Sequence

from rich.console import Console

console = Console(stderr=True)


class KmaError(RuntimeError):
    """KMA is missing, failed, or produced no result table."""


def check_prereqs(kma='kma'):
    """Raise KmaError unless the kma executable is on PATH."""
    if shutil.which(kma) is None:
        raise KmaError(f'{kma} not found, install it before running this pipeline')


def index_exists(db_fasta) -> bool:
    return Path(f'{db_fasta}.length.b').exists()


def _run(cmd: List[str], what):
    console.print(f'  $ {" ".join(cmd)}', markup=False, highlight=False)
    proc = subprocess.run(cmd, capture_output=True, text=True, check=False)
    if proc.returncode != 0:
        stderr_msg = proc.stderr.strip() if proc.stderr else 'unknown error'
        raise KmaError(f'{what} failed (exit {proc.returncode}): {stderr_msg}')
    return proc


def ensure_index(db_fasta, kma='kma') -> bool:
    """Index the allele FASTA unless an index already exists.

    Returns:
        bool: True if an index was built.
    """
    if index_exists(db_fasta):
        return False
    console.print('[yellow]KMA database not indexed, creating new index...[/yellow]')
    _run([kma, 'index', '-i', str(db_fasta), '-o', str(db_fasta)], 'kma index')
    return True


def build_command(reads: Sequence, db_fasta, out_prefix, kma='kma') -> List[str]:
    """KMA command line for single-end (one file) or paired-end (two files) reads."""
    if len(reads) == 1:
        inputs = ['-i', str(reads[0])]
    elif len(reads) == 2:
        inputs = ['-ipe', str(reads[0]), str(reads[1])]
    else:
        raise ValueError(f'expected 1 or 2 read files, got {len(reads)}')
    return [kma, '-o', str(out_prefix), '-t_db', str(db_fasta), *inputs, '-na', '-nf', '-nc']


def run_kma(reads: Sequence, db_fasta, out_prefix, kma='kma') -> Path:
    """Align reads against the allele database and return the ``.res`` path."""
    console.print('Running kma...')
    _run(build_command(reads, db_fasta, out_prefix, kma=kma), 'kma')
    res_path = Path(f'{out_prefix}.res')
    if not res_path.exists():
        raise KmaError(f'kma finished but {res_path} was not written')
    return res_path


__all__ = [
    'KmaError',
    'check_prereqs',
    'index_exists',
    'ensure_index',
    'build_command',
    'run_kma',
]
