"""Profile definition loading.

Reads an MLST profile definition table (tab-delimited) of the form::

    ST    aroA    cpn60    dpr    ...    clonal_complex
    1     1       1        1      ...    ST1
    5     1       2        1      ...

into an ordered locus schema and an ST -> allele vector table. Metadata
columns such as ``clonal_complex`` are recognised by name and dropped.
"""

import csv
import gzip
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence, Tuple

from rich.console import Console

from sttyper.core.errors import MalformedProfileRow

console = Console(stderr=True)

DEFAULT_METADATA_COLUMNS = ('clonal_complex',)


@dataclass(frozen=True)
class Profile:
    """A known (ST, allele vector) pair."""
    st: int
    alleles: Tuple[int, ...]


@dataclass
class ProfileDatabase:
    """Ordered locus schema plus the ST -> Profile table."""
    loci: Tuple[str, ...]
    profiles: Dict[int, Profile] = field(default_factory=dict)
    duplicates: List[int] = field(default_factory=list)

    @property
    def n_loci(self):
        return len(self.loci)

    def __len__(self):
        return len(self.profiles)


def _parse_number(value, row_index, what):
    if not (value.isascii() and value.isdigit()):
        raise MalformedProfileRow(row_index, value, f'{what} is not a non-negative integer')
    return int(value)


def _metadata_positions(header, metadata_columns):
    wanted = {c.lower() for c in metadata_columns}
    return [i for i, name in enumerate(header) if i > 0 and name.lower() in wanted]


def parse_profiles(rows: Iterable[Sequence[str]], metadata_columns=DEFAULT_METADATA_COLUMNS) -> ProfileDatabase:
    """Build a ProfileDatabase from already-split rows.

    Parameters:
        rows: Iterable of field lists; the first non-blank row is the header.
        metadata_columns: Header names (case-insensitive) that are not loci.

    Returns:
        ProfileDatabase

    Raises:
        MalformedProfileRow: On the first row holding a non-numeric ST or
            allele, or a reserved ST of 0. The row is never skipped.
    """
    db = None
    drop = []

    for row_index, raw in enumerate(rows, start=1):
        fields = [f.strip() for f in raw]
        if not any(fields):
            continue

        if db is None:
            if len(fields) > 1 and fields[-1] == '':
                fields.pop()
            drop = _metadata_positions(fields, metadata_columns)
            loci = [name for i, name in enumerate(fields) if i > 0 and i not in drop]
            db = ProfileDatabase(loci=tuple(loci))
            continue

        fields = [f for i, f in enumerate(fields) if i not in drop]
        if len(fields) > 1 and fields[-1] == '':
            fields.pop()

        st = _parse_number(fields[0], row_index, 'ST')
        if st == 0:
            raise MalformedProfileRow(row_index, fields[0], 'ST 0 is reserved')
        alleles = tuple(_parse_number(f, row_index, 'allele') for f in fields[1:])

        if st in db.profiles:
            db.duplicates.append(st)
            console.print(f'[yellow]Warning:[/yellow] ST {st} defined more than once (row {row_index}); keeping the last definition')
        db.profiles[st] = Profile(st=st, alleles=alleles)

    if db is None:
        raise MalformedProfileRow(0, '', 'missing header')

    return db


def read_profiles(path, metadata_columns=DEFAULT_METADATA_COLUMNS) -> ProfileDatabase:
    """Read a tab-delimited profile definition file (optionally gzipped)."""
    path = str(path)
    opener = gzip.open if path.endswith('.gz') else open
    with opener(path, 'rt', newline='') as fh:
        reader = csv.reader(fh, delimiter='\t', quoting=csv.QUOTE_NONE)
        db = parse_profiles(reader, metadata_columns=metadata_columns)
    console.print(f'  Loaded {len(db)} profiles across {db.n_loci} loci from {path}')
    return db


__all__ = [
    'DEFAULT_METADATA_COLUMNS',
    'Profile',
    'ProfileDatabase',
    'parse_profiles',
    'read_profiles',
]
