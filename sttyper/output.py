"""Result record formatting and writing."""

import sys
from pathlib import Path

from rich.console import Console

console = Console(stderr=True)


def sample_name(path) -> str:
    """File name of a read file with its last extension removed.

    Examples:
        >>> sample_name("reads/S1_R1.fastq")
        'S1_R1'
        >>> sample_name("S1.fastq.gz")
        'S1.fastq'
    """
    return Path(path).with_suffix('').name


def format_result(name, result) -> str:
    """Render a TypingResult as a header line and a result line.

    Every locus and allele field is followed by a tab.
    """
    loci = ''.join(f'{locus}\t' for locus, _ in result.calls)
    alleles = ''.join(f'{allele}\t' for _, allele in result.calls)
    header = f'#Name\tST\t{loci}\n'
    row = f'{name}\t{result.label}\t{alleles}'
    return header + row


def write_result(name, result, outdir=None):
    """Write the result record to stdout, or to ``<outdir>/<name>.res``.

    Returns:
        Path of the written file, or None when printed to stdout.
    """
    text = format_result(name, result)
    if outdir is None:
        sys.stdout.write(text + '\n')
        return None

    outdir = Path(outdir)
    outdir.mkdir(parents=True, exist_ok=True)
    out_path = outdir / f'{name}.res'
    out_path.write_text(text)
    console.print(f'  Saved result to {out_path}')
    return out_path


__all__ = ['sample_name', 'format_result', 'write_result']
