"""sttyper command line: MLST sequence typing of Streptococcus suis reads."""

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from sttyper.main import TypingConfig, run_pipeline

app = typer.Typer(help="MLST sequence typing of whole-genome sequencing reads")

console = Console(stderr=True)


@app.command()
def main(
    reads: Optional[List[Path]] = typer.Argument(
        None,
        help="Read files: one for single-end, two for paired-end"
    ),
    out: Optional[str] = typer.Option(
        None,
        "--out", "-o",
        help="Output directory; the result is printed to stdout if omitted"
    ),
    mlst_db: str = typer.Option(
        "Streptococcus_suis.fasta",
        "--mlst-db", "-x",
        help="Multi-FASTA file of MLST alleles, inside the database directory"
    ),
    mlst_def: str = typer.Option(
        "ssuis.txt",
        "--mlst-def", "-y",
        help="Profile definitions file, inside the database directory"
    ),
    db: str = typer.Option(
        "database",
        "--db", "-z",
        help="Database directory containing MLST alleles and profile definitions"
    ),
    hits: Optional[str] = typer.Option(
        None,
        "--hits",
        help="Precomputed KMA .res file; skips running KMA"
    ),
    name: Optional[str] = typer.Option(
        None,
        "--name", "-n",
        help="Sample name; defaults to the first input file name without extension"
    ),
    keep_kma: bool = typer.Option(
        False,
        "--keep-kma",
        help="Keep the KMA result files next to the output"
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet", "-q",
        help="Do not print the configuration summary"
    ),
) -> None:
    """Assign a sequence type to one sample.

    An unmatched profile is reported as NF and is not an error.
    """
    config = TypingConfig(
        reads=[str(r) for r in reads] if reads else [],
        outdir=out,
        db_dir=db,
        mlst_db=mlst_db,
        mlst_def=mlst_def,
        hits_file=hits,
        name=name,
        keep_kma=keep_kma,
        verbose=not quiet,
    )

    try:
        run_pipeline(config)
    except Exception as exc:
        console.print(f"[bold red]✗ Error:[/bold red] {str(exc)}")
        raise typer.Exit(code=1) from exc


if __name__ == "__main__":
    app()
