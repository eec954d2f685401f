"""Configuration validation and database discovery helpers."""

from pathlib import Path
from rich.console import Console

from sttyper.output import sample_name

console = Console(stderr=True)


def find_files(file_name, directory):
    """Report whether ``directory/file_name`` exists."""
    target = Path(directory) / file_name
    if not target.exists():
        console.print(f"Searching for {file_name}... Not found: {target}")
        return False
    console.print(f"Searching for {file_name}... [green]Found![/green]")
    return True


def resolve_sample_name(config):
    """Sample name from the config, else the first read file or the hits file."""
    if config.name:
        return config.name
    source = config.reads[0] if config.reads else config.hits_file
    return sample_name(source) if source else 'sample'


def validate_config(config):
    """Validate TypingConfig object.

    Parameters:
        config: TypingConfig instance

    Raises:
        ValueError: If configuration is invalid
    """
    errors = []

    db_dir = Path(config.db_dir)
    if not db_dir.is_dir():
        errors.append(f"Database directory not found: {db_dir}")
    else:
        if not find_files(config.mlst_def, db_dir):
            errors.append(f"Cannot find MLST definitions: {db_dir / config.mlst_def}")
        if not config.hits_file and not find_files(config.mlst_db, db_dir):
            errors.append(f"Cannot find MLST database: {db_dir / config.mlst_db}")

    if config.hits_file:
        if not Path(config.hits_file).exists():
            errors.append(f"Hits file not found: {config.hits_file}")
        elif config.outdir:
            out_path = Path(config.outdir) / f"{resolve_sample_name(config)}.res"
            if out_path.resolve() == Path(config.hits_file).resolve():
                errors.append(f"Output {out_path} would overwrite the hits file; set another --out or --name")
    elif not config.reads:
        errors.append("No input files given")
    elif len(config.reads) > 2:
        errors.append(f"Expected 1 or 2 read files, got {len(config.reads)}")
    else:
        for reads in config.reads:
            if not Path(reads).exists():
                errors.append(f"Input file not found: {reads}")

    if errors:
        console.print("[bold red]Configuration Errors:[/bold red]")
        for error in errors:
            console.print(f"  ✗ {error}")
        raise ValueError(f"Invalid configuration: {len(errors)} error(s)")

    console.print("[green]✓[/green] Configuration validated")


def print_config_summary(config):
    """Print a summary of the configuration."""
    console.print("\n[bold]Configuration Summary:[/bold]")
    console.print(f"  Reads: {' '.join(str(r) for r in config.reads) if config.reads else 'none'}")
    console.print(f"  Output: {config.outdir if config.outdir else 'stdout'}")
    console.print("\n  [bold]Database:[/bold]")
    console.print(f"    directory: {config.db_dir}")
    console.print(f"    alleles: {config.mlst_db}")
    console.print(f"    profiles: {config.mlst_def}")
    console.print(f"    metadata columns: {', '.join(config.metadata_columns)}")
    console.print("\n  [bold]Alignment:[/bold]")
    console.print(f"    hits: {config.hits_file if config.hits_file else 'run ' + config.kma}")
    console.print(f"    keep kma output: {config.keep_kma}")


__all__ = [
    'find_files',
    'resolve_sample_name',
    'validate_config',
    'print_config_summary',
]
