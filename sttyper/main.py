"""sttyper pipeline - main orchestrator

Six-step typing pipeline for one sample:
1. Database check (and KMA indexing)
2. Profile loading & trie compilation
3. Alignment (KMA) or precomputed hits
4. Allele calling
5. Sequence type assignment
6. Output
"""
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from rich.console import Console

from sttyper import kma
from sttyper.config_utils import resolve_sample_name, validate_config, print_config_summary
from sttyper.core.alleles import call_alleles, order_calls, read_hits
from sttyper.core.engine import TypingEngine
from sttyper.core.profiles import DEFAULT_METADATA_COLUMNS, read_profiles
from sttyper.core.trie import ProfileTrie
from sttyper.output import write_result

console = Console(stderr=True)


@dataclass
class TypingConfig:
    """Configuration for the typing pipeline."""

    # Input: one (single-end) or two (paired-end) read files
    reads: List[str] = field(default_factory=list)
    outdir: Optional[str] = None  # If None, print to stdout

    # Database
    db_dir: str = 'database'
    mlst_db: str = 'Streptococcus_suis.fasta'
    mlst_def: str = 'ssuis.txt'
    metadata_columns: Tuple[str, ...] = DEFAULT_METADATA_COLUMNS

    # Alignment
    hits_file: Optional[str] = None  # Precomputed KMA .res; skips KMA
    kma: str = 'kma'
    keep_kma: bool = False

    # General
    name: Optional[str] = None  # If None, derived from the first input file
    verbose: bool = True


class TypingPipeline:
    """Main orchestrator for the 6-step typing pipeline."""

    def __init__(self, config: TypingConfig):
        self.config = config
        self.db_dir = Path(config.db_dir)
        self.name = resolve_sample_name(config)

        self.results: Dict[str, Any] = {
            'step_1_database': {},
            'step_2_profiles': {},
            'step_3_alignment': {},
            'step_4_alleles': {},
            'step_5_typing': {},
            'step_6_output': {},
        }

    def run(self):
        """Execute the full pipeline."""
        try:
            self._step_1_database_check()
            self._step_2_compile_profiles()
            self._step_3_alignment()
            self._step_4_allele_calling()
            self._step_5_typing()
            self._step_6_output()
            return self.results

        except Exception as e:
            console.print(f"\n[bold red]✗[/bold red] Pipeline failed: {e}")
            raise

    def _step_1_database_check(self):
        """Step 1: Validate configuration and index the allele database."""
        console.print("\n[bold]STEP 1: Database Check[/bold]")
        console.print("─" * 60)

        validate_config(self.config)
        if self.config.verbose:
            print_config_summary(self.config)

        indexed = False
        if not self.config.hits_file:
            kma.check_prereqs(self.config.kma)
            indexed = kma.ensure_index(self.db_dir / self.config.mlst_db, kma=self.config.kma)

        self.results['step_1_database'] = {'indexed': indexed}

    def _step_2_compile_profiles(self):
        """Step 2: Load profile definitions and compile the trie."""
        console.print("\n[bold]STEP 2: Profiles[/bold]")
        console.print("─" * 60)

        db = read_profiles(self.db_dir / self.config.mlst_def,
                           metadata_columns=self.config.metadata_columns)
        trie = ProfileTrie.from_database(db)
        console.print(f"  Compiled {trie.n_profiles} profiles into {len(trie)} nodes")

        self.results['step_2_profiles'] = {
            'database': db,
            'trie': trie,
        }

    def _step_3_alignment(self):
        """Step 3: Run KMA, or read the supplied hits file."""
        console.print("\n[bold]STEP 3: Alignment[/bold]")
        console.print("─" * 60)

        if self.config.hits_file:
            console.print(f"  Using precomputed hits: {self.config.hits_file}")
            hits = read_hits(self.config.hits_file)
            res_path = Path(self.config.hits_file)
        elif self.config.keep_kma:
            prefix = Path(self.config.outdir or '.') / f'{self.name}_kma'
            prefix.parent.mkdir(parents=True, exist_ok=True)
            res_path = kma.run_kma(self.config.reads, self.db_dir / self.config.mlst_db,
                                   prefix, kma=self.config.kma)
            hits = read_hits(res_path)
        else:
            with tempfile.TemporaryDirectory() as tmpdir:
                prefix = Path(tmpdir) / 'tmp_kma'
                res_path = kma.run_kma(self.config.reads, self.db_dir / self.config.mlst_db,
                                       prefix, kma=self.config.kma)
                hits = read_hits(res_path)
            res_path = None

        console.print(f"  {len(hits)} hit records")
        self.results['step_3_alignment'] = {
            'hits': hits,
            'res_path': res_path,
        }

    def _step_4_allele_calling(self):
        """Step 4: Keep the best-scoring allele per locus."""
        console.print("\n[bold]STEP 4: Allele Calling[/bold]")
        console.print("─" * 60)

        loci = self.results['step_2_profiles']['database'].loci
        calls = call_alleles(self.results['step_3_alignment']['hits'])
        ordered = order_calls(calls, loci)

        missing = [locus for locus in loci if locus not in calls]
        console.print(f"  Called {len(ordered)}/{len(loci)} loci")
        if missing:
            console.print(f"  [yellow]No hits for:[/yellow] {', '.join(missing)}")

        self.results['step_4_alleles'] = {
            'calls': calls,
            'ordered_calls': ordered,
            'missing_loci': missing,
        }

    def _step_5_typing(self):
        """Step 5: Walk the trie with the ordered calls."""
        console.print("\n[bold]STEP 5: Sequence Type[/bold]")
        console.print("─" * 60)

        engine = TypingEngine(self.results['step_2_profiles']['trie'])
        result = engine.classify(self.results['step_4_alleles']['ordered_calls'])

        if result.resolved:
            console.print(f"  [green]✓[/green] ST {result.st}")
        else:
            console.print(f"  [yellow]No matching profile[/yellow] (matched {result.depth} loci)")

        self.results['step_5_typing'] = {'result': result}

    def _step_6_output(self):
        """Step 6: Write the result record."""
        console.print("\n[bold]STEP 6: Output[/bold]")
        console.print("─" * 60)

        result = self.results['step_5_typing']['result']
        out_path = write_result(self.name, result, outdir=self.config.outdir)
        self.results['step_6_output'] = {
            'name': self.name,
            'path': out_path,
        }


def run_pipeline(config: TypingConfig) -> Dict[str, Any]:
    """Run the complete typing pipeline.

    Parameters:
        config: TypingConfig object with pipeline settings

    Returns:
        dict: Results from all steps
    """
    pipeline = TypingPipeline(config)
    return pipeline.run()


__all__ = [
    'TypingConfig',
    'TypingPipeline',
    'run_pipeline',
]
