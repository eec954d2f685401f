from pathlib import Path
from types import SimpleNamespace

import pytest
from typer.testing import CliRunner

from sttyper import kma
from sttyper.cli import app
from sttyper.main import TypingConfig, run_pipeline

PROFILES = (
    "ST\taroA\tcpn60\tdpr\tclonal_complex\n"
    "5\t1\t2\t1\tCC1\n"
    "7\t1\t2\t2\t\n"
)

HITS_ST5 = (
    "#Template\tScore\tExpected\n"
    "aroA-1\t500\t1\n"
    "cpn60-2\t480\t1\n"
    "cpn60-3\t480\t1\n"
    "dpr-1\t470\t1\n"
)

HITS_NF = (
    "#Template\tScore\tExpected\n"
    "aroA-1\t500\t1\n"
    "cpn60-2\t480\t1\n"
    "dpr-9\t470\t1\n"
)


@pytest.fixture
def db_dir(tmp_path):
    d = tmp_path / "database"
    d.mkdir()
    (d / "ssuis.txt").write_text(PROFILES)
    (d / "Streptococcus_suis.fasta").write_text(">aroA-1\nACGT\n")
    return d


def test_pipeline_with_precomputed_hits(tmp_path, db_dir):
    hits = tmp_path / "S1.res"
    hits.write_text(HITS_ST5)
    results = run_pipeline(TypingConfig(
        db_dir=str(db_dir), hits_file=str(hits), outdir=str(tmp_path / "out"),
    ))
    result = results["step_5_typing"]["result"]
    assert result.st == 5
    out = tmp_path / "out" / "S1.res"
    assert results["step_6_output"]["path"] == out
    assert out.read_text() == "#Name\tST\taroA\tcpn60\tdpr\t\nS1\t5\t1\t2\t1\t"


def test_pipeline_unresolved_is_not_an_error(tmp_path, db_dir):
    hits = tmp_path / "S2.res"
    hits.write_text(HITS_NF)
    results = run_pipeline(TypingConfig(
        db_dir=str(db_dir), hits_file=str(hits), outdir=str(tmp_path), name="sample2",
    ))
    assert not results["step_5_typing"]["result"].resolved
    assert (tmp_path / "sample2.res").read_text().splitlines()[1] == "sample2\tNF\t1\t2\t9\t"


def test_pipeline_reports_missing_loci(tmp_path, db_dir):
    hits = tmp_path / "S3.res"
    hits.write_text("#Template\tScore\naroA-1\t500\n")
    results = run_pipeline(TypingConfig(db_dir=str(db_dir), hits_file=str(hits), outdir=str(tmp_path / "out")))
    assert results["step_4_alleles"]["missing_loci"] == ["cpn60", "dpr"]


def test_pipeline_runs_kma(tmp_path, db_dir, monkeypatch):
    reads = tmp_path / "S4_R1.fastq"
    reads.write_text("@r\nACGT\n+\nIIII\n")
    commands = []

    def fake_run(cmd, **kwargs):
        commands.append(cmd)
        if "index" not in cmd:
            Path(cmd[cmd.index("-o") + 1] + ".res").write_text(HITS_ST5)
        return SimpleNamespace(returncode=0, stdout="", stderr="")

    monkeypatch.setattr(kma.shutil, "which", lambda name: "/usr/bin/kma")
    monkeypatch.setattr(kma.subprocess, "run", fake_run)

    results = run_pipeline(TypingConfig(reads=[str(reads)], db_dir=str(db_dir), outdir=str(tmp_path / "out")))
    assert results["step_1_database"]["indexed"] is True
    assert commands[0][1] == "index"
    assert "-i" in commands[1]
    assert results["step_5_typing"]["result"].st == 5
    assert (tmp_path / "out" / "S4_R1.res").exists()


def test_pipeline_keeps_kma_output(tmp_path, db_dir, monkeypatch):
    r1 = tmp_path / "S5_R1.fq"
    r2 = tmp_path / "S5_R2.fq"
    r1.write_text("")
    r2.write_text("")
    Path(f"{db_dir / 'Streptococcus_suis.fasta'}.length.b").write_text("")

    def fake_run(cmd, **kwargs):
        Path(cmd[cmd.index("-o") + 1] + ".res").write_text(HITS_ST5)
        return SimpleNamespace(returncode=0, stdout="", stderr="")

    monkeypatch.setattr(kma.shutil, "which", lambda name: "/usr/bin/kma")
    monkeypatch.setattr(kma.subprocess, "run", fake_run)

    results = run_pipeline(TypingConfig(
        reads=[str(r1), str(r2)], db_dir=str(db_dir), outdir=str(tmp_path / "out"), keep_kma=True,
    ))
    assert results["step_1_database"]["indexed"] is False
    assert results["step_3_alignment"]["res_path"] == tmp_path / "out" / "S5_R1_kma.res"


def test_invalid_config_missing_database(tmp_path):
    with pytest.raises(ValueError, match="Invalid configuration"):
        run_pipeline(TypingConfig(reads=["missing.fq"], db_dir=str(tmp_path / "nowhere")))


def test_invalid_config_no_input(db_dir):
    with pytest.raises(ValueError, match="Invalid configuration"):
        run_pipeline(TypingConfig(db_dir=str(db_dir)))


def test_cli_with_hits(tmp_path, db_dir):
    hits = tmp_path / "S6.res"
    hits.write_text(HITS_ST5)
    runner = CliRunner()
    result = runner.invoke(app, [
        "--db", str(db_dir), "--hits", str(hits), "--out", str(tmp_path / "out"), "--quiet",
    ])
    assert result.exit_code == 0
    assert (tmp_path / "out" / "S6.res").read_text().splitlines()[1] == "S6\t5\t1\t2\t1\t"


def test_cli_malformed_profiles_exit_code(tmp_path, db_dir):
    (db_dir / "ssuis.txt").write_text("ST\taroA\tcpn60\tdpr\nfive\t1\t2\t1\n")
    hits = tmp_path / "S7.res"
    hits.write_text(HITS_ST5)
    runner = CliRunner()
    result = runner.invoke(app, ["--db", str(db_dir), "--hits", str(hits), "--out", str(tmp_path / "out")])
    assert result.exit_code == 1
    assert not (tmp_path / "out" / "S7.res").exists()


def test_output_would_overwrite_hits_file(tmp_path, db_dir):
    hits = tmp_path / "S8.res"
    hits.write_text(HITS_ST5)
    with pytest.raises(ValueError, match="Invalid configuration"):
        run_pipeline(TypingConfig(db_dir=str(db_dir), hits_file=str(hits), outdir=str(tmp_path)))
    assert hits.read_text() == HITS_ST5


def test_hits_next_to_output_with_distinct_name(tmp_path, db_dir):
    hits = tmp_path / "S9.res"
    hits.write_text(HITS_ST5)
    results = run_pipeline(TypingConfig(
        db_dir=str(db_dir), hits_file=str(hits), outdir=str(tmp_path), name="S9_typed",
    ))
    assert results["step_6_output"]["path"] == tmp_path / "S9_typed.res"
    assert hits.read_text() == HITS_ST5
