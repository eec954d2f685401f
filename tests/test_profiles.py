import gzip

import pytest

from sttyper.core.errors import MalformedProfileRow
from sttyper.core.profiles import Profile, parse_profiles, read_profiles
from sttyper.core.trie import ProfileTrie


def _rows(text):
    return [line.split("\t") for line in text.splitlines()]


def test_read_profiles_basic(tmp_path):
    p = tmp_path / "ssuis.txt"
    p.write_text("ST\taroA\tcpn60\tdpr\n5\t1\t2\t1\n7\t1\t2\t2\n")
    db = read_profiles(p)
    assert db.loci == ("aroA", "cpn60", "dpr")
    assert db.n_loci == 3
    assert len(db) == 2
    assert db.profiles[5] == Profile(st=5, alleles=(1, 2, 1))
    assert db.profiles[7].alleles == (1, 2, 2)


def test_clonal_complex_column_is_dropped():
    db = parse_profiles(_rows(
        "ST\taroA\tcpn60\tdpr\tclonal_complex\n"
        "5\t1\t2\t1\tCC1\n"
        "7\t1\t2\t2\t\n"
    ))
    assert db.loci == ("aroA", "cpn60", "dpr")
    assert db.profiles[5].alleles == (1, 2, 1)
    assert db.profiles[7].alleles == (1, 2, 2)


def test_metadata_column_in_the_middle():
    db = parse_profiles(
        _rows("ST\taroA\tspecies\tdpr\n3\t4\tS. suis\t6\n"),
        metadata_columns=("species",),
    )
    assert db.loci == ("aroA", "dpr")
    assert db.profiles[3].alleles == (4, 6)


def test_trailing_blank_field_is_discarded():
    db = parse_profiles(_rows("ST\taroA\tdpr\n1\t3\t4\t\n"))
    assert db.profiles[1].alleles == (3, 4)


def test_whitespace_and_blank_lines(tmp_path):
    p = tmp_path / "profiles.txt"
    p.write_text("ST\taroA\tdpr\n\n 2 \t 8\t9 \n\n")
    db = read_profiles(p)
    assert db.profiles[2].alleles == (8, 9)


def test_gzipped_profiles(tmp_path):
    p = tmp_path / "profiles.txt.gz"
    with gzip.open(p, "wt") as fh:
        fh.write("ST\taroA\tdpr\n11\t1\t1\n")
    db = read_profiles(p)
    assert list(db.profiles) == [11]


def test_non_numeric_st_fails():
    with pytest.raises(MalformedProfileRow) as exc_info:
        parse_profiles(_rows("ST\taroA\tdpr\n1\t1\t1\nST2\t1\t2\n3\t1\t3\n"))
    assert exc_info.value.row_index == 3
    assert exc_info.value.field == "ST2"


def test_non_numeric_allele_fails():
    with pytest.raises(MalformedProfileRow) as exc_info:
        parse_profiles(_rows("ST\taroA\tdpr\n4\t1\t?\n"))
    assert exc_info.value.row_index == 2
    assert exc_info.value.field == "?"


def test_blank_allele_in_the_middle_fails():
    with pytest.raises(MalformedProfileRow):
        parse_profiles(_rows("ST\taroA\tcpn60\tdpr\n4\t1\t\t2\n"))


def test_st_zero_is_reserved():
    with pytest.raises(MalformedProfileRow):
        parse_profiles(_rows("ST\taroA\tdpr\n0\t1\t1\n"))


def test_duplicate_st_last_write_wins():
    db = parse_profiles(_rows("ST\taroA\tdpr\n5\t1\t1\n5\t2\t2\n"))
    assert len(db) == 1
    assert db.profiles[5].alleles == (2, 2)
    assert db.duplicates == [5]


def test_empty_input_fails(tmp_path):
    p = tmp_path / "empty.txt"
    p.write_text("")
    with pytest.raises(MalformedProfileRow):
        read_profiles(p)


def test_trailing_tab_in_header_is_discarded():
    db = parse_profiles(_rows("ST\taroA\tdpr\t\n5\t1\t2\t\n"))
    assert db.loci == ("aroA", "dpr")
    trie = ProfileTrie.from_database(db)
    assert trie.n_profiles == 1
