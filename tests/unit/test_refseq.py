import logging
import random

from introns.lib.models.Transcript import Gene, Isoform, Range, Sequence
from introns.lib.sequence.RefSeq import (check_coding_frame, fill_from_origin, get_seq, reverse_complement,
                                         start_codons, stop_codons)


def test_reverse_complement():
    assert reverse_complement("ATGC") == "GCAT"
    assert reverse_complement("AANT") == "ANTT"
    assert reverse_complement("") == ""


def test_reverse_complement_round_trip():
    rng = random.Random(17)
    for length in (1, 2, 10, 99, 1000):
        seq = "".join(rng.choice("ACGTN") for _ in range(length))
        assert len(reverse_complement(seq)) == length
        assert reverse_complement(reverse_complement(seq)) == seq


def test_unknown_letter(caplog):
    with caplog.at_level(logging.WARNING):
        assert reverse_complement("ARG") == "C?T"
    assert "Unknown letter" in caplog.text


def test_get_seq():
    origin = "AACCGGTTAC"
    assert get_seq(origin, 1, 4, False) == "AACC"
    assert get_seq(origin, 1, 4, True) == "GGTT"
    assert get_seq(origin, 4, 1, False) == ""
    assert get_seq(origin, 5, 4, True) == ""
    assert get_seq(origin, 9, 10, False) == "AC"


def test_codon_tables():
    assert "ATG" in start_codons
    assert {"TAA", "TAG", "TGA"} == stop_codons


def make_sequence(origin, segments, backward=False):
    sequence = Sequence("test.gbk")
    sequence.origin = origin
    start = min(s for s, _ in segments)
    end = max(e for _, e in segments)
    gene = Gene(sequence, start, end, backward)
    sequence.genes.append(gene)
    isoform = Isoform(start, end, len(segments))
    gene.add_isoform(isoform)
    isoform.has_cds = True
    isoform.cds_start, isoform.cds_end = start, end
    isoform.create_introns_and_exons(backward, [Range(s, e) for s, e in segments])
    return sequence, isoform


def test_splice_sites():
    origin = "ATGAAA" + "GTCCAG" + "AAATAA"
    _, isoform = make_sequence(origin, [(1, 6), (13, 18)])
    fill_from_origin(isoform.sequence)
    intron = isoform.introns[0]
    assert intron.origin == "GTCCAG"
    assert not intron.error_main
    assert not isoform.error_in_intron
    assert not isoform.error_main


def test_non_canonical_intron():
    origin = "ATGAAA" + "GCCCAA" + "AAATAA"
    _, isoform = make_sequence(origin, [(1, 6), (13, 18)])
    fill_from_origin(isoform.sequence)
    intron = isoform.introns[0]
    assert intron.error_in_start_dinucleotide
    assert intron.error_in_end_dinucleotide
    assert isoform.error_in_intron
    assert isoform.error_main


def test_n_in_intron_is_a_warning():
    origin = "ATGAAA" + "GTNNAG" + "AAATAA"
    _, isoform = make_sequence(origin, [(1, 6), (13, 18)])
    fill_from_origin(isoform.sequence)
    assert isoform.introns[0].warning_n_in_sequence
    assert not isoform.error_main


def test_minus_strand_splice_sites():
    # Reverse complement of ATGAAA GTCCAG AAATAA
    origin = reverse_complement("ATGAAA" + "GTCCAG" + "AAATAA")
    _, isoform = make_sequence(origin, [(1, 6), (13, 18)], backward=True)
    fill_from_origin(isoform.sequence)
    assert isoform.exons[0].start_codon == "ATG"
    assert isoform.exons[-1].end_codon == "TAA"
    assert isoform.introns[0].origin == "GTCCAG"
    assert not isoform.error_main


def test_coding_frame():
    _, isoform = make_sequence("ATGAAAATAA", [(1, 10)])
    fill_from_origin(isoform.sequence)
    assert isoform.error_in_length
    assert not isoform.error_in_start_codon
    assert isoform.error_main

    _, isoform = make_sequence("CTTAAATAG", [(1, 9)])
    fill_from_origin(isoform.sequence)
    assert not isoform.error_in_length
    assert isoform.error_in_start_codon
    assert not isoform.error_in_end_codon


def test_check_coding_frame_needs_codons():
    _, isoform = make_sequence("ATGAAATGA", [(1, 9)])
    isoform.exons[0].start_codon = "ATG"
    isoform.exons[0].end_codon = "TGA"
    check_coding_frame(isoform)
    assert not isoform.error_main
