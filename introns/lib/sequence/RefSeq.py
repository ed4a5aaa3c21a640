import logging

from Bio.Data import CodonTable

from ... import ACCEPTOR_SITE, DONOR_SITE

logger = logging.getLogger(__name__)

_standard_table = CodonTable.unambiguous_dna_by_id[1]
start_codons = set(_standard_table.start_codons)
stop_codons = set(_standard_table.stop_codons)

_complement = {'A': 'T', 'T': 'A', 'G': 'C', 'C': 'G', 'N': 'N'}
UNKNOWN_BASE = '?'


def reverse_complement(seq):
    """
    Reverse complement of an upper case A/C/G/T/N sequence. Any other letter is logged and replaced by '?', so the
    result is always as long as the input.
    """
    result = []
    for base in reversed(seq):
        complement = _complement.get(base)
        if complement is None:
            logger.warning("Unknown letter: %r", base)
            complement = UNKNOWN_BASE
        result.append(complement)
    return ''.join(result)


def get_seq(origin, start, end, backward):
    """
    Slice of the origin between 1-based inclusive coordinates, reverse complemented for the minus strand.
    Empty when end is before start.
    """
    if end < start:
        return ""
    seq = origin[start - 1:end]
    if backward:
        return reverse_complement(seq)
    return seq


def fill_from_origin(sequence):
    """
    Attach nucleotides, codons and splice sites to every isoform of the sequence once the ORIGIN block is known.
    """
    for isoform in sequence.isoforms:
        fill_isoform_from_origin(isoform, sequence.origin)


def fill_isoform_from_origin(isoform, origin):
    span = isoform.span
    if span is None:
        return
    backward = isoform.backward

    isoform_seq = get_seq(origin, span.start, span.end, backward)
    isoform.start_codon = isoform_seq[:3]
    isoform.end_codon = isoform_seq[-3:]

    for exon in isoform.exons:
        exon.origin = get_seq(origin, exon.start, exon.end, backward)
        exon.start_codon = exon.origin[:3]
        exon.end_codon = exon.origin[-3:]
        exon.error_n_in_sequence = 'N' in exon.origin
        if exon.error_n_in_sequence:
            isoform.error_in_coding_exon = True
            isoform.error_main = True

    for intron in isoform.introns:
        intron.origin = get_seq(origin, intron.start, intron.end, backward)
        intron.start_dinucleotide = intron.origin[:2]
        intron.end_dinucleotide = intron.origin[-2:]
        intron.error_in_start_dinucleotide = intron.start_dinucleotide != DONOR_SITE
        intron.error_in_end_dinucleotide = intron.end_dinucleotide != ACCEPTOR_SITE
        intron.error_main = (intron.error_main
                             or intron.error_in_start_dinucleotide
                             or intron.error_in_end_dinucleotide)
        if intron.error_main:
            isoform.error_in_intron = True
            isoform.error_main = True
        intron.warning_n_in_sequence = 'N' in intron.origin

    if isoform.has_cds and isoform.exons:
        check_coding_frame(isoform)


def check_coding_frame(isoform):
    """
    Length and boundary codons of the coding exons, taken in transcription order
    """
    isoform.error_in_length = isoform.exons_length % 3 != 0
    isoform.error_in_start_codon = isoform.exons[0].start_codon not in start_codons
    isoform.error_in_end_codon = isoform.exons[-1].end_codon not in stop_codons
    if isoform.error_in_length or isoform.error_in_start_codon or isoform.error_in_end_codon:
        isoform.error_main = True
