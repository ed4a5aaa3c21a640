from enum import IntEnum
from functools import total_ordering


@total_ordering
class Range:
    """
    A closed, 1-based genomic interval
    """

    def __init__(self, start, end):
        self.start = start
        self.end = end

    def __eq__(self, other):
        return (self.start, self.end) == (other.start, other.end)

    def __lt__(self, other):
        return (self.start, self.end) < (other.start, other.end)

    def __hash__(self):
        return hash((self.start, self.end))

    def __repr__(self):
        return f"Range({self.start}, {self.end})"

    @property
    def length(self):
        """
        Number of bases covered, 0 when end is before start (overlapping exons leave such introns)
        """
        return max(0, self.end - self.start + 1)

    def __len__(self):
        return self.length

    def contains(self, other):
        return self.start <= other.start and other.end <= self.end


class ExonType(IntEnum):
    SINGLE = 0
    FIRST = 1
    LAST = 2
    INNER = 3
    UNKNOWN = 4


def intron_type_id(prev_start_phase, intron_phase, next_end_phase):
    """
    Identifier of the intron type, 1-based over the 3x3x3 phase combinations. The preceding exon start phase
    selects the group, the intron phase the row and the following exon end phase the column.
    """
    return 1 + 9 * prev_start_phase + 3 * intron_phase + next_end_phase


class Sequence:
    """
    One LOCUS record. Organism and chromosome are shared records owned by the database registry.
    """

    def __init__(self, source_file_name=""):
        self.id = 0
        self.source_file_name = source_file_name
        self.ref_seq_id = ""
        self.version = ""
        self.description = ""
        self.length = 0
        self.organism = None
        self.chromosome = None
        self.origin_file_name = ""
        self.origin = ""
        self.genes = []

    def __repr__(self):
        return f"Sequence({self.ref_seq_id!r}, genes={len(self.genes)})"

    @property
    def isoforms(self):
        for gene in self.genes:
            yield from gene.isoforms


class Gene:
    def __init__(self, sequence, start, end, backward, name="", note="", pseudo=False):
        self.id = 0
        self.sequence = sequence
        self.name = name
        self.note = note
        self.backward = backward
        self.is_protein_but_not_rna = False
        self.is_pseudo_gene = pseudo
        self.start = start
        self.end = end
        # Coding bounds stay unset (None) until a CDS is attached
        self.start_code = None
        self.end_code = None
        self.max_introns_count = 0
        self.isoforms = []
        self.has_cds = False
        self.has_rna = False

    def __repr__(self):
        strand = '-' if self.backward else '+'
        return f"Gene({self.name!r}, {self.start}..{self.end}, {strand})"

    def matches(self, start, end, backward):
        return (self.start, self.end, self.backward) == (start, end, backward)

    def contains(self, start, end, backward):
        return self.start <= start and end <= self.end and self.backward == backward

    def add_isoform(self, isoform):
        isoform.gene = self
        isoform.sequence = self.sequence
        self.isoforms.append(isoform)
        self.update_max_introns()

    def find_isoform_containing(self, start, end):
        """
        First isoform without a CDS yet whose mRNA span contains [start, end].

        Isoforms which already carry a CDS are passed over, so the n-th CDS of a gene lands on the n-th mRNA
        containing it instead of every CDS piling onto the first one. A CDS left without a free isoform is discarded.
        """
        for isoform in self.isoforms:
            if isoform.has_cds or isoform.mrna_start is None:
                continue
            if isoform.mrna_start <= start and end <= isoform.mrna_end:
                return isoform
        return None

    def update_max_introns(self):
        self.max_introns_count = max([self.max_introns_count] + [len(i.introns) for i in self.isoforms])
        for isoform in self.isoforms:
            isoform.is_maximum_by_introns = len(isoform.introns) == self.max_introns_count


class Isoform:
    def __init__(self, mrna_start=None, mrna_end=None, exons_mrna_count=0):
        self.id = 0
        self.gene = None
        self.sequence = None
        self.protein_xref = ""
        self.protein_id = ""
        self.product = ""
        self.note = ""
        self.cds_start = None
        self.cds_end = None
        self.mrna_start = mrna_start
        self.mrna_end = mrna_end
        self.exons_cds_count = 0
        self.exons_mrna_count = exons_mrna_count
        self.exons_length = 0
        self.start_codon = ""
        self.end_codon = ""
        self.error_in_length = False
        self.error_in_start_codon = False
        self.error_in_end_codon = False
        self.error_in_intron = False
        self.error_in_coding_exon = False
        self.error_main = False
        self.is_maximum_by_introns = False
        self.has_cds = False
        self.exons = []
        self.introns = []

    def __repr__(self):
        return (f"Isoform(mrna={self.mrna_start}..{self.mrna_end}, cds={self.cds_start}..{self.cds_end}, "
                f"exons={len(self.exons)})")

    @property
    def backward(self):
        return self.gene.backward

    @property
    def mrna_length(self):
        if self.mrna_start is None or self.mrna_end is None:
            return 0
        return self.mrna_end - self.mrna_start + 1

    @property
    def span(self):
        """
        Enclosing span of the CDS and the mRNA, unset bounds are ignored
        """
        starts = [s for s in (self.cds_start, self.mrna_start) if s is not None]
        ends = [e for e in (self.cds_end, self.mrna_end) if e is not None]
        if not starts or not ends:
            return None
        return Range(min(starts), max(ends))

    def attach_cds(self, location):
        self.has_cds = True
        self.cds_start = location.start
        self.cds_end = location.end
        self.exons_cds_count = len(location.segments)

    def create_introns_and_exons(self, backward, segments):
        """
        Build the exon chain in transcription order, with the introns between each pair of consecutive exons.

        :param backward: True for the minus strand, segments are then walked from the last to the first
        :param segments: Ranges in file order
        """
        if not segments:
            return

        ordered = reversed(segments) if backward else iter(segments)
        phase = 0
        for segment in ordered:
            exon = Exon(self, segment.start, segment.end)
            exon.start_phase = phase
            phase = exon.end_phase = (phase + exon.length) % 3
            self.exons.append(exon)

        if len(self.exons) == 1:
            exon = self.exons[0]
            exon.index = exon.rev_index = 0
            exon.type = ExonType.SINGLE
        else:
            last = len(self.exons) - 1
            for index, exon in enumerate(self.exons):
                exon.index = index
                exon.rev_index = last - index
                if index == 0:
                    exon.type = ExonType.FIRST
                elif index == last:
                    exon.type = ExonType.LAST
                else:
                    exon.type = ExonType.INNER

                if index > 0:
                    prev_exon = self.exons[index - 1]
                    if backward:
                        start, end = exon.end + 1, prev_exon.start - 1
                    else:
                        start, end = prev_exon.end + 1, exon.start - 1
                    intron = Intron(self, start, end)
                    intron.index = index - 1
                    intron.rev_index = last - index
                    intron.phase = prev_exon.end_phase
                    intron.length_phase = intron.length % 3
                    intron.type_id = intron_type_id(prev_exon.start_phase, intron.phase, exon.end_phase)
                    intron.prev_exon = prev_exon
                    intron.next_exon = exon
                    prev_exon.next_intron = intron
                    exon.prev_intron = intron
                    self.introns.append(intron)

        self.exons_cds_count = len(self.exons)
        self.exons_length = sum(e.length for e in self.exons)
        self.gene.update_max_introns()


class Exon(Range):
    def __init__(self, isoform, start, end):
        super().__init__(start, end)
        self.id = 0
        self.isoform = isoform
        self.type = ExonType.UNKNOWN
        self.start_phase = 0
        self.end_phase = 0
        self.index = 0
        self.rev_index = 0
        self.start_codon = ""
        self.end_codon = ""
        self.prev_intron = None
        self.next_intron = None
        self.origin = ""
        self.error_in_pseudo_flag = False
        self.error_n_in_sequence = False

    def __repr__(self):
        return f"Exon({self.start}, {self.end}, {self.type.name}, phase={self.start_phase}/{self.end_phase})"

    __hash__ = object.__hash__

    def __eq__(self, other):
        return self is other

    @property
    def length_phase(self):
        return self.length % 3


class Intron(Range):
    def __init__(self, isoform, start, end):
        super().__init__(start, end)
        self.id = 0
        self.isoform = isoform
        self.prev_exon = None
        self.next_exon = None
        self.start_dinucleotide = ""
        self.end_dinucleotide = ""
        self.index = 0
        self.rev_index = 0
        self.length_phase = 0
        self.phase = 0
        self.type_id = 0
        self.error_in_start_dinucleotide = False
        self.error_in_end_dinucleotide = False
        self.error_main = False
        self.warning_n_in_sequence = False
        self.origin = ""

    def __repr__(self):
        return f"Intron({self.start}, {self.end}, type={self.type_id})"

    __hash__ = object.__hash__

    def __eq__(self, other):
        return self is other
