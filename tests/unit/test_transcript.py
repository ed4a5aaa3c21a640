from unittest import TestCase

from introns.lib.models.Transcript import ExonType, Gene, Isoform, Range, Sequence, intron_type_id


def make_isoform(segments, backward=False):
    start = min(s for s, _ in segments)
    end = max(e for _, e in segments)
    gene = Gene(Sequence("test.gbk"), start, end, backward)
    isoform = Isoform(start, end, len(segments))
    gene.add_isoform(isoform)
    isoform.create_introns_and_exons(backward, [Range(s, e) for s, e in segments])
    return gene, isoform


def test_intron_type_bounds():
    assert intron_type_id(0, 0, 0) == 1
    assert intron_type_id(2, 2, 2) == 27
    ids = {intron_type_id(a, b, c) for a in range(3) for b in range(3) for c in range(3)}
    assert ids == set(range(1, 28))


def test_range():
    r = Range(10, 20)
    assert len(r) == 11
    assert r.contains(Range(10, 20))
    assert r.contains(Range(12, 15))
    assert not r.contains(Range(5, 15))
    assert Range(1, 5) < Range(2, 3)
    d = dict()
    d[r] = 1
    assert d[Range(10, 20)] == 1


def test_isoform_span():
    isoform = Isoform(10, 100)
    assert (isoform.span.start, isoform.span.end) == (10, 100)
    isoform.cds_start, isoform.cds_end = 5, 90
    assert (isoform.span.start, isoform.span.end) == (5, 100)
    assert Isoform().span is None
    assert Isoform().mrna_length == 0
    assert Isoform(10, 100).mrna_length == 91


class TestExonChain(TestCase):

    def test_single_exon(self):
        _, isoform = make_isoform([(1, 300)])
        self.assertEqual(len(isoform.exons), 1)
        self.assertEqual(isoform.exons[0].type, ExonType.SINGLE)
        self.assertEqual(isoform.introns, [])
        self.assertEqual(isoform.exons[0].end_phase, 0)

    def test_intron_count(self):
        for count in range(2, 7):
            segments = [(i * 100 + 1, i * 100 + 50 + i) for i in range(count)]
            for backward in (False, True):
                _, isoform = make_isoform(segments, backward)
                self.assertEqual(len(isoform.introns), count - 1)
                for index, intron in enumerate(isoform.introns):
                    self.assertIs(intron.prev_exon, isoform.exons[index])
                    self.assertIs(intron.next_exon, isoform.exons[index + 1])
                    self.assertIs(isoform.exons[index].next_intron, intron)
                    self.assertIs(isoform.exons[index + 1].prev_intron, intron)
                    self.assertEqual(intron.index, index)
                    self.assertEqual(intron.rev_index, count - 2 - index)

    def test_phase_continuity(self):
        segments = [(1, 17), (40, 61), (100, 104), (200, 233)]
        for backward in (False, True):
            _, isoform = make_isoform(segments, backward)
            self.assertEqual(isoform.exons[0].start_phase, 0)
            for prev_exon, exon in zip(isoform.exons, isoform.exons[1:]):
                self.assertEqual(prev_exon.end_phase, exon.start_phase)
                self.assertEqual(prev_exon.end_phase, (prev_exon.start_phase + len(prev_exon)) % 3)
            for intron in isoform.introns:
                self.assertEqual(intron.phase, intron.prev_exon.end_phase)
                self.assertEqual(intron.type_id, intron_type_id(intron.prev_exon.start_phase, intron.phase,
                                                                intron.next_exon.end_phase))

    def test_exon_types_and_indices(self):
        _, isoform = make_isoform([(1, 10), (21, 30), (41, 50), (61, 70)])
        self.assertEqual([e.type for e in isoform.exons],
                         [ExonType.FIRST, ExonType.INNER, ExonType.INNER, ExonType.LAST])
        self.assertEqual([e.index for e in isoform.exons], [0, 1, 2, 3])
        self.assertEqual([e.rev_index for e in isoform.exons], [3, 2, 1, 0])

    def test_minus_strand_coordinates(self):
        _, isoform = make_isoform([(1, 10), (21, 30), (41, 50)], backward=True)
        self.assertEqual([(e.start, e.end) for e in isoform.exons], [(41, 50), (21, 30), (1, 10)])
        self.assertEqual([(i.start, i.end) for i in isoform.introns], [(31, 40), (11, 20)])

    def test_plus_strand_coordinates(self):
        _, isoform = make_isoform([(1, 10), (21, 30), (41, 50)])
        self.assertEqual([(i.start, i.end) for i in isoform.introns], [(11, 20), (31, 40)])
        self.assertEqual([i.length_phase for i in isoform.introns], [1, 1])
        self.assertEqual(isoform.exons_length, 30)
        self.assertEqual(isoform.exons_cds_count, 3)

    def test_max_introns(self):
        gene, first = make_isoform([(1, 10), (21, 30)])
        self.assertTrue(first.is_maximum_by_introns)

        second = Isoform(1, 30, 3)
        gene.add_isoform(second)
        self.assertFalse(second.is_maximum_by_introns)
        second.create_introns_and_exons(False, [Range(1, 5), Range(11, 15), Range(21, 30)])
        self.assertEqual(gene.max_introns_count, 2)
        self.assertTrue(second.is_maximum_by_introns)
        self.assertFalse(first.is_maximum_by_introns)

    def test_find_isoform_containing(self):
        gene = Gene(Sequence(), 1, 100, False)
        first = Isoform(1, 100)
        second = Isoform(1, 100)
        gene.add_isoform(first)
        gene.add_isoform(second)
        self.assertIs(gene.find_isoform_containing(10, 90), first)
        first.has_cds = True
        self.assertIs(gene.find_isoform_containing(10, 90), second)
        second.has_cds = True
        self.assertIsNone(gene.find_isoform_containing(10, 90))

    def test_gene_matching(self):
        gene = Gene(Sequence(), 10, 100, True)
        self.assertTrue(gene.matches(10, 100, True))
        self.assertFalse(gene.matches(10, 100, False))
        self.assertTrue(gene.contains(20, 80, True))
        self.assertFalse(gene.contains(5, 80, True))

    def test_overlapping_exons(self):
        _, isoform = make_isoform([(1, 150), (150, 300)])
        self.assertEqual([e.length for e in isoform.exons], [150, 151])
        intron = isoform.introns[0]
        self.assertEqual((intron.start, intron.end), (151, 149))
        self.assertEqual(intron.length, 0)
        self.assertEqual(len(intron), 0)
        self.assertEqual(intron.length_phase, 0)
        self.assertEqual(isoform.exons_length, 301)


def test_empty_range_length():
    assert Range(10, 9).length == 0
    assert len(Range(200, 100)) == 0
    assert Range(5, 5).length == 1
