# coding: utf_8
"""
Module to read GenBank flat files into linked gene/isoform/exon/intron structures.
"""
import logging
import os
import threading
from enum import Enum

from ... import FEATURE_COLUMN, MITOCHONDRION, RECORD_TERMINATOR, TOP_LEVEL_COLUMN
from ..models.Transcript import Gene, Isoform, Sequence
from ..parsers import get_handle
from ..sequence.RefSeq import fill_from_origin
from .Location import parse_location
from .Qualifiers import parse_qualifiers

logger = logging.getLogger(__name__)

ORIGIN = "ORIGIN"


class State(Enum):
    TOP_LEVEL = 0
    FEATURES = 1
    ORIGIN = 2


def split_line(line, column):
    """
    Split a physical line into its field name and value at a fixed column. An empty name marks a continuation line.
    """
    if len(line) > column:
        return line[:column].strip(), line[column:].strip()
    return line.strip(), ""


def _append(value, continuation):
    if value:
        return value + '\n' + continuation
    return continuation


class GenBankReader:
    """
    A GenBankReader iterates over the LOCUS records of a file, each one is returned as a Sequence with its genes,
    isoforms, exons and introns already linked and filled from the ORIGIN block. Records without genes and without
    a description are skipped.

    Organisms and chromosomes are obtained through the database, which is shared with the other readers.
    """

    def __init__(self, filename, database, override_organism_name=None):
        self.database = database
        self.override_organism_name = override_organism_name or None
        self.fh = get_handle(filename)
        self.file_name = os.path.basename(getattr(self.fh, 'name', None) or str(filename))
        self.state = State.TOP_LEVEL
        self.line_number = 0
        self.eof = False

    def __enter__(self):
        return self

    def __exit__(self, type_, value, traceback):
        self.close()

    def __iter__(self):
        return self

    def __next__(self):
        return self.read()

    def close(self):
        self.fh.close()

    @property
    def at_end(self):
        return self.eof or self.fh.closed

    def read(self):
        while not self.at_end:
            sequence = self.read_sequence()
            if sequence is not None:
                return sequence
        raise StopIteration

    def _lines(self):
        while True:
            line = self.fh.readline()
            if line == '':
                self.eof = True
                return
            self.line_number += 1
            yield line.rstrip('\r\n').replace('\t', '    ')

    def read_sequence(self):
        """
        Read lines up to the next record terminator (or the end of the file).

        :return: Sequence, or None when the record holds neither genes nor a description
        """
        self.state = State.TOP_LEVEL
        sequence = Sequence(self.file_name)
        top_name = top_value = None
        feature_name = feature_value = None
        origin = []

        for line in self._lines():
            if line.strip() == RECORD_TERMINATOR:
                break

            if self.state == State.TOP_LEVEL:
                prefix, value = split_line(line, TOP_LEVEL_COLUMN)
                if not prefix:
                    top_value = _append(top_value, value)
                    continue
                if top_name:
                    self.parse_top_level(top_name, top_value, sequence)
                top_name = top_value = None
                if prefix == ORIGIN:
                    self.state = State.ORIGIN
                elif self.state == State.FEATURES:
                    feature_name, feature_value = split_line(line, FEATURE_COLUMN)
                else:
                    top_name, top_value = prefix, value

            elif self.state == State.FEATURES:
                prefix, value = split_line(line, FEATURE_COLUMN)
                if not prefix:
                    feature_value = _append(feature_value, value)
                    continue
                if feature_name:
                    self.parse_feature(feature_name, feature_value, sequence)
                feature_name = feature_value = None
                if prefix == ORIGIN:
                    self.state = State.ORIGIN
                else:
                    feature_name, feature_value = prefix, value

            else:
                origin.append(''.join(c for c in line if c.isalpha()).upper())

        # A record may end without an ORIGIN block, flush what is still pending
        if top_name:
            self.parse_top_level(top_name, top_value, sequence)
        if feature_name:
            self.parse_feature(feature_name, feature_value, sequence)

        sequence.origin = ''.join(origin)

        if not sequence.genes and not sequence.description:
            return None
        fill_from_origin(sequence)
        return sequence

    def parse_top_level(self, prefix, value, sequence):
        if prefix == "LOCUS":
            words = value.split()
            if words:
                sequence.ref_seq_id = words[0]
            if len(words) > 1 and words[1].isdigit():
                sequence.length = int(words[1])
            logger.debug("... %s from %s by worker %s", sequence.ref_seq_id, self.file_name,
                         threading.current_thread().name)
        elif prefix == "VERSION":
            words = value.split()
            if words:
                sequence.version = words[0]
        elif prefix == "ORGANISM":
            self.parse_organism(value, sequence)
        elif prefix == "DEFINITION":
            sequence.description = ' '.join(value.split())
        elif prefix == "FEATURES":
            self.state = State.FEATURES
        elif prefix == ORIGIN:
            self.state = State.ORIGIN

    def parse_organism(self, value, sequence):
        lines = [line.strip() for line in value.split('\n') if line.strip()]
        if not lines and not self.override_organism_name:
            return
        name = self.override_organism_name or lines[0]
        organism = self.database.find_or_create_organism(name)
        if organism is None:
            return
        sequence.organism = organism
        with organism.lock:
            if organism.taxonomy_list:
                return
            for line in lines[1:]:
                for word in line.split(';'):
                    word = ' '.join(word.replace('.', '').split())
                    if word:
                        organism.taxonomy_list.append(word)

    def parse_feature(self, prefix, value, sequence):
        if prefix == "gene":
            gene = self.parse_gene(value, sequence)
            if gene is not None:
                sequence.genes.append(gene)
        elif prefix == "source":
            self.parse_source(value, sequence)
        elif prefix == "CDS" or prefix.endswith("RNA"):
            self.parse_cds_or_rna(prefix, value, sequence)

    def parse_source(self, value, sequence):
        organism = sequence.organism
        if organism is None:
            return
        attrs = parse_qualifiers(value)
        mitochondrion = attrs.get("organelle") == MITOCHONDRION
        with organism.lock:
            if "organelle" in attrs:
                organism.db_mitochondria = mitochondrion
            if "db_xref" in attrs:
                organism.taxonomy_xref = attrs["db_xref"]
        if "chromosome" in attrs:
            sequence.chromosome = self.database.find_or_create_chromosome(attrs["chromosome"], organism)
        elif mitochondrion:
            sequence.chromosome = self.database.find_or_create_chromosome(MITOCHONDRION, organism)

    def parse_gene(self, value, sequence):
        location = parse_location(value)
        if location is None:
            logger.debug("Unusable gene location at %s:%d", self.file_name, self.line_number)
            return None
        attrs = parse_qualifiers(value)
        return Gene(sequence, location.start, location.end, location.backward,
                    name=attrs.get("gene", ""),
                    note=attrs.get("note", ""),
                    pseudo="pseudo" in attrs or "pseudogene" in attrs)

    @staticmethod
    def find_gene_matching(genes, location):
        for gene in genes:
            if gene.matches(location.start, location.end, location.backward):
                return gene
        return None

    @staticmethod
    def find_gene_containing(genes, location):
        for gene in genes:
            if gene.contains(location.start, location.end, location.backward):
                return gene
        return None

    def parse_cds_or_rna(self, prefix, value, sequence):
        location = parse_location(value)
        if location is None:
            logger.debug("Unusable %s location at %s:%d", prefix, self.file_name, self.line_number)
            return
        organism = sequence.organism

        if prefix == "CDS":
            # CDS might have non-coding bounds inside the gene, but must be linked to an existing mRNA isoform
            gene = self.find_gene_containing(sequence.genes, location)
            if gene is None:
                return
            isoform = gene.find_isoform_containing(location.start, location.end)
            if isoform is None:
                return
            gene.has_cds = True
            gene.is_protein_but_not_rna = True
            gene.start_code = location.start
            gene.end_code = location.end
            isoform.attach_cds(location)
            if organism is not None:
                organism.increment('cds_count')
        else:
            # *RNA ranges must be equal to the gene location
            gene = self.find_gene_matching(sequence.genes, location)
            if gene is None:
                return
            if prefix == "mRNA":
                isoform = Isoform(location.start, location.end, len(location.segments))
                gene.add_isoform(isoform)
            else:
                gene.has_rna = True
                if organism is not None:
                    organism.increment('rna_count')
                return

        attrs = parse_qualifiers(value)
        if "protein_id" in attrs:
            isoform.protein_id = attrs["protein_id"]
        if "db_xref" in attrs:
            isoform.protein_xref = attrs["db_xref"]
        if "product" in attrs:
            isoform.product = attrs["product"]
        if "note" in attrs:
            isoform.note = attrs["note"]

        if prefix == "CDS":
            isoform.create_introns_and_exons(location.backward, location.segments)
