"""
Persistence of parsed sequences. Every worker owns one Database, i.e. one connection, and shares the Registry
with the other workers.
"""
import logging

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import SQLAlchemyError

from ... import NON_CHROMOSOME_PREFIXES, UNKNOWN_CHROMOSOME_PREFIX
from ..models.Organism import Chromosome, Organism, TaxGroup1, TaxGroup2, TaxKingdom
from ..sequence.OriginStore import OriginStore
from .Schema import (chromosomes, coding_exons, genes, introns, isoforms, organisms, sequences, tax_groups1,
                     tax_groups2, tax_kingdoms)

logger = logging.getLogger(__name__)


class Database:

    def __init__(self, registry, sequences_dir=None):
        self.registry = registry
        self.connection = registry.engine.connect()
        self.origin_store = OriginStore(sequences_dir)

    @classmethod
    def open(cls, registry, sequences_dir=None):
        """
        :return: Database or None when the connection can not be established
        """
        try:
            return cls(registry, sequences_dir)
        except SQLAlchemyError as e:
            logger.error("Can't connect to %s: %s", registry.engine.url, e)
            return None

    def __enter__(self):
        return self

    def __exit__(self, *args):
        _ = args
        self.close()

    def close(self):
        self.connection.close()

    def _failed(self, operation, target, error):
        logger.error("%s failed for %s: %s", operation, target, error)

    # Shared records

    def find_or_create_organism(self, name):
        with self.registry.organisms_lock:
            organism = self.registry.organisms.get(name)
            if organism is not None:
                return organism
            try:
                with self.connection.begin():
                    row = self.connection.execute(
                        select(organisms).where(organisms.c.name == name)).mappings().first()
                    if row is not None:
                        organism = organism_from_row(row)
                    else:
                        organism = Organism(name)
                        result = self.connection.execute(insert(organisms).values(name=name))
                        organism.id = result.inserted_primary_key[0]
            except SQLAlchemyError as e:
                self._failed("find_or_create_organism", repr(name), e)
                return None
            self.registry.organisms[name] = organism
            return organism

    def find_or_create_chromosome(self, name, organism):
        key = (organism, name)
        with self.registry.chromosomes_lock, organism.lock:
            chromosome = self.registry.chromosomes.get(key)
            if chromosome is not None:
                return chromosome
            try:
                with self.connection.begin():
                    row = self.connection.execute(
                        select(chromosomes).where(chromosomes.c.name == name,
                                                  chromosomes.c.id_organisms == organism.id)).mappings().first()
                    chromosome = Chromosome(name, organism)
                    if row is not None:
                        chromosome.id = row["id"]
                        chromosome.length = row["length"] or 0
                        created = False
                    else:
                        result = self.connection.execute(
                            insert(chromosomes).values(name=name, id_organisms=organism.id, length=0))
                        chromosome.id = result.inserted_primary_key[0]
                        created = True
            except SQLAlchemyError as e:
                self._failed("find_or_create_chromosome", f"{name!r} of {organism.name!r}", e)
                return None
            if created and not name.lower().startswith(NON_CHROMOSOME_PREFIXES):
                organism.db_chromosome_count += 1
            self.registry.chromosomes[key] = chromosome
            return chromosome

    def find_or_create_tax_kingdom(self, name):
        with self.registry.tax_lock:
            kingdom = self.registry.kingdoms.get(name)
            if kingdom is not None:
                return kingdom
            kingdom = TaxKingdom(name)
            kingdom.id = self._find_or_insert(tax_kingdoms, {"name": name}, {})
            if kingdom.id is None:
                return None
            self.registry.kingdoms[name] = kingdom
            return kingdom

    def find_or_create_tax_group1(self, name, type, kingdom):
        key = (name, type)
        with self.registry.tax_lock:
            group = self.registry.tax_groups1.get(key)
            if group is not None:
                return group
            group = TaxGroup1(name, type, kingdom)
            group.id = self._find_or_insert(tax_groups1, {"name": name, "type": type},
                                            {"id_tax_kingdoms": kingdom.id if kingdom else None})
            if group.id is None:
                return None
            self.registry.tax_groups1[key] = group
            return group

    def find_or_create_tax_group2(self, name, type, group1):
        key = (name, type)
        with self.registry.tax_lock:
            group = self.registry.tax_groups2.get(key)
            if group is not None:
                return group
            group = TaxGroup2(name, type, group1)
            group.id = self._find_or_insert(tax_groups2, {"name": name, "type": type},
                                            {"id_tax_groups1": group1.id if group1 else None})
            if group.id is None:
                return None
            self.registry.tax_groups2[key] = group
            return group

    def _find_or_insert(self, table, keys, values):
        try:
            with self.connection.begin():
                conditions = [table.c[k] == v for k, v in keys.items()]
                row_id = self.connection.execute(select(table.c.id).where(*conditions)).scalar()
                if row_id is not None:
                    return row_id
                result = self.connection.execute(insert(table).values(**keys, **values))
                return result.inserted_primary_key[0]
        except SQLAlchemyError as e:
            self._failed(f"find_or_create on {table.name}", keys, e)
            return None

    def update_organism(self, organism):
        if organism is None or organism.id == 0:
            return False
        self.registry.rename_organism(organism)
        with organism.lock:
            values = {counter: getattr(organism, counter) for counter in Organism.COUNTERS}
            values.update(
                name=organism.name,
                ref_seq_assembly_id=organism.ref_seq_assembly_id,
                annotation_release=organism.annotation_release,
                annotation_date=organism.annotation_date,
                taxonomy_xref=organism.taxonomy_xref,
                taxonomy_list="; ".join(organism.taxonomy_list),
                real_mitochondria=organism.real_mitochondria,
                db_mitochondria=organism.db_mitochondria,
            )
            if organism.kingdom is not None:
                values["id_tax_kingdoms"] = organism.kingdom.id
            if organism.tax_group1 is not None:
                values["id_tax_groups1"] = organism.tax_group1.id
            if organism.tax_group2 is not None:
                values["id_tax_groups2"] = organism.tax_group2.id
            # Snapshot and write under the same lock
            try:
                with self.connection.begin():
                    self.connection.execute(update(organisms).where(organisms.c.id == organism.id).values(**values))
            except SQLAlchemyError as e:
                self._failed("update_organism", repr(values["name"]), e)
                return False
        return True

    def update_chromosome(self, chromosome):
        if chromosome is None:
            return False
        with chromosome.lock:
            if chromosome.id == 0:
                return False
            try:
                with self.connection.begin():
                    self.connection.execute(
                        update(chromosomes).where(chromosomes.c.id == chromosome.id).values(length=chromosome.length))
            except SQLAlchemyError as e:
                self._failed("update_chromosome", repr(chromosome.name), e)
                return False
        return True

    # Sequences

    def store_origin(self, sequence):
        return self.origin_store.store(sequence)

    def add_sequence(self, sequence):
        """
        Persist a sequence with its genes, isoforms, exons and introns, replacing any sequence with the same
        accession stored for the organism. Organism and chromosome counters are updated afterwards.

        :return: True on success
        """
        organism = sequence.organism
        if organism is None or organism.id == 0:
            logger.warning("Sequence %s from %s has no stored organism, skipped",
                           sequence.ref_seq_id, sequence.source_file_name)
            return False
        chromosome = sequence.chromosome
        try:
            with self.connection.begin():
                self.drop_sequence_if_exists(organism.id, sequence.ref_seq_id)
                result = self.connection.execute(insert(sequences).values(
                    source_file_name=sequence.source_file_name,
                    ref_seq_id=sequence.ref_seq_id,
                    version=sequence.version,
                    description=sequence.description,
                    length=sequence.length,
                    id_organisms=organism.id,
                    id_chromosomes=chromosome.id if chromosome is not None else None,
                    origin_file_name=sequence.origin_file_name,
                ))
                sequence.id = result.inserted_primary_key[0]
                for gene in sequence.genes:
                    self._add_gene(gene)
        except SQLAlchemyError as e:
            self._failed("add_sequence", f"{sequence.ref_seq_id} from {sequence.source_file_name}", e)
            return False

        if chromosome is not None:
            chromosome.add_length(sequence.length)
            self.update_chromosome(chromosome)
            if chromosome.name.lower().startswith(UNKNOWN_CHROMOSOME_PREFIX):
                organism.increment('unknown_sequences_count')

        with organism.lock:
            organism.total_sequences_length += sequence.length
            for gene in sequence.genes:
                if gene.has_cds:
                    organism.b_genes_count += 1
                if gene.has_rna and not gene.has_cds:
                    organism.r_genes_count += 1
                for isoform in gene.isoforms:
                    organism.exons_count += len(isoform.exons)
                    organism.introns_count += len(isoform.introns)
        return True

    def drop_sequence_if_exists(self, organism_id, ref_seq_id):
        ids = self.connection.execute(
            select(sequences.c.id).where(sequences.c.id_organisms == organism_id,
                                         sequences.c.ref_seq_id == ref_seq_id)).scalars().all()
        if not ids:
            return
        logger.debug("Replacing sequence %s (%s)", ref_seq_id, ids)
        for table in (introns, coding_exons, isoforms, genes):
            self.connection.execute(delete(table).where(table.c.id_sequences.in_(ids)))
        self.connection.execute(delete(sequences).where(sequences.c.id.in_(ids)))

    def _add_gene(self, gene):
        result = self.connection.execute(insert(genes).values(
            id_sequences=gene.sequence.id,
            name=gene.name,
            note=gene.note,
            backward_chain=gene.backward,
            protein_but_not_rna=gene.is_protein_but_not_rna,
            pseudo_gene=gene.is_pseudo_gene,
            has_cds=gene.has_cds,
            has_rna=gene.has_rna,
            start=gene.start,
            end=gene.end,
            start_code=gene.start_code,
            end_code=gene.end_code,
            max_introns_count=gene.max_introns_count,
        ))
        gene.id = result.inserted_primary_key[0]
        for isoform in gene.isoforms:
            self._add_isoform(isoform)

    def _add_isoform(self, isoform):
        result = self.connection.execute(insert(isoforms).values(
            id_genes=isoform.gene.id,
            id_sequences=isoform.sequence.id,
            protein_xref=isoform.protein_xref,
            protein_id=isoform.protein_id,
            product=isoform.product,
            note=isoform.note,
            cds_start=isoform.cds_start,
            cds_end=isoform.cds_end,
            mrna_start=isoform.mrna_start,
            mrna_end=isoform.mrna_end,
            mrna_length=isoform.mrna_length,
            exons_cds_count=isoform.exons_cds_count,
            exons_mrna_count=isoform.exons_mrna_count,
            exons_length=isoform.exons_length,
            start_codon=isoform.start_codon,
            end_codon=isoform.end_codon,
            maximum_by_introns=isoform.is_maximum_by_introns,
            error_in_length=isoform.error_in_length,
            error_in_start_codon=isoform.error_in_start_codon,
            error_in_end_codon=isoform.error_in_end_codon,
            error_in_intron=isoform.error_in_intron,
            error_in_coding_exon=isoform.error_in_coding_exon,
            error_main=isoform.error_main,
        ))
        isoform.id = result.inserted_primary_key[0]

        for exon in isoform.exons:
            self._add_exon(exon)
        for intron in isoform.introns:
            self._add_intron(intron)
        for exon in isoform.exons:
            self._update_neighbour_introns(exon)

    def _add_exon(self, exon):
        isoform = exon.isoform
        result = self.connection.execute(insert(coding_exons).values({
            "id_isoforms": isoform.id,
            "id_genes": isoform.gene.id,
            "id_sequences": isoform.sequence.id,
            "start": exon.start,
            "end": exon.end,
            "length": exon.length,
            "type": int(exon.type),
            "start_phase": exon.start_phase,
            "end_phase": exon.end_phase,
            "length_phase": exon.length_phase,
            "index": exon.index,
            "rev_index": exon.rev_index,
            "start_codon": exon.start_codon,
            "end_codon": exon.end_codon,
            "error_in_pseudo_flag": exon.error_in_pseudo_flag,
            "error_n_in_sequence": exon.error_n_in_sequence,
        }))
        exon.id = result.inserted_primary_key[0]

    def _add_intron(self, intron):
        isoform = intron.isoform
        result = self.connection.execute(insert(introns).values({
            "id_isoforms": isoform.id,
            "id_genes": isoform.gene.id,
            "id_sequences": isoform.sequence.id,
            "prev_exon": intron.prev_exon.id,
            "next_exon": intron.next_exon.id,
            "start": intron.start,
            "end": intron.end,
            "id_intron_types": intron.type_id,
            "start_dinucleotide": intron.start_dinucleotide,
            "end_dinucleotide": intron.end_dinucleotide,
            "length": intron.length,
            "index": intron.index,
            "rev_index": intron.rev_index,
            "length_phase": intron.length_phase,
            "phase": intron.phase,
            "error_start_dinucleotide": intron.error_in_start_dinucleotide,
            "error_end_dinucleotide": intron.error_in_end_dinucleotide,
            "error_main": intron.error_main,
            "warning_n_in_sequence": intron.warning_n_in_sequence,
        }))
        intron.id = result.inserted_primary_key[0]

    def _update_neighbour_introns(self, exon):
        values = dict()
        if exon.prev_intron is not None:
            values["prev_intron"] = exon.prev_intron.id
        if exon.next_intron is not None:
            values["next_intron"] = exon.next_intron.id
        if values:
            self.connection.execute(update(coding_exons).where(coding_exons.c.id == exon.id).values(**values))


def organism_from_row(row):
    organism = Organism(row["name"])
    organism.id = row["id"]
    organism.ref_seq_assembly_id = row["ref_seq_assembly_id"] or ""
    organism.annotation_release = row["annotation_release"] or ""
    organism.annotation_date = row["annotation_date"]
    organism.taxonomy_xref = row["taxonomy_xref"] or ""
    organism.taxonomy_list = [t for t in (row["taxonomy_list"] or "").split("; ") if t]
    organism.real_mitochondria = bool(row["real_mitochondria"])
    organism.db_mitochondria = bool(row["db_mitochondria"])
    for counter in Organism.COUNTERS:
        setattr(organism, counter, row[counter] or 0)
    return organism
