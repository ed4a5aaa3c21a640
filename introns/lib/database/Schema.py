"""
Relational layout of the introns database.
"""
from sqlalchemy import BigInteger, Boolean, Column, Date, ForeignKey, Integer, MetaData, String, Table, Text

metadata = MetaData()

tax_kingdoms = Table(
    "tax_kingdoms", metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(255), nullable=False, unique=True),
)

tax_groups1 = Table(
    "tax_groups1", metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(255), nullable=False),
    Column("type", String(255), nullable=False),
    Column("id_tax_kingdoms", Integer, ForeignKey("tax_kingdoms.id")),
)

tax_groups2 = Table(
    "tax_groups2", metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(255), nullable=False),
    Column("type", String(255), nullable=False),
    Column("id_tax_groups1", Integer, ForeignKey("tax_groups1.id")),
)

organisms = Table(
    "organisms", metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(255), nullable=False, unique=True),
    Column("ref_seq_assembly_id", String(64), default=""),
    Column("annotation_release", String(64), default=""),
    Column("annotation_date", Date),
    Column("taxonomy_xref", String(64), default=""),
    Column("taxonomy_list", Text, default=""),
    Column("id_tax_kingdoms", Integer, ForeignKey("tax_kingdoms.id")),
    Column("id_tax_groups1", Integer, ForeignKey("tax_groups1.id")),
    Column("id_tax_groups2", Integer, ForeignKey("tax_groups2.id")),
    Column("real_chromosome_count", Integer, default=0),
    Column("db_chromosome_count", Integer, default=0),
    Column("real_mitochondria", Boolean, default=False),
    Column("db_mitochondria", Boolean, default=False),
    Column("unknown_sequences_count", Integer, default=0),
    Column("total_sequences_length", BigInteger, default=0),
    Column("b_genes_count", Integer, default=0),
    Column("r_genes_count", Integer, default=0),
    Column("cds_count", Integer, default=0),
    Column("rna_count", Integer, default=0),
    Column("unknown_prot_genes_count", Integer, default=0),
    Column("unknown_prot_cds_count", Integer, default=0),
    Column("exons_count", Integer, default=0),
    Column("introns_count", Integer, default=0),
)

chromosomes = Table(
    "chromosomes", metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("id_organisms", Integer, ForeignKey("organisms.id"), nullable=False),
    Column("name", String(255), nullable=False),
    Column("length", BigInteger, default=0),
)

sequences = Table(
    "sequences", metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("id_organisms", Integer, ForeignKey("organisms.id"), nullable=False),
    Column("id_chromosomes", Integer, ForeignKey("chromosomes.id")),
    Column("source_file_name", String(255)),
    Column("ref_seq_id", String(64), index=True),
    Column("version", String(64)),
    Column("description", Text),
    Column("length", Integer),
    Column("origin_file_name", String(1024)),
)

genes = Table(
    "genes", metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("id_sequences", Integer, ForeignKey("sequences.id"), nullable=False, index=True),
    Column("name", String(255)),
    Column("note", Text),
    Column("backward_chain", Boolean),
    Column("protein_but_not_rna", Boolean),
    Column("pseudo_gene", Boolean),
    Column("has_cds", Boolean),
    Column("has_rna", Boolean),
    Column("start", Integer),
    Column("end", Integer),
    Column("start_code", Integer),
    Column("end_code", Integer),
    Column("max_introns_count", Integer),
)

isoforms = Table(
    "isoforms", metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("id_genes", Integer, ForeignKey("genes.id"), nullable=False),
    Column("id_sequences", Integer, ForeignKey("sequences.id"), nullable=False, index=True),
    Column("protein_xref", String(255)),
    Column("protein_id", String(255)),
    Column("product", Text),
    Column("note", Text),
    Column("cds_start", Integer),
    Column("cds_end", Integer),
    Column("mrna_start", Integer),
    Column("mrna_end", Integer),
    Column("mrna_length", Integer),
    Column("exons_cds_count", Integer),
    Column("exons_mrna_count", Integer),
    Column("exons_length", Integer),
    Column("start_codon", String(3)),
    Column("end_codon", String(3)),
    Column("maximum_by_introns", Boolean),
    Column("error_in_length", Boolean),
    Column("error_in_start_codon", Boolean),
    Column("error_in_end_codon", Boolean),
    Column("error_in_intron", Boolean),
    Column("error_in_coding_exon", Boolean),
    Column("error_main", Boolean),
)

coding_exons = Table(
    "coding_exons", metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("id_isoforms", Integer, ForeignKey("isoforms.id"), nullable=False),
    Column("id_genes", Integer, ForeignKey("genes.id"), nullable=False),
    Column("id_sequences", Integer, ForeignKey("sequences.id"), nullable=False, index=True),
    Column("start", Integer),
    Column("end", Integer),
    Column("length", Integer),
    Column("type", Integer),
    Column("start_phase", Integer),
    Column("end_phase", Integer),
    Column("length_phase", Integer),
    Column("index", Integer),
    Column("rev_index", Integer),
    Column("start_codon", String(3)),
    Column("end_codon", String(3)),
    Column("prev_intron", Integer),
    Column("next_intron", Integer),
    Column("error_in_pseudo_flag", Boolean),
    Column("error_n_in_sequence", Boolean),
)

intron_types = Table(
    "intron_types", metadata,
    Column("id", Integer, primary_key=True, autoincrement=False),
    Column("representation", String(8)),
)

introns = Table(
    "introns", metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("id_isoforms", Integer, ForeignKey("isoforms.id"), nullable=False),
    Column("id_genes", Integer, ForeignKey("genes.id"), nullable=False),
    Column("id_sequences", Integer, ForeignKey("sequences.id"), nullable=False, index=True),
    Column("prev_exon", Integer, ForeignKey("coding_exons.id")),
    Column("next_exon", Integer, ForeignKey("coding_exons.id")),
    Column("start", Integer),
    Column("end", Integer),
    Column("id_intron_types", Integer, ForeignKey("intron_types.id")),
    Column("start_dinucleotide", String(2)),
    Column("end_dinucleotide", String(2)),
    Column("length", Integer),
    Column("index", Integer),
    Column("rev_index", Integer),
    Column("length_phase", Integer),
    Column("phase", Integer),
    Column("error_start_dinucleotide", Boolean),
    Column("error_end_dinucleotide", Boolean),
    Column("error_main", Boolean),
    Column("warning_n_in_sequence", Boolean),
)
