"""
Records shared between all the workers. They are owned by the database registry, sequences only keep references
to them, so every mutation goes through the record lock.
"""
import threading


class TaxKingdom:
    def __init__(self, name):
        self.id = 0
        self.name = name

    def __repr__(self):
        return f"TaxKingdom({self.name!r})"


class TaxGroup1:
    def __init__(self, name, type, kingdom=None):
        self.id = 0
        self.name = name
        self.type = type
        self.kingdom = kingdom

    def __repr__(self):
        return f"TaxGroup1({self.name!r}, {self.type!r})"


class TaxGroup2:
    def __init__(self, name, type, group1=None):
        self.id = 0
        self.name = name
        self.type = type
        self.group1 = group1
        self.kingdom = group1.kingdom if group1 is not None else None

    def __repr__(self):
        return f"TaxGroup2({self.name!r}, {self.type!r})"


class Organism:
    # Fields persisted as they are, the counters are accumulated by every worker
    COUNTERS = (
        'real_chromosome_count',
        'db_chromosome_count',
        'unknown_sequences_count',
        'total_sequences_length',
        'b_genes_count',
        'r_genes_count',
        'cds_count',
        'rna_count',
        'unknown_prot_genes_count',
        'unknown_prot_cds_count',
        'exons_count',
        'introns_count',
    )

    def __init__(self, name):
        self.lock = threading.RLock()
        self.id = 0
        self.name = name
        self.ref_seq_assembly_id = ""
        self.annotation_release = ""
        self.annotation_date = None
        self.taxonomy_xref = ""
        self.taxonomy_list = []
        self.kingdom = None
        self.tax_group1 = None
        self.tax_group2 = None
        self.real_mitochondria = False
        self.db_mitochondria = False
        for counter in self.COUNTERS:
            setattr(self, counter, 0)

    def __repr__(self):
        return f"Organism({self.name!r})"

    def increment(self, counter, value=1):
        with self.lock:
            setattr(self, counter, getattr(self, counter) + value)


class Chromosome:
    def __init__(self, name, organism):
        self.lock = threading.RLock()
        self.id = 0
        self.name = name
        self.organism = organism
        self.length = 0

    def __repr__(self):
        return f"Chromosome({self.name!r})"

    def add_length(self, length):
        with self.lock:
            self.length += length
