VERSION = '0.3.0'

# Column at which the field name ends and its value starts
TOP_LEVEL_COLUMN = 12
FEATURE_COLUMN = 21

RECORD_TERMINATOR = "//"

DONOR_SITE = "GT"
ACCEPTOR_SITE = "AG"

# Chromosome names starting with these prefixes are not counted as real chromosomes
NON_CHROMOSOME_PREFIXES = ('unk', 'mit')
UNKNOWN_CHROMOSOME_PREFIX = 'unk'
MITOCHONDRION = "mitochondrion"
