import logging
import os
import re

import pyfaidx
from Bio import SeqIO
from Bio.Seq import Seq
from Bio.SeqRecord import SeqRecord

logger = logging.getLogger(__name__)

_spaces = re.compile(r"\s+")
_organism_chars = re.compile(r"[(),./\\]")
_name_chars = re.compile(r"[(),/\\]")


def organism_dir_name(name):
    return _organism_chars.sub("", _spaces.sub("_", name)).lower()


def file_name_part(name):
    return _name_chars.sub("", _spaces.sub("_", name).replace(".", "_")).lower()


class OriginStore:
    """
    Stores the ORIGIN block of each sequence as an indexed FASTA file under
    <root>/<organism>/<chromosome>/<accession>.fa. Nothing is stored when root is not set.
    """

    def __init__(self, root=None):
        self.root = os.path.abspath(root) if root else None

    @property
    def enabled(self):
        return self.root is not None

    def relative_path(self, sequence):
        organism_name = sequence.organism.name if sequence.organism is not None else ""
        parts = [organism_dir_name(organism_name)]
        if sequence.chromosome is not None:
            parts.append(file_name_part(sequence.chromosome.name))
        parts.append(file_name_part(sequence.ref_seq_id) + ".fa")
        return os.path.join(*parts)

    def store(self, sequence):
        """
        :return: The path relative to the store root, or None when the origin was not stored
        """
        if not self.enabled:
            return None
        if not sequence.origin:
            logger.debug("Sequence %s has no origin, nothing to store", sequence.ref_seq_id)
            return None
        file_name = self.relative_path(sequence)
        path = os.path.join(self.root, file_name)
        try:
            os.makedirs(os.path.dirname(path), exist_ok=True)
        except OSError as e:
            logger.warning("Can't create dir '%s' (%s). Sequence '%s' will not be stored!",
                           os.path.dirname(path), e, file_name)
            return None

        record = SeqRecord(Seq(sequence.origin), id=sequence.version or sequence.ref_seq_id,
                           description=sequence.description)
        try:
            with open(path, "wt") as out:
                SeqIO.write(record, out, "fasta")
            if os.path.exists(path + ".fai"):
                os.remove(path + ".fai")
            pyfaidx.Faidx(path).close()
        except (OSError, pyfaidx.FastaIndexingError) as e:
            logger.warning("Can't write '%s' (%s). Sequence '%s' will not be stored!", path, e, file_name)
            return None

        sequence.origin_file_name = file_name
        return file_name
