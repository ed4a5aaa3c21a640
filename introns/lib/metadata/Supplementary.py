"""
Supplementary organism and taxonomy values kept next to the GenBank files, used to override what the flat files
state (or do not state) about the organism.

Example::

    organisms:
      name: Homo sapiens
      ref_seq_assembly_id: GCF_000001405.39
      real_chromosome_count: 24
      real_mitochondria: 1
      annotation_release: "109"
      annotation_date: 26 March 2019
    tax_kingdoms:
      name: Animals
    tax_groups1:
      name: Vertebrates
      type: phylum
    tax_groups2:
      name: Mammals
      type: class
"""
import datetime
import logging
import os
import re

import yaml

from validation.metadata_validator import MetadataError, validate_metadata

try:
    from yaml import CLoader as Loader
except ImportError:
    from yaml import Loader

logger = logging.getLogger(__name__)

METADATA_SUFFIX = ".yaml"
MONTHS = ("jan", "feb", "mar", "apr", "may", "jun", "jul", "aug", "sep", "oct", "nov", "dec")

_date = re.compile(r"(\d+)\s+(\S+)\s+(\d\d\d\d)")


def parse_annotation_date(text):
    """
    Parse dates such as '26 March 2019'.

    :return: datetime.date or None when the text is not a plausible date
    """
    match = _date.search(str(text))
    if match is None:
        return None
    day = int(match.group(1))
    month_name = match.group(2).lower()[:3]
    month = MONTHS.index(month_name) + 1 if month_name in MONTHS else 0
    year = int(match.group(3))
    if not (1 <= day <= 31 and 1 <= month <= 12 and 1970 <= year <= 2039):
        return None
    try:
        return datetime.date(year, month, day)
    except ValueError:
        return None


def default_metadata_file(input_file_name):
    """
    The metadata file which accompanies an input file: same directory, same name up to the first dot.
    """
    directory = os.path.dirname(os.path.abspath(input_file_name))
    base_name = os.path.basename(input_file_name).split('.')[0]
    return os.path.join(directory, base_name + METADATA_SUFFIX)


class SupplementaryData:
    def __init__(self, document=None, source=None):
        self.document = document or dict()
        self.source = source

    def __bool__(self):
        return bool(self.document)

    @classmethod
    def load(cls, file_name):
        """
        Read and validate a metadata file. Missing or unusable files give an empty overlay.
        """
        if not file_name or not os.path.exists(file_name):
            return cls()
        try:
            with open(file_name, 'r') as metadata_file:
                document = yaml.load(metadata_file, Loader=Loader) or dict()
            validate_metadata(document, file_name)
        except (OSError, yaml.YAMLError, MetadataError) as e:
            logger.warning("Supplementary data from %s ignored: %s", file_name, e)
            return cls()
        logger.debug("Using supplementary data from %s", file_name)
        return cls(document, file_name)

    def value(self, table, field):
        group = self.document.get(table) or dict()
        return group.get(field)

    @property
    def organism_name(self):
        return self.value("organisms", "name")

    def update_organism(self, organism):
        if organism is None:
            return
        name = self.value("organisms", "name")
        ref_seq_assembly_id = self.value("organisms", "ref_seq_assembly_id")
        real_chromosome_count = self.value("organisms", "real_chromosome_count")
        real_mitochondria = self.value("organisms", "real_mitochondria")
        annotation_release = self.value("organisms", "annotation_release")
        annotation_date = self.value("organisms", "annotation_date")

        with organism.lock:
            if name is not None:
                organism.name = name
            if ref_seq_assembly_id is not None:
                organism.ref_seq_assembly_id = ref_seq_assembly_id
            if real_chromosome_count is not None:
                organism.real_chromosome_count = int(real_chromosome_count)
            if real_mitochondria is not None:
                organism.real_mitochondria = bool(int(real_mitochondria))
            if annotation_release is not None:
                organism.annotation_release = str(annotation_release)
            if annotation_date is not None:
                date = parse_annotation_date(annotation_date)
                if date is not None:
                    organism.annotation_date = date
                else:
                    logger.warning("Unusable annotation date %r in %s", annotation_date, self.source)

    def update_organism_taxonomy(self, organism, database):
        """
        Resolve the kingdom and taxonomy groups through the database and link them to the organism.
        """
        if organism is None:
            return
        kingdom_name = self.value("tax_kingdoms", "name")
        group1_name = self.value("tax_groups1", "name")
        group1_type = self.value("tax_groups1", "type")
        group2_name = self.value("tax_groups2", "name")
        group2_type = self.value("tax_groups2", "type")

        with organism.lock:
            kingdom = organism.kingdom
            group1 = organism.tax_group1
            group2 = organism.tax_group2

        if kingdom_name is not None:
            kingdom = database.find_or_create_tax_kingdom(kingdom_name) or kingdom
        if group1_name is not None and group1_type is not None:
            group1 = database.find_or_create_tax_group1(group1_name, group1_type, kingdom) or group1
        if group2_name is not None and group2_type is not None:
            group2 = database.find_or_create_tax_group2(group2_name, group2_type, group1) or group2

        if kingdom is not None and group1 is not None:
            group1.kingdom = kingdom
        if group1 is not None and group2 is not None:
            group2.group1 = group1
        if kingdom is not None and group2 is not None:
            group2.kingdom = kingdom

        with organism.lock:
            organism.kingdom = kingdom
            organism.tax_group1 = group1
            organism.tax_group2 = group2
