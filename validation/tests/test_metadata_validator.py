from unittest import TestCase

import yaml

from validation.metadata_validator import MetadataError, is_valid_metadata, load_metadata_schema, \
    validate_metadata


class MetadataValidatorTest(TestCase):
    def test_schema(self):
        schema = load_metadata_schema()
        self.assertEqual(set(schema["properties"]), {"organisms", "tax_kingdoms", "tax_groups1", "tax_groups2"})

    def test_valid_metadata(self):
        valid_example = yaml.safe_load("""
            organisms:
              name: Homo sapiens
              ref_seq_assembly_id: GCF_000001405.39
              real_chromosome_count: 24
              real_mitochondria: 1
              annotation_release: 109
              annotation_date: 26 March 2019
            tax_kingdoms:
              name: Animals
            tax_groups1:
              name: Vertebrates
              type: phylum
            tax_groups2:
              name: Mammals
              type: class
        """)
        self.assertIs(validate_metadata(valid_example), valid_example)
        self.assertTrue(is_valid_metadata(valid_example))

    def test_empty_metadata(self):
        self.assertTrue(is_valid_metadata({}))
        self.assertTrue(is_valid_metadata({"organisms": {}}))

    def test_unknown_group(self):
        with self.assertRaises(MetadataError) as context:
            validate_metadata({"species": {"name": "Homo sapiens"}}, "human.yaml")
        self.assertIn("human.yaml", str(context.exception))

    def test_unknown_field(self):
        self.assertFalse(is_valid_metadata({"organisms": {"colour": "blue"}}))

    def test_wrong_types(self):
        with self.assertRaises(MetadataError) as context:
            validate_metadata({"organisms": {"real_chromosome_count": "many", "name": ""}})
        message = str(context.exception)
        self.assertIn("organisms.real_chromosome_count", message)
        self.assertIn("organisms.name", message)

    def test_not_a_mapping(self):
        self.assertFalse(is_valid_metadata(["organisms"]))
        self.assertIsInstance(MetadataError("x"), ValueError)
