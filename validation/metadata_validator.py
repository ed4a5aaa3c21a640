import json
from importlib import resources as pkg_resources

from jsonschema import Draft7Validator, ValidationError, validators


class MetadataError(ValueError):
    pass


def load_metadata_schema():
    with pkg_resources.path("validation", "metadata.schema.json") as schema_file:
        with open(schema_file, 'r') as schema:
            return json.load(schema)


def validate_metadata(document, source="<metadata>"):
    """
    Check a supplementary metadata document against the metadata schema.

    :raises MetadataError: with every violation found, one per line
    """
    schema = load_metadata_schema()
    all_validators = dict(Draft7Validator.VALIDATORS)
    metadata_validator = validators.create(meta_schema=schema, validators=all_validators,
                                           type_checker=Draft7Validator.TYPE_CHECKER)
    errors = sorted(metadata_validator(schema).iter_errors(document), key=lambda e: list(e.path))
    if errors:
        messages = []
        for error in errors:
            location = '.'.join(str(p) for p in error.path) or '(root)'
            messages.append(f"{location}: {error.message}")
        raise MetadataError(f"Invalid metadata in {source}:\n" + '\n'.join(messages))
    return document


def is_valid_metadata(document):
    try:
        validate_metadata(document)
    except (MetadataError, ValidationError):
        return False
    return True
