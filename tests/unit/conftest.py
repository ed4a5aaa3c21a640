import os

import pytest

from introns.lib.database import Database, Registry


def format_origin(origin):
    lines = ["ORIGIN      "]
    for offset in range(0, len(origin), 60):
        chunk = origin[offset:offset + 60].lower()
        words = [chunk[i:i + 10] for i in range(0, len(chunk), 10)]
        lines.append(f"{offset + 1:>9} " + " ".join(words))
    return lines


def format_record(accession, features, origin, organism="Testus organismus",
                  lineage="Eukaryota; Metazoa; Testidae.", definition="Testus organismus test sequence."):
    """
    Minimal GenBank flat file record.

    :param features: list of (key, location, [qualifier lines])
    """
    lines = [
        f"LOCUS       {accession:<16}{len(origin):>11} bp    DNA     linear   CON 01-JAN-2020",
        f"DEFINITION  {definition}",
        f"ACCESSION   {accession}",
        f"VERSION     {accession}.1",
        f"SOURCE      {organism}",
        f"  ORGANISM  {organism}",
        f"            {lineage}",
        "FEATURES             Location/Qualifiers",
    ]
    for key, location, qualifiers in features:
        lines.append(f"     {key:<16}{location}")
        for qualifier in qualifiers:
            lines.append(" " * 21 + qualifier)
    lines.extend(format_origin(origin))
    lines.append("//")
    return "\n".join(lines) + "\n"


@pytest.fixture
def registry(tmp_path):
    registry = Registry.create(f"sqlite:///{os.path.join(str(tmp_path), 'introns.sqlite')}")
    yield registry
    registry.dispose()


@pytest.fixture
def database(registry):
    with Database(registry) as database:
        yield database
