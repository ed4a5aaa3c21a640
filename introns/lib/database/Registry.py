"""
Records shared by every worker: one engine, and the organism, chromosome and taxonomy caches. Each cache has its
own lock which is held for the whole find-or-create, so a key is only ever created once.
"""
import itertools
import logging
import threading

from sqlalchemy import create_engine, func, insert, select
from sqlalchemy.pool import StaticPool

from ..models.Transcript import intron_type_id
from .Schema import intron_types, metadata

logger = logging.getLogger(__name__)


class Registry:
    def __init__(self, engine):
        self.engine = engine

        self.organisms_lock = threading.RLock()
        self.organisms = dict()

        self.chromosomes_lock = threading.RLock()
        self.chromosomes = dict()

        self.tax_lock = threading.RLock()
        self.kingdoms = dict()
        self.tax_groups1 = dict()
        self.tax_groups2 = dict()

    @classmethod
    def create(cls, url, **engine_options):
        """
        Connect to the database at url, creating the tables which are not there yet.
        """
        if url.startswith("sqlite"):
            engine_options.setdefault("connect_args", {"check_same_thread": False, "timeout": 60})
            if url in ("sqlite://", "sqlite:///:memory:"):
                engine_options.setdefault("poolclass", StaticPool)
        engine = create_engine(url, **engine_options)
        metadata.create_all(engine)
        registry = cls(engine)
        registry.seed_intron_types()
        return registry

    def seed_intron_types(self):
        with self.engine.begin() as connection:
            if connection.execute(select(func.count()).select_from(intron_types)).scalar():
                return
            rows = []
            for prev_start, intron_phase, next_end in itertools.product(range(3), repeat=3):
                rows.append({"id": intron_type_id(prev_start, intron_phase, next_end),
                             "representation": f"{prev_start}-{intron_phase}-{next_end}"})
            connection.execute(insert(intron_types), rows)
        logger.debug("Created %d intron types", len(rows))

    def rename_organism(self, organism):
        """
        Keep the organism reachable under its current name after its name was overridden.
        """
        with self.organisms_lock:
            for key, candidate in list(self.organisms.items()):
                if candidate is organism and key != organism.name:
                    del self.organisms[key]
                    self.organisms[organism.name] = organism
                    break

    def dispose(self):
        self.engine.dispose()
