#!/usr/bin/env python3

# __main__.py parses the command line, connects to the database and splits the input GenBank files into contiguous
# ranges, one per worker thread. Workers are started first and only released once every one of them exists, each
# worker then reads its files record by record, overlays the supplementary metadata and stores the results.
import datetime
import logging
import os
import sys
import threading
import time
import zlib
from argparse import ArgumentDefaultsHelpFormatter, ArgumentParser, RawTextHelpFormatter
from urllib.parse import quote_plus

from sqlalchemy.exc import SQLAlchemyError

from introns import VERSION
from introns.lib.database import Database, Registry
from introns.lib.metadata.Supplementary import SupplementaryData, default_metadata_file
from introns.lib.parsers.GenBank import GenBankReader
from introns.utils import partition, setup_logging

logger = logging.getLogger("introns")

DEFAULT_DB_URL = "sqlite:///introns.sqlite"


class IntronsHelpFormatter(ArgumentDefaultsHelpFormatter, RawTextHelpFormatter):
    pass


def parse_arguments(argv=None):
    """
    Parses the CLI arguments and fills in the defaults of the values which were not given.

    :return: Object containing the CLI input arguments, with db_url always set
    """
    introns_ap = ArgumentParser(prog="introns-fill", add_help=True, formatter_class=IntronsHelpFormatter,
                                description="Load GenBank flat files into the introns database")
    introns_ap.add_argument("files", nargs="+", help="GenBank flat files, optionally gzip or bzip2 compressed")
    introns_ap.add_argument("--db-url", type=str,
                            help=f"SQLAlchemy database URL, '{DEFAULT_DB_URL}' when no database is given")

    mysql_ap = introns_ap.add_argument_group("MySQL connection", "Used when --db-url is not given")
    mysql_ap.add_argument("--host", type=str, help="Database host name")
    mysql_ap.add_argument("--user", type=str, help="Database user name")
    mysql_ap.add_argument("--pass", dest="password", type=str, help="Database password")
    mysql_ap.add_argument("--db", dest="database", type=str, help="Database name")

    introns_ap.add_argument("--seqdir", type=str,
                            help="Directory where the ORIGIN of every sequence is stored as indexed FASTA")
    introns_ap.add_argument("--threads", type=int, default=0,
                            help="Number of worker threads, 0 uses as many as cores (at most one per file)")
    introns_ap.add_argument("--use-data", type=str,
                            help="Supplementary metadata file used for every input, by default each input uses "
                                 "<input dir>/<input name>.yaml when it exists")
    introns_ap.add_argument("--logfile", type=str, help="Append the log to this file")
    introns_ap.add_argument("--debug", action="store_true", default=False, help="Debug logging")
    introns_ap.add_argument("-v", "--verbose", action="store_true", default=False, help="Informative logging")
    introns_ap.add_argument("--version", action="version", version=VERSION)

    args = introns_ap.parse_args(argv)
    if args.threads < 0:
        introns_ap.error("--threads can not be negative")
    return args


def resolve_defaults(args):
    """
    Warn about every unset optional value and replace it with its default.
    """
    if args.db_url is None:
        if any(v is not None for v in (args.host, args.user, args.password, args.database)):
            if args.host is None:
                logger.warning("DB host name not specified. Using 'localhost'.")
                args.host = "localhost"
            if args.database is None:
                logger.warning("DB name not specified. Using 'introns'.")
                args.database = "introns"
            if args.user is None:
                logger.warning("DB user name not specified. Using 'root'.")
                args.user = "root"
            credentials = quote_plus(args.user)
            if args.password:
                credentials += ":" + quote_plus(args.password)
            args.db_url = f"mysql+pymysql://{credentials}@{args.host}/{args.database}"
        else:
            logger.warning("DB not specified. Using '%s'.", DEFAULT_DB_URL)
            args.db_url = DEFAULT_DB_URL
    if not args.seqdir:
        logger.warning("Directory for storing sequences not specified. Origins will not be stored!")
    if not args.logfile:
        logger.warning("Log file name not specified. Errors will be printed at STDERR.")
    if args.threads == 0:
        args.threads = min(os.cpu_count() or 1, len(args.files))
        logger.warning("Threads count not specified. %d cores will be utilized.", args.threads)
    args.threads = max(1, min(args.threads, len(args.files)))
    return args


class Worker(threading.Thread):
    """
    Processes the files in [start, end) of the file list once the start event is set.
    """

    def __init__(self, args, registry, start_event, start, end, name=None):
        super().__init__(name=name)
        self.args = args
        self.registry = registry
        self.start_event = start_event
        self.first = start
        self.last = end
        self.files_done = 0
        self.sequences_done = 0

    def run(self):
        logger.debug("Created thread %s", self.name)
        self.start_event.wait()
        database = Database.open(self.registry, self.args.seqdir)
        if database is None:
            logger.error("No database connection for worker %s, its files are skipped", self.name)
            return
        with database:
            for index in range(self.first, self.last):
                file_name = self.args.files[index]
                logger.debug("Start processing file %s by worker %s", file_name, self.name)
                try:
                    self.process_one_file(file_name, database)
                except (OSError, EOFError, ValueError, zlib.error):
                    logger.exception("Processing of %s stopped. Skipped the rest of the file!", file_name)
                    continue
                logger.debug("Done processing file %s by worker %s", file_name, self.name)
        logger.debug("Finished thread %s", self.name)

    def process_one_file(self, file_name, database):
        supplementary = SupplementaryData.load(self.args.use_data or default_metadata_file(file_name))
        try:
            reader = GenBankReader(file_name, database, override_organism_name=supplementary.organism_name)
        except OSError:
            logger.warning("Can't open file %s. Skipped!", file_name)
            return
        with reader:
            for sequence in reader:
                supplementary.update_organism(sequence.organism)
                supplementary.update_organism_taxonomy(sequence.organism, database)
                database.store_origin(sequence)
                database.add_sequence(sequence)
                if sequence.organism is not None:
                    database.update_organism(sequence.organism)
                self.sequences_done += 1
        self.files_done += 1


def run_workers(args, registry):
    start_event = threading.Event()
    pool = []
    for number, (start, end) in enumerate(partition(len(args.files), args.threads)):
        worker = Worker(args, registry, start_event, start, end, name=f"Worker-{number}")
        worker.start()
        pool.append(worker)

    start_event.set()

    for worker in pool:
        worker.join()
    return pool


def main(argv=None):
    start_time = time.time()
    args = parse_arguments(argv)
    setup_logging(args.debug, args.logfile, args.verbose)
    logger.info("introns-fill version %s", VERSION)
    logger.info("Command-line call: %s", " ".join(sys.argv))
    resolve_defaults(args)

    try:
        registry = Registry.create(args.db_url)
    except SQLAlchemyError as e:
        logger.error("Can't open database %s: %s", args.db_url, e)
        return 1

    try:
        pool = run_workers(args, registry)
    finally:
        registry.dispose()

    files = sum(worker.files_done for worker in pool)
    sequences = sum(worker.sequences_done for worker in pool)
    logger.info("%d sequences from %d files done in %s", sequences, files,
                datetime.timedelta(seconds=time.time() - start_time))
    return 0


if __name__ == "__main__":
    sys.exit(main())
