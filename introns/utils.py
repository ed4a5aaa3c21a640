import logging
import sys

DEBUG_FORMAT = '%(asctime)s - %(levelname)s - %(threadName)s - %(filename)s:%(lineno)d - %(message)s'


def setup_logging(debug=False, log_file=None, verbose=False):
    """Configure the root logger: console output on stderr and, optionally, a log file appended to."""
    if debug:
        log_level = logging.DEBUG
        log_format = DEBUG_FORMAT
    elif verbose:
        log_level = logging.INFO
        log_format = '%(asctime)s - %(levelname)s - %(message)s'
    else:
        log_level = logging.WARNING
        log_format = '%(levelname)s - %(message)s'

    logger = logging.getLogger()
    logger.setLevel(log_level)
    logger.handlers = []

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter(log_format))
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='a')
        file_handler.setLevel(log_level)
        file_handler.setFormatter(logging.Formatter(DEBUG_FORMAT))
        logger.addHandler(file_handler)

    return logger


def partition(count, workers):
    """
    Split range(count) into contiguous [start, end) slices, one per worker. The last worker takes the remainder.
    """
    per_worker = count // workers
    ranges = []
    for number in range(workers):
        start = number * per_worker
        end = count if number == workers - 1 else start + per_worker
        ranges.append((start, end))
    return ranges
