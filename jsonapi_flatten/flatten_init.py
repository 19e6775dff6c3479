import logging
import os
import sys


def init_logging(loglevel: int = logging.WARNING) -> logging.Logger:
    """
    Specify the log format used by the parser
    Messages are written to sys.stderr so they don't mix with the output of the caller
    :param loglevel: loglevel, values from the logging module (10: debug, .. 50: critical)
    :return: the package logger
    """
    log = logging.getLogger("jsonapi_flatten")
    if log.level == logging.NOTSET:
        handler = logging.StreamHandler(sys.stderr)
        formatter = logging.Formatter("[%(asctime)s] %(levelname)s: %(message)s")
        handler.setFormatter(formatter)
        log.setLevel(loglevel)
        log.addHandler(handler)
    return log


#
# logging initialization
#
try:
    DEBUG = os.getenv("DEBUG", logging.WARNING)
    LOGLEVEL = int(DEBUG)
except ValueError:  # pragma: no cover
    print(f'Invalid LogLevel in DEBUG Environment Variable! "{DEBUG}"')
    LOGLEVEL = logging.INFO

log = init_logging(LOGLEVEL)
