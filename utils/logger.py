# utils/logger.py
import logging
import os
import sys
from pathlib import Path

LEVEL_ENV_VAR = "NNGRAPH_LOG_LEVEL"

FORMATTER = logging.Formatter(fmt="%(asctime)s | %(levelname)7s | %(name)s | %(message)s",
                              datefmt="%Y-%m-%d %H:%M:%S")


def add_logfile(logger, logfile):
    log_dir = Path(logfile).parent
    log_dir.mkdir(parents=True, exist_ok=True)
    fh = logging.FileHandler(logfile)
    fh.setFormatter(FORMATTER)
    logger.addHandler(fh)
    return fh


def get_logger(name=__name__, level=None, logfile=None):
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger  # already configured

    if level is None:
        level = os.environ.get(LEVEL_ENV_VAR, "WARNING")
    logger.setLevel(level.upper() if isinstance(level, str) else level)

    # stdout is reserved for computed vectors
    sh = logging.StreamHandler(sys.stderr)
    sh.setFormatter(FORMATTER)
    logger.addHandler(sh)

    if logfile:
        add_logfile(logger, logfile)

    return logger
