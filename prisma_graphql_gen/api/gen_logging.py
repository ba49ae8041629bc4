"""
Progress output for `pgg generate`.

generate_module announces its five [PHASE n] banners at INFO. The mergers
report [MERGE] summaries, enum registration reports [ENUMS], and the
type closure walk logs one [TYPES] line per declaration at DEBUG. Everything
goes to stderr under "pgg.gen" so the rich summary on stdout stays clean.
"""

import logging
import sys

_LOGGER_NAME = "pgg.gen"

# -v / -q on the command line
_LEVELS = {"verbose": logging.DEBUG, "quiet": logging.WARNING}


def get_logger(name: str = None) -> logging.Logger:
    """Logger for a generator module, named after its last dotted segment."""
    if name is None or name == _LOGGER_NAME:
        return logging.getLogger(_LOGGER_NAME)
    # prisma_graphql_gen.api.generators.type_closure -> pgg.gen.type_closure
    return logging.getLogger(f"{_LOGGER_NAME}.{name.rsplit('.', 1)[-1]}")


def configure_gen_logging(verbose: bool = False, quiet: bool = False) -> None:
    """
    Set the pgg.gen level from the CLI flags.

    -v shows the per-type closure walk and every merged definition, -q keeps
    only skipped operations, fallbacks and failures. Safe to call once per
    command invocation; later calls only move the level.
    """
    if verbose:
        level = _LEVELS["verbose"]
    elif quiet:
        level = _LEVELS["quiet"]
    else:
        level = logging.INFO

    gen_logger = logging.getLogger(_LOGGER_NAME)
    gen_logger.setLevel(level)

    if gen_logger.handlers:
        for handler in gen_logger.handlers:
            handler.setLevel(level)
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(_GenFormatter())
    gen_logger.addHandler(handler)
    gen_logger.propagate = False


class _GenFormatter(logging.Formatter):
    """Phase banners and tags are part of the message; tracebacks follow it."""

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if record.exc_info:
            message += f"\n{self.formatException(record.exc_info)}"
        return message
