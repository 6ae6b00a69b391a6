import logging
from contextlib import contextmanager

logger = logging.getLogger(__name__)


@contextmanager
def unit_of_work(session):
    """All-or-nothing boundary around a multi-row mutation.

    Everything added or updated through ``session`` inside the block is
    committed together when the block exits normally. Any exception rolls the
    whole lot back and is re-raised to the caller.
    """
    try:
        yield session
        session.commit()
    except Exception:
        logger.warning("Rolling back unit of work", exc_info=True)
        session.rollback()
        raise
