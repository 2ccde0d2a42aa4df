import logging

FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level=logging.INFO, *, name="threaded_mc", propagate=False):
    """Point the package logger at the current stderr and return it.

    Module loggers (``threaded_mc.monte_carlo``, ``threaded_mc.seeds``) are
    children of ``name`` and inherit its handler and level. A handler left by
    an earlier call is replaced, since it may be bound to a closed stream.
    """
    logger = logging.getLogger(name)
    for existing in [h for h in logger.handlers if isinstance(h, logging.StreamHandler)]:
        logger.removeHandler(existing)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(FORMAT))
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = propagate
    return logger
