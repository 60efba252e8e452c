"""Package logger; modules log through named children of it."""
import logging

logger = logging.getLogger("rksd_assistant")
if not logger.handlers:
    h = logging.StreamHandler()
    fmt = logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")
    h.setFormatter(fmt)
    logger.addHandler(h)
    logger.setLevel(logging.INFO)

def get_logger(name=None):
    """Return the package logger, or its child `rksd_assistant.<name>`."""
    return logger.getChild(name) if name else logger
