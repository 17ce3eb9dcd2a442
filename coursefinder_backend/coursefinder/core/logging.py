import logging

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
_HANDLER_NAME = "coursefinder"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Attach a single stream handler to the ``coursefinder`` logger tree."""
    root = logging.getLogger("coursefinder")
    root.setLevel(level.upper())
    if not any(h.get_name() == _HANDLER_NAME for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        handler.set_name(_HANDLER_NAME)
        root.addHandler(handler)
    return root
