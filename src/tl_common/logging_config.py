"""Process-wide logging setup.

Called once from the FastAPI app module. Module loggers are obtained with
``logging.getLogger(__name__)`` everywhere else.
"""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Avoid duplicate handlers when the app module is imported more than once (tests)
    if not any(getattr(h, "_tl_handler", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        handler._tl_handler = True  # type: ignore[attr-defined]
        root.addHandler(handler)

    # SQL echo is controlled by settings.DEBUG on the engine itself
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
