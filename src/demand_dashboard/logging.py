from __future__ import annotations

import logging


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
# Request logs from the dashboard server drown out pipeline messages.
NOISY_LOGGERS = ("werkzeug",)


def configure_logging(level: str = "INFO", *, quiet_server: bool = True) -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    if quiet_server:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
