# casedesk/utils/logging.py

import logging
import os

_CONFIGURED = False


def get_logger(name: str) -> logging.Logger:
    """
    Logger con nombre por módulo: casedesk.<name>
    El nivel sale de LOG_LEVEL (INFO por defecto).
    """
    global _CONFIGURED
    if not _CONFIGURED:
        logging.basicConfig(
            level=os.getenv("LOG_LEVEL", "INFO").upper(),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
        _CONFIGURED = True
    return logging.getLogger(f"casedesk.{name}")
