import logging
import sys
from pathlib import Path
from typing import Optional


def setup_logging(log_level: str = "INFO", log_file: Optional[Path] = None,
                  handler: Optional[logging.Handler] = None) -> None:
    """
    Setup diagnostic logging for the application.

    Records go to stderr unless another handler is given; the terminal UI
    passes Textual's handler so log output does not draw over the screen.
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=numeric_level,
        format=log_format,
        handlers=[
            handler or logging.StreamHandler(sys.stderr),
        ],
        force=True
    )

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(logging.Formatter(log_format))
        logging.getLogger().addHandler(file_handler)
