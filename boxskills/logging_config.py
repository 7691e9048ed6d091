"""Logging setup shared by the serverless handler and the CLI."""

import logging
from pathlib import Path
from typing import Optional

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    level: str = "INFO",
    fmt: str = DEFAULT_FORMAT,
    log_file: Optional[str] = None
) -> None:
    """Configure the root logger.
    
    Serverless runtimes usually install their own root handler; in that
    case only the level is changed so records are not emitted twice.
    
    Args:
        level: Level name (DEBUG, INFO, ...)
        fmt: Format string for the console handler
        log_file: Optional path of a file that receives DEBUG records
    """
    numeric_level = getattr(logging, str(level).upper(), logging.INFO)
    
    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    
    if not root_logger.handlers:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(logging.Formatter(fmt))
        root_logger.addHandler(console_handler)
    else:
        for handler in root_logger.handlers:
            handler.setLevel(numeric_level)
    
    if log_file:
        log_path = Path(log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        
        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(logging.DEBUG)  # Always DEBUG in file
        file_handler.setFormatter(logging.Formatter(fmt))
        root_logger.addHandler(file_handler)
        root_logger.setLevel(min(numeric_level, logging.DEBUG))
    
    # The Google and Box SDKs are chatty at DEBUG
    for name in ("urllib3", "google.auth", "grpc"):
        logging.getLogger(name).setLevel(max(numeric_level, logging.INFO))
