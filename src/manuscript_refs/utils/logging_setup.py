"""Logging configuration."""
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Union


def setup_logging(log_dir: Optional[str] = None, level: Union[int, str] = logging.INFO) -> None:
    """Set up logging configuration.

    Console output is always enabled. A timestamped log file is added when
    ``log_dir`` is given.
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    # Configure logging format
    log_format = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    date_format = '%Y-%m-%d %H:%M:%S'

    # Set up handlers
    handlers = [logging.StreamHandler()]
    log_file = None
    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_path / f"manuscript_refs_{timestamp}.log"
        handlers.append(logging.FileHandler(log_file))

    # Configure logging
    logging.basicConfig(
        level=level,
        format=log_format,
        datefmt=date_format,
        handlers=handlers
    )

    logging.info("Logging initialized")
    if log_file:
        logging.info(f"Log file: {log_file}")


def log_operation(operation: str, details: str, level: int = logging.INFO) -> None:
    """Log an operation with details."""
    logging.getLogger("manuscript_refs").log(level, f"{operation}: {details}")


def log_api_call(api: str, method: str, params: dict) -> None:
    """Log an API call."""
    logging.getLogger("manuscript_refs").info(f"API Call - {api}.{method}({params})")
