import sys
import logging
from pathlib import Path
from typing import Optional, Union


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
    log_to_console: bool = True
) -> logging.Logger:
    """
    Configure logging for applications embedding the resolver.

    Args:
        level: Logging level (default: INFO)
        log_file: Optional path of a log file; parent directories are created
        log_to_console: Write logs to console/stderr (default: True)

    Returns:
        Root logger instance
    """
    # Clear existing handlers
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(level)

    formatter = logging.Formatter(
        '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    if log_to_console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    # Suppress noisy third-party logs
    for lib in ['langfuse', 'sqlalchemy.engine', 'httpx', 'urllib3']:
        logging.getLogger(lib).setLevel(logging.WARNING)

    return root_logger
