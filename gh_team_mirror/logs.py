import datetime
import logging
import os

logger = logging.getLogger("gh_team_mirror")

_MARKERS = {
    "info": "",
    "success": "✓ ",
    "warning": "⚠ ",
    "error": "✗ ",
}

_LEVELS = {
    "info": logging.INFO,
    "success": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def setup_logging(output_folder, prefix="TEAM_MIGRATION"):
    """Setup logging

    Args:
        output_folder: Folder the run log is written to
        prefix: File name prefix, e.g. TEAM_EXPORT or TEAM_MIRROR
    Returns:
        Path of the log file
    """
    os.makedirs(output_folder, exist_ok=True)

    current_datetime = datetime.datetime.now().strftime('%d%b%Y_%H%M')
    log_file_path = os.path.join(output_folder, f"{prefix}_LOG_{current_datetime}.log")

    logging.basicConfig(
        filename=log_file_path,
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )
    return log_file_path


def log_and_print(message, level="info"):
    """Print a status line to the console and record it in the run log"""
    print(f"{_MARKERS.get(level, '')}{message}")
    logger.log(_LEVELS.get(level, logging.INFO), message)
