from pathlib import Path

from services.common.core.logging_config import setup_logging as common_setup_logging

DEFAULT_LOG_CONFIG = Path(__file__).resolve().parent.parent / "logging.yml"


def setup_logging(config_path: str = "", log_level: str = ""):
    """
    Initialize logging for an ingestion run.
    An empty path selects the logging.yml bundled with the package.
    """
    common_setup_logging(config_path or str(DEFAULT_LOG_CONFIG), log_level or None)
