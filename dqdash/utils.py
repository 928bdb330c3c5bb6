import logging
import sys

def setup_logging(level=logging.INFO):
    """
    Configure logging for the dashboard and the CLI.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    logging.basicConfig(
        level=level,
        format="[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )
    # urllib3 is chatty at INFO about connection pools
    logging.getLogger("urllib3").setLevel(logging.WARNING)

def get_logger(name: str):
    return logging.getLogger(name)
