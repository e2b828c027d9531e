import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for the process"""
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
    # motor/pymongo heartbeat chatter drowns out request logs at INFO
    logging.getLogger("pymongo").setLevel(logging.WARNING)
