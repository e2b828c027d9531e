"""Bulletin ticker derived from the sorted notice list"""
from typing import List
import logging

from app.models.notice import NoticeDocument

logger = logging.getLogger(__name__)

BULLETIN_PRIORITY = 1
MAX_BULLETIN_ITEMS = 5

FALLBACK_BULLETIN = [
    "Welcome to the College Notifier App!",
    "Check back often for important updates.",
    "Have a great semester!",
]


def derive_bulletin(notices: List[NoticeDocument]) -> List[str]:
    """Titles of the first five priority-1 notices, in the order given."""
    titles = [n.title for n in notices if n.priority == BULLETIN_PRIORITY][:MAX_BULLETIN_ITEMS]
    if not titles:
        logger.info("No priority-1 notices, serving static bulletin")
        return list(FALLBACK_BULLETIN)
    return titles
