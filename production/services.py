"""
Read helpers for the web layer.

A failed fetch never breaks a page: it is logged and the page renders
with an empty collection instead.
"""

import logging

from .kanban import KanbanBoard
from .repository import DjangoProductionRepository, RepositoryError

logger = logging.getLogger(__name__)


def get_repository():
    """Repository used by the views. Tests patch this to inject a fake."""
    return DjangoProductionRepository()


def fetch_items(repository):
    try:
        return repository.list_items()
    except RepositoryError:
        logger.exception("Failed to fetch production items")
        return []


def fetch_materials(repository, item_id):
    try:
        return repository.list_materials(item_id)
    except RepositoryError:
        logger.exception("Failed to fetch materials for item %s", item_id)
        return []


def fetch_labor_costs(repository, item_id):
    try:
        return repository.list_labor_costs(item_id)
    except RepositoryError:
        logger.exception("Failed to fetch labor costs for item %s", item_id)
        return []


def fetch_item(repository, item_id):
    try:
        return repository.get_item(item_id)
    except RepositoryError:
        logger.exception("Failed to fetch production item %s", item_id)
        return None


# Board order is per-user UI state; status is what gets persisted
BOARD_ORDER_SESSION_KEY = "kanban_order"


def load_board(request, repository):
    return KanbanBoard.restore(
        fetch_items(repository),
        request.session.get(BOARD_ORDER_SESSION_KEY),
        repository=repository,
    )


def remember_board(request, board):
    request.session[BOARD_ORDER_SESSION_KEY] = board.order()
