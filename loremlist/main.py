"""Composition Root - wires settings, logging, database and services.

Invariants:
    - The only module that knows both the SQL adapters and the services
    - Building the application has no side effects beyond logging setup and
      engine creation (no tables are created, no migrations run)

Design Decisions:
    - Plain dataclass container over a DI framework: five services, one factory
    - Schema management belongs to alembic; create_schema() exists for local
      development and throwaway SQLite databases
"""

import logging
from dataclasses import dataclass

from loremlist.config import Settings, get_settings
from loremlist.db.base import Base
from loremlist.infrastructure.database import DatabaseSessionManager, init_db
from loremlist.infrastructure.observability import setup_logging
from loremlist.services.association_service import AssociationService
from loremlist.services.item_service import ItemService
from loremlist.services.list_item_service import ListItemService
from loremlist.services.list_service import ListService
from loremlist.services.maintenance_service import MaintenanceService
import loremlist.models  # noqa: F401  (registers every table on Base.metadata)

logger = logging.getLogger(__name__)


@dataclass
class Application:
    db: DatabaseSessionManager
    associations: AssociationService
    lists: ListService
    items: ItemService
    list_items: ListItemService
    maintenance: MaintenanceService

    def create_schema(self) -> None:
        Base.metadata.create_all(self.db.engine)

    def close(self) -> None:
        self.db.dispose()
        logger.info("loremlist shut down")


def build_services(db: DatabaseSessionManager) -> dict:
    factory = db.unit_of_work
    return {
        "associations": AssociationService(factory),
        "lists": ListService(factory),
        "items": ItemService(factory),
        "list_items": ListItemService(factory),
        "maintenance": MaintenanceService(factory),
    }


def create_application(settings: Settings | None = None) -> Application:
    """Startup: logging, database, services."""
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.log_format)
    db = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        echo=settings.database_echo,
    )
    logger.info("loremlist started")
    return Application(db=db, **build_services(db))
