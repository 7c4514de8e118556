import logging

from sqlalchemy.engine import Engine

from docledger.config import get_settings
from docledger.database import Base, build_engine
# Import every model so it registers with Base
from docledger.documents.models.record import DocumentRecord, SignatureRecord  # noqa: F401
from docledger.events.models.event import EventRecord  # noqa: F401

logger = logging.getLogger(__name__)


def create_tables(engine: Engine):
    """Creates all ledger tables on the given engine"""
    logger.debug("Tables to create: %s", list(Base.metadata.tables.keys()))
    Base.metadata.create_all(bind=engine)
    logger.info("Ledger tables ready on %s", engine.url.render_as_string(hide_password=True))


if __name__ == "__main__":
    create_tables(build_engine(get_settings().DATABASE_URL))
