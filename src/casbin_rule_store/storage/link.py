"""Database link parsing.

A link is a driver-prefixed connection string ``driver:details``. It is split
once on the first colon; the details are handed to SQLAlchemy as the part of
the URL after ``driver://``.

Examples:
    sqlite:                          -> sqlite://  (in-memory)
    sqlite://tmp/policy.db           -> sqlite:////tmp/policy.db
    postgresql+psycopg:user:pw@db/x  -> postgresql+psycopg://user:pw@db/x
"""

from __future__ import annotations

from typing import NamedTuple

from sqlalchemy import Engine, create_engine
from sqlalchemy.exc import ArgumentError, SQLAlchemyError

from casbin_rule_store.constants import LINK_DRIVER_DELIMITER
from casbin_rule_store.exceptions import DatabaseError, InvalidLinkError, MissingDriverError

__all__ = [
    "DatabaseLink",
    "parse_link",
    "create_engine_from_link",
]


class DatabaseLink(NamedTuple):
    """Parsed ``driver:details`` link."""

    driver: str
    details: str

    @property
    def url(self) -> str:
        """SQLAlchemy URL for this link."""
        return f"{self.driver}://{self.details}"


def parse_link(link: str) -> DatabaseLink:
    """Split a link into driver and connection details.

    Raises:
        InvalidLinkError: If the link has no driver delimiter or an empty driver.
    """
    driver, delimiter, details = link.partition(LINK_DRIVER_DELIMITER)
    if not delimiter or not driver:
        raise InvalidLinkError(
            f"Invalid database link {link!r}: expected 'driver:connection-details'"
        )
    return DatabaseLink(driver=driver, details=details)


def create_engine_from_link(link: str) -> Engine:
    """Create a SQLAlchemy engine from a driver-prefixed link.

    Raises:
        InvalidLinkError: If the link is malformed or names an unknown driver.
        MissingDriverError: If the driver's DBAPI package is not installed.
        DatabaseError: If the driver fails to build the engine.
    """
    parsed = parse_link(link)
    try:
        return create_engine(parsed.url)
    except ArgumentError as e:
        raise InvalidLinkError(f"Invalid database link {link!r}: {e}") from e
    except ImportError as e:
        raise MissingDriverError(
            f"Database driver {parsed.driver!r} is not installed: {e}"
        ) from e
    except SQLAlchemyError as e:
        raise DatabaseError("connect", str(e)) from e
