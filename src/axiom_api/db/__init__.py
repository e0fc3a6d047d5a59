"""MongoDB access for aXiom API."""

from axiom_api.db.session import close_db, get_db, init_db

__all__ = ["close_db", "get_db", "init_db"]
