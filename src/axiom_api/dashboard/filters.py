"""Dashboard filter state and its on-disk persistence."""

import json
import logging
from pathlib import Path

from pydantic import Field
from pydantic import ValidationError as PydanticValidationError

from axiom_api.config import get_settings
from axiom_api.schemas.base import BaseSchema

settings = get_settings()
logger = logging.getLogger(__name__)


class FilterState(BaseSchema):
    """Filters selected on the dashboard."""

    sentiments: list[str] = Field(default_factory=list)
    priorities: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    search: str = ""
    has_cat: bool | None = Field(None, alias="hasCat")

    @property
    def active_count(self) -> int:
        """Number of selected sentiment, priority and tag values."""
        return len(self.sentiments) + len(self.priorities) + len(self.tags)

    def to_params(self) -> list[tuple[str, str]]:
        """Query parameters for the list endpoint, repeating multi-valued keys."""
        params = [("sentiment", value) for value in self.sentiments]
        params += [("priority", value) for value in self.priorities]
        params += [("tag", value) for value in self.tags]
        if self.search.strip():
            params.append(("search", self.search.strip()))
        if self.has_cat is not None:
            params.append(("hasCat", "true" if self.has_cat else "false"))
        return params


class FilterStorage:
    """Persists ``FilterState`` as JSON so filters survive a restart.

    Storage problems are logged and otherwise ignored.
    """

    def __init__(self, path: str | Path | None = None) -> None:
        self.path = Path(path or settings.dashboard_filter_storage_path).expanduser()

    def load(self) -> FilterState:
        if not self.path.exists():
            return FilterState()
        try:
            return FilterState.model_validate_json(self.path.read_text(encoding="utf-8"))
        except (OSError, PydanticValidationError) as e:
            logger.error(f"Failed to load filters from storage: {e}")
            return FilterState()

    def save(self, state: FilterState) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(
                json.dumps(state.model_dump(by_alias=True)),
                encoding="utf-8",
            )
        except OSError as e:
            logger.error(f"Failed to save filters to storage: {e}")

    def clear(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            logger.error(f"Failed to clear filters from storage: {e}")
