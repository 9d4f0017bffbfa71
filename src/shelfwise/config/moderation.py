"""Moderation and catalog listing defaults."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_positive_int
from .errors import ConfigurationError

DEFAULT_SIMILAR_STORE_LIMIT = 5
DEFAULT_PAGE_SIZE = 20
DEFAULT_MAX_PAGE_SIZE = 100


@dataclass(frozen=True, slots=True)
class ModerationConfig:
    similar_store_limit: int = DEFAULT_SIMILAR_STORE_LIMIT
    default_page_size: int = DEFAULT_PAGE_SIZE
    max_page_size: int = DEFAULT_MAX_PAGE_SIZE

    def __post_init__(self) -> None:
        if self.default_page_size > self.max_page_size:
            raise ConfigurationError(
                f"Default page size {self.default_page_size} exceeds maximum {self.max_page_size}"
            )


def get_moderation_config() -> ModerationConfig:
    return ModerationConfig(
        similar_store_limit=env_positive_int(
            "SHELFWISE_SIMILAR_STORE_LIMIT", DEFAULT_SIMILAR_STORE_LIMIT
        ),
        default_page_size=env_positive_int("SHELFWISE_DEFAULT_PAGE_SIZE", DEFAULT_PAGE_SIZE),
        max_page_size=env_positive_int("SHELFWISE_MAX_PAGE_SIZE", DEFAULT_MAX_PAGE_SIZE),
    )
