"""Duplicate detection for new-store submissions."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING
from urllib.parse import urlsplit

from shelfwise.config import DEFAULT_SIMILAR_STORE_LIMIT
from shelfwise.domain.model import Store, StoreType

if TYPE_CHECKING:
    from shelfwise.domain.ports import StoreRepository

log = logging.getLogger(__name__)


@dataclass(slots=True, kw_only=True)
class StoreCandidate:
    """A store as submitted, before it is persisted."""

    name: str
    store_type: StoreType = StoreType.BRICK_AND_MORTAR
    region_or_scope: str = "local"
    description: str | None = None
    website_url: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    country: str = "US"
    place_id: str | None = None
    phone_number: str | None = None

    @property
    def is_physical(self) -> bool:
        return self.store_type is StoreType.BRICK_AND_MORTAR

    def to_store(self) -> Store:
        return Store(
            name=self.name.strip(),
            store_type=self.store_type,
            region_or_scope=self.region_or_scope,
            description=self.description,
            website_url=self.website_url,
            address=self.address,
            city=self.city,
            state=self.state,
            zip_code=self.zip_code,
            country=self.country,
            place_id=self.place_id,
            phone_number=self.phone_number,
        )


@dataclass(slots=True)
class DuplicateCheck:
    exact_match: Store | None = None
    similar_stores: list[Store] = field(default_factory=list[Store])

    @property
    def has_exact_match(self) -> bool:
        return self.exact_match is not None

    @property
    def is_clear(self) -> bool:
        return self.exact_match is None and not self.similar_stores


def normalize_website_url(url: str | None) -> str | None:
    """Canonical comparison form: ``scheme://host/path``, lowercase, no ``www.``.

    A missing scheme is read as ``https``. Query strings and fragments are dropped.
    """

    if url is None:
        return None
    raw = url.strip().lower()
    if not raw:
        return None
    if "://" not in raw:
        raw = f"https://{raw}"
    parts = urlsplit(raw)
    host = parts.hostname or ""
    host = host.removeprefix("www.")
    path = parts.path.rstrip("/")
    return f"{parts.scheme}://{host}{path}"


def check_duplicate_store(
    stores: StoreRepository,
    candidate: StoreCandidate,
    *,
    similar_limit: int = DEFAULT_SIMILAR_STORE_LIMIT,
) -> DuplicateCheck:
    """Look for an existing store the candidate would duplicate.

    Physical stores match exactly on the external place id. Online and
    brand-direct stores match each other on case-insensitive name plus
    normalized website URL. Same-name, same-type stores are returned as
    advisory matches. Rejected stores never match.
    """

    name = candidate.name.strip()
    if candidate.is_physical:
        if candidate.place_id:
            existing = stores.find_by_place_id(candidate.place_id)
            if existing is not None:
                log.info("Store %r matches %s by place id", name, existing.id)
                return DuplicateCheck(exact_match=existing)
    else:
        candidate_url = normalize_website_url(candidate.website_url)
        if candidate_url is not None:
            for existing in stores.find_by_name(name):
                if existing.is_physical:
                    continue
                if normalize_website_url(existing.website_url) == candidate_url:
                    log.info("Store %r matches %s by website", name, existing.id)
                    return DuplicateCheck(exact_match=existing)

    similar = stores.find_by_name(name, store_type=candidate.store_type, limit=similar_limit)
    return DuplicateCheck(similar_stores=list(similar))
