from __future__ import annotations

import pytest
from pydantic import ValidationError

from shelfwise.domain.model import StoreType
from shelfwise.ui.schema import ProductDraftPayload, StoreCandidatePayload


def test_store_payload_accepts_aliases_and_blanks() -> None:
    payload = StoreCandidatePayload.model_validate(
        {
            "name": "  Green Grocer ",
            "store_type": "online_retailer",
            "website": "https://green.example/",
            "zip": "  ",
            "phone": "555-0100",
            "unexpected": "ignored",
        }
    )

    candidate = payload.to_candidate()

    assert candidate.name == "Green Grocer"
    assert candidate.store_type is StoreType.ONLINE_RETAILER
    assert candidate.website_url == "https://green.example/"
    assert candidate.zip_code is None
    assert candidate.phone_number == "555-0100"
    assert candidate.country == "US"


def test_store_payload_requires_a_name() -> None:
    with pytest.raises(ValidationError):
        StoreCandidatePayload.model_validate({"name": "   "})
    with pytest.raises(ValidationError):
        StoreCandidatePayload.model_validate({"city": "Portland"})


def test_store_payload_rejects_unknown_store_type() -> None:
    with pytest.raises(ValidationError):
        StoreCandidatePayload.model_validate({"name": "Shop", "store_type": "kiosk"})


def test_product_payload_splits_label_strings() -> None:
    payload = ProductDraftPayload.model_validate_json(
        '{"name": "Oat Milk", "brand": "Acme", "size": "1 L",'
        ' "tags": "vegan, gluten-free, ", "categories": ["Dairy Alternatives"],'
        ' "description": ""}'
    )

    draft = payload.to_draft()

    assert draft.size_or_variant == "1 L"
    assert draft.tags == ["vegan", "gluten-free"]
    assert draft.categories == ["Dairy Alternatives"]
    assert draft.description is None


def test_product_payload_accepts_field_names() -> None:
    payload = ProductDraftPayload.model_validate(
        {"name": "Oat Milk", "brand": "Acme", "size_or_variant": "2 L"}
    )

    assert payload.size_or_variant == "2 L"
    assert payload.tags == []


def test_product_payload_requires_size() -> None:
    with pytest.raises(ValidationError):
        ProductDraftPayload.model_validate({"name": "Oat Milk", "brand": "Acme"})
