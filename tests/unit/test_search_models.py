"""Unit tests for model variant resolution and model list augmentation."""

import pytest

from gemini_gateway.conversion.search_models import (
    ModelVariant,
    augment_models,
    is_search_eligible,
    resolve_model_variant,
)


@pytest.mark.unit
class TestResolveModelVariant:
    def test_search_suffix_is_stripped(self):
        variant = resolve_model_variant("gemini-2.5-flash-search")

        assert variant == ModelVariant(
            requested_model="gemini-2.5-flash-search",
            upstream_model="gemini-2.5-flash",
            search_enabled=True,
        )

    def test_plain_model_is_forwarded_unchanged(self):
        variant = resolve_model_variant("gemini-2.5-flash")

        assert variant.upstream_model == "gemini-2.5-flash"
        assert variant.search_enabled is False

    def test_only_trailing_suffix_counts(self):
        variant = resolve_model_variant("gemini-search-2.5")

        assert variant.upstream_model == "gemini-search-2.5"
        assert variant.search_enabled is False

    def test_bare_suffix_is_not_a_search_variant(self):
        variant = resolve_model_variant("-search")

        assert variant.upstream_model == "-search"
        assert variant.search_enabled is False

    def test_only_one_suffix_is_removed(self):
        variant = resolve_model_variant("gemini-2.5-pro-search-search")

        assert variant.upstream_model == "gemini-2.5-pro-search"
        assert variant.search_enabled is True


@pytest.mark.unit
@pytest.mark.parametrize(
    "model_id, eligible",
    [
        ("gemini-2.0-flash", True),
        ("gemini-2.5-pro", True),
        ("gemini-3.0-ultra", True),
        ("gemini-1.5-pro", False),
        ("gemini-2.5-flash-search", False),
        ("text-embedding-004", False),
        ("models/gemini-2.5-pro", False),
        ("gemini-2-flash", False),
    ],
)
def test_is_search_eligible(model_id, eligible):
    assert is_search_eligible(model_id) is eligible


@pytest.mark.unit
class TestAugmentModels:
    def test_appends_search_entries_after_originals(self):
        models = [
            {"id": "gemini-2.5-flash", "created": 1700000000, "owned_by": "google"},
            {"id": "gemini-1.5-pro", "created": 1600000000, "owned_by": "google"},
            {"id": "gemini-2.0-flash", "created": 1650000000, "owned_by": "google"},
        ]

        result = augment_models(models)

        assert [m["id"] for m in result] == [
            "gemini-2.5-flash",
            "gemini-1.5-pro",
            "gemini-2.0-flash",
            "gemini-2.5-flash-search",
            "gemini-2.0-flash-search",
        ]

    def test_derived_entry_copies_original_fields(self):
        models = [
            {
                "id": "gemini-2.5-pro",
                "object": "model",
                "created": 1700000000,
                "owned_by": "google-deepmind",
            }
        ]

        derived = augment_models(models)[1]

        assert derived == {
            "id": "gemini-2.5-pro-search",
            "object": "model",
            "created": 1700000000,
            "owned_by": "google-deepmind",
        }

    def test_missing_created_and_owner_get_defaults(self):
        derived = augment_models([{"id": "gemini-2.5-pro"}], now=1234567890)[1]

        assert derived["created"] == 1234567890
        assert derived["owned_by"] == "google"

    def test_falsy_created_and_owner_get_defaults(self):
        derived = augment_models([{"id": "gemini-2.5-pro", "created": 0, "owned_by": ""}], now=42)[1]

        assert derived["created"] == 42
        assert derived["owned_by"] == "google"

    def test_input_is_not_modified(self):
        models = [{"id": "gemini-2.5-pro", "created": 1}]

        augment_models(models)

        assert models == [{"id": "gemini-2.5-pro", "created": 1}]

    def test_existing_search_entry_is_not_duplicated(self):
        models = [
            {"id": "gemini-2.5-pro", "created": 1, "owned_by": "google"},
            {"id": "gemini-2.5-pro-search", "created": 1, "owned_by": "google"},
        ]

        assert augment_models(models) == models

    def test_augmentation_is_idempotent(self):
        once = augment_models([{"id": "gemini-2.5-flash", "created": 1, "owned_by": "google"}])

        assert augment_models(once) == once

    def test_empty_list(self):
        assert augment_models([]) == []
