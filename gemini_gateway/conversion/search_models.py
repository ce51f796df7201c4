"""Search-augmented model variants.

A model id ending in "-search" is not a real upstream model: it is the plain
model with the Google Search tool attached. This module decides which variant
a request targets and derives the synthetic entries shown by /v1/models.
"""

import re
import time
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from gemini_gateway.core.constants import Constants

_SEARCH_ELIGIBLE = re.compile(Constants.SEARCH_ELIGIBLE_MODEL_PATTERN)


@dataclass(frozen=True)
class ModelVariant:
    """Resolved target of a chat request.

    Attributes:
        requested_model: Model id as sent by the client
        upstream_model: Model id forwarded upstream
        search_enabled: Whether the search tool must be injected
    """

    requested_model: str
    upstream_model: str
    search_enabled: bool


def resolve_model_variant(model: str) -> ModelVariant:
    """Split a requested model id into upstream model and search flag.

    Only a trailing suffix counts, and a bare "-search" is left alone
    since it has no base model to strip down to.
    """
    suffix = Constants.SEARCH_MODEL_SUFFIX
    if model.endswith(suffix) and len(model) > len(suffix):
        return ModelVariant(
            requested_model=model,
            upstream_model=model[: -len(suffix)],
            search_enabled=True,
        )
    return ModelVariant(requested_model=model, upstream_model=model, search_enabled=False)


def is_search_eligible(model_id: str) -> bool:
    """True for gemini-2.x and later models that are not search variants yet."""
    return bool(_SEARCH_ELIGIBLE.match(model_id)) and not model_id.endswith(
        Constants.SEARCH_MODEL_SUFFIX
    )


def augment_models(
    models: Iterable[dict[str, Any]], *, now: int | None = None
) -> list[dict[str, Any]]:
    """Append a "-search" sibling for every eligible model.

    Originals keep their upstream order and come first, followed by the
    derived entries in the same relative order. A derived id that is
    already listed is not added again.

    Args:
        models: Model descriptors as returned by the upstream list call
        now: Unix timestamp used when a model has no ``created`` value

    Returns:
        A new list; the input descriptors are not modified.
    """
    originals = [model for model in models if isinstance(model, dict)]
    known_ids = {model.get("id") for model in originals}
    created_default = int(time.time()) if now is None else now

    derived: list[dict[str, Any]] = []
    for model in originals:
        model_id = model.get("id")
        if not isinstance(model_id, str) or not is_search_eligible(model_id):
            continue

        search_id = f"{model_id}{Constants.SEARCH_MODEL_SUFFIX}"
        if search_id in known_ids:
            continue
        known_ids.add(search_id)

        derived.append(
            {
                **model,
                "id": search_id,
                "created": model.get("created") or created_default,
                "owned_by": model.get("owned_by") or Constants.DEFAULT_OWNED_BY,
            }
        )

    return originals + derived
