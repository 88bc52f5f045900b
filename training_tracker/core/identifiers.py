"""Opaque identifier types."""

import uuid
from typing import NewType

# Shared token of all sets in one superset group. Never compared with plain strings.
SupersetId = NewType("SupersetId", uuid.UUID)


def new_superset_id() -> SupersetId:
    return SupersetId(uuid.uuid4())
