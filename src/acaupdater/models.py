"""Shared domain models for acaupdater."""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class InvocationParameters:
    """Inputs supplied by the invoking environment for a single run."""

    app_name: str
    container_name: str
    resource_group_name: str
    image: str
    subscription_id: Optional[str] = None

    REQUIRED_INPUTS = (
        ("app_name", "app-name"),
        ("container_name", "container-name"),
        ("resource_group_name", "resource-group-name"),
        ("image", "image"),
    )

    def __post_init__(self):
        for name in ("app_name", "container_name", "resource_group_name", "image"):
            object.__setattr__(self, name, (getattr(self, name) or "").strip())
        subscription_id = (self.subscription_id or "").strip()
        object.__setattr__(self, "subscription_id", subscription_id or None)

    def missing_fields(self) -> List[str]:
        return [label for name, label in self.REQUIRED_INPUTS if not getattr(self, name)]


@dataclass(frozen=True)
class AzureContext:
    """Credential and subscription scoped to one invocation."""

    credential: Any = field(repr=False)
    subscription_id: str
    subscription_source: str


@dataclass(frozen=True)
class Outcome:
    status: str
    container_app: Dict[str, Any]

    def to_json(self) -> str:
        return json.dumps(self.container_app, default=str, sort_keys=True)
