from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(slots=True)
class PlanSpec:
    task: str
    descriptor: dict[str, Any] = field(default_factory=dict)
    context: dict[str, Any] = field(default_factory=dict)
