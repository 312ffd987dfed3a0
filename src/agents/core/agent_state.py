from dataclasses import dataclass, field
from typing import Any, List, Tuple

@dataclass
class AgentState:
    # Chronological (role, text) pairs loaded from memory for the current run.
    history: List[Tuple[str, str]] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
