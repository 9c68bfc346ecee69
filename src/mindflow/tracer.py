"""
Debug tracing for layout passes.

Pass a LayoutTrace to a layout call to keep what each step computed:

1. measure - root box size and the extent of the whole tree
2. place - (x, y) of every node
3. bounds - the union bounding box

Usage:
    >>> trace = LayoutTrace()
    >>> result = compute_layout(root, "HS", trace=trace)
    >>> print(trace.summary())
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

# Longest value rendering kept in a stage listing.
MAX_VALUE_CHARS = 100


@dataclass
class LayoutStage:
    """Data recorded by one layout step."""

    name: str
    data: Dict[str, Any]

    def __str__(self) -> str:
        lines = [f"[{self.name}]"]
        for key in sorted(self.data):
            text = repr(self.data[key])
            if len(text) > MAX_VALUE_CHARS:
                text = text[:MAX_VALUE_CHARS] + "..."
            lines.append(f"  {key} = {text}")
        return "\n".join(lines)


@dataclass
class LayoutTrace:
    """
    Steps recorded during one layout pass.

    Attributes:
        stages: Recorded steps, in the order they ran.
        direction: Persisted code of the direction the pass used.
    """

    stages: List[LayoutStage] = field(default_factory=list)
    direction: str = ""

    def add_stage(self, name: str, data: Dict[str, Any]) -> None:
        """Record a step. ``data`` is copied, so callers may reuse it."""
        self.stages.append(LayoutStage(name, dict(data)))

    def get_stage(self, name: str) -> Optional[LayoutStage]:
        return next((stage for stage in self.stages if stage.name == name), None)

    def summary(self) -> str:
        """One line naming the direction, the steps and the node count."""
        names = " -> ".join(stage.name for stage in self.stages) or "no steps"
        place = self.get_stage("place")
        count = len(place.data.get("positions", {})) if place is not None else 0
        return f"layout {self.direction or '?'}: {names} ({count} nodes placed)"

    def dump(self) -> str:
        """The summary followed by the data of every step."""
        return "\n\n".join([self.summary()] + [str(stage) for stage in self.stages])

    def dump_to_file(self, filename: str) -> None:
        with open(filename, "w", encoding="utf-8") as f:
            f.write(self.dump() + "\n")
