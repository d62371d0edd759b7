from dataclasses import dataclass
from enum import Enum


class ConnectionRole(Enum):
    THROUGH = "through"
    LEFT_BRANCH = "left-branch"
    RIGHT_BRANCH = "right-branch"
    POINT_TIP = "point-tip"
    OTHER = "other"  # track ends, crossings ... never adjacent


class EffectiveDirection(Enum):
    FORWARD = "forward"  # PlanPro "in"
    REVERSE = "reverse"  # PlanPro "gegen"
    BOTH = "both"  # PlanPro "beide"

    def flipped(self) -> "EffectiveDirection":
        if self is EffectiveDirection.FORWARD:
            return EffectiveDirection.REVERSE
        if self is EffectiveDirection.REVERSE:
            return EffectiveDirection.FORWARD
        return self


# Core graph type used by the topology engine
@dataclass(frozen=True)
class Edge:
    id: str
    node_a: str
    node_b: str
    role_a: ConnectionRole
    role_b: ConnectionRole
    length_mm: int

    def node(self, ascending: bool) -> str:
        """Node reached when leaving the edge in the given direction."""
        return self.node_b if ascending else self.node_a

    def role(self, ascending: bool) -> ConnectionRole:
        return self.role_b if ascending else self.role_a


def heading(direction: EffectiveDirection, forward: bool) -> bool:
    """True if moving `forward` relative to `direction` means ascending A -> B.

    `both` is treated like `forward`.
    """
    return (direction is not EffectiveDirection.REVERSE) == forward
