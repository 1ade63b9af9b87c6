# Models for the grid, its cells, movement directions and player queues

from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Deque, NamedTuple, Optional, Tuple

Team = int  # Team index: 0..num_players-1
Position = Tuple[int, int]  # (x, y), 0-indexed


class CellError(Exception):
    """Raised when a cell is used outside its contract (e.g. units on a Mountain)."""
    pass


class CellKind(Enum):
    MOUNTAIN = "mountain"
    OPEN = "open"
    FORTRESS = "fortress"
    KING = "king"
    CAPTURED = "captured"


UNIT_BEARING = (CellKind.FORTRESS, CellKind.KING, CellKind.CAPTURED)


@dataclass
class Cell:
    """
    One grid square.

    Mountain and Open cells never carry an owner or units. Fortress cells may
    be neutral (owner None); King and Captured cells always have an owner.
    """
    kind: CellKind
    owner: Optional[Team] = None  # Owning team, None for neutral/unowned
    units: int = 0  # Unit count, only meaningful for unit-bearing kinds

    def __post_init__(self) -> None:
        if self.kind in UNIT_BEARING:
            if self.units < 0:
                raise CellError(f"Cell {self} has a negative unit count")
            if self.kind != CellKind.FORTRESS and self.owner is None:
                raise CellError(f"{self.kind.value} cell requires an owner")
        elif self.owner is not None or self.units:
            raise CellError(f"{self.kind.value} cell cannot have an owner or units")

    @classmethod
    def mountain(cls) -> "Cell":
        return cls(CellKind.MOUNTAIN)

    @classmethod
    def open(cls) -> "Cell":
        return cls(CellKind.OPEN)

    @classmethod
    def fortress(cls, owner: Optional[Team], units: int) -> "Cell":
        return cls(CellKind.FORTRESS, owner, units)

    @classmethod
    def king(cls, owner: Team, units: int) -> "Cell":
        return cls(CellKind.KING, owner, units)

    @classmethod
    def captured(cls, owner: Team, units: int) -> "Cell":
        return cls(CellKind.CAPTURED, owner, units)

    @property
    def bears_units(self) -> bool:
        return self.kind in UNIT_BEARING

    def is_controlled_by(self, team: Team) -> bool:
        """True iff this is a Fortress/King/Captured cell owned by `team`."""
        return self.bears_units and self.owner is not None and self.owner == team

    def take_units(self) -> int:
        """
        Drain the cell down to its garrison of 1.

        A cell left at 0 by a tied defence has nothing to move and stays at 0.

        Returns:
            The number of units that left the cell (count - 1, never negative)

        Raises:
            CellError: if the cell does not bear units
        """
        if not self.bears_units:
            raise CellError(f"Cell {self} has no units!")
        moved = max(self.units - 1, 0)
        self.units = min(self.units, 1)
        return moved

    def give_units(self, amount: int) -> None:
        """Add `amount` units to a unit-bearing cell."""
        if not self.bears_units:
            raise CellError(f"Cell {self} has no units!")
        self.units += amount

    def to_dict(self) -> dict:
        return {'kind': self.kind.value, 'owner': self.owner, 'units': self.units}


class Direction(Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    def to_xy(self) -> Tuple[int, int]:
        """Unit displacement (dx, dy); y grows downwards."""
        return DIRECTION_VECTORS[self]

    def step_from(self, position: Position, width: int, height: int) -> Optional[Position]:
        """
        Neighbor of `position` in this direction, clipped to the grid.

        Returns:
            The neighbor position, or None if it falls outside [0, width) x [0, height)
        """
        x, y = position
        if self == Direction.UP:
            return None if y == 0 else (x, y - 1)
        if self == Direction.DOWN:
            return None if y >= height - 1 else (x, y + 1)
        if self == Direction.LEFT:
            return None if x == 0 else (x - 1, y)
        return None if x >= width - 1 else (x + 1, y)


DIRECTION_VECTORS = {
    Direction.UP: (0, -1),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
}


class Move(NamedTuple):
    """A queued push of units from `source` one step in `direction`."""
    source: Position
    direction: Direction

    @property
    def target(self) -> Position:
        dx, dy = self.direction.to_xy()
        return (self.source[0] + dx, self.source[1] + dy)


@dataclass
class PlayerState:
    """
    Per-team movement queue.

    Moves are appended at the back by producers and drained one per tick from
    the front. `dead` is an external signal slot; the tick engine never reads
    or writes it.
    """
    moves: Deque[Move] = field(default_factory=deque)
    dead: bool = False
    focus: Optional[Position] = None  # Cursor used by directional enqueueing

    def push_move(self, move: Move) -> None:
        self.moves.append(move)

    def pop_move(self) -> Optional[Move]:
        """Remove and return the oldest queued move, or None if the queue is empty."""
        if not self.moves:
            return None
        return self.moves.popleft()

    def clear_movement_queue(self) -> None:
        self.moves.clear()
