"""
Board generation and grid access.

The board is a fixed-size square grid of Cells, stored row-major and
addressed by (x, y). Generation assigns terrain to every cell by weighted
random choice, seeds neutral fortresses with a garrison, then drops one King
per team at a uniformly random cell.
"""

import copy
import random
from itertools import accumulate
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from models import Cell, CellKind, Position, Team

# Terrain weights Open:Mountain:Fortress
DEFAULT_TERRAIN_WEIGHTS = (100, 10, 3)
# Neutral fortress garrison, drawn from [low, high)
DEFAULT_FORTRESS_UNITS = (40, 50)
DEFAULT_KING_UNITS = 0

KIND_CODES = {kind: code for code, kind in enumerate(CellKind)}


class Board:
    """
    Square grid of Cells.

    `get`/`get_mut`/`set` are trusted accessors and raise IndexError on
    off-board coordinates; `try_get` is the untrusted variant and returns None.
    """

    def __init__(self, cells: List[List[Cell]]):
        self._cells = cells

    @classmethod
    def empty(cls, size: int) -> "Board":
        """Build a size x size board of Open cells."""
        if size < 1:
            raise ValueError("Board needs at least one cell.")
        return cls([[Cell.open() for _ in range(size)] for _ in range(size)])

    @property
    def width(self) -> int:
        return len(self._cells[0])

    @property
    def height(self) -> int:
        return len(self._cells)

    @property
    def dimens(self) -> Tuple[int, int]:
        return (self.width, self.height)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def _check(self, x: int, y: int) -> None:
        if not self.in_bounds(x, y):
            raise IndexError(f"Position {(x, y)} is outside the {self.width}x{self.height} board")

    def get(self, x: int, y: int) -> Cell:
        self._check(x, y)
        return self._cells[y][x]

    def get_mut(self, x: int, y: int) -> Cell:
        """Return the live cell at (x, y) for in-place mutation."""
        self._check(x, y)
        return self._cells[y][x]

    def try_get(self, x: int, y: int) -> Optional[Cell]:
        """Return the cell at (x, y), or None when the query falls off the board."""
        if not self.in_bounds(x, y):
            return None
        return self._cells[y][x]

    def set(self, x: int, y: int, cell: Cell) -> None:
        """Replace the cell at (x, y), e.g. when its kind changes."""
        self._check(x, y)
        self._cells[y][x] = cell

    def cells(self) -> List[List[Cell]]:
        """Snapshot of the whole grid; mutating it does not touch the board."""
        return copy.deepcopy(self._cells)

    def iter_cells(self):
        """Yield ((x, y), cell) for every live cell in row-major order."""
        for y, row in enumerate(self._cells):
            for x, cell in enumerate(row):
                yield (x, y), cell

    def king_positions(self) -> Dict[Team, List[Position]]:
        kings: Dict[Team, List[Position]] = {}
        for position, cell in self.iter_cells():
            if cell.kind == CellKind.KING:
                kings.setdefault(cell.owner, []).append(position)
        return kings

    def randomize(
        self,
        num_players: int,
        rng: Optional[random.Random] = None,
        terrain_weights: Sequence[int] = DEFAULT_TERRAIN_WEIGHTS,
        fortress_units: Tuple[int, int] = DEFAULT_FORTRESS_UNITS,
        king_units: int = DEFAULT_KING_UNITS,
    ) -> None:
        """
        Fill the board with random terrain and place one King per team.

        Each cell independently draws Open, Mountain or a neutral Fortress by
        weight; fortresses get a garrison drawn uniformly from
        `fortress_units`. Kings are then dropped at uniformly random cells,
        one per team in index order. Kings may overwrite any terrain,
        including an earlier King.

        Args:
            num_players: Number of teams, one King each
            rng: Random source (defaults to a fresh unseeded Random)
            terrain_weights: Open, Mountain, Fortress weights
            fortress_units: Half-open [low, high) range for fortress garrisons
            king_units: Starting units of every King
        """
        if num_players < 1:
            raise ValueError("At least one player is required.")
        rng = rng or random.Random()
        low, high = fortress_units

        for y in range(self.height):
            for x in range(self.width):
                kind = choose_terrain(rng, terrain_weights)
                if kind == CellKind.FORTRESS:
                    self._cells[y][x] = Cell.fortress(None, rng.randrange(low, high))
                elif kind == CellKind.MOUNTAIN:
                    self._cells[y][x] = Cell.mountain()
                else:
                    self._cells[y][x] = Cell.open()

        for team in range(num_players):
            x, y = rng.randrange(self.width), rng.randrange(self.height)
            self._cells[y][x] = Cell.king(team, king_units)

    def to_arrays(self) -> Dict[str, np.ndarray]:
        """
        Vectorized view of the grid for renderers and statistics.

        Returns:
            Dict of (height, width) int arrays: 'kind' (CellKind code),
            'owner' (-1 for none) and 'units'
        """
        kinds = np.zeros((self.height, self.width), dtype=np.int8)
        owners = np.full((self.height, self.width), -1, dtype=np.int32)
        units = np.zeros((self.height, self.width), dtype=np.int64)
        for (x, y), cell in self.iter_cells():
            kinds[y, x] = KIND_CODES[cell.kind]
            if cell.owner is not None:
                owners[y, x] = cell.owner
            units[y, x] = cell.units
        return {'kind': kinds, 'owner': owners, 'units': units}


def choose_terrain(rng: random.Random, weights: Sequence[int] = DEFAULT_TERRAIN_WEIGHTS) -> CellKind:
    """Weighted draw between Open, Mountain and Fortress (cumulative weights, bisected)."""
    return rng.choices(
        (CellKind.OPEN, CellKind.MOUNTAIN, CellKind.FORTRESS),
        cum_weights=list(accumulate(weights)),
    )[0]


def generate_board(
    size: int,
    num_players: int,
    rng: Optional[random.Random] = None,
    **options,
) -> Board:
    """Build an empty board of `size` and randomize it for `num_players` teams."""
    board = Board.empty(size)
    board.randomize(num_players, rng=rng, **options)
    return board


def board_statistics(board: Board) -> Dict:
    """
    Count cells per kind and, per owning team, cells held and total units.

    Args:
        board: Board to summarize

    Returns:
        {'size': (w, h), 'kinds': {kind: count}, 'teams': {team: {'cells': n, 'units': n}}}
    """
    arrays = board.to_arrays()
    kind_counts = np.bincount(arrays['kind'].ravel(), minlength=len(KIND_CODES))
    owners = arrays['owner']
    teams = {}
    for team in np.unique(owners[owners >= 0]):
        mask = owners == team
        teams[int(team)] = {
            'cells': int(mask.sum()),
            'units': int(arrays['units'][mask].sum()),
        }
    return {
        'size': board.dimens,
        'kinds': {kind.value: int(kind_counts[code]) for kind, code in KIND_CODES.items()},
        'teams': teams,
    }
