"""
Board Model - Grid of cells with orb counts, ownership and capacity.

Design principles:
- Value semantics: engine operations copy the board, never mutate it
- Capacity is geometry: corners 2, edges 3, interior 4
- Plain-data friendly: boards convert to and from dicts for hosts

Storage is row-major (index = y * width + x) in two flat lists so that
copies stay cheap during AI search. Cell objects are views built on demand.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Iterable

from .errors import InvalidBoardError


# left, right, up, down
DIRECTIONS: tuple[tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))


def capacity_of(x: int, y: int, width: int, height: int) -> int:
    """
    Critical mass of the cell at (x, y).

    Corner (both coordinates on the boundary) = 2, edge (exactly one) = 3,
    interior = 4.
    """
    on_x_edge = x == 0 or x == width - 1
    on_y_edge = y == 0 or y == height - 1
    if on_x_edge and on_y_edge:
        return 2
    if on_x_edge or on_y_edge:
        return 3
    return 4


def neighbors(x: int, y: int, width: int, height: int) -> list[tuple[int, int]]:
    """Orthogonal neighbors of (x, y), clipped to the grid (no wraparound)."""
    result = []
    for dx, dy in DIRECTIONS:
        nx, ny = x + dx, y + dy
        if 0 <= nx < width and 0 <= ny < height:
            result.append((nx, ny))
    return result


@lru_cache(maxsize=64)
def neighbor_table(width: int, height: int) -> tuple[tuple[int, ...], ...]:
    """Neighbor indices for every cell of a width x height grid."""
    table = []
    for y in range(height):
        for x in range(width):
            table.append(tuple(ny * width + nx for nx, ny in neighbors(x, y, width, height)))
    return tuple(table)


@lru_cache(maxsize=64)
def capacity_table(width: int, height: int) -> tuple[int, ...]:
    """Capacities of every cell of a width x height grid, row-major."""
    return tuple(
        capacity_of(x, y, width, height)
        for y in range(height)
        for x in range(width)
    )


@dataclass
class Cell:
    """
    A single cell, as seen by callers.

    Built from the board's flat storage; editing it does not change the board.
    """
    orb_count: int = 0
    owner: int | None = None
    capacity: int = 4
    exploding: bool = False

    @property
    def is_empty(self) -> bool:
        return self.orb_count == 0

    @property
    def is_critical(self) -> bool:
        """At or above capacity - will explode when resolved."""
        return self.orb_count >= self.capacity

    @property
    def is_primed(self) -> bool:
        """One orb away from exploding."""
        return self.orb_count == self.capacity - 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "orb_count": self.orb_count,
            "owner": self.owner,
            "capacity": self.capacity,
        }


@dataclass
class Board:
    """
    Complete board at a point in time.

    `exploding` is only populated on observer snapshots produced while a
    cascade is resolving; it is excluded from equality.
    """
    width: int
    height: int
    orbs: list[int]
    owners: list[int | None]
    capacities: tuple[int, ...]
    exploding: frozenset[int] = field(default_factory=frozenset, compare=False)

    @property
    def area(self) -> int:
        return self.width * self.height

    def index(self, x: int, y: int) -> int:
        return y * self.width + x

    def position(self, index: int) -> tuple[int, int]:
        return index % self.width, index // self.width

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def cell(self, x: int, y: int) -> Cell:
        """Get the cell at (x, y)."""
        if not self.in_bounds(x, y):
            raise IndexError(f"({x}, {y}) is outside a {self.width}x{self.height} board")
        i = self.index(x, y)
        return Cell(
            orb_count=self.orbs[i],
            owner=self.owners[i],
            capacity=self.capacities[i],
            exploding=i in self.exploding,
        )

    def rows(self) -> list[list[Cell]]:
        return [[self.cell(x, y) for x in range(self.width)] for y in range(self.height)]

    def copy(self) -> Board:
        return Board(
            width=self.width,
            height=self.height,
            orbs=self.orbs.copy(),
            owners=self.owners.copy(),
            capacities=self.capacities,
        )

    def total_orbs(self) -> int:
        return sum(self.orbs)

    def orbs_of(self, player: int) -> int:
        """Total orbs owned by a player."""
        return sum(n for n, o in zip(self.orbs, self.owners) if o == player)

    def cells_of(self, player: int) -> int:
        """Number of cells owned by a player."""
        return sum(1 for o in self.owners if o == player)

    def corners(self) -> list[tuple[int, int]]:
        """Distinct corner positions (fewer than 4 on a 1-wide board)."""
        positions = [
            (0, 0),
            (self.width - 1, 0),
            (0, self.height - 1),
            (self.width - 1, self.height - 1),
        ]
        return list(dict.fromkeys(positions))

    def corners_of(self, player: int) -> int:
        return sum(1 for x, y in self.corners() if self.owners[self.index(x, y)] == player)

    def critical_indices(self) -> list[int]:
        """Indices of cells at or above capacity, row-major."""
        return [
            i for i, (n, cap) in enumerate(zip(self.orbs, self.capacities))
            if n >= cap
        ]

    def is_stable(self) -> bool:
        return not self.critical_indices()

    def to_rows(self) -> list[list[dict[str, Any]]]:
        """Plain-data representation, one dict per cell."""
        return [[c.to_dict() for c in row] for row in self.rows()]

    @classmethod
    def from_layout(
        cls,
        width: int,
        height: int,
        layout: Iterable[dict[str, Any]] = (),
    ) -> Board:
        """
        Build a board from a sparse layout.

        Each entry is {"x", "y", "orbs", "owner"} ("orb_count" is accepted
        for "orbs"). Entries must be in bounds, below capacity and owned iff
        they hold orbs.

        Raises:
            InvalidBoardError: If the dimensions or any entry are invalid
        """
        board = create_board(width, height)
        seen: set[int] = set()
        errors: list[str] = []

        for entry in layout:
            x, y = entry.get("x"), entry.get("y")
            count = entry.get("orbs", entry.get("orb_count", 0))
            owner = entry.get("owner")
            if not isinstance(x, int) or not isinstance(y, int) or not board.in_bounds(x, y):
                errors.append(f"cell ({x}, {y}) is out of bounds")
                continue
            i = board.index(x, y)
            if i in seen:
                errors.append(f"cell ({x}, {y}) is listed twice")
                continue
            seen.add(i)
            if not isinstance(count, int) or count < 0:
                errors.append(f"cell ({x}, {y}) has invalid orb count {count!r}")
                continue
            if count >= board.capacities[i]:
                errors.append(f"cell ({x}, {y}) holds {count} orbs, capacity is {board.capacities[i]}")
                continue
            if (count > 0) != (owner is not None):
                errors.append(f"cell ({x}, {y}) must have an owner iff it holds orbs")
                continue
            board.orbs[i] = count
            board.owners[i] = owner

        if errors:
            raise InvalidBoardError("; ".join(errors))
        return board


def create_board(width: int, height: int) -> Board:
    """
    Create an empty board.

    Raises:
        InvalidBoardError: If either dimension is not a positive integer
    """
    if not isinstance(width, int) or not isinstance(height, int) or isinstance(width, bool) \
            or isinstance(height, bool):
        raise InvalidBoardError(f"Board dimensions must be integers, got {width!r}x{height!r}")
    if width < 1 or height < 1:
        raise InvalidBoardError(f"Board dimensions must be positive, got {width}x{height}")

    size = width * height
    return Board(
        width=width,
        height=height,
        orbs=[0] * size,
        owners=[None] * size,
        capacities=capacity_table(width, height),
    )


def can_place_orb(board: Board, x: int, y: int, player: int) -> bool:
    """True iff (x, y) is on the board and empty or already owned by player."""
    if not board.in_bounds(x, y):
        return False
    i = board.index(x, y)
    return board.orbs[i] == 0 or board.owners[i] == player


def legal_moves(board: Board, player: int) -> list[tuple[int, int]]:
    """All cells the player may place into, in row-major order."""
    moves = []
    for i, (count, owner) in enumerate(zip(board.orbs, board.owners)):
        if count == 0 or owner == player:
            moves.append(board.position(i))
    return moves
