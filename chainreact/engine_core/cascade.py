"""
Cascade Simulation - Applies moves and resolves chain reactions.

A move adds one orb to a cell. Any cell at or above its capacity then
explodes: it is emptied and each neighbor gains one orb and is converted
to the exploding cell's owner. Explosions run in rounds:

1. Snapshot every cell at/over capacity (row-major)
2. Empty all of them
3. Distribute one orb to each neighbor of each exploder, in snapshot order
4. Repeat until stable or the round cap is reached

When two exploders of different owners feed the same neighbor in one round,
the later exploder in row-major order claims it.

Two execution modes share the same round function and give identical
results:
- Observable: iter_cascade() yields each round before it bursts, or
  resolve_cascade(on_round=...) calls back once per round
- Synchronous: resolve_cascade() / settle() / simulate_move() run to
  completion in one call (settle skips the explosion trace)
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable, Generator
import logging

from .. import config
from .board import Board, can_place_orb, neighbor_table
from .errors import InvalidMoveError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Explosion:
    """One cell bursting during a cascade round."""
    x: int
    y: int
    owner: int | None
    orb_count: int  # Orbs in the cell when it burst

    def to_dict(self) -> dict[str, Any]:
        return {"x": self.x, "y": self.y, "owner": self.owner, "orb_count": self.orb_count}


@dataclass
class CascadeRound:
    """
    A single round, as seen by an observer.

    `board` is the pre-burst snapshot with the exploding cells flagged.
    """
    number: int
    explosions: tuple[Explosion, ...]
    board: Board


@dataclass
class CascadeResult:
    """
    Result of resolving a board to stability.

    explosion_history holds one tuple of explosions per round.
    capped is True only if the round cap stopped resolution early.
    """
    final_board: Board
    explosion_history: tuple[tuple[Explosion, ...], ...] = ()
    round_count: int = 0
    capped: bool = False

    @property
    def explosion_count(self) -> int:
        return sum(len(r) for r in self.explosion_history)

    @property
    def had_explosion(self) -> bool:
        return self.round_count > 0

    @property
    def is_chain_reaction(self) -> bool:
        """More than one round, or more than one explosion within a round."""
        return self.round_count > 1 or any(len(r) > 1 for r in self.explosion_history)

    def to_dict(self) -> dict[str, Any]:
        return {
            "round_count": self.round_count,
            "explosion_count": self.explosion_count,
            "capped": self.capped,
            "explosion_history": [[e.to_dict() for e in r] for r in self.explosion_history],
        }


def apply_move(board: Board, x: int, y: int, player: int) -> Board:
    """
    Place one orb for player at (x, y) and return the new board.

    The result may be unstable; resolve it with resolve_cascade().

    Raises:
        InvalidMoveError: If can_place_orb() rejects the placement
    """
    if not can_place_orb(board, x, y, player):
        reason = "out of bounds" if not board.in_bounds(x, y) else "cell owned by another player"
        raise InvalidMoveError(x, y, player, reason)

    new_board = board.copy()
    i = new_board.index(x, y)
    new_board.orbs[i] += 1
    new_board.owners[i] = player
    return new_board


def _burst(board: Board, critical: list[int]) -> set[int]:
    """Explode every cell in `critical` in place. Returns the touched neighbors."""
    table = neighbor_table(board.width, board.height)
    orbs, owners = board.orbs, board.owners

    exploders = [(i, owners[i]) for i in critical]
    for i in critical:
        orbs[i] = 0
        owners[i] = None

    touched: set[int] = set()
    for i, owner in exploders:
        for n in table[i]:
            orbs[n] += 1
            owners[n] = owner
            touched.add(n)
    return touched


def _next_critical(board: Board, touched: set[int]) -> list[int]:
    return sorted(n for n in touched if board.orbs[n] >= board.capacities[n])


def _rounds(
    work: Board,
    max_rounds: int,
) -> Generator[tuple[int, list[int]], None, tuple[int, bool]]:
    """
    Resolve `work` in place.

    Yields (round number, critical indices) before each burst so an
    observer can snapshot the board. Returns (round count, capped).
    """
    number = 0
    critical = work.critical_indices()
    while critical:
        if number >= max_rounds:
            return number, True
        number += 1
        yield number, critical
        touched = _burst(work, critical)
        critical = _next_critical(work, touched)
    return number, False


def _explosions(board: Board, critical: list[int]) -> tuple[Explosion, ...]:
    return tuple(
        Explosion(
            x=i % board.width,
            y=i // board.width,
            owner=board.owners[i],
            orb_count=board.orbs[i],
        )
        for i in critical
    )


def _snapshot(board: Board, critical: list[int]) -> Board:
    snapshot = board.copy()
    snapshot.exploding = frozenset(critical)
    return snapshot


def _warn_capped(board: Board, rounds: int) -> None:
    logger.warning(
        "Cascade stopped at round cap %d on a %dx%d board (%d orbs); board left unstable",
        rounds, board.width, board.height, board.total_orbs(),
    )


def resolve_cascade(
    board: Board,
    on_round: Callable[[CascadeRound], None] | None = None,
    max_rounds: int | None = None,
) -> CascadeResult:
    """
    Resolve all explosions on a copy of `board`.

    Args:
        board: Board to resolve (not modified)
        on_round: Optional observer, called once per round with a
            pre-burst snapshot
        max_rounds: Round cap (defaults to config.MAX_CASCADE_ROUNDS)

    Returns:
        CascadeResult with the stable board and explosion trace
    """
    limit = config.MAX_CASCADE_ROUNDS if max_rounds is None else max_rounds
    work = board.copy()
    history: list[tuple[Explosion, ...]] = []

    rounds = _rounds(work, limit)
    while True:
        try:
            number, critical = next(rounds)
        except StopIteration as stop:
            round_count, capped = stop.value
            break
        explosions = _explosions(work, critical)
        history.append(explosions)
        if on_round is not None:
            on_round(CascadeRound(number, explosions, _snapshot(work, critical)))

    if capped:
        _warn_capped(work, round_count)

    return CascadeResult(
        final_board=work,
        explosion_history=tuple(history),
        round_count=round_count,
        capped=capped,
    )


def iter_cascade(
    board: Board,
    max_rounds: int | None = None,
) -> Generator[CascadeRound, None, CascadeResult]:
    """
    Observable cascade: yield each round, return the CascadeResult.

    Usage:
        result = yield from iter_cascade(board)

    or iterate directly and read StopIteration.value at the end.
    """
    limit = config.MAX_CASCADE_ROUNDS if max_rounds is None else max_rounds
    work = board.copy()
    history: list[tuple[Explosion, ...]] = []

    rounds = _rounds(work, limit)
    while True:
        try:
            number, critical = next(rounds)
        except StopIteration as stop:
            round_count, capped = stop.value
            break
        explosions = _explosions(work, critical)
        history.append(explosions)
        yield CascadeRound(number, explosions, _snapshot(work, critical))

    if capped:
        _warn_capped(work, round_count)

    return CascadeResult(
        final_board=work,
        explosion_history=tuple(history),
        round_count=round_count,
        capped=capped,
    )


def settle(
    board: Board,
    max_rounds: int | None = None,
    stop_when_decided: bool = False,
) -> Board:
    """
    Synchronous fast path: resolve a copy of `board` without a trace.

    With stop_when_decided, resolution also stops as soon as every orb on
    the board belongs to one player. The AI uses this: once a side is wiped
    out the rest of the cascade cannot change the outcome.
    """
    limit = config.MAX_CASCADE_ROUNDS if max_rounds is None else max_rounds
    work = board.copy()

    number = 0
    critical = work.critical_indices()
    while critical:
        if number >= limit:
            logger.debug("settle() hit the round cap (%d)", limit)
            break
        number += 1
        touched = _burst(work, critical)
        if stop_when_decided and len({o for o in work.owners if o is not None}) <= 1:
            break
        critical = _next_critical(work, touched)
    return work


def simulate_move(board: Board, x: int, y: int, player: int) -> Board:
    """Apply a move and settle it, for search. The result may be unstable if decided."""
    return settle(apply_move(board, x, y, player), stop_when_decided=True)
