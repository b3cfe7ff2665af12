"""
Mobility Replay Module
======================

Replays a time-ordered list of node moves as a simpy process.

Trace Format (one move per line):
    index time_s x y
where index is the node's registration index (not its id). Lines that are
blank or start with '#' are ignored; malformed lines are skipped with a
warning. An empty or missing trace performs no moves.

With wrapping enabled, a new period starts after the last move and the
trace is replayed relative to that time, forever.

Author: Logistic Loss Medium Team
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Union

import simpy

from medium.registry import RadioRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Move:
    """A single position update."""
    index: int
    time: float     # seconds since period start
    x: float
    y: float

    def __str__(self) -> str:
        return f"MOVE: mote {self.index} -> [{self.x},{self.y}] @ {self.time}"


def parse_moves(source: Union[str, Path, Iterable[str]]) -> List[Move]:
    """
    Parse a mobility trace from a file path or an iterable of lines.

    Returns:
        Moves in file order (the trace is expected to be time-ordered)
    """
    if isinstance(source, (str, Path)):
        path = Path(source)
        if not path.exists():
            logger.warning("Mobility trace %s not found, no movement", path)
            return []
        logger.info("Parsing position file: %s", path)
        lines = path.read_text().splitlines()
    else:
        lines = list(source)

    moves = []
    for lineno, line in enumerate(lines, start=1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        fields = line.split()
        try:
            if len(fields) < 4:
                raise ValueError(f"expected 4 fields, got {len(fields)}")
            moves.append(Move(
                index=int(fields[0]),
                time=float(fields[1]),
                x=float(fields[2]),
                y=float(fields[3]),
            ))
        except ValueError as e:
            logger.warning("Skipping malformed move on line %d: %r (%s)", lineno, line, e)

    logger.info("Loaded %d positions", len(moves))
    return moves


class MobilityReplay:
    """
    Schedule-driven position injection.

    Attributes:
        registry: Radio registry whose radios are moved
        env: simpy environment providing simulated time
        moves: Parsed moves
        wrap: Restart from the first move after the last one
        period_start: Simulated time of the current period start
        moves_applied: Number of moves performed so far

    Example:
        >>> env = simpy.Environment()
        >>> replay = MobilityReplay(registry, env, parse_moves("trace.dat"))
        >>> replay.start()
        >>> env.run(until=60)
    """

    def __init__(
        self,
        registry: RadioRegistry,
        env: simpy.Environment,
        moves: List[Move],
        wrap: bool = True
    ):
        self.registry = registry
        self.env = env
        self.moves = list(moves)
        self.wrap = wrap
        self.period_start = env.now
        self.current_move = 0
        self.moves_applied = 0
        self.process: Optional[simpy.Process] = None

    @classmethod
    def from_file(
        cls,
        registry: RadioRegistry,
        env: simpy.Environment,
        path: Union[str, Path],
        wrap: bool = True
    ) -> "MobilityReplay":
        return cls(registry, env, parse_moves(path), wrap)

    def start(self) -> Optional[simpy.Process]:
        """Start replaying. Does nothing for an empty trace."""
        if not self.moves:
            logger.info("Empty mobility trace, no autonomous movement")
            return None
        logger.info("Mobility started at %.3f", self.env.now)
        self.current_move = 0
        self.period_start = self.env.now
        self.process = self.env.process(self._run())
        return self.process

    def stop(self):
        if self.process is not None and self.process.is_alive:
            self.process.interrupt()
        self.process = None

    def _run(self):
        try:
            while True:
                move = self.moves[self.current_move]
                due = self.period_start + move.time
                if self.env.now < due:
                    yield self.env.timeout(due - self.env.now)

                self._apply(move)

                self.current_move += 1
                if self.current_move >= len(self.moves):
                    if not self.wrap:
                        return
                    logger.info("New mobility period at %.3f", self.env.now)
                    self.period_start = self.env.now
                    self.current_move = 0
                    if all(m.time <= 0 for m in self.moves):
                        # A trace without time progression would spin forever
                        logger.warning("Mobility trace has no time progression, stopping")
                        return
        except simpy.Interrupt:
            return

    def _apply(self, move: Move):
        radio = self.registry.radio_at(move.index)
        if radio is None:
            logger.warning("%.3f: No such mote, skipping move %s", self.env.now, move)
            return
        self.registry.set_position(radio.node_id, move.x, move.y)
        self.moves_applied += 1
