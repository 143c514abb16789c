from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence, Set, Tuple

from loguru import logger

MAX_ATTEMPTS = 100

PairKey = Tuple[str, str]


class AssignmentError(RuntimeError):
    pass


class AssignmentInfeasible(AssignmentError):
    def __init__(self, attempts: int) -> None:
        super().__init__(f"Unable to generate valid Secret Santa assignments after {attempts} attempts.")
        self.attempts = attempts


@dataclass(frozen=True)
class Participant:
    name: str
    identifier: str


@dataclass(frozen=True)
class Pairing:
    giver: Participant
    receiver: Participant

    @property
    def key(self) -> PairKey:
        return self.giver.identifier, self.receiver.identifier


def _forbidden_keys(prior_pairings: Optional[Iterable[Pairing]]) -> Set[PairKey]:
    return {pairing.key for pairing in prior_pairings or []}


def shuffle_participants(
    participants: Sequence[Participant],
    randbelow: Callable[[int], int],
) -> List[Participant]:
    """Durstenfeld shuffle into a new list; ``randbelow(n)`` must be uniform in ``[0, n)``."""
    shuffled = list(participants)
    for i in range(len(shuffled) - 1, 0, -1):
        j = randbelow(i + 1)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def attempt_assignment(
    givers: Sequence[Participant],
    receiver_order: Sequence[Participant],
    forbidden: Set[PairKey],
) -> Optional[List[Pairing]]:
    """Greedy first-fit over ``receiver_order``.

    Each giver, in input order, takes the first receiver that is still free,
    is not the giver and does not form a forbidden pair. Returns ``None`` as
    soon as one giver is left without a receiver.
    """
    consumed: Set[str] = set()
    pairings: List[Pairing] = []
    for giver in givers:
        for receiver in receiver_order:
            if receiver.identifier in consumed:
                continue
            if receiver.identifier == giver.identifier:
                continue
            if (giver.identifier, receiver.identifier) in forbidden:
                continue
            consumed.add(receiver.identifier)
            pairings.append(Pairing(giver=giver, receiver=receiver))
            break
        else:
            return None
    return pairings


def generate_assignments(
    participants: Sequence[Participant],
    prior_pairings: Optional[Iterable[Pairing]] = None,
    seed: Optional[int] = None,
    randbelow: Optional[Callable[[int], int]] = None,
    max_attempts: int = MAX_ATTEMPTS,
) -> List[Pairing]:
    """Draw one receiver per participant, in input order.

    Randomness comes from ``randbelow`` when given, otherwise from
    ``random.Random(seed)``; passing both is a ``ValueError``.
    """
    if len(participants) < 2:
        raise AssignmentError("At least 2 participants are required.")

    if seed is not None and randbelow is not None:
        raise ValueError("Pass either seed or randbelow, not both.")
    if randbelow is None:
        randbelow = random.Random(seed).randrange

    givers = list(participants)
    forbidden = _forbidden_keys(prior_pairings)
    log = logger.bind(participants=len(givers), forbidden=len(forbidden))

    for attempt in range(1, max_attempts + 1):
        receiver_order = shuffle_participants(givers, randbelow)
        pairings = attempt_assignment(givers, receiver_order, forbidden)
        if pairings is not None:
            log.info("Assignments generated on attempt {attempt}", attempt=attempt)
            return pairings
        log.debug("Attempt {attempt} left a giver without a receiver", attempt=attempt)

    log.warning("No valid assignment after {attempts} attempts", attempts=max_attempts)
    raise AssignmentInfeasible(max_attempts)
