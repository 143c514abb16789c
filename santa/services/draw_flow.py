from __future__ import annotations

import html
import random
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from loguru import logger

from santa.services.assignment import (
    MAX_ATTEMPTS,
    AssignmentError,
    Pairing,
    Participant,
    generate_assignments,
)
from santa.services.roster import (
    KIND_PARTICIPANTS,
    KIND_PRIOR_PAIRINGS,
    detect_roster_kind,
    duplicate_identifiers,
    load_participants,
    load_prior_pairings,
)

PREVIEW_LIMIT = 30
MESSAGE_LIMIT = 4096
DRAW_HEADER = "Secret Santa assignments generated successfully!\n\n"
EXPORT_FILENAME = "secret_santa_assignments.csv"


@dataclass(frozen=True)
class UploadResult:
    kind: str
    count: int
    duplicates: List[str]
    state_update: Dict[str, Any]


@dataclass(frozen=True)
class DrawResult:
    pairings: List[Pairing]
    seed: int


def _participant_to_dict(participant: Participant) -> Dict[str, str]:
    return {"name": participant.name, "identifier": participant.identifier}


def _participant_from_dict(data: Mapping[str, str]) -> Participant:
    return Participant(name=data["name"], identifier=data["identifier"])


def participants_from_state(data: Mapping[str, Any]) -> List[Participant]:
    return [_participant_from_dict(item) for item in data.get(KIND_PARTICIPANTS, [])]


def prior_pairings_from_state(data: Mapping[str, Any]) -> List[Pairing]:
    return [
        Pairing(giver=_participant_from_dict(item["giver"]), receiver=_participant_from_dict(item["receiver"]))
        for item in data.get(KIND_PRIOR_PAIRINGS, [])
    ]


def handle_upload(text: str) -> UploadResult:
    """Parse an uploaded CSV of either kind into a conversation state update."""
    kind = detect_roster_kind(text)
    if kind == KIND_PARTICIPANTS:
        participants = load_participants(text)
        return UploadResult(
            kind=kind,
            count=len(participants),
            duplicates=duplicate_identifiers(participants),
            state_update={KIND_PARTICIPANTS: [_participant_to_dict(p) for p in participants]},
        )

    pairings = load_prior_pairings(text)
    return UploadResult(
        kind=kind,
        count=len(pairings),
        duplicates=[],
        state_update={
            KIND_PRIOR_PAIRINGS: [
                {"giver": _participant_to_dict(p.giver), "receiver": _participant_to_dict(p.receiver)}
                for p in pairings
            ]
        },
    )


def run_draw(
    data: Mapping[str, Any],
    seed: Optional[int] = None,
    max_attempts: int = MAX_ATTEMPTS,
) -> DrawResult:
    participants = participants_from_state(data)
    if not participants:
        raise AssignmentError("Please upload the participants CSV first.")

    prior_pairings = prior_pairings_from_state(data)

    if seed is None:
        seed = random.randint(1, 2**31 - 1)

    pairings = generate_assignments(
        participants,
        prior_pairings=prior_pairings,
        seed=seed,
        max_attempts=max_attempts,
    )
    logger.bind(seed=seed, participants=len(participants), prior=len(prior_pairings)).info("Draw completed")
    return DrawResult(pairings=pairings, seed=seed)


def format_participant(participant: Participant) -> str:
    return f"{html.escape(participant.name)} ({html.escape(participant.identifier)})"


def message_length(text: str) -> int:
    # Telegram counts UTF-16 code units
    return len(text.encode("utf-16-le")) // 2


def _more_line(remaining: int) -> str:
    return f"…and {remaining} more in the attached file."


def format_preview(
    pairings: List[Pairing],
    limit: int = PREVIEW_LIMIT,
    max_length: int = MESSAGE_LIMIT,
) -> str:
    """Render up to ``limit`` pairings, dropping rows so the text fits ``max_length``."""
    lines: List[str] = []
    length = 0
    for pairing in pairings[:limit]:
        line = f"{format_participant(pairing.giver)} → {format_participant(pairing.receiver)}"
        added = message_length(line) + (1 if lines else 0)
        remaining = len(pairings) - len(lines) - 1
        footer = message_length(_more_line(remaining)) + 1 if remaining else 0
        if length + added + footer > max_length:
            break
        lines.append(line)
        length += added
    if len(pairings) > len(lines):
        lines.append(_more_line(len(pairings) - len(lines)))
    return "\n".join(lines)


def format_draw_message(pairings: List[Pairing]) -> str:
    return DRAW_HEADER + format_preview(pairings, max_length=MESSAGE_LIMIT - message_length(DRAW_HEADER))


def format_status(data: Mapping[str, Any]) -> str:
    participants = len(data.get(KIND_PARTICIPANTS, []))
    prior = len(data.get(KIND_PRIOR_PAIRINGS, []))
    return (
        f"Participants loaded: {participants}\n"
        f"Previous assignments loaded: {prior}"
    )
