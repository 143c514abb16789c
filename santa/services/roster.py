from __future__ import annotations

import csv
import io
from collections import Counter
from typing import Dict, List, Sequence

from loguru import logger

from santa.services.assignment import Pairing, Participant

EMPLOYEE_NAME = "Employee_Name"
EMPLOYEE_EMAIL = "Employee_EmailID"
CHILD_NAME = "Secret_Child_Name"
CHILD_EMAIL = "Secret_Child_EmailID"

PARTICIPANT_COLUMNS = (EMPLOYEE_NAME, EMPLOYEE_EMAIL)
PRIOR_PAIRING_COLUMNS = (EMPLOYEE_NAME, EMPLOYEE_EMAIL, CHILD_NAME, CHILD_EMAIL)

KIND_PARTICIPANTS = "participants"
KIND_PRIOR_PAIRINGS = "prior_pairings"

MIN_PARTICIPANTS = 2


class InputValidationError(ValueError):
    def __init__(self, errors: Sequence[str]) -> None:
        self.errors = list(errors)
        super().__init__("\n".join(self.errors))


def _read_header(text: str) -> List[str]:
    try:
        header = next(csv.reader(io.StringIO(text)), None)
    except csv.Error as exc:
        raise InputValidationError([f"CSV parsing error: {exc}"]) from exc
    if not header or not any(cell.strip() for cell in header):
        raise InputValidationError(["The file is empty."])
    return [cell.strip() for cell in header]


def _read_rows(text: str, required: Sequence[str]) -> List[Dict[str, str]]:
    """Parse ``text`` into trimmed rows carrying every ``required`` column.

    Rows whose cells are all blank are skipped. Every problem found is
    collected and raised together as one ``InputValidationError``.
    """
    header = _read_header(text)
    missing_columns = [column for column in required if column not in header]
    if missing_columns:
        raise InputValidationError(
            ["Missing required columns: " + ", ".join(missing_columns)]
        )

    reader = csv.reader(io.StringIO(text))
    next(reader)

    rows: List[Dict[str, str]] = []
    errors: List[str] = []
    row_number = 0
    try:
        for cells in reader:
            cells = [cell.strip() for cell in cells]
            if not any(cells):
                continue
            row_number += 1
            if len(cells) > len(header):
                errors.append(f"Row {row_number}: too many fields")
                continue
            record = dict(zip(header, cells))
            empty = [column for column in required if not record.get(column)]
            if empty:
                errors.append(f"Row {row_number}: missing " + ", ".join(empty))
                continue
            rows.append(record)
    except csv.Error as exc:
        errors.append(f"Row {row_number + 1}: {exc}")

    if errors:
        raise InputValidationError(errors)
    return rows


def detect_roster_kind(text: str) -> str:
    header = _read_header(text)
    if CHILD_NAME in header or CHILD_EMAIL in header:
        return KIND_PRIOR_PAIRINGS
    if EMPLOYEE_NAME in header or EMPLOYEE_EMAIL in header:
        return KIND_PARTICIPANTS
    raise InputValidationError(
        [
            "Unrecognised CSV. Participants need columns "
            + ", ".join(PARTICIPANT_COLUMNS)
            + "; previous assignments need "
            + ", ".join(PRIOR_PAIRING_COLUMNS)
            + "."
        ]
    )


def load_participants(text: str) -> List[Participant]:
    rows = _read_rows(text, PARTICIPANT_COLUMNS)
    if len(rows) < MIN_PARTICIPANTS:
        raise InputValidationError(["At least 2 participants are required for Secret Santa."])

    participants = [Participant(name=row[EMPLOYEE_NAME], identifier=row[EMPLOYEE_EMAIL]) for row in rows]
    logger.bind(count=len(participants)).debug("Participants loaded")
    return participants


def load_prior_pairings(text: str) -> List[Pairing]:
    rows = _read_rows(text, PRIOR_PAIRING_COLUMNS)
    pairings = [
        Pairing(
            giver=Participant(name=row[EMPLOYEE_NAME], identifier=row[EMPLOYEE_EMAIL]),
            receiver=Participant(name=row[CHILD_NAME], identifier=row[CHILD_EMAIL]),
        )
        for row in rows
    ]
    logger.bind(count=len(pairings)).debug("Prior pairings loaded")
    return pairings


def duplicate_identifiers(participants: Sequence[Participant]) -> List[str]:
    counts = Counter(participant.identifier for participant in participants)
    return [identifier for identifier, count in counts.items() if count > 1]


def dump_pairings_csv(pairings: Sequence[Pairing]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(PRIOR_PAIRING_COLUMNS)
    for pairing in pairings:
        writer.writerow(
            [
                pairing.giver.name,
                pairing.giver.identifier,
                pairing.receiver.name,
                pairing.receiver.identifier,
            ]
        )
    return buffer.getvalue()
