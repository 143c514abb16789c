from santa.services.assignment import (
    AssignmentError,
    AssignmentInfeasible,
    Pairing,
    Participant,
    generate_assignments,
)
from santa.services.roster import InputValidationError

__all__ = [
    "AssignmentError",
    "AssignmentInfeasible",
    "Pairing",
    "Participant",
    "generate_assignments",
    "InputValidationError",
]
