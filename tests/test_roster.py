import csv
import io

import pytest

from santa.services.assignment import Pairing, Participant
from santa.services.roster import (
    KIND_PARTICIPANTS,
    KIND_PRIOR_PAIRINGS,
    InputValidationError,
    detect_roster_kind,
    duplicate_identifiers,
    dump_pairings_csv,
    load_participants,
    load_prior_pairings,
)

EMPLOYEES = (
    "Employee_Name,Employee_EmailID,Team\n"
    "John Doe,john@acme.com,Sales\n"
    " Jane Smith , jane@acme.com ,Ops\n"
    "\n"
    "Bob Wilson,bob@acme.com,\n"
)

PREVIOUS = (
    "Employee_Name,Employee_EmailID,Secret_Child_Name,Secret_Child_EmailID\n"
    "John Doe,john@acme.com,Jane Smith,jane@acme.com\n"
)


def test_load_participants_trims_and_skips_blank_rows():
    participants = load_participants(EMPLOYEES)
    assert participants == [
        Participant("John Doe", "john@acme.com"),
        Participant("Jane Smith", "jane@acme.com"),
        Participant("Bob Wilson", "bob@acme.com"),
    ]


def test_load_participants_requires_columns():
    with pytest.raises(InputValidationError) as excinfo:
        load_participants("Name,Email\nJohn,john@acme.com\nJane,jane@acme.com\n")
    assert "Employee_Name" in excinfo.value.errors[0]


def test_load_participants_reports_every_bad_row():
    text = (
        "Employee_Name,Employee_EmailID\n"
        "John Doe,\n"
        "Jane Smith,jane@acme.com\n"
        ",bob@acme.com\n"
        "Ann,ann@acme.com,extra\n"
    )
    with pytest.raises(InputValidationError) as excinfo:
        load_participants(text)
    assert excinfo.value.errors == [
        "Row 1: missing Employee_EmailID",
        "Row 3: missing Employee_Name",
        "Row 4: too many fields",
    ]


def test_load_participants_requires_two_rows():
    with pytest.raises(InputValidationError, match="At least 2 participants"):
        load_participants("Employee_Name,Employee_EmailID\nJohn Doe,john@acme.com\n")


def test_empty_file_is_rejected():
    with pytest.raises(InputValidationError, match="empty"):
        load_participants("")


def test_load_prior_pairings():
    pairings = load_prior_pairings(PREVIOUS)
    assert pairings == [
        Pairing(Participant("John Doe", "john@acme.com"), Participant("Jane Smith", "jane@acme.com"))
    ]


def test_header_only_prior_pairings_is_valid():
    assert load_prior_pairings(PREVIOUS.splitlines()[0] + "\n") == []


def test_prior_pairings_require_child_columns():
    with pytest.raises(InputValidationError):
        load_prior_pairings("Employee_Name,Employee_EmailID,Secret_Child_Name\nA,a@x,B\n")


def test_detect_roster_kind():
    assert detect_roster_kind(EMPLOYEES) == KIND_PARTICIPANTS
    assert detect_roster_kind(PREVIOUS) == KIND_PRIOR_PAIRINGS
    with pytest.raises(InputValidationError, match="Unrecognised"):
        detect_roster_kind("foo,bar\n1,2\n")


def test_duplicate_identifiers():
    participants = [
        Participant("John", "john@acme.com"),
        Participant("Johnny", "john@acme.com"),
        Participant("Jane", "jane@acme.com"),
    ]
    assert duplicate_identifiers(participants) == ["john@acme.com"]
    assert duplicate_identifiers(participants[1:]) == []


def test_dump_pairings_csv():
    john = Participant("Doe, John", "john@acme.com")
    jane = Participant("Jane Smith", "jane@acme.com")
    text = dump_pairings_csv([Pairing(john, jane), Pairing(jane, john)])
    rows = list(csv.reader(io.StringIO(text)))
    assert rows == [
        ["Employee_Name", "Employee_EmailID", "Secret_Child_Name", "Secret_Child_EmailID"],
        ["Doe, John", "john@acme.com", "Jane Smith", "jane@acme.com"],
        ["Jane Smith", "jane@acme.com", "Doe, John", "john@acme.com"],
    ]


def test_exported_csv_loads_as_prior_pairings():
    john = Participant("John Doe", "john@acme.com")
    jane = Participant("Jane Smith", "jane@acme.com")
    text = dump_pairings_csv([Pairing(john, jane), Pairing(jane, john)])
    assert detect_roster_kind(text) == KIND_PRIOR_PAIRINGS
    assert load_prior_pairings(text) == [Pairing(john, jane), Pairing(jane, john)]
