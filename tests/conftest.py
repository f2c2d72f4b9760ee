"""Shared fixtures for the tabulation test suite."""

import json

import pytest

from src.tabulation_engine.snapshot import (
    College,
    Committee,
    Criterion,
    Department,
    Event,
    Judge,
    Participant,
    Score,
    Snapshot,
)


# ------------------------------------------------------------------
# In-memory snapshots for the engines
# ------------------------------------------------------------------

def make_scores(event_id, criteria_id, table):
    """Build Score records from ``{judge_id: {participant_id: value}}``."""
    return tuple(
        Score(event_id, judge_id, participant_id, criteria_id, value)
        for judge_id, row in table.items()
        for participant_id, value in row.items()
    )


@pytest.fixture
def scenario_snapshot():
    """3 participants, 2 judges, 1 criterion worth 100%.

    Judge A scores [90, 90, 70]; Judge B scores [80, 85, 75].
    """
    event = Event(
        id="e1",
        committee_id="k1",
        name="Solo Vocal",
        judge_count=2,
        status="Ongoing",
        criteria=(Criterion("c1", "Overall", 100.0),),
        judge_ids=("jA", "jB"),
    )
    return Snapshot(
        committees=(Committee("k1", "Music"),),
        events=(event,),
        judges=(Judge("jA", "Judge A"), Judge("jB", "Judge B")),
        colleges=(College("col1", "Engineering"),),
        departments=(Department("d1", "col1", "Civil"),),
        participants=(
            Participant("p1", "Ana", "d1", "e1"),
            Participant("p2", "Ben", "d1", "e1"),
            Participant("p3", "Cai", "d1", "e1"),
        ),
        scores=make_scores("e1", "c1", {
            "jA": {"p1": 90, "p2": 90, "p3": 70},
            "jB": {"p1": 80, "p2": 85, "p3": 75},
        }),
    )


@pytest.fixture
def championship_snapshot():
    """Two colleges, three departments, three events.

    * e1 (Completed, bearing 2.0, committee k1): d2 beats d1 (same
      college col1) and d3.
    * e2 (Completed, no bearing, committee k2): d1 beats d3.
    * e3 (Ongoing): ignored by the overall standings.
    """
    criteria = (Criterion("c1", "Overall", 100.0),)
    events = (
        Event("e1", "k1", "Debate", judge_count=1, status="Completed",
              criteria=criteria, bearing=2.0),
        Event("e2", "k2", "Poster", judge_count=1, status="Completed",
              criteria=criteria),
        Event("e3", "k2", "Quiz Bee", judge_count=1, status="Ongoing",
              criteria=criteria),
    )
    participants = (
        Participant("p1", "Team Civil", "d1", "e1"),
        Participant("p2", "Team Mech", "d2", "e1"),
        Participant("p3", "Team Nursing", "d3", "e1"),
        Participant("q1", "Team Civil", "d1", "e2"),
        Participant("q2", "Team Nursing", "d3", "e2"),
        Participant("r1", "Team Mech", "d2", "e3"),
    )
    scores = (
        make_scores("e1", "c1", {"j1": {"p1": 80, "p2": 90, "p3": 70}})
        + make_scores("e2", "c1", {"j1": {"q1": 95, "q2": 60}})
        + make_scores("e3", "c1", {"j1": {"r1": 99}})
    )
    return Snapshot(
        committees=(Committee("k1", "Arts"), Committee("k2", "Academics")),
        events=events,
        judges=(Judge("j1", "Judge One"),),
        colleges=(College("col1", "Engineering"), College("col2", "Health")),
        departments=(
            Department("d1", "col1", "Civil", "Builders", "#aa0000"),
            Department("d2", "col1", "Mechanical", "Gears", "#00aa00"),
            Department("d3", "col2", "Nursing", "Carers", "#0000aa"),
        ),
        participants=participants,
        scores=scores,
    )


# ------------------------------------------------------------------
# Snapshot documents: the camelCase JSON the storage layer emits
# ------------------------------------------------------------------

@pytest.fixture
def snapshot_document():
    """A small two-event document with a few data-entry quirks."""
    return {
        "committees": [
            {"id": "k1", "name": "Arts", "status": "Active", "baseBearing": "2"},
        ],
        "events": [
            {
                "id": "e1", "committeeId": "k1", "name": "Debate",
                "type": "Group", "judgeCount": 2, "status": "Completed",
                "criteria": [
                    {"id": "c1", "name": "Content", "percentage": 60},
                    {"id": "c2", "name": "Delivery", "percentage": 40},
                ],
                "judgeIds": ["j1", "j2"],
                "bearing": 3.5,
                "ratingTL": 8, "ratingC": "7", "ratingRI": "n/a", "ratingPI": None,
            },
            {
                "id": "e2", "committeeId": "k1", "name": "Mural",
                "type": "Individual", "judgeCount": 1, "status": "Upcoming",
                "criteria": [{"id": "c1", "name": "Overall", "percentage": 100}],
            },
        ],
        "judges": [
            {"id": "j1", "name": "Ada", "role": "Chair"},
            {"id": "j2", "name": "Bo", "role": "Member"},
        ],
        "colleges": [{"id": "col1", "name": "Engineering"}],
        "departments": [
            {"id": "d1", "collegeId": "col1", "name": "Civil",
             "teamName": "Builders", "color": "#aa0000"},
        ],
        "participants": [
            {"id": "p1", "name": "Ana", "departmentId": "d1", "eventId": "e1"},
            {"id": "p2", "name": "Ben", "departmentId": "d1", "eventId": "e1"},
        ],
        "scores": [
            {"eventId": "e1", "judgeId": "j1", "participantId": "p1", "criteriaId": "c1", "value": 50},
            {"eventId": "e1", "judgeId": "j1", "participantId": "p1", "criteriaId": "c2", "value": "30"},
            {"eventId": "e1", "judgeId": "j1", "participantId": "p2", "criteriaId": "c1", "value": "oops"},
            {"eventId": "e1", "judgeId": "j2", "participantId": "p1", "criteriaId": "c1", "value": 40},
            # Superseded by the next record
            {"eventId": "e1", "judgeId": "j2", "participantId": "p2", "criteriaId": "c1", "value": 10},
            {"eventId": "e1", "judgeId": "j2", "participantId": "p2", "criteriaId": "c1", "value": 55},
        ],
    }


@pytest.fixture
def snapshot_file(tmp_path, snapshot_document):
    path = tmp_path / "finals.json"
    path.write_text(json.dumps(snapshot_document), encoding="utf-8")
    return path
