"""Tests for NodeOutcome and the execution transcript."""

import re
from datetime import timedelta

from nodeflow.core.executors.results import NodeOutcome
from nodeflow.core.executors.transcript import ExecutionTranscript, format_timestamp
from nodeflow.core.models import Node, utc_now

NODE = Node(id="n1", type="source", name="Users")


def test_success_outcome():
    start = utc_now()
    outcome = NodeOutcome.success(
        NODE,
        start,
        message="Fetched 1 records from source",
        end_time=start + timedelta(milliseconds=250),
        records=[{"id": 1}],
    )

    assert outcome.status == "SUCCESS"
    assert not outcome.failed
    assert outcome.duration_ms == 250
    assert outcome.to_dict() == {
        "node_id": "n1",
        "node_type": "source",
        "node_name": "Users",
        "status": "SUCCESS",
        "duration_ms": 250,
        "records": 1,
        "message": "Fetched 1 records from source",
        "error_code": None,
    }


def test_failure_outcome():
    outcome = NodeOutcome.failure(
        NODE, utc_now(), "Data source not found", error_code="CONNECTIONNOTFOUNDERROR"
    )

    assert outcome.failed
    assert outcome.message == "ERROR in node Users: Data source not found"
    assert outcome.records is None
    assert outcome.errors_count == 0


def test_skipped_outcome():
    outcome = NodeOutcome.skipped(NODE, "Unknown node type: source")

    assert outcome.status == "SKIPPED"
    assert not outcome.failed
    assert outcome.duration_ms == 0.0


def test_format_timestamp():
    assert re.fullmatch(
        r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z", format_timestamp()
    )


def test_transcript_lines():
    transcript = ExecutionTranscript()
    transcript.append("Starting pipeline execution")
    transcript.append("Total nodes: 0")

    assert len(transcript) == 2
    assert transcript.lines[0].endswith("] Starting pipeline execution")
    assert transcript.text.count("\n") == 2
    assert transcript.text.endswith("Total nodes: 0\n")


def test_transcript_lines_is_a_copy():
    transcript = ExecutionTranscript()
    transcript.lines.append("tampered")

    assert len(transcript) == 0
