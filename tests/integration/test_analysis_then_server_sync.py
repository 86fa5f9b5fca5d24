from __future__ import annotations

import json
from pathlib import Path

from issue_tracking.config import ConfigOverrides
from issue_tracking.fingerprints import fingerprint
from issue_tracking.models import TextRange, Trackable
from issue_tracking.tracking import create_tracker

FILE = "src/service.py"

VERSION_1 = "\n".join(
    [
        "import os",
        "def load(path):",
        "    data = open(path).read()",
        "    return eval(data)",
    ]
)

VERSION_2 = "\n".join(
    [
        "import os",
        "import sys",
        "",
        "def load(path):",
        "    data = open(path).read()",
        "    return eval(data)",
        "def unused(): pass",
    ]
)


def _analyze(source: str, findings: list[tuple[str, str, int]]) -> list[Trackable]:
    lines = source.splitlines()
    issues = []
    for rule_key, message, line in findings:
        text = lines[line - 1]
        start = len(text) - len(text.lstrip())
        issue = Trackable(
            rule_key=rule_key,
            message=message,
            line=line,
            text_range=TextRange(line, start, line, len(text)),
            severity="MAJOR",
            type="CODE_SMELL",
        )
        issues.append(fingerprint(issue, source))
    return issues


def test_issue_identity_survives_edits_and_server_sync(tmp_path: Path) -> None:
    now = [1_000]
    tracker = create_tracker(
        tmp_path, overrides=ConfigOverrides(audit_enabled=True), clock=lambda: now[0]
    )

    first = tracker.track_new_findings(
        FILE,
        _analyze(VERSION_1, [("S1", "Remove unused import", 1), ("S2", "Avoid eval", 4)]),
    )
    assert [t.creation_date for t in first] == [None, None]

    server_copy = Trackable(
        rule_key="S2",
        message="Avoid eval",
        line=4,
        text_range_hash=first[1].text_range_hash,
        line_hash=first[1].line_hash,
        creation_date=500,
        server_issue_key="AX-1",
        resolved=True,
        severity="CRITICAL",
        type="VULNERABILITY",
    )
    synced = tracker.rebase_against_external(FILE, [server_copy])
    assert [t.server_issue_key for t in synced] == [None, "AX-1"]
    assert synced[1].severity == "CRITICAL"

    now[0] = 2_000
    second = tracker.track_new_findings(
        FILE,
        _analyze(
            VERSION_2,
            [
                ("S1", "Remove unused import", 1),
                ("S2", "Avoid eval", 6),
                ("S3", "Remove unused function", 7),
            ],
        ),
    )

    assert [(t.rule_key, t.line) for t in second] == [("S1", 1), ("S2", 6), ("S3", 7)]
    assert [t.creation_date for t in second] == [None, 500, 2_000]
    assert [t.server_issue_key for t in second] == [None, "AX-1", None]
    assert second[1].resolved is True

    unlinked = tracker.rebase_against_external(FILE, [])
    assert [t.server_issue_key for t in unlinked] == [None, None, None]
    assert unlinked[1].creation_date == 500

    audit_path = tmp_path / ".issue_tracking" / "tracking_audit.jsonl"
    events = [json.loads(line) for line in audit_path.read_text(encoding="utf-8").splitlines()]
    assert [event["operation"] for event in events] == [
        "track_new_findings",
        "rebase_against_external",
        "track_new_findings",
        "rebase_against_external",
    ]
    assert events[2]["counts"] == {
        "combined": 2,
        "leaked": 1,
        "disconnected": 0,
        "passthrough": 0,
    }
