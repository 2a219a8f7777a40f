"""Tests for the berthing-plan command."""

import io
import json
from uuid import uuid4

import pytest

from berthing.scripts.generate_plan import (
    EXIT_FEASIBLE,
    EXIT_INFEASIBLE,
    EXIT_INVALID_INPUT,
    main,
)


def planning_document(windows, preassign=False):
    dock_id = str(uuid4())
    return {
        "date": "2025-03-10",
        "author": "night shift",
        "docks": [{"dockId": dock_id, "name": "North 1"}],
        "visits": [
            {
                "visitId": str(uuid4()),
                "vesselName": f"Vessel {i}",
                "eta": f"2025-03-10T{start:02d}:00:00Z",
                "etd": f"2025-03-10T{end:02d}:00:00Z",
                **({"preassignedDockId": dock_id} if preassign else {}),
            }
            for i, (start, end) in enumerate(windows)
        ],
    }


@pytest.fixture
def write_document(tmp_path):
    def write(document) -> str:
        path = tmp_path / "plan.json"
        path.write_text(
            document if isinstance(document, str) else json.dumps(document),
            encoding="utf-8",
        )
        return str(path)

    return write


class TestGeneratePlanCommand:
    def test_feasible_plan(self, write_document, capsys):
        path = write_document(planning_document([(10, 12), (12, 14), (14, 16)]))

        exit_code = main([path])

        output = json.loads(capsys.readouterr().out)
        assert exit_code == EXIT_FEASIBLE
        assert output["planDate"] == "2025-03-10"
        assert output["isFeasible"] is True
        assert output["author"] == "night shift"
        assert output["algorithm"] == "FIFO"
        assert len(output["assignments"]) == 3
        assert output["assignments"][0]["dockName"] == "North 1"

    def test_infeasible_plan(self, write_document, capsys):
        path = write_document(planning_document([(10, 14), (12, 16)], preassign=True))

        exit_code = main([path, "--pretty"])

        output = json.loads(capsys.readouterr().out)
        assert exit_code == EXIT_INFEASIBLE
        assert output["isFeasible"] is False
        assert "Vessel 0" in output["warnings"][0]
        assert "Vessel 1" in output["warnings"][0]

    def test_unplaced_visits_are_listed(self, write_document, capsys):
        path = write_document(planning_document([(10, 14), (12, 16)]))

        exit_code = main([path])

        output = json.loads(capsys.readouterr().out)
        assert exit_code == EXIT_INFEASIBLE
        assert len(output["unassigned"]) == 1
        assert output["unassigned"][0]["vesselName"] == "Vessel 1"

    def test_reads_stdin(self, monkeypatch, capsys):
        document = json.dumps(planning_document([(10, 12)]))
        monkeypatch.setattr("sys.stdin", io.StringIO(document))

        assert main([]) == EXIT_FEASIBLE
        assert json.loads(capsys.readouterr().out)["isFeasible"] is True

    @pytest.mark.parametrize(
        "document",
        [
            "{not json",
            {"date": "yesterday", "docks": [], "visits": []},
            {
                "date": "2025-03-10",
                "docks": [],
                "visits": [
                    {
                        "visitId": "v-1",
                        "eta": "2025-03-10T10:00:00Z",
                        "etd": "2025-03-10T12:00:00Z",
                    }
                ],
            },
        ],
    )
    def test_invalid_input(self, write_document, capsys, document):
        exit_code = main([write_document(document)])

        captured = capsys.readouterr()
        assert exit_code == EXIT_INVALID_INPUT
        assert captured.out == ""
        assert "error:" in captured.err

    def test_missing_file(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing.json")]) == EXIT_INVALID_INPUT

    def test_time_without_offset_is_invalid_input(self, write_document, capsys):
        document = planning_document([(10, 12), (12, 14)])
        document["visits"][1]["eta"] = "2025-03-10T12:00:00"

        exit_code = main([write_document(document)])

        captured = capsys.readouterr()
        assert exit_code == EXIT_INVALID_INPUT
        assert captured.out == ""
        assert "timezone" in captured.err
