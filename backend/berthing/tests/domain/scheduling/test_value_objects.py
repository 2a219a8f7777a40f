"""Unit tests for scheduling value objects."""

from datetime import datetime, timedelta
from uuid import uuid4

import pytest

from berthing.domain.scheduling.value_objects.assignment import (
    Assignment,
    UnassignedVisit,
    visit_label,
)
from berthing.domain.scheduling.value_objects.planning_inputs import (
    DockInfo,
    VisitRequest,
)
from berthing.domain.scheduling.value_objects.time_window import TimeWindow
from berthing.tests.fixtures.factories import at, make_assignment, make_visit


class TestTimeWindow:
    """Test TimeWindow value object."""

    def test_rejects_empty_window(self):
        with pytest.raises(ValueError, match="Start time must be before end time"):
            TimeWindow(start_time=at(10), end_time=at(10))

    def test_duration(self):
        window = TimeWindow(start_time=at(10), end_time=at(12, 30))

        assert window.duration == timedelta(hours=2, minutes=30)
        assert window.duration_minutes() == 150

    def test_contains_is_end_exclusive(self):
        window = TimeWindow(start_time=at(10), end_time=at(12))

        assert window.contains(at(10))
        assert window.contains(at(11, 59))
        assert not window.contains(at(12))

    def test_intersection(self):
        a = TimeWindow(start_time=at(10), end_time=at(14))
        b = TimeWindow(start_time=at(12), end_time=at(16))

        assert a.intersection_with(b) == TimeWindow(start_time=at(12), end_time=at(14))
        assert a.intersection_with(TimeWindow(start_time=at(14), end_time=at(15))) is None

    def test_equality_and_hash(self):
        a = TimeWindow(start_time=at(10), end_time=at(12))
        b = TimeWindow(start_time=at(10), end_time=at(12))

        assert a == b
        assert len({a, b}) == 1


class TestAssignment:
    """Test Assignment construction and presentation."""

    def test_rejects_eta_not_before_etd(self, dock_id):
        with pytest.raises(ValueError, match="eta must be before etd"):
            make_assignment(dock_id, 12, 12)

        with pytest.raises(ValueError):
            make_assignment(dock_id, 14, 12)

    def test_rejects_malformed_identifier(self):
        with pytest.raises(ValueError, match="visit_id"):
            Assignment(visit_id="not-a-uuid", dock_id=uuid4(), eta=at(10), etd=at(12))

    def test_accepts_identifier_strings(self, dock_id):
        visit_id = uuid4()

        assignment = Assignment(
            visit_id=str(visit_id), dock_id=str(dock_id), eta=at(10), etd=at(12)
        )

        assert assignment.visit_id == visit_id
        assert assignment.dock_id == dock_id

    def test_rejects_negative_volume(self, dock_id):
        with pytest.raises(ValueError):
            make_assignment(dock_id, 10, 12, estimated_volume=-1)

    def test_is_immutable(self, dock_id):
        assignment = make_assignment(dock_id, 10, 12)

        with pytest.raises(ValueError):
            assignment.dock_id = uuid4()

    def test_structural_equality(self, dock_id):
        visit_id = uuid4()

        assert make_assignment(dock_id, 10, 12, visit_id=visit_id) == make_assignment(
            dock_id, 10, 12, visit_id=visit_id
        )

    def test_to_json_uses_camel_case(self, dock_id):
        assignment = make_assignment(
            dock_id, 10, 12, dock_name="North 1", vessel_name="Aurora", estimated_volume=40
        )

        data = assignment.to_json()

        assert data["dockId"] == str(dock_id)
        assert data["dockName"] == "North 1"
        assert data["vesselName"] == "Aurora"
        assert data["estimatedVolume"] == 40
        assert data["eta"].startswith("2025-03-10T10:00:00")

    def test_can_be_built_from_camel_case(self, dock_id):
        data = make_assignment(dock_id, 10, 12, vessel_imo="9321483").to_json()

        assert Assignment.model_validate(data).vessel_imo == "9321483"

    def test_label_prefers_vessel_details(self, dock_id):
        named = make_assignment(dock_id, 10, 12, vessel_name="Aurora", vessel_imo="9321483")
        imo_only = make_assignment(dock_id, 10, 12, vessel_imo="9321483")

        assert named.label() == "Aurora (IMO 9321483)"
        assert imo_only.label() == "IMO 9321483"

    def test_label_falls_back_to_shortened_identifier(self, dock_id):
        visit_id = uuid4()
        assignment = make_assignment(dock_id, 10, 12, visit_id=visit_id)

        assert assignment.label(8) == f"visit {str(visit_id)[:8]}"
        assert assignment.label() == f"visit {visit_id}"

    def test_dock_label(self, dock_id):
        assert make_assignment(dock_id, 10, 12, dock_name="South").dock_label() == "South"
        assert make_assignment(dock_id, 10, 12).dock_label(8) == str(dock_id)[:8]


class TestUnassignedVisit:
    """Test UnassignedVisit warnings."""

    def test_warning_names_visit_window_and_reason(self):
        visit = UnassignedVisit(
            visit_id=uuid4(),
            eta=at(10),
            etd=at(12),
            reason="no available dock",
            vessel_name="Aurora",
        )

        assert visit.warning() == (
            "Aurora [2025-03-10T10:00:00+00:00 to 2025-03-10T12:00:00+00:00]: "
            "no available dock"
        )

    def test_visit_label_without_details(self):
        visit_id = uuid4()

        assert visit_label(visit_id, None, None, 8) == f"visit {str(visit_id)[:8]}"


class TestPlanningInputs:
    """Test visit requests and dock snapshots."""

    def test_visit_request_validates_window(self):
        with pytest.raises(ValueError, match="eta must be before etd"):
            make_visit(12, 10)

    def test_visit_request_optional_identifiers(self):
        visit = make_visit(10, 12, preassigned_dock_id="", vessel_id=None)

        assert visit.preassigned_dock_id is None
        assert visit.vessel_id is None

    def test_visit_request_rejects_malformed_dock(self):
        with pytest.raises(ValueError):
            make_visit(10, 12, preassigned_dock_id="dock-7")

    def test_visit_request_from_camel_case(self, dock_id):
        visit = VisitRequest.model_validate(
            {
                "visitId": str(uuid4()),
                "eta": "2025-03-10T10:00:00Z",
                "etd": "2025-03-10T12:00:00Z",
                "preassignedDockId": str(dock_id),
                "compatibleDockIds": [str(dock_id)],
            }
        )

        assert visit.preassigned_dock_id == dock_id
        assert visit.compatible_dock_ids == (dock_id,)

    def test_to_assignment_copies_visit_data(self, dock_id):
        visit = make_visit(10, 12, vessel_name="Aurora", estimated_volume=12)

        assignment = visit.to_assignment(dock_id, "North 1")

        assert assignment.visit_id == visit.visit_id
        assert assignment.dock_id == dock_id
        assert assignment.dock_name == "North 1"
        assert (assignment.eta, assignment.etd) == (visit.eta, visit.etd)
        assert assignment.vessel_name == "Aurora"
        assert assignment.estimated_volume == 12

    def test_to_unassigned(self):
        visit = make_visit(10, 12, vessel_imo="9321483")

        unassigned = visit.to_unassigned("no available dock")

        assert unassigned.visit_id == visit.visit_id
        assert unassigned.reason == "no available dock"
        assert unassigned.vessel_imo == "9321483"

    def test_dock_info_parses_identifier(self, dock_id):
        assert DockInfo(dock_id=str(dock_id), name="North 1").dock_id == dock_id

        with pytest.raises(ValueError):
            DockInfo(dock_id="north-1")


class TestTimeZones:
    """Test that planning instants must carry a UTC offset."""

    def test_visit_request_rejects_naive_eta(self):
        with pytest.raises(ValueError, match="timezone"):
            VisitRequest(
                visit_id=uuid4(), eta=datetime(2025, 3, 10, 13), etd=at(15)
            )

    def test_assignment_rejects_naive_etd(self, dock_id):
        with pytest.raises(ValueError, match="timezone"):
            Assignment(
                visit_id=uuid4(),
                dock_id=dock_id,
                eta=at(10),
                etd=datetime(2025, 3, 10, 12),
            )

    def test_offsets_are_accepted(self, dock_id):
        assignment = Assignment.model_validate(
            {
                "visitId": str(uuid4()),
                "dockId": str(dock_id),
                "eta": "2025-03-10T12:00:00+02:00",
                "etd": "2025-03-10T12:00:00Z",
            }
        )

        assert assignment.time_window.duration == timedelta(hours=2)
