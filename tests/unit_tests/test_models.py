"""Unit tests for workflow/models.py and graph/models.py."""

from datetime import datetime
from datetime import timezone

import pytest
from pydantic import ValidationError

from flight_team.graph.models import AddUserToGroup
from flight_team.graph.models import Channel
from flight_team.graph.models import GraphCollection
from flight_team.graph.models import Group
from flight_team.graph.models import Invitation
from flight_team.graph.models import PlannerTask
from flight_team.workflow.models import MembershipDelta
from flight_team.workflow.models import WorkspaceRequest
from flight_team.workflow.models import dedupe_principals


def _request(**overrides) -> WorkspaceRequest:
    fields = {
        "flight_number": "100",
        "admin": "alice",
        "pilots": ["bob"],
        "flight_attendants": ["carol"],
        "catering_liaison": "dan@external.com",
    }
    fields.update(overrides)
    return WorkspaceRequest(**fields)


class TestWorkspaceRequest:
    """Tests for WorkspaceRequest validation."""

    def test_rosters_are_deduplicated(self):
        request = _request(pilots=["bob", "Bob", " bob ", "eve", "eve"], flight_attendants=["carol", "carol"])

        assert request.pilots == ["bob", "eve"]
        assert request.flight_attendants == ["carol"]

    def test_blank_principals_dropped(self):
        request = _request(pilots=["", "  ", "bob"])

        assert request.pilots == ["bob"]

    def test_admin_removed_from_rosters(self):
        """The admin is a member through the admin field only."""
        request = _request(admin="alice", pilots=["ALICE", "bob"], flight_attendants=["alice", "carol"])

        assert request.pilots == ["bob"]
        assert request.flight_attendants == ["carol"]

    def test_rosters_must_be_disjoint(self):
        with pytest.raises(ValidationError) as exc_info:
            _request(pilots=["bob", "eve"], flight_attendants=["eve"])

        assert "both pilot and flight attendant" in str(exc_info.value)

    @pytest.mark.parametrize(
        "value,expected",
        [(100, "100"), (100.0, "100"), (100.5, "100.5"), (" 42 ", "42")],
        ids=["int", "integral_float", "fractional_float", "padded_str"],
    )
    def test_flight_number_normalized(self, value, expected):
        request = _request(flight_number=value)

        assert request.flight_number == expected
        assert request.display_name == f"Flight {expected}"

    def test_empty_flight_number_rejected(self):
        with pytest.raises(ValidationError):
            _request(flight_number="  ")

    @pytest.mark.parametrize("guest", ["dan", "dan@external", "@external.com"], ids=["no_at", "no_dot", "no_local"])
    def test_invalid_guest_email(self, guest):
        with pytest.raises(ValidationError):
            _request(catering_liaison=guest)

    def test_departure_time_parsed(self):
        request = _request(departure_time="2026-10-20T08:30:00Z")

        assert request.departure_time == datetime(2026, 10, 20, 8, 30, tzinfo=timezone.utc)

    def test_dedupe_principals_keeps_first_spelling(self):
        assert dedupe_principals(["Bob@Contoso.com", "bob@contoso.com"]) == ["Bob@Contoso.com"]


class TestMembershipDelta:
    """Tests for MembershipDelta.compute."""

    def test_pilot_added(self):
        delta = MembershipDelta.compute(_request(pilots=["bob"]), _request(pilots=["bob", "eve"]))

        assert delta.pilots_to_add == ["eve"]
        assert delta.pilots_to_remove == []
        assert delta.attendants_to_add == []
        assert delta.attendants_to_remove == []
        assert not delta.admin_changed
        assert not delta.is_empty

    def test_unchanged_is_empty(self):
        delta = MembershipDelta.compute(_request(), _request())

        assert delta.is_empty

    def test_admin_change_case_insensitive(self):
        assert not MembershipDelta.compute(_request(admin="alice"), _request(admin="ALICE")).admin_changed
        assert MembershipDelta.compute(_request(admin="alice"), _request(admin="zoe")).admin_changed

    def test_promoted_pilot_not_removed(self):
        delta = MembershipDelta.compute(_request(admin="alice", pilots=["bob"]), _request(admin="bob", pilots=["bob"]))

        assert delta.pilots_to_remove == []
        assert delta.new_admin_was_member
        assert not delta.old_admin_stays_member

    def test_demoted_admin_not_added(self):
        delta = MembershipDelta.compute(
            _request(admin="alice"),
            _request(admin="zoe", flight_attendants=["carol", "Alice"]),
        )

        assert delta.attendants_to_add == []
        assert delta.old_admin_stays_member
        assert not delta.new_admin_was_member

    def test_roster_move_is_not_a_membership_change(self):
        delta = MembershipDelta.compute(
            _request(pilots=["bob"], flight_attendants=["carol"]),
            _request(pilots=["carol"], flight_attendants=["bob"]),
        )

        assert delta.is_empty

    @pytest.mark.parametrize(
        "original,updated",
        [
            (["bob"], ["bob", "eve"]),
            (["bob", "eve"], ["bob"]),
            (["bob", "eve"], ["frank", "grace"]),
            ([], ["bob"]),
            (["bob"], []),
            (["bob", "eve", "frank"], ["frank", "bob", "heidi"]),
        ],
        ids=["add", "remove", "replace_all", "from_empty", "to_empty", "mixed"],
    )
    def test_delta_replays_to_updated_roster(self, original, updated):
        """added = updated - original, removed = original - updated, disjoint, and replay gives updated."""
        delta = MembershipDelta.compute(_request(pilots=original), _request(pilots=updated))

        added, removed = set(delta.pilots_to_add), set(delta.pilots_to_remove)
        assert added == set(updated) - set(original)
        assert removed == set(original) - set(updated)
        assert added & removed == set()

        roster = set(original)
        roster |= added
        roster -= removed
        assert roster == set(updated)


class TestGraphModels:
    """Tests for camelCase wire models."""

    def test_group_odata_binds(self):
        group = Group(display_name="Flight 1", members=["m"], owners=["o"], security_enabled=False)

        assert group.to_payload() == {
            "displayName": "Flight 1",
            "securityEnabled": False,
            "members@odata.bind": ["m"],
            "owners@odata.bind": ["o"],
        }

    def test_add_user_payload(self):
        assert AddUserToGroup(user_path="https://g/users/1").to_payload() == {"@odata.id": "https://g/users/1"}

    def test_invitation_response_parsed(self):
        invite = Invitation.model_validate({"id": "i1", "invitedUser": {"id": "guest"}, "status": "PendingAcceptance"})

        assert invite.invited_user.id == "guest"

    def test_collection_parsed(self):
        channels = GraphCollection[Channel].model_validate(
            {"value": [{"id": "c1", "displayName": "General"}], "@odata.nextLink": "next"}
        )

        assert channels.value[0].display_name == "General"
        assert channels.next_link == "next"

    def test_due_date_serialized_as_iso(self):
        task = PlannerTask(title="t", due_date_time=datetime(2026, 10, 20, 8, 30, tzinfo=timezone.utc))

        assert task.to_payload()["dueDateTime"].startswith("2026-10-20T08:30:00")
