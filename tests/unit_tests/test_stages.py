"""Unit tests for the create-path stage plan and StageTracker."""

from flight_team.settings import Settings
from flight_team.workflow.enums import Capability
from flight_team.workflow.enums import ProvisioningStage
from flight_team.workflow.enums import WorkflowOperation
from flight_team.workflow.orchestrator import build_stage_plan
from flight_team.workflow.orchestrator.stages import available_capabilities
from flight_team.workflow.orchestrator.status_tracker import StageTracker


class TestBuildStagePlan:
    """Tests for build_stage_plan."""

    def test_stage_order(self):
        plan = build_stage_plan(Settings(_env_file=None))

        assert [entry.stage for entry in plan] == [
            ProvisioningStage.RESOLVE_ROSTERS,
            ProvisioningStage.CREATE_GROUP,
            ProvisioningStage.INVITE_GUEST,
            ProvisioningStage.MATERIALIZE_TEAM,
            ProvisioningStage.CREATE_PLANNER,
            ProvisioningStage.PROVISION_LIST,
            ProvisioningStage.PROVISION_PAGE,
        ]

    def test_planner_disabled_with_app_only_credentials(self):
        plan = {entry.stage: entry for entry in build_stage_plan(Settings(_env_file=None))}

        planner = plan[ProvisioningStage.CREATE_PLANNER]
        assert not planner.enabled
        assert planner.requires == Capability.DELEGATED_USER
        assert all(entry.enabled for stage, entry in plan.items() if stage != ProvisioningStage.CREATE_PLANNER)

    def test_planner_enabled_with_delegated_credentials(self):
        settings = Settings(_env_file=None, enable_planner_stage=True)

        assert Capability.DELEGATED_USER in available_capabilities(settings)
        assert all(entry.enabled for entry in build_stage_plan(settings))

    def test_every_stage_described(self):
        assert all(entry.description for entry in build_stage_plan(Settings(_env_file=None)))


class TestStageTracker:
    """Tests for StageTracker."""

    def test_step_labels(self):
        tracker = StageTracker(WorkflowOperation.PROVISION, "Flight 100", total_steps=3)

        assert tracker.update("Creating unified group") == "Step 1/3: Creating unified group"
        assert tracker.update("Inviting catering liaison") == "Step 2/3: Inviting catering liaison"
        assert tracker.current_step == "Step 2/3: Inviting catering liaison"

    def test_record_ignores_missing_ids(self):
        tracker = StageTracker(WorkflowOperation.PROVISION, "Flight 100", total_steps=1)

        tracker.record("group", "g1")
        tracker.record("channel", "c1")
        tracker.record("channel", "c2")
        tracker.record("page", None)

        assert tracker.created_resources == {"group": ["g1"], "channel": ["c1", "c2"]}

    def test_fail_logs_step_and_orphans(self, log_messages):
        tracker = StageTracker(WorkflowOperation.PROVISION, "Flight 100", total_steps=2)
        tracker.update("Creating unified group")
        tracker.record("group", "g1")

        tracker.fail(RuntimeError("boom"))

        assert log_messages.levels("ERROR") == ["[Flight 100] PROVISION FAILED at Step 1/2: Creating unified group: boom"]
        assert log_messages.levels("WARNING") == ["[Flight 100] Resources created before failure were left in place"]

    def test_fail_before_first_step(self, log_messages):
        StageTracker(WorkflowOperation.ARCHIVE, "team-1", total_steps=1).fail(RuntimeError("boom"))

        assert log_messages.levels("ERROR") == ["[team-1] ARCHIVE FAILED at before first step: boom"]
        assert log_messages.levels("WARNING") == []

    def test_skip_and_complete(self, log_messages):
        tracker = StageTracker(WorkflowOperation.PROVISION, "Flight 100", total_steps=1)

        tracker.skip("Creating pre-flight checklist", reason="requires DELEGATED_USER credentials")
        tracker.complete("Team g1 provisioned")

        assert "[Flight 100] Skipping: Creating pre-flight checklist" in list(log_messages)
        assert log_messages.levels("SUCCESS") == ["[Flight 100] PROVISION COMPLETED: Team g1 provisioned"]

    def test_braces_in_subject_logged_verbatim(self, log_messages):
        tracker = StageTracker(WorkflowOperation.PROVISION, "Flight {7}", total_steps=1)

        tracker.update("Creating unified group {0}")
        tracker.skip("Creating pre-flight checklist", reason="{reason}")
        tracker.record("group", "g1")
        tracker.fail(RuntimeError("{boom}"))

        assert "[Flight {7}] Step 1/1: Creating unified group {0}" in list(log_messages)
        assert "[Flight {7}] Skipping: Creating pre-flight checklist" in list(log_messages)
        assert log_messages.levels("WARNING") == ["[Flight {7}] Resources created before failure were left in place"]
