"""
Flight Team Provisioning

Create, update and archive flight teams through Microsoft Graph.

Every Graph call in a run waits for the previous one: later calls need the ids earlier
calls return. The first failure aborts the run and is re-raised unchanged. Resources
created before the failure are not removed; they are logged for manual cleanup.
"""

from datetime import datetime
from typing import Callable
from typing import Optional

from loguru import logger

from flight_team.graph.client import GraphClient
from flight_team.settings import Settings
from flight_team.workflow.enums import ProvisioningStage
from flight_team.workflow.enums import WorkflowOperation
from flight_team.workflow.models import ProvisionedWorkspace
from flight_team.workflow.models import WorkspaceRequest
from flight_team.workflow.orchestrator.content_flow import create_passenger_list
from flight_team.workflow.orchestrator.content_flow import create_team_page
from flight_team.workflow.orchestrator.group_flow import create_unified_group
from flight_team.workflow.orchestrator.group_flow import invite_guest
from flight_team.workflow.orchestrator.planner_flow import create_preflight_plan
from flight_team.workflow.orchestrator.provisioning_archive import archive_team
from flight_team.workflow.orchestrator.provisioning_update import update_team
from flight_team.workflow.orchestrator.roster_flow import resolve_rosters
from flight_team.workflow.orchestrator.stages import build_stage_plan
from flight_team.workflow.orchestrator.status_tracker import StageTracker
from flight_team.workflow.orchestrator.team_flow import materialize_team


class TeamProvisioning:
    """
    Provisioning workflow bound to one Graph client.

    The client (and so the credential) is injected; instances share no state, so several
    can run concurrently in one process with different credentials.

    Example:
        >>> async with GraphClient.from_settings(token, settings) as client:
        ...     workflow = TeamProvisioning(client, settings)
        ...     team_id = await workflow.provision(request)
    """

    def __init__(
        self,
        client: GraphClient,
        settings: Optional[Settings] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """
        Initialize the workflow.

        Args:
            client: Graph client used for every call
            settings: Configuration; read from the environment when omitted
            clock: Local time source for the group mail alias
        """
        self.client = client
        self.settings = settings or Settings()
        self.clock = clock

    async def provision(self, request: WorkspaceRequest) -> str:
        """
        Provision a new flight team.

        Returns:
            The group id, which is also the team id

        Raises:
            RemoteCallError: First failed Graph call; later stages are not run
        """
        workspace = await self.provision_workspace(request)
        return workspace.group_id

    async def provision_workspace(self, request: WorkspaceRequest) -> ProvisionedWorkspace:
        """Provision a new flight team and return the ids of everything created."""
        stage_plan = build_stage_plan(self.settings)
        enabled = {entry.stage: entry for entry in stage_plan if entry.enabled}
        disabled = {entry.stage: entry for entry in stage_plan if not entry.enabled}

        tracker = StageTracker(WorkflowOperation.PROVISION, request.display_name, total_steps=len(enabled))
        logger.info(
            "Starting provisioning for {}",
            request.display_name,
            enabled_stages=[stage.value for stage in enabled],
            disabled_stages=[stage.value for stage in disabled],
        )

        try:
            tracker.update(enabled[ProvisioningStage.RESOLVE_ROSTERS].description)
            roster = await resolve_rosters(self.client, request)

            tracker.update(enabled[ProvisioningStage.CREATE_GROUP].description)
            group = await create_unified_group(self.client, request, roster, now=self.clock())
            tracker.record("group", group.id)
            workspace = ProvisionedWorkspace(group_id=group.id)

            tracker.update(enabled[ProvisioningStage.INVITE_GUEST].description)
            invitation = await invite_guest(self.client, group.id, request.catering_liaison)
            tracker.record("invitation", invitation.id)

            tracker.update(enabled[ProvisioningStage.MATERIALIZE_TEAM].description)
            team = await materialize_team(self.client, group.id, self.settings.team_app_to_install)
            for channel_id in team.channel_ids:
                tracker.record("channel", channel_id)
            workspace.general_channel_id = team.general_channel_id
            workspace.channel_ids = team.channel_ids
            workspace.app_installed = team.app_installed

            if ProvisioningStage.CREATE_PLANNER in enabled:
                tracker.update(enabled[ProvisioningStage.CREATE_PLANNER].description)
                plan = await create_preflight_plan(
                    self.client,
                    group.id,
                    team.general_channel_id,
                    request.departure_time,
                    self.settings.tenant_name,
                )
                tracker.record("plan", plan.id)
                workspace.plan_id = plan.id
            else:
                entry = disabled[ProvisioningStage.CREATE_PLANNER]
                tracker.skip(entry.description, reason=f"requires {entry.requires.value} credentials")

            tracker.update(enabled[ProvisioningStage.PROVISION_LIST].description)
            passenger_list = await create_passenger_list(self.client, group.id, team.general_channel_id)
            tracker.record("list", passenger_list.sharepoint_list.id)
            workspace.site_id = passenger_list.site.id
            workspace.list_id = passenger_list.sharepoint_list.id

            tracker.update(enabled[ProvisioningStage.PROVISION_PAGE].description)
            page = await create_team_page(self.client, passenger_list.site, request.display_name)
            tracker.record("page", page.id)
            workspace.page_id = page.id

        except Exception as e:
            tracker.fail(e)
            raise

        tracker.complete(f"Team {workspace.group_id} provisioned")
        return workspace

    async def update(
        self,
        original: WorkspaceRequest,
        updated: WorkspaceRequest,
        workspace_id: Optional[str] = None,
    ) -> None:
        """Sync membership of an existing team from original to updated."""
        await update_team(self.client, original, updated, workspace_id=workspace_id)

    async def archive(self, workspace_id: str) -> None:
        """Archive an existing team."""
        await archive_team(self.client, workspace_id)
