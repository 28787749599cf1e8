"""
Flight Team Update

Syncs membership of an existing team with an updated request:
- Admin change: new admin made owner before the old one loses ownership
- Pilots / flight attendants: joined or removed only when group membership changes;
  moving between rosters (or to and from admin) issues no membership calls
- Unchanged rosters issue no Graph calls
"""

from typing import Optional

from loguru import logger

from flight_team.graph.client import GraphClient
from flight_team.workflow.enums import WorkflowOperation
from flight_team.workflow.models import MembershipDelta
from flight_team.workflow.models import WorkspaceRequest
from flight_team.workflow.orchestrator.roster_flow import apply_membership_delta
from flight_team.workflow.orchestrator.status_tracker import StageTracker


async def update_team(
    client: GraphClient,
    original: WorkspaceRequest,
    updated: WorkspaceRequest,
    workspace_id: Optional[str] = None,
) -> MembershipDelta:
    """
    Apply membership changes between two versions of a flight team.

    Args:
        client: Graph client
        original: Request the team was last provisioned/updated from
        updated: Desired request
        workspace_id: Team id; defaults to original.workspace_id

    Returns:
        The applied MembershipDelta

    Raises:
        ValueError: If no team id is known
        RemoteCallError: On the first failed Graph call
    """
    workspace_id = workspace_id or original.workspace_id or updated.workspace_id
    if not workspace_id:
        raise ValueError(f"Cannot update {original.display_name}: no workspace id")

    delta = MembershipDelta.compute(original, updated)
    tracker = StageTracker(WorkflowOperation.UPDATE, workspace_id, total_steps=1)
    logger.info(
        "Membership changes for {}",
        workspace_id,
        admin_changed=delta.admin_changed,
        pilots_to_add=delta.pilots_to_add,
        pilots_to_remove=delta.pilots_to_remove,
        attendants_to_add=delta.attendants_to_add,
        attendants_to_remove=delta.attendants_to_remove,
    )

    try:
        tracker.update("Syncing team membership")
        await apply_membership_delta(client, workspace_id, delta)
    except Exception as e:
        tracker.fail(e)
        raise

    tracker.complete("Membership up to date" if delta.is_empty else "Membership updated")
    return delta
