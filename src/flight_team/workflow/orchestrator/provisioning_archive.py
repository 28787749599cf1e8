"""
Flight Team Archive

Marks a team read-only. Graph decides whether the transition is legal; no existence or
state checks are made here.
"""

from flight_team.graph.client import GraphClient
from flight_team.workflow.enums import WorkflowOperation
from flight_team.workflow.orchestrator.status_tracker import StageTracker


async def archive_team(client: GraphClient, workspace_id: str) -> None:
    """
    Archive a team.

    Raises:
        RemoteCallError: If Graph rejects the archive request
    """
    tracker = StageTracker(WorkflowOperation.ARCHIVE, workspace_id, total_steps=1)

    try:
        tracker.update("Archiving team")
        await client.archive_team(workspace_id)
    except Exception as e:
        tracker.fail(e)
        raise

    tracker.complete(f"Team {workspace_id} archived")
