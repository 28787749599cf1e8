"""
Workflow Orchestrator Module

Coordinates flight team provisioning: create, membership update and archive.
"""

from flight_team.workflow.orchestrator.provisioning import TeamProvisioning
from flight_team.workflow.orchestrator.provisioning_archive import archive_team
from flight_team.workflow.orchestrator.provisioning_update import update_team
from flight_team.workflow.orchestrator.stages import build_stage_plan

__all__ = [
    "TeamProvisioning",
    "archive_team",
    "build_stage_plan",
    "update_team",
]
