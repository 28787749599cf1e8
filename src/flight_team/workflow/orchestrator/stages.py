"""
Stage plan for the create path.

The plan is evaluated once at the start of a run from Settings. Stages that need a
capability the configured credentials do not have stay in the plan, marked disabled,
so they are logged as skipped and can be switched on by configuration alone.
"""

from dataclasses import dataclass
from typing import List
from typing import Optional

from flight_team.settings import Settings
from flight_team.workflow.enums import Capability
from flight_team.workflow.enums import ProvisioningStage

STAGE_DESCRIPTIONS = {
    ProvisioningStage.RESOLVE_ROSTERS: "Resolving pilots and flight attendants",
    ProvisioningStage.CREATE_GROUP: "Creating unified group",
    ProvisioningStage.INVITE_GUEST: "Inviting catering liaison",
    ProvisioningStage.MATERIALIZE_TEAM: "Creating team and channels",
    ProvisioningStage.CREATE_PLANNER: "Creating pre-flight checklist",
    ProvisioningStage.PROVISION_LIST: "Creating challenging passengers list",
    ProvisioningStage.PROVISION_PAGE: "Creating and publishing team page",
}

# Stages that cannot run with app-only credentials
STAGE_REQUIREMENTS = {
    ProvisioningStage.CREATE_PLANNER: Capability.DELEGATED_USER,
}


@dataclass(frozen=True)
class StagePlanEntry:
    stage: ProvisioningStage
    enabled: bool = True
    requires: Optional[Capability] = None

    @property
    def description(self) -> str:
        return STAGE_DESCRIPTIONS[self.stage]


def available_capabilities(settings: Settings) -> set:
    capabilities = {Capability.APP_ONLY}
    if settings.enable_planner_stage:
        capabilities.add(Capability.DELEGATED_USER)
    return capabilities


def build_stage_plan(settings: Settings) -> List[StagePlanEntry]:
    """All create-path stages in execution order, each marked enabled or disabled."""
    capabilities = available_capabilities(settings)
    plan = []
    for stage in ProvisioningStage:
        requires = STAGE_REQUIREMENTS.get(stage)
        enabled = requires is None or requires in capabilities
        plan.append(StagePlanEntry(stage=stage, enabled=enabled, requires=requires))
    return plan
