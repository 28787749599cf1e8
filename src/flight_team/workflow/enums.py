"""
Workflow Enums

Stage and capability enums for flight team provisioning.
"""

from enum import Enum


class ProvisioningStage(str, Enum):
    """Ordered stages of the create path."""

    RESOLVE_ROSTERS = "RESOLVE_ROSTERS"  # Look up pilot and attendant ids
    CREATE_GROUP = "CREATE_GROUP"  # Unified group with members and owner
    INVITE_GUEST = "INVITE_GUEST"  # Catering liaison guest invite + membership
    MATERIALIZE_TEAM = "MATERIALIZE_TEAM"  # Team, channels, optional app
    CREATE_PLANNER = "CREATE_PLANNER"  # Pre-flight checklist plan (capability-gated)
    PROVISION_LIST = "PROVISION_LIST"  # Challenging passengers list + tab
    PROVISION_PAGE = "PROVISION_PAGE"  # Landing page with list web parts, published


class Capability(str, Enum):
    """Backend capabilities a stage can depend on."""

    APP_ONLY = "APP_ONLY"  # Application permissions, no signed-in user
    DELEGATED_USER = "DELEGATED_USER"  # Delegated permissions on behalf of a user


class WorkflowOperation(str, Enum):
    """Operations exposed by TeamProvisioning."""

    PROVISION = "PROVISION"
    UPDATE = "UPDATE"
    ARCHIVE = "ARCHIVE"
