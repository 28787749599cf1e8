"""
Roster resolution and membership sync.

- Create path: resolve pilot and flight attendant login names to directory object URLs
  and build the initial member/owner sets (admin is a member and the only owner).
- Update path: apply a MembershipDelta to an existing group, one Graph call per change.
"""

from dataclasses import dataclass
from dataclasses import field
from typing import List

from loguru import logger

from flight_team.graph.client import GraphClient
from flight_team.workflow.models import MembershipDelta
from flight_team.workflow.models import WorkspaceRequest


@dataclass
class ResolvedRoster:
    """Initial membership of a new group, as directory object URLs."""

    members: List[str] = field(default_factory=list)
    owners: List[str] = field(default_factory=list)


def _unique(refs: List[str]) -> List[str]:
    return list(dict.fromkeys(refs))


async def resolve_rosters(client: GraphClient, request: WorkspaceRequest) -> ResolvedRoster:
    """
    Look up every pilot and flight attendant, then add the admin.

    Lookups run sequentially, pilots first. Two login names that resolve to the same user
    end up once in the member list. The admin is bound by login name without a lookup.

    Raises:
        RemoteCallError: If a principal cannot be resolved
    """
    member_refs = await client.get_user_ids(request.pilots, request.flight_attendants)

    admin_ref = client.user_reference(request.admin)
    members = _unique(member_refs + [admin_ref])
    owners = [admin_ref]

    logger.info(
        "Resolved {} members for {}",
        len(members),
        request.display_name,
        pilots=len(request.pilots),
        flight_attendants=len(request.flight_attendants),
    )
    return ResolvedRoster(members=members, owners=owners)


async def resolve_user_id(client: GraphClient, principal: str) -> str:
    user = await client.get_user(principal)
    return user.id


async def _add_principals(client: GraphClient, workspace_id: str, principals: List[str], role: str):
    for principal in principals:
        user_id = await resolve_user_id(client, principal)
        await client.add_member(workspace_id, user_id)
        logger.info(f"Added {role} {principal} to {workspace_id}")


async def _remove_principals(client: GraphClient, workspace_id: str, principals: List[str], role: str):
    for principal in principals:
        user_id = await resolve_user_id(client, principal)
        await client.remove_member(workspace_id, user_id)
        logger.info(f"Removed {role} {principal} from {workspace_id}")


async def swap_admin(client: GraphClient, workspace_id: str, delta: MembershipDelta):
    """
    Make the new admin an owner, then revoke the old admin; the group always keeps an owner.

    Membership follows the rosters: the new admin joins only if they were not already in
    the group, and the old admin leaves only if the updated rosters no longer list them.
    """
    new_admin_id = await resolve_user_id(client, delta.new_admin)
    if delta.new_admin_was_member:
        await client.add_owner(workspace_id, new_admin_id)
    else:
        await client.add_member(workspace_id, new_admin_id, is_owner=True)
    logger.info(f"Added admin {delta.new_admin} as owner of {workspace_id}")

    old_admin_id = await resolve_user_id(client, delta.old_admin)
    if delta.old_admin_stays_member:
        await client.remove_owner(workspace_id, old_admin_id)
        logger.info(f"Revoked ownership of previous admin {delta.old_admin} on {workspace_id}")
    else:
        await client.remove_member(workspace_id, old_admin_id, is_owner=True)
        logger.info(f"Removed previous admin {delta.old_admin} from {workspace_id}")


async def apply_membership_delta(client: GraphClient, workspace_id: str, delta: MembershipDelta):
    """
    Apply membership changes to an existing group.

    Args:
        client: Graph client
        workspace_id: Group/team id
        delta: Changes computed from the original and updated request

    Raises:
        RemoteCallError: On the first failed lookup or membership call
    """
    if delta.is_empty:
        logger.info(f"Membership of {workspace_id} already matches - no changes")
        return

    if delta.admin_changed:
        await swap_admin(client, workspace_id, delta)

    await _add_principals(client, workspace_id, delta.pilots_to_add, "pilot")
    await _remove_principals(client, workspace_id, delta.pilots_to_remove, "pilot")

    await _add_principals(client, workspace_id, delta.attendants_to_add, "flight attendant")
    await _remove_principals(client, workspace_id, delta.attendants_to_remove, "flight attendant")
