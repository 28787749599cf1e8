"""
Unified group creation and guest invitation.
"""

from datetime import datetime
from typing import Optional

from loguru import logger

from flight_team.graph.client import GraphClient
from flight_team.graph.models import Group
from flight_team.graph.models import Invitation
from flight_team.workflow.models import WorkspaceRequest
from flight_team.workflow.orchestrator.roster_flow import ResolvedRoster

GUEST_INVITE_REDIRECT_URL = "https://teams.microsoft.com"


def build_mail_nickname(flight_number: str, now: Optional[datetime] = None) -> str:
    """
    Mail alias for the group: ``flight{number}{hour}{minute}{second}``.

    The time-of-day suffix keeps two teams for the same flight on one day from colliding.
    """
    now = now or datetime.now()
    return f"flight{flight_number}{now.hour}{now.minute}{now.second}"


def build_group(request: WorkspaceRequest, roster: ResolvedRoster, now: Optional[datetime] = None) -> Group:
    return Group(
        display_name=request.display_name,
        description=request.description,
        visibility="Private",
        mail_enabled=True,
        mail_nickname=build_mail_nickname(request.flight_number, now),
        group_types=["Unified"],
        security_enabled=False,
        members=list(roster.members),
        owners=list(roster.owners),
    )


async def create_unified_group(
    client: GraphClient,
    request: WorkspaceRequest,
    roster: ResolvedRoster,
    now: Optional[datetime] = None,
) -> Group:
    """Create the private, mail-enabled group that everything else hangs off."""
    created_group = await client.create_group(build_group(request, roster, now))
    logger.info(f"Created group {created_group.id} for {request.display_name}")
    return created_group


async def invite_guest(client: GraphClient, group_id: str, guest_email: str) -> Invitation:
    """
    Invite an external user and add them as a plain member of the group.

    The guest has no directory id until the invitation exists, so this runs after the
    group is created instead of being part of its initial member list.
    """
    guest_invite = Invitation(
        invited_user_email_address=guest_email,
        invite_redirect_url=GUEST_INVITE_REDIRECT_URL,
        send_invitation_message=True,
    )
    created_invite = await client.create_guest_invitation(guest_invite)

    await client.add_member(group_id, created_invite.invited_user.id)
    logger.info(f"Added guest user {guest_email} to group {group_id}")
    return created_invite
