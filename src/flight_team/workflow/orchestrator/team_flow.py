"""
Team creation: team container, default channel lookup, role channels, optional app.
"""

from dataclasses import dataclass
from dataclasses import field
from typing import List
from typing import Optional

from loguru import logger

from flight_team.graph.client import GraphClient
from flight_team.graph.models import Channel
from flight_team.graph.models import Team
from flight_team.graph.models import TeamGuestSettings
from flight_team.graph.models import TeamsApp

ROLE_CHANNELS = (
    ("Pilots", "Discussion about flightpath, weather, etc."),
    ("Flight Attendants", "Discussion about duty assignments, etc."),
)


@dataclass
class TeamChannels:
    """Result of materializing the team."""

    general_channel_id: str
    channel_ids: List[str] = field(default_factory=list)
    app_installed: bool = False


def build_team() -> Team:
    """Guests may not create, update or delete channels."""
    return Team(
        guest_settings=TeamGuestSettings(
            allow_create_update_channels=False,
            allow_delete_channels=False,
        )
    )


async def materialize_team(client: GraphClient, group_id: str, team_app_id: Optional[str] = None) -> TeamChannels:
    """
    Turn the group into a team and add its channels.

    Args:
        client: Graph client
        group_id: Id of the unified group
        team_app_id: Teams app to install; None skips the install

    Returns:
        TeamChannels with the default ("General") channel id

    Raises:
        RemoteCallError: On the first failed Graph call
    """
    await client.create_team(group_id, build_team())
    logger.info(f"Created team for group {group_id}")

    # "General" is created with the team and is the only channel at this point
    channels = await client.get_team_channels(group_id)
    general_channel = channels.value[0]

    channel_ids = []
    for display_name, description in ROLE_CHANNELS:
        created_channel = await client.create_team_channel(
            group_id, Channel(display_name=display_name, description=description)
        )
        channel_ids.append(created_channel.id)
        logger.info(f"Created {display_name} channel")

    app_installed = False
    if team_app_id:
        await client.add_app_to_team(group_id, TeamsApp(app_id=team_app_id))
        app_installed = True
        logger.info(f"Added app {team_app_id} to team")
    else:
        logger.debug("No team app configured - skipping app install")

    return TeamChannels(
        general_channel_id=general_channel.id,
        channel_ids=channel_ids,
        app_installed=app_installed,
    )
