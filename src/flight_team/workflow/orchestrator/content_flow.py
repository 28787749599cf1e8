"""
SharePoint content for a new team: the challenging passengers list and the team page.

Both live on the team's root site. The site is looked up once by the list stage and
handed to the page stage.
"""

from dataclasses import dataclass
from typing import Iterable

from loguru import logger

from flight_team.graph.client import GraphClient
from flight_team.graph.models import LIST_WEB_PART_TYPE
from flight_team.graph.models import TEAMS_WEB_TAB_APP_ID
from flight_team.graph.models import ColumnDefinition
from flight_team.graph.models import ListProperties
from flight_team.graph.models import SharePointList
from flight_team.graph.models import SharePointPage
from flight_team.graph.models import SharePointWebPart
from flight_team.graph.models import Site
from flight_team.graph.models import TeamsChannelTab
from flight_team.graph.models import TeamsChannelTabConfiguration
from flight_team.graph.models import TextColumn
from flight_team.graph.models import WebPartData

PASSENGER_LIST_NAME = "Challenging Passengers"
PASSENGER_LIST_COLUMNS = ("Name", "SeatNumber", "Notes")

TEAM_PAGE_NAME = "TeamPage.aspx"
DOCUMENT_LIBRARY_NAME = "Documents"


@dataclass
class PassengerList:
    """Result of the list stage."""

    site: Site
    sharepoint_list: SharePointList


def build_passenger_list() -> SharePointList:
    return SharePointList(
        display_name=PASSENGER_LIST_NAME,
        columns=[ColumnDefinition(name=name, text=TextColumn()) for name in PASSENGER_LIST_COLUMNS],
    )


async def create_passenger_list(client: GraphClient, group_id: str, channel_id: str) -> PassengerList:
    """
    Create the passenger list on the team site and add it as a web tab on the default channel.

    Raises:
        RemoteCallError: On the first failed Graph call
    """
    team_site = await client.get_team_site(group_id)

    created_list = await client.create_sharepoint_list(team_site.id, build_passenger_list())
    logger.info(f"Created list {created_list.id} on site {team_site.id}")

    list_tab = TeamsChannelTab(
        name=PASSENGER_LIST_NAME,
        teams_app_id=TEAMS_WEB_TAB_APP_ID,
        configuration=TeamsChannelTabConfiguration(
            content_url=created_list.web_url,
            website_url=created_list.web_url,
        ),
    )
    await client.add_team_channel_tab(group_id, channel_id, list_tab)
    logger.info("Added list tab to General channel")

    return PassengerList(site=team_site, sharepoint_list=created_list)


def build_team_page(title: str, site_lists: Iterable[SharePointList]) -> SharePointPage:
    """One list web part per site list; "Documents" is shown as a document library."""
    web_parts = []
    for site_list in site_lists:
        web_parts.append(
            SharePointWebPart(
                type=LIST_WEB_PART_TYPE,
                data=WebPartData(
                    data_version="1.0",
                    properties=ListProperties(
                        is_document_library=site_list.display_name == DOCUMENT_LIBRARY_NAME,
                        selected_list_id=site_list.id,
                        webpart_height_key=1,
                    ),
                ),
            )
        )
    return SharePointPage(name=TEAM_PAGE_NAME, title=title, web_parts=web_parts)


async def create_team_page(client: GraphClient, site: Site, title: str) -> SharePointPage:
    """
    Create the team page and publish it. A created page stays a draft until published.

    Raises:
        RemoteCallError: On the first failed Graph call
    """
    site_lists = await client.get_site_lists(site.id)

    created_page = await client.create_sharepoint_page(site.id, build_team_page(title, site_lists.value))
    await client.publish_sharepoint_page(site.id, created_page.id)
    logger.info(f"Published page {created_page.id} with {len(site_lists.value)} list web parts")
    return created_page
