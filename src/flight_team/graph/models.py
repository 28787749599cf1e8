"""
Graph Resource Models

Pydantic models for the Microsoft Graph resources the workflow creates or reads.
Field names are snake_case in Python and camelCase on the wire; only the fields the
workflow sets or reads are declared, anything else Graph returns is kept as extra data.
"""

from datetime import datetime
from typing import Generic
from typing import List
from typing import Optional
from typing import TypeVar

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic.alias_generators import to_camel

# Client-side web part id of the SharePoint "List" web part
LIST_WEB_PART_TYPE = "f92bf067-bc19-489e-a556-7fe95f508720"

TEAMS_WEB_TAB_APP_ID = "com.microsoft.teamspace.tab.web"
TEAMS_PLANNER_TAB_APP_ID = "com.microsoft.teamspace.tab.planner"


class GraphModel(BaseModel):
    """Base model: camelCase aliases on the wire, snake_case names in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    def to_payload(self) -> dict:
        """Serialize for a request body, omitting unset (None) fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


T = TypeVar("T", bound=GraphModel)


class GraphCollection(GraphModel, Generic[T]):
    """Collection response: ``{"value": [...]}``."""

    value: List[T] = Field(default_factory=list)
    next_link: Optional[str] = Field(default=None, alias="@odata.nextLink")


# ════════════════════════════════════════════════════════════════════════════
# Directory
# ════════════════════════════════════════════════════════════════════════════


class User(GraphModel):
    id: Optional[str] = None
    display_name: Optional[str] = None
    user_principal_name: Optional[str] = None
    mail: Optional[str] = None


class Group(GraphModel):
    """Unified (Microsoft 365) group. Members and owners are bound by directory object URL."""

    id: Optional[str] = None
    display_name: Optional[str] = None
    description: Optional[str] = None
    visibility: Optional[str] = None
    mail_enabled: Optional[bool] = None
    mail_nickname: Optional[str] = None
    group_types: Optional[List[str]] = None
    security_enabled: Optional[bool] = None
    members: Optional[List[str]] = Field(default=None, alias="members@odata.bind")
    owners: Optional[List[str]] = Field(default=None, alias="owners@odata.bind")


class AddUserToGroup(GraphModel):
    """Body of a members/$ref or owners/$ref request."""

    user_path: str = Field(alias="@odata.id")


class InvitedUser(GraphModel):
    id: Optional[str] = None


class Invitation(GraphModel):
    id: Optional[str] = None
    invited_user_email_address: Optional[str] = None
    invite_redirect_url: Optional[str] = None
    send_invitation_message: Optional[bool] = None
    invited_user: Optional[InvitedUser] = None


# ════════════════════════════════════════════════════════════════════════════
# Teams
# ════════════════════════════════════════════════════════════════════════════


class TeamGuestSettings(GraphModel):
    allow_create_update_channels: Optional[bool] = None
    allow_delete_channels: Optional[bool] = None


class Team(GraphModel):
    id: Optional[str] = None
    guest_settings: Optional[TeamGuestSettings] = None


class Channel(GraphModel):
    id: Optional[str] = None
    display_name: Optional[str] = None
    description: Optional[str] = None


class TeamsApp(GraphModel):
    app_id: str


class TeamsChannelTabConfiguration(GraphModel):
    entity_id: Optional[str] = None
    content_url: Optional[str] = None
    remove_url: Optional[str] = None
    website_url: Optional[str] = None


class TeamsChannelTab(GraphModel):
    id: Optional[str] = None
    name: Optional[str] = None
    teams_app_id: Optional[str] = None
    configuration: Optional[TeamsChannelTabConfiguration] = None


# ════════════════════════════════════════════════════════════════════════════
# SharePoint
# ════════════════════════════════════════════════════════════════════════════


class Site(GraphModel):
    id: Optional[str] = None
    name: Optional[str] = None
    display_name: Optional[str] = None
    web_url: Optional[str] = None


class TextColumn(GraphModel):
    pass


class ColumnDefinition(GraphModel):
    name: str
    text: Optional[TextColumn] = None


class SharePointList(GraphModel):
    id: Optional[str] = None
    display_name: Optional[str] = None
    web_url: Optional[str] = None
    columns: Optional[List[ColumnDefinition]] = None


class ListProperties(GraphModel):
    is_document_library: bool = False
    selected_list_id: Optional[str] = None
    webpart_height_key: int = 1


class WebPartData(GraphModel):
    data_version: str = "1.0"
    properties: Optional[ListProperties] = None


class SharePointWebPart(GraphModel):
    type: str = LIST_WEB_PART_TYPE
    data: Optional[WebPartData] = None


class SharePointPage(GraphModel):
    id: Optional[str] = None
    name: Optional[str] = None
    title: Optional[str] = None
    web_parts: Optional[List[SharePointWebPart]] = None


class ItemReference(GraphModel):
    id: Optional[str] = None
    drive_id: Optional[str] = None
    path: Optional[str] = None


class DriveItem(GraphModel):
    id: Optional[str] = None
    name: Optional[str] = None
    web_url: Optional[str] = None
    parent_reference: Optional[ItemReference] = None


# ════════════════════════════════════════════════════════════════════════════
# Planner
# ════════════════════════════════════════════════════════════════════════════


class Plan(GraphModel):
    id: Optional[str] = None
    title: Optional[str] = None
    owner: Optional[str] = None


class Bucket(GraphModel):
    id: Optional[str] = None
    name: Optional[str] = None
    plan_id: Optional[str] = None


class PlannerTask(GraphModel):
    id: Optional[str] = None
    title: Optional[str] = None
    plan_id: Optional[str] = None
    bucket_id: Optional[str] = None
    due_date_time: Optional[datetime] = None
