"""Microsoft Graph client used by the provisioning workflow.

Wraps one ``httpx.AsyncClient`` bound to a single bearer token and Graph endpoint.
Every request goes through :meth:`GraphClient.call`, which serializes the body,
attaches the credential and applies the per-call retry budget.

Retries are opt-in: a call site passes ``retries=N`` only when the request is known
to race Graph's provisioning latency (e.g. reading a team's drive right after the
team was created). Between attempts the client sleeps a fixed backoff; there is no
jitter and no exponential growth.
"""

import asyncio
from dataclasses import dataclass
from typing import Any
from typing import Iterable
from typing import List
from typing import Optional
from typing import Union

import httpx
from loguru import logger

from flight_team.errors import RemoteCallError
from flight_team.graph.models import AddUserToGroup
from flight_team.graph.models import Bucket
from flight_team.graph.models import Channel
from flight_team.graph.models import DriveItem
from flight_team.graph.models import GraphCollection
from flight_team.graph.models import GraphModel
from flight_team.graph.models import Group
from flight_team.graph.models import Invitation
from flight_team.graph.models import ItemReference
from flight_team.graph.models import Plan
from flight_team.graph.models import PlannerTask
from flight_team.graph.models import SharePointList
from flight_team.graph.models import SharePointPage
from flight_team.graph.models import Site
from flight_team.graph.models import Team
from flight_team.graph.models import TeamsApp
from flight_team.graph.models import TeamsChannelTab
from flight_team.graph.models import User
from flight_team.settings import DEFAULT_GRAPH_ENDPOINT

# Methods that never carry a request body
BODYLESS_METHODS = {"GET", "DELETE"}

DEFAULT_RETRY_BACKOFF_SECONDS = 3.0
DEFAULT_TIMEOUT_SECONDS = 30.0

# Drive provisioning lags behind team creation
DRIVE_FOLDER_RETRIES = 2

Body = Union[GraphModel, dict, None]


@dataclass(frozen=True)
class GraphRequestSpec:
    """One Graph request: built per call and resent unchanged on retry."""

    method: str
    path: str
    body: Body = None
    retries: int = 0

    def payload(self) -> Optional[dict]:
        """JSON payload for the request, or None when the method takes no body."""
        if self.body is None or self.method in BODYLESS_METHODS:
            return None
        if isinstance(self.body, GraphModel):
            return self.body.to_payload()
        return self.body


class GraphClient:
    """Async Microsoft Graph client bound to one bearer token.

    Example:
        >>> async with GraphClient(access_token) as client:
        ...     user = await client.get_user("bob@contoso.com")

    Attributes:
        endpoint: Graph base URL (no trailing slash).
        retry_backoff_seconds: Fixed delay between retry attempts.
        timeout: Per-request timeout in seconds.
    """

    def __init__(
        self,
        access_token: str,
        endpoint: str = DEFAULT_GRAPH_ENDPOINT,
        retry_backoff_seconds: float = DEFAULT_RETRY_BACKOFF_SECONDS,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the Graph client.

        Args:
            access_token: Bearer token for Graph; acquiring it is the caller's job.
            endpoint: Graph base URL.
            retry_backoff_seconds: Fixed delay between retry attempts.
            timeout: Per-request timeout in seconds.
            transport: Optional httpx transport (used to plug in a fake Graph in tests).
        """
        self.endpoint = endpoint.rstrip("/")
        self.retry_backoff_seconds = retry_backoff_seconds
        self.timeout = timeout
        self._client = httpx.AsyncClient(
            base_url=self.endpoint,
            headers={
                "Authorization": f"Bearer {access_token}",
                "Accept": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, access_token: str, settings, **kwargs) -> "GraphClient":
        """Build a client using the endpoint, backoff and timeout from Settings."""
        return cls(
            access_token,
            endpoint=settings.graph_endpoint,
            retry_backoff_seconds=settings.graph_retry_backoff_seconds,
            timeout=settings.graph_request_timeout_seconds,
            **kwargs,
        )

    async def close(self) -> None:
        """Close the HTTP client and release pooled connections."""
        await self._client.aclose()

    async def __aenter__(self) -> "GraphClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    def user_reference(self, user_id: str) -> str:
        """Directory object URL used in ``@odata.bind`` and ``$ref`` payloads."""
        return f"{self.endpoint}/users/{user_id}"

    # ────────────────────────────────────────────────────────────────────────
    # Transport
    # ────────────────────────────────────────────────────────────────────────

    async def call(self, method: str, path: str, body: Body = None, retries: int = 0) -> httpx.Response:
        """
        Send one Graph request, retrying non-success responses while budget remains.

        Args:
            method: HTTP method
            path: Path relative to the Graph endpoint (leading slash)
            body: Pydantic model or dict to send as JSON (ignored for GET/DELETE)
            retries: Number of extra attempts allowed after a non-success response

        Returns:
            The successful httpx.Response; callers deserialize it

        Raises:
            RemoteCallError: Non-success status with no retries left, or a transport failure
        """
        return await self.send(GraphRequestSpec(method=method.upper(), path=path, body=body, retries=retries))

    async def send(self, spec: GraphRequestSpec) -> httpx.Response:
        """Execute a GraphRequestSpec. See :meth:`call`."""
        payload = spec.payload()
        logger.info("Graph request: {} {}", spec.method, spec.path, retries=spec.retries)
        if payload is not None:
            logger.debug("Graph payload", method=spec.method, path=spec.path, payload=payload)

        retries = spec.retries
        while True:
            try:
                response = await self._client.request(spec.method, spec.path, json=payload)
            except httpx.RequestError as e:
                logger.error(f"Graph request {spec.method} {spec.path} did not complete: {e}")
                raise RemoteCallError(None, str(e), spec.method, spec.path) from e

            if response.is_success:
                return response

            if retries > 0:
                logger.warning(
                    "Graph error {}: retrying after {} seconds ({} retries remaining)",
                    response.status_code,
                    self.retry_backoff_seconds,
                    retries,
                    method=spec.method,
                    path=spec.path,
                )
                await asyncio.sleep(self.retry_backoff_seconds)
                retries -= 1
                continue

            logger.error(
                "Graph error {}",
                response.status_code,
                method=spec.method,
                path=spec.path,
                response_body=response.text,
            )
            raise RemoteCallError(response.status_code, response.text, spec.method, spec.path)

    # ────────────────────────────────────────────────────────────────────────
    # Users
    # ────────────────────────────────────────────────────────────────────────

    async def get_me(self) -> User:
        response = await self.call("GET", "/me")
        return User.model_validate(response.json())

    async def get_user(self, upn: str) -> User:
        response = await self.call("GET", f"/users/{upn}")
        return User.model_validate(response.json())

    async def get_user_ids(self, *rosters: Iterable[str]) -> List[str]:
        """
        Look up every principal in the given rosters, one request at a time.

        Returns:
            Directory object URLs (``{endpoint}/users/{id}``) in roster order; not deduplicated
        """
        user_refs = []
        for roster in rosters:
            for upn in roster:
                user = await self.get_user(upn)
                user_refs.append(self.user_reference(user.id))
        return user_refs

    # ────────────────────────────────────────────────────────────────────────
    # Groups and membership
    # ────────────────────────────────────────────────────────────────────────

    async def create_group(self, group: Group) -> Group:
        response = await self.call("POST", "/groups", group)
        return Group.model_validate(response.json())

    async def create_guest_invitation(self, invite: Invitation) -> Invitation:
        response = await self.call("POST", "/invitations", invite)
        return Invitation.model_validate(response.json())

    async def add_member(self, group_id: str, user_id: str, is_owner: bool = False) -> None:
        """Add a user to the group's members, and to its owners when requested."""
        payload = AddUserToGroup(user_path=self.user_reference(user_id))
        await self.call("POST", f"/groups/{group_id}/members/$ref", payload)

        if is_owner:
            await self.add_owner(group_id, user_id)

    async def add_owner(self, group_id: str, user_id: str) -> None:
        """Make an existing member an owner of the group."""
        payload = AddUserToGroup(user_path=self.user_reference(user_id))
        await self.call("POST", f"/groups/{group_id}/owners/$ref", payload)

    async def remove_member(self, group_id: str, user_id: str, is_owner: bool = False) -> None:
        """Remove a user from the group; owners are removed from owners first."""
        if is_owner:
            await self.remove_owner(group_id, user_id)

        await self.call("DELETE", f"/groups/{group_id}/members/{user_id}/$ref")

    async def remove_owner(self, group_id: str, user_id: str) -> None:
        """Revoke ownership; the user stays a member."""
        await self.call("DELETE", f"/groups/{group_id}/owners/{user_id}/$ref")

    # ────────────────────────────────────────────────────────────────────────
    # Teams
    # ────────────────────────────────────────────────────────────────────────

    async def create_team(self, group_id: str, team: Team) -> None:
        await self.call("PUT", f"/groups/{group_id}/team", team)

    async def archive_team(self, team_id: str) -> None:
        await self.call("POST", f"/teams/{team_id}/archive")

    async def get_team_channels(self, team_id: str) -> GraphCollection[Channel]:
        response = await self.call("GET", f"/teams/{team_id}/channels")
        return GraphCollection[Channel].model_validate(response.json())

    async def create_team_channel(self, team_id: str, channel: Channel) -> Channel:
        response = await self.call("POST", f"/teams/{team_id}/channels", channel)
        return Channel.model_validate(response.json())

    async def add_app_to_team(self, team_id: str, app: TeamsApp) -> None:
        await self.call("POST", f"/teams/{team_id}/apps", app)

    async def add_team_channel_tab(self, team_id: str, channel_id: str, tab: TeamsChannelTab) -> TeamsChannelTab:
        response = await self.call("POST", f"/teams/{team_id}/channels/{channel_id}/tabs", tab)
        return TeamsChannelTab.model_validate(response.json())

    # ────────────────────────────────────────────────────────────────────────
    # SharePoint and drives
    # ────────────────────────────────────────────────────────────────────────

    async def get_team_site(self, group_id: str) -> Site:
        response = await self.call("GET", f"/groups/{group_id}/sites/root")
        return Site.model_validate(response.json())

    async def get_site(self, site_path: str) -> Site:
        response = await self.call("GET", f"/sites/{site_path}")
        return Site.model_validate(response.json())

    async def get_site_lists(self, site_id: str) -> GraphCollection[SharePointList]:
        response = await self.call("GET", f"/sites/{site_id}/lists")
        return GraphCollection[SharePointList].model_validate(response.json())

    async def create_sharepoint_list(self, site_id: str, sharepoint_list: SharePointList) -> SharePointList:
        response = await self.call("POST", f"/sites/{site_id}/lists", sharepoint_list)
        return SharePointList.model_validate(response.json())

    async def create_sharepoint_page(self, site_id: str, page: SharePointPage) -> SharePointPage:
        response = await self.call("POST", f"/sites/{site_id}/pages", page)
        return SharePointPage.model_validate(response.json())

    async def publish_sharepoint_page(self, site_id: str, page_id: str) -> None:
        await self.call("POST", f"/sites/{site_id}/pages/{page_id}/publish")

    async def get_drive_item(self, site_id: str, item_path: str) -> DriveItem:
        response = await self.call("GET", f"/sites/{site_id}/drive/{item_path}")
        return DriveItem.model_validate(response.json())

    async def get_team_drive_folder(self, team_id: str, folder_name: str) -> DriveItem:
        # The team's drive is not always ready right after the team is created
        response = await self.call(
            "GET",
            f"/groups/{team_id}/drive/root:/{folder_name}",
            retries=DRIVE_FOLDER_RETRIES,
        )
        return DriveItem.model_validate(response.json())

    async def copy_drive_item(self, site_id: str, item_id: str, target: ItemReference) -> None:
        await self.call(
            "POST",
            f"/sites/{site_id}/drive/items/{item_id}/copy",
            DriveItem(parent_reference=target),
        )

    # ────────────────────────────────────────────────────────────────────────
    # Planner
    # ────────────────────────────────────────────────────────────────────────

    async def create_plan(self, plan: Plan) -> Plan:
        response = await self.call("POST", "/planner/plans", plan)
        return Plan.model_validate(response.json())

    async def create_bucket(self, bucket: Bucket) -> Bucket:
        response = await self.call("POST", "/planner/buckets", bucket)
        return Bucket.model_validate(response.json())

    async def create_planner_task(self, task: PlannerTask) -> PlannerTask:
        response = await self.call("POST", "/planner/tasks", task)
        return PlannerTask.model_validate(response.json())
