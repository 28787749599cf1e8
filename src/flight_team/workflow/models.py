"""
Workflow Models

Request and result models for flight team provisioning:
- WorkspaceRequest: desired team (from the trigger payload)
- ProvisionedWorkspace: ids of everything the create path made
- MembershipDelta: what the update path has to add/remove
"""

from dataclasses import dataclass
from dataclasses import field
from datetime import datetime
from typing import Any
from typing import List
from typing import Optional

from pydantic import BaseModel
from pydantic import Field
from pydantic import field_validator
from pydantic import model_validator


def _principal_key(principal: str) -> str:
    """Login names are case-insensitive."""
    return principal.strip().casefold()


def dedupe_principals(principals: List[str]) -> List[str]:
    """Strip, drop blanks and remove duplicates, keeping the first spelling and order."""
    seen = set()
    result = []
    for principal in principals:
        principal = principal.strip()
        if not principal:
            continue
        key = _principal_key(principal)
        if key in seen:
            continue
        seen.add(key)
        result.append(principal)
    return result


def roster_difference(left: List[str], right: List[str]) -> List[str]:
    """Principals in ``left`` that are not in ``right``, in ``left`` order."""
    right_keys = {_principal_key(p) for p in right}
    return [p for p in left if _principal_key(p) not in right_keys]


class WorkspaceRequest(BaseModel):
    """Desired state of a flight team."""

    flight_number: str
    description: str = ""
    admin: str
    pilots: List[str] = Field(default_factory=list)
    flight_attendants: List[str] = Field(default_factory=list)
    catering_liaison: str
    departure_time: Optional[datetime] = None
    workspace_id: Optional[str] = None  # Group/team id once provisioned

    @field_validator("flight_number", mode="before")
    @classmethod
    def normalize_flight_number(cls, v: Any) -> str:
        """Accept numeric flight numbers; 100.0 becomes "100"."""
        if isinstance(v, float) and v.is_integer():
            v = int(v)
        v = str(v).strip()
        if not v:
            raise ValueError("flight_number cannot be empty")
        return v

    @field_validator("admin")
    @classmethod
    def validate_admin(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("admin cannot be empty")
        return v

    @field_validator("pilots", "flight_attendants")
    @classmethod
    def dedupe_roster(cls, v: List[str]) -> List[str]:
        return dedupe_principals(v)

    @field_validator("catering_liaison")
    @classmethod
    def validate_guest_email(cls, v: str) -> str:
        v = v.strip()
        if "@" not in v:
            raise ValueError(f"catering_liaison must be an email address: {v!r}")
        local, domain = v.rsplit("@", 1)
        if not local or "." not in domain:
            raise ValueError(f"catering_liaison must be an email address: {v!r}")
        return v

    @model_validator(mode="after")
    def check_rosters(self) -> "WorkspaceRequest":
        """Keep the admin out of both rosters and the rosters disjoint."""
        admin_key = _principal_key(self.admin)
        self.pilots = [p for p in self.pilots if _principal_key(p) != admin_key]
        self.flight_attendants = [p for p in self.flight_attendants if _principal_key(p) != admin_key]

        attendant_keys = {_principal_key(p) for p in self.flight_attendants}
        overlap = [p for p in self.pilots if _principal_key(p) in attendant_keys]
        if overlap:
            raise ValueError(f"principals cannot be both pilot and flight attendant: {', '.join(overlap)}")
        return self

    @property
    def display_name(self) -> str:
        return f"Flight {self.flight_number}"


@dataclass
class ProvisionedWorkspace:
    """Ids of the resources created by one successful provisioning run."""

    group_id: str
    general_channel_id: Optional[str] = None
    channel_ids: List[str] = field(default_factory=list)
    site_id: Optional[str] = None
    list_id: Optional[str] = None
    page_id: Optional[str] = None
    plan_id: Optional[str] = None
    app_installed: bool = False


def group_members(request: WorkspaceRequest) -> List[str]:
    """Everyone who belongs to the group: admin, pilots, then flight attendants."""
    return [request.admin, *request.pilots, *request.flight_attendants]


@dataclass(frozen=True)
class MembershipDelta:
    """
    Membership changes between two versions of a WorkspaceRequest.

    The group holds one membership per principal whatever their role, so the roster
    lists only name principals who join or leave the group. A pilot who becomes a flight
    attendant or the admin is neither added nor removed.
    """

    old_admin: str
    new_admin: str
    pilots_to_add: List[str] = field(default_factory=list)
    pilots_to_remove: List[str] = field(default_factory=list)
    attendants_to_add: List[str] = field(default_factory=list)
    attendants_to_remove: List[str] = field(default_factory=list)
    new_admin_was_member: bool = False  # Only ownership has to be granted
    old_admin_stays_member: bool = False  # Only ownership has to be revoked

    @property
    def admin_changed(self) -> bool:
        return _principal_key(self.old_admin) != _principal_key(self.new_admin)

    @property
    def is_empty(self) -> bool:
        return not (
            self.admin_changed
            or self.pilots_to_add
            or self.pilots_to_remove
            or self.attendants_to_add
            or self.attendants_to_remove
        )

    @classmethod
    def compute(cls, original: WorkspaceRequest, updated: WorkspaceRequest) -> "MembershipDelta":
        """
        Principals to add are in an updated roster but not in the original group; principals
        to remove are in an original roster but not in the updated group.
        """
        old_members = group_members(original)
        new_members = group_members(updated)
        old_keys = {_principal_key(p) for p in old_members}
        new_keys = {_principal_key(p) for p in new_members}
        return cls(
            old_admin=original.admin,
            new_admin=updated.admin,
            pilots_to_add=roster_difference(updated.pilots, old_members),
            pilots_to_remove=roster_difference(original.pilots, new_members),
            attendants_to_add=roster_difference(updated.flight_attendants, old_members),
            attendants_to_remove=roster_difference(original.flight_attendants, new_members),
            new_admin_was_member=_principal_key(updated.admin) in old_keys,
            old_admin_stays_member=_principal_key(original.admin) in new_keys,
        )
