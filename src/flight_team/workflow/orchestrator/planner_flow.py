"""
Pre-flight checklist (Planner) for a new team.

Planner rejects app-only tokens, so this stage only runs when the workflow is configured
for delegated credentials (Settings.enable_planner_stage). See stages.build_stage_plan.
"""

from datetime import datetime
from datetime import timezone
from typing import Optional

from loguru import logger

from flight_team.graph.client import GraphClient
from flight_team.graph.models import TEAMS_PLANNER_TAB_APP_ID
from flight_team.graph.models import Bucket
from flight_team.graph.models import Plan
from flight_team.graph.models import PlannerTask
from flight_team.graph.models import TeamsChannelTab
from flight_team.graph.models import TeamsChannelTabConfiguration

PLAN_TITLE = "Pre-flight Checklist"
TODO_BUCKET = "To Do"
COMPLETED_BUCKET = "Completed"
PREFLIGHT_TASKS = (
    "Perform pre-flight inspection of aircraft",
    "Ensure food and beverages are fully stocked",
)

PLANNER_BASE_URL = "https://tasks.office.com"


def build_planner_tab(plan_id: str, tenant_name: Optional[str]) -> TeamsChannelTab:
    """Channel tab pointing at the plan; {upn} and {locale} are filled in by Teams."""
    frame_url = f"{PLANNER_BASE_URL}/{tenant_name}/Home/PlannerFrame"
    return TeamsChannelTab(
        name=PLAN_TITLE,
        teams_app_id=TEAMS_PLANNER_TAB_APP_ID,
        configuration=TeamsChannelTabConfiguration(
            entity_id=plan_id,
            content_url=f"{frame_url}?page=7&planId={plan_id}&auth_pvr=Orgid&auth_upn={{upn}}&mkt={{locale}}",
            remove_url=f"{frame_url}?page=13&planId={plan_id}&auth_pvr=Orgid&auth_upn={{upn}}&mkt={{locale}}",
            website_url=f"{PLANNER_BASE_URL}/{tenant_name}/Home/PlanViews/{plan_id}",
        ),
    )


async def create_preflight_plan(
    client: GraphClient,
    group_id: str,
    channel_id: str,
    departure_time: Optional[datetime],
    tenant_name: Optional[str],
) -> Plan:
    """
    Create the checklist plan, its buckets and tasks, and pin it to the default channel.

    Tasks are due at the departure time (UTC). Naive departure times are treated as UTC.
    """
    created_plan = await client.create_plan(Plan(title=PLAN_TITLE, owner=group_id))
    logger.info(f"Created plan {created_plan.id}")

    todo_bucket = await client.create_bucket(Bucket(name=TODO_BUCKET, plan_id=created_plan.id))
    await client.create_bucket(Bucket(name=COMPLETED_BUCKET, plan_id=created_plan.id))

    due = None
    if departure_time is not None:
        if departure_time.tzinfo is None:
            departure_time = departure_time.replace(tzinfo=timezone.utc)
        due = departure_time.astimezone(timezone.utc)

    for title in PREFLIGHT_TASKS:
        await client.create_planner_task(
            PlannerTask(title=title, plan_id=created_plan.id, bucket_id=todo_bucket.id, due_date_time=due)
        )

    await client.add_team_channel_tab(group_id, channel_id, build_planner_tab(created_plan.id, tenant_name))
    logger.info("Added pre-flight checklist tab")
    return created_plan
