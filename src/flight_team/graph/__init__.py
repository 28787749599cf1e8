"""
Microsoft Graph Module

Authenticated JSON client for Graph and the camel-case resource models it sends and receives.
"""

from flight_team.graph.client import GraphClient
from flight_team.graph.client import GraphRequestSpec

__all__ = [
    "GraphClient",
    "GraphRequestSpec",
]
