"""
Flight Team Workflow Module

Provisioning workflow for flight teams backed by Microsoft Graph:
- Unified group with pilots, flight attendants and an admin owner
- Guest invitation for the catering liaison
- Team with role channels and an optional app
- Challenging passengers list and a published team page
- Membership sync and archiving of existing teams
"""

__version__ = "1.0.0"
