"""Team accounts.

- Role-based membership (owner, admin, read only)
- Invitations by email with single-use codes
- Ownership transfer and team deletion
"""

from teamhub.teams.models import ALL_ROLES, InvitationStatus, Member, Role, Subscription, Team

__all__ = ["ALL_ROLES", "InvitationStatus", "Member", "Role", "Subscription", "Team"]
