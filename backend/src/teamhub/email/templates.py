"""Email templates."""

from urllib.parse import urlencode

from teamhub.teams.models import Team


class TeamInviteEmailTemplate:
    """Invitation email carrying the join link."""

    def __init__(self, site_name: str, frontend_url: str):
        self.site_name = site_name
        self.frontend_url = frontend_url.rstrip("/")

    def join_url(self, team_id: str, verification_code: str) -> str:
        query = urlencode({"teamId": team_id, "verificationCode": verification_code})
        return f"{self.frontend_url}/join/?{query}"

    def build(self, team: Team, verification_code: str) -> tuple[str, str]:
        """Build the subject and plain text body."""
        subject = f"Invite to join {team.display_name} on {self.site_name}"

        text = (
            "Hi there,\n\n"
            f"You've been invited to join {team.display_name} as a team member on {self.site_name}.\n\n"
            "Accept invite by clicking the following link:\n"
            f"{self.join_url(team.id, verification_code)}\n\n"
            "If you believe you have received this email by mistake, feel free to ignore it.\n\n"
            "Thanks for your time."
        )

        return subject, text
