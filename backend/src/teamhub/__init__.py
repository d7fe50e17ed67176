"""Team collaboration backend: memberships, invitations and Stripe billing."""

__version__ = "1.0.0"
