"""HackDesk: applicant review and event check-in for hackathon organizers."""

__version__ = "1.0.0"
