"""
Data types shared by the harvester: the search filter, raw and normalized
lead records, and the session state machine.
"""

from dataclasses import dataclass, field
from enum import Enum

NOT_AVAILABLE = "Not Available"


@dataclass(frozen=True)
class FilterSpec:
    """What to search for. Immutable for the lifetime of a harvest."""
    job_title: str
    location: str
    max_leads: int

    def __post_init__(self):
        if not self.job_title or not self.job_title.strip():
            raise ValueError("job_title must not be empty")
        if not isinstance(self.max_leads, int) or isinstance(self.max_leads, bool):
            raise ValueError(f"max_leads must be an integer, got {self.max_leads!r}")
        if self.max_leads < 1:
            raise ValueError(f"max_leads must be >= 1, got {self.max_leads}")

    @classmethod
    def from_dict(cls, data: dict) -> "FilterSpec":
        """Build from the request payload (camelCase or snake_case keys)."""
        job_title = data.get("jobTitle", data.get("job_title", ""))
        location = data.get("location") or ""
        max_leads = data.get("maxLeads", data.get("max_leads", 25))
        try:
            max_leads = int(max_leads)
        except (TypeError, ValueError):
            raise ValueError(f"max_leads must be an integer, got {max_leads!r}")
        return cls(job_title=job_title, location=location, max_leads=max_leads)


@dataclass
class RawLead:
    """A lead as pulled off the page, before normalization.

    Title may still hold a "title at company" combination and any field may
    carry stray whitespace.
    """
    name: str
    title: str = NOT_AVAILABLE
    company: str = NOT_AVAILABLE
    location: str = NOT_AVAILABLE
    profile_url: str = NOT_AVAILABLE
    email: str = NOT_AVAILABLE
    phone: str = NOT_AVAILABLE

    def has_profile_url(self) -> bool:
        return bool(self.profile_url) and self.profile_url != NOT_AVAILABLE and "/in/" in self.profile_url


@dataclass(frozen=True)
class Lead:
    """A normalized lead, as handed back to callers."""
    name: str
    title: str
    company: str
    location: str
    profile_url: str
    email: str
    phone: str

    def has_contact(self) -> bool:
        return self.email != NOT_AVAILABLE or self.phone != NOT_AVAILABLE

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "title": self.title,
            "company": self.company,
            "location": self.location,
            "profileUrl": self.profile_url,
            "email": self.email,
            "phone": self.phone,
        }


class SessionStatus(str, Enum):
    IDLE = "idle"
    AWAITING_MANUAL_AUTH = "awaiting_manual_auth"
    AUTHENTICATED = "authenticated"
    HARVESTING = "harvesting"
    STOPPED = "stopped"


# Stop is handled separately: it is accepted from every state but STOPPED.
_TRANSITIONS = {
    SessionStatus.IDLE: {SessionStatus.AWAITING_MANUAL_AUTH, SessionStatus.AUTHENTICATED},
    SessionStatus.AWAITING_MANUAL_AUTH: {SessionStatus.AUTHENTICATED},
    SessionStatus.AUTHENTICATED: {SessionStatus.HARVESTING},
    SessionStatus.HARVESTING: {SessionStatus.AUTHENTICATED},
    SessionStatus.STOPPED: set(),
}


@dataclass
class Session:
    """The single live harvesting context.

    Only the SessionController mutates a Session. Once STOPPED it is dead;
    the controller replaces it with a fresh one on the next request.

    `collected` holds normalized Leads; each page is normalized as it is
    appended.
    """
    status: SessionStatus = SessionStatus.IDLE
    is_authenticated: bool = False
    is_harvesting: bool = False
    current_page: int = 0
    collected: list[Lead] = field(default_factory=list)

    @property
    def is_stopped(self) -> bool:
        return self.status is SessionStatus.STOPPED

    def transition(self, new_status: SessionStatus) -> None:
        """Move to new_status, rejecting moves the state machine does not allow."""
        if new_status is self.status:
            return
        if new_status is SessionStatus.STOPPED:
            self.status = new_status
            return
        if new_status not in _TRANSITIONS[self.status]:
            raise ValueError(f"Illegal session transition: {self.status.value} -> {new_status.value}")
        self.status = new_status

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "is_authenticated": self.is_authenticated,
            "is_harvesting": self.is_harvesting,
            "current_page": self.current_page,
            "collected": len(self.collected),
        }
