import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

log = logging.getLogger(__name__)

NO_COMMIT_MESSAGE = "No commit message"
NO_COMMIT_REF = "-"


class DeploymentState(str, Enum):
    QUEUED = "QUEUED"
    INITIALIZING = "INITIALIZING"
    BUILDING = "BUILDING"
    READY = "READY"
    ERROR = "ERROR"
    CANCELED = "CANCELED"
    UNKNOWN = "UNKNOWN"   # any value the API adds later

    @classmethod
    def parse(cls, value: str | None) -> "DeploymentState":
        if not value:
            return cls.UNKNOWN
        try:
            return cls(value.upper())
        except ValueError:
            return cls.UNKNOWN


def parse_dt(value: int | float | str | None) -> datetime | None:
    """
    Parse a deployment timestamp into an aware UTC datetime.

    Vercel sends `createdAt` as epoch milliseconds. ISO 8601 strings
    ('2024-11-03T14:32:00.000Z') are accepted as well.
    """
    if value is None or value == "":
        return None

    try:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        return datetime.fromisoformat(str(value).replace("Z", "+00:00")).astimezone(timezone.utc)
    except (ValueError, OverflowError, OSError):
        log.warning("Could not parse timestamp: %r", value)
        return None


def format_time(dt: datetime | None) -> str:
    """Local wall-clock time of day for console display."""
    if dt is None:
        return "Unknown"
    return dt.astimezone().strftime("%H:%M:%S")


def format_elapsed(since: datetime | None, now: datetime | None = None) -> str:
    """Elapsed time as '42s', '3m 7s' or '2h 15m'."""
    if since is None:
        return "?"
    now = now or datetime.now(tz=timezone.utc)
    elapsed = max(int((now - since).total_seconds()), 0)

    if elapsed < 60:
        return f"{elapsed}s"
    if elapsed < 3600:
        return f"{elapsed // 60}m {elapsed % 60}s"
    return f"{elapsed // 3600}h {(elapsed % 3600) // 60}m"


@dataclass(frozen=True)
class Deployment:
    """
    One deployment as reported by a single poll.

    Identity is `id` alone; every other field may differ between polls.
    `raw_state` keeps the API value verbatim so states this client does not
    know about are still shown and compared.
    """
    id: str
    raw_state: str
    created_at: datetime | None = None
    url: str = ""
    commit_message: str | None = None   # None when the API sent no commit metadata
    commit_ref: str | None = None

    @property
    def state(self) -> DeploymentState:
        return DeploymentState.parse(self.raw_state)

    @property
    def message_label(self) -> str:
        return self.commit_message or NO_COMMIT_MESSAGE

    @property
    def ref_label(self) -> str:
        return self.commit_ref or NO_COMMIT_REF


Snapshot = list[Deployment]


@dataclass(frozen=True)
class Transition:
    deployment: Deployment   # as seen in the current snapshot
    previous: Deployment     # same id, as seen in the previous snapshot

    @property
    def previous_state(self) -> DeploymentState:
        return self.previous.state


@dataclass(frozen=True)
class ChangeSet:
    has_changes: bool
    new_deployments: list[Deployment] = field(default_factory=list)
    transitions: list[Transition] = field(default_factory=list)
