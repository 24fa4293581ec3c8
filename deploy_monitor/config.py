from dataclasses import dataclass

DEFAULT_POLL_INTERVAL_SECONDS: int = 15
DEFAULT_DEPLOYMENTS_TO_SHOW: int = 5
REQUEST_TIMEOUT_SECONDS: int = 10
CONNECTION_LIMIT: int = 4

DEFAULT_LOG_LEVEL: str = "WARNING"

# Vercel REST API
API_BASE: str = "https://api.vercel.com"
DEPLOYMENTS_PATH: str = "/v6/deployments"
USER_AGENT: str = "DeployMonitor/1.0 (deployment-tracker)"

# dashboard title, rendered with pyfiglet
BANNER_TEXT: str = "Deploy Monitor"
BANNER_FONT: str = "slant"


@dataclass(frozen=True)
class MonitorSettings:
    """Runtime settings, fixed for the lifetime of the process."""
    project: str
    token: str
    interval_seconds: int = DEFAULT_POLL_INTERVAL_SECONDS
    count: int = DEFAULT_DEPLOYMENTS_TO_SHOW
    verbose: bool = False
    team_id: str | None = None
    api_base: str = API_BASE

    def __post_init__(self) -> None:
        if self.interval_seconds < 1:
            raise ValueError(f"interval_seconds must be positive, got {self.interval_seconds}")
        if self.count < 1:
            raise ValueError(f"count must be positive, got {self.count}")
