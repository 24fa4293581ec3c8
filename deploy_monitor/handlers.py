# console output: the rendering layer of the monitor.

# The watcher decides *when* something is shown; this module decides *how*.
# Models stay pure data containers with no display logic.
#
# Any object with the same methods can replace ConsoleRenderer:
#     fetching(verbose)           context manager around each fetch
#     render(snapshot, verbose)
#     render_change_notice(changes)
#     render_error(error, retry_in)

import sys
from contextlib import AbstractContextManager, nullcontext
from typing import TextIO

import pyfiglet
from rich.console import Console

from deploy_monitor.config import BANNER_FONT, BANNER_TEXT
from deploy_monitor.errors import FetchError, MalformedOrLocal, RemoteRejected, Unreachable
from deploy_monitor.models import (
    ChangeSet,
    Deployment,
    DeploymentState,
    Snapshot,
    format_elapsed,
    format_time,
)

# ─── ANSI colours (safe to strip if plain output is needed) ──────────────────

_R = "\033[0m"   # reset
_DIM = "\033[2m"
_RED = "\033[31m"
_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_BLUE = "\033[34m"
_WHITE = "\033[37m"
_GRAY = "\033[90m"
_ORANGE = "\033[38;5;208m"

_CLEAR = "\033[2J\033[H"

_STATE_COLOR: dict[DeploymentState, str] = {
    DeploymentState.READY:        _GREEN,
    DeploymentState.ERROR:        _RED,
    DeploymentState.BUILDING:     _YELLOW,
    DeploymentState.QUEUED:       _YELLOW,
    DeploymentState.INITIALIZING: _YELLOW,
    DeploymentState.CANCELED:     _GRAY,
    DeploymentState.UNKNOWN:      _WHITE,
}

_RULE_WIDTH = 80


def color_state(deployment: Deployment) -> str:
    c = _STATE_COLOR.get(deployment.state, _WHITE)
    return f"{c}{deployment.raw_state}{_R}"


def _dim(text: str) -> str:
    return f"{_DIM}{text}{_R}"


class ConsoleRenderer:
    """
    Full-screen deployment dashboard written to a text stream (stdout).

    Each render clears the screen and redraws:
        banner / project line
        one block per deployment: state, created time (elapsed), branch,
        commit message and a state-specific footer
        next-update and mode hints
    """

    def __init__(
        self,
        project: str,
        interval_seconds: int,
        stream: TextIO | None = None,
        clear_screen: bool = True,
    ) -> None:
        self._project = project
        self._interval = interval_seconds
        self._stream = stream or sys.stdout
        self._clear_screen = clear_screen
        self._banner = pyfiglet.figlet_format(BANNER_TEXT, font=BANNER_FONT).rstrip("\n")
        self._console = Console(file=self._stream)

    def _print(self, text: str = "") -> None:
        print(text, file=self._stream, flush=True)

    def _clear(self) -> None:
        if self._clear_screen:
            self._stream.write(_CLEAR)

    # ─── fetch spinner ───────────────────────────────────────────────────────

    def fetching(self, verbose: bool) -> AbstractContextManager:
        """Spinner shown while a fetch is in flight, verbose mode only."""
        if not verbose:
            return nullcontext()
        return self._console.status("Fetching deployments...", spinner="dots")

    # ─── startup ─────────────────────────────────────────────────────────────

    def render_startup(self, verbose: bool) -> None:
        self._print(f"{_BLUE}Starting Vercel deployment monitor...{_R}")
        if not verbose:
            self._print(_dim(self._mode_hint(verbose)))

    # ─── full snapshot ───────────────────────────────────────────────────────

    def render(self, snapshot: Snapshot, verbose: bool) -> None:
        self._clear()
        self._print(f"{_ORANGE}{self._banner}{_R}")
        self._print(f"{_BLUE}Monitoring deployments for project: {_WHITE}{self._project}{_R}\n")

        if snapshot:
            self._print(f"{_WHITE}Recent deployments:{_R}")
            self._print(_dim("─" * _RULE_WIDTH))
            for deployment in snapshot:
                self._render_deployment(deployment)
                self._print(_dim("─" * _RULE_WIDTH))
        else:
            self._print(f"{_YELLOW}No deployments found for this project.{_R}")

        self._print(f"\n{_dim(f'Next update in {self._interval} seconds...')}")
        self._print(_dim(self._mode_hint(verbose)))

    def _render_deployment(self, d: Deployment) -> None:
        created = format_time(d.created_at)
        elapsed = format_elapsed(d.created_at)

        # pad the coloured text so the visible column lines up
        state = color_state(d)
        state = state.ljust(25 + len(state) - len(d.raw_state))

        self._print(f"{state} | {_dim(created)} ({elapsed})")
        self._print(f"{_dim('Branch:')} {d.ref_label}")
        self._print(f"{_dim('Message:')} {d.message_label}")

        if d.state in (DeploymentState.BUILDING, DeploymentState.INITIALIZING):
            self._print(f"{_YELLOW}Building...{_R}")
        elif d.state is DeploymentState.READY:
            self._print(f"{_GREEN}✓ Deployed to {d.url}{_R}")
        elif d.state is DeploymentState.ERROR:
            self._print(f"{_RED}✗ Deployment failed{_R}")

    @staticmethod
    def _mode_hint(verbose: bool) -> str:
        if verbose:
            return "Running in verbose mode - showing all updates."
        return "Running in quiet mode - will only show updates when deployments change."

    # ─── change notice ───────────────────────────────────────────────────────

    def render_change_notice(self, changes: ChangeSet) -> None:
        if changes.new_deployments:
            self._print(f"{_GREEN}\n🔔 New deployment detected!{_R}")
            for d in changes.new_deployments:
                self._print(f"{_WHITE}  • {color_state(d)}{_WHITE}: {d.message_label}{_R}")

        for t in changes.transitions:
            label = t.previous.commit_message or "Deployment"
            self._print(f"{_BLUE}\n🔄 Deployment status changed:{_R}")
            self._print(
                f"{_WHITE}  • {label}: {color_state(t.previous)}{_WHITE} → {color_state(t.deployment)}{_R}"
            )
            if t.deployment.state is DeploymentState.READY:
                self._print(f"{_GREEN}  ✓ Successfully deployed to {t.deployment.url}{_R}")
            elif t.deployment.state is DeploymentState.ERROR:
                self._print(f"{_RED}  ✗ Deployment failed{_R}")

    # ─── errors ──────────────────────────────────────────────────────────────

    def render_error(self, error: FetchError, retry_in: int) -> None:
        self._clear()
        self._print(f"{_RED}Error fetching deployments:{_R}")

        if isinstance(error, RemoteRejected):
            self._print(f"{_RED}Status: {error.status}{_R}")
            self._print(f"{_RED}Message: {error.body}{_R}")
        elif isinstance(error, Unreachable):
            self._print(f"{_RED}No response received from Vercel API. Check your internet connection.{_R}")
            if error.reason:
                self._print(_dim(error.reason))
        elif isinstance(error, MalformedOrLocal):
            self._print(f"{_RED}{error.message}{_R}")
        else:
            self._print(f"{_RED}{error}{_R}")

        self._print(f"\n{_dim(f'Retrying in {retry_in} seconds...')}")
