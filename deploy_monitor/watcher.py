# DeploymentWatcher: monitors a single Vercel project indefinitely.

# responsibilities:
#   - poll the project's deployments on a fixed interval
#   - diff each poll against the previous one (new deployments, state changes)
#   - render on change (quiet mode) or on every poll (verbose mode)
#   - report fetch failures and keep polling, previous snapshot untouched
#
# Cycles never overlap: the interval sleep is armed only after the cycle
# before it has finished, however slow the fetch was.

import asyncio
import logging
from collections.abc import Awaitable, Callable

from deploy_monitor.differ import diff_snapshots
from deploy_monitor.errors import FetchError, MalformedOrLocal
from deploy_monitor.handlers import ConsoleRenderer
from deploy_monitor.http_client import VercelClient
from deploy_monitor.models import Snapshot


class DeploymentWatcher:
    """
    Owns the previous snapshot of one project and runs the
    fetch → diff → render → store cycle.

    `previous` is None until the first successful fetch. It is replaced as a
    whole after every successful fetch and left alone when a fetch fails.
    """

    def __init__(
        self,
        project: str,
        client: VercelClient,
        renderer: ConsoleRenderer,
        interval_seconds: int,
        limit: int,
        verbose: bool = False,
        previous: Snapshot | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.project = project
        self._client = client
        self._renderer = renderer
        self._interval = interval_seconds
        self._limit = limit
        self._verbose = verbose
        self._previous = previous
        self._sleep = sleep
        self._log = logging.getLogger(f"watcher.{project.lower()}")

    @property
    def previous(self) -> Snapshot | None:
        return self._previous

    async def run_cycle(self) -> Snapshot | None:
        """Run one poll and return the snapshot stored afterwards."""
        self._log.debug("Fetching deployments for %s", self.project)
        try:
            with self._renderer.fetching(self._verbose):
                current = await self._client.fetch_snapshot(self.project, self._limit)
        except FetchError as exc:
            self._report_failure(exc)
            return self._previous
        except Exception as exc:
            self._log.exception("Unexpected error fetching deployments for %s", self.project)
            self._report_failure(MalformedOrLocal(str(exc) or type(exc).__name__))
            return self._previous

        changes = diff_snapshots(self._previous, current)

        if self._verbose or changes.has_changes:
            self._renderer.render(current, self._verbose)
            # the notice only makes sense when there was something to compare with
            if not self._verbose and changes.has_changes and self._previous:
                self._log.info(
                    "%d new deployment(s), %d state change(s) for %s",
                    len(changes.new_deployments), len(changes.transitions), self.project,
                )
                self._renderer.render_change_notice(changes)
        else:
            self._log.debug("No deployment changes for %s", self.project)

        self._previous = current
        return self._previous

    def _report_failure(self, exc: FetchError) -> None:
        self._log.warning(
            "Fetch failed for %s (%s): %s. Retrying in %ds.",
            self.project, type(exc).__name__, exc, self._interval,
        )
        self._renderer.render_error(exc, self._interval)

    async def run_forever(self, max_cycles: int | None = None) -> None:
        """
        Poll until cancelled. `max_cycles` stops the loop after that many
        cycles (no trailing sleep), which lets tests drive it to completion.
        """
        self._log.info(
            "Started watching %s every %ds (%s mode)",
            self.project, self._interval, "verbose" if self._verbose else "quiet",
        )
        cycles = 0

        while True:
            try:
                await self.run_cycle()
            except asyncio.CancelledError:
                self._log.info("Watcher for %s cancelled.", self.project)
                raise  # propagate so the task terminates cleanly
            except Exception:
                # render failures (closed pipe, unencodable output) must not end the loop
                self._log.exception("Unexpected error in watcher for %s", self.project)

            cycles += 1
            if max_cycles is not None and cycles >= max_cycles:
                return

            await self._sleep(self._interval)
