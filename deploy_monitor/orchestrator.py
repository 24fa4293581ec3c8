# DeploymentMonitor: the top-level orchestrator.

# Responsibilities:
#   - Create the aiohttp session (one connection pool for the process)
#   - Wire the Vercel client, console renderer and watcher together
#   - Run the watcher as a single asyncio task
#   - Provide a stop() method that cancels that task for graceful shutdown

import asyncio
import logging

import aiohttp

from deploy_monitor.config import CONNECTION_LIMIT, USER_AGENT, MonitorSettings
from deploy_monitor.handlers import ConsoleRenderer
from deploy_monitor.http_client import VercelClient
from deploy_monitor.watcher import DeploymentWatcher

log = logging.getLogger(__name__)


class DeploymentMonitor:

    def __init__(self, settings: MonitorSettings, renderer: ConsoleRenderer | None = None) -> None:
        self._settings = settings
        self._renderer = renderer or ConsoleRenderer(settings.project, settings.interval_seconds)
        self._task: asyncio.Task | None = None

    async def run(self) -> None:
        s = self._settings
        connector = aiohttp.TCPConnector(limit=CONNECTION_LIMIT)
        async with aiohttp.ClientSession(
            connector=connector,
            headers={"User-Agent": USER_AGENT},
        ) as session:

            client = VercelClient(session, s.token, api_base=s.api_base, team_id=s.team_id)
            watcher = DeploymentWatcher(
                project=s.project,
                client=client,
                renderer=self._renderer,
                interval_seconds=s.interval_seconds,
                limit=s.count,
                verbose=s.verbose,
            )

            self._renderer.render_startup(s.verbose)
            self._task = asyncio.create_task(
                watcher.run_forever(),
                name=f"watcher-{s.project.lower()}",
            )
            log.info("DeploymentMonitor running for %s. Press Ctrl+C to stop.", s.project)

            # blocks until the watcher finishes (normally only on cancellation)
            await self.wait_stopped()

    def stop(self) -> None:
        """Cancel the watcher task. The session is closed as run() unwinds."""
        if self._task is not None:
            self._task.cancel()

    async def wait_stopped(self) -> None:
        if self._task is None:
            return
        (result,) = await asyncio.gather(self._task, return_exceptions=True)
        if isinstance(result, Exception):
            log.error("Watcher for %s stopped unexpectedly", self._settings.project, exc_info=result)
