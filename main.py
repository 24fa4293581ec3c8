import asyncio
import logging
import platform
import signal
import sys

import click
from dotenv import load_dotenv

from deploy_monitor import __version__
from deploy_monitor.config import (
    DEFAULT_DEPLOYMENTS_TO_SHOW,
    DEFAULT_LOG_LEVEL,
    DEFAULT_POLL_INTERVAL_SECONDS,
    MonitorSettings,
)
from deploy_monitor.orchestrator import DeploymentMonitor

log = logging.getLogger("main")


def setup_logging(level: str) -> None:
    # stderr, so log lines never land in the middle of the dashboard
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


async def run_monitor(settings: MonitorSettings) -> None:
    monitor = DeploymentMonitor(settings)
    loop    = asyncio.get_running_loop()

    if platform.system() != "Windows":

        def _shutdown(sig: signal.Signals) -> None:
            log.info("Received %s, shutting down gracefully...", sig.name)
            monitor.stop()

        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, _shutdown, sig)

        try:
            await monitor.run()
        except asyncio.CancelledError:
            log.info("Monitor stopped.")

    else:
        try:
            await monitor.run()
        except (asyncio.CancelledError, KeyboardInterrupt):
            log.info("Shutting down...")
            monitor.stop()
            await monitor.wait_stopped()
            log.info("Monitor stopped.")


def _fail(message: str) -> None:
    click.secho(f"Error: {message}", fg="red", err=True)
    sys.exit(1)


@click.command(help="A CLI tool to monitor Vercel deployment status.")
@click.version_option(version=__version__, prog_name="deploy-monitor")
@click.option("-p", "--project", envvar="VERCEL_PROJECT", help="Vercel project name or ID.")
@click.option("-t", "--token", envvar="VERCEL_TOKEN", help="Vercel API token (or set VERCEL_TOKEN env variable).")
@click.option(
    "-i", "--interval",
    type=click.IntRange(min=1), default=DEFAULT_POLL_INTERVAL_SECONDS, show_default=True,
    help="Polling interval in seconds.",
)
@click.option(
    "-c", "--count",
    type=click.IntRange(min=1), default=DEFAULT_DEPLOYMENTS_TO_SHOW, show_default=True,
    help="Number of deployments to show.",
)
@click.option("-v", "--verbose", is_flag=True, help="Show all updates even when nothing changes.")
@click.option("--team", envvar="VERCEL_TEAM", help="Vercel team ID, for projects owned by a team.")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=DEFAULT_LOG_LEVEL, show_default=True,
)
def cli(project, token, interval, count, verbose, team, log_level) -> None:
    if not token:
        _fail("Vercel API token is required. Provide it with --token or set VERCEL_TOKEN env variable.")
    if not project:
        _fail("Vercel project ID/name is required. Provide it with --project or set VERCEL_PROJECT env variable.")

    setup_logging(log_level)
    settings = MonitorSettings(
        project=project,
        token=token,
        interval_seconds=interval,
        count=count,
        verbose=verbose,
        team_id=team or None,
    )
    asyncio.run(run_monitor(settings))


def main() -> None:
    load_dotenv()
    cli()


if __name__ == "__main__":
    main()
