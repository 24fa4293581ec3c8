# Vercel deployments client: the watcher's fetch capability.

# Every failure leaves this module as one of the three FetchError kinds:
#   - RemoteRejected   the API answered with status >= 400 (body kept for display)
#   - Unreachable      no response at all: connection refused, DNS, timeout
#   - MalformedOrLocal anything else, e.g. a body that is not JSON or not a listing
#
# The watcher only ever sees those, so it never needs to know about aiohttp.

import asyncio
import json
import logging

import aiohttp

from deploy_monitor.config import API_BASE, DEPLOYMENTS_PATH, REQUEST_TIMEOUT_SECONDS
from deploy_monitor.errors import MalformedOrLocal, RemoteRejected, Unreachable
from deploy_monitor.models import Snapshot
from deploy_monitor.parser import parse_deployments

log = logging.getLogger(__name__)


class VercelClient:
    """
    Fetches the most recent deployments of a project over a shared
    aiohttp.ClientSession. The session is owned by the caller.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        token: str,
        api_base: str = API_BASE,
        team_id: str | None = None,
        timeout_seconds: float = REQUEST_TIMEOUT_SECONDS,
    ) -> None:
        self._session = session
        self._token = token
        self._url = f"{api_base.rstrip('/')}{DEPLOYMENTS_PATH}"
        self._team_id = team_id
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)

    async def fetch_snapshot(self, project: str, limit: int) -> Snapshot:
        """
        GET the `limit` most recent deployments of `project`.

        Raises:
            RemoteRejected    on a non-2xx response
            Unreachable       on connection errors and timeouts
            MalformedOrLocal  on undecodable or unexpected payloads
        """
        params = {"projectId": project, "limit": str(limit)}
        if self._team_id:
            params["teamId"] = self._team_id
        headers = {
            "Authorization": f"Bearer {self._token}",
            "Content-Type": "application/json",
        }

        try:
            async with self._session.get(
                self._url,
                params=params,
                headers=headers,
                timeout=self._timeout,
            ) as resp:
                if resp.status >= 400:
                    body = await resp.text(errors="replace")
                    log.warning("HTTP error fetching deployments for %s: %s", project, resp.status)
                    raise RemoteRejected(resp.status, body)

                data = await resp.json(content_type=None)

        except asyncio.TimeoutError as exc:
            log.warning("Timeout fetching deployments for %s", project)
            raise Unreachable("request timed out") from exc
        except aiohttp.ClientConnectionError as exc:
            log.warning("Connection error fetching deployments for %s: %s", project, exc)
            raise Unreachable(str(exc)) from exc
        except json.JSONDecodeError as exc:
            raise MalformedOrLocal(f"Invalid JSON in response: {exc}") from exc
        except aiohttp.ClientError as exc:
            raise MalformedOrLocal(str(exc) or type(exc).__name__) from exc

        return parse_deployments(data)
