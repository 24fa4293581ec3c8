# parses the Vercel /v6/deployments response into Deployment objects.

# Design decisions:
#   - API order is kept as-is: it is the display order (newest first).
#   - Unknown `state` values are kept verbatim in raw_state, never rejected.
#   - Missing commit metadata is stored as None; models supply the placeholders.
#   - Entries without an id cannot be tracked across polls and are skipped.
#   - A payload that is not shaped like a deployments listing raises
#     MalformedOrLocal so the watcher reports it like any other failed fetch.

import logging
from typing import Any

from deploy_monitor.errors import MalformedOrLocal
from deploy_monitor.models import (
    Deployment,
    Snapshot,
    parse_dt,
)

log = logging.getLogger(__name__)


def parse_deployment(entry: dict[str, Any]) -> Deployment | None:
    deployment_id = entry.get("uid") or entry.get("id")
    if not deployment_id:
        log.warning("Skipping deployment entry without uid: %r", entry)
        return None

    # `meta` is null on deployments created from the CLI
    meta = entry.get("meta") or {}

    return Deployment(
        id=str(deployment_id),
        raw_state=str(entry.get("state") or entry.get("readyState") or "UNKNOWN"),
        created_at=parse_dt(entry.get("createdAt") or entry.get("created")),
        url=entry.get("url") or "",
        commit_message=meta.get("githubCommitMessage") or None,
        commit_ref=meta.get("githubCommitRef") or None,
    )


def parse_deployments(data: Any) -> Snapshot:
    """
    Parse a deployments listing payload.

    Returns the deployments in API order. A missing or null `deployments`
    key is an empty project, not an error.
    """
    if not isinstance(data, dict):
        raise MalformedOrLocal(f"Unexpected response payload: expected an object, got {type(data).__name__}")

    entries = data.get("deployments") or []
    if not isinstance(entries, list):
        raise MalformedOrLocal(f"Unexpected 'deployments' field: expected a list, got {type(entries).__name__}")

    snapshot: Snapshot = []
    for entry in entries:
        if not isinstance(entry, dict):
            log.warning("Skipping non-object deployment entry: %r", entry)
            continue
        deployment = parse_deployment(entry)
        if deployment is not None:
            snapshot.append(deployment)
    return snapshot
