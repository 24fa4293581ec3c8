from deploy_monitor.models import ChangeSet, Deployment, Snapshot, Transition


def diff_snapshots(previous: Snapshot | None, current: Snapshot) -> ChangeSet:
    """
    Compare two consecutive polls of the same project.

    A deployment is new when its id was not in `previous`; it has
    transitioned when the id was there with a different state. Deployments
    that drop out of `current` (pushed out of the "most recent N" window)
    are ignored.

    An empty or missing `previous` is the bootstrap case and always counts
    as a change, so the first poll is rendered.

    Neither input is modified. Results follow the order of `current`.
    """
    previous = previous or []

    # ids are unique per poll; with duplicates the first record wins
    previous_by_id: dict[str, Deployment] = {}
    for deployment in previous:
        previous_by_id.setdefault(deployment.id, deployment)

    new_deployments: list[Deployment] = []
    transitions: list[Transition] = []
    for deployment in current:
        before = previous_by_id.get(deployment.id)
        if before is None:
            new_deployments.append(deployment)
        elif before.raw_state != deployment.raw_state:
            transitions.append(Transition(deployment=deployment, previous=before))

    return ChangeSet(
        has_changes=not previous or bool(new_deployments) or bool(transitions),
        new_deployments=new_deployments,
        transitions=transitions,
    )
