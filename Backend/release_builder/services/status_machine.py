"""
Release lifecycle.

Every status change of a release goes through `apply_transition`, which only
knows the edges listed in `TRANSITIONS`. Anything else raises
`InvalidTransitionError` and leaves the release untouched.

    create            -> In Progress
    submit            In Progress | Ready         -> Moderation
    approve           Moderation                  -> Sent to Stores
    reject            Moderation                  -> Error (reason required)
    reopen            Sent to Stores              -> Moderation (edit entry point)
    take_down         any status but Taken Down   -> Taken Down
"""
import enum
import logging
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional

from release_builder.core.exceptions import InvalidTransitionError, ValidationFailed
from release_builder.models.release import Release, ReleaseStatus
from release_builder.models.user_role import AppRole

logger = logging.getLogger(__name__)


class ReleaseTransition(str, enum.Enum):
    SUBMIT = "submit"
    APPROVE = "approve"
    REJECT = "reject"
    REOPEN = "reopen"
    TAKE_DOWN = "take_down"


@dataclass(frozen=True)
class Edge:
    sources: FrozenSet[ReleaseStatus]
    target: ReleaseStatus
    moderator_only: bool = False


TRANSITIONS: Dict[ReleaseTransition, Edge] = {
    ReleaseTransition.SUBMIT: Edge(
        frozenset({ReleaseStatus.IN_PROGRESS, ReleaseStatus.READY}),
        ReleaseStatus.MODERATION,
    ),
    ReleaseTransition.APPROVE: Edge(
        frozenset({ReleaseStatus.MODERATION}),
        ReleaseStatus.SENT_TO_STORES,
        moderator_only=True,
    ),
    ReleaseTransition.REJECT: Edge(
        frozenset({ReleaseStatus.MODERATION}),
        ReleaseStatus.ERROR,
        moderator_only=True,
    ),
    ReleaseTransition.REOPEN: Edge(
        frozenset({ReleaseStatus.SENT_TO_STORES}),
        ReleaseStatus.MODERATION,
    ),
    ReleaseTransition.TAKE_DOWN: Edge(
        frozenset(set(ReleaseStatus) - {ReleaseStatus.TAKEN_DOWN}),
        ReleaseStatus.TAKEN_DOWN,
    ),
}


def current_status(release: Release) -> ReleaseStatus:
    return ReleaseStatus(release.status)


def can_transition(status: ReleaseStatus, transition: ReleaseTransition) -> bool:
    return status in TRANSITIONS[transition].sources


def next_status(status: ReleaseStatus, transition: ReleaseTransition) -> ReleaseStatus:
    edge = TRANSITIONS[transition]
    if status not in edge.sources:
        raise InvalidTransitionError(transition.value.replace("_", " "), status.value)
    return edge.target


def apply_transition(release: Release, transition: ReleaseTransition, reason: Optional[str] = None) -> ReleaseStatus:
    """
    Move `release` along one edge of the lifecycle, in memory only.

    The caller owns the commit. A rejection needs a non-empty reason and it is
    checked before the status is looked at, so a refused rejection never
    reaches the database.
    """
    if transition is ReleaseTransition.REJECT:
        if reason is None or not reason.strip():
            raise ValidationFailed(["Please provide a reason for rejection"])

    source = current_status(release)
    target = next_status(source, transition)

    release.status = target.value
    # The reason only lives alongside the Error status
    release.rejection_reason = reason.strip() if transition is ReleaseTransition.REJECT else None

    logger.info(f"Release {release.id}: {source.value} -> {target.value} ({transition.value})")
    return target


def available_transitions(status: ReleaseStatus, roles: List[AppRole], is_owner: bool) -> List[ReleaseTransition]:
    """Transitions the caller may trigger right now; used to build catalog actions."""
    is_moderator = AppRole.MODERATOR in roles
    allowed = []
    for transition, edge in TRANSITIONS.items():
        if status not in edge.sources:
            continue
        if edge.moderator_only and not is_moderator:
            continue
        if not edge.moderator_only and not (is_owner or is_moderator):
            continue
        allowed.append(transition)
    return allowed
