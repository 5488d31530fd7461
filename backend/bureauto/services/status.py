"""Advertisement status lifecycle. Pure logic, no DB dependency.

Status codes are stored as integers and mirror the ``status_types`` lookup
table seeded by the initial migration.
"""

from enum import IntEnum, StrEnum


class AdvertisementStatus(IntEnum):
    ACTIVE = 1
    REMOVED = 2
    PAUSED = 3
    SOLD = 4


class AdvertisementAction(StrEnum):
    PAUSE = "pause"
    RESUME = "resume"
    SELL = "sell"
    REMOVE = "remove"


class InvalidTransitionError(Exception):
    """Raised when a status transition is not allowed."""

    def __init__(self, current: int, action: str):
        self.current = current
        self.action = action
        super().__init__(f"Invalid transition: {current} + {action}")


STATUS_DESCRIPTIONS: dict[AdvertisementStatus, str] = {
    AdvertisementStatus.ACTIVE: "Ativo",
    AdvertisementStatus.REMOVED: "Removido",
    AdvertisementStatus.PAUSED: "Pausado",
    AdvertisementStatus.SOLD: "Vendido",
}

# Mapping: (current_status, action) → new_status
TRANSITIONS: dict[tuple[AdvertisementStatus, AdvertisementAction], AdvertisementStatus] = {
    (AdvertisementStatus.ACTIVE, AdvertisementAction.PAUSE): AdvertisementStatus.PAUSED,
    (AdvertisementStatus.PAUSED, AdvertisementAction.RESUME): AdvertisementStatus.ACTIVE,
    (AdvertisementStatus.ACTIVE, AdvertisementAction.SELL): AdvertisementStatus.SOLD,
    (AdvertisementStatus.PAUSED, AdvertisementAction.SELL): AdvertisementStatus.SOLD,
    (AdvertisementStatus.ACTIVE, AdvertisementAction.REMOVE): AdvertisementStatus.REMOVED,
    (AdvertisementStatus.PAUSED, AdvertisementAction.REMOVE): AdvertisementStatus.REMOVED,
    (AdvertisementStatus.SOLD, AdvertisementAction.REMOVE): AdvertisementStatus.REMOVED,
}

# Visible to the public listing, search and detail pages
PUBLIC_STATUSES: tuple[AdvertisementStatus, ...] = (AdvertisementStatus.ACTIVE,)

# Shown in the owner's own dashboard and counted by the time-in-listing report
OWNER_STATUSES: tuple[AdvertisementStatus, ...] = (
    AdvertisementStatus.ACTIVE,
    AdvertisementStatus.PAUSED,
)

# Denominator of the sold percentage report
SALE_BASE_STATUSES: tuple[AdvertisementStatus, ...] = (
    AdvertisementStatus.ACTIVE,
    AdvertisementStatus.SOLD,
)


def validate_transition(current: int, action: str) -> AdvertisementStatus:
    """Validate and return the new status for a transition.

    Raises InvalidTransitionError if the transition is not allowed.
    """
    try:
        key = (AdvertisementStatus(current), AdvertisementAction(action))
    except ValueError:
        raise InvalidTransitionError(current, action)

    if key not in TRANSITIONS:
        raise InvalidTransitionError(current, action)
    return TRANSITIONS[key]


def get_available_actions(current: int) -> list[str]:
    """Return the action names allowed from the given status."""
    try:
        current_status = AdvertisementStatus(current)
    except ValueError:
        return []
    return [action.value for (status, action) in TRANSITIONS if status == current_status]
