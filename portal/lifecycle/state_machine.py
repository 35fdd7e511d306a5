"""State machines for reviewable entities with transition guards."""
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, FrozenSet, Generic, Optional, Set, Tuple, Type, TypeVar

from portal.db.enums import AccountStatus, ReviewStatus
from portal.exceptions import InvalidTransition
from portal.lifecycle.error_codes import ErrorCode, ErrorCodeDictionary

S = TypeVar("S", bound=Enum)


@dataclass
class StateTransition:
    """
    Represents a state transition with metadata.

    Attributes:
        entity_type: Table name of the entity
        entity_id: Entity primary key
        from_state: Source state
        to_state: Target state
        timestamp: When the transition occurred
        actor_id: User who triggered it
        reason: Optional note (e.g. admin note)
    """

    entity_type: str
    entity_id: int
    from_state: Enum
    to_state: Enum
    timestamp: datetime
    actor_id: Optional[int] = None
    reason: Optional[str] = None

    def to_dict(self) -> Dict:
        """Convert transition to dictionary for serialization."""
        return {
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "from_state": self.from_state.value,
            "to_state": self.to_state.value,
            "timestamp": self.timestamp.isoformat(),
            "actor_id": self.actor_id,
            "reason": self.reason,
        }


class StateMachine(Generic[S]):
    """
    Transition table over one status enum.

    The same machine serves every entity sharing the status enum; states with
    no outgoing transitions are terminal.
    """

    def __init__(self, name: str, states: Type[S], initial: S, transitions: Dict[S, Set[S]]):
        self.name = name
        self.states = states
        self.initial = initial
        self.transitions: Dict[S, FrozenSet[S]] = {
            state: frozenset(transitions.get(state, set())) for state in states
        }

    def parse(self, value) -> S:
        """Coerce a stored value to the state enum."""
        return value if isinstance(value, self.states) else self.states(value)

    def is_terminal(self, state) -> bool:
        return not self.transitions[self.parse(state)]

    def get_allowed_transitions(self, state) -> FrozenSet[S]:
        return self.transitions[self.parse(state)]

    def sources_for(self, target: S) -> FrozenSet[S]:
        """All states from which ``target`` can be reached in one step."""
        return frozenset(s for s, targets in self.transitions.items() if target in targets)

    def can_transition(self, current, target: S) -> Tuple[bool, Optional[ErrorCode]]:
        """
        Check if transition to target state is allowed.

        Returns:
            Tuple of (can_transition, error_code_if_blocked)
        """
        if target not in self.transitions[self.parse(current)]:
            return False, ErrorCodeDictionary.STATE_001
        return True, None

    def check(self, current, target: S, entity_id: Optional[int] = None) -> None:
        """
        Raise if the transition is not allowed.

        Raises:
            InvalidTransition: If current -> target is not in the table
        """
        allowed, error_code = self.can_transition(current, target)
        if not allowed:
            current_state = self.parse(current)
            raise InvalidTransition(
                message=(
                    f"Cannot move {self.name} from {current_state.value} to {target.value}"
                ),
                error_code=error_code,
                entity_id=entity_id,
                context={
                    "current_status": current_state.value,
                    "target_status": target.value,
                    "allowed": sorted(s.value for s in self.transitions[current_state]),
                },
            )

    def transition(
        self,
        entity_type: str,
        entity_id: int,
        current,
        target: S,
        actor_id: Optional[int] = None,
        reason: Optional[str] = None,
    ) -> StateTransition:
        """Validate a transition and describe it; persisting is the caller's job."""
        self.check(current, target, entity_id)
        return StateTransition(
            entity_type=entity_type,
            entity_id=entity_id,
            from_state=self.parse(current),
            to_state=target,
            timestamp=datetime.now(timezone.utc),
            actor_id=actor_id,
            reason=reason,
        )


# Submittable content: creation is submission, review is final
CONTENT_LIFECYCLE: StateMachine[ReviewStatus] = StateMachine(
    name="content",
    states=ReviewStatus,
    initial=ReviewStatus.PENDING,
    transitions={
        ReviewStatus.PENDING: {ReviewStatus.APPROVED, ReviewStatus.REJECTED},
        ReviewStatus.APPROVED: set(),
        ReviewStatus.REJECTED: set(),
    },
)

ACCESS_REQUEST_LIFECYCLE: StateMachine[ReviewStatus] = StateMachine(
    name="access request",
    states=ReviewStatus,
    initial=ReviewStatus.PENDING,
    transitions={
        ReviewStatus.PENDING: {ReviewStatus.APPROVED, ReviewStatus.REJECTED},
        ReviewStatus.APPROVED: set(),
        ReviewStatus.REJECTED: set(),
    },
)

# No way back from SUSPENDED; reactivation is not supported
ACCOUNT_LIFECYCLE: StateMachine[AccountStatus] = StateMachine(
    name="account",
    states=AccountStatus,
    initial=AccountStatus.PENDING,
    transitions={
        AccountStatus.PENDING: {AccountStatus.APPROVED, AccountStatus.REJECTED},
        AccountStatus.APPROVED: {AccountStatus.SUSPENDED},
        AccountStatus.REJECTED: set(),
        AccountStatus.SUSPENDED: set(),
    },
)
