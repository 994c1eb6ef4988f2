from typing import Iterable, Optional, FrozenSet

from .config import parse_number_list


class AccessPolicy:
    """
    Allow-list of requester identifiers.

    Matching is exact and case-sensitive; identifiers are not normalized.
    """

    def __init__(self, allowed: Iterable[str]):
        self._allowed: FrozenSet[str] = frozenset(allowed)

    @classmethod
    def from_csv(cls, raw: Optional[str]) -> "AccessPolicy":
        """Build a policy from a comma-separated configuration value."""
        return cls(parse_number_list(raw))

    @property
    def allowed(self) -> FrozenSet[str]:
        return self._allowed

    def is_allowed(self, requester_id: Optional[str]) -> bool:
        if not requester_id:
            return False
        return requester_id in self._allowed

    def __len__(self) -> int:
        return len(self._allowed)
