from collections.abc import Iterable, Sequence

from tms_rbac.models.enums import Role

class RoleHierarchy:
    """Total order over roles, highest first.

    The order is data, not control flow: it is passed in (normally from
    settings) and turned into a lookup table of strictly subordinate roles.
    """

    def __init__(self, order: Iterable[Role]):
        ordered = tuple(Role(r) for r in order)

        if len(set(ordered)) != len(ordered):
            raise ValueError(f"role hierarchy lists a role more than once: {[r.value for r in ordered]}")
        missing = set(Role) - set(ordered)
        if missing:
            raise ValueError(f"role hierarchy is missing roles: {sorted(r.value for r in missing)}")

        self._order = ordered
        self._subordinates: dict[Role, tuple[Role, ...]] = {
            role: ordered[i + 1:] for i, role in enumerate(ordered)
        }

    @property
    def order(self) -> tuple[Role, ...]:
        return self._order

    def subordinates_of(self, role: Role) -> Sequence[Role]:
        return self._subordinates[role]

    def outranks(self, role: Role, other: Role) -> bool:
        return other in self._subordinates[role]

DEFAULT_ROLE_ORDER: tuple[Role, ...] = (Role.OWNER, Role.ADMIN, Role.VIEWER)
