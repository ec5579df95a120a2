class InvalidCredentials(Exception):
    """Login failed. One message for unknown email and wrong password alike."""

    message = "Invalid credentials"

    def __init__(self) -> None:
        super().__init__(self.message)

class OrganizationCycleError(Exception):
    """A parent link would make (or already makes) the org tree cyclic."""

    def __init__(self, org_id: int, parent_org_id: int | None = None):
        self.org_id = org_id
        self.parent_org_id = parent_org_id
        if parent_org_id is None:
            msg = f"organization {org_id} sits on a parent cycle"
        else:
            msg = f"organization {parent_org_id} cannot be the parent of {org_id}: cycle"
        super().__init__(msg)
