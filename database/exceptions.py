class DatabaseError(Exception):
    """Base for all storage errors."""


class NotFoundError(DatabaseError):
    """No entity with the requested id."""

    def __init__(self, entity: str, entity_id):
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class DuplicateError(DatabaseError):
    """Unique value already taken (e.g. username)."""
