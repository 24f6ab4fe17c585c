"""Repository-level errors"""


class ConcurrencyConflict(Exception):
    """
    Raised when a conditional write loses a race

    The caller should roll back and retry the whole unit of work.
    """

    def __init__(self, entity: str, entity_id: int, detail: str = ""):
        self.entity = entity
        self.entity_id = entity_id
        self.detail = detail
        message = f"Concurrent modification of {entity} {entity_id}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
