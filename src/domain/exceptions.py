class EntityServiceException(Exception):
    """Base exception for all entity reconciliation errors."""
    pass

class InvalidIdentifierFormatException(EntityServiceException):
    """Raised when an entity id is not `num` or `shard.realm.num`."""
    def __init__(self, entity_id: str, message: str = "Id format is incorrect."):
        self.entity_id = entity_id
        super().__init__(f"{message} Got: {entity_id!r}")

class StoreUnavailableException(EntityServiceException):
    """Raised when the entity store cannot be reached or a query fails."""
    pass

class DuplicateEntityException(EntityServiceException):
    """Raised when more than one row matches a single entity id."""
    def __init__(self, entity_id: str):
        self.entity_id = entity_id
        super().__init__(f"Multiple entities found for {entity_id}.")
