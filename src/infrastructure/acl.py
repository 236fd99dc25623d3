from typing import Any, Dict
from pydantic import ValidationError

from src.domain.entity_id import parse_entity_id
from src.domain.models import MUTABLE_FIELDS, DesiredEntityState, EntityChanges

class EntityInfoTranslator:
    """
    Anti-corruption layer that translates raw desired-state JSON documents into DesiredEntityState instances.
    """

    @staticmethod
    def to_domain(raw: Dict[str, Any]) -> DesiredEntityState:
        """
        Transforms a raw desired-state document into a DesiredEntityState.

        Args:
            raw (Dict[str, Any]): e.g. {"entity_id": "0.0.1001", "deleted": true, "key": "1220..."}

        Returns:
            DesiredEntityState: The entity id and the requested column values, coerced
                to the column types.
        """
        if not isinstance(raw, dict):
            raise ValueError(f"Desired state must be a JSON object, got {type(raw).__name__}.")

        entity_id = raw.get('entity_id')
        if not entity_id:
            raise ValueError("entity_id is required to build DesiredEntityState.")

        unknown = set(raw) - {'entity_id', *MUTABLE_FIELDS}
        if unknown:
            raise ValueError(f"Fields {sorted(unknown)} cannot be reconciled.")

        changes = {name: raw[name] for name in MUTABLE_FIELDS if name in raw}

        # Keys arrive hex encoded
        if isinstance(changes.get('key'), str):
            changes['key'] = bytes.fromhex(changes['key'])

        proxy = changes.get('proxy_account_id')
        if isinstance(proxy, str):
            changes['proxy_account_id'] = parse_entity_id(proxy).encoded_id

        try:
            validated = EntityChanges(**changes)
        except ValidationError as e:
            raise ValueError(f"Invalid desired values for {entity_id}: {e}") from e

        return DesiredEntityState(entity_id=str(entity_id), changes=validated.model_dump(exclude_unset=True))
