import re

from src.domain.exceptions import InvalidIdentifierFormatException
from src.domain.models import EntityKey, NUM_BITS, REALM_BITS, SHARD_BITS

# ASCII digits only; int() alone would accept signs, underscores and whitespace
SEGMENT_PATTERN = re.compile(r'[0-9]+')

def parse_entity_id(entity_id: str) -> EntityKey:
    """
    Parses `num` or `shard.realm.num` into an EntityKey.

    Raises:
        InvalidIdentifierFormatException: on any other number of segments, or when a
            segment is not made of decimal digits.
    """
    parts = entity_id.split('.')
    if len(parts) not in (1, 3):
        raise InvalidIdentifierFormatException(entity_id)

    if not all(SEGMENT_PATTERN.fullmatch(part) for part in parts):
        raise InvalidIdentifierFormatException(entity_id, message="Id segments must be non-negative integers.")

    if len(parts) == 1:
        return EntityKey(number=int(parts[0]))
    return EntityKey(shard=int(parts[0]), realm=int(parts[1]), number=int(parts[2]))


def format_entity_id(key: EntityKey) -> str:
    return str(key)


def decode_entity_id(encoded_id: int) -> EntityKey:
    """Inverse of EntityKey.encoded_id."""
    if not 0 <= encoded_id < 1 << (SHARD_BITS + REALM_BITS + NUM_BITS):
        raise ValueError(f"Encoded entity id out of range, got {encoded_id}.")
    return EntityKey(
        shard=encoded_id >> (REALM_BITS + NUM_BITS),
        realm=(encoded_id >> NUM_BITS) & ((1 << REALM_BITS) - 1),
        number=encoded_id & ((1 << NUM_BITS) - 1),
    )
