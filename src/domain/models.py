from typing import Any, Dict, Optional
from pydantic import BaseModel, Field, ConfigDict

SHARD_BITS = 15
REALM_BITS = 16
NUM_BITS = 32

# Columns the reconciler is allowed to write back.
MUTABLE_FIELDS = (
    'auto_renew_period',
    'deleted',
    'ed25519_public_key_hex',
    'exp_time_ns',
    'key',
    'proxy_account_id',
)


class EntityKey(BaseModel):
    """
    Composite (shard, realm, num) key addressing a single entity.
    """
    model_config = ConfigDict(frozen=True)

    shard: int = Field(0, ge=0, description="Shard number")
    realm: int = Field(0, ge=0, description="Realm number")
    number: int = Field(..., ge=0, description="Entity number within the realm")

    @property
    def encoded_id(self) -> int:
        """
        Single-integer form used by foreign keys such as proxy_account_id.
        Raises ValueError when a component does not fit its 15/16/32 bit slot.
        """
        if self.shard >= 1 << SHARD_BITS or self.realm >= 1 << REALM_BITS or self.number >= 1 << NUM_BITS:
            raise ValueError(f"Entity {self} cannot be encoded.")
        return (self.shard << (REALM_BITS + NUM_BITS)) | (self.realm << NUM_BITS) | self.number

    def __str__(self) -> str:
        return f"{self.shard}.{self.realm}.{self.number}"


class EntityRecord(BaseModel):
    """
    Immutable snapshot of one row of the entity backup table.
    The store is the source of truth; derive modified copies with model_copy().
    """
    model_config = ConfigDict(frozen=True)

    id: int = Field(..., description="Primary key of the row")
    entity_shard: int = Field(..., ge=0)
    entity_realm: int = Field(..., ge=0)
    entity_num: int = Field(..., ge=0)
    fk_entity_type_id: Optional[int] = None
    auto_renew_period: Optional[int] = Field(None, description="Auto-renew period in seconds")
    deleted: Optional[bool] = False
    ed25519_public_key_hex: Optional[str] = None
    exp_time_ns: Optional[int] = Field(None, description="Expiration time in nanoseconds since epoch")
    key: Optional[bytes] = Field(None, description="Serialized protobuf Key")
    proxy_account_id: Optional[int] = Field(None, description="Encoded id of the proxy account")
    memo: Optional[str] = None

    @property
    def entity_key(self) -> EntityKey:
        return EntityKey(shard=self.entity_shard, realm=self.entity_realm, number=self.entity_num)


class EntityChanges(BaseModel):
    """
    Values for the six mutable columns. Used on its own to validate partial desired state.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    auto_renew_period: Optional[int] = None
    deleted: Optional[bool] = None
    ed25519_public_key_hex: Optional[str] = None
    exp_time_ns: Optional[int] = None
    key: Optional[bytes] = None
    proxy_account_id: Optional[int] = None


class EntityUpdate(EntityChanges):
    """
    The write contract for an entity: its primary key and the six mutable columns.
    Every field is written as given, so None clears the column.
    """
    id: int

    @classmethod
    def from_record(cls, record: EntityRecord) -> "EntityUpdate":
        return cls(**record.model_dump(include={'id', *MUTABLE_FIELDS}))


class DesiredEntityState(BaseModel):
    """
    Target values for some of an entity's mutable columns, keyed by textual entity id.
    """
    model_config = ConfigDict(frozen=True)

    entity_id: str = Field(..., description="Entity id as `num` or `shard.realm.num`")
    changes: Dict[str, Any] = Field(default_factory=dict, description="Mutable column name to desired value")


class ReconciliationSummary(BaseModel):
    """Counts produced by one reconciliation run."""
    dry_run: bool
    unchanged: int = 0
    pending: int = 0
    updated: int = 0
    missing: int = 0
