import logging
from typing import Optional, Union
from sqlalchemy.engine import URL
from sqlalchemy.exc import MultipleResultsFound, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy import Table, Column, BigInteger, Integer, Boolean, String, LargeBinary, MetaData, and_, select

from src.domain.entity_id import parse_entity_id
from src.domain.exceptions import DuplicateEntityException, StoreUnavailableException
from src.domain.models import EntityRecord, EntityUpdate

logger = logging.getLogger(__name__)

# SQLAlchemy core Table definition
metadata = MetaData()
entities_table = Table(
    't_entities_bkup', metadata,
    Column('id', BigInteger, primary_key=True, autoincrement=False),
    Column('entity_shard', BigInteger, nullable=False),
    Column('entity_realm', BigInteger, nullable=False),
    Column('entity_num', BigInteger, nullable=False),
    Column('fk_entity_type_id', Integer),
    Column('auto_renew_period', BigInteger),
    Column('deleted', Boolean),
    Column('ed25519_public_key_hex', String),
    Column('exp_time_ns', BigInteger),
    Column('key', LargeBinary),
    Column('proxy_account_id', BigInteger),
    Column('memo', String),
)

class PostgresEntityRepository:
    """
    Data access for the entity backup table.
    Reads rows by composite entity id and writes the mutable columns back by primary key.
    The engine (and so the connection pool) is owned by the caller.
    """

    def __init__(self, engine: AsyncEngine):
        self.engine = engine

    @classmethod
    def from_url(cls, db_url: Union[str, URL], **engine_kwargs) -> "PostgresEntityRepository":
        return cls(create_async_engine(db_url, echo=False, **engine_kwargs))

    async def fetch(self, entity_id: str) -> Optional[EntityRecord]:
        """
        Fetches the row matching a `num` or `shard.realm.num` entity id.

        Args:
            entity_id (str): The textual entity id.

        Returns:
            Optional[EntityRecord]: The matching row, or None if no row matches.

        Raises:
            InvalidIdentifierFormatException: If the id cannot be parsed.
            DuplicateEntityException: If more than one row matches.
            StoreUnavailableException: If the query cannot be executed.
        """
        key = parse_entity_id(entity_id)
        logger.debug(f"Fetching entity {entity_id}")

        stmt = select(entities_table).where(
            and_(
                entities_table.c.entity_shard == key.shard,
                entities_table.c.entity_realm == key.realm,
                entities_table.c.entity_num == key.number,
            )
        )

        try:
            async with self.engine.connect() as conn:
                result = await conn.execute(stmt)
                row = result.one_or_none()
        except MultipleResultsFound as e:
            raise DuplicateEntityException(entity_id) from e
        except SQLAlchemyError as e:
            raise StoreUnavailableException(f"Failed to fetch entity {entity_id}: {e}") from e

        if row is None:
            return None
        return EntityRecord.model_validate(dict(row._mapping))

    async def update(self, entity: Union[EntityRecord, EntityUpdate]) -> int:
        """
        Writes the six mutable columns of an entity, matched by primary key.

        Args:
            entity (Union[EntityRecord, EntityUpdate]): The values to write. A record is
                narrowed to its mutable fields first.

        Returns:
            int: Number of rows affected; 0 means no row has that primary key.

        Raises:
            StoreUnavailableException: If the statement cannot be executed.
        """
        if isinstance(entity, EntityRecord):
            entity = EntityUpdate.from_record(entity)

        stmt = (
            entities_table.update()
            .where(entities_table.c.id == entity.id)
            .values(**entity.model_dump(exclude={'id'}))
        )

        try:
            async with self.engine.begin() as conn:
                result = await conn.execute(stmt)
                rowcount = result.rowcount
        except SQLAlchemyError as e:
            raise StoreUnavailableException(f"Failed to update entity {entity.id}: {e}") from e

        if rowcount == 0:
            logger.warning(f"No entity with id {entity.id} to update")
        else:
            logger.debug(f"Updated entity {entity.id}")
        return rowcount

    async def dispose(self) -> None:
        await self.engine.dispose()
