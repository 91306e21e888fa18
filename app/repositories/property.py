"""
Property store for catalog listings.
Writes a property and its image list atomically, rebuilds properties
(optionally joined with their broker) from flat rows, and runs filtered,
paginated search with a window-computed total count.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncConnection
from sqlalchemy.sql import Select

from app.models.image import PropertyImageRecord
from app.models.property import PropertyRecord
from app.models.user import UserRecord
from app.repositories.base import BaseStore
from app.repositories.filters import build_search_predicate, page_window
from app.repositories.row_mappers import (
    PagedRow,
    attach_images,
    flatten_rows,
    property_from_row,
    property_with_broker_from_row,
)
from app.schemas.property import (
    PaginatedResult,
    Property,
    PropertySearchFilters,
    PropertyWithBroker,
)
from app.utils.codecs import encode_location, encode_money, encode_property_type
import logging

logger = logging.getLogger(__name__)

PROPERTY_COLUMNS = (
    PropertyRecord.id,
    PropertyRecord.property_type,
    PropertyRecord.location,
    PropertyRecord.price,
    PropertyRecord.description,
    PropertyRecord.features,
    PropertyRecord.broker_id,
    PropertyRecord.created_date,
)

BROKER_COLUMNS = (
    UserRecord.id.label("broker_user_id"),
    UserRecord.first_name.label("broker_first_name"),
    UserRecord.last_name.label("broker_last_name"),
    UserRecord.email.label("broker_email"),
)

# Newest first; id breaks ties between rows created in the same instant
NEWEST_FIRST = (PropertyRecord.created_date.desc(), PropertyRecord.id.desc())


def _select_properties(with_broker: bool = False) -> Select:
    if not with_broker:
        return select(*PROPERTY_COLUMNS)
    return (
        select(*PROPERTY_COLUMNS, *BROKER_COLUMNS)
        .select_from(PropertyRecord)
        .join(UserRecord, PropertyRecord.broker_id == UserRecord.id)
    )


def _parent_values(property_obj: Property) -> Dict[str, Any]:
    """Column values shared by insert and update."""
    return {
        "property_type": encode_property_type(property_obj.property_type),
        "location": encode_location(property_obj.location),
        "price": encode_money(property_obj.price),
        "description": property_obj.description,
        "features": property_obj.features,
    }


class PropertyStore(BaseStore):
    """
    Store for the Property aggregate.
    Each operation acquires its own connection; add and update run in one
    transaction spanning the property row and its image rows.
    """

    entity_name = "property"

    async def add(self, property_obj: Property) -> None:
        """
        Insert a property and its images in one transaction.

        The assigned id and created_date are written back onto property_obj
        once the transaction has committed.

        Raises:
            ConstraintError: If the broker does not exist or an image URL repeats
            StoreError: If the database operation fails
        """
        async with self.operation("add", property_obj.id):
            async with self.connection_factory.create_connection() as conn:
                async with conn.begin():
                    created_date = datetime.now(timezone.utc)
                    result = await conn.execute(
                        insert(PropertyRecord).values(
                            **_parent_values(property_obj),
                            broker_id=property_obj.broker_id,
                            created_date=created_date,
                        )
                    )
                    property_id = result.inserted_primary_key[0]
                    await self._insert_images(conn, property_id, property_obj.image_urls)

            property_obj.id = property_id
            property_obj.created_date = created_date

        logger.info(
            f"Created property {property_id} for broker {property_obj.broker_id} "
            f"with {len(property_obj.image_urls)} images"
        )

    async def update(self, property_obj: Property) -> bool:
        """
        Replace a property's mutable columns and its whole image list.

        broker_id and created_date are never written. Images are deleted and
        reinserted so display_order always matches list position.

        Returns:
            True if the property row exists and was updated, False otherwise

        Raises:
            ValueError: If property_obj has no id
            ConstraintError: If an image URL repeats
            StoreError: If the database operation fails
        """
        if property_obj.id is None:
            raise ValueError("Cannot update a property without an id")

        async with self.operation("update", property_obj.id):
            async with self.connection_factory.create_connection() as conn:
                async with conn.begin():
                    result = await conn.execute(
                        update(PropertyRecord)
                        .where(PropertyRecord.id == property_obj.id)
                        .values(**_parent_values(property_obj))
                    )
                    if result.rowcount == 0:
                        logger.debug(f"Property {property_obj.id} not found for update")
                        return False

                    await conn.execute(
                        delete(PropertyImageRecord)
                        .where(PropertyImageRecord.property_id == property_obj.id)
                    )
                    await self._insert_images(conn, property_obj.id, property_obj.image_urls)

        logger.info(f"Updated property {property_obj.id} with {len(property_obj.image_urls)} images")
        return True

    async def delete(self, property_id: int) -> bool:
        """
        Delete a property; its image rows are removed by the cascade.

        Returns:
            True if a row was deleted, False if no property had that id
        """
        async with self.operation("delete", property_id):
            async with self.connection_factory.create_connection() as conn:
                async with conn.begin():
                    result = await conn.execute(
                        delete(PropertyRecord).where(PropertyRecord.id == property_id)
                    )
                    deleted = result.rowcount > 0

        if deleted:
            logger.info(f"Deleted property {property_id}")
        else:
            logger.debug(f"Property {property_id} not found for deletion")
        return deleted

    async def get_by_id(self, property_id: int) -> Optional[Property]:
        """
        Get a property with its ordered image list.

        Returns:
            Property if found, None otherwise
        """
        async with self.operation("get", property_id):
            async with self.connection_factory.create_connection() as conn:
                result = await conn.execute(
                    _select_properties().where(PropertyRecord.id == property_id)
                )
                row = result.first()
                if row is None:
                    logger.debug(f"Property {property_id} not found")
                    return None

                entities = {row.id: property_from_row(row, self.currency)}
                await self._load_images(conn, entities)

        logger.debug(f"Retrieved property {property_id}")
        return entities[row.id]

    async def get_by_id_with_broker(self, property_id: int) -> Optional[PropertyWithBroker]:
        """
        Get a property joined with its broker's contact details.

        Returns:
            PropertyWithBroker if found, None otherwise
        """
        async with self.operation("get with broker", property_id):
            async with self.connection_factory.create_connection() as conn:
                result = await conn.execute(
                    _select_properties(with_broker=True).where(PropertyRecord.id == property_id)
                )
                entities = flatten_rows(
                    result,
                    key=lambda r: r.id,
                    build=lambda r: property_with_broker_from_row(r, self.currency),
                )
                if not entities:
                    logger.debug(f"Property {property_id} not found")
                    return None

                await self._load_images(conn, entities)

        logger.debug(f"Retrieved property {property_id} with broker")
        return entities[property_id]

    async def get_all(self) -> List[Property]:
        """Get every property, newest first, with images."""
        async with self.operation("list"):
            async with self.connection_factory.create_connection() as conn:
                result = await conn.execute(_select_properties().order_by(*NEWEST_FIRST))
                entities = flatten_rows(
                    result,
                    key=lambda r: r.id,
                    build=lambda r: property_from_row(r, self.currency),
                )
                await self._load_images(conn, entities)

        logger.debug(f"Retrieved {len(entities)} properties")
        return list(entities.values())

    async def get_all_with_broker(self) -> List[PropertyWithBroker]:
        """Get every property joined with its broker, newest first, with images."""
        async with self.operation("list with broker"):
            async with self.connection_factory.create_connection() as conn:
                result = await conn.execute(
                    _select_properties(with_broker=True).order_by(*NEWEST_FIRST)
                )
                entities = flatten_rows(
                    result,
                    key=lambda r: r.id,
                    build=lambda r: property_with_broker_from_row(r, self.currency),
                )
                await self._load_images(conn, entities)

        logger.debug(f"Retrieved {len(entities)} properties with broker")
        return list(entities.values())

    async def search(self, filters: PropertySearchFilters) -> PaginatedResult[Property]:
        """
        Search properties with filters and pagination, newest first.

        Returns:
            One page of properties and the size of the whole filtered set
        """
        async with self.operation("search"):
            async with self.connection_factory.create_connection() as conn:
                paged, total_count = await self._search_page(
                    conn,
                    filters,
                    with_broker=False,
                    build=lambda r: property_from_row(r, self.currency),
                )
                entities = {key: paged_row.entity for key, paged_row in paged.items()}
                await self._load_images(conn, entities)

        return self._page_result(PaginatedResult[Property], filters, entities, total_count)

    async def search_with_broker(self, filters: PropertySearchFilters) -> PaginatedResult[PropertyWithBroker]:
        """
        Search properties joined with their broker, newest first.

        Returns:
            One page of properties with brokers and the size of the filtered set
        """
        async with self.operation("search with broker"):
            async with self.connection_factory.create_connection() as conn:
                paged, total_count = await self._search_page(
                    conn,
                    filters,
                    with_broker=True,
                    build=lambda r: property_with_broker_from_row(r, self.currency),
                )
                entities = {key: paged_row.entity for key, paged_row in paged.items()}
                await self._load_images(conn, entities)

        return self._page_result(PaginatedResult[PropertyWithBroker], filters, entities, total_count)

    async def _search_page(
        self,
        conn: AsyncConnection,
        filters: PropertySearchFilters,
        with_broker: bool,
        build,
    ) -> Tuple[Dict[int, PagedRow], int]:
        """
        Run the windowed search query for one page.

        Every filtered row gets a row number (newest first) and the total
        filtered count; only rows inside the page window are returned.
        A page past the end carries no rows, so the total is counted
        separately in that case.

        Returns:
            Rows of the page keyed by property id, and the filtered total
        """
        start_index, end_index = page_window(filters.page, filters.page_size)
        filtered = _select_properties(with_broker).where(build_search_predicate(filters))

        ranked = (
            filtered
            .add_columns(
                func.row_number().over(order_by=NEWEST_FIRST).label("row_num"),
                func.count().over().label("total_count"),
            )
            .cte("results")
        )
        query = (
            select(ranked)
            .where(ranked.c.row_num.between(start_index, end_index))
            .order_by(ranked.c.row_num)
        )

        result = await conn.execute(query)
        paged = flatten_rows(
            result,
            key=lambda r: r.id,
            build=lambda r: PagedRow(entity=build(r), total_count=r.total_count),
        )
        if paged:
            return paged, next(iter(paged.values())).total_count
        if filters.page == 1:
            return paged, 0

        total_count = await conn.scalar(
            select(func.count()).select_from(filtered.subquery())
        )
        return paged, total_count or 0

    def _page_result(
        self,
        result_cls,
        filters: PropertySearchFilters,
        entities: Dict[int, Any],
        total_count: int,
    ) -> PaginatedResult:
        logger.debug(
            f"Property search page {filters.page} returned {len(entities)} of {total_count} total results"
        )
        return result_cls(
            items=list(entities.values()),
            page=filters.page,
            page_size=filters.page_size,
            total_count=total_count,
        )

    async def _insert_images(self, conn: AsyncConnection, property_id: int, image_urls: Sequence[str]) -> None:
        """Insert image rows with display_order taken from list position."""
        if not image_urls:
            return
        await conn.execute(
            insert(PropertyImageRecord),
            [
                {"property_id": property_id, "image_url": url, "display_order": index}
                for index, url in enumerate(image_urls)
            ],
        )

    async def _load_images(self, conn: AsyncConnection, entities: Dict[int, Any]) -> None:
        """Load image rows for exactly these property ids and attach them."""
        if not entities:
            return
        result = await conn.execute(
            select(PropertyImageRecord.property_id, PropertyImageRecord.image_url)
            .where(PropertyImageRecord.property_id.in_(list(entities.keys())))
            .order_by(PropertyImageRecord.property_id, PropertyImageRecord.display_order)
        )
        attach_images(entities, result)
