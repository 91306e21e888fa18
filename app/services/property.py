"""
Property service for managing catalog listings.
Sits between the presentation layer and PropertyStore: turns absent
results into NotFound errors and enforces that brokers only change
their own listings.
"""

from typing import List, Union

from app.repositories.property import PropertyStore
from app.schemas.property import (
    PaginatedResult,
    Property,
    PropertySearchFilters,
    PropertyWithBroker,
)
from app.utils.exceptions import PropertyNotFoundError, PropertyOwnershipError
import logging

logger = logging.getLogger(__name__)


class PropertyService:
    """
    Property service for listing management.
    Store errors propagate unchanged; callers decide on retries.
    """

    def __init__(self, store: PropertyStore):
        self.store = store

    async def create_property(self, property_obj: Property, broker_id: int) -> Property:
        """
        Create a listing owned by the given broker.

        Args:
            property_obj: Property to create; its id is filled in
            broker_id: ID of the authenticated broker

        Returns:
            The created property
        """
        property_obj.broker_id = broker_id
        await self.store.add(property_obj)
        logger.info(f"Property created by broker {broker_id}: {property_obj.id}")
        return property_obj

    async def get_property(self, property_id: int) -> Property:
        """
        Get property by ID.

        Raises:
            PropertyNotFoundError: If property doesn't exist
        """
        property_obj = await self.store.get_by_id(property_id)
        if property_obj is None:
            raise PropertyNotFoundError(property_id)
        return property_obj

    async def get_property_with_broker(self, property_id: int) -> PropertyWithBroker:
        """
        Get property by ID with its broker's contact details.

        Raises:
            PropertyNotFoundError: If property doesn't exist
        """
        property_obj = await self.store.get_by_id_with_broker(property_id)
        if property_obj is None:
            raise PropertyNotFoundError(property_id)
        return property_obj

    async def list_properties(self) -> List[Property]:
        return await self.store.get_all()

    async def list_properties_with_broker(self) -> List[PropertyWithBroker]:
        return await self.store.get_all_with_broker()

    async def update_property(self, property_id: int, property_data: Property, broker_id: int) -> Property:
        """
        Replace a listing's details and images.

        Args:
            property_id: ID of the property to update
            property_data: New values; id, broker_id and created_date are ignored
            broker_id: ID of the authenticated broker

        Returns:
            The updated property

        Raises:
            PropertyNotFoundError: If property doesn't exist
            PropertyOwnershipError: If the broker doesn't own the property
        """
        existing = await self._get_owned_property(property_id, broker_id)

        property_data.id = property_id
        property_data.broker_id = existing.broker_id
        property_data.created_date = existing.created_date

        if not await self.store.update(property_data):
            # Removed between the ownership check and the update
            raise PropertyNotFoundError(property_id)

        logger.info(f"Property updated by broker {broker_id}: {property_id}")
        return property_data

    async def delete_property(self, property_id: int, broker_id: int) -> None:
        """
        Delete a listing and its images.

        Raises:
            PropertyNotFoundError: If property doesn't exist
            PropertyOwnershipError: If the broker doesn't own the property
        """
        await self._get_owned_property(property_id, broker_id)
        await self.store.delete(property_id)
        logger.info(f"Property deleted by broker {broker_id}: {property_id}")

    async def search_properties(
        self,
        filters: PropertySearchFilters,
        include_broker: bool = False
    ) -> Union[PaginatedResult[Property], PaginatedResult[PropertyWithBroker]]:
        """
        Search listings with filters and pagination.

        Args:
            filters: Search criteria and page
            include_broker: Join each listing with its broker's contact details

        Returns:
            One page of results
        """
        if include_broker:
            result = await self.store.search_with_broker(filters)
        else:
            result = await self.store.search(filters)

        logger.debug(
            f"Property search returned {len(result.items)} items "
            f"(page {result.page} of {result.total_pages})"
        )
        return result

    async def _get_owned_property(self, property_id: int, broker_id: int) -> Property:
        property_obj = await self.get_property(property_id)
        if property_obj.broker_id != broker_id:
            logger.warning(
                f"Broker {broker_id} attempted to modify property {property_id} "
                f"owned by broker {property_obj.broker_id}"
            )
            raise PropertyOwnershipError()
        return property_obj
