"""
Search predicate assembly for property queries.
Turns sparse PropertySearchFilters into one SQLAlchemy WHERE clause whose
values are all bound parameters.
"""

from typing import List, Tuple

from sqlalchemy import and_, true
from sqlalchemy.sql.elements import ColumnElement

from app.models.property import PropertyRecord
from app.schemas.property import PropertySearchFilters


def build_filter_conditions(filters: PropertySearchFilters) -> List[ColumnElement]:
    """
    Build one condition per filter that is present.

    Args:
        filters: PropertySearchFilters instance

    Returns:
        List of SQLAlchemy conditions, empty when no filter is set
    """
    conditions = []

    # Location filter (case-insensitive partial match, wildcards in the value are literal)
    if filters.location:
        conditions.append(PropertyRecord.location.icontains(filters.location, autoescape=True))

    # Price range filters (inclusive)
    if filters.min_price is not None:
        conditions.append(PropertyRecord.price >= filters.min_price)
    if filters.max_price is not None:
        conditions.append(PropertyRecord.price <= filters.max_price)

    # Property type filter (exact symbolic name)
    if filters.property_type:
        conditions.append(PropertyRecord.property_type == filters.property_type)

    return conditions


def build_search_predicate(filters: PropertySearchFilters) -> ColumnElement[bool]:
    """AND every present condition onto an always-true base."""
    return and_(true(), *build_filter_conditions(filters))


def page_window(page: int, page_size: int) -> Tuple[int, int]:
    """
    Inclusive 1-based row-number window for a page.

    Raises:
        ValueError: If page or page_size is below 1
    """
    if page < 1:
        raise ValueError(f"page must be at least 1, got {page}")
    if page_size < 1:
        raise ValueError(f"page_size must be at least 1, got {page_size}")
    start_index = (page - 1) * page_size + 1
    end_index = page * page_size
    return start_index, end_index
