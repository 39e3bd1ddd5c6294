"""Interfaces of collaborators the host application provides."""
from typing import List, Optional, Protocol

from customs_engine.models.records import Item


class ProductDirectory(Protocol):
    """Protocol for a remote product catalog.

    Implementations raise ProductDirectoryError for failed lookups; a
    product that does not exist is None / an empty list, not an error.
    """

    async def lookup_by_id(self, product_id: str) -> Optional[Item]:
        """Fetch one product by its catalog id."""
        ...

    async def search_by_name(self, text: str) -> List[Item]:
        """Search products whose name resembles `text`."""
        ...
