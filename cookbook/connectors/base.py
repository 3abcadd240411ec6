"""
Base connector abstract class for point-of-interest search providers.

All place search connectors must:
- Implement the provider attribute (e.g., "nominatim")
- Provide a search method that maps the provider's raw results into MapItem
- Raise PlaceSearchError (never a transport exception) when a query fails
"""

from abc import ABC, abstractmethod
from typing import List

from cookbook.models import MapItem, Region


class BasePlaceSearchConnector(ABC):
    """
    Abstract base class for all place search connectors.

    Attributes:
        provider: String identifier for the search provider (e.g., "nominatim")
    """
    provider: str

    @abstractmethod
    def search(self, query: str, region: Region, limit: int = 20) -> List[MapItem]:
        """
        Search for points of interest matching a natural-language query.

        Args:
            query: Free-text query (e.g., "Grocery Store")
            region: Region the results must fall inside
            limit: Maximum number of results

        Returns:
            List of MapItem objects in the provider's relevance order

        Raises:
            PlaceSearchError: If the provider cannot be reached or answers with garbage
        """
        pass

    def close(self) -> None:
        """Release any network resources held by the connector."""
        pass
