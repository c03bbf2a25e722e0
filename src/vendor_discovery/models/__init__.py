# models/__init__.py
from .filter_state import (
    FilterState,
    DiscoveryState,
    ListingRequest,
    ViewMode,
    SortSpec,
    ByField,
    Recommended,
)
from .vendor import VendorSummary, VendorRecord, Coordinates
from .listing import ListingResult, ListingOutcome, CatalogResponse, FetchError
from .saved_vendor import ToggleResponse, ToggleOutcome, Notification

__all__ = [
    'FilterState', 'DiscoveryState', 'ListingRequest', 'ViewMode',
    'SortSpec', 'ByField', 'Recommended',
    'VendorSummary', 'VendorRecord', 'Coordinates',
    'ListingResult', 'ListingOutcome', 'CatalogResponse', 'FetchError',
    'ToggleResponse', 'ToggleOutcome', 'Notification',
]
