# services/__init__.py
from .database_service import DatabaseService
from .catalog_service import CatalogQuery, LocalCatalog, HttpCatalogClient
from .listing_fetcher import ListingFetcher
from .navigation import Location, Navigator
from .filter_composer import FilterComposer
from .view_service import ViewRenderer
from .saved_vendor_service import (
    SavedVendorStore,
    LocalSavedVendorStore,
    HttpSavedVendorStore,
    SavedVendorSet,
    SaveToggleController,
)
from .share_service import ShareService
from .sync_service import HoverSignal, HoverChannel, ChannelRegistry, SyncService

__all__ = [
    'DatabaseService',
    'CatalogQuery',
    'LocalCatalog',
    'HttpCatalogClient',
    'ListingFetcher',
    'Location',
    'Navigator',
    'FilterComposer',
    'ViewRenderer',
    'SavedVendorStore',
    'LocalSavedVendorStore',
    'HttpSavedVendorStore',
    'SavedVendorSet',
    'SaveToggleController',
    'ShareService',
    'HoverSignal',
    'HoverChannel',
    'ChannelRegistry',
    'SyncService',
]
