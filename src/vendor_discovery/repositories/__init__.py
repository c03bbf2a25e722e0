# repositories/__init__.py
from .base import BaseRepository, RepositoryLockedError
from .vendor_repo import VendorRepository
from .saved_vendor_repo import SavedVendorRepository

__all__ = ['BaseRepository', 'RepositoryLockedError', 'VendorRepository', 'SavedVendorRepository']
