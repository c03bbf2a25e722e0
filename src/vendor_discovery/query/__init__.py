"""
Пакет для работы с query-параметрами выдачи.

Публичное API:
- codec.encode / codec.decode
- codec.to_catalog_params
- codec.build_location
"""

from .codec import encode, decode, to_catalog_params, build_location

__all__ = ['encode', 'decode', 'to_catalog_params', 'build_location']
