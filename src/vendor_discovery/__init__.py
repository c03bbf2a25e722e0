"""
Vendor Discovery — каталог вендоров: фильтры в URL, выдача, карта, избранное.
"""
__version__ = "1.0.0"
