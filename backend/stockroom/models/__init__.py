from .tenancy import Organization, DEFAULT_LOW_STOCK_THRESHOLD
from .auth import User
from .inventory import Product
from .security import SecurityEvent

__all__ = [
    'Organization', 'DEFAULT_LOW_STOCK_THRESHOLD',
    'User',
    'Product',
    'SecurityEvent',
]
