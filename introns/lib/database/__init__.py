from .Database import Database
from .Registry import Registry

__all__ = ["Database", "Registry"]
