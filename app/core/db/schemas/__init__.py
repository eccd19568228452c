# Import models so Base metadata is aware of them
from .storage import StorageSlot  # noqa: F401
