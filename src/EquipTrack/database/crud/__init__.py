from .storage_crud import *

__all__ = [
    # Storage CRUD
    "get_item",
    "get_value",
    "set_value",
    "remove_item",
    "get_all_keys",
]
