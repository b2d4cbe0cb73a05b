from .loader import ApiSnapshot, element_from_dict, load_snapshot, snapshot_from_data
from .filters import ElementFilter


__all__ = [
    "ApiSnapshot",
    "element_from_dict",
    "load_snapshot",
    "snapshot_from_data",
    "ElementFilter",
]
