# Utilities package
from .pagination import calculate_offset, calculate_total_pages, PaginationParams, PaginationMeta
from .status import can_transition, is_terminal, to_status
from .sorting import parse_sort

__all__ = [
    "calculate_offset",
    "calculate_total_pages",
    "PaginationParams",
    "PaginationMeta",
    "can_transition",
    "is_terminal",
    "to_status",
    "parse_sort",
]
