"""
Common Response Schemas
"""
from atams.schemas import DataResponse, PaginationResponse, ResponseBase, ErrorResponse

__all__ = [
    "ResponseBase",
    "DataResponse",
    "PaginationResponse",
    "ErrorResponse",
]
