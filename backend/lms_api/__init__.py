# LMS REST client
# Transport, resource modules and result type used by the web layer.

from .client import LmsApi
from .envelope import coerce_item, coerce_list, coerce_records
from .fanout import gather_settled
from .result import ApiResult
from .transport import ApiTransport

__all__ = [
    "ApiResult",
    "ApiTransport",
    "LmsApi",
    "coerce_item",
    "coerce_list",
    "coerce_records",
    "gather_settled",
]
