from tenders_map.client.api import ApiError, BatchError, EntityCache, SessionExpired, TendersMapClient
from tenders_map.client.state import ViewState, reduce, visible

__all__ = [
    "ApiError", "BatchError", "EntityCache", "SessionExpired", "TendersMapClient",
    "ViewState", "reduce", "visible",
]
