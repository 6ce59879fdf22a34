"""
Events Endpoints - Refresh feed for admin views
"""
from fastapi import APIRouter, Query, status

from app.schemas import EventOut, EventFeed, DataResponse
from app.api.deps import event_bus

router = APIRouter()


@router.get(
    "",
    response_model=DataResponse[EventFeed],
    status_code=status.HTTP_200_OK
)
async def get_events(
    after: int = Query(0, ge=0, description="Return events with a sequence number above this")
):
    """
    Attendance mutations since a sequence number

    **Usage:**
    - Poll with the last_seq from the previous response
    - Re-query the affected view when events arrive
    - History is bounded and resets on restart; truncated is true when
      events after `after` are gone (dropped or lost on restart), so
      reload everything
    """
    events = event_bus.events_since(after)

    feed = EventFeed(
        events=[
            EventOut(seq=e.seq, type=e.type.value, payload=e.payload, occurred_at=e.occurred_at)
            for e in events
        ],
        last_seq=event_bus.last_seq,
        oldest_seq=event_bus.oldest_seq,
        truncated=event_bus.missed_since(after)
    )

    return DataResponse(
        success=True,
        message="Events retrieved successfully",
        data=feed
    )
