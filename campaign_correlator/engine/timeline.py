"""Global timeline aggregation."""

from typing import List, Sequence

from campaign_correlator.models.campaign import Campaign
from campaign_correlator.models.correlation import TimelineEvent


def build_timeline(campaigns: Sequence[Campaign]) -> List[TimelineEvent]:
    """
    Flatten campaign timelines into one stream, newest first.

    Descriptions are prefixed with the owning campaign's name. Events are not
    deduplicated; ties keep campaign order.
    """
    events = [
        TimelineEvent(
            timestamp=event.timestamp,
            campaign_id=campaign.id,
            type=event.type,
            description=f"[{campaign.name}] {event.description}",
            severity=event.severity,
        )
        for campaign in campaigns
        for event in campaign.timeline
    ]
    events.sort(key=lambda e: e.timestamp, reverse=True)
    return events
