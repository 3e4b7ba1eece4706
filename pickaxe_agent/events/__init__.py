from .event_bus import EventBus as EventBus
from .job_event_channel import JobEventChannel as JobEventChannel
