"""Capabilities the live TV service needs from the MediaPortal proxy."""

from datetime import datetime
from typing import Protocol

from mediaportal_tv.livetv.models import (
    ActiveCardDetails,
    ChannelInfo,
    ProgramInfo,
    RecordingInfo,
    Schedule,
    ScheduleDefaults,
    ServiceDescription,
    StreamingDetails,
    TunerCard,
)


class ProxyClient(Protocol):
    """Async access to the TV server and streaming service.

    Every method raises ProxyError when the backend cannot be reached or
    answers with something unreadable. An empty answer is an empty result.
    """

    async def get_streaming_status(self) -> ServiceDescription: ...

    async def get_tv_status(self) -> ServiceDescription: ...

    async def get_active_cards(self) -> list[ActiveCardDetails]: ...

    async def get_tuner_cards(self) -> list[TunerCard]: ...

    async def get_current_program(self, channel_id: int) -> str | None: ...

    async def get_channels(self) -> list[ChannelInfo]: ...

    async def get_programs(
        self, channel_id: str, start_date: datetime, end_date: datetime
    ) -> list[ProgramInfo]: ...

    async def get_recordings(self) -> list[RecordingInfo]: ...

    async def delete_recording(self, recording_id: str) -> bool: ...

    async def get_schedule_defaults(self) -> ScheduleDefaults: ...

    async def get_schedules_from_memory(self) -> list[Schedule]: ...

    async def create_schedule(self, schedule: Schedule) -> bool: ...

    async def change_schedule(self, schedule: Schedule) -> bool: ...

    async def delete_schedule(self, schedule_id: str) -> bool: ...

    async def get_live_tv_stream(self, channel_id: str) -> StreamingDetails: ...

    async def cancel_stream(self, stream_id: str) -> bool: ...

    async def aclose(self) -> None: ...
