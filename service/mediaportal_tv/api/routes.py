"""API routes for MediaPortal Live TV service."""

from datetime import datetime

from fastapi import APIRouter, Body, HTTPException, Request
from pydantic import BaseModel

from mediaportal_tv.livetv.errors import NotSupported
from mediaportal_tv.livetv.models import (
    ChannelInfo,
    LiveTvServiceStatusInfo,
    MediaSourceInfo,
    ProgramInfo,
    RecordingInfo,
    SeriesTimerInfo,
    TimerInfo,
)
from mediaportal_tv.livetv.service import MediaPortalTvService

router = APIRouter()


class ChangeStatus(BaseModel):
    """Last time timers or recordings were changed through this service."""

    last_recording_change: datetime


def _service(request: Request) -> MediaPortalTvService:
    return request.app.state.live_tv


def _supported(result):
    if isinstance(result, NotSupported):
        raise HTTPException(status_code=501, detail=result.message)
    return result


# General


@router.get("/status")
async def get_status(request: Request) -> LiveTvServiceStatusInfo:
    """Get backend status and tuner usage."""
    return await _service(request).get_status()


@router.post("/tuners/{tuner_id}/reset")
async def reset_tuner(tuner_id: str, request: Request):
    return _supported(await _service(request).reset_tuner(tuner_id))


@router.get("/changes")
async def get_changes(request: Request) -> ChangeStatus:
    """Get the last timer/recording change, used by the host to re-poll."""
    return ChangeStatus(last_recording_change=_service(request).last_recording_change)


# Channels and guide


@router.get("/channels")
async def get_channels(request: Request) -> list[ChannelInfo]:
    return await _service(request).get_channels()


@router.get("/channels/{channel_id}/image")
async def get_channel_image(channel_id: str, request: Request):
    return _supported(await _service(request).get_channel_image(channel_id))


@router.get("/channels/{channel_id}/programs")
async def get_programs(
    channel_id: str, start_date: datetime, end_date: datetime, request: Request
) -> list[ProgramInfo]:
    """Get guide data for a channel between two UTC times."""
    return await _service(request).get_programs(channel_id, start_date, end_date)


@router.get("/programs/{program_id}/image")
async def get_program_image(program_id: str, channel_id: str, request: Request):
    return _supported(await _service(request).get_program_image(program_id, channel_id))


# Recordings


@router.get("/recordings")
async def get_recordings(request: Request) -> list[RecordingInfo]:
    return await _service(request).get_recordings()


@router.get("/recordings/all")
async def get_all_recordings(request: Request) -> list[RecordingInfo]:
    """Get every recording on the TV server, when recording import is enabled."""
    return _supported(await _service(request).get_all_recordings())


@router.get("/recordings/{recording_id}/image")
async def get_recording_image(recording_id: str, request: Request):
    return _supported(await _service(request).get_recording_image(recording_id))


@router.get("/recordings/{recording_id}/stream")
async def get_recording_stream(recording_id: str, request: Request):
    return _supported(await _service(request).get_recording_stream(recording_id))


@router.get("/recordings/{recording_id}/media-sources")
async def get_recording_stream_media_sources(recording_id: str, request: Request):
    return _supported(await _service(request).get_recording_stream_media_sources(recording_id))


@router.delete("/recordings/{recording_id}")
async def delete_recording(recording_id: str, request: Request):
    await _service(request).delete_recording(recording_id)
    return {"status": "deleted", "recording_id": recording_id}


# Timers


@router.post("/timers/defaults")
async def get_new_timer_defaults(
    request: Request, program: ProgramInfo | None = Body(default=None)
) -> SeriesTimerInfo:
    """Get a template for a new timer, optionally seeded from a program."""
    return await _service(request).get_new_timer_defaults(program)


@router.get("/timers")
async def get_timers(request: Request) -> list[TimerInfo]:
    return await _service(request).get_timers()


@router.post("/timers")
async def create_timer(timer: TimerInfo, request: Request):
    await _service(request).create_timer(timer)
    return {"status": "created"}


@router.put("/timers/{timer_id}")
async def update_timer(timer_id: str, timer: TimerInfo, request: Request):
    await _service(request).update_timer(timer.model_copy(update={"id": timer_id}))
    return {"status": "updated", "timer_id": timer_id}


@router.delete("/timers/{timer_id}")
async def cancel_timer(timer_id: str, request: Request):
    await _service(request).cancel_timer(timer_id)
    return {"status": "cancelled", "timer_id": timer_id}


@router.get("/series-timers")
async def get_series_timers(request: Request) -> list[SeriesTimerInfo]:
    return await _service(request).get_series_timers()


@router.post("/series-timers")
async def create_series_timer(timer: SeriesTimerInfo, request: Request):
    await _service(request).create_series_timer(timer)
    return {"status": "created"}


@router.put("/series-timers/{timer_id}")
async def update_series_timer(timer_id: str, timer: SeriesTimerInfo, request: Request):
    await _service(request).update_series_timer(timer.model_copy(update={"id": timer_id}))
    return {"status": "updated", "timer_id": timer_id}


@router.delete("/series-timers/{timer_id}")
async def cancel_series_timer(timer_id: str, request: Request):
    await _service(request).cancel_series_timer(timer_id)
    return {"status": "cancelled", "timer_id": timer_id}


# Streaming


@router.post("/channels/{channel_id}/stream")
async def open_channel_stream(channel_id: str, request: Request) -> MediaSourceInfo:
    """Open a live stream; it replaces any stream opened before."""
    return await _service(request).open_channel_stream(channel_id)


@router.get("/channels/{channel_id}/media-sources")
async def get_channel_stream_media_sources(channel_id: str, request: Request):
    return _supported(await _service(request).get_channel_stream_media_sources(channel_id))


@router.post("/streams/{stream_id}/record")
async def record_live_stream(stream_id: str, request: Request):
    return _supported(await _service(request).record_live_stream(stream_id))


@router.delete("/streams/{stream_id}")
async def close_stream(stream_id: str, request: Request):
    await _service(request).close_stream(stream_id)
    return {"status": "closed", "stream_id": stream_id}
