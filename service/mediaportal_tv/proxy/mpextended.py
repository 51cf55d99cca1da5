"""MPExtended JSON client for the TV access and streaming services."""

import asyncio
import logging
import re
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

import httpx
from pydantic import ValidationError

from mediaportal_tv.config import Settings
from mediaportal_tv.livetv.errors import ProxyError
from mediaportal_tv.livetv.models import (
    ActiveCardDetails,
    CardType,
    ChannelInfo,
    MediaSourceInfo,
    ProgramInfo,
    RecordingInfo,
    Schedule,
    ScheduleDefaults,
    ScheduleType,
    ServiceDescription,
    StreamingDetails,
    TunerCard,
)

logger = logging.getLogger(__name__)

TV_SERVICE = "TVAccessService"
STREAMING_SERVICE = "StreamingService"

# WebMediaType.TV in the streaming service
MEDIA_TYPE_TV = 12

CLIENT_DESCRIPTION = "MediaPortal Live TV Service"

_WCF_DATE = re.compile(r"/Date\((-?\d+)([+-]\d{4})?\)/")


def parse_wcf_date(value: str) -> datetime:
    """Parse a WCF JSON date such as /Date(1389348000000+0100)/ to UTC.

    The millisecond count is already UTC; the offset only says where the
    server lives.
    """
    match = _WCF_DATE.fullmatch(value or "")
    if not match:
        raise ProxyError(f"Unrecognised date value: {value!r}")
    return datetime.fromtimestamp(int(match.group(1)) / 1000, tz=timezone.utc)


def format_query_date(value: datetime) -> str:
    return value.astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _service_description(data: dict) -> ServiceDescription:
    return ServiceDescription(service_version=data.get("ServiceVersion", ""))


def _tuner_card(data: dict) -> TunerCard:
    return TunerCard(id=data["Id"], name=data.get("Name", ""), enabled=data.get("Enabled", False))


def _active_card(data: dict) -> ActiveCardDetails:
    try:
        card_type = CardType(data.get("Type", CardType.UNKNOWN))
    except ValueError:
        card_type = CardType.UNKNOWN
    user = data.get("User") or {}
    return ActiveCardDetails(
        id=data["Id"],
        channel_id=data.get("ChannelId", 0),
        is_tuner_locked=data.get("IsTunerLocked", False),
        is_recording=data.get("IsRecording", False),
        user_name=user.get("Name", ""),
        card_type=card_type,
    )


def _channel(data: dict) -> ChannelInfo:
    return ChannelInfo(
        id=str(data["Id"]),
        name=data.get("Title", ""),
        channel_type="Radio" if data.get("IsRadio") else "TV",
    )


def _genres(data: dict) -> list[str]:
    genre = data.get("Genre")
    return [genre] if genre else []


def _program(data: dict) -> ProgramInfo:
    return ProgramInfo(
        id=str(data["Id"]),
        channel_id=str(data["ChannelId"]),
        name=data.get("Title", ""),
        overview=data.get("Description"),
        start_date=parse_wcf_date(data["StartTime"]),
        end_date=parse_wcf_date(data["EndTime"]),
        genres=_genres(data),
        episode_title=data.get("EpisodeName") or None,
        is_series=bool(data.get("SeriesNum")),
    )


def _recording(data: dict) -> RecordingInfo:
    return RecordingInfo(
        id=str(data["Id"]),
        channel_id=str(data["ChannelId"]),
        channel_name=data.get("ChannelName"),
        name=data.get("Title", ""),
        overview=data.get("Description"),
        start_date=parse_wcf_date(data["StartTime"]),
        end_date=parse_wcf_date(data["EndTime"]),
        path=data.get("FileName"),
        genres=_genres(data),
    )


def _schedule(data: dict) -> Schedule:
    try:
        schedule_type = ScheduleType(data.get("ScheduleType", ScheduleType.ONCE))
    except ValueError as e:
        raise ProxyError(f"Unknown schedule type on schedule {data.get('Id')}") from e

    return Schedule(
        id=data["Id"],
        channel_id=data["ChannelId"],
        title=data.get("Title", ""),
        start_time=parse_wcf_date(data["StartTime"]),
        end_time=parse_wcf_date(data["EndTime"]),
        schedule_type=schedule_type,
        pre_record_interval=data.get("PreRecordInterval", 0),
        post_record_interval=data.get("PostRecordInterval", 0),
    )


def _mapped(service: str, method: str, mapper, data: Any):
    """Map one decoded record, treating a malformed one as a proxy failure."""
    try:
        return mapper(data)
    except (KeyError, TypeError, AttributeError, ValidationError) as e:
        raise ProxyError(f"{service}/{method} returned an unexpected record: {e}", method=method) from e


class MPExtendedClient:
    """ProxyClient implementation talking to MPExtended over HTTP."""

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None):
        auth = None
        if settings.requires_authentication:
            auth = httpx.BasicAuth(settings.user_name, settings.password)

        self.settings = settings
        self._client = httpx.AsyncClient(
            base_url=settings.base_url,
            auth=auth,
            timeout=settings.request_timeout,
            transport=transport,
        )
        self._schedules: list[Schedule] | None = None
        self._schedules_lock = asyncio.Lock()

    async def aclose(self):
        await self._client.aclose()

    async def _request(self, service: str, method: str, **params) -> Any:
        """Call one JSON endpoint and return the decoded body."""
        query = {key: value for key, value in params.items() if value is not None}
        logger.debug("MPExtended %s/%s %s", service, method, query)

        try:
            response = await self._client.get(f"{service}/json/{method}", params=query)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPError as e:
            raise ProxyError(f"{service}/{method} failed: {e}", method=method) from e
        except ValueError as e:
            raise ProxyError(f"{service}/{method} returned invalid JSON", method=method) from e

    async def _result(self, service: str, method: str, **params) -> Any:
        body = await self._request(service, method, **params)
        if not isinstance(body, dict) or "Result" not in body:
            raise ProxyError(f"{service}/{method} returned no result", method=method)
        return body["Result"]

    async def _bool_result(self, service: str, method: str, **params) -> bool:
        result = bool(await self._result(service, method, **params))
        if not result:
            logger.warning("MPExtended %s/%s reported failure", service, method)
        return result

    async def _object(self, service: str, method: str, mapper, **params):
        body = await self._request(service, method, **params)
        if not isinstance(body, dict):
            raise ProxyError(f"{service}/{method} did not return an object", method=method)
        return _mapped(service, method, mapper, body)

    async def _list(self, service: str, method: str, mapper, **params) -> list:
        body = await self._request(service, method, **params)
        if body is None:
            return []
        if not isinstance(body, list):
            raise ProxyError(f"{service}/{method} did not return a list", method=method)
        return [_mapped(service, method, mapper, item) for item in body]

    # Status

    async def get_streaming_status(self) -> ServiceDescription:
        return await self._object(STREAMING_SERVICE, "GetServiceDescription", _service_description)

    async def get_tv_status(self) -> ServiceDescription:
        return await self._object(TV_SERVICE, "GetServiceDescription", _service_description)

    async def get_active_cards(self) -> list[ActiveCardDetails]:
        return await self._list(TV_SERVICE, "GetActiveCards", _active_card)

    async def get_tuner_cards(self) -> list[TunerCard]:
        return await self._list(TV_SERVICE, "GetCards", _tuner_card)

    async def get_current_program(self, channel_id: int) -> str | None:
        program = await self._request(TV_SERVICE, "GetCurrentProgramOnChannel", channelId=channel_id)
        if not program:
            return None
        if not isinstance(program, dict):
            raise ProxyError(
                "GetCurrentProgramOnChannel did not return an object", method="GetCurrentProgramOnChannel"
            )
        return program.get("Title")

    # Guide

    async def get_channels(self) -> list[ChannelInfo]:
        return await self._list(
            TV_SERVICE, "GetChannelsDetailed", _channel, groupId=self.settings.default_channel_group
        )

    async def get_programs(
        self, channel_id: str, start_date: datetime, end_date: datetime
    ) -> list[ProgramInfo]:
        return await self._list(
            TV_SERVICE,
            "GetProgramsDetailedForChannel",
            _program,
            channelId=channel_id,
            startTime=format_query_date(start_date),
            endTime=format_query_date(end_date),
        )

    # Recordings

    async def get_recordings(self) -> list[RecordingInfo]:
        return await self._list(TV_SERVICE, "GetRecordings", _recording)

    async def delete_recording(self, recording_id: str) -> bool:
        return await self._bool_result(TV_SERVICE, "DeleteRecording", id=recording_id)

    # Schedules

    async def _read_minutes(self, tag_name: str) -> timedelta:
        value = await self._result(TV_SERVICE, "ReadSettingFromDatabase", tagName=tag_name)
        try:
            return timedelta(minutes=int(value or 0))
        except ValueError as e:
            raise ProxyError(f"Setting {tag_name} is not a number: {value!r}") from e

    async def get_schedule_defaults(self) -> ScheduleDefaults:
        return ScheduleDefaults(
            pre_record_interval=await self._read_minutes("preRecordInterval"),
            post_record_interval=await self._read_minutes("postRecordInterval"),
        )

    async def refresh_schedules(self) -> list[Schedule]:
        schedules = await self._list(TV_SERVICE, "GetSchedules", _schedule)
        async with self._schedules_lock:
            self._schedules = schedules
        logger.debug("Loaded %d schedules", len(schedules))
        return schedules

    async def _refresh_after_write(self):
        """Reload the schedule view; on failure drop it so the next read reloads."""
        try:
            await self.refresh_schedules()
        except ProxyError as e:
            logger.warning("Could not reload schedules after a change: %s", e)
            async with self._schedules_lock:
                self._schedules = None

    async def get_schedules_from_memory(self) -> list[Schedule]:
        async with self._schedules_lock:
            schedules = self._schedules
        if schedules is None:
            schedules = await self.refresh_schedules()
        return list(schedules)

    def _schedule_params(self, schedule: Schedule) -> dict:
        return {
            "channelId": schedule.channel_id,
            "title": schedule.title,
            "startTime": format_query_date(schedule.start_time),
            "endTime": format_query_date(schedule.end_time),
            "scheduleType": int(schedule.schedule_type),
            "preRecordInterval": schedule.pre_record_interval,
            "postRecordInterval": schedule.post_record_interval,
        }

    async def create_schedule(self, schedule: Schedule) -> bool:
        result = await self._bool_result(TV_SERVICE, "AddScheduleDetailed", **self._schedule_params(schedule))
        await self._refresh_after_write()
        return result

    async def change_schedule(self, schedule: Schedule) -> bool:
        result = await self._bool_result(
            TV_SERVICE, "EditSchedule", scheduleId=schedule.id, **self._schedule_params(schedule)
        )
        await self._refresh_after_write()
        return result

    async def delete_schedule(self, schedule_id: str) -> bool:
        result = await self._bool_result(TV_SERVICE, "DeleteSchedule", scheduleId=schedule_id)
        await self._refresh_after_write()
        return result

    # Streaming

    async def get_live_tv_stream(self, channel_id: str) -> StreamingDetails:
        identifier = uuid.uuid4().hex

        initialised = await self._result(
            STREAMING_SERVICE,
            "InitStream",
            type=MEDIA_TYPE_TV,
            provider=0,
            itemId=channel_id,
            identifier=identifier,
            clientDescription=CLIENT_DESCRIPTION,
            idleTimeout=self.settings.stream_idle_timeout,
        )
        if not initialised:
            raise ProxyError(f"Could not initialise stream for channel {channel_id}", method="InitStream")

        url = await self._result(
            STREAMING_SERVICE,
            "StartStream",
            identifier=identifier,
            profileName=self.settings.streaming_profile,
            startPosition=0,
        )
        if not url:
            raise ProxyError(f"Could not start stream for channel {channel_id}", method="StartStream")

        logger.info("Started stream %s for channel %s", identifier, channel_id)
        return StreamingDetails(
            stream_identifier=identifier,
            source_info=MediaSourceInfo(id=identifier, path=url, container="ts"),
        )

    async def cancel_stream(self, stream_id: str) -> bool:
        return await self._bool_result(STREAMING_SERVICE, "FinishStream", identifier=stream_id)
