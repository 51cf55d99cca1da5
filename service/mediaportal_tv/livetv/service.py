"""Live TV service exposing MediaPortal through MPExtended."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from mediaportal_tv.config import EXPECTED_SERVICE_VERSION, PLUGIN_VERSION, Settings
from mediaportal_tv.livetv.changes import ChangeClock
from mediaportal_tv.livetv.errors import NotSupported, ProxyError
from mediaportal_tv.livetv.models import (
    ChannelInfo,
    LiveTvServiceStatusInfo,
    LiveTvTunerInfo,
    MediaSourceInfo,
    ProgramInfo,
    RecordingInfo,
    ServiceStatus,
    SeriesTimerInfo,
    TimerInfo,
)
from mediaportal_tv.livetv.schedules import ScheduleTranslator
from mediaportal_tv.livetv.streams import StreamSessionTracker
from mediaportal_tv.proxy.client import ProxyClient

logger = logging.getLogger(__name__)

UNREACHABLE_MESSAGE = "Unable to establish a connection with MPExtended - check your settings"


class StatusOutcome(str, Enum):
    OK = "ok"
    CONFIG_INVALID = "config_invalid"
    BACKEND_UNREACHABLE = "backend_unreachable"


@dataclass
class StatusCheck:
    """Result of a status check, with the cause kept for inspection."""

    outcome: StatusOutcome
    info: LiveTvServiceStatusInfo
    error: ProxyError | None = None


def _version_line(service_version: str) -> str:
    return f"MediaPortal Plugin: {PLUGIN_VERSION} - MPExtended Service: {service_version}"


class MediaPortalTvService:
    """Host-facing live TV service.

    Owns the open-stream tracker and the change clock; everything else is
    delegated to the proxy client.
    """

    name = "MPExtended (MediaPortal Live TV Service)"
    home_page_url = "https://github.com/puenktchen/MediaPortalTVPlugin"

    def __init__(
        self,
        proxy: ProxyClient,
        settings: Settings,
        streams: StreamSessionTracker | None = None,
        change_clock: ChangeClock | None = None,
        translator: ScheduleTranslator | None = None,
    ):
        self.proxy = proxy
        self.settings = settings
        self.streams = streams or StreamSessionTracker()
        self.change_clock = change_clock or ChangeClock()
        self.translator = translator or ScheduleTranslator()
        self._recording_status_listeners: list[Callable] = []
        self._data_source_listeners: list[Callable] = []

    @property
    def last_recording_change(self) -> datetime:
        return self.change_clock.last_change

    # Events

    def subscribe_recording_status_changed(self, callback: Callable):
        self._recording_status_listeners.append(callback)

    def subscribe_data_source_changed(self, callback: Callable):
        self._data_source_listeners.append(callback)

    # General

    async def check_status(self) -> StatusCheck:
        validation = self.settings.validate_connection()
        if not validation.is_valid:
            return StatusCheck(
                outcome=StatusOutcome.CONFIG_INVALID,
                info=LiveTvServiceStatusInfo(
                    status=ServiceStatus.UNAVAILABLE,
                    status_message=validation.summary,
                    has_update_available=False,
                    tuners=[],
                    version=_version_line("unavailable"),
                ),
            )

        try:
            # both services have to answer
            await self.proxy.get_streaming_status()
            description = await self.proxy.get_tv_status()

            active_cards = await self.proxy.get_active_cards()
            cards = [card for card in await self.proxy.get_tuner_cards() if card.enabled]

            tuners = []
            for card in cards:
                tuner = LiveTvTunerInfo(id=str(card.id), name=card.name)
                matches = [active for active in active_cards if active.id == card.id]
                if matches:
                    active = matches[-1]
                    tuner.channel_id = str(active.channel_id)
                    tuner.program_name = await self.proxy.get_current_program(active.channel_id)
                    tuner.source_type = active.card_type.label
                    tuner.clients = [active.user_name]
                    tuner.status = active.tuner_status
                tuners.append(tuner)

        except ProxyError as e:
            logger.exception("Exception occurred getting the MPExtended Service status")
            return StatusCheck(
                outcome=StatusOutcome.BACKEND_UNREACHABLE,
                info=LiveTvServiceStatusInfo(
                    status=ServiceStatus.UNAVAILABLE,
                    status_message=UNREACHABLE_MESSAGE,
                    has_update_available=False,
                    tuners=[],
                    version=PLUGIN_VERSION,
                ),
                error=e,
            )

        version = _version_line(description.service_version)
        return StatusCheck(
            outcome=StatusOutcome.OK,
            info=LiveTvServiceStatusInfo(
                status=ServiceStatus.OK,
                status_message=version,
                # plain string comparison, newer releases are flagged too
                has_update_available=description.service_version != EXPECTED_SERVICE_VERSION,
                tuners=tuners,
                version=version,
            ),
        )

    async def get_status(self) -> LiveTvServiceStatusInfo:
        return (await self.check_status()).info

    async def reset_tuner(self, tuner_id: str) -> NotSupported:
        return NotSupported("ResetTuner")

    # Channels

    async def get_channels(self) -> list[ChannelInfo]:
        return await self.proxy.get_channels()

    async def get_channel_image(self, channel_id: str) -> NotSupported:
        return NotSupported("GetChannelImage")

    async def get_programs(
        self, channel_id: str, start_date: datetime, end_date: datetime
    ) -> list[ProgramInfo]:
        return await self.proxy.get_programs(channel_id, start_date, end_date)

    async def get_program_image(self, program_id: str, channel_id: str) -> NotSupported:
        return NotSupported("GetProgramImage")

    # Recordings

    async def get_recordings(self) -> list[RecordingInfo]:
        return []

    async def get_all_recordings(self) -> list[RecordingInfo] | NotSupported:
        if not self.settings.enable_recording_import:
            return NotSupported("GetAllRecordings")
        return await self.proxy.get_recordings()

    async def get_recording_image(self, recording_id: str) -> NotSupported:
        return NotSupported("GetRecordingImage")

    async def delete_recording(self, recording_id: str):
        await self.proxy.delete_recording(recording_id)
        self.change_clock.touch()
        logger.info("Deleted recording %s", recording_id)

    # Timers

    async def get_new_timer_defaults(self, program: ProgramInfo | None = None) -> SeriesTimerInfo:
        defaults = await self.proxy.get_schedule_defaults()
        return self.translator.new_timer_defaults(
            defaults,
            program=program,
            skip_episodes_in_library=self.settings.skip_already_in_library,
        )

    async def get_timers(self) -> list[TimerInfo]:
        timers, _ = self.translator.split_schedules(await self.proxy.get_schedules_from_memory())
        return timers

    async def create_timer(self, info: TimerInfo):
        await self.proxy.create_schedule(self.translator.timer_to_schedule(info))
        self.change_clock.touch()
        logger.info("Created timer for channel %s at %s", info.channel_id, info.start_date)

    async def update_timer(self, info: TimerInfo):
        await self.proxy.change_schedule(self.translator.timer_to_schedule(info))
        self.change_clock.touch()
        logger.info("Updated timer %s", info.id)

    async def cancel_timer(self, timer_id: str):
        await self.proxy.delete_schedule(timer_id)
        self.change_clock.touch()
        logger.info("Cancelled timer %s", timer_id)

    async def get_series_timers(self) -> list[SeriesTimerInfo]:
        _, series = self.translator.split_schedules(await self.proxy.get_schedules_from_memory())
        return series

    # Series changes leave the change clock alone.

    async def create_series_timer(self, info: SeriesTimerInfo):
        await self.proxy.create_schedule(self.translator.series_timer_to_schedule(info))
        logger.info("Created series timer for channel %s", info.channel_id)

    async def update_series_timer(self, info: SeriesTimerInfo):
        await self.proxy.change_schedule(self.translator.series_timer_to_schedule(info))
        logger.info("Updated series timer %s", info.id)

    async def cancel_series_timer(self, timer_id: str):
        await self.proxy.delete_schedule(timer_id)
        logger.info("Cancelled series timer %s", timer_id)

    # Streaming

    async def open_channel_stream(self, channel_id: str) -> MediaSourceInfo:
        details = await self.proxy.get_live_tv_stream(channel_id)
        return await self.streams.track(details)

    async def get_channel_stream_media_sources(self, channel_id: str) -> NotSupported:
        return NotSupported("GetChannelStreamMediaSources")

    async def get_recording_stream(self, recording_id: str) -> NotSupported:
        return NotSupported("GetRecordingStream")

    async def get_recording_stream_media_sources(self, recording_id: str) -> NotSupported:
        return NotSupported("GetRecordingStreamMediaSources")

    async def record_live_stream(self, stream_id: str) -> NotSupported:
        return NotSupported("RecordLiveStream")

    async def close_stream(self, stream_id: str):
        await self.streams.close(stream_id, self.proxy.cancel_stream)
