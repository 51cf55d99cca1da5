"""Data models shared by the host API and the MPExtended proxy."""

from datetime import datetime, timedelta
from enum import Enum, IntEnum

from pydantic import BaseModel, Field


class DayOfWeek(IntEnum):
    """Day of week, numbered the way the media server host numbers them."""

    SUNDAY = 0
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6

    @classmethod
    def from_datetime(cls, value: datetime) -> "DayOfWeek":
        # datetime.weekday() counts from Monday
        return cls((value.weekday() + 1) % 7)


WEEKEND = frozenset({DayOfWeek.SATURDAY, DayOfWeek.SUNDAY})
WORKING_DAYS = frozenset(DayOfWeek) - WEEKEND
ALL_DAYS = frozenset(DayOfWeek)


# Host side


class TunerStatus(str, Enum):
    AVAILABLE = "Available"
    LIVE_TV = "LiveTv"
    RECORDING_TV = "RecordingTv"


class ServiceStatus(str, Enum):
    OK = "Ok"
    UNAVAILABLE = "Unavailable"


class LiveTvTunerInfo(BaseModel):
    id: str
    name: str
    channel_id: str | None = None
    program_name: str | None = None
    source_type: str | None = None
    clients: list[str] = Field(default_factory=list)
    status: TunerStatus = TunerStatus.AVAILABLE


class LiveTvServiceStatusInfo(BaseModel):
    """Status report returned to the host."""

    status: ServiceStatus
    status_message: str
    has_update_available: bool = False
    tuners: list[LiveTvTunerInfo] = Field(default_factory=list)
    version: str


class ChannelInfo(BaseModel):
    id: str
    name: str
    number: str | None = None
    channel_type: str = "TV"
    has_image: bool = False


class ProgramInfo(BaseModel):
    id: str
    channel_id: str
    name: str
    overview: str | None = None
    start_date: datetime
    end_date: datetime
    genres: list[str] = Field(default_factory=list)
    episode_title: str | None = None
    is_series: bool = False


class RecordingInfo(BaseModel):
    id: str
    channel_id: str
    channel_name: str | None = None
    name: str
    overview: str | None = None
    start_date: datetime
    end_date: datetime
    path: str | None = None
    genres: list[str] = Field(default_factory=list)


class TimerInfo(BaseModel):
    """A single scheduled recording."""

    id: str | None = None
    series_timer_id: str | None = None
    channel_id: str
    program_id: str | None = None
    name: str = ""
    start_date: datetime
    end_date: datetime
    is_pre_padding_required: bool = False
    is_post_padding_required: bool = False
    pre_padding_seconds: int = 0
    post_padding_seconds: int = 0


class SeriesTimerInfo(BaseModel):
    """A recurring scheduled recording."""

    id: str | None = None
    channel_id: str | None = None
    program_id: str | None = None
    name: str = ""
    start_date: datetime | None = None
    end_date: datetime | None = None
    is_pre_padding_required: bool = False
    is_post_padding_required: bool = False
    pre_padding_seconds: int = 0
    post_padding_seconds: int = 0
    record_any_channel: bool = False
    record_any_time: bool = False
    record_new_only: bool = False
    skip_episodes_in_library: bool = False
    days: list[DayOfWeek] = Field(default_factory=list)


class MediaSourceInfo(BaseModel):
    id: str
    path: str
    protocol: str = "Http"
    container: str | None = None
    is_infinite_stream: bool = True
    supports_direct_play: bool = False
    supports_direct_stream: bool = True
    supports_transcoding: bool = True


# Proxy side


class CardType(IntEnum):
    ANALOG = 0
    DVB_S = 1
    DVB_T = 2
    DVB_C = 3
    ATSC = 4
    RADIO_WEB_STREAM = 5
    DVB_IP = 6
    UNKNOWN = 7

    @property
    def label(self) -> str:
        return _CARD_TYPE_LABELS[self]


_CARD_TYPE_LABELS = {
    CardType.ANALOG: "Analog",
    CardType.DVB_S: "DvbS",
    CardType.DVB_T: "DvbT",
    CardType.DVB_C: "DvbC",
    CardType.ATSC: "Atsc",
    CardType.RADIO_WEB_STREAM: "RadioWebStream",
    CardType.DVB_IP: "DvbIP",
    CardType.UNKNOWN: "Unknown",
}


class ScheduleType(IntEnum):
    ONCE = 0
    DAILY = 1
    WEEKLY = 2
    EVERY_TIME_ON_THIS_CHANNEL = 3
    EVERY_TIME_ON_EVERY_CHANNEL = 4
    WEEKENDS = 5
    WORKING_DAYS = 6
    WEEKLY_EVERY_TIME_ON_THIS_CHANNEL = 7


class ServiceDescription(BaseModel):
    service_version: str


class TunerCard(BaseModel):
    id: int
    name: str
    enabled: bool = True


class ActiveCardDetails(BaseModel):
    """A card currently in use, as reported by the TV server."""

    id: int
    channel_id: int
    is_tuner_locked: bool = False
    is_recording: bool = False
    user_name: str = ""
    card_type: CardType = CardType.UNKNOWN

    @property
    def tuner_status(self) -> TunerStatus:
        if self.is_recording:
            return TunerStatus.RECORDING_TV
        if self.is_tuner_locked:
            return TunerStatus.LIVE_TV
        return TunerStatus.AVAILABLE


class ScheduleDefaults(BaseModel):
    pre_record_interval: timedelta = timedelta(0)
    post_record_interval: timedelta = timedelta(0)


class Schedule(BaseModel):
    """A TV server schedule. Padding intervals are in minutes."""

    id: int | None = None
    channel_id: int
    title: str = ""
    start_time: datetime
    end_time: datetime
    schedule_type: ScheduleType = ScheduleType.ONCE
    pre_record_interval: int = 0
    post_record_interval: int = 0


class StreamingDetails(BaseModel):
    """An open live stream and the source handed to the host."""

    stream_identifier: str
    source_info: MediaSourceInfo
