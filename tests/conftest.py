"""Shared pytest fixtures for the live TV service tests."""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Ensure the service directory is importable without an install
SERVICE_PATH = Path(__file__).parent.parent / "service"
if str(SERVICE_PATH) not in sys.path:
    sys.path.insert(0, str(SERVICE_PATH))

from mediaportal_tv.config import EXPECTED_SERVICE_VERSION, Settings
from mediaportal_tv.livetv.errors import ProxyError
from mediaportal_tv.livetv.models import (
    ChannelInfo,
    MediaSourceInfo,
    RecordingInfo,
    ScheduleDefaults,
    ServiceDescription,
    StreamingDetails,
)
from mediaportal_tv.livetv.service import MediaPortalTvService


class FakeProxyClient:
    """In-memory ProxyClient that records every call."""

    def __init__(self):
        self.calls: list[tuple] = []
        self.failing: set[str] = set()
        self.service_version = EXPECTED_SERVICE_VERSION
        self.tuner_cards = []
        self.active_cards = []
        self.current_programs: dict[int, str] = {}
        self.channels = [ChannelInfo(id="1", name="BBC One")]
        self.programs = []
        self.recordings = [
            RecordingInfo(
                id="7",
                channel_id="1",
                name="News",
                start_date=datetime(2024, 1, 1, 18, tzinfo=timezone.utc),
                end_date=datetime(2024, 1, 1, 19, tzinfo=timezone.utc),
            )
        ]
        self.defaults = ScheduleDefaults(
            pre_record_interval=timedelta(minutes=5),
            post_record_interval=timedelta(minutes=10),
        )
        self.schedules = []
        self._stream_counter = 0

    @property
    def call_count(self) -> int:
        return len(self.calls)

    def called(self, method: str) -> list[tuple]:
        return [call for call in self.calls if call[0] == method]

    def _record(self, method: str, *args):
        self.calls.append((method, *args))
        if method in self.failing:
            raise ProxyError(f"{method} failed", method=method)

    async def get_streaming_status(self):
        self._record("get_streaming_status")
        return ServiceDescription(service_version=self.service_version)

    async def get_tv_status(self):
        self._record("get_tv_status")
        return ServiceDescription(service_version=self.service_version)

    async def get_active_cards(self):
        self._record("get_active_cards")
        return list(self.active_cards)

    async def get_tuner_cards(self):
        self._record("get_tuner_cards")
        return list(self.tuner_cards)

    async def get_current_program(self, channel_id):
        self._record("get_current_program", channel_id)
        return self.current_programs.get(channel_id)

    async def get_channels(self):
        self._record("get_channels")
        return list(self.channels)

    async def get_programs(self, channel_id, start_date, end_date):
        self._record("get_programs", channel_id, start_date, end_date)
        return list(self.programs)

    async def get_recordings(self):
        self._record("get_recordings")
        return list(self.recordings)

    async def delete_recording(self, recording_id):
        self._record("delete_recording", recording_id)
        return False

    async def get_schedule_defaults(self):
        self._record("get_schedule_defaults")
        return self.defaults

    async def get_schedules_from_memory(self):
        self._record("get_schedules_from_memory")
        return list(self.schedules)

    async def create_schedule(self, schedule):
        self._record("create_schedule", schedule)
        return True

    async def change_schedule(self, schedule):
        self._record("change_schedule", schedule)
        return True

    async def delete_schedule(self, schedule_id):
        self._record("delete_schedule", schedule_id)
        return True

    async def get_live_tv_stream(self, channel_id):
        self._record("get_live_tv_stream", channel_id)
        self._stream_counter += 1
        stream_id = f"stream-{self._stream_counter}"
        return StreamingDetails(
            stream_identifier=stream_id,
            source_info=MediaSourceInfo(id=stream_id, path=f"http://tv/{channel_id}/{stream_id}.ts"),
        )

    async def cancel_stream(self, stream_id):
        self._record("cancel_stream", stream_id)
        return True

    async def aclose(self):
        pass


@pytest.fixture
def settings():
    return Settings(api_host_name="mediaportal.local", api_port_number=4322)


@pytest.fixture
def proxy():
    return FakeProxyClient()


@pytest.fixture
def service(proxy, settings):
    return MediaPortalTvService(proxy=proxy, settings=settings)
