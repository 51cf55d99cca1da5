"""Tests for mapping host timers onto TV server schedules."""

from datetime import datetime, timedelta, timezone

import pytest

from mediaportal_tv.livetv.models import (
    ALL_DAYS,
    WEEKEND,
    WORKING_DAYS,
    DayOfWeek,
    Schedule,
    ScheduleDefaults,
    ScheduleType,
    SeriesTimerInfo,
    TimerInfo,
)
from mediaportal_tv.livetv.schedules import ScheduleTranslator

START = datetime(2024, 3, 4, 20, 0, tzinfo=timezone.utc)
END = datetime(2024, 3, 4, 21, 0, tzinfo=timezone.utc)


@pytest.fixture
def translator():
    return ScheduleTranslator()


def series(days, **overrides) -> SeriesTimerInfo:
    values = {"channel_id": "5", "start_date": START, "end_date": END, "days": sorted(days)}
    values.update(overrides)
    return SeriesTimerInfo(**values)


class TestDayOfWeek:
    @pytest.mark.parametrize(
        "day, expected",
        [
            (datetime(2024, 3, 3), DayOfWeek.SUNDAY),
            (datetime(2024, 3, 4), DayOfWeek.MONDAY),
            (datetime(2024, 3, 9), DayOfWeek.SATURDAY),
        ],
    )
    def test_from_datetime(self, day, expected):
        assert DayOfWeek.from_datetime(day) == expected


class TestScheduleType:
    @pytest.mark.parametrize(
        "days, expected",
        [
            (ALL_DAYS, ScheduleType.DAILY),
            (WEEKEND, ScheduleType.WEEKENDS),
            (WORKING_DAYS, ScheduleType.WORKING_DAYS),
            ({DayOfWeek.TUESDAY}, ScheduleType.WEEKLY),
            ({DayOfWeek.TUESDAY, DayOfWeek.THURSDAY}, ScheduleType.DAILY),
        ],
    )
    def test_fixed_time(self, translator, days, expected):
        assert translator.schedule_type_for(series(days)) == expected

    def test_any_channel_wins(self, translator):
        info = series({DayOfWeek.MONDAY}, record_any_channel=True, record_any_time=True)

        assert translator.schedule_type_for(info) == ScheduleType.EVERY_TIME_ON_EVERY_CHANNEL

    def test_any_time_single_day(self, translator):
        info = series({DayOfWeek.MONDAY}, record_any_time=True)

        assert translator.schedule_type_for(info) == ScheduleType.WEEKLY_EVERY_TIME_ON_THIS_CHANNEL

    def test_any_time_every_day(self, translator):
        info = series(ALL_DAYS, record_any_time=True)

        assert translator.schedule_type_for(info) == ScheduleType.EVERY_TIME_ON_THIS_CHANNEL


class TestTimerToSchedule:
    def test_padding_rounds_up_to_minutes(self, translator):
        info = TimerInfo(
            id="9",
            channel_id="5",
            name="Film",
            start_date=START,
            end_date=END,
            is_pre_padding_required=True,
            pre_padding_seconds=90,
            is_post_padding_required=True,
            post_padding_seconds=600,
        )

        schedule = translator.timer_to_schedule(info)

        assert schedule.id == 9
        assert schedule.channel_id == 5
        assert schedule.schedule_type == ScheduleType.ONCE
        assert schedule.pre_record_interval == 2
        assert schedule.post_record_interval == 10

    def test_padding_ignored_when_not_required(self, translator):
        info = TimerInfo(
            channel_id="5",
            start_date=START,
            end_date=END,
            is_pre_padding_required=False,
            pre_padding_seconds=300,
        )

        schedule = translator.timer_to_schedule(info)

        assert schedule.id is None
        assert schedule.pre_record_interval == 0

    def test_series_without_channel_rejected(self, translator):
        with pytest.raises(ValueError):
            translator.series_timer_to_schedule(series(ALL_DAYS, channel_id=None))


class TestScheduleToTimers:
    def test_split_by_type(self, translator):
        schedules = [
            Schedule(id=1, channel_id=5, title="Film", start_time=START, end_time=END, pre_record_interval=3),
            Schedule(
                id=2,
                channel_id=5,
                title="Quiz",
                start_time=START,
                end_time=END,
                schedule_type=ScheduleType.WEEKENDS,
            ),
        ]

        timers, series_timers = translator.split_schedules(schedules)

        assert timers[0].id == "1"
        assert timers[0].is_pre_padding_required is True
        assert timers[0].pre_padding_seconds == 180
        assert timers[0].is_post_padding_required is False
        assert series_timers[0].id == "2"
        assert series_timers[0].days == [DayOfWeek.SUNDAY, DayOfWeek.SATURDAY]

    def test_weekly_uses_start_day(self, translator):
        schedule = Schedule(
            id=3,
            channel_id=5,
            start_time=START,
            end_time=END,
            schedule_type=ScheduleType.WEEKLY_EVERY_TIME_ON_THIS_CHANNEL,
        )

        info = translator.schedule_to_series_timer(schedule)

        assert info.days == [DayOfWeek.from_datetime(START.astimezone())]
        assert info.record_any_time is True
        assert info.record_any_channel is False

    def test_every_channel(self, translator):
        schedule = Schedule(
            id=4,
            channel_id=5,
            start_time=START,
            end_time=END,
            schedule_type=ScheduleType.EVERY_TIME_ON_EVERY_CHANNEL,
        )

        info = translator.schedule_to_series_timer(schedule)

        assert info.record_any_channel is True
        assert info.record_any_time is True
        assert info.days == sorted(ALL_DAYS)


def test_defaults_truncate_to_whole_seconds(translator):
    defaults = ScheduleDefaults(
        pre_record_interval=timedelta(seconds=90.7),
        post_record_interval=timedelta(0),
    )

    info = translator.new_timer_defaults(defaults)

    assert info.pre_padding_seconds == 90
    assert info.is_pre_padding_required is True
    assert info.is_post_padding_required is False
    assert info.days == []
