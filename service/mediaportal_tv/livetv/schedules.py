"""Translation between host timers and TV server schedules."""

import logging
import math

from mediaportal_tv.livetv.models import (
    ALL_DAYS,
    WEEKEND,
    WORKING_DAYS,
    DayOfWeek,
    ProgramInfo,
    Schedule,
    ScheduleDefaults,
    ScheduleType,
    SeriesTimerInfo,
    TimerInfo,
)

logger = logging.getLogger(__name__)

_FIXED_DAY_TYPES = {
    ALL_DAYS: ScheduleType.DAILY,
    WEEKEND: ScheduleType.WEEKENDS,
    WORKING_DAYS: ScheduleType.WORKING_DAYS,
}


def _padding_minutes(required: bool, seconds: int) -> int:
    if not required or seconds <= 0:
        return 0
    return math.ceil(seconds / 60)


def _schedule_id(value: str | None) -> int | None:
    return int(value) if value else None


class ScheduleTranslator:
    """Maps TimerInfo / SeriesTimerInfo onto Schedule records and back."""

    def new_timer_defaults(
        self,
        defaults: ScheduleDefaults,
        program: ProgramInfo | None = None,
        skip_episodes_in_library: bool = False,
    ) -> SeriesTimerInfo:
        """Build the template the host shows when a new recording is set up.

        With a program, the recurrence is seeded with the program's local
        start day. Without one the day list is left empty for the caller.
        """
        days = []
        if program is not None:
            days.append(DayOfWeek.from_datetime(program.start_date.astimezone()))

        return SeriesTimerInfo(
            is_pre_padding_required=defaults.pre_record_interval.total_seconds() > 0,
            is_post_padding_required=defaults.post_record_interval.total_seconds() > 0,
            pre_padding_seconds=int(defaults.pre_record_interval.total_seconds()),
            post_padding_seconds=int(defaults.post_record_interval.total_seconds()),
            record_new_only=True,
            record_any_channel=False,
            record_any_time=True,
            days=days,
            skip_episodes_in_library=skip_episodes_in_library,
        )

    def timer_to_schedule(self, info: TimerInfo) -> Schedule:
        return Schedule(
            id=_schedule_id(info.id),
            channel_id=int(info.channel_id),
            title=info.name,
            start_time=info.start_date,
            end_time=info.end_date,
            schedule_type=ScheduleType.ONCE,
            pre_record_interval=_padding_minutes(info.is_pre_padding_required, info.pre_padding_seconds),
            post_record_interval=_padding_minutes(info.is_post_padding_required, info.post_padding_seconds),
        )

    def series_timer_to_schedule(self, info: SeriesTimerInfo) -> Schedule:
        if info.channel_id is None:
            raise ValueError("Series timer has no channel")
        if info.start_date is None or info.end_date is None:
            raise ValueError("Series timer has no start or end time")

        return Schedule(
            id=_schedule_id(info.id),
            channel_id=int(info.channel_id),
            title=info.name,
            start_time=info.start_date,
            end_time=info.end_date,
            schedule_type=self.schedule_type_for(info),
            pre_record_interval=_padding_minutes(info.is_pre_padding_required, info.pre_padding_seconds),
            post_record_interval=_padding_minutes(info.is_post_padding_required, info.post_padding_seconds),
        )

    def schedule_type_for(self, info: SeriesTimerInfo) -> ScheduleType:
        days = frozenset(info.days)

        if info.record_any_channel:
            return ScheduleType.EVERY_TIME_ON_EVERY_CHANNEL

        if info.record_any_time:
            if len(days) == 1:
                return ScheduleType.WEEKLY_EVERY_TIME_ON_THIS_CHANNEL
            return ScheduleType.EVERY_TIME_ON_THIS_CHANNEL

        if days in _FIXED_DAY_TYPES:
            return _FIXED_DAY_TYPES[days]
        if len(days) == 1:
            return ScheduleType.WEEKLY

        logger.debug("No schedule type matches days %s, recording daily", sorted(days))
        return ScheduleType.DAILY

    def schedule_to_timer(self, schedule: Schedule) -> TimerInfo:
        return TimerInfo(
            id=str(schedule.id),
            channel_id=str(schedule.channel_id),
            name=schedule.title,
            start_date=schedule.start_time,
            end_date=schedule.end_time,
            is_pre_padding_required=schedule.pre_record_interval > 0,
            is_post_padding_required=schedule.post_record_interval > 0,
            pre_padding_seconds=schedule.pre_record_interval * 60,
            post_padding_seconds=schedule.post_record_interval * 60,
        )

    def schedule_to_series_timer(self, schedule: Schedule) -> SeriesTimerInfo:
        kind = schedule.schedule_type
        start_day = DayOfWeek.from_datetime(schedule.start_time.astimezone())

        if kind in (ScheduleType.WEEKLY, ScheduleType.WEEKLY_EVERY_TIME_ON_THIS_CHANNEL):
            days = {start_day}
        elif kind == ScheduleType.WEEKENDS:
            days = WEEKEND
        elif kind == ScheduleType.WORKING_DAYS:
            days = WORKING_DAYS
        else:
            days = ALL_DAYS

        return SeriesTimerInfo(
            id=str(schedule.id),
            channel_id=str(schedule.channel_id),
            name=schedule.title,
            start_date=schedule.start_time,
            end_date=schedule.end_time,
            is_pre_padding_required=schedule.pre_record_interval > 0,
            is_post_padding_required=schedule.post_record_interval > 0,
            pre_padding_seconds=schedule.pre_record_interval * 60,
            post_padding_seconds=schedule.post_record_interval * 60,
            record_any_channel=kind == ScheduleType.EVERY_TIME_ON_EVERY_CHANNEL,
            record_any_time=kind in (
                ScheduleType.EVERY_TIME_ON_THIS_CHANNEL,
                ScheduleType.EVERY_TIME_ON_EVERY_CHANNEL,
                ScheduleType.WEEKLY_EVERY_TIME_ON_THIS_CHANNEL,
            ),
            days=sorted(days),
        )

    def split_schedules(self, schedules: list[Schedule]) -> tuple[list[TimerInfo], list[SeriesTimerInfo]]:
        """Separate one-off schedules from recurring ones."""
        timers = []
        series = []
        for schedule in schedules:
            if schedule.schedule_type == ScheduleType.ONCE:
                timers.append(self.schedule_to_timer(schedule))
            else:
                series.append(self.schedule_to_series_timer(schedule))
        return timers, series
