import datetime

from services.stats_service import CSV_HEADER, StatsService

USER_ID = 31


def _days(today, n):
    return today - datetime.timedelta(days=n)


def test_snapshot_upsert_is_idempotent(store, today):
    first = StatsService.record_snapshot(store, USER_ID, 45, (7,), 2, today)
    second = StatsService.record_snapshot(store, USER_ID, 45, (7,), 2, today)
    assert first == second
    stats = store.list_stats(USER_ID)
    assert stats == [first]
    assert first.base_section_count == 2
    assert first.total_section_count == 3
    assert first.pages_repeated == 40


def test_daily_progress_is_measured_against_yesterday(store, today):
    StatsService.record_snapshot(store, USER_ID, 30, (), 1, _days(today, 1))
    stat = StatsService.record_snapshot(store, USER_ID, 34, (), 1, today)
    assert stat.daily_progress_pages == 4


def test_daily_progress_never_goes_negative(store, today):
    StatsService.record_snapshot(store, USER_ID, 30, (), 1, _days(today, 1))
    stat = StatsService.record_snapshot(store, USER_ID, 20, (), 1, today)
    assert stat.daily_progress_pages == 0


def test_first_snapshot_counts_all_pages_as_progress(store, today):
    stat = StatsService.record_snapshot(store, USER_ID, 12, (), 1, today)
    assert stat.daily_progress_pages == 12


def test_weekly_summary_covers_last_seven_days(store, today):
    StatsService.record_snapshot(store, USER_ID, 5, (), 1, _days(today, 7))
    StatsService.record_snapshot(store, USER_ID, 10, (), 1, _days(today, 6))
    StatsService.record_snapshot(store, USER_ID, 12, (), 2, _days(today, 5))
    StatsService.record_snapshot(store, USER_ID, 15, (), 1, today)

    week = StatsService.weekly_summary(store, USER_ID, today)
    assert [d.stat_date for d in week.days] == [_days(today, 6), _days(today, 5), today]
    assert week.new_pages == 5 + 2 + 15
    assert week.pages_repeated == 20 + 40 + 20
    assert week.average_repeated == 27


def test_export_csv(store, today):
    assert StatsService.export_csv(store, USER_ID) == ""
    StatsService.record_snapshot(store, USER_ID, 21, (3,), 1, today)

    lines = StatsService.export_csv(store, USER_ID).splitlines()
    assert lines[0] == ",".join(CSV_HEADER)
    assert lines[1] == f"{today.strftime('%d.%m.%Y')},21,1,21,2,1,20"
