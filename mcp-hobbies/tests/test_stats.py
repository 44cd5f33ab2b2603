from datetime import datetime, timezone

import state
from stats import activity_series, compute_aggregate_stats, history


def test_empty_collection():
    stats = compute_aggregate_stats([])
    assert stats.total_logs == 0
    assert stats.total_hours == 0


def test_totals(make_hobby):
    hobbies = [
        make_hobby(days_ago=[1, 2], duration_minutes=45),
        make_hobby(days_ago=[3], duration_minutes=30),
        make_hobby(),
    ]
    stats = compute_aggregate_stats(hobbies)
    assert stats.total_logs == 3
    assert stats.total_hours == 2.0


def test_order_does_not_matter(make_hobby):
    hobbies = [
        make_hobby(days_ago=[1], duration_minutes=17),
        make_hobby(days_ago=[2, 3], duration_minutes=41),
        make_hobby(days_ago=[4], duration_minutes=7),
    ]
    assert compute_aggregate_stats(hobbies) == compute_aggregate_stats(list(reversed(hobbies)))


def test_deleting_a_log_drops_total_by_one(make_hobby):
    guitar = make_hobby(days_ago=[1, 2, 3])
    running = make_hobby(days_ago=[1, 4], name="Running")
    hobbies = [guitar, running]
    target = guitar.logs[1]

    after = state.delete_log(hobbies, guitar.id, target.id)

    assert compute_aggregate_stats(after).total_logs == compute_aggregate_stats(hobbies).total_logs - 1
    assert [l.id for l in after[0].logs] == [guitar.logs[0].id, guitar.logs[2].id]
    assert after[1] == running


def test_history_is_newest_first(make_hobby):
    hobby = make_hobby(days_ago=[5, 1, 3])
    assert [l.date.day for l in history(hobby.logs)] == [4, 2, 28]


def test_activity_series_is_oldest_first(make_log):
    logs = [
        make_log(datetime(2025, 3, 5, 9, tzinfo=timezone.utc), duration_minutes=20, rating=4),
        make_log(datetime(2025, 2, 28, 9, tzinfo=timezone.utc), duration_minutes=60, rating=2),
    ]
    assert activity_series(logs) == [
        {"date": "Feb 28", "minutes": 60, "rating": 2},
        {"date": "Mar 5", "minutes": 20, "rating": 4},
    ]
