from datetime import datetime, timedelta, timezone

from tvdispatch.domain.models import ConfigEntry, SettingType
from tvdispatch.services.heartbeat import HeartbeatRecorder, heartbeat_age


class SteppingClock:
    def __init__(self, *moments):
        self._moments = list(moments)

    def __call__(self):
        return self._moments.pop(0)


def _worker_rows(persistence):
    return [entry for entry in persistence.list_settings() if entry.type == SettingType.WORKER]


def test_init_creates_row_once(persistence):
    first = datetime(2024, 1, 1, tzinfo=timezone.utc)
    recorder = HeartbeatRecorder(persistence, clock=SteppingClock(first, first + timedelta(seconds=5)))

    recorder.init()
    recorder.init()

    rows = _worker_rows(persistence)
    assert len(rows) == 1
    assert rows[0].data == first.isoformat()


def test_touch_overwrites_timestamp(persistence):
    start = datetime(2024, 1, 1, tzinfo=timezone.utc)
    later = start + timedelta(minutes=1)
    recorder = HeartbeatRecorder(persistence, clock=SteppingClock(start, later))

    recorder.init()
    recorder.touch()

    assert persistence.find_setting(SettingType.WORKER).data == later.isoformat()


def test_touch_never_moves_backwards(persistence):
    start = datetime(2024, 1, 1, 12, tzinfo=timezone.utc)
    earlier = start - timedelta(seconds=30)
    recorder = HeartbeatRecorder(persistence, clock=SteppingClock(start, earlier))

    recorder.init()
    recorder.touch()

    assert persistence.find_setting(SettingType.WORKER).data == start.isoformat()
    assert recorder.last_beat == start


def test_touch_without_row_is_silent(persistence):
    recorder = HeartbeatRecorder(persistence)

    recorder.touch()

    assert _worker_rows(persistence) == []


def test_heartbeat_age():
    now = datetime(2024, 1, 1, 12, tzinfo=timezone.utc)
    entry = ConfigEntry(
        id=1,
        type=SettingType.WORKER,
        data=(now - timedelta(seconds=42)).isoformat(),
        enabled=True,
        created_at=now,
        updated_at=now,
    )

    assert heartbeat_age(entry, now) == 42.0
    assert heartbeat_age(None, now) is None
