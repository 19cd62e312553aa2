"""
tests/unit/test_log_storage.py

판매 기록 저장소 테스트

- 한 기록 = 한 줄 (sales_YYYY-MM-DD.jsonl)
- fsync 정책: batch / critical, close 시 남은 기록 fsync
- 잘린 마지막 줄 제거, 중간 깨진 줄 스킵
- 날짜 변경 시 파일 교체
"""

import json
from datetime import datetime, timezone

import pytest

import infrastructure.storage.log_storage as log_storage_module
from infrastructure.storage.log_storage import LogStorage


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def fsync_calls(monkeypatch):
    """os.fsync 호출 기록 (fd 리스트)"""
    calls = []
    real_fsync = log_storage_module.os.fsync

    def recording_fsync(fd):
        calls.append(fd)
        real_fsync(fd)

    monkeypatch.setattr(log_storage_module.os, "fsync", recording_fsync)
    return calls


def test_each_record_is_one_line_in_daily_file(tmp_path, clock):
    storage = LogStorage(log_dir=tmp_path, clock=clock)

    storage.append_sales_log({"event": "DISPENSE", "code": 102})
    storage.append_sales_log({"event": "REFUND", "paid": 5})
    storage.close()

    path = tmp_path / "sales_2026-03-01.jsonl"
    assert storage.current_path == path
    assert [json.loads(line)["event"] for line in path.read_text().splitlines()] == [
        "DISPENSE",
        "REFUND",
    ]


def test_nothing_is_created_before_first_record(tmp_path):
    storage = LogStorage(log_dir=tmp_path / "sales")

    assert (tmp_path / "sales").is_dir()
    assert list((tmp_path / "sales").iterdir()) == []
    assert storage.current_path is None
    assert storage.read_sales_logs() == []
    assert storage.read_sales_logs("2026-01-01") == []


def test_batch_policy_syncs_every_n_records(tmp_path, clock, fsync_calls):
    storage = LogStorage(log_dir=tmp_path, fsync_batch_size=3, clock=clock)

    for i in range(7):
        storage.append_sales_log({"i": i})

    assert len(fsync_calls) == 2
    assert storage.unsynced_count == 1

    storage.close()

    assert len(fsync_calls) == 3
    assert storage.unsynced_count == 0


def test_critical_policy_syncs_every_record(tmp_path, clock, fsync_calls):
    storage = LogStorage(log_dir=tmp_path, fsync_policy="critical", clock=clock)

    storage.append_sales_log({"i": 0})
    storage.append_sales_log({"i": 1})

    assert len(fsync_calls) == 2
    storage.close()
    assert len(fsync_calls) == 2


def test_critical_record_syncs_under_batch_policy(tmp_path, clock, fsync_calls):
    storage = LogStorage(log_dir=tmp_path, fsync_batch_size=100, clock=clock)

    storage.append_sales_log({"i": 0}, is_critical=True)

    assert len(fsync_calls) == 1
    storage.close()


@pytest.mark.parametrize("kwargs", [{"fsync_policy": "periodic"}, {"fsync_batch_size": 0}])
def test_invalid_fsync_settings_raise(tmp_path, kwargs):
    with pytest.raises(ValueError):
        LogStorage(log_dir=tmp_path, **kwargs)


def test_close_is_idempotent_and_append_reopens(tmp_path, clock):
    storage = LogStorage(log_dir=tmp_path, clock=clock)
    storage.append_sales_log({"i": 0})

    storage.close()
    storage.close()
    assert storage.closed

    storage.append_sales_log({"i": 1})
    assert not storage.closed
    storage.close()

    assert storage.read_sales_logs("2026-03-01") == [{"i": 0}, {"i": 1}]


def test_truncated_last_line_is_removed(tmp_path, clock):
    """
    Given: 2건 기록 후 쓰기 도중 중단된 줄
    Then: 2건만 반환, 파일에서도 잘린 부분 제거 → 다음 기록은 새 줄에서 시작
    """
    storage = LogStorage(log_dir=tmp_path, clock=clock)
    storage.append_sales_log({"i": 0})
    storage.append_sales_log({"i": 1})
    path = storage.current_path
    with open(path, "a") as f:
        f.write('{"event": "DISP')

    assert storage.read_sales_logs("2026-03-01") == [{"i": 0}, {"i": 1}]
    assert path.read_text().endswith('{"i": 1}\n')

    storage.append_sales_log({"i": 2})
    storage.close()
    assert storage.read_sales_logs() == [{"i": 0}, {"i": 1}, {"i": 2}]


def test_corrupt_middle_line_is_skipped(tmp_path):
    storage = LogStorage(log_dir=tmp_path)
    path = storage.path_for("2026-03-01")
    path.write_text('{"i": 0}\nnot json\n{"i": 2}\n')

    assert storage.read_sales_logs("2026-03-01") == [{"i": 0}, {"i": 2}]
    assert path.read_text().count("\n") == 3


def test_new_utc_day_switches_file(tmp_path, clock):
    storage = LogStorage(log_dir=tmp_path, clock=clock)
    storage.append_sales_log({"day": 1})

    clock.now = datetime(2026, 3, 2, 0, 0, 1, tzinfo=timezone.utc)
    storage.append_sales_log({"day": 2})
    storage.close()

    assert storage.current_path.name == "sales_2026-03-02.jsonl"
    assert storage.read_sales_logs("2026-03-01") == [{"day": 1}]
    assert storage.read_sales_logs("2026-03-02") == [{"day": 2}]
