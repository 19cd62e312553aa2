"""
src/infrastructure/storage/log_storage.py

판매 기록 저장소 (하루 1개 JSONL 파일: sales_YYYY-MM-DD.jsonl)

- 한 기록 = 한 줄, os.write 1회 (O_APPEND)
- fsync: "batch" (N줄마다) / "critical" (매 줄)
- 날짜(UTC)가 바뀌면 이전 파일 fsync 후 새 파일로 교체
- 읽을 때 마지막 줄이 잘려 있으면 (쓰기 도중 중단) 그 부분만 잘라낸다
"""

import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

FSYNC_POLICIES = ("batch", "critical")


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class LogStorage:
    """
    판매 기록 append-only 저장소 (single writer)

    Usage:
        storage = LogStorage(Path("logs/sales"))
        storage.append_sales_log(asdict(sale_log))
        storage.close()
    """

    def __init__(
        self,
        log_dir: Path,
        fsync_policy: str = "batch",
        fsync_batch_size: int = 10,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Args:
            log_dir: 기록 디렉토리 (없으면 생성)
            fsync_policy: "batch" or "critical"
            fsync_batch_size: batch 정책의 fsync 간격 (줄 수)
            clock: 현재 UTC 시각 함수 (파일 날짜 결정, 기본 datetime.now(utc))

        Raises:
            ValueError: 알 수 없는 fsync_policy, fsync_batch_size <= 0
        """
        if fsync_policy not in FSYNC_POLICIES:
            raise ValueError(f"Unknown fsync_policy: {fsync_policy}")
        if fsync_batch_size <= 0:
            raise ValueError(f"fsync_batch_size must be > 0, got {fsync_batch_size}")

        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.fsync_policy = fsync_policy
        self.fsync_batch_size = fsync_batch_size
        self._clock = clock or _utc_now

        self._fd: Optional[int] = None
        self._path: Optional[Path] = None
        self._unsynced = 0

    @property
    def current_path(self) -> Optional[Path]:
        """현재 열려 있는 파일 (아직 append 전이면 None)"""
        return self._path

    @property
    def unsynced_count(self) -> int:
        """마지막 fsync 이후 기록된 줄 수"""
        return self._unsynced

    @property
    def closed(self) -> bool:
        return self._fd is None

    def path_for(self, date: str) -> Path:
        """'YYYY-MM-DD' → 해당 날짜 파일 경로"""
        return self.log_dir / f"sales_{date}.jsonl"

    def append_sales_log(self, log_entry: Dict[str, Any], is_critical: bool = False) -> None:
        """
        기록 1건 append

        Args:
            log_entry: JSON 직렬화 가능한 dict (SaleLogV1 asdict)
            is_critical: True면 정책과 무관하게 즉시 fsync

        Raises:
            OSError: 파일 open/write/fsync 실패
        """
        path = self.path_for(self._clock().strftime("%Y-%m-%d"))
        if self._fd is None or path != self._path:
            self._switch_to(path)

        os.write(self._fd, (json.dumps(log_entry) + "\n").encode("utf-8"))
        self._unsynced += 1

        if is_critical or self.fsync_policy == "critical" or self._unsynced >= self.fsync_batch_size:
            self.flush()

    def flush(self) -> None:
        """미 fsync 기록을 디스크에 반영"""
        if self._fd is not None and self._unsynced:
            os.fsync(self._fd)
            self._unsynced = 0

    def read_sales_logs(self, date: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        하루치 기록 읽기

        Args:
            date: "YYYY-MM-DD" (None이면 현재 파일)

        Returns:
            기록 dict 리스트 (파일이 없으면 빈 리스트)

        Note:
            - 마지막 줄이 잘려 있으면 파일에서 제거
            - 중간의 깨진 줄은 경고 후 스킵
        """
        path = self.path_for(date) if date else self._path
        if path is None or not path.exists():
            return []

        data = path.read_bytes()
        end = data.rfind(b"\n") + 1
        if end < len(data):
            logger.warning(f"Truncating partial record in {path.name} ({len(data) - end} bytes)")
            os.truncate(path, end)

        entries: List[Dict[str, Any]] = []
        for line_num, line in enumerate(data[:end].splitlines(), start=1):
            if not line.strip():
                continue
            try:
                entries.append(json.loads(line))
            except json.JSONDecodeError:
                logger.warning(f"Skipping corrupt record at {path.name}:{line_num}")
        return entries

    def close(self) -> None:
        """fsync + close (여러 번 호출해도 안전)"""
        if self._fd is None:
            return
        self.flush()
        os.close(self._fd)
        self._fd = None

    def _switch_to(self, path: Path) -> None:
        """날짜 변경 (또는 첫 기록): 이전 파일 정리 후 새 파일 open"""
        if self._fd is not None:
            logger.info(f"Rotating sales log: {self._path.name} → {path.name}")
            self.close()
        self._fd = os.open(path, os.O_APPEND | os.O_CREAT | os.O_WRONLY, 0o644)
        self._path = path
