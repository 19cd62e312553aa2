"""
src/infrastructure/config/machine_config.py
Machine Config — YAML 설정 + .env override

SSOT:
- config/machine.yaml: 선반 수, 첫 코드, 초기 재고, 판매 로그 설정

Override (환경 변수, .env 지원):
- VENDING_CONFIG: 설정 파일 경로
- VENDING_CAPACITY: 선반 수
- VENDING_LOG_DIR: 판매 로그 디렉토리

Exports:
- MachineConfig
- load_machine_config()
- FatalConfigError
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from domain.state import Item, ItemType
from application.inventory import DEFAULT_CAPACITY, DEFAULT_FIRST_CODE
from infrastructure.storage.log_storage import FSYNC_POLICIES

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config/machine.yaml")


class FatalConfigError(Exception):
    """설정 파일/값 오류 (기동 불가)"""

    pass


@dataclass
class MachineConfig:
    """
    Vending Machine 설정

    - capacity: 선반 수 (> 0)
    - first_code: 첫 선반 코드
    - items: 초기 재고 {code: Item}
    - log_dir: 판매 로그 디렉토리 (None이면 기록 안 함)
    - fsync_policy / fsync_batch_size: LogStorage 설정
    """
    capacity: int = DEFAULT_CAPACITY
    first_code: int = DEFAULT_FIRST_CODE
    items: Dict[int, Item] = field(default_factory=dict)
    log_dir: Optional[str] = None
    fsync_policy: str = "batch"
    fsync_batch_size: int = 10

    @property
    def last_code(self) -> int:
        return self.first_code + self.capacity - 1


def load_machine_config(path: Optional[Path] = None) -> MachineConfig:
    """
    설정 로드 (YAML → env override → validation)

    Args:
        path: 설정 파일 경로 (None이면 VENDING_CONFIG or config/machine.yaml)

    Returns:
        MachineConfig

    Raises:
        FatalConfigError: YAML 파싱 실패, 잘못된 값

    Note:
        파일이 없으면 기본값 사용 (경고 로그)
    """
    load_dotenv()

    if path is None:
        path = Path(os.getenv("VENDING_CONFIG", str(DEFAULT_CONFIG_PATH)))
    path = Path(path)

    raw: Dict[str, Any] = {}
    if path.exists():
        try:
            with open(path, "r", encoding="utf-8") as f:
                raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise FatalConfigError(f"Invalid YAML in {path}: {e}") from e
        if not isinstance(raw, dict):
            raise FatalConfigError(f"Config root must be a mapping: {path}")
    else:
        logger.warning(f"Config file not found: {path}, using defaults")

    machine = raw.get("machine") or {}
    sales_log = raw.get("sales_log") or {}

    capacity = _parse_int(os.getenv("VENDING_CAPACITY", machine.get("capacity", DEFAULT_CAPACITY)), "capacity")
    first_code = _parse_int(machine.get("first_code", DEFAULT_FIRST_CODE), "first_code")
    log_dir = os.getenv("VENDING_LOG_DIR", sales_log.get("log_dir"))

    config = MachineConfig(
        capacity=capacity,
        first_code=first_code,
        log_dir=log_dir or None,
        fsync_policy=sales_log.get("fsync_policy", "batch"),
        fsync_batch_size=_parse_int(sales_log.get("fsync_batch_size", 10), "fsync_batch_size"),
    )
    config.items = _parse_items(raw.get("items") or {})

    validate_machine_config(config)
    return config


def validate_machine_config(config: MachineConfig) -> None:
    """
    Raises:
        FatalConfigError: capacity <= 0, fsync 설정 오류, 범위 밖 재고 코드
    """
    if config.capacity <= 0:
        raise FatalConfigError(f"capacity must be > 0, got {config.capacity}")

    if config.fsync_policy not in FSYNC_POLICIES:
        raise FatalConfigError(
            f"fsync_policy must be one of {FSYNC_POLICIES}, got {config.fsync_policy}"
        )

    if config.fsync_batch_size <= 0:
        raise FatalConfigError(f"fsync_batch_size must be > 0, got {config.fsync_batch_size}")

    for code in config.items:
        if not config.first_code <= code <= config.last_code:
            raise FatalConfigError(
                f"Stock code {code} outside {config.first_code}..{config.last_code}"
            )


def _parse_items(raw_items: Dict[Any, Any]) -> Dict[int, Item]:
    """
    items 섹션 파싱

    YAML 형식:
        items:
          102: {type: COKE, price: 12}
    """
    if not isinstance(raw_items, dict):
        raise FatalConfigError("items must be a mapping of code -> {type, price}")

    items: Dict[int, Item] = {}
    for raw_code, item_spec in raw_items.items():
        code = _parse_int(raw_code, "item code")
        if not isinstance(item_spec, dict):
            raise FatalConfigError(f"Item {code} must be a mapping with type/price")

        type_name = str(item_spec.get("type", "")).upper()
        try:
            item_type = ItemType[type_name]
        except KeyError:
            raise FatalConfigError(f"Unknown item type for {code}: {item_spec.get('type')}") from None

        price = _parse_int(item_spec.get("price"), f"price of {code}")
        try:
            items[code] = Item(type=item_type, price=price)
        except ValueError as e:
            raise FatalConfigError(str(e)) from e

    return items


def _parse_int(value: Any, name: str) -> int:
    """정수 파싱 (bool 금지)"""
    if isinstance(value, bool):
        raise FatalConfigError(f"{name} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise FatalConfigError(f"{name} must be an integer, got {value!r}") from None
