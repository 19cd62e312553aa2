"""
tests/unit/test_machine_config.py

Machine Config 테스트 (YAML 로드, env override, validation)

Failure-mode tests:
- capacity <= 0 → FatalConfigError
- 알 수 없는 item type → FatalConfigError
- 범위 밖 재고 코드 → FatalConfigError
- YAML 파싱 실패 → FatalConfigError
"""

from pathlib import Path

import pytest

from domain.state import Item, ItemType
from infrastructure.config.machine_config import (
    FatalConfigError,
    MachineConfig,
    load_machine_config,
)

REPO_CONFIG = Path(__file__).parent.parent.parent / "config" / "machine.yaml"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """외부 환경 변수 / .env 영향 제거"""
    for name in ("VENDING_CONFIG", "VENDING_CAPACITY", "VENDING_LOG_DIR"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(
        "infrastructure.config.machine_config.load_dotenv", lambda *args, **kwargs: False
    )


def _write(tmp_path, text):
    path = tmp_path / "machine.yaml"
    path.write_text(text)
    return path


def test_repo_config_loads():
    config = load_machine_config(REPO_CONFIG)

    assert config.capacity == 10
    assert config.first_code == 101
    assert config.last_code == 110
    assert config.items[102] == Item(ItemType.COKE, 12)
    assert config.log_dir == "logs/sales"


def test_missing_file_uses_defaults(tmp_path):
    config = load_machine_config(tmp_path / "nope.yaml")

    assert config == MachineConfig()
    assert config.log_dir is None


def test_items_are_parsed(tmp_path):
    path = _write(tmp_path, """
machine:
  capacity: 5
  first_code: 201
items:
  203: {type: juice, price: 9}
sales_log:
  log_dir: ""
  fsync_policy: critical
""")

    config = load_machine_config(path)

    assert config.capacity == 5
    assert config.first_code == 201
    assert config.items == {203: Item(ItemType.JUICE, 9)}
    assert config.log_dir is None
    assert config.fsync_policy == "critical"


def test_env_overrides_yaml(tmp_path, monkeypatch):
    path = _write(tmp_path, "machine:\n  capacity: 10\n")
    monkeypatch.setenv("VENDING_CAPACITY", "4")
    monkeypatch.setenv("VENDING_LOG_DIR", str(tmp_path / "logs"))

    config = load_machine_config(path)

    assert config.capacity == 4
    assert config.log_dir == str(tmp_path / "logs")


def test_vending_config_env_selects_file(tmp_path, monkeypatch):
    path = _write(tmp_path, "machine:\n  capacity: 2\n")
    monkeypatch.setenv("VENDING_CONFIG", str(path))

    assert load_machine_config().capacity == 2


@pytest.mark.parametrize("text, message", [
    ("machine:\n  capacity: 0\n", "capacity"),
    ("machine:\n  capacity: ten\n", "capacity"),
    ("items:\n  102: {type: WATER, price: 5}\n", "Unknown item type"),
    ("items:\n  102: {type: COKE, price: -5}\n", "price"),
    ("items:\n  111: {type: COKE, price: 5}\n", "outside"),
    ("sales_log:\n  fsync_policy: sometimes\n", "fsync_policy"),
    ("- just\n- a list\n", "mapping"),
    ("machine: [unclosed\n", "Invalid YAML"),
])
def test_invalid_config_raises(tmp_path, text, message):
    path = _write(tmp_path, text)

    with pytest.raises(FatalConfigError, match=message):
        load_machine_config(path)
