"""Tests for math, JSON and logging utilities."""

from __future__ import annotations

from enum import Enum
import json
import logging
from pathlib import Path

import numpy as np
import pytest

from rooflight.core.utils.json import dumps, read_json, write_json
from rooflight.core.utils.logging import (
    StructuredJSONFormatter,
    configure_logging,
    get_logger,
    log_performance,
)
from rooflight.core.utils.math import clamp, lerp, round_half_up


class _Mode(Enum):
    STATIC = "static"


class TestMath:
    """Test numeric helpers."""

    def test_clamp(self) -> None:
        assert clamp(5, 0, 3) == 3
        assert clamp(-1, 0, 3) == 0
        assert clamp(2, 0, 3) == 2

    def test_lerp(self) -> None:
        assert lerp(0, 10, 0.25) == 2.5

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(2.5, 3), (3.5, 4), (2.4, 2), (-2.5, -3), (0.0, 0)],
    )
    def test_round_half_up(self, value: float, expected: int) -> None:
        """Halves round away from zero, unlike round()."""
        assert round_half_up(value) == expected


class TestJson:
    """Test JSON helpers."""

    def test_dumps_handles_numpy_enum_and_path(self) -> None:
        text = dumps({"n": np.int64(3), "a": np.array([1, 2]), "m": _Mode.STATIC, "p": Path("x")})
        assert json.loads(text) == {"n": 3, "a": [1, 2], "m": "static", "p": "x"}

    def test_write_then_read(self, tmp_path: Path) -> None:
        """write_json creates parent directories."""
        path = tmp_path / "nested" / "out.json"
        write_json(path, {"on": True})
        assert read_json(path) == {"on": True}

    def test_read_non_object_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "list.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ValueError, match="Expected JSON object"):
            read_json(path)


class TestLogging:
    """Test logging configuration."""

    def test_structured_formatter_emits_json(self) -> None:
        record = logging.LogRecord(
            name="rooflight.test",
            level=logging.INFO,
            pathname=__file__,
            lineno=10,
            msg="composed %d groups",
            args=(3,),
            exc_info=None,
        )
        record.layer_id = "base"
        entry = json.loads(StructuredJSONFormatter().format(record))

        assert entry["level"] == "INFO"
        assert entry["message"] == "composed 3 groups"
        assert entry["context"]["logger_name"] == "rooflight.test"
        assert entry["context"]["layer_id"] == "base"

    def test_configure_logging_to_file(self, tmp_path: Path) -> None:
        log_file = tmp_path / "rooflight.log"
        configure_logging(level="debug", filename=str(log_file))
        logging.getLogger("rooflight.test").debug("hello")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert "hello" in log_file.read_text(encoding="utf-8")
        configure_logging(level="WARNING")

    def test_get_logger_with_context_returns_adapter(self) -> None:
        assert isinstance(get_logger("rooflight.test", layer_id="x"), logging.LoggerAdapter)
        assert isinstance(get_logger("rooflight.test"), logging.Logger)

    def test_log_performance_preserves_result(self) -> None:
        @log_performance
        def add(a: int, b: int) -> int:
            return a + b

        assert add(2, 3) == 5
        assert add.__name__ == "add"
