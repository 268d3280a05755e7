import importlib.util
import logging
import os
import tempfile

import pytest

import config
import log_config
from log_config import OmitBodyFilter, create_file_handler, enable_botocore_debug


@pytest.fixture
def unwritable_dir(tmp_path):
    # 일반 파일 아래 경로는 권한과 무관하게 만들 수 없다
    blocker = tmp_path / "blocker"
    blocker.write_text("")
    return str(blocker / "logs")


def load_fresh_log_config():
    spec = importlib.util.spec_from_file_location("log_config_fresh", log_config.__file__)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_create_file_handler_uses_log_dir(tmp_path):
    handler, directory, failures = create_file_handler(str(tmp_path / "logs"), str(tmp_path / "fallback"))
    try:
        assert directory == str(tmp_path / "logs")
        assert failures == []
        assert os.path.dirname(handler.baseFilename) == directory
    finally:
        handler.close()


def test_create_file_handler_falls_back_when_unwritable(tmp_path, unwritable_dir):
    fallback = str(tmp_path / "fallback")

    handler, directory, failures = create_file_handler(unwritable_dir, fallback)
    try:
        assert directory == fallback
        assert os.path.isdir(fallback)
        assert len(failures) == 1
        assert failures[0].startswith(unwritable_dir)
    finally:
        handler.close()


def test_create_file_handler_console_only_when_nothing_writable(unwritable_dir):
    handler, directory, failures = create_file_handler(unwritable_dir, unwritable_dir + "_too")

    assert handler is None
    assert directory is None
    assert len(failures) == 2


def test_import_with_unwritable_log_dir(monkeypatch, tmp_path, unwritable_dir):
    monkeypatch.setattr(config.Config, "LOG_DIR", unwritable_dir)
    monkeypatch.setattr(tempfile, "tempdir", str(tmp_path / "tmp"))

    module = load_fresh_log_config()
    try:
        assert module.LOG_DIR == os.path.join(str(tmp_path / "tmp"), "apnic_sync_logs")
        assert module.get_sync_logger().name == "apnic_sync"
    finally:
        module.sync_log_handler.close()


def make_record(msg, *args):
    return logging.LogRecord("botocore.parsers", logging.DEBUG, __file__, 1, msg, args, None)


@pytest.mark.parametrize("msg, kept", [
    ("Making request for %s with params: %s", False),
    ("Response body:\n%r", False),
    ("Response headers: %r", True),
    ("Sending http request: %s", True),
])
def test_omit_body_filter(msg, kept):
    assert OmitBodyFilter().filter(make_record(msg, "x")) is kept


def test_enable_botocore_debug_keeps_bodies_out_of_root_logger():
    botocore_logger = logging.getLogger("botocore")
    saved = (botocore_logger.level, botocore_logger.propagate, list(botocore_logger.handlers))
    try:
        enable_botocore_debug()
        enable_botocore_debug()

        assert botocore_logger.level == logging.DEBUG
        assert botocore_logger.propagate is False
        assert botocore_logger.handlers.count(log_config.botocore_debug_handler) == 1
        assert any(isinstance(f, OmitBodyFilter) for f in log_config.botocore_debug_handler.filters)
    finally:
        botocore_logger.setLevel(saved[0])
        botocore_logger.propagate = saved[1]
        botocore_logger.handlers[:] = saved[2]
