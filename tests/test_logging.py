import json
import logging

import pytest

from resume_intake.utils.logging import (
    CorrelationIdFilter,
    HumanReadableFormatter,
    StructuredFormatter,
    get_correlation_id,
    get_logger,
    setup_logging,
    start_parse_context,
)


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in list(root.handlers):
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


def _record(message="Decoded resume", **extra):
    record = logging.LogRecord("resume_intake.parsing_service", logging.INFO, __file__, 1, message, (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    CorrelationIdFilter().filter(record)
    return record


def test_parse_context_is_attached_to_records():
    value = start_parse_context("resume.pdf")

    record = _record()

    assert get_correlation_id() == value
    assert record.correlation_id == value
    assert record.document == "resume.pdf"


def test_structured_formatter_includes_extra_fields():
    start_parse_context("resume.txt")

    entry = json.loads(StructuredFormatter().format(_record(operation="decode", duration_ms=1.5)))

    assert entry["message"] == "Decoded resume"
    assert entry["logger"] == "resume_intake.parsing_service"
    assert entry["document"] == "resume.txt"
    assert entry["operation"] == "decode"
    assert entry["duration_ms"] == 1.5


def test_human_formatter_shortens_logger_name():
    start_parse_context("cv.docx")
    line = HumanReadableFormatter().format(_record())
    assert " parsing_service " in line
    assert "cv.docx] Decoded resume" in line


def test_get_logger_namespace():
    assert get_logger("file_handler.pdf").name == "resume_intake.file_handler.pdf"


def test_setup_logging_writes_rotating_file(tmp_path):
    log_file = tmp_path / "logs" / "intake.log"

    setup_logging("INFO", log_file=str(log_file), enable_console=False, enable_file=True, structured=True)
    get_logger("test").info("written to file")
    for handler in logging.getLogger().handlers:
        handler.flush()

    lines = log_file.read_text(encoding="utf-8").splitlines()
    assert json.loads(lines[-1])["message"] == "written to file"


def test_setup_logging_unknown_level_falls_back_to_info():
    setup_logging("CHATTY", enable_console=False)
    assert logging.getLogger().level == logging.INFO
