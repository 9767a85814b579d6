"""Tests for the loguru logging setup."""

import logging

from loguru import logger

from ledger_reports.core.logging_config import setup_logging


def test_stdlib_records_reach_loguru():
    setup_logging("INFO")
    messages: list[str] = []
    sink_id = logger.add(lambda msg: messages.append(str(msg)), level="INFO")

    try:
        logging.getLogger("gst_generators").info("GSTR-1 generated: period=%s", "012024")
        logging.getLogger("gst_generators").debug("hidden detail")
    finally:
        logger.remove(sink_id)

    assert any("GSTR-1 generated: period=012024" in m for m in messages)
    assert not any("hidden detail" in m for m in messages)
