from __future__ import annotations

import logging
from typing import Any

import pytest

from utils.logging_context import (
    configure_logging,
    log_context,
    set_wizard_run,
)
from wizard import Form, InputConfig, StepEngine
from wizard.testing import HeadlessHost


@pytest.mark.asyncio
async def test_engine_logging_includes_run_and_step(caplog: Any, host: HeadlessHost) -> None:
    configure_logging()
    logger = logging.getLogger("test.logging.engine")
    caplog.set_level(logging.DEBUG, logger=logger.name)
    form = Form()
    form.field("company.name").bind_prompter(lambda state: host.create_input_box(InputConfig(title="name")))
    host.script.enter("ACME")
    engine = StepEngine(form, logger_=logger)

    await engine.run()

    start = [record for record in caplog.records if "Starting wizard run" in record.message]
    assert start, "Expected a run start log entry"
    assert start[0].wizard_run == engine.run_id
    assert start[0].wizard_step == "-"

    prompting = [record for record in caplog.records if record.message == "Prompting"]
    assert prompting
    assert prompting[0].wizard_step == "company.name"
    assert prompting[0].wizard_run == engine.run_id


def test_log_context_restores_previous_values(caplog: Any) -> None:
    configure_logging()
    logger = logging.getLogger("test.logging.nesting")
    caplog.set_level(logging.INFO, logger=logger.name)

    with log_context(wizard_step="outer"):
        with log_context(wizard_step="inner"):
            logger.info("inner")
            with log_context(wizard_step="   "):
                logger.info("blank")
        logger.info("outer")
    logger.info("outside")

    steps = {record.message: record.wizard_step for record in caplog.records}
    assert steps == {"inner": "inner", "blank": "-", "outer": "outer", "outside": "-"}


def test_set_wizard_run_tags_later_records(caplog: Any) -> None:
    logger = logging.getLogger("test.logging.run")
    caplog.set_level(logging.INFO, logger=logger.name)

    set_wizard_run("manual-run")
    try:
        logger.info("hello")
    finally:
        set_wizard_run(None)

    record = next(record for record in caplog.records if record.message == "hello")
    assert record.wizard_run == "manual-run"
