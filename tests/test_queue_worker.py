import asyncio
import logging

from tvdispatch.domain.errors import ConfigurationMissing
from tvdispatch.domain.models import SettingType
from tvdispatch.services.dispatcher import CycleReport
from tvdispatch.services.queue_worker import QueueWorker

from fakes import FakeWebSession


class ScriptedDispatcher:
    def __init__(self, *outcomes):
        self._outcomes = list(outcomes)
        self.sessions = []

    async def process_queue(self, session):
        self.sessions.append(session)
        outcome = self._outcomes.pop(0) if self._outcomes else CycleReport()
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def test_run_once_returns_report():
    report = CycleReport(messages=2, sends=2)
    session = FakeWebSession()
    worker = QueueWorker(ScriptedDispatcher(report), session)

    assert asyncio.run(worker.run_once()) is report
    assert worker.cycles == 1


def test_missing_configuration_is_logged_and_swallowed(caplog):
    worker = QueueWorker(ScriptedDispatcher(ConfigurationMissing(SettingType.TELEGRAM_BOT)), FakeWebSession())

    with caplog.at_level(logging.ERROR):
        result = asyncio.run(worker.run_once())

    assert result is None
    assert "telegram:bot" in caplog.text


def test_unexpected_error_does_not_stop_the_loop():
    dispatcher = ScriptedDispatcher(RuntimeError("boom"), CycleReport(), CycleReport())
    worker = QueueWorker(dispatcher, FakeWebSession(), interval_seconds=0.01)

    async def scenario():
        await worker.start()
        while worker.cycles < 3:
            await asyncio.sleep(0.01)
        await worker.stop()

    asyncio.run(asyncio.wait_for(scenario(), timeout=5))

    assert worker.cycles >= 3
    assert not worker.is_running


def test_stop_interrupts_the_sleep():
    worker = QueueWorker(ScriptedDispatcher(), FakeWebSession(), interval_seconds=60)

    async def scenario():
        await worker.start()
        while worker.cycles < 1:
            await asyncio.sleep(0)
        await worker.stop()

    asyncio.run(asyncio.wait_for(scenario(), timeout=5))

    assert worker.cycles == 1


def test_dispatcher_receives_the_shared_session():
    session = FakeWebSession()
    dispatcher = ScriptedDispatcher()
    worker = QueueWorker(dispatcher, session)

    async def scenario():
        await worker.run_once()
        await worker.run_once()

    asyncio.run(scenario())

    assert dispatcher.sessions == [session, session]
