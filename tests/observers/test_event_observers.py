import json
import logging
from pathlib import Path

from customcert.observers import dispatcher
from customcert.observers.dispatcher import EventBus
from customcert.observers.events import RolloutTriggered, RunFailed, RunSummary, SideEffectFailed, new_ctx
from customcert.observers.jsonfile import JsonFileObserver
from customcert.observers.logger import LoggerObserver


class Broken:
    def notify(self, event):
        raise RuntimeError("observer bug")


class Capture:
    def __init__(self): self.events = []
    def notify(self, ev): self.events.append(ev)


def test_broken_observer_does_not_stop_others():
    cap = Capture()
    bus = EventBus([Broken(), cap])
    bus.emit(RolloutTriggered(name="md1", timestamp="now", **new_ctx(env="append", context=None)))
    assert len(cap.events) == 1


def test_json_file_observer_appends_lines(tmp_path: Path):
    path = tmp_path / "logs" / "run.jsonl"
    ob = JsonFileObserver(path)
    ctx = new_ctx(env="append", context="mgmt", run_id="r-1")
    ob.notify(RolloutTriggered(name="md1", timestamp="t1", **ctx))
    ob.notify(RolloutTriggered(name="md2", timestamp="t2", **ctx))

    lines = [json.loads(l) for l in path.read_text().splitlines()]
    assert [l["name"] for l in lines] == ["md1", "md2"]
    assert lines[0]["type"] == "RolloutTriggered"
    assert lines[0]["run_id"] == "r-1"
    assert lines[0]["ts"].endswith("Z")
    assert ob.written == 2


class ListHandler(logging.Handler):
    def __init__(self):
        super().__init__(logging.DEBUG)
        self.records = []

    def emit(self, record):
        self.records.append(record)


def _logger(name):
    lg = logging.getLogger(name)
    lg.setLevel(logging.DEBUG)
    lg.propagate = False
    handler = ListHandler()
    lg.addHandler(handler)
    return lg, handler


def test_broken_observer_failure_is_logged(monkeypatch):
    lg, handler = _logger("customcert-bus-test")
    monkeypatch.setattr(dispatcher, "log", lg)
    EventBus([Broken()]).emit(RolloutTriggered(name="md1", timestamp="now", **new_ctx(env="append", context=None)))
    assert handler.records[0].levelno == logging.DEBUG
    assert "Broken" in handler.records[0].getMessage()
    assert "observer bug" in handler.records[0].getMessage()


def test_logger_observer_raises_level_for_failures():
    lg, handler = _logger("customcert-observer-test")
    ob = LoggerObserver(lg)
    ctx = new_ctx(env="append", context=None)
    ob.notify(RolloutTriggered(name="md1", timestamp="t1", **ctx))
    ob.notify(SideEffectFailed(name="kapp-secret", error="exists", **ctx))
    ob.notify(RunFailed(kind="Transport", name=None, error="refused", **ctx))
    ob.notify(RunSummary(action="append", status="OK", **ctx))

    assert [r.levelno for r in handler.records] == [
        logging.DEBUG,
        logging.WARNING,
        logging.ERROR,
        logging.DEBUG,
    ]
    assert "[SideEffectFailed] name=kapp-secret, error=exists" == handler.records[1].getMessage()
