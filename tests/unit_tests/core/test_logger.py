import os
import re
from datetime import datetime
from unittest.mock import patch

import pytest

from shiftlog import LogDevice, Logger, Severity, WriteAfterClose
from shiftlog.config import LoggerSettings
from shiftlog.rotation import SizeRotation

LINE = re.compile(
    r"(?P<code>[A-Z]), \[(?P<stamp>[^ ]+) #(?P<pid>\d+)\] (?P<label>[ A-Z]{5,}) -- (?P<prog>[^:]*): (?P<payload>.*)\n",
    re.S,
)


class Counter:
    def __init__(self, result: str = "expensive"):
        self.calls = 0
        self.result = result

    def __call__(self) -> str:
        self.calls += 1
        return self.result


def _lines(stream) -> list[str]:
    return stream.getvalue().splitlines(keepends=True)


class TestThresholdGate:
    """Records below the threshold are dropped without any work"""

    @pytest.mark.parametrize("severity", [Severity.DEBUG, Severity.INFO, Severity.WARN])
    def test_dropped_records_never_invoke_producer(self, stream, severity) -> None:
        logger = Logger(stream, threshold=Severity.ERROR)
        producer = Counter()

        assert logger.add(severity, producer=producer) is True
        assert producer.calls == 0
        assert stream.getvalue() == ""

    def test_passing_record_invokes_producer_once(self, stream) -> None:
        logger = Logger(stream, threshold=Severity.WARN)
        producer = Counter()
        assert logger.error(producer=producer) is True
        assert producer.calls == 1
        assert _lines(stream)[0].endswith("-- -: expensive\n")

    def test_threshold_can_be_changed(self, stream) -> None:
        logger = Logger(stream)
        logger.threshold = Severity.FATAL
        logger.caution("dropped")
        logger.fatal("kept")
        assert len(_lines(stream)) == 1

    def test_out_of_range_threshold_silences_everything(self, stream) -> None:
        logger = Logger(stream, threshold=7)
        assert logger.unknown("nothing") is True
        assert stream.getvalue() == ""

    def test_none_severity_is_unknown(self, stream) -> None:
        logger = Logger(stream, threshold=Severity.FATAL)
        logger.add(None, "anything")
        match = LINE.fullmatch(stream.getvalue())
        assert match["code"] == "A"
        assert match["label"] == "  ANY"

    def test_is_enabled(self, stream) -> None:
        logger = Logger(stream, threshold=Severity.WARN)
        assert logger.is_enabled(Severity.ERROR)
        assert not logger.is_enabled(Severity.INFO)


class TestMessages:
    """Payload resolution through the facade"""

    def test_line_layout(self, stream, clock) -> None:
        logger = Logger(stream, clock=clock)
        logger.add(Severity.INFO, "hello", "Main")
        assert stream.getvalue() == f"I, [2026-10-21T12:00:00.000005 #{os.getpid()}]  INFO -- Main: hello\n"

    def test_single_argument_is_the_message(self, stream) -> None:
        logger = Logger(stream)
        logger.warn("just a message")
        match = LINE.fullmatch(stream.getvalue())
        assert (match["prog"], match["payload"]) == ("-", "just a message")

    def test_single_argument_keeps_default_progname(self, stream) -> None:
        logger = Logger(stream, progname="app")
        logger.info("started")
        match = LINE.fullmatch(stream.getvalue())
        assert (match["prog"], match["payload"]) == ("app", "started")

    def test_progname_with_producer(self, stream) -> None:
        logger = Logger(stream, progname="app")
        logger.info("initialize", lambda: "Initializing...")
        assert stream.getvalue().endswith(" INFO -- initialize: Initializing...\n")

    def test_exception_message(self, stream) -> None:
        logger = Logger(stream)
        try:
            raise RuntimeError("disk full")
        except RuntimeError as exc:
            logger.add(Severity.ERROR, exc)

        payload = LINE.fullmatch(stream.getvalue())["payload"]
        first, *trace = payload.split("\n")
        assert first == "disk full (RuntimeError)"
        assert any("test_exception_message" in line for line in trace)

    def test_arbitrary_value_uses_repr(self, stream) -> None:
        logger = Logger(stream)
        logger.add(Severity.DEBUG, [1, "two"])
        assert stream.getvalue().endswith(": [1, 'two']\n")

    def test_empty_call_logs_empty_payload(self, stream) -> None:
        logger = Logger(stream)
        logger.debug()
        assert stream.getvalue().endswith(" DEBUG -- -: \n")

    def test_encoding_normalises_payload(self, stream) -> None:
        logger = Logger(stream, encoding="ascii")
        logger.info(producer=lambda: "café")
        assert stream.getvalue().endswith(": caf?\n")

    def test_unknown_encoding_is_rejected_up_front(self, stream) -> None:
        with pytest.raises(ValueError, match="Unknown encoding"):
            Logger(stream, encoding="no-such-codec")

        logger = Logger(stream, encoding="latin-1")
        with pytest.raises(ValueError, match="Unknown encoding"):
            logger.encoding = "no-such-codec"
        assert logger.encoding == "iso8859-1"
        assert logger.info("still logging") is True
        assert stream.getvalue().endswith(": still logging\n")

    def test_custom_datetime_format(self, stream, clock) -> None:
        logger = Logger(stream, datetime_format="%d/%m/%Y", clock=clock)
        logger.info("x")
        assert stream.getvalue().startswith("I, [21/10/2026 #")
        logger.datetime_format = None
        assert logger.formatter.datetime_format is None


class TestSinkLifecycle:
    """Device ownership through the facade"""

    def test_writes_to_rotating_file(self, log_path) -> None:
        logger = Logger(log_path, 3, 0)
        for i in range(4):
            logger.info(f"message {i}")
        logger.close()
        assert log_path.read_text().endswith("-- -: message 3\n")
        assert (log_path.parent / "app.log.0").read_text().endswith("-- -: message 2\n")

    def test_log_after_close_raises(self, stream) -> None:
        logger = Logger(stream)
        logger.close()
        with pytest.raises(WriteAfterClose):
            logger.info("late")

    def test_dropped_record_after_close_is_still_silent(self, stream) -> None:
        logger = Logger(stream, threshold=Severity.ERROR)
        logger.close()
        assert logger.debug("quiet") is True

    def test_set_sink_swaps_and_closes_previous(self, stream, log_path) -> None:
        logger = Logger(log_path)
        old_device = logger.device
        logger.set_sink(stream)
        logger.info("moved")
        assert old_device.closed
        assert "moved" in stream.getvalue()
        assert "moved" not in log_path.read_text()

    def test_set_sink_on_same_path_releases_old_handle_first(self, log_path) -> None:
        logger = Logger(log_path)
        old_device = logger.device
        old_handle = old_device.dev
        opened = []

        class Recording(LogDevice):
            def __init__(self, *args, **kwargs):
                opened.append(old_handle.closed)
                super().__init__(*args, **kwargs)

        with patch("shiftlog.core.LogDevice", Recording):
            logger.set_sink(str(log_path), 3, 1024)

        assert opened == [True]
        assert old_device.closed
        logger.info("after swap")
        logger.close()
        assert log_path.read_text().endswith("-- -: after swap\n")

    def test_log_alias(self) -> None:
        assert Logger.log is Logger.add


class TestFromSettings:
    def test_builds_from_settings(self, log_path) -> None:
        settings = LoggerSettings(
            sink=str(log_path), rotation="3", max_bytes=100, threshold="warn", progname="svc"
        )
        logger = Logger.from_settings(settings)
        assert isinstance(logger.device.policy, SizeRotation)
        assert logger.device.policy.max_bytes == 100
        assert logger.threshold is Severity.WARN
        assert logger.progname == "svc"
        logger.close()

    def test_overrides_win(self, stream) -> None:
        logger = Logger.from_settings(LoggerSettings(), target=stream, progname="override")
        logger.info(producer=lambda: "x")
        assert "-- override: x" in stream.getvalue()

    def test_reads_environment(self, monkeypatch, log_path) -> None:
        monkeypatch.setenv("SHIFTLOG_SINK", str(log_path))
        monkeypatch.setenv("SHIFTLOG_THRESHOLD", "ERROR")
        logger = Logger.from_settings()
        logger.warn("dropped")
        logger.error("kept")
        logger.close()
        text = log_path.read_text()
        assert "kept" in text
        assert "dropped" not in text
