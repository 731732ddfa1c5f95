import json
from pathlib import Path

import pytest

from models.results import ProcessingStatus
from services.assembler import ObservationAssembler
from services.errors import DeliveryError
from services.processor import IngestProcessor
from transport.mock_sqs import MockSQSQueue

FIXTURES = Path(__file__).parent / "fixtures"
SAMPLE = FIXTURES / "rain_and_temperature.xml"


class FailingQueue:
    def __init__(self, fail_after: int) -> None:
        self.fail_after = fail_after
        self.bodies: list[str] = []

    def send_message(self, body: str) -> str:
        if len(self.bodies) >= self.fail_after:
            raise DeliveryError("unable to send hilltop msg: throttled")
        self.bodies.append(body)
        return str(len(self.bodies))


def _assembler(**sites: str) -> ObservationAssembler:
    mapping = sites or {"Place": "PLACE", "Other Place": "OTHER"}
    return ObservationAssembler(site_mapping=mapping, network_id="NT", method_id="M")


def _write(tmp_path: Path, name: str, body: str) -> Path:
    path = tmp_path / name
    path.write_text(body, encoding="utf-8")
    return path


def test_processor_delivers_every_observation() -> None:
    queue = MockSQSQueue(name="test")
    processor = IngestProcessor(assembler=_assembler(), queue=queue)

    result = processor.process_file(SAMPLE)

    assert result.status == ProcessingStatus.processed
    assert result.agency == "Example Regional Council"
    assert result.measurement_count == 2
    assert result.observation_count == 4
    assert result.delivered_count == 4
    assert result.error is None

    messages = [json.loads(body) for body in queue.list_messages()]
    assert [(m["SiteID"], m["TypeID"], m["Value"]) for m in messages] == [
        ("PLACE", "t", 2.3),
        ("PLACE", "t", 2.1),
        ("OTHER", "rn", 0.5),
        ("OTHER", "rn", 1.0),
    ]
    assert all(m["NetworkID"] == "NT" and m["MethodID"] == "M" for m in messages)


def test_processor_dry_run_sends_nothing() -> None:
    queue = MockSQSQueue(name="test")
    processor = IngestProcessor(assembler=_assembler(), queue=queue, dry_run=True)

    result = processor.process_file(SAMPLE)

    assert result.status == ProcessingStatus.processed
    assert result.observation_count == 4
    assert result.delivered_count == 0
    assert queue.list_messages() == []


def test_processor_reports_skipped_measurements() -> None:
    queue = MockSQSQueue(name="test")
    processor = IngestProcessor(assembler=_assembler(Place="PLACE"), queue=queue)

    result = processor.process_file(SAMPLE)

    assert result.status == ProcessingStatus.processed
    assert result.observation_count == 2
    assert [(item.kind, item.name) for item in result.skipped] == [("site", "Other Place")]


def test_processor_parse_error_delivers_nothing(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        "bad.xml",
        """<Hilltop>
          <Measurement SiteName="Place"><DataSource Name="Air Temperature"/>
            <Data DateFormat="UTC"><V>27-May-15 21:30:00 1.0</V></Data></Measurement>
          <Measurement SiteName="Place"><DataSource Name="Rainfall"/>
            <Data DateFormat="UTC"><V>27-May-15 21:30:00 not-a-number</V></Data></Measurement>
        </Hilltop>""",
    )
    queue = MockSQSQueue(name="test")
    processor = IngestProcessor(assembler=_assembler(), queue=queue)

    result = processor.process_file(path)

    assert result.status == ProcessingStatus.failed
    assert "not-a-number" in (result.error or "")
    assert result.observation_count == 0
    assert queue.list_messages() == []


def test_processor_decode_error(tmp_path: Path) -> None:
    path = _write(tmp_path, "broken.xml", "<Hilltop><Measurement>")
    processor = IngestProcessor(assembler=_assembler(), queue=MockSQSQueue(name="test"))

    result = processor.process_file(path)

    assert result.status == ProcessingStatus.failed
    assert "malformed" in (result.error or "")


def test_processor_delivery_error_is_reported() -> None:
    queue = FailingQueue(fail_after=1)
    processor = IngestProcessor(assembler=_assembler(), queue=queue)

    result = processor.process_file(SAMPLE)

    assert result.status == ProcessingStatus.failed
    assert result.delivered_count == 1
    assert "throttled" in (result.error or "")


@pytest.mark.parametrize("keep_going, expected", [(False, 1), (True, 2)])
def test_process_files_stops_at_first_failure(
    tmp_path: Path, keep_going: bool, expected: int
) -> None:
    broken = _write(tmp_path, "broken.xml", "<nope")
    queue = MockSQSQueue(name="test")
    processor = IngestProcessor(assembler=_assembler(), queue=queue)

    results = processor.process_files([broken, SAMPLE], keep_going=keep_going)

    assert len(results) == expected
    assert results[0].status == ProcessingStatus.failed
    if keep_going:
        assert results[1].status == ProcessingStatus.processed
        assert len(queue) == 4
    else:
        assert len(queue) == 0
