from __future__ import annotations

import io
from pathlib import Path

import pytest

from services.decoder import codec_charset_hook, decode_document
from services.errors import DecodeError

FIXTURES = Path(__file__).parent / "fixtures"


def test_decode_fixture_file() -> None:
    document = decode_document(FIXTURES / "rain_and_temperature.xml")

    assert document.agency == "Example Regional Council"
    assert len(document.measurements) == 2

    first, second = document.measurements
    assert first.site_name == "Place"
    assert first.parameter_name == "Air Temperature"
    assert first.num_items == "1"
    assert first.interpolation == "Instant"
    assert first.date_format == "UTC"
    assert first.raw_value_lines == (
        " 27-May-15 21:30:00 2.300000",
        " 27-May-15 21:45:00 2.100000",
    )

    assert second.site_name == "Other Place"
    assert second.num_items == ""
    assert second.raw_value_lines == (
        "27-May-15 21:30:00 0.5",
        "",
        "27-May-15 21:45:00 1.0",
    )


def test_decode_empty_document() -> None:
    document = decode_document(io.BytesIO(b"<Hilltop><Agency>NIWA</Agency></Hilltop>"))

    assert document.agency == "NIWA"
    assert document.measurements == ()


def test_decode_missing_optional_fields() -> None:
    body = b"""<Hilltop>
      <Measurement SiteName="Place"><DataSource Name="Rainfall"/></Measurement>
    </Hilltop>"""

    document = decode_document(io.BytesIO(body))

    (measurement,) = document.measurements
    assert measurement.num_items == ""
    assert measurement.interpolation == ""
    assert measurement.date_format == ""
    assert measurement.raw_value_lines == ()


def test_decode_keeps_value_text_uninterpreted() -> None:
    body = b"""<Hilltop><Measurement SiteName="Place">
      <DataSource Name="Rainfall"/>
      <Data DateFormat="Calendar"><V>garbage that is not a reading</V></Data>
    </Measurement></Hilltop>"""

    document = decode_document(io.BytesIO(body))

    assert document.measurements[0].raw_value_lines == ("garbage that is not a reading",)
    assert document.measurements[0].date_format == "Calendar"


@pytest.mark.parametrize(
    "body, reason",
    [
        (b"<Hilltop><Measurement>", "malformed"),
        (b"<Other/>", "expected element type <Hilltop>"),
        (
            b'<Hilltop><Measurement><DataSource Name="Rainfall"/></Measurement></Hilltop>',
            "SiteName",
        ),
        (b'<Hilltop><Measurement SiteName="Place"/></Hilltop>', "DataSource"),
        (
            b'<Hilltop><Measurement SiteName="Place"><DataSource/></Measurement></Hilltop>',
            "Name attribute",
        ),
    ],
)
def test_decode_rejects_structural_problems(body: bytes, reason: str) -> None:
    with pytest.raises(DecodeError) as excinfo:
        decode_document(io.BytesIO(body))

    assert reason in str(excinfo.value)


def test_decode_missing_file(tmp_path: Path) -> None:
    with pytest.raises(DecodeError):
        decode_document(tmp_path / "missing.xml")


_WINDOWS_1252 = (
    b'<?xml version="1.0" encoding="windows-1252"?>\n'
    b"<Hilltop><Agency>Conseil r\xe9gional</Agency>"
    b'<Measurement SiteName="Caf\xe9"><DataSource Name="Air Temperature"/>'
    b'<Data DateFormat="UTC"><V>01-Jan-16 00:00:00 1.5</V></Data>'
    b"</Measurement></Hilltop>"
)


def test_decode_foreign_charset_uses_hook() -> None:
    calls: list[str] = []

    def hook(label: str, data: bytes) -> str:
        calls.append(label)
        return codec_charset_hook(label, data)

    document = decode_document(io.BytesIO(_WINDOWS_1252), charset_hook=hook)

    assert calls == ["windows-1252"]
    assert document.agency == "Conseil régional"
    assert document.measurements[0].site_name == "Café"


def test_decode_foreign_charset_without_hook_fails() -> None:
    with pytest.raises(DecodeError) as excinfo:
        decode_document(io.BytesIO(_WINDOWS_1252))

    assert "windows-1252" in str(excinfo.value)


def test_decode_unknown_charset_label_fails() -> None:
    body = b'<?xml version="1.0" encoding="x-no-such-charset"?><Hilltop/>'

    with pytest.raises(DecodeError):
        decode_document(io.BytesIO(body), charset_hook=codec_charset_hook)


def test_decode_native_charset_skips_hook() -> None:
    def hook(label: str, data: bytes) -> str:  # pragma: no cover - must not run
        raise AssertionError("hook should not be called for UTF-8 input")

    body = '<?xml version="1.0" encoding="utf-8"?><Hilltop><Agency>Māori</Agency></Hilltop>'

    document = decode_document(io.BytesIO(body.encode("utf-8")), charset_hook=hook)

    assert document.agency == "Māori"
