"""Decode Hilltop XML files into :class:`HilltopDocument` trees."""

from __future__ import annotations

import codecs
import logging
import re
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import BinaryIO, Callable, Optional, Union

from models.records import HilltopDocument, Measurement
from services.errors import DecodeError

logger = logging.getLogger(__name__)

CharsetHook = Callable[[str, bytes], str]
Source = Union[str, Path, BinaryIO]

_ROOT_TAG = "Hilltop"
_NATIVE_CODECS = frozenset({"utf-8", "ascii", "utf-16"})
_DECLARATION = re.compile(
    rb"""^(?:\xef\xbb\xbf)?\s*<\?xml[^>]*?\bencoding\s*=\s*["']([A-Za-z0-9._:\-]+)["']"""
)
_TEXT_ENCODING_ATTR = re.compile(r"""(<\?xml[^>]*?)\s+encoding\s*=\s*["'][^"']*["']""")


def codec_charset_hook(label: str, data: bytes) -> str:
    """Decode ``data`` with the Python codec registered for ``label``."""
    return data.decode(codecs.lookup(label).name)


def decode_document(
    source: Source, charset_hook: Optional[CharsetHook] = None
) -> HilltopDocument:
    """Read one Hilltop file and map it onto the document model.

    ``charset_hook`` translates files declaring an encoding the XML parser
    does not handle natively. Without it only UTF-8, ASCII and UTF-16
    documents are accepted.
    """
    raw = _read_source(source)
    root = _parse(raw, charset_hook)
    if root.tag != _ROOT_TAG:
        raise DecodeError(
            f"expected element type <{_ROOT_TAG}> but have <{root.tag}>"
        )

    measurements = tuple(
        _decode_measurement(element, index)
        for index, element in enumerate(root.findall("Measurement"), start=1)
    )
    agency = (root.findtext("Agency") or "").strip()
    logger.debug(
        "decoded hilltop document",
        extra={"agency": agency, "measurement_count": len(measurements)},
    )
    return HilltopDocument(agency=agency, measurements=measurements)


def _read_source(source: Source) -> bytes:
    try:
        if isinstance(source, (str, Path)):
            return Path(source).read_bytes()
        data = source.read()
    except OSError as exc:
        raise DecodeError(f"unable to read hilltop input: {exc}") from exc
    if isinstance(data, str):
        return data.encode("utf-8")
    return data


def _declared_encoding(raw: bytes) -> Optional[str]:
    match = _DECLARATION.match(raw)
    if match is None:
        return None
    return match.group(1).decode("ascii")


def _is_native(label: str) -> bool:
    try:
        name = codecs.lookup(label).name
    except LookupError:
        return False
    return name in _NATIVE_CODECS


def _parse(raw: bytes, charset_hook: Optional[CharsetHook]) -> ET.Element:
    label = _declared_encoding(raw)
    try:
        if label is None or _is_native(label):
            return ET.fromstring(raw)
        if charset_hook is None:
            raise DecodeError(
                f"unsupported charset {label!r}: no charset hook configured"
            )
        try:
            text = charset_hook(label, raw)
        except (LookupError, UnicodeDecodeError) as exc:
            raise DecodeError(f"unable to transcode charset {label!r}: {exc}") from exc
        return ET.fromstring(_TEXT_ENCODING_ATTR.sub(r"\1", text, count=1))
    except ET.ParseError as exc:
        raise DecodeError(f"malformed hilltop xml: {exc}") from exc


def _decode_measurement(element: ET.Element, index: int) -> Measurement:
    site_name = element.get("SiteName")
    if site_name is None:
        raise DecodeError(f"measurement {index} is missing the SiteName attribute")

    source = element.find("DataSource")
    if source is None:
        raise DecodeError(f"measurement {index} has no DataSource element")
    parameter_name = source.get("Name")
    if parameter_name is None:
        raise DecodeError(f"measurement {index} DataSource is missing the Name attribute")

    data = element.find("Data")
    if data is None:
        date_format = ""
        lines: tuple[str, ...] = ()
    else:
        date_format = data.get("DateFormat", "")
        lines = tuple(value.text or "" for value in data.findall("V"))

    return Measurement(
        site_name=site_name,
        parameter_name=parameter_name,
        num_items=source.get("NumItems", ""),
        interpolation=source.findtext("Interpolation") or "",
        date_format=date_format,
        raw_value_lines=lines,
    )
