"""JSON and XML mirrors of decoded records.

This module writes best-effort mirror documents of the in-memory record
sequence. Both mirrors use the canonical upper-case field names.
"""

from __future__ import annotations

import json
import re
from typing import BinaryIO, Iterable, TextIO
import xml.etree.ElementTree as ET

from core.constants import (
    RECORD_FIELD_NAMES,
    TEXT_ENCODING,
    XML_RECORD_TAG,
    XML_ROOT_TAG,
    XML_SCHEMA_INSTANCE_NS,
)
from core.errors import PlaystoreStoreError
from core.types import PlaygroundRecord

_XSI_NIL = f"{{{XML_SCHEMA_INSTANCE_NS}}}nil"
_XML_ILLEGAL_CHAR = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")


def record_to_payload(record: PlaygroundRecord) -> dict[str, object]:
    """Map a record onto a name-keyed payload.

    Args:
        record: Record to serialize.

    Returns:
        Dictionary keyed by canonical field names, ``None`` when absent.
    """
    values = (
        record.fid,
        record.object_id,
        record.shape,
        record.site_name,
        record.district,
        record.detail_a,
        record.detail_b,
        record.annotation,
    )
    return dict(zip(RECORD_FIELD_NAMES, values))


def write_json_records(records: Iterable[PlaygroundRecord], stream: TextIO) -> None:
    """Write records as a JSON array of objects.

    Args:
        records: Records to serialize.
        stream: Writable character stream.
    """
    payloads = [record_to_payload(record) for record in records]
    json.dump(payloads, stream, ensure_ascii=False, indent=2)
    stream.write("\n")


def write_xml_records(records: Iterable[PlaygroundRecord], stream: BinaryIO) -> None:
    """Write records as a UTF-8 XML document.

    Absent integers become empty elements flagged with ``xsi:nil="true"``.

    Args:
        records: Records to serialize.
        stream: Writable binary stream.

    Raises:
        PlaystoreStoreError: If a field holds a character XML cannot carry.
    """
    ET.register_namespace("xsi", XML_SCHEMA_INSTANCE_NS)
    root = ET.Element(XML_ROOT_TAG)
    for record_number, record in enumerate(records, start=1):
        record_element = ET.SubElement(root, XML_RECORD_TAG)
        for field_name, value in record_to_payload(record).items():
            field_element = ET.SubElement(record_element, field_name)
            if value is None:
                field_element.set(_XSI_NIL, "true")
            else:
                field_element.text = _xml_text(str(value), field_name, record_number)
    tree = ET.ElementTree(root)
    ET.indent(tree)
    tree.write(stream, encoding=TEXT_ENCODING, xml_declaration=True)


def _xml_text(text: str, field_name: str, record_number: int) -> str:
    match = _XML_ILLEGAL_CHAR.search(text)
    if match is not None:
        raise PlaystoreStoreError(
            f"Failed to write XML record {record_number}: field {field_name} contains "
            f"character U+{ord(match.group()):04X}, which XML 1.0 does not allow. "
            "Remove control characters from the source value."
        )
    return text
