"""Core constants used across Playstore modules.

This module centralizes file names, field names, and defaults.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_DATA_ROOT = Path(".playstore")
DEFAULT_SOURCE_URI = (
    "https://data.wien.gv.at/daten/geo?service=WFS&request=GetFeature&version=1.1.0"
    "&typeName=ogdwien:SPIELPLATZPUNKTOGD&srsName=EPSG:4326&outputFormat=csv"
)
DEFAULT_HTTP_TIMEOUT_SECONDS = 60.0
TEXT_FILE_NAME = "custom.csv"
BINARY_FILE_NAME = "custom.dat"
INDEX_FILE_NAME = "custom.idx.dat"
JSON_FILE_NAME = "custom.json"
XML_FILE_NAME = "custom.xml"
DATABASE_FILE_NAME = "playstore.duckdb"
DATABASE_TABLE_NAME = "playgroundpoints"
TEXT_ENCODING = "utf-8"
SOURCE_TEXT_ENCODING = "utf-8-sig"
SOURCE_DECODE_ERRORS = "replace"
RECORD_FIELD_COUNT = 8
RECORD_FIELD_NAMES = (
    "FID",
    "OBJECTID",
    "SHAPE",
    "ANL_NAME",
    "BEZIRK",
    "SPIELPLATZ_DETAIL",
    "TYP_DETAIL",
    "SE_ANNO_CAD_DATA",
)
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1
UINT64_MAX = 2**64 - 1
XML_ROOT_TAG = "ArrayOfPlaygroundPoint"
XML_RECORD_TAG = "PlaygroundPoint"
XML_SCHEMA_INSTANCE_NS = "http://www.w3.org/2001/XMLSchema-instance"
