"""Body parsers: strategies turning typed input into request bytes.

Every parser exposes two operations:
    parse()        -> the request body as bytes (may be empty)
    content_type() -> the Content-Type to set, or "" to leave it unset

Serialization itself is delegated to httpx (form, multipart), pydantic (JSON)
and xml.etree (XML).
"""

import secrets
import xml.etree.ElementTree as ET
from collections.abc import Iterable, Mapping
from typing import IO, Any, Protocol, Union, runtime_checkable

import httpx
from pydantic import TypeAdapter

from room._multimap import MultiValueMap
from room.exceptions import RoomConfigError

# =============================================================================
# Constants
# =============================================================================

HEADER_KEY_CONTENT_TYPE = "Content-Type"
HEADER_KEY_ACCEPT = "Accept"
HEADER_VALUE_FORM_ENCODED = "application/x-www-form-urlencoded"
HEADER_VALUE_APPLICATION_JSON = "application/json"
HEADER_VALUE_TEXT_XML = "text/xml"
HEADER_VALUE_MULTIPART_FORM_DATA = "multipart/form-data"

# Only used to drive httpx's multipart encoder; never dispatched.
_ENCODER_URL = "http://localhost/"

_JSON_ADAPTER: TypeAdapter[Any] = TypeAdapter(Any)

Fields = Union[Mapping[str, Union[str, Iterable[str]]], Iterable[tuple[str, str]], MultiValueMap]
FileContent = Union[bytes, str, IO[bytes]]
FileSpec = Union[
    FileContent,
    tuple[str | None, FileContent],
    tuple[str | None, FileContent, str | None],
]


@runtime_checkable
class BodyParser(Protocol):
    """Strategy producing the outbound body and its content type."""

    def parse(self) -> bytes: ...

    def content_type(self) -> str: ...


# =============================================================================
# Parsers
# =============================================================================


class DumpBody:
    """No-op parser used when a request has no body configured."""

    def parse(self) -> bytes:
        return b""

    def content_type(self) -> str:
        return ""

    def __repr__(self) -> str:
        return "DumpBody()"


class RawBody:
    """Pass pre-encoded content through unchanged."""

    def __init__(self, content: bytes | str, content_type: str = "") -> None:
        self._content = content.encode("utf-8") if isinstance(content, str) else content
        self._content_type = content_type

    def parse(self) -> bytes:
        return self._content

    def content_type(self) -> str:
        return self._content_type


class FormBody:
    """URL-encoded form fields, in insertion order."""

    def __init__(self, fields: Fields) -> None:
        self._fields = MultiValueMap(fields)

    def parse(self) -> bytes:
        return str(httpx.QueryParams(self._fields.properties())).encode("ascii")

    def content_type(self) -> str:
        return HEADER_VALUE_FORM_ENCODED


class JsonBody:
    """Any JSON-serializable value, pydantic models included."""

    def __init__(self, value: Any) -> None:
        self._value = value

    def parse(self) -> bytes:
        return _JSON_ADAPTER.dump_json(self._value)

    def content_type(self) -> str:
        return HEADER_VALUE_APPLICATION_JSON


class XmlBody:
    """An XML document.

    Accepts an ElementTree element, an already rendered document (str or
    bytes), or a mapping with exactly one root key. Mapping values become
    child elements: nested mappings recurse, lists repeat the element, keys
    prefixed with "@" become attributes and everything else becomes text.
    """

    def __init__(self, value: ET.Element | Mapping[str, Any] | str | bytes) -> None:
        if isinstance(value, Mapping) and len(value) != 1:
            raise RoomConfigError("XML mapping must have exactly one root key")
        self._value = value

    def parse(self) -> bytes:
        if isinstance(self._value, bytes):
            return self._value
        if isinstance(self._value, str):
            return self._value.encode("utf-8")
        if isinstance(self._value, ET.Element):
            element = self._value
        else:
            ((tag, content),) = self._value.items()
            element = _build_element(tag, content)
        return ET.tostring(element, encoding="unicode").encode("utf-8")

    def content_type(self) -> str:
        return HEADER_VALUE_TEXT_XML


class MultipartBody:
    """multipart/form-data with plain fields and file parts.

    The boundary is fixed when the parser is created so that `parse()` and
    `content_type()` always agree.
    """

    def __init__(
        self,
        fields: Fields | None = None,
        files: Mapping[str, FileSpec] | Iterable[tuple[str, FileSpec]] | None = None,
        boundary: str | None = None,
    ) -> None:
        self._fields = MultiValueMap(fields)
        if files is None:
            self._files: list[tuple[str, FileSpec]] = []
        elif isinstance(files, Mapping):
            self._files = list(files.items())
        else:
            self._files = list(files)
        self._boundary = boundary or secrets.token_hex(16)

    @property
    def boundary(self) -> str:
        return self._boundary

    def parse(self) -> bytes:
        # A part without a filename renders as a plain form field.
        parts: list[tuple[str, Any]] = [
            (name, (None, value)) for name, value in self._fields.properties()
        ]
        parts.extend(self._files)
        if not parts:
            return f"--{self._boundary}--\r\n".encode("ascii")
        encoded = httpx.Request(
            "POST",
            _ENCODER_URL,
            files=parts,
            headers={HEADER_KEY_CONTENT_TYPE: self.content_type()},
        )
        return encoded.read()

    def content_type(self) -> str:
        return f"{HEADER_VALUE_MULTIPART_FORM_DATA}; boundary={self._boundary}"


def _build_element(tag: str, content: Any) -> ET.Element:
    element = ET.Element(tag)
    _fill_element(element, content)
    return element


def _fill_element(element: ET.Element, content: Any) -> None:
    if isinstance(content, Mapping):
        for key, value in content.items():
            if key.startswith("@"):
                element.set(key[1:], _text(value))
            elif isinstance(value, list):
                for item in value:
                    _fill_element(ET.SubElement(element, key), item)
            else:
                _fill_element(ET.SubElement(element, key), value)
    elif content is not None:
        element.text = _text(content)


def _text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
