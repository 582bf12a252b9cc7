"""
Content type helpers

Maps the content types a request can declare onto MIME strings and turns
request body objects into the payload that is handed to requests
"""

import json
from enum import Enum
from typing import Any, Optional, Union

import xmltodict

from restsession.exceptions import SerializationError


class ContentType(Enum):
    """
    Common IANA content types, the value is what goes out in the
    Content-Type header
    """

    ANY = "*/*"
    TEXT = "text/plain"
    JSON = "application/json"
    XML = "application/xml"
    HTML = "text/html"
    URLENC = "application/x-www-form-urlencoded"
    BINARY = "application/octet-stream"

    @property
    def mime(self) -> str:
        return self.value

    @classmethod
    def from_name(cls, name: Union[str, "ContentType", None]):
        """
        Lenient lookup used by the command line, accepts member names
        in any case or a member as is
        """
        if name is None or isinstance(name, cls):
            return name
        try:
            return cls[name.upper()]
        except KeyError:
            raise ValueError(
                "Content type must be one of {}".format(
                    ", ".join(member.name.lower() for member in cls)
                )
            )


def has_body(body: Any) -> bool:
    return body is not None and str(body) != ""


def serialize_body(body: Any, content_type: Optional[ContentType]) -> Union[str, bytes]:
    """
    Converts a body object to the wire payload for the given content type

    Strings and bytes are treated as already encoded documents and pass
    through untouched whatever the content type

    Parameters
    ----------
    body : Any
        object to send, mappings and lists for JSON, a single rooted mapping for XML
    content_type : Optional[ContentType]
        selects the serializer, anything other than JSON or XML sends the raw body

    Returns
    -------
    Union[str, bytes]
        payload for the `data` argument of requests

    Raises
    ------
    SerializationError
        if the body cannot be represented in the requested content type
    """
    if isinstance(body, (str, bytes)):
        return body

    if content_type is ContentType.JSON:
        try:
            return json.dumps(body)
        except (TypeError, ValueError) as e:
            raise SerializationError(
                "Cannot serialize {} to JSON: {}".format(type(body).__name__, e)
            ) from e

    if content_type is ContentType.XML:
        try:
            return xmltodict.unparse(body)
        except (AttributeError, TypeError, ValueError) as e:
            raise SerializationError(
                "Cannot serialize {} to XML: {}".format(type(body).__name__, e)
            ) from e

    return str(body)
