from base64 import b64encode
from typing import Optional

from pydantic import PlainSerializer
from typing_extensions import Annotated


def _base64_to_str(value: bytes) -> str:
    return b64encode(value).decode("ascii")


Base64 = Annotated[bytes, PlainSerializer(_base64_to_str, return_type=str)]


def utf8_or_none(value: bytes) -> Optional[str]:
    try:
        return value.decode("utf-8")
    except UnicodeDecodeError:
        return None
