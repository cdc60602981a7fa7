"""How a client identifies itself to a Nominatim server.

The public server's usage policy asks every application to send either a
descriptive User-Agent or a Referer. Exactly one of the two is attached to
each request.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict


class IdentKind(str, Enum):
    """Identification variant; the value is the HTTP header name."""
    REFERER = "Referer"
    USER_AGENT = "User-Agent"


@dataclass(frozen=True)
class IdentificationMethod:
    kind: IdentKind
    value: str

    @classmethod
    def from_referer(cls, referer: str) -> "IdentificationMethod":
        return cls(IdentKind.REFERER, str(referer))

    @classmethod
    def from_user_agent(cls, user_agent: str) -> "IdentificationMethod":
        return cls(IdentKind.USER_AGENT, str(user_agent))

    @property
    def header(self) -> str:
        return self.kind.value

    def headers(self) -> Dict[str, str]:
        """Header mapping to attach to a request (always a single entry)."""
        return {self.header: self.value}

    def redacted(self) -> str:
        """Header value safe for logs, with e-mail addresses masked."""
        return redact_email(self.value)

    def __str__(self) -> str:
        return f"{self.header}: {self.redacted()}"


def redact_email(value: str) -> str:
    if "@" not in value:
        return value
    return re.sub(r"\S+@\S+", "<redacted>", value)
