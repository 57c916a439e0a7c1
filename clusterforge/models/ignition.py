"""Subset of the Ignition 3.2 config schema used by generated machine configs.

Only the fields the producers set are modelled.  ``to_dict()`` drops unset
(``None``) fields so the serialized document stays minimal.
"""

from __future__ import annotations

import base64
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

IGNITION_VERSION = "3.2.0"

DATA_URL_PREFIX = "data:text/plain;charset=utf-8;base64,"


def encode_data_url(data: bytes) -> str:
    """Encode bytes as a ``data:`` URL the way Ignition file sources expect."""
    return DATA_URL_PREFIX + base64.b64encode(data).decode("ascii")


def decode_data_url(source: str) -> bytes:
    if not source.startswith(DATA_URL_PREFIX):
        raise ValueError(f"unsupported data URL: {source[:40]!r}")
    return base64.b64decode(source[len(DATA_URL_PREFIX):], validate=True)


class _IgnitionModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)


class Resource(_IgnitionModel):
    source: str


class NodeUser(_IgnitionModel):
    name: str


class IgnitionFile(_IgnitionModel):
    path: str
    overwrite: bool | None = None
    user: NodeUser | None = None
    mode: int | None = None
    contents: Resource | None = None

    def decoded_contents(self) -> bytes:
        return decode_data_url(self.contents.source) if self.contents else b""


class SystemdUnit(_IgnitionModel):
    name: str
    enabled: bool | None = None
    contents: str | None = None


class PasswdUser(_IgnitionModel):
    name: str
    ssh_authorized_keys: list[str] = []


class Passwd(_IgnitionModel):
    users: list[PasswdUser] = []


class Storage(_IgnitionModel):
    files: list[IgnitionFile] = []


class Systemd(_IgnitionModel):
    units: list[SystemdUnit] = []


class ConfigReferences(_IgnitionModel):
    merge: list[Resource] = []


class IgnitionMeta(_IgnitionModel):
    version: str = IGNITION_VERSION
    config: ConfigReferences | None = None


class IgnitionConfig(_IgnitionModel):
    ignition: IgnitionMeta = IgnitionMeta()
    passwd: Passwd | None = None
    storage: Storage | None = None
    systemd: Systemd | None = None

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
