"""
Shared data models passed between probes, host checks and the CLI.
All models are frozen: a result is never mutated after it is returned.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from probers.names import cipher_suite_name, version_name


class ProbeMode(str, Enum):
    TCP = "tcp"
    TLS = "tls"
    TLS_INSECURE = "tls-insecure"
    TLS_SNI = "tls-sni"
    TLS_POSTGRES = "tls-postgres"
    TLS_LDAP = "tls-ldap"
    ULIMITS = "ulimits"
    MM_ENV = "mm-env"
    SYSCTL = "sysctl"

    @property
    def is_tls(self) -> bool:
        return self.value.startswith("tls")

    @property
    def needs_host(self) -> bool:
        return self not in {ProbeMode.ULIMITS, ProbeMode.MM_ENV, ProbeMode.SYSCTL}


class ProbeRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    host: str = Field(min_length=1)
    port: int = Field(ge=1, le=65535)
    timeout: float = Field(gt=0, description="seconds")
    sni: str = Field(min_length=1)
    verify: bool = True
    mode: ProbeMode = ProbeMode.TLS

    @model_validator(mode="before")
    @classmethod
    def resolve_defaults(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if not data.get("sni"):
            data["sni"] = data.get("host")
        if data.get("mode") == ProbeMode.TLS_INSECURE:
            data["verify"] = False
        return data

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"


class ProbeResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: bool
    server_name: str
    version: Optional[int] = None
    cipher_suite: Optional[int] = None
    peer_certificates: Optional[int] = Field(None, ge=0)
    failure: Optional[str] = None

    @model_validator(mode="after")
    def check_outcome(self) -> "ProbeResult":
        handshake_fields = (self.version, self.cipher_suite, self.peer_certificates)
        if self.success:
            if self.failure is not None:
                raise ValueError("successful result cannot carry a failure")
            if any(v is None for v in handshake_fields):
                raise ValueError("successful result needs version, cipher suite and certificate count")
        else:
            if not self.failure:
                raise ValueError("failed result needs a failure cause")
            if any(v is not None for v in handshake_fields):
                raise ValueError("failed result cannot carry handshake fields")
        return self

    @classmethod
    def failed(cls, server_name: str, failure: str) -> "ProbeResult":
        return cls(success=False, server_name=server_name, failure=failure)

    @computed_field
    @property
    def negotiated_version(self) -> Optional[str]:
        return version_name(self.version) if self.version is not None else None

    @computed_field
    @property
    def negotiated_cipher_suite(self) -> Optional[str]:
        return cipher_suite_name(self.cipher_suite) if self.cipher_suite is not None else None


class TcpResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    host: str
    port: int
    success: bool
    elapsed_s: float
    timed_out: bool = False
    failure: Optional[str] = None


class SysctlCheck(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    expected: str
    actual: str
    matches: bool


class UlimitCheck(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    soft: Optional[int] = None  # None == unlimited
    hard: Optional[int] = None
    expected: int
    matches: bool

    @staticmethod
    def format_limit(value: Optional[int]) -> str:
        return "unlimited" if value is None else str(value)

    @property
    def actual(self) -> str:
        return self.format_limit(self.soft)


class EnvVar(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    value: str = ""

    @classmethod
    def parse(cls, entry: str) -> "EnvVar":
        name, _, value = entry.partition("=")
        return cls(name=name, value=value)
