"""
API models for the Server Name Decoder service.

Response models use the external field names (Datacenter, Name, FQDN, ...)
that reporting scripts consume; the Python side keeps snake_case.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# --- Query Models ---

class DecodeQuery(BaseModel):
    name: str                # bare label or FQDN


class BatchDecodeQuery(BaseModel):
    names: list[str] = Field(default_factory=list)
    max_workers: Optional[int] = Field(default=None, ge=1, le=64)


class InventoryReportQuery(BaseModel):
    path: str                # inventory file, relative to the configured inventory directory


# --- Result Models ---

class HostNameRecordModel(BaseModel):
    """Decoded server name, serialized with the external field names."""
    model_config = ConfigDict(populate_by_name=True)

    datacenter: str = Field(alias="Datacenter")
    name: str = Field(alias="Name")
    domain: str = Field(alias="Domain")
    fqdn: str = Field(alias="FQDN")
    server_count_id: str = Field(alias="ServerCountID")
    environment: str = Field(alias="Environment")
    role: str = Field(alias="Role")


class DecodeOutcome(BaseModel):
    name: str
    ok: bool
    record: Optional[HostNameRecordModel] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None   # 'InvalidInput', 'UnrecognizedNamingConvention'


class BatchDecodeResult(BaseModel):
    results: list[DecodeOutcome]
    decoded: int
    failed: int


class RuleInfo(BaseModel):
    order: int
    name: str
    slots: list[str]
    pattern: str


class TablesInfo(BaseModel):
    datacenters: dict[str, str]
    domain_suffixes: dict[str, str]
    environments: dict[str, str]
    roles: dict[str, str]
    default_datacenter: str
    base_domain: Optional[str] = None
