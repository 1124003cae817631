"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class WireModel(BaseModel):
    """Python field names, camelCase on the wire."""

    model_config = ConfigDict(populate_by_name=True)


class SiteStatus(str, Enum):
    """Activity classification shown next to each site."""

    ok = "ok"  # reading within the last hour
    warn = "warn"  # reading within the last 24 hours
    stale = "stale"  # nothing for 24 hours


class ThresholdRange(WireModel):
    """Alert bounds for one site. None means no limit on that side."""

    mrplel: Optional[float] = Field(default=None, description="He pressure low (psi).")
    mrpleh: Optional[float] = Field(default=None, description="He pressure high (psi).")
    mrlevl: Optional[float] = Field(default=None, description="He level low (%).")
    mrlevh: Optional[float] = Field(default=None, description="He level high (%).")


class DashboardMeta(WireModel):
    now_ms: int = Field(..., alias="nowMs")
    since_1h_ms: int = Field(..., alias="since1hMs")
    since_24h_ms: int = Field(..., alias="since24hMs")


class DashboardStats(WireModel):
    total_sites: int = Field(..., alias="totalSites", ge=0)
    active_1h: int = Field(..., alias="active1h", ge=0)
    stale_24h: int = Field(..., alias="stale24h", ge=0)
    total_24h_records: int = Field(..., alias="total24hRecords", ge=0)


class DashboardRow(WireModel):
    """One site on the dashboard."""

    site_db: str = Field(..., alias="siteDb")
    site_slug: str = Field(..., alias="siteSlug")
    name: Optional[str] = None
    last_at: Optional[datetime] = Field(default=None, alias="lastAt")
    lag_min: Optional[int] = Field(default=None, alias="lagMin")
    count_1h: int = Field(0, alias="count1h", ge=0)
    count_24h: int = Field(0, alias="count24h", ge=0)
    he_psi: Optional[float] = Field(default=None, alias="hePsi")
    he_pct: Optional[float] = Field(default=None, alias="hePct")
    status: SiteStatus = SiteStatus.stale
    he_psi_out_of_range: bool = Field(False, alias="hePsiOutOfRange")
    he_pct_out_of_range: bool = Field(False, alias="hePctOutOfRange")


class DashboardResponse(WireModel):
    meta: DashboardMeta
    stats: DashboardStats
    rows: List[DashboardRow] = Field(default_factory=list)
    ctrl: Dict[str, ThresholdRange] = Field(default_factory=dict)
    ctrl_default: Optional[ThresholdRange] = Field(default=None, alias="ctrlDefault")


class SiteRef(WireModel):
    site_db: str = Field(..., alias="siteDb")
    name: Optional[str] = None


class SiteSearchHit(SiteRef):
    site_slug: str = Field(..., alias="siteSlug")


class SiteDetailRow(WireModel):
    """One reading, sensor fields already coerced to numbers."""

    index: int
    date: Optional[datetime] = None
    hepres: Optional[float] = None
    heleve: Optional[float] = None
    actemp: Optional[float] = None
    achumi: Optional[float] = None


class SiteDetailResponse(WireModel):
    slug: str
    site: SiteRef
    take: int
    last_at: Optional[datetime] = Field(default=None, alias="lastAt")
    rows: List[SiteDetailRow] = Field(default_factory=list)


class MessageResponse(BaseModel):
    message: str
