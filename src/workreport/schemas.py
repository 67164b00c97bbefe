"""
Pydantic request schemas for the HTTP API.
JSON bodies use camelCase keys; snake_case is accepted too.
"""

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .query import DEFAULT_PAGE_SIZE, DailyReportSearchParams


class CamelModel(BaseModel):
    """Base schema with camelCase aliases"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================================
# Daily Report Schemas
# ============================================================================

class DailyReportCreate(CamelModel):
    """Schema for creating a daily report"""
    date: str = ""
    item: str = ""
    part_no: str = ""
    customer: str = ""
    stage: str = ""
    managers: Union[List[str], str] = Field(default_factory=list)
    plan: str = ""
    performance: str = ""
    note: str = ""


class DailyReportUpdate(CamelModel):
    """Schema for updating a daily report; omitted fields are kept"""
    date: Optional[str] = None
    plan: Optional[str] = None
    performance: Optional[str] = None
    note: Optional[str] = None


class DailyReportSearch(CamelModel):
    """Schema for daily report search and export"""
    query: str = ""
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    managers: List[str] = Field(default_factory=list)
    items: List[str] = Field(default_factory=list)
    part_nos: List[str] = Field(default_factory=list)
    stages: List[str] = Field(default_factory=list)
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    sort_by: Optional[str] = None
    sort_direction: str = "desc"

    def to_params(self) -> DailyReportSearchParams:
        return DailyReportSearchParams(
            query=self.query,
            start_date=self.start_date or None,
            end_date=self.end_date or None,
            managers=list(self.managers),
            items=list(self.items),
            part_nos=list(self.part_nos),
            stages=list(self.stages),
            page=self.page,
            page_size=self.page_size,
            sort_by=self.sort_by or None,
            sort_direction=self.sort_direction,
        )


# ============================================================================
# Project Schemas
# ============================================================================

class Schedule(CamelModel):
    """Overall schedule of a project"""
    start: Optional[str] = None
    end: Optional[str] = None


class ProjectCreate(CamelModel):
    """Schema for creating a project"""
    status: str = "progress"
    customer: str = ""
    affiliation: str = ""
    model: str = ""
    item: str = ""
    part_no: str = ""
    managers: List[str] = Field(default_factory=list)
    development_stages: List[str] = Field(default_factory=list)
    schedule: Optional[Schedule] = None
    selling_price: Optional[float] = None
    material_cost: Optional[float] = None
    material_cost_ratio: Optional[float] = None


class ProjectUpdate(CamelModel):
    """Schema for updating a project; omitted fields are kept"""
    status: Optional[str] = None
    customer: Optional[str] = None
    affiliation: Optional[str] = None
    model: Optional[str] = None
    item: Optional[str] = None
    part_no: Optional[str] = None
    managers: Optional[List[str]] = None
    development_stages: Optional[List[str]] = None
    current_stage: Optional[str] = None
    schedule: Optional[Schedule] = None
    progress: Optional[str] = None
    issues: Optional[str] = None
    issue_resolved: bool = False
    issue_resolution_details: str = ""
    notes: Optional[str] = None
    additional_plan: Optional[str] = None
    selling_price: Optional[float] = None
    material_cost: Optional[float] = None
    material_cost_ratio: Optional[float] = None
    force_history: bool = False
