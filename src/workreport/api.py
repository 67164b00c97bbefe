"""
FastAPI application exposing the workreport tools over HTTP.
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, FastAPI, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from . import __version__
from .config import Config
from .context import AppContext, create_context
from .export import content_disposition
from .query import DEFAULT_PAGE_SIZE, DEFAULT_PROJECT_SORT, ProjectFilterParams
from .schemas import (
    DailyReportCreate,
    DailyReportSearch,
    DailyReportUpdate,
    ProjectCreate,
    ProjectUpdate,
)
from .tools import parse_tags

logger = logging.getLogger(__name__)


def get_context(request: Request) -> AppContext:
    return request.app.state.context


def respond(result: Any, **payload) -> JSONResponse:
    """Map a tool result onto an HTTP response.

    Validation errors become 400, any other failure 500.
    """
    body = {"success": result.success, "message": result.message}
    errors = getattr(result, "validation_errors", None)
    if errors:
        body["errors"] = errors
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body)
    if not result.success:
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body)
    body.update(payload)
    return JSONResponse(status_code=status.HTTP_200_OK, content=body)


# ============================================================================
# System endpoints
# ============================================================================

system_router = APIRouter(tags=["System"])


@system_router.get("/test")
def test_connection(request: Request):
    """Check the spreadsheet connection."""
    result = get_context(request).setup.test_connection()
    return respond(result, title=result.title, sheets=result.sheets)


@system_router.get("/sheets/init")
def validate_structure(request: Request):
    """Report whether every required sheet exists."""
    result = get_context(request).setup.validate_structure()
    return respond(
        result,
        isValid=result.valid,
        existingSheets=result.existing_sheets,
        missingSheets=result.missing_sheets,
    )


@system_router.post("/sheets/init")
def initialize_spreadsheet(request: Request, sample: bool = Query(False)):
    """Create missing sheets and headers."""
    result = get_context(request).setup.initialize_spreadsheet(add_sample_data=sample)
    return respond(
        result,
        createdSheets=result.created_sheets,
        updatedHeaders=result.updated_headers,
        sampleDataAdded=result.sample_data_added,
    )


@system_router.post("/revalidate")
def revalidate(
    request: Request,
    tag: str = Query(""),
    tags: str = Query(""),
):
    """Invalidate cache tags given as ?tag=a or ?tags=a,b."""
    tag_list = parse_tags(tag, tags)
    result = get_context(request).cache_tools.revalidate(tag_list)
    if not result.success:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"success": False, "message": result.message},
        )
    return respond(result, revalidated=True, revalidatedTags=result.tags)


@system_router.post("/refresh")
def refresh(request: Request, return_data: bool = Query(False, alias="returnData")):
    """Invalidate every cache tag."""
    result = get_context(request).cache_tools.refresh_data(return_data=return_data)
    payload = {"tags": result.tags}
    if return_data:
        payload["data"] = result.data
    return respond(result, **payload)


# ============================================================================
# Daily report endpoints
# ============================================================================

daily_report_router = APIRouter(prefix="/daily-reports", tags=["Daily Reports"])


@daily_report_router.get("")
def list_daily_reports(request: Request, date: Optional[str] = Query(None)):
    """List the reports of one day (default today)."""
    result = get_context(request).daily_reports.list_daily_reports(date)
    return respond(result, data=[r.to_dict() for r in result.reports])


@daily_report_router.post("")
def create_daily_report(request: Request, body: DailyReportCreate):
    """Create a daily report."""
    result = get_context(request).daily_reports.create_daily_report(
        date=body.date,
        item=body.item,
        part_no=body.part_no,
        customer=body.customer,
        stage=body.stage,
        managers=body.managers,
        plan=body.plan,
        performance=body.performance,
        note=body.note,
    )
    return respond(result, id=result.report_id)


@daily_report_router.post("/search")
def search_daily_reports(request: Request, body: DailyReportSearch):
    """Search daily reports, one page at a time."""
    result = get_context(request).daily_reports.search_daily_reports(body.to_params())
    return respond(
        result,
        data=[r.to_dict() for r in result.reports],
        total=result.total,
        page=result.page,
        pageSize=result.page_size,
        pageCount=result.page_count,
    )


@daily_report_router.post("/export")
def export_daily_reports(request: Request, body: DailyReportSearch):
    """Download every matching report as CSV."""
    result = get_context(request).daily_reports.export_daily_reports_csv(body.to_params())
    if not result.success:
        return respond(result)
    return Response(
        content=result.content.encode("utf-8"),
        media_type="text/csv; charset=utf-8",
        headers={
            "Content-Disposition": content_disposition(result.filename),
            "X-Total-Count": str(result.row_count),
        },
    )


@daily_report_router.get("/search-options")
def search_options(request: Request):
    """Distinct values for the search form."""
    result = get_context(request).daily_reports.get_search_options()
    return respond(
        result,
        managers=result.managers,
        items=result.items,
        partNos=result.part_nos,
        stages=result.stages,
    )


@daily_report_router.put("/{report_id}")
def update_daily_report(request: Request, report_id: str, body: DailyReportUpdate):
    """Update date, plan, performance and note."""
    result = get_context(request).daily_reports.update_daily_report(
        report_id,
        date=body.date,
        plan=body.plan,
        performance=body.performance,
        note=body.note,
    )
    return respond(result, id=result.report_id)


@daily_report_router.delete("/{report_id}")
def delete_daily_report(request: Request, report_id: str):
    """Delete a daily report."""
    result = get_context(request).daily_reports.delete_daily_report(report_id)
    return respond(result, id=result.report_id)


# ============================================================================
# Project endpoints
# ============================================================================

project_router = APIRouter(prefix="/projects", tags=["Projects"])


@project_router.get("")
def list_projects(
    request: Request,
    item: str = Query(""),
    part_no: str = Query("", alias="partNo"),
    client: str = Query(""),
    affiliation: str = Query(""),
    model: str = Query(""),
    manager: str = Query(""),
    project_status: str = Query("", alias="status"),
    current_stage: str = Query("", alias="currentStage"),
    start_date: str = Query("", alias="startDate"),
    end_date: str = Query("", alias="endDate"),
    sort: str = Query(DEFAULT_PROJECT_SORT),
    page: int = Query(1),
    page_size: int = Query(DEFAULT_PAGE_SIZE, alias="pageSize"),
):
    """List projects with filters, sorting and pagination."""
    filters = ProjectFilterParams(
        item=item,
        part_no=part_no,
        client=client,
        affiliation=affiliation,
        model=model,
        manager=manager,
        status=project_status,
        current_stage=current_stage,
        start_date=start_date,
        end_date=end_date,
        sort=sort,
        page=page,
        page_size=page_size,
    )
    result = get_context(request).projects.list_projects(filters)
    return respond(
        result,
        data=[p.to_dict() for p in result.projects],
        total=result.total,
        page=result.page,
        pageSize=result.page_size,
        pageCount=result.page_count,
    )


@project_router.get("/active")
def list_active_projects(request: Request):
    """List projects in progress."""
    result = get_context(request).projects.list_active_projects()
    return respond(result, data=[p.to_dict() for p in result.projects])


@project_router.post("")
def create_project(request: Request, body: ProjectCreate):
    """Create a project."""
    schedule = body.schedule
    result = get_context(request).projects.create_project(
        status=body.status,
        customer=body.customer,
        item=body.item,
        affiliation=body.affiliation,
        model=body.model,
        part_no=body.part_no,
        managers=body.managers,
        development_stages=body.development_stages,
        schedule_start=schedule.start if schedule else None,
        schedule_end=schedule.end if schedule else None,
        selling_price=body.selling_price,
        material_cost=body.material_cost,
        material_cost_ratio=body.material_cost_ratio,
    )
    return respond(result, id=result.project_id, projectNo=result.project_no)


@project_router.get("/{project_id}")
def get_project(request: Request, project_id: str):
    """Get one project."""
    result = get_context(request).projects.get_project(project_id)
    return respond(result, data=result.project.to_dict() if result.project else None)


@project_router.put("/{project_id}")
def update_project(request: Request, project_id: str, body: ProjectUpdate):
    """Update a project and record its history."""
    schedule = body.schedule
    result = get_context(request).projects.update_project(
        project_id,
        status=body.status,
        customer=body.customer,
        affiliation=body.affiliation,
        model=body.model,
        item=body.item,
        part_no=body.part_no,
        managers=body.managers,
        development_stages=body.development_stages,
        current_stage=body.current_stage,
        schedule_start=schedule.start if schedule else None,
        schedule_end=schedule.end if schedule else None,
        progress=body.progress,
        issues=body.issues,
        issue_resolved=body.issue_resolved,
        issue_resolution_details=body.issue_resolution_details,
        notes=body.notes,
        additional_plan=body.additional_plan,
        selling_price=body.selling_price,
        material_cost=body.material_cost,
        material_cost_ratio=body.material_cost_ratio,
        force_history=body.force_history,
    )
    return respond(
        result,
        id=result.project_id,
        projectNo=result.project_no,
        historyRecorded=result.history_recorded,
    )


@project_router.get("/{project_id}/history")
def get_project_history(request: Request, project_id: str):
    """History rows of a project, newest first."""
    result = get_context(request).projects.get_project_history(project_id)
    return respond(result, data=[h.to_dict() for h in result.history])


# ============================================================================
# Reference data endpoints
# ============================================================================

reference_router = APIRouter(tags=["Reference Data"])


@reference_router.get("/managers")
def get_managers(request: Request):
    """List managers."""
    result = get_context(request).reference.get_managers()
    return respond(result, data=[m.to_dict() for m in result.managers])


@reference_router.get("/item-data")
def get_item_data(request: Request):
    """Choice lists for the project form."""
    result = get_context(request).reference.get_item_data()
    return respond(result, data=result.item_data.to_dict())


api_router = APIRouter()
api_router.include_router(system_router)
api_router.include_router(daily_report_router)
api_router.include_router(project_router)
api_router.include_router(reference_router)


# ============================================================================
# Application factory
# ============================================================================

def create_app(
    config: Optional[Config] = None,
    context: Optional[AppContext] = None,
) -> FastAPI:
    """Create the FastAPI application.

    Args:
        config: Configuration (loaded from the default locations if omitted)
        context: Prebuilt context; built from config if omitted

    Raises:
        ConfigurationError: if a required Google parameter is missing
    """
    if context is None:
        config = config or Config.load()
        context = create_context(config)
    config = context.config

    app = FastAPI(
        title="workreport",
        version=__version__,
        debug=config.server.debug,
    )
    app.state.context = context

    if config.server.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.server.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Answer malformed requests with 400 and readable messages"""
        error_messages = []
        for error in exc.errors():
            field = " -> ".join(str(x) for x in error["loc"])
            error_messages.append(f"{field}: {error['msg']}")

        logger.warning(f"Validation error: {error_messages}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "success": False,
                "message": "요청 형식이 올바르지 않습니다.",
                "errors": error_messages,
            },
        )

    app.include_router(api_router, prefix="/api")

    @app.get("/")
    def read_root():
        """Root endpoint for health check."""
        return {"status": "ok", "app_name": "workreport", "version": __version__}

    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


def main():
    """Run the HTTP API with uvicorn."""
    import uvicorn

    config = Config.load()
    config.setup_logging()

    errors = config.validate()
    if errors:
        for error in errors:
            logger.error(f"Config error: {error}")
        raise SystemExit(1)

    app = create_app(config)
    logger.info(f"Starting workreport API on {config.server.host}:{config.server.port}")
    uvicorn.run(
        app,
        host=config.server.host,
        port=config.server.port,
        log_level=config.log.level.lower(),
    )


if __name__ == "__main__":
    main()
