"""workreport MCP Server."""

import asyncio
import json
import logging
import os
from typing import Optional

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from .config import Config, load_config
from .context import AppContext, create_context
from .query import DailyReportSearchParams, ProjectFilterParams

logger = logging.getLogger(__name__)

_SEARCH_PROPERTIES = {
    "query": {
        "type": "string",
        "description": "검색어 (; 또는 , 로 여러 개 입력, ITEM/단계/담당자 중 하나라도 포함하면 일치)",
    },
    "start_date": {"type": "string", "description": "시작일 (YYYY-MM-DD, 포함)"},
    "end_date": {"type": "string", "description": "종료일 (YYYY-MM-DD, 포함)"},
    "managers": {"type": "array", "items": {"type": "string"}, "description": "담당자 목록"},
    "items": {"type": "array", "items": {"type": "string"}, "description": "ITEM 목록"},
    "part_nos": {"type": "array", "items": {"type": "string"}, "description": "PART NO 목록"},
    "stages": {"type": "array", "items": {"type": "string"}, "description": "단계 목록"},
    "sort_by": {"type": "string", "description": "정렬 필드 (기본: date)"},
    "sort_direction": {"type": "string", "enum": ["asc", "desc"], "default": "desc"},
}

# Tool definitions
TOOLS = [
    # Setup
    Tool(
        name="test_connection",
        description="Google 스프레드시트 연결을 확인합니다. 문서 제목과 시트 목록을 반환합니다.",
        inputSchema={"type": "object", "properties": {}},
    ),
    Tool(
        name="validate_structure",
        description="필요한 시트가 모두 있는지 검사합니다.",
        inputSchema={"type": "object", "properties": {}},
    ),
    Tool(
        name="initialize_spreadsheet",
        description="없는 시트를 만들고 헤더 행을 작성합니다.",
        inputSchema={
            "type": "object",
            "properties": {
                "add_sample_data": {
                    "type": "boolean",
                    "description": "새로 만든 시트에 샘플 데이터를 추가할지 여부",
                    "default": False,
                },
            },
        },
    ),
    Tool(
        name="backfill_row_ids",
        description="ID가 없는 업무일지/프로젝트 행에 고유 ID를 부여합니다.",
        inputSchema={"type": "object", "properties": {}},
    ),
    # Daily reports
    Tool(
        name="list_daily_reports",
        description="특정 날짜의 업무일지를 조회합니다. 날짜를 생략하면 오늘입니다.",
        inputSchema={
            "type": "object",
            "properties": {
                "date": {"type": "string", "description": "날짜 (YYYY-MM-DD)"},
            },
        },
    ),
    Tool(
        name="create_daily_report",
        description="업무일지를 작성합니다.",
        inputSchema={
            "type": "object",
            "properties": {
                "date": {"type": "string", "description": "날짜 (YYYY-MM-DD)"},
                "item": {"type": "string", "description": "ITEM"},
                "part_no": {"type": "string", "description": "PART NO"},
                "customer": {"type": "string", "description": "고객사"},
                "stage": {"type": "string", "description": "단계"},
                "managers": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "담당자 목록",
                },
                "plan": {"type": "string", "description": "계획"},
                "performance": {"type": "string", "description": "실적"},
                "note": {"type": "string", "description": "비고"},
            },
            "required": ["date", "item", "customer", "stage", "managers"],
        },
    ),
    Tool(
        name="search_daily_reports",
        description="업무일지를 검색합니다. 결과는 페이지 단위로 반환됩니다.",
        inputSchema={
            "type": "object",
            "properties": {
                **_SEARCH_PROPERTIES,
                "page": {"type": "integer", "default": 1},
                "page_size": {"type": "integer", "default": 10},
            },
        },
    ),
    Tool(
        name="export_daily_reports_csv",
        description="검색 조건에 맞는 모든 업무일지를 CSV 텍스트로 내보냅니다.",
        inputSchema={"type": "object", "properties": dict(_SEARCH_PROPERTIES)},
    ),
    Tool(
        name="get_search_options",
        description="업무일지 검색에 쓸 담당자/ITEM/PART NO/단계 목록을 반환합니다.",
        inputSchema={"type": "object", "properties": {}},
    ),
    Tool(
        name="update_daily_report",
        description="업무일지의 날짜, 계획, 실적, 비고를 수정합니다.",
        inputSchema={
            "type": "object",
            "properties": {
                "report_id": {"type": "string", "description": "업무일지 ID"},
                "date": {"type": "string"},
                "plan": {"type": "string"},
                "performance": {"type": "string"},
                "note": {"type": "string"},
            },
            "required": ["report_id"],
        },
    ),
    Tool(
        name="delete_daily_report",
        description="업무일지를 삭제합니다.",
        inputSchema={
            "type": "object",
            "properties": {
                "report_id": {"type": "string", "description": "업무일지 ID"},
            },
            "required": ["report_id"],
        },
    ),
    # Projects
    Tool(
        name="list_projects",
        description="프로젝트 목록을 필터/정렬/페이지 조건으로 조회합니다.",
        inputSchema={
            "type": "object",
            "properties": {
                "item": {"type": "string"},
                "part_no": {"type": "string"},
                "client": {"type": "string"},
                "affiliation": {"type": "string"},
                "model": {"type": "string"},
                "manager": {"type": "string"},
                "status": {"type": "string", "description": "progress / hold / completed"},
                "current_stage": {"type": "string"},
                "start_date": {"type": "string", "description": "대일정 시작일 하한"},
                "end_date": {"type": "string", "description": "대일정 종료일 상한"},
                "sort": {
                    "type": "string",
                    "description": "정렬 (no|client|item|startDate|endDate)-(asc|desc)",
                    "default": "no-desc",
                },
                "page": {"type": "integer", "default": 1},
                "page_size": {"type": "integer", "default": 10},
            },
        },
    ),
    Tool(
        name="list_active_projects",
        description="진행 중인 프로젝트를 조회합니다.",
        inputSchema={"type": "object", "properties": {}},
    ),
    Tool(
        name="get_project",
        description="프로젝트 한 건을 조회합니다.",
        inputSchema={
            "type": "object",
            "properties": {"project_id": {"type": "string"}},
            "required": ["project_id"],
        },
    ),
    Tool(
        name="create_project",
        description="프로젝트를 생성합니다. NO는 자동으로 부여됩니다.",
        inputSchema={
            "type": "object",
            "properties": {
                "status": {"type": "string", "enum": ["progress", "hold", "completed"]},
                "customer": {"type": "string"},
                "item": {"type": "string"},
                "affiliation": {"type": "string"},
                "model": {"type": "string"},
                "part_no": {"type": "string"},
                "managers": {"type": "array", "items": {"type": "string"}},
                "development_stages": {"type": "array", "items": {"type": "string"}},
                "schedule_start": {"type": "string"},
                "schedule_end": {"type": "string"},
                "selling_price": {"type": "number"},
                "material_cost": {"type": "number"},
                "material_cost_ratio": {"type": "number"},
            },
            "required": ["customer", "item"],
        },
    ),
    Tool(
        name="update_project",
        description="프로젝트를 수정하고 변경 내역을 이력 시트에 기록합니다. 생략한 항목은 유지됩니다.",
        inputSchema={
            "type": "object",
            "properties": {
                "project_id": {"type": "string"},
                "status": {"type": "string", "enum": ["progress", "hold", "completed"]},
                "customer": {"type": "string"},
                "item": {"type": "string"},
                "affiliation": {"type": "string"},
                "model": {"type": "string"},
                "part_no": {"type": "string"},
                "managers": {"type": "array", "items": {"type": "string"}},
                "development_stages": {"type": "array", "items": {"type": "string"}},
                "current_stage": {"type": "string"},
                "schedule_start": {"type": "string"},
                "schedule_end": {"type": "string"},
                "progress": {"type": "string", "description": "업무진행사항"},
                "issues": {"type": "string", "description": "애로사항"},
                "issue_resolved": {"type": "boolean", "default": False},
                "issue_resolution_details": {"type": "string"},
                "notes": {"type": "string"},
                "additional_plan": {"type": "string"},
                "selling_price": {"type": "number"},
                "material_cost": {"type": "number"},
                "material_cost_ratio": {"type": "number"},
                "force_history": {
                    "type": "boolean",
                    "description": "변경이 없어도 이력을 기록",
                    "default": False,
                },
            },
            "required": ["project_id"],
        },
    ),
    Tool(
        name="get_project_history",
        description="프로젝트의 변경 이력을 최신순으로 조회합니다.",
        inputSchema={
            "type": "object",
            "properties": {"project_id": {"type": "string"}},
            "required": ["project_id"],
        },
    ),
    # Reference data
    Tool(
        name="get_managers",
        description="담당자 목록을 조회합니다.",
        inputSchema={"type": "object", "properties": {}},
    ),
    Tool(
        name="get_item_data",
        description="개발업무단계/소속/모델/고객사 선택 목록을 조회합니다.",
        inputSchema={"type": "object", "properties": {}},
    ),
    # Cache
    Tool(
        name="revalidate",
        description="지정한 태그의 캐시를 무효화합니다.",
        inputSchema={
            "type": "object",
            "properties": {
                "tags": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "daily-reports, projects, managers, item-data, project-history",
                },
            },
            "required": ["tags"],
        },
    ),
    Tool(
        name="refresh_data",
        description="모든 캐시를 무효화합니다.",
        inputSchema={
            "type": "object",
            "properties": {
                "return_data": {"type": "boolean", "default": False},
            },
        },
    ),
]

_UPDATE_PROJECT_FIELDS = (
    "status", "customer", "item", "affiliation", "model", "part_no", "managers",
    "development_stages", "current_stage", "schedule_start", "schedule_end",
    "progress", "issues", "issue_resolved", "issue_resolution_details", "notes",
    "additional_plan", "selling_price", "material_cost", "material_cost_ratio",
    "force_history",
)

_CREATE_PROJECT_FIELDS = (
    "status", "affiliation", "model", "part_no", "managers", "development_stages",
    "schedule_start", "schedule_end", "selling_price", "material_cost",
    "material_cost_ratio",
)


def _search_params(args: dict) -> DailyReportSearchParams:
    return DailyReportSearchParams(
        query=args.get("query", ""),
        start_date=args.get("start_date"),
        end_date=args.get("end_date"),
        managers=args.get("managers", []),
        items=args.get("items", []),
        part_nos=args.get("part_nos", []),
        stages=args.get("stages", []),
        page=args.get("page", 1),
        page_size=args.get("page_size", 10),
        sort_by=args.get("sort_by"),
        sort_direction=args.get("sort_direction", "desc"),
    )


class WorkReportServer:
    """workreport MCP Server."""

    def __init__(self, context: Optional[AppContext] = None, config: Optional[Config] = None):
        """Initialize the server.

        Args:
            context: Prebuilt application context (built lazily if omitted)
            config: Configuration used to build the context
        """
        self.server = Server("workreport")
        self.config = config
        self._context = context

        self._register_handlers()

    def _register_handlers(self):
        """Register MCP handlers."""

        @self.server.list_tools()
        async def list_tools() -> list[Tool]:
            return TOOLS

        @self.server.call_tool()
        async def call_tool(name: str, arguments: dict) -> list[TextContent]:
            return await self._handle_tool_call(name, arguments)

    @property
    def context(self) -> AppContext:
        """Application context, created on first use."""
        if self._context is None:
            config = self.config or Config.load()
            self._context = create_context(config)
        return self._context

    async def _handle_tool_call(
        self,
        name: str,
        arguments: dict,
    ) -> list[TextContent]:
        """Handle a tool call."""
        try:
            result = await self._dispatch_tool(name, arguments or {})
            return [TextContent(type="text", text=json.dumps(result, ensure_ascii=False, default=str))]
        except Exception as e:
            logger.exception(f"Tool call failed: {name}")
            return [TextContent(type="text", text=json.dumps({
                "success": False,
                "error": str(e),
            }, ensure_ascii=False))]

    async def _dispatch_tool(self, name: str, args: dict) -> dict:
        """Dispatch tool call to appropriate handler."""
        ctx = self.context

        # Setup tools
        if name == "test_connection":
            result = ctx.setup.test_connection()
            return {
                "success": result.success,
                "title": result.title,
                "sheets": result.sheets,
                "message": result.message,
            }

        elif name == "validate_structure":
            result = ctx.setup.validate_structure()
            return {
                "success": result.success,
                "valid": result.valid,
                "existing_sheets": result.existing_sheets,
                "missing_sheets": result.missing_sheets,
                "message": result.message,
            }

        elif name == "initialize_spreadsheet":
            result = ctx.setup.initialize_spreadsheet(
                add_sample_data=args.get("add_sample_data", False),
            )
            return {
                "success": result.success,
                "created_sheets": result.created_sheets,
                "updated_headers": result.updated_headers,
                "sample_data_added": result.sample_data_added,
                "message": result.message,
            }

        elif name == "backfill_row_ids":
            result = ctx.setup.backfill_row_ids()
            return {
                "success": result.success,
                "daily_reports_updated": result.daily_reports_updated,
                "projects_updated": result.projects_updated,
                "message": result.message,
            }

        # Daily report tools
        elif name == "list_daily_reports":
            result = ctx.daily_reports.list_daily_reports(args.get("date"))
            return {
                "success": result.success,
                "reports": [r.to_dict() for r in result.reports],
                "validation_errors": result.validation_errors,
                "message": result.message,
            }

        elif name == "create_daily_report":
            result = ctx.daily_reports.create_daily_report(
                date=args.get("date", ""),
                item=args.get("item", ""),
                part_no=args.get("part_no", ""),
                customer=args.get("customer", ""),
                stage=args.get("stage", ""),
                managers=args.get("managers", []),
                plan=args.get("plan", ""),
                performance=args.get("performance", ""),
                note=args.get("note", ""),
            )
            return {
                "success": result.success,
                "report_id": result.report_id,
                "validation_errors": result.validation_errors,
                "message": result.message,
            }

        elif name == "search_daily_reports":
            result = ctx.daily_reports.search_daily_reports(_search_params(args))
            return {
                "success": result.success,
                "reports": [r.to_dict() for r in result.reports],
                "total": result.total,
                "page": result.page,
                "page_size": result.page_size,
                "page_count": result.page_count,
                "validation_errors": result.validation_errors,
                "message": result.message,
            }

        elif name == "export_daily_reports_csv":
            result = ctx.daily_reports.export_daily_reports_csv(_search_params(args))
            return {
                "success": result.success,
                "filename": result.filename,
                "row_count": result.row_count,
                "content": result.content,
                "validation_errors": result.validation_errors,
                "message": result.message,
            }

        elif name == "get_search_options":
            result = ctx.daily_reports.get_search_options()
            return {
                "success": result.success,
                "managers": result.managers,
                "items": result.items,
                "part_nos": result.part_nos,
                "stages": result.stages,
                "message": result.message,
            }

        elif name == "update_daily_report":
            result = ctx.daily_reports.update_daily_report(
                report_id=args["report_id"],
                date=args.get("date"),
                plan=args.get("plan"),
                performance=args.get("performance"),
                note=args.get("note"),
            )
            return {
                "success": result.success,
                "report_id": result.report_id,
                "validation_errors": result.validation_errors,
                "message": result.message,
            }

        elif name == "delete_daily_report":
            result = ctx.daily_reports.delete_daily_report(args["report_id"])
            return {
                "success": result.success,
                "report_id": result.report_id,
                "validation_errors": result.validation_errors,
                "message": result.message,
            }

        # Project tools
        elif name == "list_projects":
            filters = ProjectFilterParams(
                **{
                    k: args[k]
                    for k in (
                        "item", "part_no", "client", "affiliation", "model", "manager",
                        "status", "current_stage", "start_date", "end_date", "sort",
                        "page", "page_size",
                    )
                    if k in args
                }
            )
            result = ctx.projects.list_projects(filters)
            return {
                "success": result.success,
                "projects": [p.to_dict() for p in result.projects],
                "total": result.total,
                "page": result.page,
                "page_size": result.page_size,
                "page_count": result.page_count,
                "validation_errors": result.validation_errors,
                "message": result.message,
            }

        elif name == "list_active_projects":
            result = ctx.projects.list_active_projects()
            return {
                "success": result.success,
                "projects": [p.to_dict() for p in result.projects],
                "total": result.total,
                "message": result.message,
            }

        elif name == "get_project":
            result = ctx.projects.get_project(args["project_id"])
            return {
                "success": result.success,
                "project": result.project.to_dict() if result.project else None,
                "message": result.message,
            }

        elif name == "create_project":
            result = ctx.projects.create_project(
                customer=args.get("customer", ""),
                item=args.get("item", ""),
                **{k: args[k] for k in _CREATE_PROJECT_FIELDS if k in args},
            )
            return {
                "success": result.success,
                "project_id": result.project_id,
                "project_no": result.project_no,
                "validation_errors": result.validation_errors,
                "message": result.message,
            }

        elif name == "update_project":
            result = ctx.projects.update_project(
                args["project_id"],
                **{k: args[k] for k in _UPDATE_PROJECT_FIELDS if k in args},
            )
            return {
                "success": result.success,
                "project_id": result.project_id,
                "project_no": result.project_no,
                "history_recorded": result.history_recorded,
                "validation_errors": result.validation_errors,
                "message": result.message,
            }

        elif name == "get_project_history":
            result = ctx.projects.get_project_history(args["project_id"])
            return {
                "success": result.success,
                "history": [h.to_dict() for h in result.history],
                "message": result.message,
            }

        # Reference data tools
        elif name == "get_managers":
            result = ctx.reference.get_managers()
            return {
                "success": result.success,
                "managers": [m.to_dict() for m in result.managers],
                "message": result.message,
            }

        elif name == "get_item_data":
            result = ctx.reference.get_item_data()
            return {
                "success": result.success,
                "item_data": result.item_data.to_dict() if result.item_data else None,
                "message": result.message,
            }

        # Cache tools
        elif name == "revalidate":
            result = ctx.cache_tools.revalidate(args.get("tags", []))
            return {
                "success": result.success,
                "tags": result.tags,
                "message": result.message,
            }

        elif name == "refresh_data":
            return_data = args.get("return_data", False)
            result = ctx.cache_tools.refresh_data(return_data=return_data)
            response = {
                "success": result.success,
                "tags": result.tags,
                "message": result.message,
            }
            if return_data:
                response["data"] = result.data
            return response

        else:
            return {"success": False, "error": f"Unknown tool: {name}"}

    async def run(self):
        """Run the server."""
        async with stdio_server() as (read_stream, write_stream):
            await self.server.run(
                read_stream,
                write_stream,
                self.server.create_initialization_options(),
            )


def main():
    """Entry point."""
    # Load config first to setup logging correctly
    config = load_config(os.environ.get("WORKREPORT_CONFIG"))
    config.setup_logging()

    # Fail at startup rather than on the first tool call
    config.require_google()

    server = WorkReportServer(config=config)
    asyncio.run(server.run())


if __name__ == "__main__":
    main()
