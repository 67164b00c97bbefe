"""Cache invalidation tools."""

import logging
from datetime import date
from typing import Iterable

from ..cache import ALL_TAGS, TaggedCache
from ..models import RefreshResult, RevalidateResult
from ..repositories import (
    DailyReportRepository,
    ItemDataRepository,
    ManagerRepository,
    ProjectRepository,
)

logger = logging.getLogger(__name__)


def parse_tags(tag: str = "", tags: str = "") -> list[str]:
    """Collect tag names from a single tag and a comma-separated list."""
    collected = []
    if tag and tag.strip():
        collected.append(tag.strip())
    if tags:
        collected.extend(t.strip() for t in tags.split(",") if t.strip())
    return collected


class CacheTools:
    """Tools for dropping cached sheet reads."""

    def __init__(
        self,
        cache: TaggedCache,
        daily_report_repository: DailyReportRepository,
        project_repository: ProjectRepository,
        manager_repository: ManagerRepository,
        item_data_repository: ItemDataRepository,
    ):
        self.cache = cache
        self.daily_report_repository = daily_report_repository
        self.project_repository = project_repository
        self.manager_repository = manager_repository
        self.item_data_repository = item_data_repository

    def revalidate(self, tags: Iterable[str]) -> RevalidateResult:
        """Invalidate the named tags.

        Unknown tag names are accepted; they match nothing.
        """
        tags = [t for t in tags if t]
        if not tags:
            message = "무효화할 태그를 지정해주세요. (?tag=태그명 또는 ?tags=태그1,태그2,태그3)"
            return RevalidateResult(success=False, message=message)

        self.cache.invalidate_tags(*tags)
        return RevalidateResult(
            success=True,
            tags=tags,
            message=f"{', '.join(tags)} 태그의 캐시가 성공적으로 무효화되었습니다.",
        )

    def refresh_data(self, return_data: bool = False) -> RefreshResult:
        """Invalidate every tag, optionally reloading the main data sets."""
        self.cache.invalidate_tags(*ALL_TAGS)
        if not return_data:
            return RefreshResult(
                success=True,
                tags=list(ALL_TAGS),
                message="데이터가 성공적으로 업데이트되었습니다.",
            )

        try:
            today = date.today().isoformat()
            data = {
                "projects": [p.to_dict() for p in self.project_repository.get_all()],
                "itemData": self.item_data_repository.get().to_dict(),
                "managers": [m.to_dict() for m in self.manager_repository.get_all()],
                "dailyReports": [
                    r.to_dict() for r in self.daily_report_repository.get_by_date(today)
                ],
            }
        except Exception as e:
            logger.error(f"Failed to reload data: {e}")
            return RefreshResult(
                success=False,
                tags=list(ALL_TAGS),
                message=f"데이터 업데이트에 실패했습니다. ({e})",
            )

        return RefreshResult(
            success=True,
            tags=list(ALL_TAGS),
            data=data,
            message="데이터가 성공적으로 업데이트되었습니다.",
        )
