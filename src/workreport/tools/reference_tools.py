"""Reference data tools (managers, item catalog)."""

import logging

from ..models import ItemDataResult, ManagersResult
from ..repositories import ItemDataRepository, ManagerRepository

logger = logging.getLogger(__name__)


class ReferenceTools:
    """Tools for the lists that feed form choices."""

    def __init__(
        self,
        manager_repository: ManagerRepository,
        item_data_repository: ItemDataRepository,
    ):
        self.manager_repository = manager_repository
        self.item_data_repository = item_data_repository

    def get_managers(self) -> ManagersResult:
        """List managers (rank and name)."""
        try:
            managers = self.manager_repository.get_all()
        except Exception as e:
            logger.error(f"Failed to load managers: {e}")
            return ManagersResult(
                success=False,
                message="담당자 목록을 불러오는 중 오류가 발생했습니다.",
            )

        return ManagersResult(
            success=True,
            managers=managers,
            message=f"담당자 {len(managers)}명",
        )

    def get_item_data(self) -> ItemDataResult:
        """Get the item catalog; never fails, falls back to defaults."""
        item_data = self.item_data_repository.get()
        message = "항목정보를 불러왔습니다."
        if item_data.fallback_fields:
            message = f"기본값 사용: {', '.join(item_data.fallback_fields)}"
        return ItemDataResult(success=True, item_data=item_data, message=message)
