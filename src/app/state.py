"""
View/Selection State Machine.

렌더링과 분리된 순수 상태 모듈. 프레젠테이션 계층은 subscribe 로 구독만 한다.

상태:
- listing: 전체 목록
- composing: 새 프로젝트 입력 (AI / manual 모드)
- viewing: 선택된 프로젝트 상세 (+ editing 하위 상태)

전이:
- listing → composing (open_composer)
- composing → listing (cancel_compose) | viewing (submit 성공, 새 레코드 선택)
- viewing → listing (back, 선택된 레코드 삭제)
- viewing ⇄ editing (start_edit / cancel_edit / save_edit)

동시성:
- store 변경과 전이는 동기, 끝까지 실행
- suspend 지점은 submit 안의 생성 await 뿐
- 생성 중 재제출은 GENERATION_IN_PROGRESS 로 거절
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace

from src.app.services.projects import ProjectService
from src.domain.constants import (
    EDIT_MISSING_FIELDS_MESSAGE,
    GENERATION_FAILED_MESSAGE,
    MISSING_FIELDS_MESSAGE,
)
from src.domain.errors import ErrorCodes, ProjectRejectError
from src.domain.schemas import AppView, CreationMode, Project

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ViewState:
    """구독자에게 전달되는 상태 스냅샷."""
    view: AppView = AppView.LISTING
    selected_id: str | None = None
    is_editing: bool = False
    mode: CreationMode = CreationMode.AI
    is_generating: bool = False
    error_message: str | None = None


Listener = Callable[[ViewState], None]


class AppStateMachine:
    """
    화면 상태 + store 조작.

    Usage:
        machine = AppStateMachine(service)
        machine.open_composer()
        project = await machine.submit("FitTracker", "Track workouts")
        machine.state.view  # AppView.VIEWING
    """

    def __init__(self, service: ProjectService):
        self.service = service
        self._state = ViewState()
        self._listeners: list[Listener] = []

    # =========================================================================
    # Subscription
    # =========================================================================

    @property
    def state(self) -> ViewState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        상태 변경 구독.

        Returns:
            구독 해제 함수
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set(self, **changes: object) -> None:
        self._state = replace(self._state, **changes)
        for listener in list(self._listeners):
            listener(self._state)

    # =========================================================================
    # Queries
    # =========================================================================

    @property
    def projects(self) -> list[Project]:
        return self.service.store.projects

    def current_project(self) -> Project | None:
        """선택된 레코드 (없으면 None)."""
        if self._state.selected_id is None:
            return None
        return self.service.store.get(self._state.selected_id)

    def find(self, project_id: str) -> Project:
        """
        id 로 조회 (상태 변경 없음).

        Raises:
            ProjectRejectError: PROJECT_NOT_FOUND
        """
        project = self.service.store.get(project_id)
        if project is None:
            raise ProjectRejectError(ErrorCodes.PROJECT_NOT_FOUND, project_id=project_id)
        return project

    def copy_document(self, project_id: str | None = None) -> str:
        """
        PRD 본문 (클립보드 payload).

        project_id 가 없으면 선택된 레코드. 어느 쪽이든 상태는 바꾸지 않는다.

        Raises:
            ProjectRejectError: INVALID_TRANSITION (선택 없음), PROJECT_NOT_FOUND
        """
        if project_id is not None:
            return self.find(project_id).full_prd

        project = self.current_project()
        if project is None:
            raise ProjectRejectError(ErrorCodes.INVALID_TRANSITION, action="copy_document")
        return project.full_prd

    # =========================================================================
    # Listing ⇄ Composing
    # =========================================================================

    def open_composer(self, mode: CreationMode | None = None) -> None:
        self._set(
            view=AppView.COMPOSING,
            is_editing=False,
            error_message=None,
            mode=mode or self._state.mode,
        )

    def cancel_compose(self) -> None:
        if self._state.view != AppView.COMPOSING:
            raise ProjectRejectError(
                ErrorCodes.INVALID_TRANSITION,
                action="cancel_compose",
                view=self._state.view.value,
            )
        self._set(view=AppView.LISTING, error_message=None)

    def set_mode(self, mode: CreationMode) -> None:
        """AI / manual 모드 토글."""
        self._set(mode=mode, error_message=None)

    async def submit(
        self,
        name: str,
        description: str,
        document: str | None = None,
    ) -> Project:
        """
        현재 모드로 프로젝트 생성.

        성공: 새 레코드 선택 + viewing 전환
        실패: composing 유지 + error_message 설정 + 예외 전파

        Raises:
            ProjectRejectError: INVALID_TRANSITION, GENERATION_IN_PROGRESS,
                                MISSING_REQUIRED_FIELD, GENERATION_FAILED
        """
        if self._state.view != AppView.COMPOSING:
            raise ProjectRejectError(
                ErrorCodes.INVALID_TRANSITION,
                action="submit",
                view=self._state.view.value,
            )
        if self._state.is_generating:
            raise ProjectRejectError(ErrorCodes.GENERATION_IN_PROGRESS)

        try:
            if self._state.mode == CreationMode.MANUAL:
                project = self.service.create_manual(name, description, document)
            else:
                self._set(is_generating=True, error_message=None)
                try:
                    project = await self.service.create_with_ai(name, description)
                finally:
                    self._set(is_generating=False)
        except ProjectRejectError as e:
            if e.code == ErrorCodes.MISSING_REQUIRED_FIELD:
                self._set(error_message=MISSING_FIELDS_MESSAGE)
            else:
                self._set(error_message=GENERATION_FAILED_MESSAGE)
            raise

        self._set(
            view=AppView.VIEWING,
            selected_id=project.id,
            is_editing=False,
            error_message=None,
        )
        return project

    # =========================================================================
    # Viewing
    # =========================================================================

    def select(self, project_id: str) -> Project:
        """
        레코드 선택 → viewing.

        Raises:
            ProjectRejectError: PROJECT_NOT_FOUND
        """
        project = self.find(project_id)

        self._set(
            view=AppView.VIEWING,
            selected_id=project_id,
            is_editing=False,
            error_message=None,
        )
        return project

    def back(self) -> None:
        """목록으로 (editing 종료)."""
        self._set(view=AppView.LISTING, is_editing=False, error_message=None)

    def start_edit(self) -> Project:
        project = self._require_viewing("start_edit")
        self._set(is_editing=True, error_message=None)
        return project

    def cancel_edit(self) -> None:
        self._set(is_editing=False, error_message=None)

    def save_edit(self, name: str, description: str) -> Project:
        """
        편집 저장.

        검증 실패 시 editing 유지, 레코드 변경 없음.

        Raises:
            ProjectRejectError: INVALID_TRANSITION, MISSING_REQUIRED_FIELD
        """
        project = self._require_viewing("save_edit")
        if not self._state.is_editing:
            raise ProjectRejectError(ErrorCodes.INVALID_TRANSITION, action="save_edit")

        try:
            updated = self.service.edit(project.id, name, description)
        except ProjectRejectError as e:
            if e.code == ErrorCodes.MISSING_REQUIRED_FIELD:
                self._set(error_message=EDIT_MISSING_FIELDS_MESSAGE)
            raise

        self._set(is_editing=False, error_message=None)
        return updated

    def delete(self, project_id: str, confirmed: bool = False) -> bool:
        """
        삭제 (확인 필수).

        선택된 레코드였다면 선택 해제 + listing 전환.

        Raises:
            ProjectRejectError: DELETE_NOT_CONFIRMED
        """
        if not confirmed:
            raise ProjectRejectError(ErrorCodes.DELETE_NOT_CONFIRMED, project_id=project_id)

        removed = self.service.delete(project_id)
        if self._state.selected_id == project_id:
            self._set(
                view=AppView.LISTING,
                selected_id=None,
                is_editing=False,
                error_message=None,
            )
        return removed

    # =========================================================================
    # Internal
    # =========================================================================

    def _require_viewing(self, action: str) -> Project:
        project = self.current_project() if self._state.view == AppView.VIEWING else None
        if project is None:
            raise ProjectRejectError(
                ErrorCodes.INVALID_TRANSITION,
                action=action,
                view=self._state.view.value,
            )
        return project
