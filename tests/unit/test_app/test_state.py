"""
test_state.py - View/Selection State Machine 테스트

DoD:
- listing → composing → viewing (새 레코드 선택)
- 실패 시 composing 유지 + 에러 메시지
- 선택된 레코드 삭제 → listing + 선택 해제
- 생성 중 재제출 거절
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.app.state import AppStateMachine, ViewState
from src.domain.constants import (
    EDIT_MISSING_FIELDS_MESSAGE,
    GENERATION_FAILED_MESSAGE,
    MISSING_FIELDS_MESSAGE,
    MODEL_USED_MANUAL,
)
from src.domain.errors import ErrorCodes, ProjectRejectError
from src.domain.schemas import AppView, CreationMode


def test_initial_state(machine: AppStateMachine):
    assert machine.state == ViewState()
    assert machine.state.view == AppView.LISTING
    assert machine.current_project() is None


# =============================================================================
# Composing
# =============================================================================


class TestCompose:
    """listing ⇄ composing 테스트."""

    def test_open_and_cancel(self, machine: AppStateMachine):
        machine.open_composer()
        assert machine.state.view == AppView.COMPOSING

        machine.cancel_compose()
        assert machine.state.view == AppView.LISTING

    def test_cancel_outside_composer(self, machine: AppStateMachine):
        with pytest.raises(ProjectRejectError) as exc_info:
            machine.cancel_compose()

        assert exc_info.value.code == ErrorCodes.INVALID_TRANSITION

    def test_mode_toggle(self, machine: AppStateMachine):
        machine.open_composer(CreationMode.MANUAL)
        assert machine.state.mode == CreationMode.MANUAL

        machine.set_mode(CreationMode.AI)
        assert machine.state.mode == CreationMode.AI

    @pytest.mark.asyncio
    async def test_submit_requires_composer(self, machine: AppStateMachine):
        with pytest.raises(ProjectRejectError) as exc_info:
            await machine.submit("FitTracker", "Track workouts")

        assert exc_info.value.code == ErrorCodes.INVALID_TRANSITION


class TestSubmit:
    """submit 테스트."""

    @pytest.mark.asyncio
    async def test_ai_success_selects_new_record(self, machine: AppStateMachine):
        machine.open_composer()

        project = await machine.submit("FitTracker", "Track workouts")

        assert machine.state.view == AppView.VIEWING
        assert machine.state.selected_id == project.id
        assert machine.state.is_generating is False
        assert machine.current_project() == project
        assert machine.projects[0] == project

    @pytest.mark.asyncio
    async def test_manual_success(self, machine: AppStateMachine, mock_provider: MagicMock):
        machine.open_composer(CreationMode.MANUAL)

        project = await machine.submit("CookMaster", "Recipe organizer", document="")

        assert project.model_used == MODEL_USED_MANUAL
        assert project.full_prd == "Recipe organizer"
        assert machine.state.view == AppView.VIEWING
        mock_provider.generate_text.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_fields_stays_composing(self, machine: AppStateMachine):
        machine.open_composer()

        with pytest.raises(ProjectRejectError):
            await machine.submit("", "Track workouts")

        assert machine.state.view == AppView.COMPOSING
        assert machine.state.error_message == MISSING_FIELDS_MESSAGE
        assert machine.projects == []

    @pytest.mark.asyncio
    async def test_generation_failure_stays_composing(self, machine: AppStateMachine):
        machine.service.workflow = MagicMock()
        machine.service.workflow.generate = AsyncMock(side_effect=RuntimeError("boom"))
        machine.open_composer()

        with pytest.raises(ProjectRejectError) as exc_info:
            await machine.submit("FitTracker", "Track workouts")

        assert exc_info.value.code == ErrorCodes.GENERATION_FAILED
        assert machine.state.view == AppView.COMPOSING
        assert machine.state.is_generating is False
        assert machine.state.error_message == GENERATION_FAILED_MESSAGE

    @pytest.mark.asyncio
    async def test_reopen_clears_error(self, machine: AppStateMachine):
        machine.open_composer()
        with pytest.raises(ProjectRejectError):
            await machine.submit("", "")

        machine.cancel_compose()
        machine.open_composer()

        assert machine.state.error_message is None

    @pytest.mark.asyncio
    async def test_resubmit_while_generating_rejected(self, machine: AppStateMachine):
        """생성 대기 중 두 번째 제출 → GENERATION_IN_PROGRESS."""
        release = asyncio.Event()
        original_generate = machine.service.workflow.generate

        async def slow_generate(name, description):
            await release.wait()
            return await original_generate(name, description)

        machine.service.workflow.generate = slow_generate
        machine.open_composer()

        first = asyncio.create_task(machine.submit("FitTracker", "Track workouts"))
        await asyncio.sleep(0)
        assert machine.state.is_generating is True

        with pytest.raises(ProjectRejectError) as exc_info:
            await machine.submit("Other", "Other app")
        assert exc_info.value.code == ErrorCodes.GENERATION_IN_PROGRESS

        release.set()
        project = await first

        assert [p.id for p in machine.projects] == [project.id]
        assert machine.state.is_generating is False


# =============================================================================
# Viewing / Editing
# =============================================================================


class TestViewing:
    def test_select_and_back(self, machine: AppStateMachine):
        project = machine.service.create_manual("CookMaster", "Recipe organizer")

        machine.select(project.id)
        assert machine.state.view == AppView.VIEWING
        assert machine.copy_document() == "Recipe organizer"

        machine.back()
        assert machine.state.view == AppView.LISTING

    def test_select_unknown(self, machine: AppStateMachine):
        with pytest.raises(ProjectRejectError) as exc_info:
            machine.select("404")

        assert exc_info.value.code == ErrorCodes.PROJECT_NOT_FOUND

    def test_find_leaves_state_untouched(self, machine: AppStateMachine):
        project = machine.service.create_manual("CookMaster", "Recipe organizer")
        before = machine.state

        assert machine.find(project.id) == project
        assert machine.copy_document(project.id) == "Recipe organizer"
        assert machine.state is before

    def test_find_unknown(self, machine: AppStateMachine):
        with pytest.raises(ProjectRejectError) as exc_info:
            machine.copy_document("404")

        assert exc_info.value.code == ErrorCodes.PROJECT_NOT_FOUND

    def test_copy_without_selection(self, machine: AppStateMachine):
        with pytest.raises(ProjectRejectError) as exc_info:
            machine.copy_document()

        assert exc_info.value.code == ErrorCodes.INVALID_TRANSITION


class TestEditing:
    """viewing ⇄ editing 테스트."""

    @pytest.fixture
    def viewing(self, machine: AppStateMachine) -> AppStateMachine:
        project = machine.service.create_manual("CookMaster", "Recipe organizer")
        machine.select(project.id)
        return machine

    def test_save(self, viewing: AppStateMachine):
        viewing.start_edit()

        updated = viewing.save_edit("CookPro", "Better recipes")

        assert updated.name == "CookPro"
        assert viewing.state.is_editing is False
        assert viewing.current_project().name == "CookPro"

    def test_cancel_discards(self, viewing: AppStateMachine):
        viewing.start_edit()
        viewing.cancel_edit()

        assert viewing.state.is_editing is False
        assert viewing.current_project().name == "CookMaster"

    def test_blank_name_keeps_editing(self, viewing: AppStateMachine):
        viewing.start_edit()

        with pytest.raises(ProjectRejectError):
            viewing.save_edit("", "Better recipes")

        assert viewing.state.is_editing is True
        assert viewing.state.error_message == EDIT_MISSING_FIELDS_MESSAGE
        assert viewing.current_project().name == "CookMaster"

    def test_save_without_start(self, viewing: AppStateMachine):
        with pytest.raises(ProjectRejectError) as exc_info:
            viewing.save_edit("CookPro", "Better recipes")

        assert exc_info.value.code == ErrorCodes.INVALID_TRANSITION

    def test_start_edit_from_listing(self, machine: AppStateMachine):
        with pytest.raises(ProjectRejectError):
            machine.start_edit()

    def test_back_ends_editing(self, viewing: AppStateMachine):
        viewing.start_edit()
        viewing.back()

        assert viewing.state.is_editing is False


# =============================================================================
# Delete
# =============================================================================


class TestDelete:
    def test_requires_confirmation(self, machine: AppStateMachine):
        project = machine.service.create_manual("CookMaster", "Recipe organizer")

        with pytest.raises(ProjectRejectError) as exc_info:
            machine.delete(project.id)

        assert exc_info.value.code == ErrorCodes.DELETE_NOT_CONFIRMED
        assert len(machine.projects) == 1

    def test_delete_selected_returns_to_listing(self, machine: AppStateMachine):
        project = machine.service.create_manual("CookMaster", "Recipe organizer")
        machine.select(project.id)
        machine.start_edit()

        assert machine.delete(project.id, confirmed=True) is True

        assert machine.state.view == AppView.LISTING
        assert machine.state.selected_id is None
        assert machine.state.is_editing is False
        assert machine.projects == []

    def test_delete_other_keeps_selection(self, machine: AppStateMachine):
        first = machine.service.create_manual("A", "a")
        second = machine.service.create_manual("B", "b")
        machine.select(first.id)

        machine.delete(second.id, confirmed=True)

        assert machine.state.view == AppView.VIEWING
        assert machine.state.selected_id == first.id

    def test_delete_unknown_is_noop(self, machine: AppStateMachine):
        assert machine.delete("404", confirmed=True) is False


# =============================================================================
# Subscription
# =============================================================================


class TestSubscribe:
    def test_listener_receives_snapshots(self, machine: AppStateMachine):
        seen: list[ViewState] = []
        machine.subscribe(seen.append)

        machine.open_composer()
        machine.cancel_compose()

        assert [s.view for s in seen] == [AppView.COMPOSING, AppView.LISTING]

    def test_unsubscribe(self, machine: AppStateMachine):
        seen: list[ViewState] = []
        unsubscribe = machine.subscribe(seen.append)

        unsubscribe()
        machine.open_composer()

        assert seen == []
