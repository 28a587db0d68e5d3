"""
Project Routes: 목록 / 새 프로젝트 / 상세 화면 + JSON API.

프레젠테이션 계층만 담당한다. 상태 전이와 store 조작은
request.app.state.machine (AppStateMachine) 에 위임.

페이지 라우트 (HTML):
- GET  /                      → 목록
- GET  /projects/new          → 새 프로젝트 입력
- POST /projects/new          → 생성 후 상세로 redirect
- GET  /projects/{id}         → 상세
- POST /projects/{id}/edit    → 편집 저장
- POST /projects/{id}/delete  → 삭제 (confirm 필수)

API 라우트:
- GET    /api/projects
- POST   /api/projects
- GET    /api/projects/{id}
- PATCH  /api/projects/{id}
- DELETE /api/projects/{id}?confirm=true
- GET    /api/projects/{id}/prd   → 복사용 원문 (text/plain)
- GET    /api/projects/state      → 화면 상태 스냅샷
"""

import html as html_escape_module
from datetime import datetime
from typing import Any

from fastapi import APIRouter, Form, HTTPException, Request
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse

from src.app.state import AppStateMachine
from src.domain.errors import ErrorCodes, ProjectRejectError
from src.domain.schemas import AppView, CreationMode, Project

# Routers
router = APIRouter()  # HTML pages
api_router = APIRouter()  # API endpoints

# ProjectRejectError code → HTTP status
STATUS_BY_CODE = {
    ErrorCodes.MISSING_REQUIRED_FIELD: 422,
    ErrorCodes.PROJECT_NOT_FOUND: 404,
    ErrorCodes.DUPLICATE_PROJECT_ID: 409,
    ErrorCodes.GENERATION_IN_PROGRESS: 409,
    ErrorCodes.INVALID_TRANSITION: 409,
    ErrorCodes.DELETE_NOT_CONFIRMED: 400,
    ErrorCodes.GENERATION_FAILED: 502,
}


def get_machine(request: Request) -> AppStateMachine:
    machine: AppStateMachine = request.app.state.machine
    return machine


def to_http_error(error: ProjectRejectError) -> HTTPException:
    return HTTPException(
        status_code=STATUS_BY_CODE.get(error.code, 400),
        detail=error.to_dict(),
    )


def parse_mode(mode: str) -> CreationMode:
    try:
        return CreationMode(mode)
    except ValueError:
        raise HTTPException(
            status_code=422,
            detail={"code": "INVALID_MODE", "mode": mode},
        ) from None


# =============================================================================
# HTML Generation Helpers
# =============================================================================


def escape_html(text: str) -> str:
    """HTML 이스케이프."""
    return html_escape_module.escape(text)


def format_timestamp(created_at: int) -> str:
    return datetime.fromtimestamp(created_at / 1000).strftime("%Y-%m-%d %H:%M")


def render_page(title: str, body: str) -> HTMLResponse:
    return HTMLResponse(content=f"""
<!DOCTYPE html>
<html lang="ko">
<head>
    <meta charset="UTF-8">
    <title>{escape_html(title)} - PromptMaster AI</title>
    <link rel="stylesheet" href="/static/css/style.css">
</head>
<body>
    <header>
        <a href="/" class="brand">✨ PromptMaster AI</a>
    </header>
    <main class="container">
{body}
    </main>
</body>
</html>
    """)


def build_icon_html(project: Project, css_class: str) -> str:
    """아이콘 이미지 (없으면 이름 첫 글자 placeholder)."""
    if project.image_url:
        return (
            f'<img class="{css_class}" src="{escape_html(project.image_url)}" '
            f'alt="{escape_html(project.name)}">'
        )
    initial = escape_html(project.name[:1].upper())
    return f'<div class="{css_class} placeholder">{initial}</div>'


def build_project_card_html(project: Project) -> str:
    """목록 카드 HTML."""
    return f"""
        <a class="project-card" href="/projects/{escape_html(project.id)}">
            {build_icon_html(project, "card-icon")}
            <h3>{escape_html(project.name)}</h3>
            <small>{format_timestamp(project.created_at)}</small>
        </a>"""


def build_listing_html(projects: list[Project]) -> str:
    """목록 화면 본문."""
    if not projects:
        return """
        <h2>내 프로젝트</h2>
        <div class="empty">
            <p>아직 만든 프로젝트가 없습니다.</p>
            <a href="/projects/new" class="button">첫 앱 만들기</a>
        </div>"""

    cards = "".join(build_project_card_html(p) for p in projects)
    return f"""
        <h2>내 프로젝트</h2>
        <a href="/projects/new" class="button">+ 새 프로젝트</a>
        <div class="project-grid">{cards}
        </div>"""


def build_compose_html(
    mode: CreationMode,
    error_message: str | None = None,
    name: str = "",
    description: str = "",
    document: str = "",
) -> str:
    """새 프로젝트 입력 화면 본문."""
    error_html = (
        f'<div class="error">{escape_html(error_message)}</div>' if error_message else ""
    )
    ai_checked = "checked" if mode == CreationMode.AI else ""
    manual_checked = "checked" if mode == CreationMode.MANUAL else ""

    return f"""
        <a href="/">← 돌아가기</a>
        <h2>새 앱 프롬프트 만들기</h2>
        <p>AI가 아이디어로 PRD 문서와 아이콘을 만들어 줍니다.</p>
        <form method="post" action="/projects/new">
            <fieldset>
                <label><input type="radio" name="mode" value="ai" {ai_checked}> AI 생성</label>
                <label><input type="radio" name="mode" value="manual" {manual_checked}> 직접 입력</label>
            </fieldset>
            <label>앱 이름
                <input type="text" name="name" value="{escape_html(name)}"
                       placeholder="예: FitTracker, CookMaster...">
            </label>
            <label>아이디어 설명
                <textarea name="description">{escape_html(description)}</textarea>
            </label>
            <label>PRD 문서 (직접 입력 모드, 비우면 설명을 사용)
                <textarea name="document">{escape_html(document)}</textarea>
            </label>
            {error_html}
            <button type="submit">생성</button>
        </form>"""


def build_detail_html(
    project: Project,
    is_editing: bool,
    error_message: str | None = None,
) -> str:
    """상세 화면 본문."""
    project_id = escape_html(project.id)
    error_html = (
        f'<div class="error">{escape_html(error_message)}</div>' if error_message else ""
    )

    if is_editing:
        info_html = f"""
            <form method="post" action="/projects/{project_id}/edit">
                <label>이름 <input type="text" name="name" value="{escape_html(project.name)}"></label>
                <label>설명 <textarea name="description">{escape_html(project.description)}</textarea></label>
                {error_html}
                <button type="submit">저장</button>
                <a href="/projects/{project_id}">취소</a>
            </form>"""
    else:
        info_html = f"""
            <h1>{escape_html(project.name)}</h1>
            <p>{escape_html(project.description)}</p>
            <small>생성: {format_timestamp(project.created_at)} · {escape_html(project.model_used)}</small>
            <a href="/projects/{project_id}?edit=1">편집</a>
            <form method="post" action="/projects/{project_id}/delete"
                  onsubmit="return confirm('이 프로젝트를 삭제할까요?');">
                <input type="hidden" name="confirm" value="true">
                <button type="submit" class="danger">삭제</button>
            </form>"""

    icon_html = (
        build_icon_html(project, "detail-icon")
        if project.image_url
        else '<div class="detail-icon placeholder">이미지 없음</div>'
    )

    return f"""
        <a href="/">← 대시보드로</a>
        <div class="detail">
            <aside>
                {icon_html}
                {info_html}
            </aside>
            <section>
                <h3>생성된 PRD & 프롬프트</h3>
                <button onclick="fetch('/api/projects/{project_id}/prd')
                    .then(r => r.text())
                    .then(t => navigator.clipboard.writeText(t))
                    .then(() => alert('프롬프트를 클립보드에 복사했습니다!'))">프롬프트 복사</button>
                <pre class="prd">{escape_html(project.full_prd)}</pre>
            </section>
        </div>"""


# =============================================================================
# Page Routes (HTML)
# =============================================================================


@router.get("/", response_class=HTMLResponse)
async def listing_page(request: Request) -> HTMLResponse:
    """목록 화면."""
    machine = get_machine(request)
    if machine.state.view != AppView.LISTING:
        machine.back()
    return render_page("내 프로젝트", build_listing_html(machine.projects))


@router.get("/projects/new", response_class=HTMLResponse)
async def compose_page(request: Request, mode: str = "ai") -> HTMLResponse:
    """새 프로젝트 입력 화면."""
    machine = get_machine(request)
    machine.open_composer(parse_mode(mode))
    return render_page("새 프로젝트", build_compose_html(machine.state.mode))


@router.post("/projects/new", response_model=None)
async def compose_submit(
    request: Request,
    name: str = Form(""),
    description: str = Form(""),
    mode: str = Form("ai"),
    document: str = Form(""),
) -> HTMLResponse | RedirectResponse:
    """생성 → 상세 redirect, 실패 시 입력 화면 재표시."""
    machine = get_machine(request)
    creation_mode = parse_mode(mode)

    if machine.state.is_generating:
        return render_page(
            "새 프로젝트",
            build_compose_html(creation_mode, "이미 생성 중입니다.", name, description, document),
        )

    machine.open_composer(creation_mode)
    try:
        project = await machine.submit(name, description, document or None)
    except ProjectRejectError:
        return render_page(
            "새 프로젝트",
            build_compose_html(
                creation_mode, machine.state.error_message, name, description, document
            ),
        )

    return RedirectResponse(url=f"/projects/{project.id}", status_code=303)


@router.get("/projects/{project_id}", response_class=HTMLResponse)
async def detail_page(request: Request, project_id: str, edit: bool = False) -> HTMLResponse:
    """상세 화면."""
    machine = get_machine(request)
    try:
        project = machine.select(project_id)
    except ProjectRejectError as e:
        raise to_http_error(e) from e

    if edit:
        machine.start_edit()
    return render_page(project.name, build_detail_html(project, machine.state.is_editing))


@router.post("/projects/{project_id}/edit", response_model=None)
async def edit_submit(
    request: Request,
    project_id: str,
    name: str = Form(""),
    description: str = Form(""),
) -> HTMLResponse | RedirectResponse:
    """편집 저장."""
    machine = get_machine(request)
    try:
        project = machine.select(project_id)
        machine.start_edit()
        machine.save_edit(name, description)
    except ProjectRejectError as e:
        if e.code != ErrorCodes.MISSING_REQUIRED_FIELD:
            raise to_http_error(e) from e
        return render_page(
            project.name,
            build_detail_html(project, True, machine.state.error_message),
        )

    return RedirectResponse(url=f"/projects/{project_id}", status_code=303)


@router.post("/projects/{project_id}/delete")
async def delete_submit(
    request: Request,
    project_id: str,
    confirm: bool = Form(False),
) -> RedirectResponse:
    """삭제 후 목록으로."""
    machine = get_machine(request)
    try:
        machine.delete(project_id, confirmed=confirm)
    except ProjectRejectError as e:
        raise to_http_error(e) from e
    return RedirectResponse(url="/", status_code=303)


# =============================================================================
# API Routes
# =============================================================================


@api_router.get("")
async def list_projects(request: Request) -> list[dict[str, Any]]:
    """전체 목록 (newest-first)."""
    return [p.to_dict() for p in get_machine(request).projects]


@api_router.get("/state")
async def view_state(request: Request) -> dict[str, Any]:
    """화면 상태 스냅샷."""
    state = get_machine(request).state
    return {
        "view": state.view.value,
        "selected_id": state.selected_id,
        "is_editing": state.is_editing,
        "mode": state.mode.value,
        "is_generating": state.is_generating,
        "error_message": state.error_message,
    }


@api_router.post("", status_code=201)
async def create_project(
    request: Request,
    name: str = Form(""),
    description: str = Form(""),
    mode: str = Form("ai"),
    document: str = Form(""),
) -> dict[str, Any]:
    """
    프로젝트 생성.

    Returns:
        생성된 레코드

    Raises:
        422: 필수 필드 누락
        409: 이미 생성 중
        502: 생성 실패 (레코드 저장 안 됨)
    """
    machine = get_machine(request)
    creation_mode = parse_mode(mode)

    if machine.state.is_generating:
        raise to_http_error(ProjectRejectError(ErrorCodes.GENERATION_IN_PROGRESS))

    machine.open_composer(creation_mode)
    try:
        project = await machine.submit(name, description, document or None)
    except ProjectRejectError as e:
        raise to_http_error(e) from e

    return project.to_dict()


@api_router.get("/{project_id}")
async def get_project(request: Request, project_id: str) -> dict[str, Any]:
    """레코드 조회 (화면 상태 변경 없음)."""
    try:
        return get_machine(request).find(project_id).to_dict()
    except ProjectRejectError as e:
        raise to_http_error(e) from e


@api_router.patch("/{project_id}")
async def edit_project(
    request: Request,
    project_id: str,
    name: str = Form(""),
    description: str = Form(""),
) -> dict[str, Any]:
    """name/description 수정 (나머지 필드 불변)."""
    machine = get_machine(request)
    try:
        machine.select(project_id)
        machine.start_edit()
        updated = machine.save_edit(name, description)
    except ProjectRejectError as e:
        if machine.state.is_editing:
            machine.cancel_edit()
        raise to_http_error(e) from e
    return updated.to_dict()


@api_router.delete("/{project_id}")
async def delete_project(
    request: Request,
    project_id: str,
    confirm: bool = False,
) -> dict[str, Any]:
    """삭제 (?confirm=true 필수)."""
    machine = get_machine(request)
    try:
        machine.find(project_id)
        machine.delete(project_id, confirmed=confirm)
    except ProjectRejectError as e:
        raise to_http_error(e) from e
    return {"deleted": project_id, "view": machine.state.view.value}


@api_router.get("/{project_id}/prd", response_class=PlainTextResponse)
async def copy_project_prd(request: Request, project_id: str) -> PlainTextResponse:
    """PRD 원문 (클립보드 복사용, 화면 상태 변경 없음)."""
    try:
        return PlainTextResponse(get_machine(request).copy_document(project_id))
    except ProjectRejectError as e:
        raise to_http_error(e) from e
