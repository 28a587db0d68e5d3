"""
App layer: UI 서버 (FastAPI).

역할:
- 목록/입력/상세 화면, JSON API
- 생성형 AI 호출 (providers), 생성 workflow (services)
- 화면 상태 머신 (state) - 렌더링과 분리된 순수 모듈
- ⚠️ 영속 저장 로직 없음 (core에 위임)
"""
