"""
Domain Constants: 애플리케이션 전역 상수.

저장소 슬롯 이름, 모델 ID, 고정 메시지 등 시스템 전반에서 사용되는 값들.
"""

# =============================================================================
# Durable Blob (영속 저장소)
# =============================================================================
# 원래 브라우저 localStorage 키와 동일한 이름을 사용해
# 기존 blob을 그대로 가져올 수 있게 한다.

STORAGE_BLOB_NAME = "promptmaster_projects"
STORAGE_BLOB_SUFFIX = ".json"
DEFAULT_DATA_DIR = "data"

# =============================================================================
# Generation Models
# =============================================================================

DEFAULT_TEXT_MODEL = "gemini-2.5-flash"
DEFAULT_IMAGE_MODEL = "gemini-2.5-flash-image"
DEFAULT_TEMPERATURE = 0.7

# =============================================================================
# Provenance Tags (modelUsed)
# =============================================================================

MODEL_USED_AI = "Gemini 2.5 Flash"
MODEL_USED_MANUAL = "Manual"

# =============================================================================
# Fixed Messages
# =============================================================================

# 문서 생성 단계 실패 시 PRD 본문을 대체하는 문자열
DOCUMENT_FALLBACK_TEXT = "PRD 문서 생성에 실패했습니다. 다시 시도해주세요."

# 서비스가 빈 텍스트를 돌려준 경우
DOCUMENT_EMPTY_TEXT = "텍스트 생성 중 오류가 발생했습니다."

# 사용자 노출 메시지
MISSING_FIELDS_MESSAGE = "앱 이름과 설명을 모두 입력해주세요."
EDIT_MISSING_FIELDS_MESSAGE = "이름과 설명은 비워둘 수 없습니다."
GENERATION_FAILED_MESSAGE = "프로젝트 생성 중 오류가 발생했습니다. 다시 시도해주세요."

# =============================================================================
# MIME Types
# =============================================================================

DEFAULT_ICON_MIME_TYPE = "image/png"
