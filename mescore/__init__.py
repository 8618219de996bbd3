# mescore/__init__.py

"""
MES 코어 설정 저장소(FastAPI) 애플리케이션의 메인 패키지입니다.

설비 계층(Equipment), 설비 유형(EquipmentType), 모드 그룹/모드, 상태 그룹/상태의
구성 정보를 관리합니다. 공통 설정, 데이터베이스 연결, 검증/조회 엔진을 담는
core 서브패키지와 도메인별(eqp, mode, state) 서브패키지로 구성됩니다.
"""

APP_NAME = "MES Core API"
APP_VERSION = "0.1.0"
API_PREFIX = "/api/v1"  # API 라우트의 공통 접두사 (main.py에서 적용)

__version__ = APP_VERSION
__title__ = APP_NAME
__description__ = "Manufacturing execution configuration store (equipment hierarchy, modes, states)."
__all__ = ["API_PREFIX", "APP_NAME", "APP_VERSION"]
