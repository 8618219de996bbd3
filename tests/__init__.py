# tests/__init__.py

"""
MES Core API 테스트 스위트 패키지입니다.

- `core/`: 설정, 검증 규칙, 조회 엔진, 공통 CRUD 에 대한 단위 테스트
- `domains/`: eqp, mode, state 도메인별 저장소 및 API 통합 테스트
- `conftest.py`: 테스트용 DB 엔진, 세션, HTTP 클라이언트, 팩토리 픽스처
"""

__title__ = "MES Core API Tests"
__version__ = "0.1.0"
__all__ = []
