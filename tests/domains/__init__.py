# tests/domains/__init__.py

"""
도메인별 테스트 모듈 모음입니다.

- `test_eqp.py`, `test_hierarchy.py`: 설비 유형, 설비 계층, 그룹 할당
- `test_mode.py`: 모드 그룹과 모드
- `test_state.py`: 상태 그룹과 상태
- `test_seed.py`: 기본 데이터 시드
"""

__all__ = []
