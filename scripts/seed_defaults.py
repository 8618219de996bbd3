# flake8: noqa
# scripts/seed_defaults.py

import asyncio
import json

import typer

from mescore.core.database import create_db_and_tables, engine, get_async_session_context
from mescore.core.seed import seed_defaults

cli = typer.Typer(help="MES 코어 데이터베이스 초기화 도구")


async def _init_db(with_seed: bool) -> None:
    try:
        await create_db_and_tables()
        if with_seed:
            async with get_async_session_context() as session:
                created = await seed_defaults(session)
            print(f"기본 데이터 입력 결과: {json.dumps(created, ensure_ascii=False)}")
    finally:
        await engine.dispose()


async def _seed() -> None:
    try:
        async with get_async_session_context() as session:
            created = await seed_defaults(session)
        print(f"기본 데이터 입력 결과: {json.dumps(created, ensure_ascii=False)}")
    finally:
        await engine.dispose()


@cli.command("init-db")
def init_db(
    seed: bool = typer.Option(
        True, '--seed/--no-seed',
        help="테이블 생성 후 기본 설비 유형/모드/상태를 함께 입력합니다."
    ),
):
    """
    'core' 스키마와 모든 테이블을 생성합니다. (개발용, 운영은 Alembic 사용)
    """
    print("테이블 생성을 시작합니다...")
    asyncio.run(_init_db(seed))
    print("완료되었습니다.")


@cli.command("seed")
def seed():
    """
    기본 설비 유형(enterprise..cell), 기본 모드 그룹/모드, 기본 상태 그룹/상태를 입력합니다.
    이미 있는 행은 건너뜁니다.
    """
    asyncio.run(_seed())


if __name__ == "__main__":
    cli()
