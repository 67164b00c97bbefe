#!/usr/bin/env python3
"""
스프레드시트 초기화 스크립트

업무일지/프로젝트/담당자/항목정보/프로젝트이력관리 시트를 만들고
헤더 행을 작성합니다. 기존 행에 ID가 없으면 --backfill-ids 로 부여합니다.

사용방법:
    python scripts/init_spreadsheet.py
    python scripts/init_spreadsheet.py --sample --backfill-ids

    설정 파일 위치를 지정하는 경우:
    WORKREPORT_CONFIG=/path/to/config.toml python scripts/init_spreadsheet.py
"""

import argparse
import sys

from workreport.config import Config, ConfigurationError
from workreport.context import create_context


def main():
    """Initialize the spreadsheet."""
    parser = argparse.ArgumentParser(description="workreport 스프레드시트 초기화")
    parser.add_argument("--sample", action="store_true", help="새 시트에 샘플 데이터 추가")
    parser.add_argument("--backfill-ids", action="store_true", help="ID가 없는 행에 ID 부여")
    args = parser.parse_args()

    print("=" * 60)
    print("workreport 스프레드시트 초기화")
    print("=" * 60)
    print()

    config = Config.load()
    config.setup_logging()
    try:
        context = create_context(config)
    except ConfigurationError as e:
        print(f"오류: {e}")
        sys.exit(1)

    connection = context.setup.test_connection()
    if not connection.success:
        print(connection.message)
        sys.exit(1)
    print(connection.message)

    result = context.setup.initialize_spreadsheet(add_sample_data=args.sample)
    print(result.message)
    if not result.success:
        sys.exit(1)
    for name in result.created_sheets:
        print(f"  생성: {name}")
    for name in result.updated_headers:
        print(f"  헤더 갱신: {name}")

    if args.backfill_ids:
        backfill = context.setup.backfill_row_ids()
        print(backfill.message)
        if not backfill.success:
            sys.exit(1)

    print()
    print("완료")


if __name__ == "__main__":
    main()
