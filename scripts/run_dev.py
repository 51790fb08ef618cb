#!/usr/bin/env python
"""
개발 서버 실행 스크립트
"""
import os
import sys

# 프로젝트 루트를 Python 경로에 추가
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

if __name__ == "__main__":
    import uvicorn
    from dotenv import load_dotenv

    # 환경 변수 로드
    load_dotenv()

    from submission_service.core.config import get_settings
    from submission_service.main import configure_logging

    settings = get_settings()
    configure_logging(settings)

    uvicorn.run(
        "submission_service.main:create_app",
        factory=True,
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=True,
        log_level="debug",
    )
