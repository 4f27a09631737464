"""
main.py — 모의시험 CBT 앱 진입점

JSON API 서버(uvicorn)를 백그라운드 스레드로, Streamlit 화면을 하위 프로세스로 띄운 뒤
브라우저에서 Streamlit 화면을 연다.
"""

import os
import socket
import subprocess
import sys
import time
import threading
import logging
import traceback
import webbrowser
from typing import List

# ── 패키지 경로 설정 (반드시 최상단) ──────────────────────────────────────────
_BASE_DIR = os.path.dirname(os.path.abspath(__file__))
if _BASE_DIR not in sys.path:
    sys.path.insert(0, _BASE_DIR)

from config import BASE_DIR, DEFAULT_HOST, DEFAULT_PORT, DEFAULT_TIMEOUT, LOG_FILE, UI_PORT, UI_SCRIPT

logger = logging.getLogger(__name__)

# ── 로깅 설정 ────────────────────────────────────────────────────────────────

def _setup_logging() -> None:
    try:
        logging.basicConfig(
            level=logging.INFO,
            format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
            handlers=[
                logging.FileHandler(LOG_FILE, encoding='utf-8'),
                logging.StreamHandler(sys.stdout)
            ]
        )
    except PermissionError:
        # 로그 파일 점유 시 콘솔 출력만 사용
        logging.basicConfig(level=logging.INFO)

# ── 서버 및 네트워크 유틸 ───────────────────────────────────────────────────

def _port_is_free(port: int) -> bool:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        try:
            s.bind((DEFAULT_HOST, port))
        except OSError:
            return False
        return True

def _pick_port(preferred: int) -> int:
    """설정된 포트가 사용 중이면 빈 포트를 할당받는다."""
    if _port_is_free(preferred):
        return preferred
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind((DEFAULT_HOST, 0))
        return s.getsockname()[1]

def _wait_for_server(port: int, timeout: float = DEFAULT_TIMEOUT) -> bool:
    deadline = time.time() + timeout
    while time.time() < deadline:
        try:
            with socket.create_connection((DEFAULT_HOST, port), timeout=0.5):
                return True
        except OSError:
            time.sleep(0.1)
    return False

def _start_server(port: int) -> None:
    try:
        import uvicorn
        from api.app import create_app
        logger.info(f"Uvicorn 서버 시작 - Port: {port}")
        app = create_app()
        uvicorn.run(app, host=DEFAULT_HOST, port=port, log_level="error")
    except Exception:
        logger.error(f"서버 오류 발생:\n{traceback.format_exc()}")

def _ui_command(port: int) -> List[str]:
    """Streamlit 화면 실행 명령. 브라우저는 이 프로세스가 직접 연다."""
    return [
        sys.executable, "-m", "streamlit", "run", UI_SCRIPT,
        "--server.address", DEFAULT_HOST,
        "--server.port", str(port),
        "--server.headless", "true",
    ]

def _start_ui(port: int) -> subprocess.Popen:
    logger.info(f"Streamlit 화면 시작 - Port: {port}")
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(p for p in (BASE_DIR, env.get("PYTHONPATH")) if p)
    return subprocess.Popen(_ui_command(port), cwd=BASE_DIR, env=env)

# ── 메인 실행 ────────────────────────────────────────────────────────────────

if __name__ == "__main__":
    _setup_logging()
    logger.info("=== Mock Exam CBT Started ===")
    os.chdir(BASE_DIR)

    api_port = _pick_port(DEFAULT_PORT)
    server_thread = threading.Thread(target=_start_server, args=(api_port,), daemon=True)
    server_thread.start()

    ui_port = _pick_port(UI_PORT)
    ui_process = _start_ui(ui_port)

    if _wait_for_server(api_port) and _wait_for_server(ui_port):
        logger.info(f"서버 준비 완료 (API: {api_port}, 화면: {ui_port}). 브라우저를 엽니다.")
        webbrowser.open(f"http://{DEFAULT_HOST}:{ui_port}")

        # 메인 스레드 유지
        try:
            ui_process.wait()
        except KeyboardInterrupt:
            logger.info("사용자에 의해 종료되었습니다.")
        finally:
            ui_process.terminate()
    else:
        logger.error("서버 시작 제한 시간을 초과했습니다. 포트를 점유한 기존 프로세스를 확인하세요.")
        ui_process.terminate()
        sys.exit(1)
