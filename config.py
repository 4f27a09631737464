import os

# 기본 디렉토리 설정
BASE_DIR = os.path.dirname(os.path.abspath(__file__))

# 경로 설정
DATA_DIR = os.getenv("EXAM_DATA_DIR", os.path.join(BASE_DIR, "data"))
LOG_FILE = os.path.join(BASE_DIR, "launch.log")

# 시험 데이터 파일 (정적 JSON)
EXAM_FILE = os.path.join(DATA_DIR, "exam.json")
QUESTIONS_FILE = os.path.join(DATA_DIR, "questions.json")
LOGIN_FILE = os.path.join(DATA_DIR, "login.json")

# 서버 설정
DEFAULT_HOST = os.getenv("HOST", "127.0.0.1")
DEFAULT_PORT = int(os.getenv("PORT", "8000"))
UI_PORT = int(os.getenv("UI_PORT", "8501"))      # Streamlit 화면
UI_SCRIPT = os.path.join(BASE_DIR, "mock_exam", "app.py")
DEFAULT_TIMEOUT = 15.0

# 세션 설정
SESSION_TTL = int(os.getenv("SESSION_TTL", "3600"))   # 1시간
SESSION_CLEANUP_INTERVAL = 300                          # 5분
DEFAULT_CANDIDATE = "Candidate"

# 타이머 설정
TICK_INTERVAL = 1.0          # 초 단위 틱
TIME_WARNING_SECONDS = 60    # 남은 시간이 이 값 이하이면 경고 표시
