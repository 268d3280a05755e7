import logging
import os
import tempfile
from concurrent_log_handler import ConcurrentRotatingFileHandler
from config import Config

# 🔹 로그 폴더 설정 (쓰기 불가하면 임시 폴더 사용)
FALLBACK_LOG_DIR = os.path.join(tempfile.gettempdir(), "apnic_sync_logs")
LOG_FILENAME = "apnic_sync.log"

# 🔹 공통 포매터 설정
log_formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")


def create_file_handler(log_dir, fallback_dir=FALLBACK_LOG_DIR):
    """
    크기별 로그 파일 핸들러 생성 (최대 300MB, 10개 파일 보관) -> 멀티프로세스 안전

    Returns:
        (handler, directory, failures). handler 와 directory 는 두 폴더 모두
        쓰기 불가하면 None (콘솔 전용 로그)
    """
    failures = []
    for directory in (log_dir, fallback_dir):
        try:
            os.makedirs(directory, exist_ok=True)
            handler = ConcurrentRotatingFileHandler(
                filename=os.path.join(directory, LOG_FILENAME),
                maxBytes=300*1024*1024, # 300MB
                backupCount=10,         # 최대 10개 파일 보관
                encoding="utf-8",
            )
        except OSError as e:
            failures.append(f"{directory}: {str(e)}")
            continue

        handler.setLevel(logging.DEBUG)
        handler.setFormatter(log_formatter)
        return handler, directory, failures

    return None, None, failures


sync_log_handler, LOG_DIR, log_dir_failures = create_file_handler(Config.LOG_DIR)

console_handler = logging.StreamHandler()
console_handler.setLevel(logging.INFO)
console_handler.setFormatter(log_formatter)

# 🔹 기본 루트 로거 설정
root_logger = logging.getLogger()
root_logger.setLevel(logging.INFO)

# 기존 핸들러가 없는 경우에만 추가
if sync_log_handler is not None and not any(isinstance(h, ConcurrentRotatingFileHandler) for h in root_logger.handlers):
    root_logger.addHandler(sync_log_handler)
if not any(type(h) is logging.StreamHandler for h in root_logger.handlers):
    root_logger.addHandler(console_handler)

# 🔹 동기화 전용 로거 (루트 로거로 전파)
sync_logger = logging.getLogger("apnic_sync")
sync_logger.setLevel(logging.DEBUG)

for failure in log_dir_failures:
    sync_logger.warning(f"Log directory not writable, skipped: {failure}")
if sync_log_handler is None:
    sync_logger.warning("No writable log directory, logging to console only")


class OmitBodyFilter(logging.Filter):
    """botocore 요청/응답 본문 로그 제외 (헤더만 남김)"""

    BODY_MESSAGES = ("Making request for", "Response body")

    def filter(self, record):
        return not str(record.msg).startswith(self.BODY_MESSAGES)


botocore_debug_handler = logging.StreamHandler()
botocore_debug_handler.setLevel(logging.DEBUG)
botocore_debug_handler.setFormatter(log_formatter)
botocore_debug_handler.addFilter(OmitBodyFilter())


def enable_botocore_debug():
    """
    botocore 요청/응답 헤더 디버그 로그 활성화. 본문은 출력하지 않는다.
    루트 로거(파일)로는 전파하지 않음
    """
    botocore_logger = logging.getLogger("botocore")
    botocore_logger.setLevel(logging.DEBUG)
    botocore_logger.propagate = False  # 루트 로거로 전파 방지
    if botocore_debug_handler not in botocore_logger.handlers:
        botocore_logger.addHandler(botocore_debug_handler)
    return botocore_logger


def get_sync_logger():
    """APNIC 동기화 파이프라인 로거 반환"""
    return sync_logger
