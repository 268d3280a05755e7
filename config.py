import os
from collections import namedtuple
from dotenv import load_dotenv

from errors import ConfigError

# .env 파일에서 환경변수 로드
load_dotenv()


def _env_flag(name, default="false"):
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Config:
    # APNIC 통계 파일 설정
    APNIC_URL = os.getenv("APNIC_URL", "http://ftp.apnic.net/apnic/stats/apnic/delegated-apnic-latest")  # 🔹 delegated 파일 URL
    APNIC_REGISTRY = os.getenv("APNIC_REGISTRY", "apnic")  # 🔹 레지스트리 이름 (각 행의 첫 번째 필드)
    APNIC_COUNTRY = os.getenv("APNIC_COUNTRY", "CN")  # 🔹 추출할 국가 코드
    HTTP_TIMEOUT = int(os.getenv("HTTP_TIMEOUT", 60))  # 🔹 HTTP 요청 타임아웃(초)

    # COS (Tencent Cloud S3-compatible storage) 설정
    COS_OBJECT_URL = os.getenv("COS_OBJECT_URL")  # 버킷 기본 URL
    COS_SECRETID = os.getenv("COS_SECRETID")  # 액세스 키 ID
    COS_SECRETKEY = os.getenv("COS_SECRETKEY")  # 시크릿 키
    COS_DEBUG = _env_flag("COS_DEBUG")  # 요청/응답 헤더 디버그 로그 (본문 제외, 콘솔 전용)
    OBJECT_NAME = os.getenv("OBJECT_NAME", "apnic-cn")  # 업로드할 객체 이름

    # 로그 설정
    LOG_DIR = os.getenv("LOG_DIR", "logs")


_REQUIRED_COS_SETTINGS = ("COS_OBJECT_URL", "COS_SECRETID", "COS_SECRETKEY")


class CosSettings(namedtuple("CosSettings", ["bucket_url", "secret_id", "secret_key", "debug"])):
    """Immutable COS connection settings, built once per process."""

    __slots__ = ()

    @classmethod
    def from_config(cls, config=Config):
        missing = [name for name in _REQUIRED_COS_SETTINGS if not getattr(config, name, None)]
        if missing:
            raise ConfigError(f"Missing required COS settings: {', '.join(missing)}")

        return cls(
            bucket_url=config.COS_OBJECT_URL,
            secret_id=config.COS_SECRETID,
            secret_key=config.COS_SECRETKEY,
            debug=bool(getattr(config, "COS_DEBUG", False)),
        )

    def __repr__(self):
        # 시크릿 키는 로그에 남기지 않는다
        return f"CosSettings(bucket_url={self.bucket_url!r}, secret_id={self.secret_id!r}, debug={self.debug!r})"
