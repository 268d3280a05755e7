import os
import tempfile

# log_config 는 import 시점에 로그 폴더를 만든다
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="apnic_sync_logs_"))

from unittest import mock

import pytest


SAMPLE_REGISTRY = [
    "2|apnic|20240101|70000|19830613|20231231|+1000",
    "apnic|*|asn|*|10000|summary",
    "apnic|*|ipv4|*|50000|summary",
    "apnic|*|ipv6|*|10000|summary",
    "apnic|JP|asn|173|1|20020801|allocated",
    "apnic|AU|ipv4|1.0.0.0|256|20110811|assigned",
    "apnic|CN|ipv4|1.0.1.0|256|20110414|allocated",
    "apnic|CN|ipv4|1.0.2.0|512|20110414|allocated",
    "apnic|CN|ipv4|1.0.8.0|2048|20110412|allocated",
    "apnic|JP|ipv4|1.0.16.0|4096|20110412|allocated",
    "apnic|CN|ipv4|1.0.32.0|8192|20110412|allocated",
    "apnic|JP|ipv6|2001:200::|35|19990813|allocated",
    "apnic|CN|ipv4|9.9.9.0|256|20110412|allocated",
    "apnic|CN|ipv6|2001:250::|35|20000426|allocated",
]


@pytest.fixture
def registry_lines():
    return list(SAMPLE_REGISTRY)


def make_response(lines=(), status_code=200, encoding="utf-8"):
    response = mock.MagicMock()
    response.status_code = status_code
    response.encoding = encoding
    response.iter_lines.return_value = iter(lines)
    return response


@pytest.fixture
def http_session(registry_lines):
    session = mock.MagicMock()
    session.get.return_value = make_response(registry_lines)
    return session
