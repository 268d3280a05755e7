"""
APNIC delegated file parsing

Registry lines look like

    apnic|CN|ipv4|1.0.1.0|256|20110414|allocated

Each target-country IPv4 line is turned into a network whose prefix length is
32 - log2(allocated count). Scanning stops at the first IPv6 section line,
so only the IPv4 block that precedes it is ever read.
"""

import ipaddress
import string
from collections import namedtuple
from config import Config
from errors import AllocationCountError, RecordFormatError, ScanError
from log_config import get_sync_logger

logger = get_sync_logger()

IPV4_MAX_PREFIX = 32
MIN_RECORD_FIELDS = 5

# \w 와 같은 문자 집합 (국가 코드 판별용)
_WORD_CHARS = frozenset(string.ascii_letters + string.digits + "_")


class NetworkAllocation(namedtuple("NetworkAllocation", ["network", "line"])):
    __slots__ = ()

    @property
    def cidr(self):
        return str(self.network)


class ScanResult(namedtuple("ScanResult", ["allocation", "error"])):
    """One parsed target line: either an allocation or the error it raised"""

    __slots__ = ()

    @property
    def ok(self):
        return self.error is None


def ipv4_prefix(registry, country):
    return f"{registry}|{country.upper()}|ipv4"


def is_ipv6_section(line, registry=Config.APNIC_REGISTRY):
    """
    True when the line belongs to the IPv6 section of any country
    (registry|XX|ipv6|...). The summary line uses '*' as country code
    and does not count.
    """
    fields = line.split("|", 3)
    if len(fields) < 3:
        return False
    registry_name, country, kind = fields[0], fields[1], fields[2]
    return (
        registry_name == registry
        and kind == "ipv6"
        and len(country) == 2
        and all(c in _WORD_CHARS for c in country)
    )


def allocation_prefix_length(count, line=None):
    """
    Convert an allocated address count into a prefix length (32 - log2(count))

    Raises:
        AllocationCountError: count is not a power of two between 1 and 2**32
    """
    if count <= 0:
        raise AllocationCountError(f"allocated count must be positive: {count}", count=count, line=line)
    if count & (count - 1):
        raise AllocationCountError(f"allocated count is not a power of two: {count}", count=count, line=line)

    prefix_length = IPV4_MAX_PREFIX - (count.bit_length() - 1)
    if prefix_length < 0:
        raise AllocationCountError(
            f"allocated count {count} is larger than the IPv4 address space", count=count, line=line
        )
    return prefix_length


def parse_line(line):
    """
    Parse one registry line into an IPv4 network

    Args:
        line: raw registry line, trailing newline allowed

    Returns:
        ipaddress.IPv4Network

    Raises:
        RecordFormatError: too few fields, non-numeric count or invalid address
    """
    line = line.strip()
    items = line.split("|")
    if len(items) < MIN_RECORD_FIELDS:
        raise RecordFormatError(
            f"parse ipnet items less {MIN_RECORD_FIELDS}: got {len(items)} fields", line=line
        )

    start, count_field = items[3].strip(), items[4]
    # ASCII 숫자만 허용 (int() 는 '1_024', '２５６', ' +256' 도 받아들인다)
    if not (count_field.isascii() and count_field.isdigit()):
        raise RecordFormatError(f"allocated count is not a number: {count_field!r}", line=line)
    count = int(count_field)

    prefix_length = allocation_prefix_length(count, line=line)

    try:
        # 호스트 비트는 마스킹 (정렬되지 않은 시작 주소 허용)
        return ipaddress.IPv4Network(f"{start}/{prefix_length}", strict=False)
    except ValueError as e:
        raise RecordFormatError(f"invalid network {start}/{prefix_length}: {str(e)}", line=line) from e


def scan(lines, country=Config.APNIC_COUNTRY, registry=Config.APNIC_REGISTRY):
    """
    Lazily scan registry lines for one country's IPv4 allocations.

    Yields a ScanResult per target line in encounter order and stops at the
    first IPv6 section line. A read error from the underlying stream is
    raised as ScanError; end of input simply ends the scan.
    """
    marker = ipv4_prefix(registry, country)
    iterator = iter(lines)

    while True:
        try:
            line = next(iterator)
        except StopIteration:
            logger.debug("Registry stream exhausted")
            return
        except OSError as e:
            logger.warning(f"reader read string err: {str(e)}")
            raise ScanError(f"Registry stream read failed: {str(e)}") from e

        if isinstance(line, bytes):
            line = line.decode("utf-8", errors="replace")

        if is_ipv6_section(line, registry):
            logger.debug(f"IPv6 section reached, stop scanning: {line.strip()}")
            return

        if not line.startswith(marker):
            continue

        try:
            network = parse_line(line)
        except RecordFormatError as e:
            yield ScanResult(None, e)
        else:
            yield ScanResult(NetworkAllocation(network, line.strip()), None)


def collect_allocations(results, strict=False):
    """
    Gather allocations from scan results.

    Malformed lines are logged and skipped. With strict=True the first
    error is raised instead.
    """
    allocations = []
    skipped = 0

    for result in results:
        if result.ok:
            allocations.append(result.allocation)
            continue

        if strict:
            raise result.error
        skipped += 1
        logger.warning(f"parse ipnet {result.error.line!r} err: {str(result.error)}")

    if skipped:
        logger.warning(f"Skipped {skipped} malformed registry lines")
    logger.info(f"Collected {len(allocations)} allocations")
    return allocations


def render_cidr_list(allocations):
    """Newline separated CIDR list (one trailing newline) as utf-8 bytes"""
    return "".join(f"{allocation.cidr}\n" for allocation in allocations).encode("utf-8")
