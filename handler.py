import traceback
from config import Config, CosSettings
from errors import SyncError
from log_config import get_sync_logger
from services.cos_uploader import CosUploader
from services.registry_fetcher import open_registry
from services.registry_parser import collect_allocations, render_cidr_list, scan

logger = get_sync_logger()

# 프로세스당 한 번만 생성되는 COS 업로더
uploader = None


def get_uploader():
    global uploader
    if uploader is None:
        settings = CosSettings.from_config(Config)
        logger.info(f"Initializing COS uploader: {settings!r}")
        uploader = CosUploader.from_settings(settings)
    return uploader


def sync_registry(uploader, url, country, object_key, session=None):
    """
    Fetch the registry, extract the country's IPv4 networks and upload them

    Returns:
        Number of networks written to the object

    Raises:
        FetchError: registry download failed, nothing is uploaded
        ScanError: registry stream broke mid-read, nothing is uploaded
        UploadError: the object write failed
    """
    logger.info(f"Syncing {country} IPv4 allocations from {url} to {object_key}")

    with open_registry(url, session=session) as lines:
        allocations = collect_allocations(scan(lines, country=country))

    content = render_cidr_list(allocations)
    uploader.upload(object_key, content)
    return len(allocations)


def main_handler(event=None, context=None):
    """Cloud function entry point"""
    try:
        count = sync_registry(
            get_uploader(),
            url=Config.APNIC_URL,
            country=Config.APNIC_COUNTRY,
            object_key=Config.OBJECT_NAME,
        )
    except SyncError as e:
        logger.error(f"APNIC sync failed: {str(e)}, {traceback.format_exc()}")
        raise

    logger.info(f"APNIC sync done: {count} networks -> {Config.OBJECT_NAME}")
    return {"object": Config.OBJECT_NAME, "count": count}


if __name__ == "__main__":
    main_handler()
