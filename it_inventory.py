import logging
import os
import platform
import sys
import tempfile
import time

from config import *
from platform_query import WmiQueryService, check_wmi_service
from report_writer import ReportWriter, default_report_path
from sections import SECTIONS, SectionResult, unable_to_retrieve

logger = logging.getLogger("it_inventory")


def setup_logging():
    """ File log at INFO in the temp dir, console at ERROR. Returns the log file path. """
    logger.setLevel(logging.DEBUG)
    log_path = os.path.join(tempfile.gettempdir(), LOG_FILENAME_TEMPLATE.format(stamp=time.strftime('%Y%m%d_%H%M%S')))
    fh = logging.FileHandler(log_path)
    fh.setLevel(logging.INFO)
    # console only shows errors; the completion line is printed separately
    ch = logging.StreamHandler()
    ch.setLevel(logging.ERROR)
    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    fh.setFormatter(formatter)
    ch.setFormatter(formatter)
    # collector modules log under their own names
    root = logging.getLogger()
    root.setLevel(logging.INFO)
    root.addHandler(fh)
    root.addHandler(ch)
    return log_path


def write_header(sink, generated_at=None):
    generated_at = generated_at or time.strftime(TIMESTAMP_FORMAT)
    sink.append_lines([
        HEADER_RULE,
        f"{REPORT_TITLE} - {generated_at}",
        HEADER_RULE,
        "",
    ])


def run_section(sink, title, generator, query):
    """
    Writes one section. The header and the closing blank line are always
    written; a failure inside the generator becomes a placeholder line.
    """
    sink.append_line(f"[{title}]")
    try:
        result = generator(sink, query)
    except Exception as e:
        err = f"{title.title()} Section Failed: {type(e).__name__}: {e}"
        logger.error(err)
        sink.append_line(unable_to_retrieve(title))
        result = SectionResult.degraded(err)
    sink.append_line()
    return result


def generate_report(sink, query, generated_at=None):
    """
    Clears the previous report, writes the header and every section in order.

    OSError from clearing the file or writing the header propagates; nothing
    after that point stops the run.
    """
    sink.clear()
    write_header(sink, generated_at)
    results = []
    for title, generator in SECTIONS:
        logger.info(f"Collecting {title}...")
        result = run_section(sink, title, generator, query)
        if result.is_degraded:
            logger.warning(f"Section [{title}] degraded: {result.reason}")
        results.append((title, result))
    return results


def main():
    log_path = setup_logging()
    logger.info(f"{APP_NAME} started. Log file: {log_path}")

    if platform.system() != "Windows":
        logger.error(f"{APP_NAME} is designed for Windows only. Detected OS: {platform.system()}")
        return 1

    wmi_service_ok, wmi_service_status = check_wmi_service()
    if not wmi_service_ok:
        logger.warning(f"WMI Service ('Winmgmt') not running or inaccessible. Status: {wmi_service_status}")

    query = WmiQueryService.connect()
    report_path = default_report_path(query.get_computer_name())
    sink = ReportWriter(report_path)

    try:
        results = generate_report(sink, query)
    except OSError as e:
        logger.error(f"Cannot write report '{report_path}': {type(e).__name__}: {e}")
        return 1

    degraded = [title for title, result in results if result.is_degraded]
    logger.info(f"Report complete. Degraded sections: {', '.join(degraded) or 'none'}")
    print(f"Inventory generated: {report_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
