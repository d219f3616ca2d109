import logging
import os

from config import REPORT_FILENAME_TEMPLATE, USER_SHELL_FOLDERS_KEY

logger = logging.getLogger(__name__)

try:
    import winreg
    _winreg_available = True
except ImportError:
    _winreg_available = False


class ReportWriter:
    """
    Append-only text sink bound to one report file.

    Each append opens, writes and closes the file, so lines already written
    survive any later failure in the run.
    """

    def __init__(self, path, encoding="utf-8"):
        self.path = path
        self.encoding = encoding

    def clear(self):
        """ Removes a previous report at this path. Safe to call when none exists. """
        try:
            os.remove(self.path)
            logger.info(f"Removed previous report: {self.path}")
        except FileNotFoundError:
            pass

    def append_line(self, text=""):
        with open(self.path, "a", encoding=self.encoding, newline="\n") as handle:
            handle.write(f"{text}\n")

    def append_lines(self, lines):
        lines = list(lines)
        if not lines:
            return
        with open(self.path, "a", encoding=self.encoding, newline="\n") as handle:
            for line in lines:
                handle.write(f"{line}\n")


def get_desktop_path():
    """ Current user's Desktop, following folder redirection (e.g. OneDrive) when set. """
    if _winreg_available:
        try:
            with winreg.OpenKey(winreg.HKEY_CURRENT_USER, USER_SHELL_FOLDERS_KEY, 0, winreg.KEY_READ) as key:
                value, _ = winreg.QueryValueEx(key, "Desktop")
                desktop = os.path.expandvars(value)
                if os.path.isdir(desktop):
                    return desktop
                logger.warning(f"Registered Desktop folder does not exist: {desktop}")
        except FileNotFoundError:
            logger.info("No Desktop entry under User Shell Folders.")
        except OSError as e:
            logger.warning(f"Could not read Desktop location from registry: {e}")
    return os.path.join(os.path.expanduser("~"), "Desktop")


def default_report_path(hostname, desktop=None):
    desktop = desktop or get_desktop_path()
    return os.path.join(desktop, REPORT_FILENAME_TEMPLATE.format(hostname=hostname))
