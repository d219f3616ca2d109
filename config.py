# --- Application ---
APP_NAME = "IT Inventory"
REPORT_TITLE = "IT INVENTORY"
REPORT_FILENAME_TEMPLATE = "{hostname}_Inventory.txt"
HEADER_RULE = "=" * 31
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILENAME_TEMPLATE = "it_inventory__{stamp}.log"

# --- Identification ---
# Built-in accounts that are never reported as created users
EXCLUDED_ACCOUNTS = ("Administrator", "DefaultAccount", "Guest", "WDAGUtilityAccount")

# --- Installed Software ---
SOFTWARE_EXCLUDE_KEYWORD = "Microsoft"
# Read once through the native (64-bit) registry view and once through the 32-bit view
UNINSTALL_KEY = r"SOFTWARE\Microsoft\Windows\CurrentVersion\Uninstall"
UNINSTALL_VIEWS = ("64-bit", "32-bit")

# --- Windows Specifications ---
WINDOWS_NT_KEY = r"SOFTWARE\Microsoft\Windows NT\CurrentVersion"
WINDOWS_11_FIRST_BUILD = 22000

# --- Machine Info ---
DELL_VENDOR_KEYWORD = "Dell"

# --- Desktop resolution ---
USER_SHELL_FOLDERS_KEY = r"Software\Microsoft\Windows\CurrentVersion\Explorer\User Shell Folders"

# --- WMI namespaces ---
WMI_STORAGE_NAMESPACE = "root/Microsoft/Windows/Storage"
WMI_NETWORK_NAMESPACE = "root/StandardCimv2"
WMI_MONITOR_NAMESPACE = "root/wmi"

# --- External commands ---
COMMAND_TIMEOUT = 60
AD_MODULE_NAME = "ActiveDirectory"
