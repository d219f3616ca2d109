import re

from config import WINDOWS_11_FIRST_BUILD

# --- Labels ---

class DiskType:
    HDD = "HDD"
    SSD = "SSD"
    USB = "USB Drive"
    UNKNOWN = "Unknown"


class AdapterClass:
    WIFI = "Wi-Fi"
    ETHERNET = "Ethernet"


class UpdateCategory:
    QUALITY = "Quality Update"
    DRIVER = "Driver Update"
    DEFINITION = "Definition Update"
    OTHER = "Other Updates"

    ORDER = (QUALITY, DRIVER, DEFINITION, OTHER)


class EquipmentType:
    DESKTOP = "Desktop"
    NOTEBOOK = "Notebook"


UNKNOWN = "Unknown"

# --- Rule Tables ---
# Evaluated top-down, first match wins.

# Win32_PhysicalMemory SMBIOSMemoryType / MemoryType
MEMORY_TYPES = {
    20: "DDR",
    21: "DDR2",
    22: "DDR2 FB-DIMM",
    24: "DDR3",
    26: "DDR4",
    34: "DDR5",
}

# MSFT_PhysicalDisk MediaType
DISK_MEDIA_TYPES = {
    3: DiskType.HDD,
    4: DiskType.SSD,
}

DISK_NAME_RULES = [
    (re.compile(r"USB", re.IGNORECASE), DiskType.USB),
    (re.compile(r"Cruzer|Flash|Thumb|Stick|Pen|Drive", re.IGNORECASE), DiskType.USB),
    (re.compile(r"SSD", re.IGNORECASE), DiskType.SSD),
    (re.compile(r"HDD", re.IGNORECASE), DiskType.HDD),
]

ADAPTER_RULES = [
    (re.compile(r"Wireless|Wi-Fi", re.IGNORECASE), AdapterClass.WIFI),
    (re.compile(r"Ethernet", re.IGNORECASE), AdapterClass.ETHERNET),
]

UPDATE_RULES = [
    (re.compile(r"Quality|Cumulative", re.IGNORECASE), UpdateCategory.QUALITY),
    (re.compile(r"Driver", re.IGNORECASE), UpdateCategory.DRIVER),
    (re.compile(r"Definition|Antivirus", re.IGNORECASE), UpdateCategory.DEFINITION),
]

# SMBIOS System Enclosure / Chassis Types
CHASSIS_TYPES = {
    1: "Other",
    2: "Unknown",
    3: "Desktop",
    4: "Low Profile Desktop",
    5: "Pizza Box",
    6: "Mini Tower",
    7: "Tower",
    8: "Portable",
    9: "Laptop",
    10: "Notebook",
    11: "Hand Held",
    12: "Docking Station",
    13: "All in One",
    14: "Sub Notebook",
    15: "Space-Saving",
    16: "Lunch Box",
    17: "Main System Chassis",
    18: "Expansion Chassis",
    19: "SubChassis",
    20: "Bus Expansion Chassis",
    21: "Peripheral Chassis",
    22: "Storage Chassis",
    23: "Rack Mount Chassis",
    24: "Sealed-Case PC",
    30: "Tablet",
    31: "Convertible",
    32: "Detachable",
    35: "Mini PC",
    36: "Stick PC",
}


def _to_int(value):
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _first_match(rules, text, default):
    if text:
        for pattern, label in rules:
            if pattern.search(text):
                return label
    return default


# --- Classifiers ---

def classify_memory_type(code):
    return MEMORY_TYPES.get(_to_int(code), UNKNOWN)


def classify_disk(media_type, model=None, friendly_name=None, device_id=None):
    """
    The MediaType code decides when it is HDD or SSD. Otherwise the model,
    friendly name and device id are searched for USB and flash-drive names,
    then for SSD/HDD in the name.
    """
    label = DISK_MEDIA_TYPES.get(_to_int(media_type))
    if label:
        return label
    haystack = " ".join(str(part) for part in (model, friendly_name, device_id) if part)
    return _first_match(DISK_NAME_RULES, haystack, DiskType.UNKNOWN)


def classify_adapter(name, description):
    """ Every adapter class the adapter belongs to, in listing order. May be empty. """
    haystack = " ".join(part for part in (name, description) if part)
    return [label for pattern, label in ADAPTER_RULES if haystack and pattern.search(haystack)]


def classify_update(title):
    return _first_match(UPDATE_RULES, title, UpdateCategory.OTHER)


def classify_equipment(pc_system_type):
    # PCSystemType 1 is Desktop; mobile, workstation and the rest report as Notebook
    if _to_int(pc_system_type) == 1:
        return EquipmentType.DESKTOP
    return EquipmentType.NOTEBOOK


def describe_chassis(code):
    number = _to_int(code)
    return f"{code} ({CHASSIS_TYPES.get(number, UNKNOWN)})"


def normalize_product_name(product_name, current_build):
    """ ProductName still says 'Windows 10' on Windows 11 builds. """
    if not product_name:
        return product_name
    build = _to_int(current_build)
    if build is not None and build >= WINDOWS_11_FIRST_BUILD and "Windows 10" in product_name:
        return product_name.replace("Windows 10", "Windows 11")
    return product_name
