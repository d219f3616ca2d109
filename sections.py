import logging

from classifiers import (
    AdapterClass, UpdateCategory, classify_adapter, classify_disk, classify_equipment,
    classify_memory_type, classify_update, describe_chassis, normalize_product_name,
)
from config import *
from decoders import (
    NOT_AVAILABLE, decode_char_array, decode_cim_datetime, decode_epoch, format_gb,
    format_uptime, value_or_default,
)
from platform_query import QueryError

logger = logging.getLogger(__name__)


class SectionResult:
    """ Outcome of one section: written in full, written with nothing to list, or degraded. """
    OK = "ok"
    EMPTY = "empty"
    DEGRADED = "degraded"

    def __init__(self, status, reason=None):
        self.status = status
        self.reason = reason

    @classmethod
    def ok(cls):
        return cls(cls.OK)

    @classmethod
    def empty(cls, reason=None):
        return cls(cls.EMPTY, reason)

    @classmethod
    def degraded(cls, reason):
        return cls(cls.DEGRADED, reason)

    @property
    def is_degraded(self):
        return self.status == self.DEGRADED

    def __repr__(self):
        return f"SectionResult({self.status!r}, {self.reason!r})"


def unable_to_retrieve(title):
    return f"Unable to retrieve {title.lower()} information."


# --- Section Generators ---
# Each takes the report sink and the query service, writes the section body
# (the driver writes the header and the terminating blank line) and returns
# a SectionResult.

def write_identification(sink, query):
    sink.append_line(f"Computer Name: {query.get_computer_name()}")
    sink.append_line("Created Users:")
    excluded = {name.lower() for name in EXCLUDED_ACCOUNTS}
    users = [
        account.name for account in query.get_user_accounts()
        if account.name and account.local_account and not account.disabled
        and account.name.lower() not in excluded
    ]
    if not users:
        sink.append_line("No created users found.")
        return SectionResult.empty("no enabled local accounts")
    sink.append_lines(users)
    return SectionResult.ok()


def write_operating_system(sink, query):
    os_info = query.get_operating_system()
    sink.append_lines([
        f"System: {value_or_default(os_info.caption)}",
        f"Version: {value_or_default(os_info.version)}",
        f"Architecture: {value_or_default(os_info.architecture)}",
        f"Installation Date: {decode_cim_datetime(os_info.install_date)}",
        f"Last Boot: {decode_cim_datetime(os_info.last_boot)}",
        f"Uptime: {format_uptime(os_info.last_boot)}",
    ])
    return SectionResult.ok()


def write_windows_specifications(sink, query):
    specs = query.get_windows_specifications()
    if specs.current_build and specs.ubr is not None:
        build = f"{specs.current_build}.{specs.ubr}"
    else:
        build = value_or_default(specs.current_build)
    sink.append_lines([
        f"Edition: {value_or_default(normalize_product_name(specs.product_name, specs.current_build))}",
        f"Version: {value_or_default(specs.display_version or specs.release_id)}",
        f"Installed on: {decode_epoch(specs.install_date)}",
        f"OS Build: {build}",
        f"Edition ID: {value_or_default(specs.edition_id)}",
    ])
    return SectionResult.ok()


def write_equipment_type(sink, query):
    system = query.get_computer_system()
    sink.append_line(f"Type: {classify_equipment(system.pc_system_type)}")
    return SectionResult.ok()


def write_processor(sink, query):
    cpu = query.get_processor()
    if cpu.max_clock_speed:
        speed = f"{round(cpu.max_clock_speed / 1000, 2)} GHz"
    else:
        speed = NOT_AVAILABLE
    sink.append_lines([
        f"Processor: {value_or_default(cpu.name)}",
        f"Cores: {value_or_default(cpu.cores)}",
        f"Logical Processors: {value_or_default(cpu.logical_processors)}",
        f"Max Speed: {speed}",
    ])
    return SectionResult.ok()


def _capacity_bytes(module):
    try:
        return int(module.capacity or 0)
    except (TypeError, ValueError):
        logger.warning(f"Unreadable memory capacity '{module.capacity}' in slot {module.slot}")
        return 0


def write_ram(sink, query):
    modules = query.get_memory_modules()
    if not modules:
        sink.append_line("No memory modules found.")
        return SectionResult.empty("no memory modules reported")
    total = sum(_capacity_bytes(module) for module in modules)
    sink.append_line(f"Total: {format_gb(total)}")
    for index, module in enumerate(modules, start=1):
        slot = module.slot or f"Module {index}"
        speed = f"{module.speed} MHz" if module.speed else NOT_AVAILABLE
        sink.append_line(
            f"{slot}: {value_or_default(module.manufacturer)} - {format_gb(module.capacity)}"
            f" - {speed} - {classify_memory_type(module.memory_type)}"
        )
    return SectionResult.ok()


def write_storage(sink, query):
    result = SectionResult.ok()
    sink.append_line("Disks:")
    try:
        disks = query.get_physical_disks()
    except QueryError as e:
        logger.error(f"Physical Disk Query Failed: {e}")
        sink.append_line("Unable to retrieve physical disk information.")
        disks = []
        result = SectionResult.degraded(str(e))
    else:
        if not disks:
            sink.append_line("No physical disks found.")
    for disk in disks:
        disk_type = classify_disk(disk.media_type, disk.model, disk.friendly_name, disk.device_id)
        name = value_or_default(disk.friendly_name or disk.model)
        sink.append_line(
            f"{name} - {disk_type} - {format_gb(disk.size)} - Serial: {value_or_default(disk.serial_number)}"
        )

    sink.append_line("Space by Drive:")
    for volume in query.get_volumes():
        if not volume.file_system:
            continue
        line = f"{volume.drive_letter} - Total: {format_gb(volume.size)} - Free: {format_gb(volume.free_space)}"
        try:
            used = (int(volume.size) - int(volume.free_space)) / int(volume.size) * 100
            line += f" - Used: {round(used, 1)}%"
        except (TypeError, ValueError, ZeroDivisionError):
            pass
        sink.append_line(line)
    return result


def _format_adapter(adapter, addresses):
    ipv4 = ", ".join(addresses.get(adapter.name, [])) or NOT_AVAILABLE
    return (
        f"{value_or_default(adapter.name)} ({value_or_default(adapter.description)})"
        f" - MAC: {value_or_default(adapter.mac_address)} - IPv4: {ipv4}"
    )


def write_network(sink, query):
    active = [adapter for adapter in query.get_network_adapters() if adapter.status == "Up"]
    addresses = {}
    for ip in query.get_ipv4_addresses():
        addresses.setdefault(ip.interface_alias, []).append(ip.address)

    listings = {AdapterClass.WIFI: [], AdapterClass.ETHERNET: []}
    for adapter in active:
        for label in classify_adapter(adapter.name, adapter.description):
            listings[label].append(adapter)

    for label in (AdapterClass.WIFI, AdapterClass.ETHERNET):
        sink.append_line(f"{label}:")
        if listings[label]:
            sink.append_lines(_format_adapter(adapter, addresses) for adapter in listings[label])
        else:
            sink.append_line(f"No active {label} interfaces found.")

    sink.append_line("All Active Interfaces:")
    if not active:
        sink.append_line("No active network interfaces found.")
        return SectionResult.empty("no adapters up")
    sink.append_lines(_format_adapter(adapter, addresses) for adapter in active)
    return SectionResult.ok()


def write_installed_software(sink, query):
    keyword = SOFTWARE_EXCLUDE_KEYWORD.lower()
    applications = [
        app for app in query.get_installed_software()
        if app.display_name and keyword not in app.display_name.lower()
    ]
    if not applications:
        sink.append_line("No installed software found.")
        return SectionResult.empty("no third-party applications")
    applications.sort(key=lambda app: app.display_name.lower())
    for app in applications:
        sink.append_line(
            f"{app.display_name} - {value_or_default(app.display_version)} - {value_or_default(app.publisher)}"
        )
    return SectionResult.ok()


def write_machine_info(sink, query):
    product = query.get_system_product()
    vendor = value_or_default(product.vendor)
    sink.append_lines([
        f"Model: {value_or_default(product.name)}",
        f"Manufacturer: {vendor}",
        f"UUID: {value_or_default(product.uuid)}",
    ])
    # Dell prints its Service Tag on the BIOS serial, not on IdentifyingNumber
    if DELL_VENDOR_KEYWORD.lower() in str(product.vendor or "").lower():
        bios = query.get_bios()
        sink.append_line(f"Service Tag: {value_or_default(bios.serial_number)}")
    else:
        sink.append_line(f"Serial Number: {value_or_default(product.identifying_number)}")
    return SectionResult.ok()


def write_bios(sink, query):
    bios = query.get_bios()
    versions = ", ".join(str(version) for version in bios.versions if version) or NOT_AVAILABLE
    sink.append_lines([
        f"Manufacturer: {value_or_default(bios.manufacturer)}",
        f"BIOS Version: {value_or_default(bios.smbios_version)}",
        f"BIOS Versions: {versions}",
        f"Release Date: {decode_cim_datetime(bios.release_date)}",
        f"Serial Number: {value_or_default(bios.serial_number)}",
    ])
    enclosure = query.get_enclosure()
    chassis = ", ".join(describe_chassis(code) for code in enclosure.chassis_types) or NOT_AVAILABLE
    sink.append_line(f"Chassis Types: {chassis}")
    return SectionResult.ok()


def write_monitors(sink, query):
    monitors = query.get_monitors()
    if not monitors:
        sink.append_line("No monitors found.")
        return SectionResult.empty("no monitors reported")
    for index, monitor in enumerate(monitors, start=1):
        sink.append_line(
            f"Monitor {index}: Manufacturer: {decode_char_array(monitor.manufacturer_name)}"
            f" - Model: {decode_char_array(monitor.user_friendly_name)}"
            f" - Serial: {decode_char_array(monitor.serial_number)}"
        )
    return SectionResult.ok()


def _format_update_date(date):
    if hasattr(date, "strftime"):
        return date.strftime("%Y-%m-%d")
    return str(value_or_default(date))


def write_windows_updates(sink, query):
    try:
        history = query.get_update_history()
    except QueryError as e:
        logger.error(f"Windows Update History Query Failed: {e}")
        sink.append_line("Unable to retrieve Windows Update history.")
        return SectionResult.degraded(str(e))

    if not history.entries:
        sink.append_line("No update history found.")
        return SectionResult.empty("no update history")

    grouped = {category: [] for category in UpdateCategory.ORDER}
    for entry in history.entries:
        grouped[classify_update(entry.title)].append(entry)

    # untitled history rows are dropped by the query, so count what is listed
    sink.append_line(f"Total Updates: {len(history.entries)}")
    for category in UpdateCategory.ORDER:
        if not grouped[category]:
            continue
        sink.append_line(f"{category}:")
        sink.append_lines(f"{_format_update_date(entry.date)} - {entry.title}" for entry in grouped[category])
    return SectionResult.ok()


def write_active_directory(sink, query):
    if not query.has_directory_service():
        sink.append_line(f"{AD_MODULE_NAME} module not found.")
        return SectionResult.degraded(f"{AD_MODULE_NAME} module not installed")
    try:
        computer = query.get_directory_computer()
    except QueryError as e:
        logger.error(f"Active Directory Query Failed: {e}")
        sink.append_line("Unable to retrieve Active Directory information.")
        return SectionResult.degraded(str(e))
    sink.append_line(f"Distinguished Name: {value_or_default(computer.distinguished_name)}")
    return SectionResult.ok()


# Order and titles are part of the report format.
SECTIONS = [
    ("IDENTIFICATION", write_identification),
    ("OPERATING SYSTEM", write_operating_system),
    ("WINDOWS SPECIFICATIONS", write_windows_specifications),
    ("EQUIPMENT TYPE", write_equipment_type),
    ("PROCESSOR", write_processor),
    ("RAM", write_ram),
    ("STORAGE", write_storage),
    ("NETWORK", write_network),
    ("INSTALLED SOFTWARE", write_installed_software),
    ("MACHINE INFO", write_machine_info),
    ("BIOS & FIRMWARE", write_bios),
    ("MONITORS", write_monitors),
    ("WINDOWS UPDATES", write_windows_updates),
    ("ACTIVE DIRECTORY", write_active_directory),
]
