# --- Raw Record Classes ---
# One class per query kind. Values are kept exactly as the platform reports
# them; decoding and classification happen in the section generators.


class UserAccount:
    """ One account from Win32_UserAccount. """
    def __init__(self, name=None, local_account=False, disabled=False):
        self.name = name
        self.local_account = local_account
        self.disabled = disabled


class OperatingSystem:
    """ Win32_OperatingSystem. Timestamps are packed CIM datetime strings. """
    def __init__(self, caption=None, version=None, architecture=None,
                 install_date=None, last_boot=None):
        self.caption = caption
        self.version = version
        self.architecture = architecture
        self.install_date = install_date
        self.last_boot = last_boot


class WindowsSpecifications:
    """ Values read from HKLM\\SOFTWARE\\Microsoft\\Windows NT\\CurrentVersion. """
    def __init__(self, product_name=None, edition_id=None, display_version=None,
                 release_id=None, current_build=None, ubr=None, install_date=None):
        self.product_name = product_name
        self.edition_id = edition_id
        self.display_version = display_version
        self.release_id = release_id
        self.current_build = current_build
        self.ubr = ubr
        # Seconds since the epoch (REG_DWORD)
        self.install_date = install_date


class ComputerSystem:
    def __init__(self, name=None, manufacturer=None, model=None, pc_system_type=None):
        self.name = name
        self.manufacturer = manufacturer
        self.model = model
        self.pc_system_type = pc_system_type


class Processor:
    def __init__(self, name=None, cores=None, logical_processors=None, max_clock_speed=None):
        self.name = name
        self.cores = cores
        self.logical_processors = logical_processors
        # MHz
        self.max_clock_speed = max_clock_speed


class MemoryModule:
    """ One Win32_PhysicalMemory module. Capacity is in bytes, speed in MHz. """
    def __init__(self, manufacturer=None, capacity=None, speed=None, memory_type=None, slot=None):
        self.manufacturer = manufacturer
        self.capacity = capacity
        self.speed = speed
        self.memory_type = memory_type
        self.slot = slot


class PhysicalDisk:
    """ One MSFT_PhysicalDisk. MediaType: 3=HDD, 4=SSD, 0=Unspecified. """
    def __init__(self, friendly_name=None, media_type=None, model=None,
                 serial_number=None, device_id=None, size=None):
        self.friendly_name = friendly_name
        self.media_type = media_type
        self.model = model
        self.serial_number = serial_number
        self.device_id = device_id
        self.size = size


class Volume:
    def __init__(self, drive_letter=None, size=None, free_space=None, file_system=None):
        self.drive_letter = drive_letter
        self.size = size
        self.free_space = free_space
        # None or empty for raw/unformatted volumes
        self.file_system = file_system


class NetworkAdapter:
    def __init__(self, name=None, description=None, status=None, mac_address=None):
        self.name = name
        self.description = description
        self.status = status
        self.mac_address = mac_address


class IPAddress:
    def __init__(self, interface_alias=None, address=None):
        self.interface_alias = interface_alias
        self.address = address


class InstalledApplication:
    """ One Uninstall registry entry; view is the registry view it came from. """
    def __init__(self, display_name=None, display_version=None, publisher=None, view=None):
        self.display_name = display_name
        self.display_version = display_version
        self.publisher = publisher
        self.view = view


class SystemProduct:
    """ Win32_ComputerSystemProduct. """
    def __init__(self, name=None, vendor=None, uuid=None, identifying_number=None):
        self.name = name
        self.vendor = vendor
        self.uuid = uuid
        self.identifying_number = identifying_number


class Bios:
    def __init__(self, manufacturer=None, smbios_version=None, versions=None,
                 release_date=None, serial_number=None):
        self.manufacturer = manufacturer
        self.smbios_version = smbios_version
        self.versions = list(versions or [])
        self.release_date = release_date
        self.serial_number = serial_number


class Enclosure:
    def __init__(self, chassis_types=None):
        self.chassis_types = list(chassis_types or [])


class Monitor:
    """ WmiMonitorID. Every field is a raw array of character codes. """
    def __init__(self, manufacturer_name=None, user_friendly_name=None, serial_number=None):
        self.manufacturer_name = manufacturer_name
        self.user_friendly_name = user_friendly_name
        self.serial_number = serial_number


class UpdateEntry:
    def __init__(self, title=None, date=None):
        self.title = title
        self.date = date


class UpdateHistory:
    def __init__(self, total_count=0, entries=None):
        self.total_count = total_count
        self.entries = list(entries or [])


class DirectoryComputer:
    def __init__(self, distinguished_name=None):
        self.distinguished_name = distinguished_name
