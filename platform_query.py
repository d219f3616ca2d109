import logging
import socket
import subprocess

import psutil

from config import *
from system_info import (
    Bios, ComputerSystem, DirectoryComputer, Enclosure, InstalledApplication, IPAddress,
    MemoryModule, Monitor, NetworkAdapter, OperatingSystem, PhysicalDisk, Processor,
    SystemProduct, UpdateEntry, UpdateHistory, UserAccount, Volume, WindowsSpecifications,
)

logger = logging.getLogger(__name__)

# --- Attempt Imports ---
# WMI
try:
    import wmi
    _wmi_available = True
except ImportError:
    _wmi_available = False
# WinReg
try:
    import winreg
    _winreg_available = True
except ImportError:
    _winreg_available = False
# Windows Update Agent COM API & COM utilities
try:
    import win32com.client
    import pythoncom
    _wuapi_available = True
except ImportError:
    _wuapi_available = False
    pythoncom = None

# MSFT_NetAdapter InterfaceOperationalStatus
ADAPTER_STATUS = {
    1: "Up",
    2: "Down",
    3: "Testing",
    4: "Unknown",
    5: "Dormant",
    6: "Not Present",
    7: "Lower Layer Down",
}


class QueryError(Exception):
    """ A platform query could not be answered (missing module, namespace, API or data). """


# --- Helper Functions ---
def run_command(command, timeout=COMMAND_TIMEOUT):
    """Runs a command and returns its stdout, stderr, and return code."""
    try:
        result = subprocess.run(command, capture_output=True, text=True, shell=True, timeout=timeout, check=False)
        return result.stdout, result.stderr, result.returncode
    except FileNotFoundError:
        logger.error(f"Command not found: {command.split()[0]}")
        return None, f"Command not found: {command.split()[0]}", -1
    except subprocess.TimeoutExpired:
        logger.error(f"Command timed out: {command}")
        return None, f"Command timed out after {timeout} seconds", -1
    except Exception as e:
        logger.error(f"Error running command '{command}': {e}")
        return None, f"Unexpected error: {e}", -1


def run_powershell(script, timeout=COMMAND_TIMEOUT):
    return run_command(f'powershell -NoProfile -Command "{script}"', timeout=timeout)


def check_wmi_service() -> (bool, str):
    """ Checks if the WMI service ('Winmgmt') is running. """
    try:
        service = psutil.win_service_get('Winmgmt')
        status = service.status()
        if status == 'running':
            return True, "Running"
        else:
            return False, f"Service status: {status}"
    except psutil.NoSuchProcess:
        return False, "Service not found (NoSuchProcess)"
    except Exception as e:
        return False, f"Error checking service: {e}"


def _connect_namespace(label, namespace=None):
    """ Opens one WMI namespace, or returns None and logs why it could not. """
    try:
        if namespace:
            connection = wmi.WMI(namespace=namespace)
        else:
            connection = wmi.WMI()
        logger.info(f"Connected to WMI {label} namespace.")
        return connection
    except Exception as e:
        logger.error(f"WMI {label} Namespace Connect Failed: {type(e).__name__}: {e}")
        return None


def _first(items):
    items = list(items or [])
    return items[0] if items else None


class WmiQueryService:
    """
    Platform Query Service backed by WMI, the registry, the Windows Update
    Agent COM API and PowerShell.

    Connections are injectable so the mapping from WMI objects to records can
    be exercised with stand-in objects. Use connect() on a real machine.
    """

    def __init__(self, cimv2=None, storage=None, network=None, monitors=None):
        self.cimv2 = cimv2
        self.storage = storage
        self.network = network
        self.monitors = monitors

    @classmethod
    def connect(cls):
        if not _wmi_available:
            logger.error("WMI module not found. WMI backed sections will be degraded.")
            return cls()
        return cls(
            cimv2=_connect_namespace("cimv2"),
            storage=_connect_namespace("Storage", WMI_STORAGE_NAMESPACE),
            network=_connect_namespace("StandardCimv2", WMI_NETWORK_NAMESPACE),
            monitors=_connect_namespace("root\\wmi", WMI_MONITOR_NAMESPACE),
        )

    def _require(self, connection, label):
        if connection is None:
            raise QueryError(f"WMI {label} namespace unavailable")
        return connection

    # --- Identification ---
    def get_computer_name(self):
        return socket.gethostname()

    def get_user_accounts(self):
        c = self._require(self.cimv2, "cimv2")
        return [
            UserAccount(name=user.Name, local_account=bool(user.LocalAccount), disabled=bool(user.Disabled))
            for user in c.Win32_UserAccount(LocalAccount=True)
        ]

    # --- Operating System ---
    def get_operating_system(self):
        c = self._require(self.cimv2, "cimv2")
        os_info = _first(c.Win32_OperatingSystem())
        if os_info is None:
            raise QueryError("Win32_OperatingSystem returned no instance")
        return OperatingSystem(
            caption=os_info.Caption,
            version=os_info.Version,
            architecture=os_info.OSArchitecture,
            install_date=os_info.InstallDate,
            last_boot=os_info.LastBootUpTime,
        )

    def get_windows_specifications(self):
        values = self._read_registry_values(
            WINDOWS_NT_KEY,
            ("ProductName", "EditionID", "DisplayVersion", "ReleaseId", "CurrentBuild", "UBR", "InstallDate"),
        )
        return WindowsSpecifications(
            product_name=values["ProductName"],
            edition_id=values["EditionID"],
            display_version=values["DisplayVersion"],
            release_id=values["ReleaseId"],
            current_build=values["CurrentBuild"],
            ubr=values["UBR"],
            install_date=values["InstallDate"],
        )

    # --- Hardware ---
    def get_computer_system(self):
        c = self._require(self.cimv2, "cimv2")
        system = _first(c.Win32_ComputerSystem())
        if system is None:
            raise QueryError("Win32_ComputerSystem returned no instance")
        return ComputerSystem(
            name=system.Name,
            manufacturer=system.Manufacturer,
            model=system.Model,
            pc_system_type=system.PCSystemType,
        )

    def get_processor(self):
        c = self._require(self.cimv2, "cimv2")
        cpu = _first(c.Win32_Processor())
        if cpu is None:
            raise QueryError("Win32_Processor returned no instance")
        logical = cpu.NumberOfLogicalProcessors
        if logical is None:
            logical = psutil.cpu_count(logical=True)
        return Processor(
            name=(cpu.Name or "").strip() or None,
            cores=cpu.NumberOfCores,
            logical_processors=logical,
            max_clock_speed=cpu.MaxClockSpeed,
        )

    def get_memory_modules(self):
        c = self._require(self.cimv2, "cimv2")
        modules = []
        for mem in c.Win32_PhysicalMemory():
            # SMBIOSMemoryType covers DDR4/DDR5; older firmware only fills MemoryType
            memory_type = mem.SMBIOSMemoryType or mem.MemoryType
            modules.append(MemoryModule(
                manufacturer=(mem.Manufacturer or "").strip() or None,
                capacity=mem.Capacity,
                speed=mem.Speed,
                memory_type=memory_type,
                slot=mem.DeviceLocator or mem.BankLabel,
            ))
        return modules

    def get_physical_disks(self):
        c_storage = self._require(self.storage, "Storage")
        return [
            PhysicalDisk(
                friendly_name=disk.FriendlyName,
                media_type=disk.MediaType,
                model=disk.Model,
                serial_number=(disk.SerialNumber or "").strip() or None,
                device_id=disk.DeviceId,
                size=disk.Size,
            )
            for disk in c_storage.MSFT_PhysicalDisk()
        ]

    def get_volumes(self):
        c = self._require(self.cimv2, "cimv2")
        return [
            Volume(
                drive_letter=disk.DeviceID,
                size=disk.Size,
                free_space=disk.FreeSpace,
                file_system=disk.FileSystem,
            )
            for disk in c.Win32_LogicalDisk()
        ]

    # --- Network ---
    def get_network_adapters(self):
        c_net = self._require(self.network, "StandardCimv2")
        adapters = []
        for adapter in c_net.MSFT_NetAdapter():
            status_code = adapter.InterfaceOperationalStatus
            adapters.append(NetworkAdapter(
                name=adapter.Name,
                description=adapter.InterfaceDescription,
                status=ADAPTER_STATUS.get(status_code, f"Unknown Code ({status_code})"),
                mac_address=adapter.MacAddress or adapter.PermanentAddress,
            ))
        return adapters

    def get_ipv4_addresses(self):
        addresses = []
        for interface, entries in psutil.net_if_addrs().items():
            for entry in entries:
                if entry.family == socket.AF_INET:
                    addresses.append(IPAddress(interface_alias=interface, address=entry.address))
        return addresses

    # --- Software ---
    def get_installed_software(self):
        """ Entries from both Uninstall views, unfiltered and without de-duplication. """
        if not _winreg_available:
            raise QueryError("winreg module not found")
        # Explicit view flags; a 32-bit interpreter would otherwise be redirected to WOW6432Node twice
        view_flags = {"64-bit": winreg.KEY_WOW64_64KEY, "32-bit": winreg.KEY_WOW64_32KEY}
        applications = []
        for view in UNINSTALL_VIEWS:
            try:
                root = winreg.OpenKey(winreg.HKEY_LOCAL_MACHINE, UNINSTALL_KEY, 0,
                                      winreg.KEY_READ | view_flags[view])
            except FileNotFoundError:
                logger.info(f"Uninstall key not present for {view} view: {UNINSTALL_KEY}")
                continue
            with root:
                subkey_count = winreg.QueryInfoKey(root)[0]
                for index in range(subkey_count):
                    try:
                        subkey_name = winreg.EnumKey(root, index)
                        with winreg.OpenKey(root, subkey_name, 0, winreg.KEY_READ | view_flags[view]) as subkey:
                            applications.append(InstalledApplication(
                                display_name=self._query_value(subkey, "DisplayName"),
                                display_version=self._query_value(subkey, "DisplayVersion"),
                                publisher=self._query_value(subkey, "Publisher"),
                                view=view,
                            ))
                    except OSError as e:
                        logger.warning(f"Uninstall entry {index} in {view} view unreadable: {e}")
        return applications

    # --- Machine / Firmware ---
    def get_system_product(self):
        c = self._require(self.cimv2, "cimv2")
        product = _first(c.Win32_ComputerSystemProduct())
        if product is None:
            raise QueryError("Win32_ComputerSystemProduct returned no instance")
        return SystemProduct(
            name=product.Name,
            vendor=product.Vendor,
            uuid=product.UUID,
            identifying_number=product.IdentifyingNumber,
        )

    def get_bios(self):
        c = self._require(self.cimv2, "cimv2")
        bios = _first(c.Win32_BIOS())
        if bios is None:
            raise QueryError("Win32_BIOS returned no instance")
        return Bios(
            manufacturer=bios.Manufacturer,
            smbios_version=bios.SMBIOSBIOSVersion,
            versions=bios.BIOSVersion,
            release_date=bios.ReleaseDate,
            serial_number=bios.SerialNumber,
        )

    def get_enclosure(self):
        c = self._require(self.cimv2, "cimv2")
        enclosure = _first(c.Win32_SystemEnclosure())
        if enclosure is None:
            return Enclosure()
        return Enclosure(chassis_types=enclosure.ChassisTypes)

    def get_monitors(self):
        c_mon = self._require(self.monitors, "root\\wmi")
        return [
            Monitor(
                manufacturer_name=getattr(m, "ManufacturerName", None),
                user_friendly_name=getattr(m, "UserFriendlyName", None),
                serial_number=getattr(m, "SerialNumberID", None),
            )
            for m in c_mon.WmiMonitorID()
        ]

    # --- Windows Update ---
    def get_update_history(self):
        """ Installed update history from the Windows Update Agent. """
        if not _wuapi_available:
            raise QueryError("pywin32 module not found")
        try:
            update_session = win32com.client.Dispatch("Microsoft.Update.Session")
            update_searcher = update_session.CreateUpdateSearcher()
            total = update_searcher.GetTotalHistoryCount()
            entries = []
            if total > 0:
                history = update_searcher.QueryHistory(0, total)
                for index in range(history.Count):
                    entry = history.Item(index)
                    if not entry.Title:
                        continue
                    entries.append(UpdateEntry(title=entry.Title, date=entry.Date))
            return UpdateHistory(total_count=total, entries=entries)
        except pythoncom.com_error as com_err:
            err_msg = f"COM Error HRESULT={com_err.hresult}: {com_err}"
            logger.error(f"Windows Update history query failed (COM Error): {err_msg}")
            raise QueryError(err_msg) from com_err

    # --- Active Directory ---
    def has_directory_service(self):
        stdout, stderr, retcode = run_powershell(f"Get-Module -ListAvailable -Name {AD_MODULE_NAME}")
        if retcode != 0:
            logger.warning(f"{AD_MODULE_NAME} module probe failed. RetCode: {retcode}. Stderr: {stderr}")
            return False
        return bool(stdout and stdout.strip())

    def get_directory_computer(self):
        script = f"Import-Module {AD_MODULE_NAME}; (Get-ADComputer $env:COMPUTERNAME).DistinguishedName"
        stdout, stderr, retcode = run_powershell(script)
        if retcode != 0 or not stdout or not stdout.strip():
            raise QueryError(f"Get-ADComputer failed. RetCode: {retcode}. Stderr: {stderr or 'No stderr'}")
        return DirectoryComputer(distinguished_name=stdout.strip().splitlines()[0].strip())

    # --- Registry helpers ---
    def _read_registry_values(self, key_path, names):
        if not _winreg_available:
            raise QueryError("winreg module not found")
        with winreg.OpenKey(winreg.HKEY_LOCAL_MACHINE, key_path, 0, winreg.KEY_READ | winreg.KEY_WOW64_64KEY) as key:
            return {name: self._query_value(key, name) for name in names}

    @staticmethod
    def _query_value(key, name):
        try:
            value, _ = winreg.QueryValueEx(key, name)
            return value
        except FileNotFoundError:
            return None
