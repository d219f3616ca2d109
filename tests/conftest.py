import pytest

from system_info import (
    Bios, ComputerSystem, DirectoryComputer, Enclosure, OperatingSystem, Processor,
    SystemProduct, UpdateHistory, WindowsSpecifications,
)


class MemorySink:
    """ In-memory stand-in for ReportWriter. """

    def __init__(self):
        self.lines = []
        self.cleared = False

    def clear(self):
        self.cleared = True
        self.lines = []

    def append_line(self, text=""):
        self.lines.append(text)

    def append_lines(self, lines):
        self.lines.extend(lines)


class FakeQueryService:
    """
    Answers every platform query from plain attributes. Setting an attribute
    to an exception instance makes the matching query raise it.
    """

    def __init__(self, **overrides):
        self.computer_name = "TEST-PC"
        self.user_accounts = []
        self.operating_system = OperatingSystem(
            caption="TestOS", version="10.0.22631", architecture="64-bit",
            install_date="20240115093012.000000+060", last_boot=None,
        )
        self.windows_specifications = WindowsSpecifications(
            product_name="Windows 10 Pro", edition_id="Professional", display_version="23H2",
            current_build="22631", ubr=4317, install_date=None,
        )
        self.computer_system = ComputerSystem(name="TEST-PC", pc_system_type=1)
        self.processor = Processor(name="Test CPU", cores=4, logical_processors=8, max_clock_speed=3600)
        self.memory_modules = []
        self.physical_disks = []
        self.volumes = []
        self.network_adapters = []
        self.ipv4_addresses = []
        self.installed_software = []
        self.system_product = SystemProduct(name="Test Model", vendor="Contoso", uuid="UUID-1", identifying_number="SN-1")
        self.bios = Bios(manufacturer="Contoso", smbios_version="1.0.0", versions=["CONTOSO - 1"],
                         release_date="20230301000000.000000+000", serial_number="BIOS-SN")
        self.enclosure = Enclosure(chassis_types=[3])
        self.monitors = []
        self.update_history = UpdateHistory(total_count=0, entries=[])
        self.directory_service = False
        self.directory_computer = DirectoryComputer(distinguished_name="CN=TEST-PC,OU=Computers,DC=corp,DC=local")
        for name, value in overrides.items():
            setattr(self, name, value)

    def _answer(self, name):
        value = getattr(self, name)
        if isinstance(value, Exception):
            raise value
        return value

    def get_computer_name(self):
        return self._answer("computer_name")

    def get_user_accounts(self):
        return self._answer("user_accounts")

    def get_operating_system(self):
        return self._answer("operating_system")

    def get_windows_specifications(self):
        return self._answer("windows_specifications")

    def get_computer_system(self):
        return self._answer("computer_system")

    def get_processor(self):
        return self._answer("processor")

    def get_memory_modules(self):
        return self._answer("memory_modules")

    def get_physical_disks(self):
        return self._answer("physical_disks")

    def get_volumes(self):
        return self._answer("volumes")

    def get_network_adapters(self):
        return self._answer("network_adapters")

    def get_ipv4_addresses(self):
        return self._answer("ipv4_addresses")

    def get_installed_software(self):
        return self._answer("installed_software")

    def get_system_product(self):
        return self._answer("system_product")

    def get_bios(self):
        return self._answer("bios")

    def get_enclosure(self):
        return self._answer("enclosure")

    def get_monitors(self):
        return self._answer("monitors")

    def get_update_history(self):
        return self._answer("update_history")

    def has_directory_service(self):
        return self._answer("directory_service")

    def get_directory_computer(self):
        return self._answer("directory_computer")


@pytest.fixture
def sink():
    return MemorySink()


@pytest.fixture
def fake_query():
    return FakeQueryService()
