import pytest

import it_inventory
from it_inventory import generate_report, run_section
from platform_query import QueryError
from report_writer import ReportWriter
from sections import SECTIONS, SectionResult
from system_info import UserAccount

GENERATED_AT = "2026-10-18 09:00:00"


def _sections(text):
    """ Maps '[TITLE]' to the body lines of that section. """
    parsed = {}
    current = None
    for line in text.splitlines():
        if line.startswith("[") and line.endswith("]"):
            current = line[1:-1]
            parsed[current] = []
        elif current is not None:
            if line == "":
                current = None
            else:
                parsed[current].append(line)
    return parsed


def test_end_to_end_minimal_machine(tmp_path, fake_query):
    fake_query.user_accounts = [UserAccount(name="jdoe", local_account=True, disabled=False)]
    path = tmp_path / "TEST-PC_Inventory.txt"
    results = generate_report(ReportWriter(str(path)), fake_query, generated_at=GENERATED_AT)

    text = path.read_text(encoding="utf-8")
    assert text.startswith(
        "===============================\n"
        f"IT INVENTORY - {GENERATED_AT}\n"
        "===============================\n"
        "\n"
        "[IDENTIFICATION]\n"
        "Computer Name: TEST-PC\n"
        "Created Users:\n"
        "jdoe\n"
        "\n"
        "[OPERATING SYSTEM]\n"
        "System: TestOS\n"
    )
    sections = _sections(text)
    assert list(sections) == [title for title, _ in SECTIONS]
    assert sections["STORAGE"] == ["Disks:", "No physical disks found.", "Space by Drive:"]
    assert "No active Wi-Fi interfaces found." in sections["NETWORK"]
    assert "No active Ethernet interfaces found." in sections["NETWORK"]
    assert sections["WINDOWS UPDATES"] == ["No update history found."]
    assert sections["ACTIVE DIRECTORY"] == ["ActiveDirectory module not found."]
    assert len(results) == len(SECTIONS)


def test_failing_sections_do_not_stop_the_run(tmp_path, fake_query):
    fake_query.user_accounts = RuntimeError("WMI exploded")
    fake_query.processor = QueryError("WMI cimv2 namespace unavailable")
    fake_query.update_history = QueryError("COM Error HRESULT=-2147352567")
    fake_query.get_monitors = None  # not callable -> TypeError inside the generator
    path = tmp_path / "report.txt"

    results = dict(generate_report(ReportWriter(str(path)), fake_query, generated_at=GENERATED_AT))

    sections = _sections(path.read_text(encoding="utf-8"))
    assert list(sections) == [title for title, _ in SECTIONS]
    assert sections["IDENTIFICATION"] == [
        "Computer Name: TEST-PC", "Created Users:", "Unable to retrieve identification information.",
    ]
    assert sections["PROCESSOR"] == ["Unable to retrieve processor information."]
    assert sections["MONITORS"] == ["Unable to retrieve monitors information."]
    assert sections["WINDOWS UPDATES"] == ["Unable to retrieve Windows Update history."]
    assert results["IDENTIFICATION"].is_degraded
    assert results["PROCESSOR"].is_degraded
    assert results["MACHINE INFO"].status == SectionResult.OK


def test_previous_report_is_replaced(tmp_path, fake_query):
    path = tmp_path / "report.txt"
    path.write_text("OLD CONTENT\n" * 50, encoding="utf-8")
    generate_report(ReportWriter(str(path)), fake_query, generated_at=GENERATED_AT)
    assert "OLD CONTENT" not in path.read_text(encoding="utf-8")


def test_two_runs_are_identical(tmp_path, fake_query):
    first = tmp_path / "first.txt"
    second = tmp_path / "second.txt"
    generate_report(ReportWriter(str(first)), fake_query, generated_at=GENERATED_AT)
    generate_report(ReportWriter(str(second)), fake_query, generated_at=GENERATED_AT)
    assert first.read_bytes() == second.read_bytes()


def test_unwritable_report_path_raises_before_sections(tmp_path, fake_query):
    path = tmp_path / "missing-dir" / "report.txt"
    calls = []
    fake_query.get_computer_name = lambda: calls.append("queried") or "PC"
    with pytest.raises(OSError):
        generate_report(ReportWriter(str(path)), fake_query, generated_at=GENERATED_AT)
    assert calls == []
    assert not path.exists()


def test_run_section_writes_header_and_terminator(sink, fake_query):
    def broken(sink, query):
        raise ValueError("boom")

    result = run_section(sink, "RAM", broken, fake_query)
    assert result.is_degraded
    assert "ValueError" in result.reason
    assert sink.lines == ["[RAM]", "Unable to retrieve ram information.", ""]


def test_main_refuses_non_windows(monkeypatch):
    monkeypatch.setattr(it_inventory, "setup_logging", lambda: "inventory.log")
    monkeypatch.setattr(it_inventory.platform, "system", lambda: "Linux")
    assert it_inventory.main() == 1


def test_main_writes_report_and_prints_path(monkeypatch, tmp_path, capsys, fake_query):
    report_path = str(tmp_path / "TEST-PC_Inventory.txt")
    monkeypatch.setattr(it_inventory, "setup_logging", lambda: "inventory.log")
    monkeypatch.setattr(it_inventory.platform, "system", lambda: "Windows")
    monkeypatch.setattr(it_inventory, "check_wmi_service", lambda: (False, "Service status: stopped"))
    monkeypatch.setattr(it_inventory.WmiQueryService, "connect", classmethod(lambda cls: fake_query))
    monkeypatch.setattr(it_inventory, "default_report_path", lambda hostname: report_path)

    assert it_inventory.main() == 0
    assert capsys.readouterr().out.strip() == f"Inventory generated: {report_path}"
    assert "[ACTIVE DIRECTORY]" in (tmp_path / "TEST-PC_Inventory.txt").read_text(encoding="utf-8")


def test_main_returns_error_when_report_cannot_be_written(monkeypatch, tmp_path, fake_query):
    monkeypatch.setattr(it_inventory, "setup_logging", lambda: "inventory.log")
    monkeypatch.setattr(it_inventory.platform, "system", lambda: "Windows")
    monkeypatch.setattr(it_inventory, "check_wmi_service", lambda: (True, "Running"))
    monkeypatch.setattr(it_inventory.WmiQueryService, "connect", classmethod(lambda cls: fake_query))
    monkeypatch.setattr(it_inventory, "default_report_path",
                        lambda hostname: str(tmp_path / "no-such-dir" / "report.txt"))
    assert it_inventory.main() == 1
