"""Tests for data models."""

import pytest

from server_health_check.models import (
    CheckResult,
    CheckStatus,
    FleetReport,
    ServerReport,
    worst_status,
)


class TestCheckStatus:
    """Tests for CheckStatus enum."""

    def test_status_values(self):
        assert CheckStatus.OK.value == "ok"
        assert CheckStatus.WARN.value == "warn"
        assert CheckStatus.ERROR.value == "error"
        assert CheckStatus.INFO.value == "info"

    def test_worst_status(self):
        assert worst_status([]) == CheckStatus.OK
        assert worst_status([CheckStatus.OK, CheckStatus.INFO]) == CheckStatus.OK
        assert worst_status([CheckStatus.OK, CheckStatus.WARN]) == CheckStatus.WARN
        assert worst_status(
            [CheckStatus.WARN, CheckStatus.ERROR, CheckStatus.UNPARSEABLE]
        ) == CheckStatus.ERROR


class TestCheckResult:
    """Tests for CheckResult rendering."""

    @pytest.mark.parametrize(
        "status, glyph",
        [
            (CheckStatus.OK, "✅"),
            (CheckStatus.WARN, "⚠️"),
            (CheckStatus.ERROR, "❌"),
            (CheckStatus.INFO, "ℹ️"),
            (CheckStatus.UNPARSEABLE, "❓"),
        ],
    )
    def test_render(self, status, glyph):
        result = CheckResult("10.0.0.1", "Disk Usage", status, "40G total")
        assert result.render() == f"{glyph} *Disk Usage:* 40G total"

    def test_to_dict(self):
        result = CheckResult("10.0.0.1", "Memory Usage", CheckStatus.OK, "x", metric=25.0)
        assert result.to_dict() == {
            "label": "Memory Usage",
            "status": "ok",
            "detail": "x",
            "metric": 25.0,
        }


class TestServerReport:
    """Tests for ServerReport model."""

    @pytest.fixture
    def report(self):
        report = ServerReport(address="10.0.0.1")
        report.add("CPU Usage", CheckStatus.OK, "5% user, 3% system, 92% idle", 92.0)
        report.add("Process Check", CheckStatus.ERROR, "nginx is NOT running")
        return report

    def test_render(self, report):
        assert report.render() == (
            "\n=== Checking status of server: 10.0.0.1 ===\n"
            "✅ *CPU Usage:* 5% user, 3% system, 92% idle\n"
            "❌ *Process Check:* nginx is NOT running\n"
        )

    def test_add_records_server(self, report):
        assert all(r.server == "10.0.0.1" for r in report.results)

    def test_status(self, report):
        assert report.status == CheckStatus.ERROR

    def test_unreachable_is_error(self):
        report = ServerReport(address="10.0.0.9", reachable=False)
        assert report.status == CheckStatus.ERROR

    def test_get(self, report):
        assert report.get("CPU Usage").metric == 92.0
        assert report.get("Disk Usage") is None

    def test_to_dict(self, report):
        data = report.to_dict()
        assert data["address"] == "10.0.0.1"
        assert data["status"] == "error"
        assert len(data["results"]) == 2


class TestFleetReport:
    """Tests for FleetReport model."""

    def test_empty_fleet(self):
        fleet = FleetReport()
        assert fleet.render() == ""
        assert fleet.status == CheckStatus.OK

    def test_render_concatenates_in_order(self):
        first = ServerReport(address="a")
        first.add("Network Check", CheckStatus.OK, "Network is OK")
        second = ServerReport(address="b")
        second.add("Network Check", CheckStatus.WARN, "slow")
        fleet = FleetReport(servers=[first, second])

        assert fleet.render() == first.render() + second.render()
        assert fleet.status == CheckStatus.WARN
        assert fleet.warning_count == 1
        assert fleet.error_count == 0

    def test_to_dict(self):
        server = ServerReport(address="a", reachable=False)
        server.add("SSH Connection", CheckStatus.ERROR, "refused")
        data = FleetReport(servers=[server]).to_dict()
        assert "timestamp" in data
        assert data["status"] == "error"
        assert data["summary"] == {"total": 1, "warning": 0, "error": 1}
        assert data["servers"][0]["reachable"] is False
