"""
Unit tests for alert storage and notification.
"""

from unittest.mock import MagicMock, patch

import pytest

from perfwatch.core.exceptions import ValidationError
from perfwatch.core.performance import AlertManager, AlertSeverity


def raise_alert(manager, index=0, severity="warning"):
    return manager.create_alert(
        severity=severity,
        category="database",
        message=f"alert {index}",
        metric="errorRate",
        value=float(index),
        threshold=5.0,
    )


class TestAlertManager:
    """Test bounded history and subscribers."""

    def test_create_alert_fields(self):
        manager = AlertManager()

        alert = raise_alert(manager, index=7, severity="critical")

        assert alert.severity == AlertSeverity.CRITICAL
        assert alert.category.value == "database"
        assert alert.metric == "errorRate"
        assert alert.value == 7.0
        assert alert.threshold == 5.0
        assert alert.id.startswith("database-errorRate-")

    def test_alerts_are_immutable(self):
        alert = raise_alert(AlertManager())

        with pytest.raises(Exception):
            alert.value = 100.0

    def test_history_is_bounded(self):
        """Test only the newest 100 of 150 alerts are retained."""
        manager = AlertManager()

        for index in range(150):
            raise_alert(manager, index)

        alerts = manager.get_alerts(200)

        assert len(alerts) == 100
        assert alerts[0].message == "alert 50"
        assert alerts[-1].message == "alert 149"
        assert all(alert.value >= 50 for alert in alerts)

    def test_get_alerts_default_limit(self):
        manager = AlertManager()
        for index in range(60):
            raise_alert(manager, index)

        alerts = manager.get_alerts()

        assert len(alerts) == 50
        assert [a.message for a in alerts[:2]] == ["alert 10", "alert 11"]

    def test_get_alerts_non_positive_limit(self):
        manager = AlertManager()
        raise_alert(manager)

        assert manager.get_alerts(0) == []
        assert manager.get_alerts(-5) == []

    def test_get_alerts_by_severity(self):
        manager = AlertManager()
        raise_alert(manager, 0, "warning")
        raise_alert(manager, 1, "critical")
        raise_alert(manager, 2, "warning")

        warnings = manager.get_alerts_by_severity(AlertSeverity.WARNING)

        assert [a.message for a in warnings] == ["alert 0", "alert 2"]
        assert len(manager.get_alerts_by_severity("critical")) == 1
        assert manager.get_alerts_by_severity("info") == []

    def test_unknown_severity(self):
        with pytest.raises(ValidationError):
            AlertManager().get_alerts_by_severity("fatal")

    def test_callbacks_in_registration_order(self):
        manager = AlertManager()
        received = []
        manager.on_alert(lambda alert: received.append(("first", alert.message)))
        manager.on_alert(lambda alert: received.append(("second", alert.message)))

        raise_alert(manager, 3)

        assert received == [("first", "alert 3"), ("second", "alert 3")]

    def test_failing_callback_is_isolated(self):
        """Test a raising subscriber does not block later subscribers."""
        manager = AlertManager()
        failing = MagicMock(side_effect=RuntimeError("boom"), __name__="failing")
        healthy = MagicMock()
        manager.on_alert(failing)
        manager.on_alert(healthy)

        alert = raise_alert(manager)

        failing.assert_called_once_with(alert)
        healthy.assert_called_once_with(alert)
        assert manager.get_alerts() == [alert]

    def test_alert_stored_before_notification(self):
        manager = AlertManager()
        seen_counts = []
        manager.on_alert(lambda alert: seen_counts.append(len(manager)))

        raise_alert(manager)

        assert seen_counts == [1]

    def test_custom_capacity(self):
        manager = AlertManager(max_alerts=3)
        for index in range(5):
            raise_alert(manager, index)

        assert [a.message for a in manager.get_alerts()] == ["alert 2", "alert 3", "alert 4"]

    def test_ids_unique_within_millisecond(self):
        """Test alerts raised in the same millisecond get distinct ids."""
        manager = AlertManager()

        with patch("perfwatch.core.performance.alerts.time.time", return_value=1700000000.0):
            first = raise_alert(manager, 1)
            second = raise_alert(manager, 2)

        assert first.id == "database-errorRate-1700000000000-1"
        assert second.id == "database-errorRate-1700000000000-2"
