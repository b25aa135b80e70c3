"""
Test suite for client capability detection.

Tests cover:
- Parsing client hints and battery parameters
- Derived capability flags
- The /client/capabilities endpoint
"""

from app.services.client_capabilities import ClientSignals, detect, parse_signals


class TestParseSignals:
    """Tests for reading raw signals"""

    def test_no_signals(self):
        """Test missing headers and params give an all-unknown result"""
        signals = parse_signals(None, None)
        assert signals == ClientSignals()

    def test_client_hint_headers(self):
        """Test each client hint is parsed"""
        signals = parse_signals({
            "Save-Data": "on",
            "ECT": "3g",
            "Downlink": "1.45",
            "Sec-CH-Prefers-Reduced-Motion": '"reduce"',
            "Device-Memory": "4",
        })
        assert signals.save_data is True
        assert signals.effective_type == "3g"
        assert signals.downlink_mbps == 1.45
        assert signals.prefers_reduced_motion == "reduce"
        assert signals.device_memory_gb == 4.0

    def test_malformed_values_ignored(self):
        """Test malformed hints are treated as unknown"""
        signals = parse_signals(
            {"ECT": "6g", "Downlink": "fast", "Device-Memory": "-1"},
            {"battery_level": "1.7", "charging": "maybe"},
        )
        assert signals.effective_type is None
        assert signals.downlink_mbps is None
        assert signals.device_memory_gb is None
        assert signals.battery_level is None
        assert signals.charging is None

    def test_battery_params(self):
        """Test battery level and charging come from params"""
        signals = parse_signals({}, {"battery_level": "0.15", "charging": "false"})
        assert signals.battery_level == 0.15
        assert signals.charging is False


class TestDetect:
    """Tests for derived flags"""

    def test_unknown_signals_are_full_quality(self):
        """Test nothing degrades without signals"""
        caps = detect(ClientSignals())
        assert caps.is_low_power_mode is False
        assert caps.is_slow_connection is False
        assert caps.disable_animations is False
        assert caps.image_quality == "high"

    def test_low_battery_not_charging(self):
        """Test low battery without charging enables low power mode"""
        caps = detect(ClientSignals(battery_level=0.1, charging=False))
        assert caps.is_low_power_mode is True
        assert caps.disable_animations is True
        assert caps.reduce_polling is True
        assert caps.image_quality == "medium"

    def test_low_battery_while_charging(self):
        """Test charging devices are never in low power mode"""
        caps = detect(ClientSignals(battery_level=0.1, charging=True))
        assert caps.is_low_power_mode is False

    def test_slow_connection(self):
        """Test 2g and slow downlink count as slow"""
        assert detect(ClientSignals(effective_type="2g")).is_slow_connection is True
        caps = detect(ClientSignals(downlink_mbps=0.4))
        assert caps.is_slow_connection is True
        assert caps.lazy_load_images is True
        assert caps.image_quality == "low"

    def test_reduced_motion(self):
        """Test reduced motion disables animations only"""
        caps = detect(ClientSignals(prefers_reduced_motion="reduce"))
        assert caps.is_reduced_motion is True
        assert caps.disable_animations is True
        assert caps.reduce_polling is False

    def test_low_memory(self):
        """Test low device memory lazy-loads images"""
        caps = detect(ClientSignals(device_memory_gb=1.0))
        assert caps.low_memory is True
        assert caps.lazy_load_images is True
        assert caps.image_quality == "medium"


class TestCapabilitiesEndpoint:
    """Tests for GET /client/capabilities"""

    def test_capabilities_from_headers(self, client):
        """Test hints and params flow through to the response"""
        response = client.get(
            "/api/v1/client/capabilities",
            params={"battery_level": "0.05", "charging": "0"},
            headers={"Save-Data": "on"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["is_slow_connection"] is True
        assert data["is_low_power_mode"] is True
        assert data["image_quality"] == "low"
        assert data["signals"]["battery_level"] == 0.05
        assert "Save-Data" in response.headers["Accept-CH"]

    def test_capabilities_without_signals(self, client):
        """Test a plain request gets full quality"""
        response = client.get("/api/v1/client/capabilities")
        assert response.status_code == 200
        assert response.json()["image_quality"] == "high"
