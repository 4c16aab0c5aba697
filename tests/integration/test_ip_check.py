from __future__ import annotations

import pytest


@pytest.mark.integration
class TestIPCheck:
    def test_hotspot_client_allowed(self, client):
        resp = client.get("/api/check-ip")
        assert resp.status_code == 200
        assert resp.json() == {"allowed": True, "ip": "10.0.0.23"}

    def test_outside_range_denied(self, client):
        resp = client.get("/api/check-ip", headers={"X-Forwarded-For": "192.168.1.10"})
        assert resp.status_code == 403
        assert resp.json() == {"allowed": False, "ip": "192.168.1.10"}

    def test_custom_range(self, client, settings):
        settings.HOTSPOT_IP_START = "192.168.1.1"
        settings.HOTSPOT_IP_END = "192.168.1.50"
        resp = client.get("/api/check-ip", headers={"X-Forwarded-For": "192.168.1.10"})
        assert resp.json()["allowed"] is True
