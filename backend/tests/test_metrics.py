"""Metrics registry and the /metrics endpoint."""

from __future__ import annotations

import pytest

from app.monitoring.registry import MetricsRegistry


def test_counter_renders_labels():
    registry = MetricsRegistry()
    counter = registry.counter("demo_total", "Demo counter.", label_names=("action",))
    counter.inc(action="like")
    counter.inc(amount=2, action="like")

    payload = registry.render()

    assert "# TYPE demo_total counter" in payload
    assert 'demo_total{action="like"} 3' in payload
    assert counter.value(action="like") == 3


def test_counter_validates_labels_and_amount():
    registry = MetricsRegistry()
    counter = registry.counter("strict_total", "Strict.", label_names=("action",))
    with pytest.raises(ValueError):
        counter.inc(kind="oops")
    with pytest.raises(ValueError):
        counter.inc(amount=-1, action="like")
    with pytest.raises(ValueError):
        registry.counter("strict_total", "Duplicate.")


def test_metrics_endpoint_reports_social_actions(client, signup):
    _, alice = signup("alice")
    bob, _ = signup("bob")
    client.post(f"/api/users/{bob['id']}/follow", headers=alice)

    response = client.get("/metrics")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert 'social_actions_total{action="follow"}' in response.text
    assert 'notifications_emitted_total{type="follow"}' in response.text
