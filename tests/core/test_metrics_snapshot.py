from chat_core import metrics


def test_metrics_snapshot_counters_and_histograms():
    metrics.inc("chat_turns_total", {"status": "ok"})
    metrics.inc("chat_turns_total", {"status": "ok"}, value=2)
    metrics.inc("sessions_deleted_total")
    for v in (5.0, 1.0, 3.0):
        metrics.observe("inference_latency_ms", v, {"model": "gemma"})
    snap = metrics.snapshot()
    assert snap["counters"]["chat_turns_total{status=ok}"] == 3
    assert snap["counters"]["sessions_deleted_total"] == 1
    hist = snap["histograms"]["inference_latency_ms{model=gemma}"]
    assert hist == {
        "count": 3,
        "samples": 3,
        "min": 1.0,
        "max": 5.0,
        "p50": 3.0,
        "last": 3.0,
    }


def test_label_order_does_not_matter():
    metrics.inc("x_total", {"a": 1, "b": 2})
    metrics.inc("x_total", {"b": 2, "a": 1})
    assert metrics.counter_value("x_total", {"a": "1", "b": "2"}) == 2
    assert metrics.counter_value("missing_total") == 0.0


def test_histogram_keeps_bounded_window():
    total = metrics.HIST_MAX_SAMPLES + 10
    for i in range(total):
        metrics.observe("api_request_latency_ms", float(i))
    hist = metrics.snapshot()["histograms"]["api_request_latency_ms"]
    assert hist["count"] == total
    assert hist["samples"] == metrics.HIST_MAX_SAMPLES
    assert hist["min"] == 10.0
    assert hist["last"] == float(total - 1)
