from __future__ import annotations

from covgate.core.collector import CollectedData, DataCollector, FailReason


def test_collector_starts_empty() -> None:
    assert DataCollector().get() == CollectedData(data=(), info=(), errors=())


def test_collector_records_in_order() -> None:
    collector: DataCollector[FailReason] = DataCollector()
    err = RuntimeError("boom")

    collector.add(FailReason.UNDER_THRESHOLD)
    collector.add(FailReason.REPORT_NOT_FOUND)
    collector.info("checked 2 selectors")
    collector.error(err)

    snapshot = collector.get()
    assert snapshot.data == (FailReason.UNDER_THRESHOLD, FailReason.REPORT_NOT_FOUND)
    assert snapshot.info == ("checked 2 selectors",)
    assert snapshot.errors == (err,)


def test_snapshot_is_detached_from_collector() -> None:
    collector: DataCollector[str] = DataCollector()
    before = collector.get()
    collector.add("later")
    assert before.data == ()
    assert collector.get().data == ("later",)


def test_fail_reason_values() -> None:
    assert [reason.value for reason in FailReason] == [
        "underThreshold",
        "invalidFormat",
        "reportNotFound",
        "invalidThresholdConfig",
    ]
