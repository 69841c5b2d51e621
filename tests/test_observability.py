import logging

from opentelemetry import trace

from flavorhub.middleware.metrics import normalise_path
from flavorhub.utils.logging import TraceContextFilter


def test_numeric_path_segments_are_collapsed():
    assert normalise_path("/orders/12/items/3") == "/orders/{id}/items/{id}"
    assert normalise_path("/payments/users/7/summary") == "/payments/users/{id}/summary"
    assert normalise_path("/restaurants") == "/restaurants"


def make_record() -> logging.LogRecord:
    return logging.LogRecord("test", logging.INFO, __file__, 1, "hello", None, None)


def test_trace_filter_without_span_leaves_record_alone():
    record = make_record()

    assert TraceContextFilter().filter(record) is True
    assert not hasattr(record, "trace_id")


def test_trace_filter_stamps_active_span():
    tracer = trace.get_tracer(__name__)
    record = make_record()

    with tracer.start_as_current_span("work") as span:
        TraceContextFilter().filter(record)
        expected = format(span.get_span_context().trace_id, "032x")

    assert record.trace_id == expected
    assert len(record.span_id) == 16
