"""Tests for event and signal models."""

from datetime import datetime, timezone

from pagewatch.models import (
    ApiCallEvent,
    ClickEvent,
    CustomEvent,
    ElementInfo,
    ErrorEvent,
    Location,
    NavigationEvent,
    PerformanceMetricsEvent,
    ScriptError,
    SearchOperationEvent,
    describe_error,
    now_iso,
)


class TestEventPayloads:
    """Tests for the wire shape of each event variant."""

    def test_click_payload(self):
        """Test that a click event serializes every field."""
        event = ClickEvent(
            target="BUTTON#buy.btn-primary",
            text="Buy now",
            page="/cart",
            tracking_id="cta-1",
            timestamp="2026-01-01T00:00:00+00:00",
        )
        assert event.to_payload() == {
            "eventType": "click",
            "target": "BUTTON#buy.btn-primary",
            "text": "Buy now",
            "trackingId": "cta-1",
            "timestamp": "2026-01-01T00:00:00+00:00",
            "page": "/cart",
        }

    def test_click_text_truncated(self):
        """Test that click text is capped at 50 characters."""
        event = ClickEvent(target="P", text="x" * 500, page="/")
        assert len(event.text) == 50
        assert len(event.to_payload()["text"]) == 50

    def test_click_without_tracking_id(self):
        """Test that a missing tracking id serializes as None."""
        payload = ClickEvent(target="DIV", text="", page="/").to_payload()
        assert payload["trackingId"] is None

    def test_performance_metrics_omits_missing(self):
        """Test that only present metrics are serialized."""
        payload = PerformanceMetricsEvent(metrics={"fcp": 120.5}).to_payload()
        assert payload == {"eventType": "performanceMetrics", "metrics": {"fcp": 120.5}}

    def test_navigation_payload(self):
        """Test that a navigation event carries page and timestamp."""
        payload = NavigationEvent(page="/docs#intro").to_payload()
        assert payload["eventType"] == "navigation"
        assert payload["page"] == "/docs#intro"
        assert "timestamp" in payload

    def test_api_call_success_has_no_error(self):
        """Test that a successful API call has no error key."""
        payload = ApiCallEvent(api_name="cart", duration=12.5, success=True, page="/").to_payload()
        assert payload["success"] is True
        assert "error" not in payload

    def test_api_call_failure_has_error(self):
        """Test that a failed API call carries its error."""
        payload = ApiCallEvent(
            api_name="cart", duration=3.0, success=False, error="boom", page="/"
        ).to_payload()
        assert payload["success"] is False
        assert payload["error"] == "boom"

    def test_search_operation_nests_details(self):
        """Test that search fields are nested under details."""
        payload = SearchOperationEvent(search_term="shoes", results_count=3).to_payload()
        assert payload["eventType"] == "searchOperation"
        assert payload["details"]["searchTerm"] == "shoes"
        assert payload["details"]["resultsCount"] == 3
        assert "timestamp" in payload["details"]

    def test_custom_payload(self):
        """Test that a custom event carries name, data and page."""
        payload = CustomEvent(event_name="signup", event_data={"plan": "pro"}, page="/join").to_payload()
        assert payload["eventType"] == "custom"
        assert payload["eventName"] == "signup"
        assert payload["eventData"] == {"plan": "pro"}
        assert payload["page"] == "/join"

    def test_error_payload_omits_unknown_fields(self):
        """Test that unknown error fields are left out."""
        payload = ErrorEvent(message="boom").to_payload()
        assert payload == {
            "eventType": "error",
            "error": {"message": "boom", "lineno": 0, "colno": 0},
        }

    def test_error_payload_full(self):
        """Test that a complete error serializes every field."""
        payload = ErrorEvent(
            message="x is not defined", source="app.js", lineno=42, colno=7, stack="at app.js:42:7"
        ).to_payload()
        assert payload["error"] == {
            "message": "x is not defined",
            "source": "app.js",
            "lineno": 42,
            "colno": 7,
            "stack": "at app.js:42:7",
        }


class TestTimestamps:
    """Tests for observation timestamps."""

    def test_now_iso_is_utc_iso8601(self):
        """Test that now_iso() returns a UTC ISO-8601 string."""
        parsed = datetime.fromisoformat(now_iso())
        assert parsed.tzinfo is not None
        assert parsed.utcoffset() == timezone.utc.utcoffset(None)

    def test_timestamp_taken_at_creation(self):
        """Test that an event is stamped when it is created."""
        before = datetime.now(timezone.utc)
        event = NavigationEvent(page="/")
        after = datetime.now(timezone.utc)
        assert before <= datetime.fromisoformat(event.timestamp) <= after


class TestSignals:
    """Tests for signal helpers."""

    def test_location_from_url(self):
        """Test that a URL splits into pathname, search and hash."""
        location = Location.from_url("http://shop.local/cart?step=2#pay")
        assert location.pathname == "/cart"
        assert location.search == "?step=2"
        assert location.hash == "#pay"

    def test_location_from_bare_host(self):
        """Test that a bare host gets the root pathname."""
        location = Location.from_url("http://shop.local")
        assert location.pathname == "/"
        assert location.search == ""
        assert location.hash == ""

    def test_element_get_attribute(self):
        """Test that missing attributes read as None."""
        element = ElementInfo(tag_name="A", attributes={"data-tracking-id": "nav"})
        assert element.get_attribute("data-tracking-id") == "nav"
        assert element.get_attribute("href") is None

    def test_describe_script_error(self):
        """Test that a ScriptError yields its message and stack."""
        assert describe_error(ScriptError(message="bad", stack="at x")) == ("bad", "at x")

    def test_describe_python_exception(self):
        """Test that a Python exception yields its message and traceback."""
        try:
            raise ValueError("broken value")
        except ValueError as e:
            message, stack = describe_error(e)
        assert message == "broken value"
        assert "ValueError: broken value" in stack

    def test_describe_non_error(self):
        """Test that non-error values are not described."""
        assert describe_error("just a string") is None
        assert describe_error({"message": "dict"}) is None
        assert describe_error(None) is None
