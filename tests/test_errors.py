import unittest
from unittest import mock

from textaction.errors import ConfigError, MalformedResponse, TextActionError, classify, fail, report_failure
from textaction.events import EventBus
from textaction.llm.transport import Failure, FailureKind


def status_failure(status, body):
    return Failure(FailureKind.STATUS, f"HTTP {status}", status=status, body=body)


class ClassifyTests(unittest.TestCase):
    def test_api_error_message(self):
        failure = status_failure(429, {"error": {"message": "rate limited"}})
        self.assertEqual(classify(failure), "API Error 429: rate limited")

    def test_string_body(self):
        self.assertEqual(classify(status_failure(502, "Bad Gateway")), "API Error 502: Bad Gateway")

    def test_generic_status_message(self):
        self.assertEqual(classify(status_failure(500, {"detail": "x"})), "API Error 500: Request failed")
        self.assertEqual(classify(status_failure(500, {"error": "flat"})), "API Error 500: Request failed")
        self.assertEqual(classify(status_failure(500, {"error": {"message": 3}})), "API Error 500: Request failed")
        self.assertEqual(classify(status_failure(500, None)), "API Error 500: Request failed")

    def test_transport_failures(self):
        self.assertEqual(classify(Failure(FailureKind.TIMEOUT, "Request timeout")), "Network/Error: Request timeout")
        self.assertEqual(classify(Failure(FailureKind.NETWORK, "Network request failed")), "Network/Error: Network request failed")

    def test_malformed_response(self):
        exc = MalformedResponse("API Error: no completion choices returned", field="choices")
        self.assertEqual(classify(exc), "Network/Error: API Error: no completion choices returned")

    def test_config_error_passes_through(self):
        self.assertEqual(classify(ConfigError("Settings error: API Key is required")), "Settings error: API Key is required")

    def test_unknown(self):
        self.assertEqual(classify(object()), "Unknown Error")
        self.assertEqual(classify(RuntimeError()), "Unknown Error")
        self.assertEqual(classify(Failure(FailureKind.NETWORK, "")), "Unknown Error")


class ReportTests(unittest.TestCase):
    def test_report_records_event_and_prints(self):
        events = EventBus()
        console = mock.Mock()
        report_failure("API Error 401: bad key", events=events, console=console)
        self.assertEqual(events.last().type, "action.error")
        self.assertEqual(events.last().level, "error")
        self.assertEqual(events.last().payload, {"message": "API Error 401: bad key"})
        console.print.assert_called_once()
        self.assertEqual(console.print.call_args[0][0], "API Error 401: bad key")

    def test_broken_side_channel_does_not_mask_failure(self):
        console = mock.Mock()
        console.print.side_effect = OSError("stderr closed")
        err = fail(Failure(FailureKind.TIMEOUT, "Request timeout"), console=console)
        self.assertIsInstance(err, TextActionError)
        self.assertEqual(err.message, "Network/Error: Request timeout")


if __name__ == "__main__":
    unittest.main()
