"""
Tests for the OctoPrint API client
Covers parsing of real-shaped responses and the error taxonomy
"""

import unittest
from unittest.mock import Mock, patch

import requests

from conftest import load_mock_response
from octodash.integrations.errors import DecodeError, TransportError, UpstreamError
from octodash.integrations.octoprint.api import OctoPrintAPI, thumbnail_url


def make_response(status_code=200, payload=None, text=""):
    response = Mock()
    response.status_code = status_code
    response.text = text
    if isinstance(payload, Exception):
        response.json.side_effect = payload
    else:
        response.json.return_value = payload
    return response


class TestOctoPrintAPI(unittest.TestCase):
    """Test cases for OctoPrintAPI"""

    def setUp(self):
        self.api = OctoPrintAPI("http://octopi.local/", "SECRET")

    def test_init_strips_trailing_slash(self):
        self.assertEqual(self.api.base_url, "http://octopi.local")
        self.assertEqual(self.api.api_key, "SECRET")
        self.assertEqual(self.api.timeout, 10)

    def test_get_printer_state_sends_api_key_and_timeout(self):
        response = make_response(payload=load_mock_response("printer_state_printing.json"))

        with patch.object(self.api.session, "request", return_value=response) as mock_request:
            state = self.api.get_printer_state()

        mock_request.assert_called_once()
        args, kwargs = mock_request.call_args
        self.assertEqual(args, ("GET", "http://octopi.local/api/printer"))
        self.assertEqual(kwargs["headers"]["X-Api-Key"], "SECRET")
        self.assertEqual(kwargs["timeout"], 10)

        self.assertTrue(state.printing)
        self.assertTrue(state.operational)
        self.assertFalse(state.ready)
        self.assertEqual(state.text, "Printing")
        self.assertEqual(state.bed_actual, 59.8)
        self.assertEqual(state.tool_target, 215.0)

    def test_get_printer_state_null_target_reads_as_zero(self):
        response = make_response(payload=load_mock_response("printer_state_idle.json"))

        with patch.object(self.api.session, "request", return_value=response):
            state = self.api.get_printer_state()

        self.assertTrue(state.ready)
        self.assertEqual(state.tool_target, 0.0)

    def test_get_job(self):
        response = make_response(payload=load_mock_response("job_printing.json"))

        with patch.object(self.api.session, "request", return_value=response) as mock_request:
            job = self.api.get_job()

        self.assertEqual(mock_request.call_args[0], ("GET", "http://octopi.local/api/job"))
        self.assertEqual(job.file_path, "prints/benchy_0.4n_0.2mm_PLA_MK4.bgcode")
        self.assertEqual(job.file_name, "benchy_0.4n_0.2mm_PLA_MK4.bgcode")
        self.assertEqual(job.completion, 42.5)
        self.assertEqual(job.print_time, 1583)
        self.assertEqual(job.print_time_left, 2142)
        self.assertEqual(job.estimated_print_time, 3725.4)
        self.assertEqual(job.filament_length, 4312.7)

    def test_get_current_spool_posts_command(self):
        response = make_response(payload=load_mock_response("current_spool.json"))

        with patch.object(self.api.session, "request", return_value=response) as mock_request:
            spool_id = self.api.get_current_spool(0)

        self.assertEqual(spool_id, "17")
        args, kwargs = mock_request.call_args
        self.assertEqual(args, ("POST", "http://octopi.local/api/plugin/spoolman_api"))
        self.assertEqual(kwargs["json"], {"command": "get_current_spool", "tool": 0})

    def test_get_current_spool_numeric_id(self):
        response = make_response(payload={"success": True, "spool_id": 5})

        with patch.object(self.api.session, "request", return_value=response):
            self.assertEqual(self.api.get_current_spool(), "5")

    def test_get_current_spool_empty_means_nothing_loaded(self):
        response = make_response(payload={"success": True, "spool_id": ""})

        with patch.object(self.api.session, "request", return_value=response):
            self.assertIsNone(self.api.get_current_spool())

    def test_get_current_spool_plugin_failure(self):
        response = make_response(payload=load_mock_response("current_spool_error.json"))

        with patch.object(self.api.session, "request", return_value=response):
            with self.assertRaises(UpstreamError) as ctx:
                self.api.get_current_spool()

        self.assertIn("Spoolman unreachable", str(ctx.exception))

    def test_http_error_raises_upstream_error(self):
        response = make_response(status_code=403, text="Invalid API key")

        with patch.object(self.api.session, "request", return_value=response):
            with self.assertRaises(UpstreamError) as ctx:
                self.api.get_printer_state()

        self.assertEqual(ctx.exception.status, 403)
        self.assertEqual(ctx.exception.body, "Invalid API key")
        self.assertEqual(str(ctx.exception), "HTTP 403: Invalid API key")

    def test_connection_error_raises_transport_error(self):
        with patch.object(
            self.api.session, "request", side_effect=requests.exceptions.ConnectionError("refused")
        ):
            with self.assertRaises(TransportError):
                self.api.get_printer_state()

    def test_timeout_raises_transport_error(self):
        with patch.object(self.api.session, "request", side_effect=requests.exceptions.ReadTimeout):
            with self.assertRaises(TransportError) as ctx:
                self.api.get_job()

        self.assertIn("timed out", str(ctx.exception))

    def test_invalid_json_raises_decode_error(self):
        response = make_response(payload=ValueError("Expecting value"))

        with patch.object(self.api.session, "request", return_value=response):
            with self.assertRaises(DecodeError):
                self.api.get_printer_state()

    def test_non_object_body_raises_decode_error(self):
        response = make_response(payload=["not", "an", "object"])

        with patch.object(self.api.session, "request", return_value=response):
            with self.assertRaises(DecodeError):
                self.api.get_job()

    def test_wrong_field_types_raise_decode_error(self):
        response = make_response(payload={"state": "Printing", "temperature": {}})

        with patch.object(self.api.session, "request", return_value=response):
            with self.assertRaises(DecodeError):
                self.api.get_printer_state()

    def test_infinite_job_time_raises_decode_error(self):
        for field in ("printTime", "printTimeLeft"):
            payload = load_mock_response("job_printing.json")
            payload["progress"][field] = float("inf")
            response = make_response(payload=payload)

            with patch.object(self.api.session, "request", return_value=response):
                with self.assertRaises(DecodeError):
                    self.api.get_job()

        payload = load_mock_response("job_printing.json")
        payload["job"]["estimatedPrintTime"] = float("-inf")
        with patch.object(self.api.session, "request", return_value=make_response(payload=payload)):
            with self.assertRaises(DecodeError):
                self.api.get_job()

    def test_nan_values_raise_decode_error(self):
        job = load_mock_response("job_printing.json")
        job["progress"]["completion"] = float("nan")
        with patch.object(self.api.session, "request", return_value=make_response(payload=job)):
            with self.assertRaises(DecodeError):
                self.api.get_job()

        state = load_mock_response("printer_state_printing.json")
        state["temperature"]["bed"]["actual"] = float("nan")
        with patch.object(self.api.session, "request", return_value=make_response(payload=state)):
            with self.assertRaises(DecodeError):
                self.api.get_printer_state()

    def test_single_attempt_per_call(self):
        with patch.object(
            self.api.session, "request", side_effect=requests.exceptions.ConnectionError
        ) as mock_request:
            with self.assertRaises(TransportError):
                self.api.get_printer_state()

        self.assertEqual(mock_request.call_count, 1)


class TestThumbnailUrl(unittest.TestCase):
    def test_gcode_extension_replaced(self):
        api = OctoPrintAPI("http://octopi.local", "k")
        self.assertEqual(
            api.get_thumbnail_url("foo/bar.gcode"),
            "http://octopi.local/plugin/prusaslicerthumbnails/thumbnail/foo/bar.png",
        )

    def test_bgcode_extension_replaced(self):
        self.assertEqual(
            thumbnail_url("http://octopi.local", "foo.bgcode"),
            "http://octopi.local/plugin/prusaslicerthumbnails/thumbnail/foo.png",
        )

    def test_other_extension_kept(self):
        self.assertEqual(
            thumbnail_url("http://octopi.local/", "foo.txt"),
            "http://octopi.local/plugin/prusaslicerthumbnails/thumbnail/foo.txt.png",
        )

    def test_empty_path(self):
        self.assertEqual(thumbnail_url("http://octopi.local", ""), "")

    def test_no_network(self):
        api = OctoPrintAPI("http://octopi.local", "k")
        with patch.object(api.session, "request") as mock_request:
            api.get_thumbnail_url("a.gcode")
        mock_request.assert_not_called()


if __name__ == "__main__":
    unittest.main()
