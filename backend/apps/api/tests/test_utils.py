import unittest
from rest_framework import status
from apps.api.utils import error_response, status_for_code


class ErrorResponseTests(unittest.TestCase):
    def test_default_status_mapping_and_details(self):
        resp = error_response("NOT_FOUND", "missing", {"cartId": 1})
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(resp.data["error"]["code"], "NOT_FOUND")
        self.assertEqual(resp.data["error"]["status"], status.HTTP_404_NOT_FOUND)
        self.assertEqual(resp.data["error"]["details"], {"cartId": 1})

    def test_custom_status_override(self):
        resp = error_response("UNKNOWN", "oops", http_status=status.HTTP_202_ACCEPTED)
        self.assertEqual(resp.status_code, status.HTTP_202_ACCEPTED)
        self.assertEqual(resp.data["error"]["message"], "oops")

    def test_error_response_supports_hint(self):
        resp = error_response(
            "VALIDATION_ERROR",
            "Invalid value",
            hint="Use digits only",
        )
        payload = resp.data["error"]
        self.assertEqual(payload["hint"], "Use digits only")
        self.assertNotIn("details", payload)

    def test_code_is_normalized_to_upper_case(self):
        resp = error_response("store_failure", "down")
        self.assertEqual(resp.data["error"]["code"], "STORE_FAILURE")
        self.assertEqual(resp.status_code, status.HTTP_503_SERVICE_UNAVAILABLE)

    def test_unknown_code_falls_back_to_bad_request(self):
        self.assertEqual(status_for_code("WHATEVER"), status.HTTP_400_BAD_REQUEST)

    def test_blank_message_is_rejected(self):
        with self.assertRaises(ValueError):
            error_response("NOT_FOUND", "   ")

    def test_invalid_status_is_rejected(self):
        with self.assertRaises(ValueError):
            error_response("NOT_FOUND", "missing", http_status=42)
