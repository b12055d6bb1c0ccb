import unittest
from unittest.mock import MagicMock

import requests

from config import Configuration
from models import Coordinate, QuerySpec
from services.overpass import SERVICE_ERROR_MESSAGE, OverpassClient, ServiceError


def _spec() -> QuerySpec:
    return QuerySpec(
        tag_expression='["shop"="convenience"]',
        center=Coordinate(lat=1.0, lon=2.0),
        radius_m=1000,
        overpass_ql="[out:json];node(1);out center;",
    )


def _response(status=200, payload=None, text="", json_error=False):
    resp = MagicMock()
    resp.status_code = status
    resp.ok = 200 <= status < 300
    resp.text = text
    if json_error:
        resp.json.side_effect = ValueError("no json")
    else:
        resp.json.return_value = payload
    return resp


class TestOverpassClient(unittest.TestCase):
    def setUp(self):
        self.cfg = Configuration(overpass_base_url="https://overpass.example/", overpass_timeout=7)
        self.session = MagicMock()
        self.client = OverpassClient(self.cfg, session=self.session)

    def test_posts_query_and_returns_elements(self):
        elements = [{"type": "node", "id": 1, "lat": 1.0, "lon": 2.0, "tags": {}}]
        self.session.post.return_value = _response(payload={"elements": elements})

        self.assertEqual(self.client.fetch(_spec()), elements)

        args, kwargs = self.session.post.call_args
        self.assertEqual(args[0], "https://overpass.example/api/interpreter")
        self.assertEqual(kwargs["data"], {"data": "[out:json];node(1);out center;"})
        self.assertEqual(kwargs["timeout"], 7)
        self.assertIn("User-Agent", kwargs["headers"])

    def test_missing_elements_is_empty(self):
        self.session.post.return_value = _response(payload={"version": 0.6})
        self.assertEqual(self.client.fetch(_spec()), [])

    def test_network_error_raises_service_error_once(self):
        self.session.post.side_effect = requests.ConnectionError("boom")
        with self.assertRaises(ServiceError) as ctx:
            self.client.fetch(_spec())
        self.assertEqual(str(ctx.exception), SERVICE_ERROR_MESSAGE)
        self.assertIn("boom", ctx.exception.detail)
        self.assertEqual(self.session.post.call_count, 1)

    def test_upstream_status_error(self):
        self.session.post.return_value = _response(status=504, text="Gateway Timeout")
        with self.assertRaises(ServiceError) as ctx:
            self.client.fetch(_spec())
        self.assertIn("504", ctx.exception.detail)
        self.assertEqual(self.session.post.call_count, 1)

    def test_invalid_json(self):
        self.session.post.return_value = _response(json_error=True)
        with self.assertRaises(ServiceError):
            self.client.fetch(_spec())

    def test_runtime_remark_is_an_error(self):
        payload = {"elements": [], "remark": "runtime error: Query timed out in \"query\" at line 3 after 31 seconds."}
        self.session.post.return_value = _response(payload=payload)
        with self.assertRaises(ServiceError):
            self.client.fetch(_spec())

    def test_ping(self):
        self.session.get.return_value = _response(status=200)
        self.assertTrue(self.client.ping())
        self.session.get.side_effect = requests.Timeout("slow")
        self.assertFalse(self.client.ping())


if __name__ == "__main__":
    unittest.main()
