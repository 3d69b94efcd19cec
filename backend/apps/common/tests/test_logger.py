import unittest
from decimal import Decimal

from apps.common import get_logger


class AppLoggerTests(unittest.TestCase):
    def test_bind_merges_context_without_mutating_parent(self):
        base = get_logger("apps.tests.logger").bind(component="catalog")
        child = base.bind(layer="service")
        self.assertEqual(base.context, {"component": "catalog"})
        self.assertEqual(child.context, {"component": "catalog", "layer": "service"})

    def test_message_renders_key_values(self):
        log = get_logger("apps.tests.logger").bind(component="carts")
        with self.assertLogs("apps.tests.logger", level="INFO") as logs:
            log.info("Cart updated", cart_id=3, ids=[1, 2], price=Decimal("1.50"))
        self.assertEqual(
            logs.records[0].getMessage(),
            "Cart updated | component=carts cart_id=3 ids=[1,2] price=1.50",
        )

    def test_disabled_level_is_skipped(self):
        log = get_logger("apps.tests.logger")
        with self.assertLogs("apps.tests.logger", level="INFO") as logs:
            log.debug("hidden")
            log.warning("shown")
        self.assertEqual([r.getMessage() for r in logs.records], ["shown"])
