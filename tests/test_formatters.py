# -*- coding: utf-8 -*-
"""
Тесты для форматтеров
"""
import unittest
from datetime import datetime

from domain.models import SUMMARY_UNAVAILABLE, CompanyRecord, QuotaDecision, Summary
from services.report.formatters import (
    h,
    render_company,
    render_not_found,
    render_quota_exceeded,
    render_quota_line,
)


class TestFormatters(unittest.TestCase):
    """Тесты для форматтеров"""

    def test_h_escapes_markup(self):
        self.assertEqual(h("ООО <Рога & Копыта>"), "ООО &lt;Рога &amp; Копыта&gt;")
        self.assertEqual(h(None), "—")

    def test_company_fields_are_escaped(self):
        record = CompanyRecord(name="<b>Evil</b> & Co", address="ул. <script>")
        text = render_company("7707083893", record)
        self.assertIn("&lt;b&gt;Evil&lt;/b&gt; &amp; Co", text)
        self.assertIn("ул. &lt;script&gt;", text)
        self.assertNotIn("<script>", text)

    def test_empty_fields_are_skipped(self):
        text = render_company("7707083893", CompanyRecord(name="ООО Ромашка"))
        self.assertIn("ООО Ромашка", text)
        self.assertNotIn("КПП", text)

    def test_summary_is_escaped(self):
        summary = Summary(title="A<B", bullets=["x > y"], red_flags=["<i>долги</i>"], risk_level="высокий")
        text = render_company("7707083893", CompanyRecord(name="X"), summary=summary)
        self.assertIn("A&lt;B", text)
        self.assertIn("x &gt; y", text)
        self.assertIn("&lt;i&gt;долги&lt;/i&gt;", text)
        self.assertIn("высокий", text)

    def test_unavailable_summary_is_hidden(self):
        text = render_company("7707083893", CompanyRecord(name="X"), summary=SUMMARY_UNAVAILABLE)
        self.assertNotIn("Уровень риска", text)
        self.assertIn("Результат по ИНН 7707083893", text)

    def test_quota_line(self):
        self.assertIn("2</b> из 3", render_quota_line(QuotaDecision(allowed=True, remaining=2, limit=3)))
        pro = QuotaDecision(allowed=True, is_pro=True, pro_until=datetime(2025, 1, 31), limit=3)
        self.assertIn("31.01.2025", render_quota_line(pro))
        self.assertEqual(render_quota_line(QuotaDecision(allowed=True, degraded=True, limit=3)), "")
        self.assertEqual(render_quota_line(None), "")

    def test_messages(self):
        self.assertIn("(3 в день)", render_quota_exceeded(3))
        self.assertIn("7707083893", render_not_found("7707083893"))


if __name__ == "__main__":
    unittest.main()
