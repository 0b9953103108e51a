# -*- coding: utf-8 -*-
"""
Тест PDF генерации
"""
from domain.models import CompanyRecord, Summary
from reports.pdf import build_check_pdf, sanitize_text


class TestBuildCheckPdf:

    def test_generates_pdf(self):
        record = CompanyRecord(name="ООО «Ромашка»", inn="7707083893", status="Действует",
                               address="г. Москва, ул. Ленина, д. 1", manager="Иванов Иван Иванович")
        summary = Summary(title="Ромашка", bullets=["Компания действует"], red_flags=["Массовый адрес"],
                          risk_level="средний")
        data = build_check_pdf("7707083893", record, summary, {"name": "ООО Ромашка"},
                               brand="ProverkaBiz", watermark="ПРОВЕРЕНО", provider="dadata")
        assert data.startswith(b"%PDF")
        assert len(data) > 1000

    def test_minimal_record(self):
        data = build_check_pdf("500100732259", CompanyRecord())
        assert data.startswith(b"%PDF")


class TestSanitizeText:

    def test_transliterates_cyrillic(self):
        assert sanitize_text("ООО Ромашка") == "OOO Romashka"
        assert sanitize_text("Щука № 5 — «да»") == 'Schuka N 5 - "da"'

    def test_drops_unsupported(self):
        assert sanitize_text("OK ✅") == "OK"
