# -*- coding: utf-8 -*-
import json
import re
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from fpdf import FPDF

from core.logger import get_logger
from domain.models import CompanyRecord, Summary
from services.report.formatters import FIELD_LABELS

log = get_logger(__name__)

FONT_FAMILY = "DejaVu"
# Карта стиля в имя файла
FONT_FILES = {
    "": "DejaVuSansCondensed.ttf",
    "B": "DejaVuSansCondensed-Bold.ttf",
}
RAW_PREVIEW_CHARS = 3500

DISCLAIMER = (
    "Важно: данный отчёт носит информационный характер и предназначен для внутренней проверки. "
    "Он не является официальным документом ФНС/госорганов и не гарантирует отсутствие рисков."
)

TRANSLIT = {
    'а': 'a', 'б': 'b', 'в': 'v', 'г': 'g', 'д': 'd', 'е': 'e', 'ё': 'yo',
    'ж': 'zh', 'з': 'z', 'и': 'i', 'й': 'y', 'к': 'k', 'л': 'l', 'м': 'm',
    'н': 'n', 'о': 'o', 'п': 'p', 'р': 'r', 'с': 's', 'т': 't', 'у': 'u',
    'ф': 'f', 'х': 'h', 'ц': 'ts', 'ч': 'ch', 'ш': 'sh', 'щ': 'sch',
    'ъ': '', 'ы': 'y', 'ь': '', 'э': 'e', 'ю': 'yu', 'я': 'ya',
}


def _find_font_file(filename: str) -> Optional[Path]:
    here = Path(__file__).resolve().parent
    candidates = [
        Path.cwd() / "assets" / "fonts" / filename,
        here.parent / "assets" / "fonts" / filename,
        here / "fonts" / filename,
        Path("/usr/share/fonts/truetype/dejavu") / filename,
    ]
    for p in candidates:
        if p.exists():
            return p
    return None


def sanitize_text(text: str) -> str:
    """Транслитерирует кириллицу и выбрасывает всё, чего нет в latin-1 шрифтах"""
    text = str(text)
    text = text.replace('№', 'N').replace('—', '-').replace('–', '-').replace('…', '...')
    text = text.replace('«', '"').replace('»', '"')
    result = []
    for char in text:
        lower = char.lower()
        if lower in TRANSLIT:
            repl = TRANSLIT[lower]
            result.append(repl.capitalize() if char != lower else repl)
        elif char.isascii() and (char.isalnum() or char in ' .,:;()"\'/\\-_{}[]#%+=\n'):
            result.append(char)
    return re.sub(r'[ \t]+', ' ', ''.join(result)).strip()


class CheckReport(FPDF):
    """PDF-отчёт о проверке контрагента"""

    def __init__(self, brand: str, watermark: str = ""):
        super().__init__(format="A4")
        self.brand = brand
        self.watermark = watermark
        self.unicode_font = self._register_fonts()
        self.set_auto_page_break(auto=True, margin=15)
        self.set_margins(17, 17, 17)
        self.add_page()

    def _register_fonts(self) -> bool:
        paths = {style: _find_font_file(fn) for style, fn in FONT_FILES.items()}
        if not all(paths.values()):
            log.warning("PDF: DejaVu fonts not found, falling back to transliterated Helvetica")
            return False
        for style, path in paths.items():
            self.add_font(FONT_FAMILY, style, str(path))
        return True

    def txt(self, text: Any) -> str:
        text = "" if text is None else str(text)
        return text if self.unicode_font else sanitize_text(text)

    def use_font(self, style: str = "", size: int = 11) -> None:
        style = "B" if style == "B" else ""
        self.set_font(FONT_FAMILY if self.unicode_font else "Helvetica", style, size)

    def header(self):
        self.use_font("B", 18)
        self.set_text_color(37, 99, 235)
        self.cell(0, 10, self.txt(self.brand), new_x="LMARGIN", new_y="NEXT")
        self.use_font("", 11)
        self.set_text_color(68, 68, 68)
        self.cell(0, 6, self.txt("Отчёт проверки контрагента по ИНН"), new_x="LMARGIN", new_y="NEXT")
        self.set_draw_color(37, 99, 235)
        self.line(self.l_margin, self.get_y() + 2, self.w - self.r_margin, self.get_y() + 2)
        self.ln(6)
        self.set_text_color(0, 0, 0)

    def footer(self):
        self.set_y(-15)
        self.use_font("", 8)
        self.set_text_color(128, 128, 128)
        self.cell(0, 10, self.txt(f"Страница {self.page_no()}"), align="C")

    def stamp(self):
        if not self.watermark:
            return
        self.use_font("B", 34)
        self.set_text_color(220, 220, 220)
        with self.rotation(18, x=self.w / 2, y=self.h / 2):
            self.text(self.w / 2 - 40, self.h / 2, self.txt(self.watermark))
        self.set_text_color(0, 0, 0)

    def section(self, title: str) -> None:
        self.ln(3)
        self.use_font("B", 13)
        self.cell(0, 8, self.txt(title), new_x="LMARGIN", new_y="NEXT")
        self.use_font("", 11)

    def field(self, label: str, value: Optional[str]) -> None:
        self.use_font("B", 10)
        self.cell(40, 6, self.txt(f"{label}:"))
        self.use_font("", 10)
        self.multi_cell(0, 6, self.txt(value or "—"), new_x="LMARGIN", new_y="NEXT")

    def bullet(self, text: str) -> None:
        self.multi_cell(0, 6, self.txt(f"- {text}"), new_x="LMARGIN", new_y="NEXT")


def build_check_pdf(inn: str, record: CompanyRecord, summary: Optional[Summary] = None,
                    payload: Optional[Dict[str, Any]] = None, *, brand: str = "ProverkaBiz",
                    watermark: str = "", provider: Optional[str] = None,
                    generated_at: Optional[datetime] = None) -> bytes:
    """
    Генерирует PDF отчёт по карточке компании используя fpdf2
    """
    pdf = CheckReport(brand, watermark)
    pdf.stamp()

    pdf.use_font("", 11)
    pdf.field("ИНН", inn)
    pdf.field("Дата/время", (generated_at or datetime.now()).strftime("%d.%m.%Y %H:%M"))
    if provider:
        pdf.field("Источник", provider)

    pdf.section("Карточка компании")
    for field, label in FIELD_LABELS:
        pdf.field(label, getattr(record, field))

    if summary is not None and summary.available:
        pdf.section("Краткая сводка")
        for b in summary.bullets:
            pdf.bullet(b)
        pdf.field("Уровень риска", summary.risk_level)
        if summary.red_flags:
            pdf.section("Красные флаги")
            for f in summary.red_flags:
                pdf.bullet(f)

    pdf.ln(4)
    pdf.use_font("", 9)
    pdf.set_text_color(68, 68, 68)
    pdf.multi_cell(0, 5, pdf.txt(DISCLAIMER), new_x="LMARGIN", new_y="NEXT")
    pdf.set_text_color(0, 0, 0)

    if payload:
        pdf.section("Технические данные (фрагмент)")
        pdf.use_font("", 7)
        preview = json.dumps(payload, ensure_ascii=False, indent=2, default=str)[:RAW_PREVIEW_CHARS]
        pdf.multi_cell(0, 3.5, pdf.txt(preview), new_x="LMARGIN", new_y="NEXT")

    data = bytes(pdf.output())
    log.info("PDF: report generated", inn=inn, bytes=len(data), unicode=pdf.unicode_font)
    return data
