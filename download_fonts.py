#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Скачивает шрифты DejaVu в assets/fonts, чтобы PDF-отчёт печатал кириллицу
(без них reports.pdf транслитерирует текст)
"""
from pathlib import Path

import httpx

from reports.pdf import FONT_FILES

BASE_URL = "https://github.com/dejavu-fonts/dejavu-fonts/raw/master/ttf"


def download_fonts(fonts_dir: Path = Path("assets/fonts")) -> int:
    """Возвращает число файлов, которые не удалось скачать"""
    fonts_dir.mkdir(parents=True, exist_ok=True)
    failed = 0
    with httpx.Client(timeout=30, follow_redirects=True) as client:
        for filename in FONT_FILES.values():
            filepath = fonts_dir / filename
            if filepath.exists():
                print(f"✓ {filename} уже существует")
                continue
            try:
                print(f"Скачиваю {filename}...")
                response = client.get(f"{BASE_URL}/{filename}")
                response.raise_for_status()
                filepath.write_bytes(response.content)
                print(f"✓ {filename} скачан успешно")
            except httpx.HTTPError as e:
                failed += 1
                print(f"✗ Ошибка при скачивании {filename}: {e}")
    return failed


if __name__ == "__main__":
    raise SystemExit(1 if download_fonts() else 0)
