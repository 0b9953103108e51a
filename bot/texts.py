# -*- coding: utf-8 -*-
"""
Статические тексты бота (HTML parse mode)
"""
from services.report.formatters import h

BTN_CHECK_INN = "🔎 Проверить ИНН"
BTN_PRICING = "💎 Тарифы"
BTN_ABOUT = "ℹ️ О сервисе"
BTN_SUPPORT = "🆘 Поддержка"

ASK_INN = "Пришлите ИНН компании (10 цифр) или ИП (12 цифр) одним сообщением."

ABOUT = (
    "ℹ️ <b>О сервисе</b>\n\n"
    "Бот проверяет контрагентов по ИНН через открытые реестры РФ: наименование, статус, "
    "ОГРН, КПП, адрес, руководитель и основной ОКВЭД.\n\n"
    "Отчёт информационный, для внутренней проверки. Не документ ФНС."
)


def start_text(first_name: str, daily_limit: int, remaining_line: str = "") -> str:
    text = (
        f"👋 Привет, {h(first_name or 'друг')}!\n\n"
        "Я проверю компанию или ИП по ИНН: пришлите 10 или 12 цифр "
        "или воспользуйтесь командой <code>/check 7707083893</code>.\n\n"
        f"Бесплатно: {daily_limit} проверки в день."
    )
    if remaining_line:
        text += f"\n{remaining_line}"
    return text


def help_text(daily_limit: int) -> str:
    return (
        "📖 <b>Как пользоваться</b>\n\n"
        "• Пришлите ИНН одним сообщением\n"
        "• Или команда <code>/check &lt;ИНН&gt;</code>\n\n"
        f"Бесплатный лимит: {daily_limit} проверки в день. В PRO ограничений нет."
    )


def pricing_text(daily_limit: int) -> str:
    return (
        "💎 <b>Тарифы</b>\n\n"
        f"<b>Free</b>: {daily_limit} проверки в день, карточка компании.\n"
        "<b>PRO</b>: безлимит проверок, AI-сводка рисков и PDF-отчёт."
    )


def support_text(contact: str) -> str:
    if not contact:
        return "🆘 Поддержка пока не настроена. Попробуйте позже."
    return f"🆘 По вопросам работы бота пишите: {h(contact)}"
