# -*- coding: utf-8 -*-
"""
Клавиатуры для Telegram бота
"""
from aiogram.types import InlineKeyboardMarkup, InlineKeyboardButton

from bot.texts import BTN_ABOUT, BTN_CHECK_INN, BTN_PRICING, BTN_SUPPORT

# callback_data кнопок главного меню
CHECK_INN = "CHECK_INN"
PRICING = "PRICING"
ABOUT = "ABOUT"
SUPPORT = "SUPPORT"


def main_menu_kb() -> InlineKeyboardMarkup:
    """Главное меню"""
    return InlineKeyboardMarkup(inline_keyboard=[
        [InlineKeyboardButton(text=BTN_CHECK_INN, callback_data=CHECK_INN)],
        [
            InlineKeyboardButton(text=BTN_PRICING, callback_data=PRICING),
            InlineKeyboardButton(text=BTN_ABOUT, callback_data=ABOUT),
        ],
        [InlineKeyboardButton(text=BTN_SUPPORT, callback_data=SUPPORT)],
    ])
