# -*- coding: utf-8 -*-
from aiogram.fsm.state import StatesGroup, State


class SearchState(StatesGroup):
    ASK_INN = State()
