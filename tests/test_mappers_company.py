# -*- coding: utf-8 -*-
"""
Тесты нормализации ответов провайдеров
"""
from services.mappers.company import normalize

DADATA_PAYLOAD = {
    "suggestions": [
        {
            "value": "ПАО СБЕРБАНК",
            "data": {
                "inn": "7707083893",
                "kpp": "773601001",
                "ogrn": "1027700132195",
                "name": {"short_with_opf": "ПАО СБЕРБАНК", "full_with_opf": "ПУБЛИЧНОЕ АКЦИОНЕРНОЕ ОБЩЕСТВО \"СБЕРБАНК РОССИИ\""},
                "state": {"status": "ACTIVE"},
                "address": {"value": "г Москва, ул Вавилова, д 19"},
                "management": {"name": "Греф Герман Оскарович", "post": "ПРЕЗИДЕНТ"},
                "okved": "64.19",
            },
        }
    ]
}

CHECKO_PAYLOAD = {
    "data": {
        "ИНН": "7736207543",
        "КПП": "772501001",
        "ОГРН": "1027700229193",
        "НаимСокр": "ООО \"ЯНДЕКС\"",
        "Статус": {"Код": "001", "Наим": "Действует"},
        "ЮрАдрес": {"АдресРФ": "г. Москва, ул. Льва Толстого, д. 16"},
        "Руковод": [{"ФИО": "Савиновский Артем Геннадьевич"}],
        "ОКВЭД": {"Код": "62.01", "Наим": "Разработка компьютерного программного обеспечения"},
    },
    "meta": {"status": "ok"},
}


class TestNormalize:

    def test_dadata(self):
        record = normalize(DADATA_PAYLOAD)
        assert record.name == "ПАО СБЕРБАНК"
        assert record.inn == "7707083893"
        assert record.kpp == "773601001"
        assert record.status == "ACTIVE"
        assert record.address.startswith("г Москва")
        assert record.manager == "Греф Герман Оскарович"
        assert record.okved == "64.19"

    def test_checko(self):
        record = normalize(CHECKO_PAYLOAD)
        assert record.name == "ООО \"ЯНДЕКС\""
        assert record.ogrn == "1027700229193"
        assert record.status == "Действует"
        assert record.manager == "Савиновский Артем Геннадьевич"
        assert record.okved == "62.01"

    def test_checko_entrepreneur(self):
        payload = {"data": {"ИНН": "500100732259", "ОГРНИП": "304500116000157", "ФИО": "Иванов Иван Иванович"}}
        record = normalize(payload)
        assert record.name == "Иванов Иван Иванович"
        assert record.ogrn == "304500116000157"

    def test_flat_payload(self):
        record = normalize({"name": "ООО Ромашка", "status": "ACTIVE"})
        assert record.name == "ООО Ромашка"
        assert record.status == "ACTIVE"
        assert record.inn is None

    def test_partial_record_is_valid(self):
        record = normalize({"data": {"ИНН": "7707083893"}})
        assert record is not None
        assert record.filled_count() == 1

    def test_idempotent(self):
        first = normalize(DADATA_PAYLOAD)
        second = normalize(DADATA_PAYLOAD)
        assert first == second
        # нормализация уже нормализованной карточки ничего не меняет
        assert normalize(first.model_dump()) == first

    def test_unrecognized(self):
        assert normalize({"suggestions": []}) is None
        assert normalize({"data": {}, "meta": {"status": "ok"}}) is None
        assert normalize({}) is None
        assert normalize([]) is None
        assert normalize(None) is None

    def test_ignores_non_scalar_and_bool(self):
        record = normalize({"name": {"unknown": 1}, "inn": True, "kpp": 773601001})
        assert record.name is None
        assert record.inn is None
        assert record.kpp == "773601001"
