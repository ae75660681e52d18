"""
JSON serialization tests

camelCase names, date-only values and relaxed escaping.
"""

from dataclasses import dataclass
from datetime import date, datetime

import pytest
from fastapi.testclient import TestClient
from pydantic import BaseModel, ValidationError

from rym_lubricentro_api.core.serialization import (
    DEFAULT_JSON_OPTIONS,
    DateOnly,
    DateOnlyJsonConverter,
    JsonNamingPolicy,
    JsonOptions,
    JsonSerializer,
    SerializationError,
)
from rym_lubricentro_api.schemas.common import ApiModel


class ServiceRecord(ApiModel):
    service_date: DateOnly
    description: str
    next_service_km: int | None = None


@dataclass
class OilChange:
    service_date: date
    oil_type: str


class Vehicle(BaseModel):
    license_plate: str
    last_services: list[OilChange] = []


class TestDateOnlyJsonConverter:
    converter = DateOnlyJsonConverter()

    def test_write(self):
        assert self.converter.write(date(2024, 3, 5)) == "2024-03-05"

    def test_read(self):
        assert self.converter.read("2024-03-05") == date(2024, 3, 5)

    def test_read_passes_dates_through(self):
        assert self.converter.read(date(2024, 3, 5)) == date(2024, 3, 5)

    @pytest.mark.parametrize("value", ["05/03/2024", "2024-13-01", "", 20240305])
    def test_read_rejects_invalid_values(self, value):
        with pytest.raises(ValueError):
            self.converter.read(value)

    def test_datetime_is_not_a_date_only_value(self):
        assert self.converter.can_convert(date(2024, 3, 5)) is True
        assert self.converter.can_convert(datetime(2024, 3, 5, 10, 30)) is False
        with pytest.raises(ValueError):
            self.converter.read(datetime(2024, 3, 5, 10, 30))


class TestJsonOptions:
    def test_defaults(self):
        options = JsonOptions()
        assert options.property_naming_policy is JsonNamingPolicy.CAMEL_CASE
        assert options.ensure_ascii is False
        assert any(isinstance(c, DateOnlyJsonConverter) for c in options.converters)

    def test_options_are_immutable(self):
        with pytest.raises(AttributeError):
            DEFAULT_JSON_OPTIONS.ensure_ascii = True

    @pytest.mark.parametrize(
        "policy, name, expected",
        [
            (JsonNamingPolicy.CAMEL_CASE, "service_date", "serviceDate"),
            (JsonNamingPolicy.CAMEL_CASE, "id", "id"),
            (JsonNamingPolicy.CAMEL_CASE, "serviceDate", "serviceDate"),
            (JsonNamingPolicy.CAMEL_CASE, "_private", "_private"),
            (JsonNamingPolicy.SNAKE_CASE, "serviceDate", "service_date"),
            (JsonNamingPolicy.NONE, "service_date", "service_date"),
        ],
    )
    def test_naming_policy(self, policy, name, expected):
        assert policy.convert(name) == expected


class TestApiModel:
    def test_serializes_camel_case_and_date_only(self):
        record = ServiceRecord(service_date=date(2024, 3, 5), description="Cambio de aceite")

        assert record.model_dump(mode="json", by_alias=True) == {
            "serviceDate": "2024-03-05",
            "description": "Cambio de aceite",
            "nextServiceKm": None,
        }

    def test_accepts_camel_case_and_python_names(self):
        by_alias = ServiceRecord.model_validate({"serviceDate": "2024-03-05", "description": "x"})
        by_name = ServiceRecord(service_date="2024-03-05", description="x")
        assert by_alias.service_date == by_name.service_date == date(2024, 3, 5)

    def test_rejects_other_date_formats(self):
        with pytest.raises(ValidationError):
            ServiceRecord.model_validate({"serviceDate": "05-03-2024", "description": "x"})


class TestJsonSerializer:
    serializer = JsonSerializer()

    def test_non_ascii_is_not_escaped(self):
        text = self.serializer.dumps({"servicio": "Lubricación básica", "taller": "Peñarol"})
        assert "Lubricación básica" in text
        assert "Peñarol" in text
        assert "\\u00e1" not in text

    def test_forward_slashes_are_not_escaped(self):
        assert self.serializer.dumps({"url": "https://bacosta30762.github.io/"}) == (
            '{"url":"https://bacosta30762.github.io/"}'
        )

    def test_date_only_values_use_the_converter(self):
        assert self.serializer.dumps({"fecha": date(2024, 3, 5)}) == '{"fecha":"2024-03-05"}'

    def test_datetime_values_use_iso_format(self):
        assert self.serializer.dumps({"at": datetime(2024, 3, 5, 8, 15)}) == '{"at":"2024-03-05T08:15:00"}'

    def test_models_are_rendered_by_alias(self):
        record = ServiceRecord(service_date=date(2024, 3, 5), description="Filtro")
        assert self.serializer.loads(self.serializer.dumps(record)) == {
            "serviceDate": "2024-03-05",
            "description": "Filtro",
            "nextServiceKm": None,
        }

    def test_object_keys_follow_the_naming_policy(self):
        payload = {"order_id": 7, "items": [{"unit_price": 10}], "km": 1500}
        assert self.serializer.loads(self.serializer.dumps(payload)) == {
            "orderId": 7,
            "items": [{"unitPrice": 10}],
            "km": 1500,
        }

    def test_no_naming_policy_keeps_keys(self):
        serializer = JsonSerializer(JsonOptions(property_naming_policy=JsonNamingPolicy.NONE))
        assert serializer.dumps({"order_id": 7}) == '{"order_id":7}'

    def test_plain_models_follow_the_naming_policy(self):
        vehicle = Vehicle(license_plate="AB123CD")
        assert self.serializer.loads(self.serializer.dumps(vehicle)) == {"licensePlate": "AB123CD", "lastServices": []}

    def test_unserializable_value(self):
        with pytest.raises(SerializationError):
            self.serializer.dumps({"value": object()})

    def test_invalid_json(self):
        with pytest.raises(SerializationError):
            self.serializer.loads("{no es json")


class TestJsonResponses:
    @pytest.fixture
    def client(self, prod_app):
        @prod_app.get("/api/v1/test/service-record", response_model=ServiceRecord)
        async def service_record():
            return ServiceRecord(service_date=date(2024, 3, 5), description="Lubricación básica")

        @prod_app.get("/api/v1/test/oil-change")
        async def oil_change():
            return OilChange(service_date=date(2024, 3, 5), oil_type="10W-40")

        @prod_app.get("/api/v1/test/vehicle")
        async def vehicle():
            return Vehicle(
                license_plate="AB123CD",
                last_services=[OilChange(service_date=date(2024, 3, 5), oil_type="10W-40")],
            )

        @prod_app.get("/api/v1/test/raw")
        async def raw():
            return {"mensaje": "Revisión técnica", "fecha": date(2024, 3, 5)}

        return TestClient(prod_app)

    def test_response_uses_camel_case_and_date_only(self, client):
        response = client.get("/api/v1/test/service-record")

        assert response.status_code == 200
        assert response.json()["serviceDate"] == "2024-03-05"
        assert "service_date" not in response.text

    def test_response_keeps_non_ascii_characters(self, client):
        response = client.get("/api/v1/test/service-record")

        assert "Lubricación básica" in response.text
        assert "\\u00e1" not in response.text
        assert response.headers["content-type"].startswith("application/json")

    def test_plain_dict_response(self, client):
        response = client.get("/api/v1/test/raw")
        assert response.json() == {"mensaje": "Revisión técnica", "fecha": "2024-03-05"}
        assert "Revisión" in response.text

    def test_dataclass_response_uses_camel_case(self, client):
        response = client.get("/api/v1/test/oil-change")

        assert response.json() == {"serviceDate": "2024-03-05", "oilType": "10W-40"}
        assert "service_date" not in response.text

    def test_plain_model_response_uses_camel_case(self, client):
        response = client.get("/api/v1/test/vehicle")

        assert response.json() == {
            "licensePlate": "AB123CD",
            "lastServices": [{"serviceDate": "2024-03-05", "oilType": "10W-40"}],
        }
