"""
Employees API — Employee Schema Tests
======================================

What:  Validation rules of the POST/PATCH bodies and the update helpers.

    ✅ valid bodies in camelCase are accepted
    ✅ each business rule rejects out-of-range input
    ✅ PATCH bodies keep only sent fields, reject id and nulls
    ✅ changes_without_id normalizes names and drops id
"""

import uuid
from datetime import date

import pytest
from pydantic import ValidationError

from employees_api.config import settings, years_ago
from employees_api.schemas.employee import Employee, EmployeeCreate, EmployeeUpdate
from employees_api.services.employees.base import changes_without_id, to_aliases


@pytest.fixture
def body():
    return {
        "fullName": "Frank Manager",
        "avatar": "https://example.com/frank.png",
        "department": "Management",
        "birthDate": "1980-03-15",
        "salary": 30000,
    }


class TestEmployeeCreate:

    def test_valid_body(self, body):
        created = EmployeeCreate.model_validate(body)

        employee = created.to_employee()
        assert employee.id is None
        assert employee.full_name == "Frank Manager"
        assert employee.to_document()["birthDate"] == "1980-03-15"

    def test_valid_uuid_id_kept(self, body):
        employee_id = str(uuid.uuid4())

        created = EmployeeCreate.model_validate({**body, "id": employee_id})

        assert created.to_employee().id == employee_id

    @pytest.mark.parametrize(
        "field,value,message",
        [
            ("id", "123", "valid UUID"),
            ("fullName", "F", "at least 2 characters"),
            ("avatar", "not a url", "valid URL"),
            ("department", "kuku", "Department must be one of"),
            ("birthDate", "15/03/1980", "Birth date must be between"),
            ("salary", 100, "greater than"),
            ("salary", 1_000_000, "less than"),
            ("salary", "30000", "valid integer"),
        ],
    )
    def test_rule_violations(self, body, field, value, message):
        with pytest.raises(ValidationError, match=message):
            EmployeeCreate.model_validate({**body, field: value})

    def test_too_young(self, body):
        too_young = years_ago(settings.min_age - 1).isoformat()

        with pytest.raises(ValidationError, match="Birth date must be between"):
            EmployeeCreate.model_validate({**body, "birthDate": too_young})

    def test_too_old(self, body):
        too_old = years_ago(settings.max_age + 1).isoformat()

        with pytest.raises(ValidationError, match="Birth date must be between"):
            EmployeeCreate.model_validate({**body, "birthDate": too_old})

    def test_missing_field(self, body):
        del body["department"]

        with pytest.raises(ValidationError):
            EmployeeCreate.model_validate(body)

    def test_unknown_field_rejected(self, body):
        with pytest.raises(ValidationError):
            EmployeeCreate.model_validate({**body, "nickname": "frankie"})


class TestEmployeeUpdate:

    def test_only_sent_fields_are_changes(self):
        update = EmployeeUpdate.model_validate({"salary": 20000})

        assert update.changes() == {"salary": 20000}

    def test_camel_case_names_map_to_attributes(self):
        update = EmployeeUpdate.model_validate({"fullName": "New Name", "birthDate": "1990-01-01"})

        assert update.changes() == {"full_name": "New Name", "birth_date": "1990-01-01"}

    def test_id_rejected(self):
        with pytest.raises(ValidationError):
            EmployeeUpdate.model_validate({"id": str(uuid.uuid4())})

    def test_null_rejected(self):
        with pytest.raises(ValidationError, match="may be omitted but not null"):
            EmployeeUpdate.model_validate({"salary": None})

    def test_rules_apply_to_sent_fields(self):
        with pytest.raises(ValidationError, match="Department must be one of"):
            EmployeeUpdate.model_validate({"department": "kuku"})

    def test_empty_body_is_no_change(self):
        assert EmployeeUpdate.model_validate({}).changes() == {}


class TestChangeHelpers:

    def test_changes_without_id(self):
        assert changes_without_id({"id": "x", "fullName": "A B", "salary": 1}) == {
            "full_name": "A B",
            "salary": 1,
        }

    def test_unknown_key_raises(self):
        with pytest.raises(ValueError, match="Unknown employee field 'kuku'"):
            changes_without_id({"kuku": 1})

    def test_to_aliases(self):
        assert to_aliases({"full_name": "A B", "birth_date": "1990-01-01"}) == {
            "fullName": "A B",
            "birthDate": "1990-01-01",
        }


class TestYearsAgo:

    def test_leap_day_falls_back(self):
        assert years_ago(1, today=date(2024, 2, 29)) == date(2023, 2, 28)

    def test_regular_day(self):
        assert years_ago(20, today=date(2026, 10, 18)) == date(2006, 10, 18)


def test_employee_accepts_attribute_and_alias_names():
    by_alias = Employee.model_validate(
        {"fullName": "A B", "department": "QA", "birthDate": "1990-01-01", "salary": 9000}
    )
    by_name = Employee(full_name="A B", department="QA", birth_date="1990-01-01", salary=9000)

    assert by_alias == by_name
    assert by_alias.avatar == ""
