"""
Employees API — Storage Contract Tests
=======================================

What:  Behaviour every EmployeesService must share.
How:   The `employees_service` fixture is parametrized, so each test runs
       against the map (JSON file) and the sqlite backend.

    ✅ generated ids, add/get round trip, duplicate ids
    ✅ NotFoundError for get/update/delete of unknown ids
    ✅ department filter (QA ×2, Development ×2, unknown → [])
    ✅ partial update touches only the given fields, never the id
    ✅ delete returns the old record; re-adding restores an equal record
    ✅ a saved backend refuses further calls; save() is idempotent
"""

import uuid

import pytest

from employees_api.exceptions import AlreadyExistsError, BackendClosedError, NotFoundError


async def _add_all(service, employees):
    return [await service.add_employee(e) for e in employees]


class TestAddAndGet:

    @pytest.mark.asyncio
    async def test_add_generates_uuid(self, employees_service, new_employee):
        added = await employees_service.add_employee(new_employee)

        assert added.id
        uuid.UUID(added.id)
        assert added.full_name == new_employee.full_name

    @pytest.mark.asyncio
    async def test_add_then_get_round_trip(self, employees_service, new_employee):
        added = await employees_service.add_employee(new_employee)
        fetched = await employees_service.get_employee(added.id)

        assert fetched == added

    @pytest.mark.asyncio
    async def test_add_keeps_supplied_id(self, employees_service, new_employee):
        supplied = str(uuid.uuid4())
        added = await employees_service.add_employee(new_employee.model_copy(update={"id": supplied}))

        assert added.id == supplied

    @pytest.mark.asyncio
    async def test_add_with_taken_id_raises(self, employees_service, new_employee):
        added = await employees_service.add_employee(new_employee)

        with pytest.raises(AlreadyExistsError, match=f"Employee with id {added.id} already exists"):
            await employees_service.add_employee(new_employee.model_copy(update={"id": added.id}))

    @pytest.mark.asyncio
    async def test_two_idless_adds_get_distinct_ids(self, employees_service, new_employee):
        first = await employees_service.add_employee(new_employee)
        second = await employees_service.add_employee(new_employee)

        assert first.id != second.id
        assert len(await employees_service.get_all()) == 2

    @pytest.mark.asyncio
    async def test_get_unknown_raises(self, employees_service):
        with pytest.raises(NotFoundError, match="Employee with id 123 not found"):
            await employees_service.get_employee("123")


class TestGetAll:

    @pytest.mark.asyncio
    async def test_empty_store(self, employees_service):
        assert await employees_service.get_all() == []

    @pytest.mark.asyncio
    async def test_returns_everything_without_filter(self, employees_service, sample_employees):
        await _add_all(employees_service, sample_employees)

        assert len(await employees_service.get_all()) == 4

    @pytest.mark.asyncio
    @pytest.mark.parametrize("department,expected", [("QA", 2), ("Development", 2), ("kuku", 0)])
    async def test_filter_by_department(self, employees_service, sample_employees, department, expected):
        await _add_all(employees_service, sample_employees)

        result = await employees_service.get_all(department)

        assert len(result) == expected
        assert all(e.department == department for e in result)

    @pytest.mark.asyncio
    async def test_empty_department_means_no_filter(self, employees_service, sample_employees):
        await _add_all(employees_service, sample_employees)

        assert len(await employees_service.get_all("")) == 4


class TestUpdate:

    @pytest.mark.asyncio
    async def test_partial_update_only_touches_salary(self, employees_service, new_employee):
        added = await employees_service.add_employee(new_employee)

        updated = await employees_service.update_employee(added.id, {"salary": 20000})

        assert updated.salary == 20000
        assert updated.model_dump(exclude={"salary"}) == added.model_dump(exclude={"salary"})
        assert await employees_service.get_employee(added.id) == updated

    @pytest.mark.asyncio
    async def test_update_accepts_wire_names(self, employees_service, new_employee):
        added = await employees_service.add_employee(new_employee)

        updated = await employees_service.update_employee(added.id, {"fullName": "Eve Renamed"})

        assert updated.full_name == "Eve Renamed"

    @pytest.mark.asyncio
    async def test_update_never_changes_id(self, employees_service, new_employee):
        added = await employees_service.add_employee(new_employee)

        updated = await employees_service.update_employee(
            added.id, {"id": "other-id", "department": "QA"}
        )

        assert updated.id == added.id
        assert updated.department == "QA"
        with pytest.raises(NotFoundError):
            await employees_service.get_employee("other-id")

    @pytest.mark.asyncio
    async def test_empty_update_returns_record(self, employees_service, new_employee):
        added = await employees_service.add_employee(new_employee)

        assert await employees_service.update_employee(added.id, {}) == added

    @pytest.mark.asyncio
    async def test_update_unknown_raises(self, employees_service):
        with pytest.raises(NotFoundError):
            await employees_service.update_employee("123", {"salary": 20000})

    @pytest.mark.asyncio
    async def test_update_unknown_field_rejected(self, employees_service, new_employee):
        added = await employees_service.add_employee(new_employee)

        with pytest.raises(ValueError, match="Unknown employee field"):
            await employees_service.update_employee(added.id, {"nickname": "evie"})


class TestDelete:

    @pytest.mark.asyncio
    async def test_delete_returns_previous_record(self, employees_service, new_employee):
        added = await employees_service.add_employee(new_employee)

        removed = await employees_service.delete_employee(added.id)

        assert removed == added
        with pytest.raises(NotFoundError):
            await employees_service.get_employee(added.id)

    @pytest.mark.asyncio
    async def test_readding_deleted_record_restores_it(self, employees_service, new_employee):
        added = await employees_service.add_employee(new_employee)
        removed = await employees_service.delete_employee(added.id)

        await employees_service.add_employee(removed)

        assert await employees_service.get_employee(added.id) == added

    @pytest.mark.asyncio
    async def test_delete_unknown_raises(self, employees_service):
        with pytest.raises(NotFoundError):
            await employees_service.delete_employee("123")


class TestLifecycle:

    @pytest.mark.asyncio
    async def test_calls_after_save_raise(self, employees_service, new_employee):
        await employees_service.save()

        assert employees_service.closed
        with pytest.raises(BackendClosedError):
            await employees_service.get_all()
        with pytest.raises(BackendClosedError):
            await employees_service.add_employee(new_employee)

    @pytest.mark.asyncio
    async def test_second_save_is_a_no_op(self, employees_service):
        await employees_service.save()
        await employees_service.save()

        assert employees_service.closed
