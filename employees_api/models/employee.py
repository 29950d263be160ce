"""
Employees API — Employee SQLAlchemy Model
==========================================

What:  ORM model representing the `employees` table.
Who:   Used by the SQL employees backend.

Table Design:
    - id: string primary key (UUID text); uniqueness enforced by the PK
    - column names keep the camelCase wire names (fullName, birthDate) so rows
      and JSON documents share one vocabulary
    - department index: backs the filtered GET /employees?department= scan
"""

from sqlalchemy import Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from employees_api.database import Base
from employees_api.schemas.employee import Employee

TABLE_NAME = "employees"


class EmployeeRecord(Base):
    """One row per employee."""

    __tablename__ = TABLE_NAME

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    full_name: Mapped[str] = mapped_column("fullName", String(255), nullable=False)
    avatar: Mapped[str] = mapped_column(String(1024), nullable=False, default="")
    birth_date: Mapped[str] = mapped_column("birthDate", String(32), nullable=False)
    salary: Mapped[int] = mapped_column(Integer, nullable=False)
    department: Mapped[str] = mapped_column(String(255), nullable=False)

    __table_args__ = (
        Index("idx_employees_department", "department"),
    )

    @classmethod
    def from_employee(cls, employee: Employee) -> "EmployeeRecord":
        return cls(**employee.model_dump())

    def to_employee(self) -> Employee:
        return Employee(
            id=self.id,
            full_name=self.full_name,
            avatar=self.avatar,
            department=self.department,
            birth_date=self.birth_date,
            salary=self.salary,
        )

    def __repr__(self) -> str:
        return f"<EmployeeRecord(id={self.id}, department='{self.department}')>"
