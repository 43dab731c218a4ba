from sqlalchemy.orm import relationship
from sqlalchemy import CheckConstraint, Column, Integer, String, Numeric, ForeignKey, Text
from database import Base


class Company(Base):
    __tablename__ = "companies"

    handle = Column(String(25), primary_key=True)
    name = Column(Text, unique=True, nullable=False)
    num_employees = Column(Integer, CheckConstraint("num_employees >= 0"))
    description = Column(Text, nullable=False, default="")
    logo_url = Column(Text)

    jobs = relationship("Job", back_populates="company", passive_deletes=True)


class Job(Base):
    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(Text, nullable=False)
    salary = Column(Integer, CheckConstraint("salary >= 0"))
    equity = Column(Numeric, CheckConstraint("equity <= 1.0"))
    company_handle = Column(
        String(25), ForeignKey("companies.handle", ondelete="CASCADE"), nullable=False
    )

    company = relationship("Company", back_populates="jobs")
