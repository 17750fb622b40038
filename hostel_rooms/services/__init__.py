"""
Service layer.

Services own transactions (through ``UnitOfWork``), enforce roles and
return Pydantic schemas.
"""
