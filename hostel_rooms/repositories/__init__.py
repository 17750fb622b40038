"""
Data access layer.

One repository per entity; every repository is bound to the session of
the UnitOfWork that created it.
"""
