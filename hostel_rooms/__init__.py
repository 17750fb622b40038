"""
Hostel room allocation service.

Rooms, beds and the allocation workflow that assigns students to beds
while keeping room occupancy consistent.
"""

__version__ = "0.1.0"
