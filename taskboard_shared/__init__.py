"""Pydantic schemas shared between the Taskboard server and its clients."""
