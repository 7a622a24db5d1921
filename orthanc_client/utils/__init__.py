"""Utility modules for the Orthanc client."""
