"""Tenant and schedule configuration store."""
