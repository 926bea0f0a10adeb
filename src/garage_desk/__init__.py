"""Garage desk package.

Front end for a vehicle service shop: worker check-in/out, vehicle intake,
invoicing and appointment scheduling. Business data lives behind a remote
REST API; this package is organized by feature modules (auth, vehicles,
work_sessions, invoices, ...) with a thin Flask controller layer over
service and repository layers.
"""
