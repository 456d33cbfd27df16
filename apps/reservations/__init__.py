"""Reservations app package.

A reservation hold is a guest's claim on a stay. Confirming it is the only
operation that consumes quota-calendar inventory, and it runs inside one
database transaction with the affected quota rows locked.
"""
