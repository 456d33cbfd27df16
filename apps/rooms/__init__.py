"""Rooms app package.

Owns the per-room pricing profile (base, weekday and per-date prices) and
the quota calendar (remaining units per night), together with the pricing
and availability services built on them.
"""
