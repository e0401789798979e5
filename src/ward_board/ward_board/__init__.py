"""Ward Board package.

Ward-partitioned bulletin board and clock-in recorder, organized by feature
modules (messages, identity, clock, ...) with thin Flask controllers on top of
service and store layers.
"""
