"""auth/ -- Credential and session-issuance package for StaffDesk.

Layer rule: auth/ imports only stdlib, third-party libraries, and core/.
It does NOT import from api/ or reporting/, with one exception:
auth/dependencies.py imports fastapi because it is the request gate.
api/ imports from auth/, not the other way around.
"""
