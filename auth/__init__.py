"""auth/ -- Credential storage, session tokens and the auth gate for the People API.

Layer rule: auth/ imports only core/, stdlib and third-party libraries.
It does NOT import from api/ or people/.
api/ imports from auth/, not the other way around.
"""
