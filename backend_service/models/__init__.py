# Models package for hosted backend records

from .records import Identity, AuthSession, Profile, VisitRecord

__all__ = [
    "Identity",
    "AuthSession",
    "Profile",
    "VisitRecord",
]
