"""
Error taxonomy shared by the services, the local store and the API.

    ValidationError  - bad shape or enum value at the boundary
    NotFoundError    - target id is missing or already soft-deleted
    StoreError       - database/transport failure
    StorageError     - blob storage failure
"""


class LifeSyncError(Exception):
    pass


class ValidationError(LifeSyncError, ValueError):
    pass


class NotFoundError(LifeSyncError, LookupError):
    pass


class StoreError(LifeSyncError):
    pass


class StorageError(LifeSyncError):
    pass
