from enum import Enum

class TatFlag(str, Enum):
    RED = "Red"
    GREEN = "Green"

class AllocationStatus(str, Enum):
    ALLOCATED = "Allocated"
    AVAILABLE = "Available"
    PENDING = "Pending"
    COMPLETED = "Completed"

class ProcessingMethod(str, Enum):
    REMOTE = "remote"    # Remote preprocessing service
    LOCAL = "local"      # In-process pipeline fallback
