"""Port interfaces - Layer boundary contracts.

    ObjectStoragePort - Object storage signing and deletion
    FileRecordPort    - File metadata persistence
    MessageLinkPort   - Message carrying a file (read-only, chat component)
    RoomPort          - Room participants (read-only, chat component)
    UserProfilePort   - Profile image pointer on a user account
"""

from src.ports.chat_lookup_port import MessageLinkPort, RoomPort
from src.ports.file_record_port import FileRecordPort
from src.ports.object_storage_port import ObjectStoragePort
from src.ports.user_profile_port import UserProfilePort

__all__ = [
    "FileRecordPort",
    "MessageLinkPort",
    "ObjectStoragePort",
    "RoomPort",
    "UserProfilePort",
]
