"""
Store paths, namespaced per deployment/tenant:

    artifacts/{app_id}/public/data/users/{user_id}
    artifacts/{app_id}/public/data/chatrooms/{room_id}/messages/{message_id}
    artifacts/{app_id}/public/data/dmThreads/{thread_id}/messages/{message_id}
"""

from chatsync.domain.value_objects.conversation_ref import ConversationKind, ConversationRef

USERS = "users"
CHATROOMS = "chatrooms"
DM_THREADS = "dmThreads"
MESSAGES = "messages"

_CONVERSATION_COLLECTIONS = {
    ConversationKind.ROOM: CHATROOMS,
    ConversationKind.THREAD: DM_THREADS,
}


class CollectionPaths:
    def __init__(self, app_id: str):
        if not app_id:
            raise ValueError("app_id cannot be empty")
        self._root = f"artifacts/{app_id}/public/data"

    def collection(self, name: str) -> str:
        return f"{self._root}/{name}"

    @property
    def users(self) -> str:
        return self.collection(USERS)

    @property
    def rooms(self) -> str:
        return self.collection(CHATROOMS)

    @property
    def threads(self) -> str:
        return self.collection(DM_THREADS)

    def user(self, user_id: str) -> str:
        return f"{self.users}/{user_id}"

    def room(self, room_id: str) -> str:
        return f"{self.rooms}/{room_id}"

    def thread(self, thread_id: str) -> str:
        return f"{self.threads}/{thread_id}"

    def messages(self, conversation: ConversationRef) -> str:
        parent = self.collection(_CONVERSATION_COLLECTIONS[conversation.kind])
        return f"{parent}/{conversation.id}/{MESSAGES}"
