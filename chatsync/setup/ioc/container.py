"""
Dishka DI Container Setup.

- APP scope: AppContext (document store, generative client, repositories,
  background tasks), AssistantOrchestrator. Built once, closed on shutdown.
- REQUEST scope: repository ports, services and command/query handlers.

Flow:
  Container → AppContext → StoreMessageRepository → SendMessageHandler
                                  ↓
                      uses MessageRepository interface
"""

import logging
from typing import AsyncIterable, Optional

from dishka import AsyncContainer, Provider, Scope, make_async_container, provide
from httpx import Timeout

from chatsync.application.commands.chat import SendMessageHandler
from chatsync.application.commands.profiles import SignInHandler, UpdateProfileHandler
from chatsync.application.commands.rooms import CreateRoomHandler
from chatsync.application.commands.threads import ResolveThreadHandler
from chatsync.application.common.context import AppContext, AssistantSettings
from chatsync.application.queries.chat import (
    DraftReplyHandler,
    GetMessagesHandler,
    SummarizeRoomHandler,
)
from chatsync.application.queries.conversations import (
    GetConversationHandler,
    ListConversationsHandler,
)
from chatsync.config.settings import Config
from chatsync.domain.ports.document_store import DocumentStore
from chatsync.domain.ports.generative_client import GenerativeClient
from chatsync.domain.ports.repositories import (
    IdentityRepository,
    MessageRepository,
    RoomRepository,
    ThreadRepository,
)
from chatsync.infrastructure.llm import GeminiClient
from chatsync.infrastructure.persistence import (
    CollectionPaths,
    InMemoryDocumentStore,
    RedisDocumentStore,
    StoreIdentityRepository,
    StoreMessageRepository,
    StoreRoomRepository,
    StoreThreadRepository,
)
from chatsync.infrastructure.persistence.redis_client import create_redis_client
from chatsync.services import AssistantOrchestrator, ProfileDirectory, ThreadResolver

logger = logging.getLogger(__name__)


async def create_document_store() -> DocumentStore:
    if Config.STORE_BACKEND == "redis":
        redis = await create_redis_client(Config.REDIS_URL)
        return RedisDocumentStore(redis, namespace=Config.APP_ID)
    if Config.STORE_BACKEND != "memory":
        raise ValueError(f"Unknown STORE_BACKEND: {Config.STORE_BACKEND}")
    logger.warning("[Container] Using in-memory document store; data is not persisted")
    return InMemoryDocumentStore()


def create_generative_client() -> GenerativeClient:
    if not Config.GEMINI_API_KEY:
        logger.warning("[Container] GEMINI_API_KEY is not set; assistant calls will fail")
    return GeminiClient(
        api_key=Config.GEMINI_API_KEY,
        model=Config.GEMINI_MODEL,
        base_url=Config.GEMINI_BASE_URL,
        timeout=Timeout(Config.LLM_TIMEOUT, connect=Config.LLM_CONNECT_TIMEOUT),
    )


def build_app_context(store: DocumentStore, llm: GenerativeClient) -> AppContext:
    paths = CollectionPaths(Config.APP_ID)
    return AppContext(
        store=store,
        llm=llm,
        identities=StoreIdentityRepository(store, paths),
        rooms=StoreRoomRepository(store, paths),
        threads=StoreThreadRepository(store, paths),
        messages=StoreMessageRepository(store, paths),
        settings=AssistantSettings(
            max_attempts=Config.ASSISTANT_MAX_ATTEMPTS,
            backoff_base=Config.ASSISTANT_BACKOFF_BASE,
            web_grounding=Config.ASSISTANT_WEB_GROUNDING,
            summary_window=Config.SUMMARY_WINDOW,
        ),
    )


class AppProvider(Provider):
    """
    Application dependency provider.

    Pass a prebuilt AppContext to run the whole HTTP surface against a
    different store or generative client (the test-suite does this).
    """

    def __init__(self, context: Optional[AppContext] = None):
        super().__init__()
        self._context = context

    # ==================== APP SCOPE ====================

    @provide(scope=Scope.APP)
    async def get_app_context(self) -> AsyncIterable[AppContext]:
        """
        - Scope.APP = created ONCE on first use, shared across all requests
        - closed when the container closes (lifespan shutdown)
        """
        if self._context is not None:
            context = self._context
        else:
            context = build_app_context(await create_document_store(), create_generative_client())
        yield context
        await context.close()

    @provide(scope=Scope.APP)
    def get_orchestrator(self, context: AppContext) -> AssistantOrchestrator:
        return AssistantOrchestrator(context)

    # ==================== REPOSITORIES ====================

    @provide(scope=Scope.REQUEST)
    def get_identity_repository(self, context: AppContext) -> IdentityRepository:
        return context.identities

    @provide(scope=Scope.REQUEST)
    def get_room_repository(self, context: AppContext) -> RoomRepository:
        return context.rooms

    @provide(scope=Scope.REQUEST)
    def get_thread_repository(self, context: AppContext) -> ThreadRepository:
        return context.threads

    @provide(scope=Scope.REQUEST)
    def get_message_repository(self, context: AppContext) -> MessageRepository:
        return context.messages

    # ==================== SERVICES ====================

    @provide(scope=Scope.REQUEST)
    def get_profile_directory(self, identity_repository: IdentityRepository) -> ProfileDirectory:
        return ProfileDirectory(identity_repository)

    @provide(scope=Scope.REQUEST)
    def get_thread_resolver(self, thread_repository: ThreadRepository) -> ThreadResolver:
        return ThreadResolver(thread_repository)

    # ==================== HANDLERS ====================

    @provide(scope=Scope.REQUEST)
    def get_sign_in_handler(
        self, directory: ProfileDirectory, resolver: ThreadResolver
    ) -> SignInHandler:
        return SignInHandler(directory, resolver)

    @provide(scope=Scope.REQUEST)
    def get_update_profile_handler(self, directory: ProfileDirectory) -> UpdateProfileHandler:
        return UpdateProfileHandler(directory)

    @provide(scope=Scope.REQUEST)
    def get_create_room_handler(self, room_repository: RoomRepository) -> CreateRoomHandler:
        return CreateRoomHandler(room_repository)

    @provide(scope=Scope.REQUEST)
    def get_resolve_thread_handler(self, resolver: ThreadResolver) -> ResolveThreadHandler:
        return ResolveThreadHandler(resolver)

    @provide(scope=Scope.REQUEST)
    def get_send_message_handler(
        self,
        message_repository: MessageRepository,
        orchestrator: AssistantOrchestrator,
    ) -> SendMessageHandler:
        return SendMessageHandler(message_repository, orchestrator)

    @provide(scope=Scope.REQUEST)
    def get_conversation_handler(
        self,
        room_repository: RoomRepository,
        thread_repository: ThreadRepository,
    ) -> GetConversationHandler:
        return GetConversationHandler(room_repository, thread_repository)

    @provide(scope=Scope.REQUEST)
    def get_list_conversations_handler(
        self,
        room_repository: RoomRepository,
        thread_repository: ThreadRepository,
        directory: ProfileDirectory,
    ) -> ListConversationsHandler:
        return ListConversationsHandler(room_repository, thread_repository, directory)

    @provide(scope=Scope.REQUEST)
    def get_messages_handler(
        self,
        conversation_handler: GetConversationHandler,
        message_repository: MessageRepository,
    ) -> GetMessagesHandler:
        return GetMessagesHandler(conversation_handler, message_repository)

    @provide(scope=Scope.REQUEST)
    def get_summarize_room_handler(
        self,
        context: AppContext,
        message_repository: MessageRepository,
        directory: ProfileDirectory,
    ) -> SummarizeRoomHandler:
        return SummarizeRoomHandler(
            message_repository,
            directory,
            context.llm,
            window=context.settings.summary_window,
        )

    @provide(scope=Scope.REQUEST)
    def get_draft_reply_handler(
        self,
        context: AppContext,
        message_repository: MessageRepository,
        directory: ProfileDirectory,
    ) -> DraftReplyHandler:
        return DraftReplyHandler(message_repository, directory, context.llm)


def create_container(context: Optional[AppContext] = None) -> AsyncContainer:
    return make_async_container(AppProvider(context))
