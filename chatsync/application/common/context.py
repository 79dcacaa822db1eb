"""
AppContext - the explicit dependency bundle handed to every component.

Replaces module-level singletons for the store and the generative client.
Tests build one around InMemoryDocumentStore and a fake GenerativeClient;
the DI container builds the production one (see setup/ioc/container.py).
"""

import asyncio
import random
from dataclasses import dataclass, field
from typing import Awaitable, Callable

from chatsync.application.common.background_tasks import BackgroundTasks
from chatsync.domain.ports.document_store import DocumentStore
from chatsync.domain.ports.generative_client import GenerativeClient
from chatsync.domain.ports.repositories import (
    IdentityRepository,
    MessageRepository,
    RoomRepository,
    ThreadRepository,
)

Sleep = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class AssistantSettings:
    max_attempts: int = 5
    backoff_base: float = 1.0
    web_grounding: bool = True
    summary_window: int = 30


@dataclass
class AppContext:
    store: DocumentStore
    llm: GenerativeClient
    identities: IdentityRepository
    rooms: RoomRepository
    threads: ThreadRepository
    messages: MessageRepository
    settings: AssistantSettings = field(default_factory=AssistantSettings)
    tasks: BackgroundTasks = field(default_factory=BackgroundTasks)
    sleep: Sleep = asyncio.sleep
    rng: random.Random = field(default_factory=random.Random)

    async def close(self) -> None:
        await self.tasks.shutdown()
        await self.llm.close()
        await self.store.close()
