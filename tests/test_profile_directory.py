import pytest

from chatsync.domain.entities.identity import (
    ASSISTANT_ID,
    ASSISTANT_NAME,
    AssistantIdentity,
    HumanIdentity,
    default_avatar,
)
from chatsync.domain.exceptions import DomainValidationError, EntityNotFoundError
from chatsync.services.profile_directory import ProfileDirectory


class TestEnsureProfiles:
    @pytest.mark.asyncio
    async def test_defaults_from_missing_claims(self, ctx):
        profile = await ProfileDirectory(ctx.identities).ensure_human("abcd1234")

        assert isinstance(profile, HumanIdentity)
        assert profile.display_name == "User_abcd"
        assert profile.avatar_ref == default_avatar("abcd1234")
        assert profile.created_at is not None

    @pytest.mark.asyncio
    async def test_existing_profile_is_not_overwritten(self, ctx):
        directory = ProfileDirectory(ctx.identities)
        await directory.ensure_human("u1", "Alice", email="a@example.com")

        again = await directory.ensure_human("u1", "Someone Else")

        assert again.display_name == "Alice"
        assert again.email == "a@example.com"

    @pytest.mark.asyncio
    async def test_assistant_id_cannot_sign_in(self, ctx):
        with pytest.raises(DomainValidationError):
            await ProfileDirectory(ctx.identities).ensure_human(ASSISTANT_ID)

    @pytest.mark.asyncio
    async def test_assistant_profile_is_idempotent(self, ctx):
        directory = ProfileDirectory(ctx.identities)

        first = await directory.ensure_assistant()
        second = await directory.ensure_assistant()

        assert isinstance(first, AssistantIdentity)
        assert first.display_name == ASSISTANT_NAME
        assert second.created_at == first.created_at
        assert len(await directory.all()) == 1


class TestUpdateProfile:
    @pytest.mark.asyncio
    async def test_updates_name_and_keeps_avatar(self, ctx):
        directory = ProfileDirectory(ctx.identities)
        original = await directory.ensure_human("u1", "Alice")

        updated = await directory.update_profile("u1", "  Alicia ")

        assert updated.display_name == "Alicia"
        assert updated.avatar_ref == original.avatar_ref
        assert (await directory.display_names(["u1", "ghost"])) == {"u1": "Alicia"}

    @pytest.mark.asyncio
    async def test_assistant_profile_is_immutable(self, ctx):
        directory = ProfileDirectory(ctx.identities)
        await directory.ensure_assistant()

        with pytest.raises(DomainValidationError):
            await directory.update_profile(ASSISTANT_ID, "Evil Bot")

        assert (await directory.get(ASSISTANT_ID)).display_name == ASSISTANT_NAME

    @pytest.mark.asyncio
    async def test_blank_name_rejected(self, ctx):
        directory = ProfileDirectory(ctx.identities)
        await directory.ensure_human("u1", "Alice")

        with pytest.raises(DomainValidationError):
            await directory.update_profile("u1", "   ")

    @pytest.mark.asyncio
    async def test_unknown_user(self, ctx):
        with pytest.raises(EntityNotFoundError):
            await ProfileDirectory(ctx.identities).update_profile("nobody", "Name")
